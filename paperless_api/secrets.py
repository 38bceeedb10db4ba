"""Read ``PAPERLESS_*`` entries from the settings dotenv file.

The file is ``paperless.env`` in the settings directory. With SOPS enabled
it is ``paperless.env.enc`` instead, decrypted with ``sops --decrypt``.
"""

import logging
import subprocess
from io import StringIO
from pathlib import Path

from dotenv import dotenv_values

from paperless_api.errors import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_FILE = "paperless.env"
ENV_PREFIX = "PAPERLESS_"


def read_settings_file(directory: str | Path, *, use_sops: bool = False) -> dict[str, str]:
    """Return the non-empty ``PAPERLESS_*`` entries of the settings file in ``directory``.

    A missing plain file is not an error, the environment alone is then
    used. A missing encrypted file is, since SOPS was asked for explicitly.

    Raises:
        ConfigurationError: SOPS is enabled and the file is missing or
            cannot be decrypted.
    """
    directory = Path(directory)
    if use_sops:
        values = _decrypt(directory / f"{SETTINGS_FILE}.enc")
    else:
        path = directory / SETTINGS_FILE
        if not path.exists():
            logger.debug("No settings file at %s", path)
            return {}
        values = dotenv_values(path)
    return {key: value for key, value in values.items() if key.startswith(ENV_PREFIX) and value}


def _decrypt(path: Path) -> dict[str, str | None]:
    if not path.exists():
        raise ConfigurationError(f"PAPERLESS_USE_SOPS is set but {path} does not exist")

    logger.debug("Decrypting %s with sops", path)
    try:
        result = subprocess.run(
            ["sops", "--decrypt", str(path)],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise ConfigurationError("PAPERLESS_USE_SOPS is set but the sops binary is not installed") from exc
    except subprocess.CalledProcessError as exc:
        raise ConfigurationError(f"sops could not decrypt {path}: {(exc.stderr or '').strip()}") from exc
    return dotenv_values(stream=StringIO(result.stdout))
