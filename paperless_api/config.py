"""Settings for ``PaperlessClient.from_config()`` and the CLI.

Nothing is read at import time. ``get_settings()`` loads the settings once,
on first use, from ``paperless.env`` (or its SOPS-encrypted twin when
PAPERLESS_USE_SOPS=true) in the directory named by PAPERLESS_SETTINGS_DIR,
``./secrets`` by default. File entries win over the process environment.
``PaperlessClient`` itself accepts every setting explicitly.
"""

import functools
import os

from pydantic import BaseModel, ConfigDict, ValidationError

from paperless_api.errors import ConfigurationError
from paperless_api.secrets import ENV_PREFIX, read_settings_file

DEFAULT_SETTINGS_DIR = "secrets"


class PaperlessSettings(BaseModel):
    """Connection and polling settings, keyed like ``PAPERLESS_<NAME>`` without the prefix."""

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    api_token: str = ""
    api_version: int = 5
    timeout: float = 30.0
    task_poll_delay: float = 1.0
    # 0 means poll until the server reports a final status.
    task_poll_max_attempts: int = 0

    @property
    def missing(self) -> list[str]:
        """Names of required settings that are empty."""
        missing = []
        if not self.base_url:
            missing.append("PAPERLESS_BASE_URL")
        if not self.api_token:
            missing.append("PAPERLESS_API_TOKEN")
        return missing


@functools.cache
def get_settings() -> PaperlessSettings:
    """Load the settings on first call and cache them.

    Raises:
        ConfigurationError: The settings file cannot be read or a value
            does not parse (e.g. PAPERLESS_API_VERSION=v5).
    """
    use_sops = os.environ.get("PAPERLESS_USE_SOPS", "false").lower() == "true"
    directory = os.environ.get("PAPERLESS_SETTINGS_DIR") or DEFAULT_SETTINGS_DIR

    raw = {key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX) and value}
    raw.update(read_settings_file(directory, use_sops=use_sops))

    values = {key.removeprefix(ENV_PREFIX).lower(): value for key, value in raw.items()}
    try:
        return PaperlessSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid Paperless settings: {exc}") from exc
