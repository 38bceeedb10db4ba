"""Tests for reading the settings dotenv file."""

import subprocess
from unittest.mock import patch

import pytest

from paperless_api.errors import ConfigurationError
from paperless_api.secrets import read_settings_file


class TestPlainFile:
    def test_missing_file_returns_empty(self, tmp_path):
        assert read_settings_file(tmp_path) == {}

    def test_keeps_only_non_empty_paperless_entries(self, tmp_path):
        (tmp_path / "paperless.env").write_text(
            "PAPERLESS_BASE_URL=http://localhost:8000\n"
            "PAPERLESS_API_TOKEN=\n"
            "OTHER_SETTING=ignored\n"
        )

        assert read_settings_file(tmp_path) == {"PAPERLESS_BASE_URL": "http://localhost:8000"}


class TestEncryptedFile:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="paperless.env.enc"):
            read_settings_file(tmp_path, use_sops=True)

    def test_decrypts_with_sops(self, tmp_path):
        path = tmp_path / "paperless.env.enc"
        path.write_text("ENC[...]")
        decrypted = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="PAPERLESS_API_TOKEN=secret\n", stderr=""
        )

        with patch("paperless_api.secrets.subprocess.run", return_value=decrypted) as run:
            values = read_settings_file(tmp_path, use_sops=True)

        assert values == {"PAPERLESS_API_TOKEN": "secret"}
        assert run.call_args.args[0] == ["sops", "--decrypt", str(path)]

    def test_sops_failure_is_reported(self, tmp_path):
        (tmp_path / "paperless.env.enc").write_text("ENC[...]")

        with patch(
            "paperless_api.secrets.subprocess.run",
            side_effect=subprocess.CalledProcessError(1, ["sops"], stderr="no key found\n"),
        ):
            with pytest.raises(ConfigurationError, match="no key found"):
                read_settings_file(tmp_path, use_sops=True)

    def test_sops_not_installed(self, tmp_path):
        (tmp_path / "paperless.env.enc").write_text("ENC[...]")

        with patch("paperless_api.secrets.subprocess.run", side_effect=FileNotFoundError("sops")):
            with pytest.raises(ConfigurationError, match="not installed"):
                read_settings_file(tmp_path, use_sops=True)
