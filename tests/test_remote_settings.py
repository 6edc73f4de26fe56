"""
Tests for remote settings — model validation, legacy migration and
``jrc.json`` persistence.
"""

import json
import stat
from pathlib import Path

import pytest

from jcli.core.models.remote import JRCConfig, RemoteAuthMethod, RemoteMode, RemoteSettings
from jcli.core.persistence.jrc_file import jrc_path, load_jrc, save_jrc
from jcli.core.services.remote.errors import ConfigError
from jcli.core.services.remote.lifecycle import (
    has_remote_settings,
    load_remote_settings,
    resolve_mode,
    save_remote_settings,
    validate_settings,
)


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestRemoteSettingsModel:
    def test_defaults(self):
        settings = RemoteSettings()
        assert settings.mode is RemoteMode.USERSPACE
        assert settings.auth_method is RemoteAuthMethod.OAUTH
        assert settings.secret == ""

    def test_legacy_values_migrated(self):
        settings = RemoteSettings.model_validate({"mode": "system", "auth_method": "none"})
        assert settings.mode is RemoteMode.USERSPACE
        assert settings.auth_method is RemoteAuthMethod.OAUTH

    def test_blank_values_migrated(self):
        settings = RemoteSettings.model_validate({"mode": "", "auth_method": ""})
        assert settings.mode is RemoteMode.USERSPACE
        assert settings.auth_method is RemoteAuthMethod.OAUTH

    def test_values_normalized(self):
        settings = RemoteSettings.model_validate({
            "mode": " AUTO ",
            "auth_method": "AuthKey",
            "secret": "  tskey-abc\n",
            "hostname": " worker ",
        })
        assert settings.mode is RemoteMode.AUTO
        assert settings.auth_method is RemoteAuthMethod.AUTHKEY
        assert settings.secret == "tskey-abc"
        assert settings.hostname == "worker"

    def test_authkey_requires_secret(self):
        with pytest.raises(ValueError, match="auth key is required"):
            RemoteSettings(auth_method="authkey", secret="   ")

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            RemoteSettings(mode="kernel")

    def test_auto_resolves_to_userspace(self):
        assert resolve_mode(RemoteMode.AUTO) is RemoteMode.USERSPACE


class TestJrcFile:
    def test_round_trip(self, tmp_path: Path):
        path = tmp_path / "cfg" / "jrc.json"
        config = JRCConfig(remote=RemoteSettings(
            mode="userspace", auth_method="authkey", secret="tskey-abc", hostname="worker",
        ))
        save_jrc(config, path)

        loaded = load_jrc(path).remote
        assert loaded.mode is RemoteMode.USERSPACE
        assert loaded.auth_method is RemoteAuthMethod.AUTHKEY
        assert loaded.secret == "tskey-abc"
        assert loaded.hostname == "worker"

    def test_file_modes(self, tmp_path: Path):
        path = tmp_path / "cfg" / "jrc.json"
        save_jrc(JRCConfig(), path)
        assert _mode(path) == 0o600
        assert _mode(path.parent) == 0o700
        assert not path.with_name("jrc.json.tmp").exists()

    def test_modes_tightened_on_existing_dir(self, tmp_path: Path):
        directory = tmp_path / "cfg"
        directory.mkdir(mode=0o755)
        directory.chmod(0o755)
        save_jrc(JRCConfig(), directory / "jrc.json")
        assert _mode(directory) == 0o700

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        assert load_jrc(tmp_path / "absent.json").remote == RemoteSettings()

    def test_blank_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "jrc.json"
        path.write_text("  \n")
        assert load_jrc(path).remote == RemoteSettings()

    def test_legacy_file_migrated(self, tmp_path: Path):
        path = tmp_path / "jrc.json"
        path.write_text(json.dumps({"remote": {"mode": "system", "auth_method": "none"}}))
        remote = load_jrc(path).remote
        assert remote.mode is RemoteMode.USERSPACE
        assert remote.auth_method is RemoteAuthMethod.OAUTH

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "jrc.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="failed to parse"):
            load_jrc(path)

    def test_non_object(self, tmp_path: Path):
        path = tmp_path / "jrc.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_jrc(path)

    def test_authkey_without_secret_on_disk(self, tmp_path: Path):
        path = tmp_path / "jrc.json"
        path.write_text(json.dumps({"remote": {"auth_method": "authkey"}}))
        with pytest.raises(ConfigError, match="auth key is required"):
            load_jrc(path)

    def test_unknown_keys_preserved(self, tmp_path: Path):
        path = tmp_path / "jrc.json"
        path.write_text(json.dumps({"theme": "dark", "remote": {}}))
        config = load_jrc(path)
        save_jrc(config, path)
        assert json.loads(path.read_text())["theme"] == "dark"

    def test_save_rejects_invalid(self, tmp_path: Path):
        config = JRCConfig()
        config.remote.auth_method = RemoteAuthMethod.AUTHKEY
        with pytest.raises(ConfigError):
            save_jrc(config, tmp_path / "jrc.json")


class TestLifecycleSettings:
    def test_default_location(self, fake_home: Path):
        assert jrc_path() == fake_home / ".config" / "jterrazz" / "jrc.json"

    def test_save_and_load(self, fake_home: Path):
        assert not has_remote_settings()
        save_remote_settings(RemoteSettings(hostname="worker"))
        assert has_remote_settings()
        assert load_remote_settings().hostname == "worker"

    def test_save_keeps_other_sections(self, fake_home: Path):
        path = jrc_path()
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"theme": "dark"}))
        save_remote_settings(RemoteSettings(hostname="worker"))
        data = json.loads(path.read_text())
        assert data["theme"] == "dark"
        assert data["remote"]["hostname"] == "worker"

    def test_broken_file_is_not_configured(self, fake_home: Path):
        path = jrc_path()
        path.parent.mkdir(parents=True)
        path.write_text("{")
        assert not has_remote_settings()

    def test_validate_settings_error_message(self):
        settings = RemoteSettings.model_construct(
            mode=RemoteMode.USERSPACE, auth_method=RemoteAuthMethod.AUTHKEY, secret="", hostname="",
        )
        with pytest.raises(ConfigError, match="auth key is required"):
            validate_settings(settings)
