"""Tests for the JSON settings store"""

import json
import os
import stat
from unittest.mock import Mock, patch

import pytest

from moodle_downloader.exceptions import ConfigError, PersistError
from moodle_downloader.models import Settings
from moodle_downloader.settings_store import SettingsStore
from tests.helpers import BASE_URL, read_settings, write_settings


def file_mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


class TestLoad:
    """Test SettingsStore.load"""

    def test_load_valid_file(self, tmp_path):
        """Test a well-formed file is parsed"""
        path = write_settings(tmp_path / "settings.json", token="cached")

        settings = SettingsStore(path).load()

        assert settings.base_url == BASE_URL
        assert settings.username == "u"
        assert settings.token == "cached"

    def test_expands_user_home(self, tmp_path, monkeypatch):
        """Test ~ in the path is expanded"""
        monkeypatch.setenv("HOME", str(tmp_path))
        write_settings(tmp_path / "settings.json")

        store = SettingsStore("~/settings.json")

        assert store.path == tmp_path / "settings.json"
        assert store.load().base_url == BASE_URL

    def test_missing_file(self, tmp_path):
        """Test a missing file is a configuration error"""
        path = tmp_path / "nope.json"

        with pytest.raises(ConfigError) as exc_info:
            SettingsStore(path).load()

        assert exc_info.value.context["settings_path"] == str(path)
        assert exc_info.value.suggestions

    def test_directory_instead_of_file(self, tmp_path):
        """Test an unreadable location is a configuration error"""
        with pytest.raises(ConfigError):
            SettingsStore(tmp_path).load()

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[1, 2, 3]",
            '{"username": "u", "password": "p"}',
            '{"baseURL": ""}',
        ],
    )
    def test_malformed_content(self, tmp_path, content):
        """Test malformed or wrongly shaped content is a configuration error"""
        path = tmp_path / "settings.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigError):
            SettingsStore(path).load()

    def test_not_utf8_content(self, tmp_path):
        """Test a file that is not valid UTF-8 is a configuration error"""
        path = tmp_path / "settings.json"
        path.write_bytes(b'{"baseURL": "\xff\xfe"}')

        with pytest.raises(ConfigError) as exc_info:
            SettingsStore(path).load()

        assert "UTF-8" in exc_info.value.message

    def test_parent_is_a_file(self, tmp_path):
        """Test any OS error while opening is a configuration error"""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            SettingsStore(blocker / "settings.json").load()

        assert isinstance(exc_info.value.__cause__, NotADirectoryError)


class TestSave:
    """Test SettingsStore.save"""

    def test_save_roundtrip(self, tmp_path):
        """Test a saved token is returned by the next load"""
        path = write_settings(tmp_path / "settings.json")
        store = SettingsStore(path)

        store.save(store.load().with_token("abc123"))

        assert store.load().token == "abc123"
        assert read_settings(path)["password"] == "p"

    def test_save_format(self, tmp_path):
        """Test the file is pretty-printed with a one space indent"""
        path = tmp_path / "settings.json"
        settings = Settings(
            base_url=BASE_URL, username="u", password="p", token="abc123"
        )

        SettingsStore(path).save(settings)

        expected = json.dumps(
            {"baseURL": BASE_URL, "username": "u", "password": "p", "token": "abc123"},
            indent=1,
        )
        assert path.read_text(encoding="utf-8") == expected

    def test_new_file_is_owner_only(self, tmp_path):
        """Test a created file gets mode 0600 and its directory is created"""
        path = tmp_path / "config" / "moodleDownloader" / "settings.json"

        SettingsStore(path).save(Settings(base_url=BASE_URL, token="abc123"))

        assert file_mode(path) == 0o600

    def test_existing_file_is_restricted(self, tmp_path):
        """Test an existing world-readable file is tightened to 0600"""
        path = write_settings(tmp_path / "settings.json")
        os.chmod(path, 0o644)

        SettingsStore(path).save(Settings(base_url=BASE_URL, token="abc123"))

        assert file_mode(path) == 0o600

    def test_unwritable_location(self, tmp_path):
        """Test write failures surface as PersistError"""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(PersistError) as exc_info:
            SettingsStore(blocker / "settings.json").save(
                Settings(base_url=BASE_URL, token="abc123")
            )

        assert exc_info.value.errors

    def test_failed_write_keeps_previous_settings(self, tmp_path):
        """Test a write that fails midway leaves the old file untouched"""
        path = write_settings(tmp_path / "settings.json", token="old")
        before = path.read_text(encoding="utf-8")
        real_fdopen = os.fdopen

        def disk_full_fdopen(fd, *args, **kwargs):
            handle = real_fdopen(fd, *args, **kwargs)
            handle.write = Mock(side_effect=OSError(28, "No space left on device"))
            return handle

        store = SettingsStore(path)
        with patch(
            "moodle_downloader.settings_store.os.fdopen", side_effect=disk_full_fdopen
        ):
            with pytest.raises(PersistError):
                store.save(store.load().with_token("abc123"))

        assert path.read_text(encoding="utf-8") == before
        assert store.load().token == "old"
        assert store.load().password.get_secret_value() == "p"
        assert os.listdir(tmp_path) == ["settings.json"]

    def test_failed_replace_removes_temp_file(self, tmp_path):
        """Test a failed swap leaves neither a temp file nor a changed file"""
        path = write_settings(tmp_path / "settings.json")
        before = path.read_text(encoding="utf-8")

        with patch(
            "moodle_downloader.settings_store.os.replace",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(PersistError):
                SettingsStore(path).save(Settings(base_url=BASE_URL, token="abc123"))

        assert path.read_text(encoding="utf-8") == before
        assert os.listdir(tmp_path) == ["settings.json"]

    def test_non_ascii_written_verbatim(self, tmp_path):
        """Test non-ASCII credentials are stored as UTF-8, not escaped"""
        path = tmp_path / "settings.json"

        SettingsStore(path).save(
            Settings(base_url=BASE_URL, username="jürgen", password="pässwort")
        )

        content = path.read_text(encoding="utf-8")
        assert "pässwort" in content
        assert "\\u00e4" not in content
        assert SettingsStore(path).load().username == "jürgen"
