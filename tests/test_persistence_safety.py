"""Tests for config file safety: backups, atomic writes and corrupt files."""

import json

import pytest

from superhat.exceptions import (
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
)
from superhat.model_manager import PydanticPersistence
from superhat.models import AppConfig, Panel


class TestSaveSafety:
    """Test backup and atomic write behaviour of save_json."""

    @pytest.mark.unit
    def test_save_keeps_previous_version_as_backup(self, tmp_path):
        """Test saving over a file keeps the old version as a backup."""
        path = tmp_path / "config.json"
        PydanticPersistence.save_json(AppConfig(selected_panel=Panel.A), path)
        PydanticPersistence.save_json(AppConfig(selected_panel=Panel.B), path)

        backup = PydanticPersistence.load_json(path.with_suffix(".json.bak"), AppConfig)
        current = PydanticPersistence.load_json(path, AppConfig)
        assert backup.selected_panel is Panel.A
        assert current.selected_panel is Panel.B

    @pytest.mark.unit
    def test_first_save_has_no_backup(self, tmp_path):
        """Test the first save creates no backup."""
        path = tmp_path / "config.json"
        PydanticPersistence.save_json(AppConfig(), path)
        assert not path.with_suffix(".json.bak").exists()

    @pytest.mark.unit
    def test_backup_can_be_disabled(self, tmp_path):
        """Test saving without a backup."""
        path = tmp_path / "config.json"
        PydanticPersistence.save_json(AppConfig(), path)
        PydanticPersistence.save_json(AppConfig(), path, backup=False)
        assert not path.with_suffix(".json.bak").exists()

    @pytest.mark.unit
    def test_no_temp_file_left_behind(self, tmp_path):
        """Test the atomic write leaves no temp file."""
        path = tmp_path / "config.json"
        PydanticPersistence.save_json(AppConfig(), path)
        assert not path.with_suffix(".json.tmp").exists()
        assert json.loads(path.read_text())["long_press_ms"] == 500

    @pytest.mark.unit
    def test_save_creates_parent_directories(self, tmp_path):
        """Test saving creates missing parent directories."""
        path = tmp_path / "nested" / "dir" / "config.json"
        PydanticPersistence.save_json(AppConfig(), path)
        assert path.exists()


class TestCorruptFiles:
    """Test that broken files are reported, never silently replaced."""

    @pytest.mark.unit
    def test_empty_file(self, tmp_path):
        """Test an empty file is reported as empty."""
        path = tmp_path / "config.json"
        path.write_text("   ")
        with pytest.raises(ConfigFileInvalidError) as exc_info:
            PydanticPersistence.load_json(path, AppConfig)
        assert "empty" in exc_info.value.user_message.lower()

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path):
        """Test bad JSON is reported as invalid syntax."""
        path = tmp_path / "config.json"
        path.write_text('{"long_press_ms": 500,,}')
        with pytest.raises(ConfigFileInvalidError):
            PydanticPersistence.load_json(path, AppConfig)

    @pytest.mark.unit
    def test_invalid_value_names_the_field(self, tmp_path):
        """Test a bad value names the field in the error."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"sequence_timeout_ms": -5}))
        with pytest.raises(ConfigValidationError) as exc_info:
            PydanticPersistence.load_json(path, AppConfig)
        assert exc_info.value.field == "sequence_timeout_ms"

    @pytest.mark.unit
    def test_bad_key_combos_hint_at_reset(self, tmp_path):
        """Test a bad key table suggests resetting it."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"key_combos": [["a"]]}))
        with pytest.raises(ConfigValidationError) as exc_info:
            PydanticPersistence.load_json(path, AppConfig)
        assert "config reset key_combos" in exc_info.value.recovery_hint

    @pytest.mark.unit
    def test_load_or_default_only_falls_back_on_missing_file(self, tmp_path):
        """Test only a missing file falls back to the default."""
        assert PydanticPersistence.load_json_or_default(tmp_path / "nope.json", AppConfig) == AppConfig()

        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        with pytest.raises(ConfigurationError):
            PydanticPersistence.load_json_or_default(broken, AppConfig)

