"""Basic unit tests for tera-mod-manager settings and logging."""

import logging
import logging.handlers
from pathlib import Path
from typing import Iterator

import pytest


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "settings.ini"


@pytest.fixture
def restore_root_handlers() -> Iterator[None]:
    """Drop the console and file handlers setup_logging installs."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler) or (
            type(handler) is logging.StreamHandler
        ):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestSettingsInitialization:
    """Test settings initialization and basic operations."""

    def test_app_settings_init(self, settings_file: Path) -> None:
        """Test AppSettings can be initialized."""
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        assert settings_obj is not None
        assert settings_obj.get_settings_file_path().endswith("settings.ini")

    def test_first_run(self, settings_file: Path) -> None:
        """Test first run is stamped once and can be completed."""
        from tera_mod_manager.settings import AppSettings, ConfigVersion

        settings_obj = AppSettings(settings_file=settings_file)
        assert settings_obj.is_first_run
        assert settings_obj.version == ConfigVersion.CURRENT.value

        settings_obj.set_first_run_complete()
        assert not AppSettings(settings_file=settings_file).is_first_run

    def test_defaults(self, settings_file: Path) -> None:
        """Test unset values fall back to defaults."""
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        assert settings_obj.root_dir is None
        assert settings_obj.game_paths is None
        assert settings_obj.wait_for_launch is False
        assert settings_obj.process_name == "TERA.exe"
        assert settings_obj.console_logging is True
        assert settings_obj.console_log_level == "INFO"
        assert settings_obj.file_logging is False

    def test_values_persist(self, settings_file: Path, tmp_path: Path) -> None:
        """Test values survive a new settings instance."""
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.root_dir = tmp_path / "Client"
        settings_obj.wait_for_launch = True
        settings_obj.console_log_level = "debug"
        settings_obj.sync()

        reloaded = AppSettings(settings_file=settings_file)
        assert reloaded.root_dir == tmp_path / "Client"
        assert reloaded.wait_for_launch is True
        assert reloaded.console_log_level == "DEBUG"
        assert reloaded.game_paths is not None
        assert reloaded.game_paths.mod_list_path == tmp_path / "Client" / "CookedPC" / "ModList.mods"

    def test_invalid_values_rejected(self, settings_file: Path) -> None:
        """Test invalid levels and blank process names are ignored."""
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_log_level = "LOUD"
        settings_obj.process_name = "   "
        assert settings_obj.console_log_level == "INFO"
        assert settings_obj.process_name == "TERA.exe"

    def test_profiles_are_separate(self, settings_file: Path, tmp_path: Path) -> None:
        """Test profiles do not share values."""
        from tera_mod_manager.settings import AppSettings

        AppSettings(settings_file=settings_file).root_dir = tmp_path
        other = AppSettings(profile="other", settings_file=settings_file)
        assert other.root_dir is None


class TestSettingsValidation:
    """Test settings validation."""

    def test_unset_root_is_warning(self, settings_file: Path) -> None:
        from tera_mod_manager.settings import AppSettings

        validation = AppSettings(settings_file=settings_file).validate()
        assert validation.is_valid
        assert "Game root not set" in validation.warnings

    def test_missing_root_is_error(self, settings_file: Path, tmp_path: Path) -> None:
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.root_dir = tmp_path / "nowhere"
        validation = settings_obj.validate()
        assert not validation.is_valid
        assert len(validation.errors) == 1

    def test_root_without_cooked_pc(self, settings_file: Path, tmp_path: Path) -> None:
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.root_dir = tmp_path
        assert not settings_obj.validate().is_valid

    def test_valid_root(self, settings_file: Path, game_root: Path) -> None:
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.root_dir = game_root
        validation = settings_obj.validate()
        assert validation.is_valid
        assert validation.errors == []
        assert validation.warnings == []

    def test_process_name_warning(self, settings_file: Path) -> None:
        from tera_mod_manager.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.process_name = "tera"
        assert any("executable" in w for w in settings_obj.validate().warnings)


class TestUtilsLogging:
    """Test logging configuration."""

    def test_logging_setup_with_settings(
        self, settings_file: Path, restore_root_handlers: None
    ) -> None:
        """Test logging setup works with settings."""
        from tera_mod_manager.settings import AppSettings
        from tera_mod_manager.utils.logging_config import setup_logging

        settings_obj = AppSettings(settings_file=settings_file)
        setup_logging(settings_obj)

        assert logging.getLogger("tera_mod_manager").level == logging.DEBUG
        assert logging.getLogger("psutil").level == logging.INFO

    def test_file_logging(
        self, settings_file: Path, tmp_path: Path, restore_root_handlers: None
    ) -> None:
        """Test file logging writes CSV rows to the configured path."""
        from tera_mod_manager.settings import AppSettings
        from tera_mod_manager.utils.logging_config import setup_logging

        log_file = tmp_path / "logs" / "run.csv"
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_logging = False
        settings_obj.file_logging = True
        settings_obj.log_file_path = str(log_file)

        setup_logging(settings_obj)
        logging.getLogger("tera_mod_manager.test").info('say "hi"')
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert any('"say ""hi"""' in line for line in lines)
        assert all(line.count(";") >= 5 for line in lines)

    def test_colored_formatter(self) -> None:
        """Test level names are wrapped in color codes."""
        from tera_mod_manager.utils.logging_config import ColoredFormatter

        formatter = ColoredFormatter(fmt="%(levelname)s %(message)s")
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        assert formatter.format(record) == "\033[33mWARNING\033[0m careful"
