import pytest
from pydantic import ValidationError
from pathlib import Path
import yaml

from cardshot.core.config import MergedConfig, load_and_merge_configs, get_config, DEFAULT_DEVICE_PATTERNS


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary directory with dummy config files."""
    config_dir = tmp_path / "configs"
    config_dir.mkdir()

    settings_data = {
        'log_level': 'DEBUG',
        'dialog_title': 'Test Title',
    }
    capture_data = {
        'device_patterns': ['^My Card$'],
        'backend': 'dshow',
        'warmup_max_attempts': 30,
    }

    with open(config_dir / "settings.yaml", "w") as f:
        yaml.dump(settings_data, f)

    with open(config_dir / "capture.yaml", "w") as f:
        yaml.dump(capture_data, f)

    return config_dir


def test_successful_config_loading(temp_config_dir: Path):
    """Tests that configs are loaded, merged, and validated successfully."""
    merged_data = load_and_merge_configs(temp_config_dir)
    config = MergedConfig.model_validate(merged_data)

    assert config.log_level == 'DEBUG'
    assert config.dialog_title == 'Test Title'
    assert config.device_patterns == ['^My Card$']
    assert config.backend == 'dshow'
    assert config.warmup_max_attempts == 30
    assert config.warmup_max_seconds == 10.0


def test_defaults_when_directory_is_empty(tmp_path: Path):
    config = get_config(tmp_path)

    assert config.device_patterns == DEFAULT_DEVICE_PATTERNS
    assert config.dialog_title == "Capture Card Screenshot"
    assert config.backend == 'auto'


def test_later_files_override_earlier_ones(temp_config_dir: Path):
    with open(temp_config_dir / "zz_local.yaml", "w") as f:
        yaml.dump({'log_level': 'WARNING'}, f)

    config = get_config(temp_config_dir)
    assert config.log_level == 'WARNING'


def test_bounds_can_be_disabled(temp_config_dir: Path):
    with open(temp_config_dir / "capture.yaml", "w") as f:
        yaml.dump({'warmup_max_attempts': None, 'warmup_max_seconds': None}, f)

    config = get_config(temp_config_dir)
    assert config.warmup_max_attempts is None
    assert config.warmup_max_seconds is None


def test_validation_error_on_invalid_data(temp_config_dir: Path):
    """Tests that a Pydantic ValidationError is raised for invalid data types."""
    with open(temp_config_dir / "capture.yaml", "w") as f:
        yaml.dump({'warmup_max_attempts': 'not-an-integer'}, f)

    merged_data = load_and_merge_configs(temp_config_dir)

    with pytest.raises(ValidationError) as exc_info:
        MergedConfig.model_validate(merged_data)

    assert 'warmup_max_attempts' in str(exc_info.value)


@pytest.mark.parametrize("patterns", [[], ["^Broken("]])
def test_invalid_device_patterns_are_rejected(patterns):
    with pytest.raises(ValidationError) as exc_info:
        MergedConfig.model_validate({'device_patterns': patterns})
    assert 'device_patterns' in str(exc_info.value)


def test_unknown_backend_is_rejected():
    with pytest.raises(ValidationError):
        MergedConfig.model_validate({'backend': 'gstreamer'})


def test_missing_config_directory(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        get_config(tmp_path / "does-not-exist")


def test_get_config_holds_only_configured_fields(temp_config_dir: Path):
    """Tests that get_config adds nothing beyond what the yaml files declare."""
    config = get_config(temp_config_dir)

    assert config.model_extra == {}
    assert set(config.model_dump()) == set(MergedConfig.model_fields)
