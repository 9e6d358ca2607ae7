from pathlib import Path

import pytest
import yaml

from sr_pipeline.core import get_config
from sr_pipeline.core.config_manager import ConfigManager
from sr_pipeline.core.exceptions import ConfigurationError

PACKAGE_CONFIG = Path(__file__).resolve().parent.parent / "sr_pipeline" / "config"


def write_config(directory, settings=None, models=None):
    base_settings = yaml.safe_load((PACKAGE_CONFIG / "settings.yaml").read_text())
    base_models = yaml.safe_load((PACKAGE_CONFIG / "models.yaml").read_text())
    if settings is not None:
        base_settings = settings(base_settings) or base_settings
    if models is not None:
        base_models = models(base_models) or base_models
    (directory / "settings.yaml").write_text(yaml.safe_dump(base_settings))
    (directory / "models.yaml").write_text(yaml.safe_dump(base_models))
    return directory


def load(directory):
    manager = ConfigManager(directory)
    manager.load_all()
    return manager


def test_packaged_config_loads():
    config = get_config()

    assert config.get_default_model() == "realesrgan_x4plus"
    assert config.get_setting("pipeline.default_policy") == "nearest"
    assert config.get_setting("pipeline.max_passes") is None
    assert "torchscript_x4" not in config.get_enabled_models()
    assert len(config.loaded_files) == 2


def test_get_setting_default_for_missing_key():
    assert get_config().get_setting("pipeline.nope", 7) == 7
    assert get_config().get_setting("logging.level.deeper", "x") == "x"


def test_get_model_config_unknown():
    with pytest.raises(ConfigurationError):
        get_config().get_model_config("esrgan_x16")


def test_get_config_with_directory_replaces_singleton(tmp_path):
    write_config(tmp_path)

    config = get_config(tmp_path)

    assert config.config_dir == tmp_path
    assert get_config() is config


def test_config_dir_from_environment(tmp_path, monkeypatch):
    write_config(tmp_path)
    monkeypatch.setenv("SR_PIPELINE_CONFIG", str(tmp_path))

    assert ConfigManager().config_dir == tmp_path


def test_missing_directory(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path / "absent")


def test_missing_required_file(tmp_path):
    write_config(tmp_path)
    (tmp_path / "models.yaml").unlink()

    with pytest.raises(ConfigurationError):
        load(tmp_path)


def test_invalid_yaml(tmp_path):
    write_config(tmp_path)
    (tmp_path / "settings.yaml").write_text("pipeline: [unclosed")

    with pytest.raises(ConfigurationError):
        load(tmp_path)


def test_env_vars_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("SR_TEST_WEIGHTS", "/weights")

    def models(m):
        m["models"]["torchscript_x4"]["path"] = "${SR_TEST_WEIGHTS}/x4.pt"

    config = load(write_config(tmp_path, models=models))

    assert config.get_model_config("torchscript_x4")["path"] == "/weights/x4.pt"


@pytest.mark.parametrize("base_scale", [0, -2, "four", True, None])
def test_invalid_base_scale(tmp_path, base_scale):
    def models(m):
        m["models"]["realesrgan_x4plus"]["base_scale"] = base_scale

    with pytest.raises(ConfigurationError):
        load(write_config(tmp_path, models=models))


def test_model_missing_required_field(tmp_path):
    def models(m):
        del m["models"]["realesrgan_x2plus"]["class"]

    with pytest.raises(ConfigurationError):
        load(write_config(tmp_path, models=models))


def test_unknown_default_model(tmp_path):
    def models(m):
        m["default_model"] = "nope"

    with pytest.raises(ConfigurationError):
        load(write_config(tmp_path, models=models))


def test_default_model_falls_back_to_first_enabled(tmp_path):
    def models(m):
        del m["default_model"]

    config = load(write_config(tmp_path, models=models))

    assert config.get_default_model() == "realesrgan_x4plus"


@pytest.mark.parametrize("section,key,value", [
    ("pipeline", "default_policy", "sideways"),
    ("pipeline", "max_passes", -1),
    ("pipeline", "max_passes", 1.5),
    ("resize", "downscale_kernel", "bilateral"),
    ("resize", "upscale_kernel", "magic"),
    ("logging", "level", "LOUD"),
])
def test_invalid_settings(tmp_path, section, key, value):
    def settings(s):
        s[section][key] = value

    with pytest.raises(ConfigurationError):
        load(write_config(tmp_path, settings=settings))


def test_max_passes_integer_accepted(tmp_path):
    def settings(s):
        s["pipeline"]["max_passes"] = 3

    config = load(write_config(tmp_path, settings=settings))

    assert config.get_setting("pipeline.max_passes") == 3


@pytest.mark.parametrize("policy", ["CEIL_POWER", "floor_power", "Nearest", "single"])
def test_policy_member_names_accepted(tmp_path, policy):
    def settings(s):
        s["pipeline"]["default_policy"] = policy

    config = get_config(write_config(tmp_path, settings=settings))

    assert config.get_setting("pipeline.default_policy") == policy


def test_kernel_names_accepted_in_any_case(tmp_path):
    def settings(s):
        s["resize"]["downscale_kernel"] = "AREA"
        s["resize"]["upscale_kernel"] = "Cubic"

    config = load(write_config(tmp_path, settings=settings))

    assert config.get_setting("resize.upscale_kernel") == "Cubic"
