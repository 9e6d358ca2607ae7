import io

import pytest

torch = pytest.importorskip("torch")

from sr_pipeline.core.exceptions import ModelInferenceError, ModelLoadError, ModelNotFoundError
from sr_pipeline.core.scale_planner import ScalePolicy
from sr_pipeline.models.torchscript_model import TorchScriptModel, select_device
from sr_pipeline.processing import SRPipeline


class Broken(torch.nn.Module):
    def forward(self, x):
        raise RuntimeError("CUDA error: device-side assert triggered")


def nearest_x2():
    return torch.nn.Upsample(scale_factor=2, mode="nearest")


def cpu_config(**extra):
    config = {'display_name': 'Nearest x2', 'device': 'cpu'}
    config.update(extra)
    return config


def test_select_device_explicit():
    assert select_device("cpu").type == "cpu"


def test_rgb_pass_preserves_colour(make_image):
    model = TorchScriptModel(cpu_config(), network=nearest_x2())

    result = model.apply(make_image(5, 3, color=(10, 200, 30)))

    assert result.mode == "RGB"
    assert result.size == (10, 6)
    assert result.getpixel((9, 5)) == (10, 200, 30)


def test_alpha_is_reattached(make_image):
    model = TorchScriptModel(cpu_config(), network=nearest_x2())

    result = model.apply(make_image(4, 4, mode="RGBA", color=(10, 20, 30, 128)))

    assert result.mode == "RGBA"
    assert result.size == (8, 8)
    assert result.getpixel((3, 3))[3] == 128


def test_grayscale_stays_grayscale(make_image):
    model = TorchScriptModel(cpu_config(), network=nearest_x2())

    result = model.apply(make_image(4, 2, mode="L", color=(77, 0, 0)))

    assert result.mode == "L"
    assert result.size == (8, 4)
    assert result.getpixel((0, 0)) == 77


def test_network_failure_raises_inference_error(make_image):
    model = TorchScriptModel(cpu_config(), network=Broken())

    with pytest.raises(ModelInferenceError):
        model.apply(make_image())


def test_missing_weights(tmp_path, monkeypatch):
    monkeypatch.setenv("SR_PIPELINE_MODEL_DIR", str(tmp_path))

    with pytest.raises(ModelNotFoundError):
        TorchScriptModel(cpu_config(path="absent.pt"))


def test_loads_scripted_network_from_model_dir(tmp_path, monkeypatch, make_image):
    torch.jit.script(nearest_x2()).save(str(tmp_path / "x2.pt"))
    monkeypatch.setenv("SR_PIPELINE_MODEL_DIR", str(tmp_path))

    model = TorchScriptModel(cpu_config(path="x2.pt"))

    assert model.apply(make_image(3, 3)).size == (6, 6)


def test_pipeline_with_torch_backend(make_image):
    model = TorchScriptModel(cpu_config(), network=nearest_x2())
    pipeline = SRPipeline(model, 2.0, policy=ScalePolicy.CEIL_POWER)

    result = pipeline.run_to_scale(make_image(10, 6), 3.0)

    assert result.size == (30, 18)
    model.cleanup()


def test_loads_scripted_network_from_bytes(make_image):
    buffer = io.BytesIO()
    torch.jit.save(torch.jit.script(nearest_x2()), buffer)

    model = TorchScriptModel.from_bytes(buffer.getvalue(), cpu_config())

    assert model.apply(make_image(4, 3)).size == (8, 6)


def test_corrupt_bytes_raise_load_error():
    with pytest.raises(ModelLoadError):
        TorchScriptModel.from_bytes(b"not a torchscript archive", cpu_config())
