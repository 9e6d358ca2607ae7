import threading
import time

import pytest
from PIL import Image

from sr_pipeline.core import get_logger, reset_config
from sr_pipeline.core.exceptions import ModelInferenceError
from sr_pipeline.models.base_model import SuperResolutionModel
from sr_pipeline.processing.resizer import Resizer

# Bind the console handler before any CliRunner swaps sys.stderr
get_logger()


class FakeModel(SuperResolutionModel):
    """Nearest-neighbour stand-in for a fixed-scale network"""

    def __init__(self, scale=4, fail_on_pass=None, delay=0.0):
        super().__init__({'display_name': f'Fake x{scale}'})
        self.scale = scale
        self.fail_on_pass = fail_on_pass
        self.delay = delay
        self.calls = 0
        self.inputs = []
        self.outputs = []
        self.active = 0
        self.max_active = 0
        self._counter_lock = threading.Lock()

    def apply(self, image):
        with self._counter_lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            call = self.calls
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.fail_on_pass == call:
                raise ModelInferenceError("fake", RuntimeError("out of memory"), image.size)
            self.inputs.append(image)
            width, height = image.size
            output = image.resize((round(width * self.scale), round(height * self.scale)), Image.Resampling.NEAREST)
            self.outputs.append(output)
            return output
        finally:
            with self._counter_lock:
                self.active -= 1


class SpyResizer(Resizer):
    """Records every resize request"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def resize(self, image, width, height, kernel=None):
        self.calls.append((image.size, (width, height), kernel))
        return super().resize(image, width, height, kernel)


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test starts from the packaged configuration"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_image():
    def _make(width=10, height=7, mode='RGB', color=(120, 60, 30)):
        if mode == 'L':
            color = color[0]
        elif mode == 'RGBA' and len(color) == 3:
            color = color + (200,)
        return Image.new(mode, (width, height), color)
    return _make


@pytest.fixture
def fake_model():
    return FakeModel(scale=4)


@pytest.fixture
def model_factory():
    return FakeModel


@pytest.fixture
def spy_resizer():
    return SpyResizer()
