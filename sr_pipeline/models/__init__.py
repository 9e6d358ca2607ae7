"""
Super-Resolution Model Backends
"""

from typing import Dict, Any

from .base_model import SuperResolutionModel
from ..core.exceptions import ConfigurationError

MODEL_CLASSES = {
    'RealESRGANCommandModel': 'realesrgan_model',
    'TorchScriptModel': 'torchscript_model',
}

# Lazy imports for backends with heavy dependencies
def __getattr__(name):
    """Lazy load backends so torch is only imported when needed"""
    if name == 'RealESRGANCommandModel':
        from .realesrgan_model import RealESRGANCommandModel
        return RealESRGANCommandModel
    elif name == 'TorchScriptModel':
        from .torchscript_model import TorchScriptModel
        return TorchScriptModel
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def create_model(model_name: str, model_config: Dict[str, Any]) -> SuperResolutionModel:
    """Instantiate the backend named by a models.yaml entry

    Args:
        model_name: Key of the entry in models.yaml
        model_config: The entry itself

    Returns:
        Ready-to-use model
    """
    class_name = model_config.get('class')
    if class_name not in MODEL_CLASSES:
        raise ConfigurationError(
            f"Model '{model_name}' uses unknown class: {class_name}\n"
            f"Available classes: {', '.join(MODEL_CLASSES)}"
        )
    if not model_config.get('enabled', False):
        raise ConfigurationError(
            f"Model '{model_name}' is disabled in models.yaml"
        )

    model_class = __getattr__(class_name)
    return model_class(model_config)

__all__ = [
    'SuperResolutionModel',
    'RealESRGANCommandModel',
    'TorchScriptModel',
    'MODEL_CLASSES',
    'create_model'
]
