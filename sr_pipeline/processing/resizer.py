#!/usr/bin/env python3
"""
Residual Resize
Final algorithmic resize from the model's achieved scale to the exact target
"""

from enum import Enum
from typing import Optional

from PIL import Image

from ..core.exceptions import ConfigurationError, ResizeError

class InterpolationKind(Enum):
    """Resampling kernels available for the residual resize"""

    AREA = "area"          # box averaging, best for downscaling
    LANCZOS = "lanczos"    # sharp enlargement
    CUBIC = "cubic"
    LINEAR = "linear"
    NEAREST = "nearest"

    @classmethod
    def parse(cls, name) -> "InterpolationKind":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown resample method: {name}\n"
                f"Valid methods: {', '.join(k.value for k in cls)}"
            )

RESAMPLE_FILTERS = {
    InterpolationKind.AREA: Image.Resampling.BOX,
    InterpolationKind.LANCZOS: Image.Resampling.LANCZOS,
    InterpolationKind.CUBIC: Image.Resampling.BICUBIC,
    InterpolationKind.LINEAR: Image.Resampling.BILINEAR,
    InterpolationKind.NEAREST: Image.Resampling.NEAREST,
}

class Resizer:
    """Pillow-backed resize capability"""

    def __init__(self,
                 downscale_kernel: InterpolationKind = InterpolationKind.AREA,
                 upscale_kernel: InterpolationKind = InterpolationKind.LANCZOS):
        self.downscale_kernel = InterpolationKind.parse(downscale_kernel)
        self.upscale_kernel = InterpolationKind.parse(upscale_kernel)

    @classmethod
    def from_config(cls, config) -> "Resizer":
        """Build from the resize section of settings.yaml"""
        return cls(
            downscale_kernel=config.get_setting('resize.downscale_kernel', 'area'),
            upscale_kernel=config.get_setting('resize.upscale_kernel', 'lanczos')
        )

    def choose_kernel(self, residual: float) -> InterpolationKind:
        """Area averaging below 1 to avoid aliasing, sharp kernel otherwise"""
        return self.downscale_kernel if residual < 1.0 else self.upscale_kernel

    def resize(self,
               image: Image.Image,
               width: int,
               height: int,
               kernel: Optional[InterpolationKind] = None) -> Image.Image:
        """Resize to exactly width x height

        Returns:
            New image; the input is left untouched

        Raises:
            ResizeError: If the target dimensions are not positive or Pillow fails
        """
        target = (width, height)
        if width <= 0 or height <= 0:
            raise ResizeError(image.size, target, "target dimensions must be positive")

        kernel = InterpolationKind.parse(kernel or self.upscale_kernel)
        try:
            return image.resize(target, resample=RESAMPLE_FILTERS[kernel])
        except (ValueError, OSError, MemoryError) as e:
            raise ResizeError(image.size, target, f"{type(e).__name__}: {e}")
