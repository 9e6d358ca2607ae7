"""
Utility modules for the SR Pipeline
"""

from .lossless_save import save_lossless_png, save_image, QualityError

__all__ = [
    'save_lossless_png',
    'save_image',
    'QualityError'
]
