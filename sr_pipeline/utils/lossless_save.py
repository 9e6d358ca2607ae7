#!/usr/bin/env python3
"""
Lossless Image Save Utility
Upscaled output is written without compression loss
"""

from pathlib import Path
from typing import Union, Optional

from PIL import Image

from ..core.logger import get_logger
from ..core.exceptions import SRPipelineError

class QualityError(SRPipelineError):
    """Raised when saved file quality is compromised"""
    pass

def save_lossless_png(image: Image.Image,
                      filepath: Union[str, Path],
                      validate: bool = True,
                      log_size: bool = True) -> Path:
    """
    Save image as PNG with zero quality loss.

    Args:
        image: PIL Image object to save
        filepath: Path to save to (will be converted to .png if not already)
        validate: Check file size is reasonable (default: True)
        log_size: Log file size information (default: True)

    Returns:
        Path: The path where the file was saved

    Raises:
        QualityError: If saved file is suspiciously small
    """
    filepath = Path(filepath)

    if filepath.suffix.lower() != '.png':
        filepath = filepath.with_suffix('.png')

    if image.mode not in ('RGB', 'RGBA', 'L', 'LA'):
        if 'transparency' in image.info:
            image = image.convert('RGBA')
        else:
            image = image.convert('RGB')

    filepath.parent.mkdir(parents=True, exist_ok=True)

    # NO compression, NO optimization, EXPLICIT format
    image.save(
        str(filepath),
        'PNG',
        compress_level=0,
        optimize=False,
    )

    file_size_bytes = filepath.stat().st_size
    file_size_mb = file_size_bytes / (1024 * 1024)
    pixels = image.width * image.height
    bytes_per_pixel = file_size_bytes / pixels

    if log_size:
        get_logger().info(
            f"Saved lossless PNG: {filepath.name} | "
            f"Size: {file_size_mb:.1f}MB | "
            f"Resolution: {image.width}x{image.height} | "
            f"Bytes/pixel: {bytes_per_pixel:.2f}"
        )

    if validate:
        # Uncompressed PNG stores every channel byte; 10% of raw means something went wrong
        channels = len(image.getbands())
        expected_min_bytes = pixels * channels * 0.1

        if file_size_bytes < expected_min_bytes:
            raise QualityError(
                f"Saved file suspiciously small: {file_size_bytes} bytes "
                f"(expected at least {expected_min_bytes:.0f} for {image.width}x{image.height}). "
                f"Only {bytes_per_pixel:.2f} bytes/pixel - possible quality loss!"
            )

    return filepath


def save_image(image: Image.Image,
               filepath: Union[str, Path],
               format: Optional[str] = None,
               quality: int = 100) -> Path:
    """
    Save image in any format with maximum quality.

    PNG goes through save_lossless_png; JPEG and WEBP use the given quality.

    Args:
        image: PIL Image object
        filepath: Path to save to
        format: Image format (detected from the extension if None)
        quality: Quality for lossy formats

    Returns:
        Path: Where file was saved
    """
    filepath = Path(filepath)

    if format is None:
        format = filepath.suffix.upper().lstrip('.') or 'PNG'
        if format == 'JPG':
            format = 'JPEG'
        elif format == 'TIF':
            format = 'TIFF'
    format = format.upper()

    if format == 'PNG':
        return save_lossless_png(image, filepath)

    filepath.parent.mkdir(parents=True, exist_ok=True)

    save_params = {'format': format}
    if format in ('JPEG', 'WEBP'):
        save_params['quality'] = quality
        save_params['optimize'] = False
        if format == 'JPEG' and image.mode not in ('RGB', 'L'):
            # JPEG has no alpha channel
            image = image.convert('RGB')

    image.save(str(filepath), **save_params)

    file_size_mb = filepath.stat().st_size / (1024 * 1024)
    get_logger().info(
        f"Saved {format}: {filepath.name} | "
        f"Size: {file_size_mb:.1f}MB | "
        f"Quality: {quality if format in ('JPEG', 'WEBP') else 'N/A'}"
    )

    return filepath
