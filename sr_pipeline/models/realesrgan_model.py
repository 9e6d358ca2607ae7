#!/usr/bin/env python3
"""
Real-ESRGAN Command-Line Backend
Runs an installed Real-ESRGAN (python script or ncnn-vulkan binary) for each pass
"""

import sys
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, Any, Optional, List

from PIL import Image

from .base_model import SuperResolutionModel
from ..core.exceptions import ModelInferenceError, ModelNotFoundError
from ..core.path_resolver import get_resolver
from ..core.scale_planner import pixel_round
from ..utils.lossless_save import save_lossless_png

NCNN_EXECUTABLE = 'realesrgan-ncnn-vulkan'

class RealESRGANCommandModel(SuperResolutionModel):
    """One Real-ESRGAN invocation per pass, exchanged through temporary PNG files"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Locate the Real-ESRGAN installation

        Raises:
            ModelNotFoundError: If no installation can be found
        """
        super().__init__(config)
        self.model_name = self.config.get('model_name', 'RealESRGAN_x4plus')
        self.scale = self.config.get('base_scale', 4)
        self.tile_size = int(self.config.get('tile_size', 512))
        self.fp32 = bool(self.config.get('fp32', True))
        self.timeout = self.config.get('timeout', 300)

        self.realesrgan_path = self._find_realesrgan()
        if self.realesrgan_path is None:
            raise ModelNotFoundError(self.model_name, self._search_paths())

    def _search_paths(self) -> List[Path]:
        """Candidate locations, configured paths first"""
        resolver = get_resolver()
        configured = [Path(p).expanduser() for p in self.config.get('search_paths', []) or []]
        return configured + [
            resolver.project_root / "Real-ESRGAN/inference_realesrgan.py",
            Path.home() / "Real-ESRGAN/inference_realesrgan.py",
            resolver.get_data_dir() / "Real-ESRGAN/inference_realesrgan.py",
            resolver.project_root / f"Real-ESRGAN/{NCNN_EXECUTABLE}",
            Path.home() / f"Real-ESRGAN/{NCNN_EXECUTABLE}",
            Path(f"/usr/local/bin/{NCNN_EXECUTABLE}"),
        ]

    def _find_realesrgan(self) -> Optional[Path]:
        """Find Real-ESRGAN installation

        Returns:
            Path to Real-ESRGAN script or binary, or None
        """
        if env_path := get_resolver().find_executable(NCNN_EXECUTABLE):
            self.logger.debug(f"Found Real-ESRGAN executable: {env_path}")
            return env_path

        for path in self._search_paths():
            if path.exists():
                self.logger.debug(f"Found Real-ESRGAN at: {path}")
                return path

        return None

    def build_command(self, input_path: Path, output_dir: Path) -> List[str]:
        """Command line for one pass over input_path"""
        if self.realesrgan_path.suffix == '.py':
            cmd = [
                sys.executable,
                str(self.realesrgan_path),
                "-n", self.model_name,
                "-i", str(input_path),
                "-o", str(output_dir),
                "--outscale", f"{self.scale:g}",
                "-t", str(self.tile_size)
            ]
            if self.fp32:
                cmd.append("--fp32")
        else:
            cmd = [
                str(self.realesrgan_path),
                "-i", str(input_path),
                "-o", str(output_dir / f"{input_path.stem}_out.png"),
                "-s", f"{self.scale:g}",
                "-n", self.model_name.lower().replace('_', '-'),
                "-t", str(self.tile_size)
            ]
        return cmd

    def apply(self, image: Image.Image) -> Image.Image:
        """Upscale one image by the model's scale

        Raises:
            ModelInferenceError: If the command fails, times out or writes nothing
        """
        input_size = image.size

        with tempfile.TemporaryDirectory(prefix="sr-pipeline-", dir=get_resolver().get_temp_dir()) as tmp:
            tmp_dir = Path(tmp)
            input_path = save_lossless_png(image, tmp_dir / "input.png", validate=False, log_size=False)
            output_dir = tmp_dir / "output"
            output_dir.mkdir()

            cmd = self.build_command(input_path, output_dir)
            self.logger.debug(f"Executing: {' '.join(cmd)}")

            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    check=True,
                    timeout=self.timeout
                )
            except subprocess.CalledProcessError as e:
                raise ModelInferenceError(
                    self.model_name,
                    RuntimeError(f"Command failed: {e.stderr if e.stderr else 'Unknown error'}"),
                    input_size
                )
            except subprocess.TimeoutExpired:
                raise ModelInferenceError(
                    self.model_name,
                    TimeoutError(f"Upscaling timed out after {self.timeout} seconds"),
                    input_size
                )
            except OSError as e:
                raise ModelInferenceError(self.model_name, e, input_size)

            if result.stdout:
                self.logger.debug(f"Real-ESRGAN output: {result.stdout}")

            output_files = sorted(output_dir.glob("*.png"))
            if not output_files:
                raise ModelInferenceError(
                    self.model_name,
                    FileNotFoundError("No output from Real-ESRGAN"),
                    input_size
                )

            with Image.open(output_files[0]) as output_image:
                output_image.load()
                upscaled = output_image.copy()

        expected_size = (pixel_round(input_size[0] * self.scale), pixel_round(input_size[1] * self.scale))
        if upscaled.size != expected_size:
            self.logger.warning(
                f"Unexpected output size: {upscaled.size}, expected {expected_size}"
            )

        self.logger.debug(f"Pass complete: {input_size} -> {upscaled.size}")
        return upscaled
