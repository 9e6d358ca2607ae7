#!/usr/bin/env python3
"""
TorchScript Backend
Runs an exported super-resolution network (e.g. Real-ESRGAN x4plus) in-process
"""

import gc
import io
from typing import Dict, Any, Optional

import numpy as np
import psutil
import torch
from PIL import Image

from .base_model import SuperResolutionModel
from ..core.exceptions import ModelInferenceError, ModelLoadError, ModelNotFoundError
from ..core.path_resolver import get_resolver

def select_device(preference: str = 'auto') -> torch.device:
    """Resolve a device preference to an available torch device"""
    preference = (preference or 'auto').lower()
    if preference != 'auto':
        return torch.device(preference)
    if torch.cuda.is_available():
        return torch.device('cuda')
    mps = getattr(torch.backends, 'mps', None)
    if mps is not None and mps.is_available():
        return torch.device('mps')
    return torch.device('cpu')

class TorchScriptModel(SuperResolutionModel):
    """Loads a TorchScript network taking NCHW RGB in [0, 1] and returning the same"""

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 network: Optional[torch.nn.Module] = None,
                 data: Optional[bytes] = None):
        """Load the network

        Args:
            config: Model configuration; 'path' names the TorchScript file
            network: Already-built module to use instead of loading from disk
            data: Serialized TorchScript held in memory, used when network is None

        Raises:
            ModelNotFoundError: If the weights file cannot be located
            ModelLoadError: If torch cannot load the file or bytes
        """
        super().__init__(config)
        self.device = select_device(self.config.get('device', 'auto'))
        self.half = bool(self.config.get('half', False)) and self.device.type == 'cuda'

        if self.device.type == 'cpu':
            threads = psutil.cpu_count(logical=True) or 1
            torch.set_num_threads(threads)
            self.logger.debug(f"CPU inference with {threads} threads")

        if network is None and data is not None:
            network = self._load_bytes(data)
        elif network is None:
            network = self._load_network()

        self.network = network.to(self.device).eval()
        if self.half:
            self.network = self.network.half()

        self.logger.info(f"{self.name} ready on {self.device}")

    @classmethod
    def from_bytes(cls, data: bytes, config: Optional[Dict[str, Any]] = None) -> "TorchScriptModel":
        """Build from a TorchScript archive already read into memory"""
        return cls(config, data=data)

    def _load_bytes(self, data: bytes) -> torch.nn.Module:
        try:
            return torch.jit.load(io.BytesIO(data), map_location=self.device)
        except (RuntimeError, ValueError) as e:
            raise ModelLoadError(f"{self.name} (in-memory, {len(data)} bytes)", e)

    def _load_network(self) -> torch.nn.Module:
        weights = self.config.get('path', '')
        resolver = get_resolver()
        path = resolver.find_model_file(weights, self.config.get('search_paths'))
        if path is None:
            searched = [str(p / weights) for p in resolver.get_model_search_paths()]
            raise ModelNotFoundError(weights or self.name, searched or [weights])

        try:
            return torch.jit.load(str(path), map_location=self.device)
        except (RuntimeError, ValueError, OSError) as e:
            raise ModelLoadError(str(path), e)

    def _to_tensor(self, image: Image.Image) -> torch.Tensor:
        array = np.asarray(image.convert('RGB'), dtype=np.float32) / 255.0
        tensor = torch.from_numpy(array).permute(2, 0, 1).unsqueeze(0).to(self.device)
        return tensor.half() if self.half else tensor

    def _to_image(self, tensor: torch.Tensor) -> Image.Image:
        array = tensor.squeeze(0).float().clamp(0, 1).permute(1, 2, 0).cpu().numpy()
        return Image.fromarray((array * 255.0).round().astype(np.uint8), 'RGB')

    def apply(self, image: Image.Image) -> Image.Image:
        """Run the network once; alpha is resized with Lanczos and re-attached"""
        alpha = None
        if image.mode in ('RGBA', 'LA') or (image.mode == 'P' and 'transparency' in image.info):
            alpha = image.convert('RGBA').getchannel('A')

        try:
            with torch.inference_mode():
                output = self.network(self._to_tensor(image))
        except (RuntimeError, ValueError) as e:
            raise ModelInferenceError(self.name, e, image.size)

        upscaled = self._to_image(output)

        if alpha is not None:
            upscaled.putalpha(alpha.resize(upscaled.size, Image.Resampling.LANCZOS))
        elif image.mode in ('L', 'I;16', 'I', 'F'):
            upscaled = upscaled.convert('L')

        return upscaled

    def cleanup(self) -> None:
        """Drop the network and free accelerator memory"""
        self.logger.info("Cleaning up model resources...")
        if hasattr(self, 'network'):
            del self.network
        gc.collect()
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
