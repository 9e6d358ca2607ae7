#!/usr/bin/env python3
"""
Base Model Abstraction for Super-Resolution
Every inference backend is wrapped by a subclass of SuperResolutionModel
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from PIL import Image

from ..core.logger import get_logger

class SuperResolutionModel(ABC):
    """A model that magnifies an image by a fixed, model-intrinsic factor.

    The pipeline only ever calls apply(); base scale is supplied to the
    pipeline separately and never read back from the model.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize base model

        Args:
            config: Model configuration from models.yaml
        """
        self.config = config or {}
        self.name = self.config.get('display_name', self.__class__.__name__)
        self.logger = get_logger(model=self.name)

    @abstractmethod
    def apply(self, image: Image.Image) -> Image.Image:
        """Run one super-resolution pass

        Args:
            image: Input image (not modified)

        Returns:
            New image, each side multiplied by the model's scale

        Raises:
            ModelInferenceError: If the pass fails
        """

    def cleanup(self) -> None:
        """Release backend resources. Default: nothing to release."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
