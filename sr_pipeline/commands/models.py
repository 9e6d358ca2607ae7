#!/usr/bin/env python3
"""
Models Command Implementation
Model listing and availability checks
"""

from pathlib import Path
from typing import Optional

from ..core import get_logger, get_config
from ..core.exceptions import ConfigurationError, ModelError
from ..models import create_model

class ModelsCommand:
    """Handles model management"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False):
        """Initialize models command

        Args:
            config_dir: Custom config directory
            verbose: Enable verbose output
        """
        self.config_dir = config_dir
        self.verbose = verbose
        self.config = get_config(Path(config_dir)) if config_dir else get_config()
        self.logger = get_logger()

    def list_models(self) -> None:
        """List all configured models"""
        self.logger.info("=== AVAILABLE MODELS ===")

        default_model = self.config.models.get('default_model')
        for model_name, model_config in self.config.models.get('models', {}).items():
            status = "Enabled" if model_config.get('enabled', False) else "Disabled"
            marker = " [default]" if model_name == default_model else ""

            self.logger.info(f"{model_config.get('display_name', model_name)} ({model_name}){marker}")
            self.logger.info(f"  Status: {status}")
            self.logger.info(f"  Class: {model_config.get('class')}")
            self.logger.info(f"  Base scale: {model_config.get('base_scale')}x")

            if self.verbose:
                for key, value in model_config.items():
                    if key not in ('class', 'enabled', 'display_name', 'base_scale'):
                        self.logger.info(f"  {key}: {value}")

    def check_model(self, model_name: str) -> bool:
        """Check that a model can be located and loaded

        Args:
            model_name: Model to check

        Returns:
            True if the model is ready to use
        """
        try:
            model_config = self.config.get_model_config(model_name)
        except ConfigurationError as e:
            raise ModelError(
                f"Model not found: {model_name}!",
                {"Error": e.message, "Suggestion": "Use 'models --list' to see available models"}
            )

        self.logger.info(f"Checking {model_config.get('display_name', model_name)}...")

        if not model_config.get('enabled', False):
            self.logger.warning("Model is disabled in configuration")
            return False

        try:
            model = create_model(model_name, model_config)
        except ModelError as e:
            self.logger.error(f"{model_name} is not usable: {e.message}")
            for key, value in e.details.items():
                self.logger.error(f"  {key}: {value}")
            return False

        model.cleanup()
        self.logger.info(f"{model_name} is ready")
        return True
