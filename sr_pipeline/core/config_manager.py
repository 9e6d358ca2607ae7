#!/usr/bin/env python3
"""
Configuration Manager for the SR Pipeline
Loads and validates YAML configuration files with fail-loud error handling
"""

import os
import re
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List

from .exceptions import ConfigurationError
from .scale_planner import ScalePolicy

class ConfigManager:
    """Manages all configuration for the SR Pipeline"""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration manager

        Args:
            config_dir: Custom config directory, defaults to $SR_PIPELINE_CONFIG
                or the package config/
        """
        if config_dir is None:
            env_dir = os.environ.get('SR_PIPELINE_CONFIG')
            if env_dir:
                config_dir = Path(env_dir)
            else:
                package_dir = Path(__file__).parent.parent
                config_dir = package_dir / "config"

        self.config_dir = Path(config_dir)

        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}\n"
                f"Expected to find configuration files at this location.\n"
                f"Current working directory: {os.getcwd()}"
            )

        self.models = {}
        self.settings = {}

        # Track loaded files for debugging
        self.loaded_files = []

    def load_all(self) -> None:
        """Load all configuration files - fail loud on any error"""
        self.settings = self._load_yaml("settings.yaml", required=True)
        self.models = self._load_yaml("models.yaml", required=True)

        self.settings = self._expand_env_vars(self.settings)
        self.models = self._expand_env_vars(self.models)

        self._validate_all()

    def _load_yaml(self, filename: str, required: bool = True) -> Dict[str, Any]:
        """Load a YAML configuration file

        Args:
            filename: Name of the YAML file to load
            required: If True, fail if file doesn't exist

        Returns:
            Loaded configuration dictionary
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            if required:
                raise ConfigurationError(
                    f"Required configuration file not found: {filepath}\n"
                    f"Please ensure all configuration files are present."
                )
            return {}

        try:
            with open(filepath, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse YAML file: {filepath}\n"
                f"Error: {e}\n"
                f"Please check the YAML syntax."
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load configuration file: {filepath}\n"
                f"Error: {type(e).__name__}: {e}"
            )

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {filepath}"
            )

        self.loaded_files.append(str(filepath))
        return config

    def _validate_all(self) -> None:
        """Validate all loaded configuration - fail loud on errors"""
        self._validate_models()
        self._validate_settings()

    def _validate_models(self) -> None:
        """Validate model configuration"""
        if not self.models.get('models'):
            raise ConfigurationError("No models defined in models.yaml")

        for model_name, model_config in self.models['models'].items():
            required_fields = ['class', 'enabled', 'display_name', 'base_scale']
            for field in required_fields:
                if field not in model_config:
                    raise ConfigurationError(
                        f"Model '{model_name}' missing required field: {field}"
                    )

            base_scale = model_config['base_scale']
            if isinstance(base_scale, bool) or not isinstance(base_scale, (int, float)) or base_scale <= 0:
                raise ConfigurationError(
                    f"Model '{model_name}' has invalid base_scale: {base_scale!r}\n"
                    f"base_scale must be a positive number (e.g. 4 for x4 models)"
                )

        default_model = self.models.get('default_model')
        if default_model and default_model not in self.models['models']:
            raise ConfigurationError(
                f"default_model '{default_model}' is not defined in models.yaml"
            )

    def _validate_settings(self) -> None:
        """Validate pipeline, resize and logging settings"""
        pipeline = self.settings.get('pipeline', {})

        ScalePolicy.parse(pipeline.get('default_policy', 'nearest'))

        max_passes = pipeline.get('max_passes')
        if max_passes is not None and (
            isinstance(max_passes, bool) or not isinstance(max_passes, int) or max_passes < 0
        ):
            raise ConfigurationError(
                f"pipeline.max_passes must be null or a non-negative integer, got {max_passes!r}"
            )

        # Deferred: processing imports the logger, which imports this module
        from ..processing.resizer import InterpolationKind

        resize = self.settings.get('resize', {})
        for key in ('downscale_kernel', 'upscale_kernel'):
            kernel = resize.get(key)
            if kernel is not None:
                InterpolationKind.parse(kernel)

        level = self.settings.get('logging', {}).get('level', 'INFO')
        if str(level).upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigurationError(f"Unknown logging level: {level}")

    def get_model_config(self, model_name: str) -> Dict[str, Any]:
        """Get configuration for a specific model

        Args:
            model_name: Name of the model

        Returns:
            Model configuration dictionary
        """
        if model_name not in self.models.get('models', {}):
            available = list(self.models.get('models', {}).keys())
            raise ConfigurationError(
                f"Unknown model: {model_name}\n"
                f"Available models: {', '.join(available)}"
            )

        return self.models['models'][model_name]

    def get_enabled_models(self) -> List[str]:
        """Get list of enabled model names"""
        return [
            name for name, config in self.models.get('models', {}).items()
            if config.get('enabled', False)
        ]

    def get_default_model(self) -> str:
        """Name of the model used when none is requested"""
        default_model = self.models.get('default_model')
        if default_model:
            return default_model

        enabled = self.get_enabled_models()
        if not enabled:
            raise ConfigurationError("No enabled models in models.yaml")
        return enabled[0]

    def get_setting(self, setting_path: str, default: Any = None) -> Any:
        """Get a setting value using dot notation

        Args:
            setting_path: Path to setting (e.g., 'pipeline.default_policy')
            default: Default value if not found

        Returns:
            Setting value
        """
        value = self.settings

        for key in setting_path.split('.'):
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default

        return value if value is not None else default

    def _expand_env_vars(self, config: Any) -> Any:
        """Expand ${VAR} patterns in config values

        Args:
            config: Configuration to expand

        Returns:
            Config with expanded environment variables
        """
        if isinstance(config, str):
            pattern = r'\$\{([^}]+)\}'
            return re.sub(pattern, lambda match: os.environ.get(match.group(1), ''), config)
        elif isinstance(config, dict):
            return {k: self._expand_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._expand_env_vars(v) for v in config]
        return config

# Singleton instance
_config_manager: Optional[ConfigManager] = None

def get_config(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get the global configuration manager instance

    Args:
        config_dir: Load from this directory instead (replaces the current instance)
    """
    global _config_manager
    if _config_manager is None or config_dir is not None:
        manager = ConfigManager(config_dir)
        manager.load_all()
        _config_manager = manager
    return _config_manager

def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it"""
    global _config_manager
    _config_manager = None
