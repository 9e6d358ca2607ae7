#!/usr/bin/env python3
"""
Config Command Implementation
Configuration display and validation
"""

from pathlib import Path
from typing import Optional

import yaml

from ..core import get_logger, get_config

class ConfigCommand:
    """Handles configuration management"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False):
        self.config_dir = config_dir
        self.verbose = verbose
        self.config = get_config(Path(config_dir)) if config_dir else get_config()
        self.logger = get_logger()

    def show_config(self) -> str:
        """Display current configuration

        Returns:
            The configuration rendered as YAML when verbose, else a summary
        """
        self.logger.info("=== CURRENT CONFIGURATION ===")
        self.logger.info(f"Config directory: {self.config.config_dir}")

        summary = {
            'default_model': self.config.get_default_model(),
            'enabled_models': self.config.get_enabled_models(),
            'pipeline': self.config.settings.get('pipeline', {}),
            'resize': self.config.settings.get('resize', {}),
        }
        if self.verbose:
            summary = {'settings': self.config.settings, 'models': self.config.models}

        return yaml.safe_dump(summary, default_flow_style=False, sort_keys=False)

    def validate_config(self) -> None:
        """Re-run validation on the loaded configuration"""
        self.logger.info("Validating configuration...")
        self.config._validate_all()
        self.logger.info(f"All {len(self.config.loaded_files)} configuration files are valid")
