"""
Core components for the SR Pipeline
"""

from .config_manager import ConfigManager, get_config, reset_config
from .logger import SRLogger, get_logger
from .exceptions import (
    SRPipelineError,
    ConfigurationError,
    ScaleError,
    ModelError,
    ModelNotFoundError,
    ModelLoadError,
    ModelInferenceError,
    ResizeError,
    LoggingError,
    handle_error
)
from .scale_planner import ScalePolicy, ScalePlan, plan_passes, make_plan

__all__ = [
    # Config
    'ConfigManager',
    'get_config',
    'reset_config',

    # Logging
    'SRLogger',
    'get_logger',

    # Exceptions
    'SRPipelineError',
    'ConfigurationError',
    'ScaleError',
    'ModelError',
    'ModelNotFoundError',
    'ModelLoadError',
    'ModelInferenceError',
    'ResizeError',
    'LoggingError',
    'handle_error',

    # Planning
    'ScalePolicy',
    'ScalePlan',
    'plan_passes',
    'make_plan'
]
