"""
SR Pipeline
Arbitrary-scale image upscaling with fixed-scale super-resolution models
"""

__version__ = '0.3.0'
__author__ = 'SR Pipeline Team'

from .core import get_config, get_logger, ScalePolicy, ScalePlan, plan_passes, make_plan
from .models import SuperResolutionModel, create_model
from .processing import SRPipeline, Resizer, InterpolationKind

__all__ = [
    'get_config',
    'get_logger',
    'ScalePolicy',
    'ScalePlan',
    'plan_passes',
    'make_plan',
    'SuperResolutionModel',
    'create_model',
    'SRPipeline',
    'Resizer',
    'InterpolationKind',
    '__version__'
]
