"""
Processing module for the SR Pipeline
"""

from .resizer import InterpolationKind, Resizer, RESAMPLE_FILTERS
from .pipeline import SRPipeline, RESIDUAL_TOLERANCE

__all__ = [
    'InterpolationKind',
    'Resizer',
    'RESAMPLE_FILTERS',
    'SRPipeline',
    'RESIDUAL_TOLERANCE'
]
