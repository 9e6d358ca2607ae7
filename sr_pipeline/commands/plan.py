#!/usr/bin/env python3
"""
Plan Command Implementation
Show how each policy would reach a target scale, without running a model
"""

from pathlib import Path
from typing import Optional, List, Tuple

from ..core import get_config
from ..core.exceptions import ConfigurationError
from ..core.scale_planner import ScalePlan, ScalePolicy, make_plan

class PlanCommand:
    """Computes scale plans for one or all policies"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False):
        self.config_dir = config_dir
        self.verbose = verbose
        self.config = get_config(Path(config_dir)) if config_dir else get_config()

    def resolve_base_scale(self, base_scale: Optional[float], model: Optional[str]) -> float:
        """Explicit base scale wins, then the model's configured one"""
        if base_scale is not None:
            if model is not None:
                raise ConfigurationError("Pass either --base-scale or --model, not both")
            return base_scale
        model_name = model or self.config.get_default_model()
        return self.config.get_model_config(model_name)['base_scale']

    def execute(
        self,
        scale: float,
        base_scale: Optional[float] = None,
        model: Optional[str] = None,
        policy: Optional[str] = None,
        max_passes: Optional[int] = None
    ) -> List[Tuple[ScalePolicy, ScalePlan]]:
        """Plan for the given policy, or every policy when None"""
        base = self.resolve_base_scale(base_scale, model)
        if max_passes is None:
            max_passes = self.config.get_setting('pipeline.max_passes')
        policies = [ScalePolicy.parse(policy)] if policy else list(ScalePolicy)

        return [(p, make_plan(base, scale, p, max_passes)) for p in policies]
