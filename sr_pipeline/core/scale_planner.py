#!/usr/bin/env python3
"""
Scale Planning
Decides how many super-resolution passes reach a requested magnification
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .exceptions import ConfigurationError, ScaleError

# Exponents this close to an integer are treated as that integer, so exact
# powers such as 64 = 4^3 never gain or lose a pass to floating-point noise.
EXPONENT_SNAP_TOLERANCE = 1e-9

class ScalePolicy(Enum):
    """How the pass count is derived from target and base scale"""

    SINGLE_PASS = "single"
    NEAREST_POWER = "nearest"
    CEIL_POWER = "ceil"
    FLOOR_POWER = "floor"

    @classmethod
    def parse(cls, name) -> "ScalePolicy":
        """Resolve a policy from its short name ('ceil') or member name ('CEIL_POWER')"""
        if isinstance(name, cls):
            return name

        key = str(name).strip()
        for policy in cls:
            if key.lower() == policy.value or key.upper() == policy.name:
                return policy

        raise ConfigurationError(
            f"Unknown scale policy: {name}\n"
            f"Valid policies: {', '.join(p.value for p in cls)}"
        )

@dataclass(frozen=True)
class ScalePlan:
    """Pass count and the resize left over after those passes"""
    passes: int
    achieved_scale: float
    residual: float

    def output_size(self, size: Tuple[int, int]) -> Tuple[int, int]:
        """Final (width, height) for an input of the given size"""
        width, height = size
        achieved_w = width * self.achieved_scale
        achieved_h = height * self.achieved_scale
        return (pixel_round(achieved_w * self.residual), pixel_round(achieved_h * self.residual))

def pixel_round(value: float) -> int:
    """Round a non-negative pixel dimension, halves away from zero"""
    return int(math.floor(value + 0.5))

def _check_positive(parameter: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ScaleError(parameter, value, "must be a real number")
    if not math.isfinite(value) or value <= 0:
        raise ScaleError(parameter, value, "must be finite and greater than zero")

def exponent(base_scale: float, target_scale: float) -> float:
    """Real-valued n such that base_scale ** n == target_scale

    base_scale must not be 1; callers guard that case.
    """
    n = math.log(target_scale) / math.log(base_scale)
    nearest = round(n)
    if abs(n - nearest) <= EXPONENT_SNAP_TOLERANCE:
        return float(nearest)
    return n

def plan_passes(base_scale: float,
                target_scale: float,
                policy: ScalePolicy = ScalePolicy.NEAREST_POWER,
                max_passes: Optional[int] = None) -> int:
    """Number of model passes to run for a target magnification.

    SINGLE_PASS always gives 1. The power policies round the exponent
    ln(target) / ln(base) to nearest (ties to even), up or down. A base
    scale of exactly 1 magnifies nothing, so the power policies plan zero
    passes and leave everything to the resize step.

    Args:
        base_scale: Magnification of one model pass (> 0)
        target_scale: Requested overall magnification (> 0)
        policy: Pass count policy
        max_passes: Optional upper bound on the result

    Returns:
        Pass count, never negative

    Raises:
        ScaleError: On non-positive or non-finite scales or a negative cap
    """
    _check_positive("base_scale", base_scale)
    _check_positive("target_scale", target_scale)
    if max_passes is not None and (
        isinstance(max_passes, bool) or not isinstance(max_passes, int) or max_passes < 0
    ):
        raise ScaleError("max_passes", max_passes, "must be None or a non-negative integer")

    policy = ScalePolicy.parse(policy)

    if policy is ScalePolicy.SINGLE_PASS:
        passes = 1
    elif base_scale == 1:
        passes = 0
    else:
        n = exponent(base_scale, target_scale)
        if policy is ScalePolicy.NEAREST_POWER:
            passes = round(n)
        elif policy is ScalePolicy.CEIL_POWER:
            passes = math.ceil(n)
        else:
            passes = math.floor(n)

    passes = max(passes, 0)
    if max_passes is not None:
        passes = min(passes, max_passes)
    return int(passes)

def make_plan(base_scale: float,
              target_scale: float,
              policy: ScalePolicy = ScalePolicy.NEAREST_POWER,
              max_passes: Optional[int] = None) -> ScalePlan:
    """Plan passes and derive the achieved scale and residual ratio"""
    passes = plan_passes(base_scale, target_scale, policy, max_passes)
    achieved_scale = 1.0 if passes == 0 else float(base_scale) ** passes
    return ScalePlan(
        passes=passes,
        achieved_scale=achieved_scale,
        residual=target_scale / achieved_scale
    )
