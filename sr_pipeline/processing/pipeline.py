#!/usr/bin/env python3
"""
Super-Resolution Pipeline
Runs a fixed-scale model the planned number of times, then resizes the
remainder so the output lands exactly on the requested magnification
"""

import threading
from typing import Optional

from PIL import Image

from ..core.logger import get_logger
from ..core.scale_planner import ScalePlan, ScalePolicy, make_plan, pixel_round
from ..models.base_model import SuperResolutionModel
from .resizer import Resizer

# |residual - 1| at or below this skips the final resize
RESIDUAL_TOLERANCE = 1e-9

class SRPipeline:
    """Model passes followed by a residual resize.

    The pipeline owns its model. A lock serializes run_to_scale() calls so
    one request holds the model for all of its passes; separate pipelines
    share nothing and can run in parallel.
    """

    def __init__(self,
                 model: SuperResolutionModel,
                 base_scale: float,
                 policy: ScalePolicy = ScalePolicy.NEAREST_POWER,
                 resizer: Optional[Resizer] = None,
                 max_passes: Optional[int] = None):
        """Initialize pipeline

        Args:
            model: Model to own; never introspected for its scale
            base_scale: Magnification of one model pass
            policy: Pass count policy
            resizer: Resize capability (Pillow defaults if None)
            max_passes: Optional upper bound on passes per request
        """
        self.model = model
        self.base_scale = base_scale
        self.policy = ScalePolicy.parse(policy)
        self.resizer = resizer or Resizer()
        self.max_passes = max_passes
        self.logger = get_logger(model="Pipeline")
        self._lock = threading.Lock()

    def set_policy(self, policy: ScalePolicy) -> None:
        """Use this policy from the next run_to_scale() call on"""
        policy = ScalePolicy.parse(policy)
        with self._lock:
            self.policy = policy

    def plan(self, target_scale: float) -> ScalePlan:
        """Plan for target_scale under the current policy

        Raises:
            ScaleError: On non-positive base or target scale
        """
        return make_plan(self.base_scale, target_scale, self.policy, self.max_passes)

    def run_to_scale(self, image: Image.Image, target_scale: float) -> Image.Image:
        """Magnify image by target_scale

        Args:
            image: Source image
            target_scale: Overall magnification (> 0)

        Returns:
            New image of width * target_scale by height * target_scale pixels,
            halves rounded up

        Raises:
            ScaleError: Before any model pass if a scale is invalid
            ModelError: From the first failing pass, unchanged
            ResizeError: If the residual resize cannot be performed
        """
        with self._lock:
            plan = self.plan(target_scale)
            self.logger.log_stage(
                "Planning",
                f"{self.policy.value}: target {float(target_scale):g}x with base {float(self.base_scale):g}x -> "
                f"{plan.passes} pass(es), achieved {plan.achieved_scale:g}x, residual {plan.residual:.4f}"
            )

            current = image
            for i in range(plan.passes):
                before = current.size
                current = self.model.apply(current)
                self.logger.info(f"Pass {i + 1}/{plan.passes}: {before[0]}x{before[1]} -> {current.size[0]}x{current.size[1]}")

            if abs(plan.residual - 1.0) <= RESIDUAL_TOLERANCE:
                self.logger.debug("Model output already at target scale - skipping resize")
                return current

            width, height = current.size
            target_w = pixel_round(width * plan.residual)
            target_h = pixel_round(height * plan.residual)
            kernel = self.resizer.choose_kernel(plan.residual)

            self.logger.log_stage(
                "Residual resize",
                f"{width}x{height} -> {target_w}x{target_h} using {kernel.value}"
            )
            return self.resizer.resize(current, target_w, target_h, kernel)
