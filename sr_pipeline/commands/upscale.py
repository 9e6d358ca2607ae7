#!/usr/bin/env python3
"""
Upscale Command Implementation
Load an image, run the pipeline to the requested scale, save the result
"""

import time
from pathlib import Path
from typing import Optional, Dict, Any

from PIL import Image

from ..core import get_logger, get_config
from ..core.exceptions import SRPipelineError
from ..core.scale_planner import ScalePolicy, make_plan
from ..models import create_model
from ..processing import Resizer, SRPipeline
from ..utils import save_image

class UpscaleCommand:
    """Handles the upscale workflow"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False, dry_run: bool = False):
        """Initialize upscale command

        Args:
            config_dir: Custom config directory
            verbose: Enable verbose output
            dry_run: Show plan without executing
        """
        self.config_dir = config_dir
        self.verbose = verbose
        self.dry_run = dry_run
        self.config = get_config(Path(config_dir)) if config_dir else get_config()
        self.logger = get_logger()

    def execute(
        self,
        input_path: str,
        scale: float,
        policy: Optional[str] = None,
        model: Optional[str] = None,
        output_path: Optional[str] = None,
        max_passes: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """Execute upscaling

        Args:
            input_path: Image to upscale
            scale: Target magnification
            policy: Pass count policy name (config default if None)
            model: models.yaml entry (config default if None)
            output_path: Where to save (derived from input name if None)
            max_passes: Cap on model passes (config default if None)

        Returns:
            Upscale results, or None on a dry run
        """
        start_time = time.time()
        input_path = Path(input_path)

        model_name = model or self.config.get_default_model()
        model_config = self.config.get_model_config(model_name)
        policy = ScalePolicy.parse(policy or self.config.get_setting('pipeline.default_policy', 'nearest'))
        if max_passes is None:
            max_passes = self.config.get_setting('pipeline.max_passes')

        if not input_path.exists():
            raise SRPipelineError(
                f"Input image not found: {input_path}",
                {"Suggestion": "Check the path and try again"}
            )

        with Image.open(input_path) as source:
            source.load()
            image = source.copy()

        plan = make_plan(model_config['base_scale'], scale, policy, max_passes)

        if self.dry_run:
            self.logger.info("=== DRY RUN ===")
            self.logger.info(f"Model: {model_config.get('display_name', model_name)} ({model_config['base_scale']}x)")
            self.logger.info(f"Policy: {policy.value}")
            self.logger.info(f"Passes: {plan.passes}, achieved {plan.achieved_scale:g}x, residual {plan.residual:.4f}")
            self.logger.info(f"Output size: {'x'.join(map(str, plan.output_size(image.size)))}")
            return None

        self.logger.log_stage("Step 1/3", f"Loading {model_name}")
        sr_model = create_model(model_name, model_config)

        try:
            pipeline = SRPipeline(
                sr_model,
                model_config['base_scale'],
                policy=policy,
                resizer=Resizer.from_config(self.config),
                max_passes=max_passes
            )

            self.logger.log_stage("Step 2/3", f"Upscaling {input_path.name} by {scale:g}x")
            result = pipeline.run_to_scale(image, scale)
        finally:
            sr_model.cleanup()

        self.logger.log_stage("Step 3/3", "Saving output")
        if output_path is None:
            suffix = self.config.get_setting('output.suffix', '_x{scale}').format(scale=f"{scale:g}")
            output_path = input_path.with_name(f"{input_path.stem}{suffix}{input_path.suffix}")
        saved = save_image(result, output_path, quality=self.config.get_setting('output.quality', 100))

        duration = time.time() - start_time
        return {
            'output_path': saved,
            'input_size': image.size,
            'output_size': result.size,
            'passes': plan.passes,
            'policy': policy.value,
            'model': model_name,
            'duration': duration
        }
