#!/usr/bin/env python3
"""
Main CLI entry point for the SR Pipeline
Arbitrary-scale upscaling with fixed-scale super-resolution models
"""

import sys

import click

from .. import __version__
from ..core import get_logger, handle_error
from ..core.exceptions import SRPipelineError
from ..core.scale_planner import ScalePolicy

POLICY_CHOICES = [p.value for p in ScalePolicy] + [p.name for p in ScalePolicy]

# Configure Click
CONTEXT_SETTINGS = dict(
    help_option_names=['-h', '--help'],
    max_content_width=120
)

def parse_size(value):
    """Parse WIDTHxHEIGHT into a tuple of ints"""
    if value is None:
        return None
    try:
        width, height = (int(part) for part in value.lower().split('x'))
    except ValueError:
        raise click.BadParameter(f"expected WIDTHxHEIGHT, got {value!r}")
    return width, height

@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(version=__version__, prog_name='SR Pipeline')
@click.option('--config', type=click.Path(exists=True, file_okay=False), help='Custom config directory')
@click.option('--verbose', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, config, verbose):
    """SR Pipeline - upscale images to any scale with super-resolution models

    Runs a fixed-scale model (e.g. Real-ESRGAN x4) as many times as the chosen
    policy asks, then resizes the remainder so the output matches the requested
    scale exactly.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_dir'] = config
    ctx.obj['verbose'] = verbose

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())

@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--scale', '-s', type=float, required=True, help='Target magnification, e.g. 3 or 2.5')
@click.option('--policy', '-p', type=click.Choice(POLICY_CHOICES, case_sensitive=False), help='Pass count policy')
@click.option('--model', '-m', help='Model name from models.yaml')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output path')
@click.option('--max-passes', type=click.IntRange(min=0), help='Cap on model passes')
@click.option('--dry-run', is_flag=True, help='Show plan without executing')
@click.pass_context
def upscale(ctx, input_path, scale, policy, model, output, max_passes, dry_run):
    """Upscale INPUT_PATH by --scale"""
    try:
        from ..commands.upscale import UpscaleCommand

        cmd = UpscaleCommand(
            config_dir=ctx.obj.get('config_dir'),
            verbose=ctx.obj.get('verbose'),
            dry_run=dry_run
        )

        result = cmd.execute(
            input_path=input_path,
            scale=scale,
            policy=policy,
            model=model,
            output_path=output,
            max_passes=max_passes
        )

        if result:
            logger = get_logger()
            logger.info("=== UPSCALE COMPLETE ===")
            logger.info(
                f"{result['input_size'][0]}x{result['input_size'][1]} -> "
                f"{result['output_size'][0]}x{result['output_size'][1]} "
                f"({result['passes']} pass(es), policy {result['policy']})"
            )
            logger.info(f"Total time: {result['duration']:.1f} seconds")
            click.echo(str(result['output_path']))

    except SRPipelineError as e:
        handle_error(e, "Upscale failed")
    except Exception as e:
        handle_error(e, "Unexpected error during upscale")

@cli.command()
@click.option('--scale', '-s', type=float, required=True, help='Target magnification')
@click.option('--base-scale', '-b', type=float, help='Magnification of one model pass')
@click.option('--model', '-m', help='Take the base scale from this model')
@click.option('--policy', '-p', type=click.Choice(POLICY_CHOICES, case_sensitive=False), help='Only this policy')
@click.option('--size', help='Input size as WIDTHxHEIGHT to show output dimensions')
@click.option('--max-passes', type=click.IntRange(min=0), help='Cap on model passes')
@click.pass_context
def plan(ctx, scale, base_scale, model, policy, size, max_passes):
    """Show pass counts and residual ratios for a target scale"""
    size = parse_size(size)
    try:
        from ..commands.plan import PlanCommand

        cmd = PlanCommand(
            config_dir=ctx.obj.get('config_dir'),
            verbose=ctx.obj.get('verbose')
        )
        plans = cmd.execute(scale, base_scale=base_scale, model=model, policy=policy, max_passes=max_passes)

        for scale_policy, scale_plan in plans:
            line = (
                f"{scale_policy.value:<8} passes={scale_plan.passes} "
                f"achieved={scale_plan.achieved_scale:g} residual={scale_plan.residual:.4f}"
            )
            if size:
                out_w, out_h = scale_plan.output_size(size)
                line += f" output={out_w}x{out_h}"
            click.echo(line)

    except SRPipelineError as e:
        handle_error(e, "Planning failed")

@cli.command()
@click.option('--list', 'list_models', is_flag=True, help='List configured models')
@click.option('--check', help='Check if model is ready to use')
@click.pass_context
def models(ctx, list_models, check):
    """List configured models or check one"""
    try:
        from ..commands.models import ModelsCommand

        cmd = ModelsCommand(
            config_dir=ctx.obj.get('config_dir'),
            verbose=ctx.obj.get('verbose')
        )

        if list_models:
            cmd.list_models()
        elif check:
            if not cmd.check_model(check):
                sys.exit(1)
        else:
            click.echo("Specify an action: --list or --check")

    except SRPipelineError as e:
        handle_error(e, "Model operation failed")

@cli.command()
@click.option('--show', is_flag=True, help='Display current configuration')
@click.option('--validate', is_flag=True, help='Validate all config files')
@click.pass_context
def config(ctx, show, validate):
    """Show or validate configuration"""
    try:
        from ..commands.config import ConfigCommand

        cmd = ConfigCommand(
            config_dir=ctx.obj.get('config_dir'),
            verbose=ctx.obj.get('verbose')
        )

        if show:
            click.echo(cmd.show_config())
        elif validate:
            cmd.validate_config()
        else:
            click.echo("Specify an action: --show or --validate")

    except SRPipelineError as e:
        handle_error(e, "Configuration operation failed")

def main():
    """Main entry point"""
    cli()

if __name__ == '__main__':
    main()
