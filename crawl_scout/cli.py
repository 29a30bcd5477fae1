#!/usr/bin/env python3
"""
Command line entry point of the CrawlScout crawler.

Commands:
  crawl     Crawl from the seed URL, download images, optionally save reports
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml, if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file in addition to stdout
  --log-format FORMAT Logging format string

crawl options:
  --follow-external / --no-follow-external
                      Follow links to other hosts (default: follow)
  --seed URL          Override the seed URL
  --depth INT         Override the maximum depth
  --timeout SEC       Override the global crawl deadline
  --output-dir DIR    Override the image directory
  --image-mode MODE   batch, inline or off
  --max-concurrency N Cap simultaneous page fetches
  --json PATH         Save the JSON report
  --html PATH         Save the HTML report
  --template DIR      Directory with the Jinja2 report template
  --pretty            Indent the JSON report

Example:
  crawl_scout crawl --seed https://example.com --depth 2 --no-follow-external --json crawl.json
"""
import asyncio
import sys
from pathlib import Path

import click
from click.core import ParameterSource

from crawl_scout import __version__
from crawl_scout.config import load_config
from crawl_scout.engine import start_crawl
from crawl_scout.logger import DEFAULT_FORMAT, init_logging
from crawl_scout.report.html_report import render_html
from crawl_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='CrawlScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """CrawlScout command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--follow-external/--no-follow-external', 'follow_external',
    default=True, show_default=True,
    help='Follow links that point to other hosts'
)
@click.option('--seed', 'seed_url', default=None, help='Seed URL')
@click.option('--depth', 'max_depth', type=int, default=None, help='Maximum crawl depth')
@click.option('--timeout', 'timeout', type=float, default=None, help='Global crawl deadline (seconds)')
@click.option(
    '--output-dir', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory for downloaded images'
)
@click.option(
    '--image-mode', 'image_mode',
    default=None,
    type=click.Choice(['batch', 'inline', 'off']),
    help='Download images at the end, per page, or not at all'
)
@click.option('--max-concurrency', 'max_concurrency', type=int, default=None, help='Cap on simultaneous fetches')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with report.html.j2 (packaged template if omitted)'
)
@click.option('--pretty', is_flag=True, help='Indent the JSON report (2 spaces)')
@click.pass_context
def crawl(ctx, follow_external, seed_url, max_depth, timeout, output_dir, image_mode,
          max_concurrency, json_output, html_output, template_dir, pretty):
    """Crawl the site and download the images found on it."""
    overrides = {
        'seed_url': seed_url,
        'max_depth': max_depth,
        'timeout': timeout,
        'output_dir': output_dir,
        'image_mode': image_mode,
        'max_concurrency': max_concurrency,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    # the config file wins unless the flag was given explicitly
    if ctx.get_parameter_source('follow_external') is not ParameterSource.DEFAULT:
        overrides['follow_external'] = follow_external
    try:
        cfg = ctx.obj['config'].model_validate({**ctx.obj['config'].model_dump(), **overrides})
    except Exception as e:
        print_error(f'Invalid configuration: {e}')

    click.echo(f'Starting crawl: {cfg.seed_url}')
    try:
        report = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    click.echo(report.summary())

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
