"""
loglytics command line: emit formatted log lines from shell scripts.
"""

import logging
import os
import sys
from dataclasses import asdict
from typing import Optional

import click

from loglytics.formatter import ConsoleFormatter, add_file_handler, check_log_file, console_logger_name
from loglytics.log_type import LogType
from loglytics.service import LogService, custom_log
from loglytics.settings import ConfigError, LogSettings, load_settings
from loglytics.sinks import create_crash_reporter


class ClickHandler(logging.Handler):
    """Logging handler writing formatted records with click.echo"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=record.levelno >= logging.WARNING)
        except Exception:
            self.handleError(record)


def get_cli_logger(level: int = logging.DEBUG, log_file: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(console_logger_name('loglytics.cli', level, log_file))
    logger.setLevel(level)
    logger.propagate = False
    if not any(isinstance(h, ClickHandler) for h in logger.handlers):
        handler = ClickHandler()
        handler.setFormatter(ConsoleFormatter())
        logger.addHandler(handler)
    if log_file:
        add_file_handler(logger, log_file, level)
    return logger


def _load(config: Optional[str]) -> LogSettings:
    if config is None:
        return LogSettings()
    try:
        return load_settings(config)
    except ConfigError as e:
        click.echo(click.style(f'❌ {e}', fg='red'), err=True)
        sys.exit(1)


@click.group()
@click.version_option(version='1.0.0')
def cli():
    """loglytics CLI"""
    pass


@cli.command()
@click.argument('message')
@click.option('--type', 'log_type', type=click.Choice([t.value for t in LogType]), default='info',
              help='Log category')
@click.option('--location', default='shell', help='Label shown after the timestamp')
@click.option('--config', type=click.Path(exists=True), default=None, help='Path to config.yml')
@click.option('--fatal', is_flag=True, help='Mark the crash report as fatal (error type only)')
def log(message, log_type, location, config, fatal):
    """
    Log MESSAGE with the given category

    MESSAGE: Text to log

    Errors are also sent to the configured crash reporter.
    """
    settings = _load(config)
    console = get_cli_logger(settings.console_level, settings.log_file)
    log_type = LogType.parse(log_type)

    if log_type is LogType.ERROR:
        service = LogService(
            location,
            settings=settings,
            console=console,
            crash_reporter=create_crash_reporter(settings)
        )
        service.log_error(message, fatal=fatal)
    else:
        custom_log(message, location, log_type, settings=settings, console=console)


@cli.command('show-config')
@click.option('--config', type=click.Path(exists=True), required=True, help='Path to config.yml')
def show_config(config):
    """Print the resolved logging settings"""
    settings = _load(config)
    for key, value in asdict(settings).items():
        click.echo(f'{key}: {value}')

    if settings.log_file and os.path.exists(settings.log_file):
        total, invalid = check_log_file(settings.log_file)
        click.echo(f'log_file lines: {total} ({invalid} invalid)')
        if invalid:
            click.echo(click.style(f'⚠ {invalid} malformed lines in {settings.log_file}', fg='yellow'), err=True)


if __name__ == '__main__':
    cli()
