"""Tests for the loglytics CLI"""
import json
import logging
import os
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from loglytics.cli import cli


@pytest.fixture
def runner():
    """CLI test runner fixture"""
    return CliRunner()


def write_config(content):
    f = tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False)
    f.write(content)
    f.close()
    return f.name


def close_handlers(log_file):
    """Close CLI file handlers so the temp directory can be removed"""
    path = os.path.abspath(log_file)
    for logger in list(logging.Logger.manager.loggerDict.values()):
        for handler in list(getattr(logger, 'handlers', [])):
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
                handler.close()
                logger.removeHandler(handler)


def test_cli_help(runner):
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'loglytics CLI' in result.output


def test_log_default_type(runner):
    result = runner.invoke(cli, ['log', 'backup done'])
    assert result.exit_code == 0
    assert '[shell] 🗣 backup done' in result.output


def test_log_type_and_location(runner):
    result = runner.invoke(cli, ['log', 'deployed', '--type', 'success', '--location', 'deploy.sh'])
    assert result.exit_code == 0
    assert '[deploy.sh] ✅ deployed' in result.output


def test_log_invalid_type(runner):
    result = runner.invoke(cli, ['log', 'x', '--type', 'fatal'])
    assert result.exit_code != 0


def test_log_error_writes_crash_report(runner):
    """Should send error lines to the configured crash reporter"""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = write_config(f'logging:\n  crash_reports_dir: {tmpdir}\n')
        try:
            result = runner.invoke(cli, ['log', 'backup failed', '--type', 'error', '--fatal', '--config', config])
        finally:
            os.unlink(config)

        assert result.exit_code == 0
        assert '❌ backup failed' in result.output

        files = list(Path(tmpdir).glob('crashes-*.jsonl'))
        assert len(files) == 1
        reports = [json.loads(line) for line in files[0].read_text(encoding='utf-8').splitlines()]
        assert len(reports) == 1
        assert reports[0]['fatal'] is True
        assert reports[0]['stack']


def test_log_non_error_writes_no_crash_report(runner):
    with tempfile.TemporaryDirectory() as tmpdir:
        config = write_config(f'logging:\n  crash_reports_dir: {tmpdir}\n')
        try:
            result = runner.invoke(cli, ['log', 'disk low', '--type', 'warning', '--config', config])
        finally:
            os.unlink(config)

        assert result.exit_code == 0
        assert '⚠ disk low' in result.output
        assert list(Path(tmpdir).glob('crashes-*.jsonl')) == []


def test_log_writes_log_file(runner):
    """Should honour log_file from the config"""
    with tempfile.TemporaryDirectory() as tmpdir:
        log_file = Path(tmpdir) / 'app.log'
        config = write_config(f'logging:\n  log_file: {log_file}\n')
        try:
            result = runner.invoke(cli, ['log', 'nightly run', '--config', config])
            close_handlers(str(log_file))
        finally:
            os.unlink(config)

        assert result.exit_code == 0
        entry = json.loads(log_file.read_text(encoding='utf-8').strip())
        assert entry['location'] == 'shell'
        assert entry['message'] == '🗣 nightly run'


def test_show_config(runner):
    config = write_config('logging:\n  analytics_enabled: false\n')
    try:
        result = runner.invoke(cli, ['show-config', '--config', config])
    finally:
        os.unlink(config)

    assert result.exit_code == 0
    assert 'analytics_enabled: False' in result.output
    assert 'crash_reporting_enabled: True' in result.output


def test_show_config_invalid(runner):
    config = write_config('logging:\n  analytics_enabled: maybe\n')
    try:
        result = runner.invoke(cli, ['show-config', '--config', config])
    finally:
        os.unlink(config)

    assert result.exit_code == 1
    assert 'analytics_enabled must be true or false' in result.output


def test_show_config_checks_log_file(runner):
    """Should report malformed lines in the configured log file"""
    with tempfile.TemporaryDirectory() as tmpdir:
        log_file = Path(tmpdir) / 'app.log'
        log_file.write_text(
            json.dumps({'timestamp': '2026-02-08T20:30:00Z', 'level': 'INFO',
                        'location': 'Cart', 'message': 'ok'}) + '\n'
            'not json\n',
            encoding='utf-8'
        )
        config = write_config(f'logging:\n  log_file: {log_file}\n')
        try:
            result = runner.invoke(cli, ['show-config', '--config', config])
        finally:
            os.unlink(config)

    assert result.exit_code == 0
    assert 'log_file lines: 2 (1 invalid)' in result.output
