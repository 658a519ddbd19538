"""
Development Runner Tests
Tests that the Gunicorn command line follows the loaded configuration.
"""

import os
import subprocess
from unittest.mock import patch

import run_dev
from config_factory import AppConfig, ConfigError, Environment


class TestRunDev:
    """Test the development runner"""

    def test_command_uses_configured_bind_and_log_level(self):
        config = AppConfig(host='127.0.0.1', port=5050, log_level='debug')

        cmd = run_dev.build_command(config)

        assert cmd[0] == 'gunicorn'
        assert cmd[cmd.index('--bind') + 1] == '127.0.0.1:5050'
        assert cmd[cmd.index('--log-level') + 1] == 'debug'
        assert '--reload' in cmd
        assert cmd[-1] == 'wsgi:app'

    def test_main_runs_gunicorn_with_loaded_config(self):
        config = AppConfig(environment=Environment.TESTING, port=4100)

        with patch.object(run_dev, 'load_config', return_value=config), \
                patch.object(run_dev.subprocess, 'run') as mock_run, \
                patch.dict(os.environ, {}):
            assert run_dev.main() == 0

        mock_run.assert_called_once_with(run_dev.build_command(config), check=True)

    def test_main_reports_invalid_config(self):
        with patch.object(run_dev, 'load_config', side_effect=ConfigError("Invalid port number: 0")), \
                patch.object(run_dev.subprocess, 'run') as mock_run, \
                patch.dict(os.environ, {}):
            assert run_dev.main() == 1

        mock_run.assert_not_called()

    def test_main_returns_gunicorn_exit_status(self):
        config = AppConfig(environment=Environment.TESTING)
        failure = subprocess.CalledProcessError(3, ['gunicorn'])

        with patch.object(run_dev, 'load_config', return_value=config), \
                patch.object(run_dev.subprocess, 'run', side_effect=failure), \
                patch.dict(os.environ, {}):
            assert run_dev.main() == 3
