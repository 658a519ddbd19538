#!/usr/bin/env python3
"""
Development runner for the Pairs server.

Loads the same AppConfig as gunicorn.conf.py and starts Gunicorn with code
reloading, binding and logging as configured.
"""

import logging
import os
import subprocess
import sys

from config_factory import AppConfig, ConfigError, load_config

logger = logging.getLogger(__name__)


def build_command(app_config: AppConfig) -> list:
    """Gunicorn command line for a development run of the given config."""
    return [
        'gunicorn',
        '--config', 'gunicorn.conf.py',
        '--reload',
        '--bind', f"{app_config.host}:{app_config.port}",
        '--log-level', app_config.log_level,
        'wsgi:app'
    ]


def main() -> int:
    os.environ.setdefault('FLASK_ENV', 'development')
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    try:
        app_config = load_config()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(f"Starting Pairs development server on http://{app_config.host}:{app_config.port} "
                f"({app_config.environment.value}, {app_config.default_pair_count} pairs)")

    try:
        subprocess.run(build_command(app_config), check=True)
    except KeyboardInterrupt:
        logger.info("Development server stopped")
    except subprocess.CalledProcessError as e:
        logger.error(f"Gunicorn exited with status {e.returncode}")
        return e.returncode
    return 0


if __name__ == '__main__':
    sys.exit(main())
