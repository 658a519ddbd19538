"""
Gunicorn configuration for the Pairs server.
Optimized for Socket.IO with eventlet workers.
"""

import sys
import logging
import yaml
from src.image_pool_manager import ImagePoolManager, ImagePoolValidationError

def on_starting(server):
    """
    Server hook that runs when the master process is starting.
    We use this to validate the image pool YAML file before workers are forked.
    If validation fails, we exit, preventing the server from starting.
    """
    logger = logging.getLogger(__name__)
    logger.info("Validating the image pool before starting workers...")
    try:
        image_pool_manager = ImagePoolManager(app_config.images_file)
        image_pool_manager.load_images_from_yaml()
        if image_pool_manager.get_image_count() < app_config.default_pair_count:
            raise ImagePoolValidationError(
                f"Pool of {image_pool_manager.get_image_count()} images cannot deal "
                f"the default {app_config.default_pair_count} pairs."
            )
        logger.info(f"Successfully validated {image_pool_manager.get_image_count()} images.")
    except (FileNotFoundError, yaml.YAMLError, ImagePoolValidationError) as e:
        logger.critical(f"FATAL: Image pool validation failed. Server shutting down. Error: {e}")
        sys.exit(1)

from config_factory import load_config

# Load configuration (renamed to avoid conflicts with gunicorn's internal 'config')
app_config = load_config()

# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = 1  # Must be 1 for Socket.IO with eventlet
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

# Restart workers after this many requests, to help prevent memory leaks
max_requests = 2000
max_requests_jitter = 100

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "pairs"

# Server mechanics
preload_app = False  # Don't preload for Socket.IO
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

# SSL (for production)
keyfile = None
certfile = None
