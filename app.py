"""
Pairs - a two-player online memory card game.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import os
import logging
import atexit
import sys
import yaml

from src.image_pool_manager import ImagePoolValidationError
from container import configure_container, get_container
from config_factory import load_config, ConfigurationFactory

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# Initialize Socket.IO with environment-aware CORS
# In production, restrict to explicitly allowed origins from env var SOCKETIO_CORS_ALLOWED_ORIGINS (comma-separated)
allowed_origins_env = os.environ.get('SOCKETIO_CORS_ALLOWED_ORIGINS', '')
if app_config.is_production:
    _cors_allowed = [o.strip() for o in allowed_origins_env.split(',') if o.strip()]
    # If none provided, default to same-origin only by providing empty list (no cross-origin)
    socketio = SocketIO(app, cors_allowed_origins=_cors_allowed or [], async_mode=app_config.socketio_async_mode)
else:
    # Development/testing: permissive for local workflows
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=app_config.socketio_async_mode)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def configure_services(socketio_instance, config, scheduler=None):
    """
    Wire the service container and load the image pool.

    Raises:
        FileNotFoundError, yaml.YAMLError, ImagePoolValidationError: If the image pool cannot be loaded
    """
    container = configure_container(socketio=socketio_instance, app_config=config, scheduler=scheduler)
    image_pool_manager = container.get('ImagePoolManager')
    image_pool_manager.load_images_from_yaml()
    logger.info(f"Loaded {image_pool_manager.get_image_count()} images from {image_pool_manager.yaml_file_path}")
    return container


# Load the image pool on startup
try:
    configure_services(socketio, app_config)
except (FileNotFoundError, yaml.YAMLError, ImagePoolValidationError) as e:
    logger.critical(f"FATAL: Image pool validation failed, which is critical for game play. "
                    f"Server shutting down. Error: {e}")
    sys.exit(1)

# Register Socket.IO handlers
from src.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio)


def cleanup_on_exit():
    """Cancel every pending reveal and turn timer on application exit."""
    logger.info("Shutting down Pairs server...")
    container = get_container()
    if container.has_service('GameManager'):
        container.get('GameManager').shutdown()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    # Run the application using configuration
    logger.info(f"Starting Pairs server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
