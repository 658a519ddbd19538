"""
WSGI entry point for the Pairs server.
Used for production deployment with Gunicorn.
"""

from app import app, socketio, app_config

if __name__ == "__main__":
    socketio.run(app, host=app_config.host, port=app_config.port, debug=True)
else:
    # For production WSGI servers
    application = app
