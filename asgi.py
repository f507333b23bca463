"""
asgi.py -- ASGI entry point for CarManager.

Run with:  uvicorn asgi:app --reload

Configuration comes from the environment or a .env file in the working
directory (see core/config.py). At minimum set SECRET_KEY (32+ characters),
or DEBUG=true to have one generated for local development.
"""

from api.main import app

__all__ = ["app"]
