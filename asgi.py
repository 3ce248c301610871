"""
asgi.py -- ASGI entry point for the standalone documentation server.

Configuration comes from the environment (see core/config.py Settings):
SCHEMA_PATH, DOCS_PREFIX, AUTH_KEY, AUTH_VALUE, AUTH_SOURCES, CSS, DIST,
SECRET_KEY, DEBUG.

Run with:  uvicorn asgi:app --reload
"""

from api.main import create_app

app = create_app()
