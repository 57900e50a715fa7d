"""WSGI entrypoint for the recipe catalog service.

The Flask development server is intentionally not started from this module so
that deployments rely on Gunicorn (``gunicorn main:app``). Local development
can still use ``flask --app main run`` which imports the ``app`` object
defined below.
"""

import atexit
import logging
import os

from recipe_catalog import create_app

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = create_app()
atexit.register(app.config["RECIPE_STORAGE"].close)


__all__ = ["app"]
