"""Application logging setup."""

import logging

from flask.logging import default_handler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(app):
    """Replace Flask's default handler with a formatted one at ``LOG_LEVEL``."""
    level = logging.getLevelName(str(app.config.get('LOG_LEVEL', 'INFO')).upper())
    if not isinstance(level, int):
        level = logging.INFO

    app.logger.removeHandler(default_handler)
    # The logger is shared by every app built in this process
    if _handler not in app.logger.handlers:
        app.logger.addHandler(_handler)
    app.logger.setLevel(level)
    return app
