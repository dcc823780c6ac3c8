import logging

from flask import Flask

from messenger.config.settings import settings


def configure_logging(app: Flask) -> None:
    level = settings.log_level
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # evita handlers duplicados no reloader
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        root.addHandler(handler)


def configure_app(app: Flask) -> None:
    app.config["ENV"] = settings.environment
    app.config["DEBUG"] = settings.debug
    app.config["JSON_SORT_KEYS"] = False
    configure_logging(app)
