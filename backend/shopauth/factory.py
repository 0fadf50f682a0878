"""Application factory wiring Flask extensions, logging and error handlers."""

from __future__ import annotations

from flask import Flask

from shopauth.core.config import BaseConfig, get_config
from shopauth.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Routing is left to the embedding transport; this factory wires the
    database, migrations, JSON logging, problem+json errors and the CLI.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    if app.config["JWT_ACCESS_SECRET"] == app.config["JWT_REFRESH_SECRET"]:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from shopauth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from shopauth.core import errors

    errors.init_app(app)

    from shopauth import cli as app_cli

    app_cli.init_app(app)

    return app
