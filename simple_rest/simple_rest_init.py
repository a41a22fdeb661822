import logging
import os
import sys
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from .request import SimpleRestRequest
from .response import SimpleRestResponse
from .json_encoder import SimpleRestJSONProvider
import simple_rest
import flask.app
from typing import Any


class SimpleRest:
    """This class configures the Flask application to serve the resource controllers
    :param app: a Flask application.
    :param prefix: URL prefix of the API
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)
    """

    # Configuration settings are stored as class variables
    # HTTP methods accepted by the controllers, other methods are rejected with a 400 error
    KNOWN_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"]
    # HTTP methods for which the entity body is parsed, add "DELETE" to accept delete payloads
    PAYLOAD_METHODS = ["POST", "PUT", "PATCH"]
    # message catalog (simple_rest/messages/<catalog>.yaml) used to translate validation errors
    MESSAGE_CATALOG = "api"
    LOGLEVEL = logging.WARNING

    def __init__(self, app: flask.app.Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(self, app: flask.app.Flask, prefix: str = "", app_db: Any = None, **kwargs) -> None:
        """
        Application initialization
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions.get("sqlalchemy", simple_rest.DB)

        simple_rest.DB = self.db = app_db
        self.prefix = prefix

        app.request_class = SimpleRestRequest
        app.response_class = SimpleRestResponse
        app.json = SimpleRestJSONProvider(app)
        app.url_map.strict_slashes = False

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        for conf_name, conf_val in kwargs.items():
            setattr(SimpleRest, conf_name, conf_val)

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. https://flask.palletsprojects.com/en/latest/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        """
        log = logging.getLogger(__name__)
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = SimpleRest.init_logging(LOGLEVEL)
