# flask_restful API subclass
from flask import request
from flask.app import Flask
from flask_restful import Api
from werkzeug.exceptions import MethodNotAllowed
from typing import Any, Type
import simple_rest
from .config import get_config_list
from .controller import ApiController, HTTP_METHODS, error_response
from .errors import MethodNotAllowedError, UnknownMethodError

RESOURCE_URL_FMT = "{}/{}"
INSTANCE_URL_FMT = RESOURCE_URL_FMT + "/<string:resource_id>"


class SimpleRestApi(Api):
    """
    Subclass of the flask_restful API class where we add the expose method,
    this method creates the collection and instance url endpoints of an ApiController
    """

    def __init__(self, app: Flask, prefix: str = "", app_db: Any = None, **kwargs) -> None:
        """
        :param app: Flask application
        :param prefix: url prefix of the API, e.g. "/api"
        :param app_db: flask_sqlalchemy.SQLAlchemy instance, defaults to the app's sqlalchemy extension
        :param kwargs: SimpleRest configuration settings (KNOWN_METHODS, PAYLOAD_METHODS, ...)
        """
        simple_rest.SimpleRest(app, prefix=prefix, app_db=app_db, **kwargs)
        super().__init__(app, prefix=prefix)
        self.register_method_guard(app)

    def register_method_guard(self, app: Flask) -> None:
        """
        Requests with an unknown HTTP method never match a url rule,
        reject them before routing so the client gets the list of known methods
        """
        prefix = self.prefix

        @app.before_request
        def reject_unknown_method():
            if prefix and not request.path.startswith(prefix):
                return None
            known_methods = get_config_list("KNOWN_METHODS") or list(HTTP_METHODS)
            if request.method.upper() not in known_methods:
                return error_response(UnknownMethodError(request.method, known_methods))
            if isinstance(request.routing_exception, MethodNotAllowed):
                # known method without a handler on the matched url
                return error_response(MethodNotAllowedError(request.method, request.path))
            return None

    def expose(self, *controllers: Type[ApiController], url_prefix: str = "") -> None:
        for controller in controllers:
            self.expose_controller(controller, url_prefix)

    def expose_controller(self, controller: Type[ApiController], url_prefix: str = "") -> None:
        """This method creates the API url endpoints for the controller
        :param controller: ApiController subclass with a table_name
        :param url_prefix: url prefix, added to the API prefix

        The collection is exposed on /<collection_name>, the instances on /<collection_name>/<resource_id>
        """
        descriptor = controller.descriptor
        if descriptor is None:
            raise ValueError(f"{controller.__name__} has no table_name")

        collection_name = descriptor.collection_name
        url = RESOURCE_URL_FMT.format(url_prefix, collection_name)
        endpoint = f"{url_prefix}api.{collection_name}"
        simple_rest.log.info(f"Exposing {descriptor.table_name} on {url}, endpoint: {endpoint}")
        self.add_resource(controller, url, endpoint=endpoint)

        url = INSTANCE_URL_FMT.format(url_prefix, collection_name)
        endpoint = f"{url_prefix}api.{collection_name}Id"
        simple_rest.log.info(f"Exposing {descriptor.table_name} instances on {url}, endpoint: {endpoint}")
        self.add_resource(controller, url, endpoint=endpoint)
