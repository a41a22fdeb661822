# -*- coding: utf-8 -*-
#
# Generic CRUD resource controllers
#
# A concrete controller declares the table it exposes, its primary key and the
# allow-list of fields with their validation rules:
#
#   class Users(CrudController):
#       table_name = "users"
#       fields = {"name": ["not_empty", ("max_length", [":value", 50])], "email": ["email"]}
#
# All the base HTTP method handlers of ApiController answer "405 Method Not Allowed".
# To support an HTTP verb, override its handler and call the matching fulfill_*_request helper,
# CrudController does this for GET, POST, PUT, PATCH and DELETE.
#
from functools import wraps
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Mapping, Optional
from flask import jsonify, make_response, request
from flask_restful import Resource
from sqlalchemy.exc import SQLAlchemyError
import simple_rest
from .config import get_config, get_config_list
from .db import Database
from .errors import ApiError, GenericError, MethodNotAllowedError, NotFoundError, PersistenceError, UnknownMethodError, ValidationError
from .resource import ResourceDescriptor
from .sql import build_delete, build_insert, build_update
from .util import PLACEHOLDER, prefix_array_key
from .validation import Validation, validate

HTTP_METHODS = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS")
JSON_MIMETYPE = "application/json"


def error_response(api_error: ApiError):
    """
    :param api_error: the error to be sent to the client
    :return: json response {"__error": {"__code": .., "__message": ..}} with the error status
    """
    response = make_response(jsonify(api_error.to_dict()), api_error.status_code)
    response.headers["Content-Type"] = JSON_MIMETYPE
    return response


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the controller HTTP method handlers
    - convert the ApiErrors to json error responses
    - convert database errors to a generic 500 error (the detail is only logged)
    - convert all other exceptions to a GenericError

    :param fun: handler
    :return: wrapped handler
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        try:
            return fun(*args, **kwargs)
        except ApiError as exc:
            api_error = exc
        except SQLAlchemyError as exc:
            simple_rest.log.exception(exc)
            api_error = PersistenceError(exc)
        except Exception as exc:  # pylint: disable=broad-except
            simple_rest.log.exception(exc)
            api_error = GenericError(str(exc))
        return error_response(api_error)

    return method_wrapper


def has_identifier(resource_id: Optional[Any]) -> bool:
    return resource_id is not None and resource_id != ""


class ApiController(Resource):
    """
    Base class of the resource controllers

    Class attributes set by the concrete controllers:
    - table_name: database table
    - primary_key_field: identifier column, "id" by default
    - fields: allow-list of the client input fields, field_name => validation rules
    - collection_name: url path of the collection, defaults to table_name
    - database: persistence collaborator

    The verb => handler mapping is built when the class is created,
    a request with a method that isn't in KNOWN_METHODS is rejected with a 400 error
    """

    table_name = ""
    primary_key_field = "id"
    fields: Mapping[str, Any] = {}
    collection_name = ""
    database = Database()
    # parsed request payload, set in dispatch_request
    payload: Mapping[str, Any] = {}
    # resolved in __init_subclass__
    descriptor: Optional[ResourceDescriptor] = None
    handlers: Dict[str, Callable] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.table_name:
            cls.descriptor = ResourceDescriptor(
                table_name=cls.table_name,
                fields=cls.fields,
                primary_key_field=cls.primary_key_field,
                collection_name=cls.collection_name,
            )
        cls.handlers = cls.get_handlers()

    @classmethod
    def get_handlers(cls) -> Dict[str, Callable]:
        """
        :return: HTTP method => wrapped handler, HEAD requests are handled by get
        """
        handlers = {}
        for method in HTTP_METHODS:
            method_name = "get" if method == "HEAD" else method.lower()
            handler = getattr(cls, method_name, None)
            if handler is not None:
                handlers[method] = http_method_decorator(handler)
        return handlers

    @staticmethod
    def known_methods() -> List[str]:
        return get_config_list("KNOWN_METHODS") or list(HTTP_METHODS)

    def dispatch_request(self, *args, **kwargs):
        """
        Route the request to the handler of the request method.
        The entity body is parsed before the handler is called, a parse error ends the request
        """
        method = request.method.upper()
        known_methods = self.known_methods()
        handler = self.handlers.get(method)
        if method not in known_methods:
            return error_response(UnknownMethodError(method, known_methods))
        if handler is None:
            return error_response(MethodNotAllowedError(method, self.resource_name))
        try:
            self.payload = request.payload
        except ApiError as exc:
            return error_response(exc)
        return handler(self, *args, **kwargs)

    @property
    def resource_name(self) -> str:
        if self.descriptor is None:
            return type(self).__name__
        return self.descriptor.collection_name

    @property
    def message_catalog(self) -> Optional[str]:
        return get_config("MESSAGE_CATALOG")

    #
    # Default HTTP method handlers
    #
    def get(self, **kwargs):
        raise MethodNotAllowedError("GET", self.resource_name)

    def post(self, **kwargs):
        raise MethodNotAllowedError("POST", self.resource_name)

    def put(self, **kwargs):
        raise MethodNotAllowedError("PUT", self.resource_name)

    def patch(self, **kwargs):
        raise MethodNotAllowedError("PATCH", self.resource_name)

    def delete(self, **kwargs):
        raise MethodNotAllowedError("DELETE", self.resource_name)

    def options(self, **kwargs):
        raise MethodNotAllowedError("OPTIONS", self.resource_name)

    #
    # Responses
    #
    @staticmethod
    def json_response(data: Any, status_code: int = HTTPStatus.OK):
        response = make_response(jsonify(data), status_code)
        response.headers["Content-Type"] = JSON_MIMETYPE
        return response

    @staticmethod
    def empty_response(status_code: int = HTTPStatus.NO_CONTENT):
        response = make_response("", status_code)
        response.headers["Content-Type"] = JSON_MIMETYPE
        return response

    def raise_validation_error(self, validation: Validation) -> None:
        """
        End the request with the (translated) validation errors,
        e.g. {"__error": {"__code": 400, "__message": "There was validation error", "__validation": {"name": "name must not be empty"}}}
        """
        raise ValidationError(errors=validation.errors(self.message_catalog))

    #
    # Validation
    #
    @property
    def labels(self) -> Dict[str, str]:
        pk = self.descriptor.primary_key_field
        return {pk: pk}

    def _missing_identifier(self, data: Mapping[str, Any], method: str) -> Validation:
        pk = self.descriptor.primary_key_field
        validation = Validation(data).label(pk, pk)
        validation.error(pk, f"{method}.missing_identifier")
        return validation

    def _validate(self, data: Mapping[str, Any], fields: Mapping[str, Any]) -> Validation:
        # list and object values can't be bound to a column, their rules aren't checked
        non_scalar = self.descriptor.non_scalar(data)
        rules = {field_name: field_rules for field_name, field_rules in fields.items() if field_name not in non_scalar}
        validation = validate(data, rules, self.labels)
        for field_name in non_scalar:
            validation.error(field_name, "scalar")
        return validation

    def post_validate(self, payload: Mapping[str, Any]) -> Validation:
        """
        Validate the POST input with all the field rules.
        Only the fields known to the allow-list are kept, the validated
        data can be mutated by the concrete controller before it calls fulfill_post_request

        :param payload: parsed request payload
        :return: checked Validation
        """
        data = self.descriptor.allowed(payload)
        return self._validate(data, self.descriptor.fields)

    def put_validate(self, resource_id: Optional[Any], payload: Mapping[str, Any]) -> Validation:
        """
        PUT replaces the resource: the identifier is required and all the rules apply
        """
        data = self.descriptor.allowed(payload)
        if not has_identifier(resource_id):
            return self._missing_identifier(data, "PUT")
        return self._validate(data, self.descriptor.fields)

    def patch_validate(self, resource_id: Optional[Any], payload: Mapping[str, Any]) -> Validation:
        """
        For PATCH, only need to validate the supplied fields

        :param resource_id: the identifier in the url
        :param payload: parsed request payload
        :return: Validation, with a missing_identifier error if there's no identifier
        """
        data = self.descriptor.allowed(payload)
        if not has_identifier(resource_id):
            return self._missing_identifier(data, "PATCH")
        return self._validate(data, self.descriptor.rules_for(data))

    def delete_validate(self, resource_id: Optional[Any]) -> Validation:
        if not has_identifier(resource_id):
            return self._missing_identifier({}, "DELETE")
        return validate({}, {})

    #
    # Default CRUD behavior
    #
    def get_persisted_resource(self, resource_id: Optional[Any] = None) -> List[Dict[str, Any]]:
        """
        :param resource_id: if None, this is a get all
        :return: list of rows
        """
        descriptor = self.descriptor
        identifier = resource_id if has_identifier(resource_id) else None
        return self.database.fetch(descriptor.table_name, descriptor.primary_key_field, identifier)

    def fulfill_get_request(self, resource_id: Optional[Any] = None):
        results = self.get_persisted_resource(resource_id)
        if not results and has_identifier(resource_id):
            raise NotFoundError(f"Resource with identifier [{resource_id}] Not Found")
        return self.json_response(results)

    def fulfill_post_request(self, validated_input: Mapping[str, Any]):
        """
        Insert the validated input, the response contains the new identifier and a link to the resource
        """
        descriptor = self.descriptor
        data = dict(validated_input)
        # identifier should not be in data
        data.pop(descriptor.primary_key_field, None)
        if not data:
            raise ValidationError("There was no POST data")

        sql = build_insert(descriptor.table_name, data)
        try:
            identifier, rows_affected = self.database.insert(sql, prefix_array_key(PLACEHOLDER, data))
        except SQLAlchemyError as exc:
            raise PersistenceError(exc)

        simple_rest.log.info(f"Created {descriptor.table_name} {identifier} ({rows_affected} row)")
        link = f"{request.base_url.rstrip('/')}/{identifier}"
        response = self.json_response({descriptor.primary_key_field: identifier, "link": {"href": link}}, HTTPStatus.CREATED)
        response.headers["Location"] = link
        return response

    def fulfill_patch_request(self, resource_id: Any, validated_input: Mapping[str, Any]):
        return self._update(resource_id, validated_input, "PATCH")

    def fulfill_put_request(self, resource_id: Any, validated_input: Mapping[str, Any]):
        return self._update(resource_id, validated_input, "PUT")

    def _update(self, resource_id: Any, validated_input: Mapping[str, Any], method: str):
        descriptor = self.descriptor
        data = dict(validated_input)
        # at this point the identifier should not be in data
        data.pop(descriptor.primary_key_field, None)
        if not data:
            raise ValidationError(f"There was no {method} data")
        if not self.get_persisted_resource(resource_id):
            raise NotFoundError(f"Resource: '{self.resource_name}', with identifier: '{resource_id}' was not found")

        sql = build_update(descriptor.table_name, descriptor.primary_key_field, data)
        data[descriptor.primary_key_field] = resource_id
        try:
            self.database.execute(sql, prefix_array_key(PLACEHOLDER, data))
        except SQLAlchemyError as exc:
            raise PersistenceError(exc)
        return self.empty_response(HTTPStatus.NO_CONTENT)

    def fulfill_delete_request(self, resource_id: Any):
        """
        Delete the resource, deleting a resource that doesn't exist also returns 204
        """
        descriptor = self.descriptor
        if self.get_persisted_resource(resource_id):
            sql = build_delete(descriptor.table_name, descriptor.primary_key_field)
            try:
                self.database.execute(sql, prefix_array_key(PLACEHOLDER, {descriptor.primary_key_field: resource_id}))
            except SQLAlchemyError as exc:
                raise PersistenceError(exc)
        else:
            simple_rest.log.debug(f"Nothing to delete: {self.resource_name} {resource_id}")
        return self.empty_response(HTTPStatus.NO_CONTENT)


class CrudController(ApiController):
    """
    Controller with the default GET, POST, PUT, PATCH and DELETE behavior
    """

    def get(self, resource_id=None, **kwargs):
        return self.fulfill_get_request(resource_id)

    def post(self, resource_id=None, **kwargs):
        if has_identifier(resource_id):
            # POSTing to an instance isn't allowed, new resources are created in the collection
            raise MethodNotAllowedError("POST", f"{self.resource_name}/{resource_id}")
        validation = self.post_validate(self.payload)
        if not validation.is_valid:
            self.raise_validation_error(validation)
        return self.fulfill_post_request(validation.data())

    def put(self, resource_id=None, **kwargs):
        validation = self.put_validate(resource_id, self.payload)
        if not validation.is_valid:
            self.raise_validation_error(validation)
        return self.fulfill_put_request(resource_id, validation.data())

    def patch(self, resource_id=None, **kwargs):
        validation = self.patch_validate(resource_id, self.payload)
        if not validation.is_valid:
            self.raise_validation_error(validation)
        return self.fulfill_patch_request(resource_id, validation.data())

    def delete(self, resource_id=None, **kwargs):
        validation = self.delete_validate(resource_id)
        if not validation.is_valid:
            self.raise_validation_error(validation)
        return self.fulfill_delete_request(resource_id)
