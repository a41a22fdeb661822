# flake8: noqa: F401
#
# simple_rest: generic CRUD resource controllers
#
from .simple_rest_init import DB, log, SimpleRest
from .errors import (
    ApiError,
    InvalidArgument,
    UnknownMethodError,
    MethodNotAllowedError,
    PayloadParseError,
    ValidationError,
    NotFoundError,
    PersistenceError,
    GenericError,
)
from .request import SimpleRestRequest
from .resource import ResourceDescriptor
from .validation import Validation, BareRule, ParameterizedRule, validate
from .sql import build_insert, build_update, build_delete, build_select
from .util import prefix_array_key
from .payload import parse_payload
from .db import Database
from .controller import ApiController, CrudController
from .api import SimpleRestApi
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "SimpleRest",
    "SimpleRestApi",
    "DB",
    "log",
    # controllers:
    "ApiController",
    "CrudController",
    "ResourceDescriptor",
    "Database",
    # statements:
    "build_insert",
    "build_update",
    "build_delete",
    "build_select",
    "prefix_array_key",
    # request:
    "parse_payload",
    "SimpleRestRequest",
    # validation:
    "Validation",
    "BareRule",
    "ParameterizedRule",
    "validate",
    # Errors:
    "ApiError",
    "InvalidArgument",
    "UnknownMethodError",
    "MethodNotAllowedError",
    "PayloadParseError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "GenericError",
)
