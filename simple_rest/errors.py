# Exception Handlers
#
# The exceptions will be caught in http_method_decorator and formatted, for example:
# {
#     "__error": {
#         "__code": 404,
#         "__message": "Resource with identifier [12] Not Found"
#     }
# }
#
# Server side errors only show their detail to the client when the loglevel is debug
#
from http import HTTPStatus
from werkzeug.exceptions import NotFound
import simple_rest
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class InvalidArgument(ValueError):
    """
    Raised by the statement builder when it's called with unusable arguments
    """


class ApiError(Exception):
    """
    Base class for the errors that are sent back to the client as
    {"__error": {"__code": ..., "__message": ..., **additional}}
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""

    def __init__(self, message="", status_code=None, additional=None):
        Exception.__init__(self, message)
        if status_code is not None:
            self.status_code = int(status_code)
        self.message = message or self.message
        self.additional = dict(additional or {})

    def to_dict(self):
        """
        :return: json serializable error body
        """
        error_values = {"__code": self.status_code, "__message": self.message}
        error_values.update(self.additional)
        return {"__error": error_values}


class UnknownMethodError(ApiError):
    """
    The HTTP request method isn't one of the known methods
    """

    status_code = HTTPStatus.BAD_REQUEST.value

    def __init__(self, method, known_methods):
        message = f"HTTP Method {method} not known. Known methods: {', '.join(known_methods)}"
        simple_rest.log.warning(message)
        super().__init__(message)


class MethodNotAllowedError(ApiError):
    """
    Raised by the default verb handlers of a controller that doesn't support the verb
    """

    status_code = HTTPStatus.METHOD_NOT_ALLOWED.value

    def __init__(self, method, resource_name):
        super().__init__(f"{method} method not allowed for Resource: '{resource_name}'")


class PayloadParseError(ApiError):
    """
    The request entity body could not be parsed to a field mapping
    """

    status_code = HTTPStatus.BAD_REQUEST.value

    def __init__(self, message=""):
        simple_rest.log.warning("PayloadParseError: %s", message)
        super().__init__(message)


class ValidationError(ApiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "There was validation error"

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value, errors=None):
        additional = {"__validation": errors} if errors is not None else None
        simple_rest.log.warning("ValidationError: %s %s", message or self.message, errors or "")
        super().__init__(message, status_code, additional)
        self.errors = errors


class NotFoundError(ApiError, NotFound):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "Not Found"

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value):
        ApiError.__init__(self, message, status_code)
        simple_rest.log.info("Not found: %s", message)


class PersistenceError(ApiError):
    """
    A statement failed to execute. The database error is logged, the client only gets a generic message
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = "Server Error"

    def __init__(self, detail=""):
        super().__init__()
        simple_rest.log.error("PersistenceError: %s", detail)
        if is_debug():
            self.message = f"{self.message}: {detail}"


class GenericError(ApiError):
    """
    Unexpected server side error
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = "Generic Error: "

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        super().__init__(status_code=status_code)
        simple_rest.log.error("Generic Error: %s", message)
        if is_debug():
            self.message = f"{self.message}{message}"
        else:
            self.message = f"{self.message}{HIDDEN_LOG}"
