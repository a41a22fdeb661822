"""
Request entity body parsing

Only the payload carrying HTTP methods (POST, PUT, PATCH by default) are parsed.
The body is parsed according to the request Content-Type:
- application/x-www-form-urlencoded : url-encoded key/value pairs
- application/json : a json object, its keys are the field names

The result is the field_name => value mapping that is validated by the controllers
"""
import json
from typing import Any, Dict, Iterable, Optional
from urllib.parse import parse_qsl
from .errors import PayloadParseError

CONTENT_TYPE_FORM_ENCODE = "application/x-www-form-urlencoded"
CONTENT_TYPE_JSON = "application/json"
SUPPORTED_CONTENT_TYPES = (CONTENT_TYPE_JSON, CONTENT_TYPE_FORM_ENCODE)
PAYLOAD_METHODS = ("POST", "PUT", "PATCH")


def media_type(content_type: Optional[str]) -> Optional[str]:
    """
    :param content_type: Content-Type header value, e.g. "application/json; charset=utf-8"
    :return: the media type without parameters, e.g. "application/json"
    """
    if content_type is None:
        return None
    return content_type.split(";")[0].strip().lower()


def parse_form_encoded(body: str) -> Dict[str, Any]:
    parsed_payload = dict(parse_qsl(body, keep_blank_values=True))
    if not parsed_payload:
        raise PayloadParseError(f"HTTP entity body failed to parse as '{CONTENT_TYPE_FORM_ENCODE}' Entity body received was: '{body}'")
    return parsed_payload


def parse_json(body: str) -> Dict[str, Any]:
    try:
        parsed_payload = json.loads(body)
    except ValueError:
        raise PayloadParseError(f"HTTP entity body failed to parse as '{CONTENT_TYPE_JSON}'  Check syntax and retry request")
    if not isinstance(parsed_payload, dict):
        raise PayloadParseError(f"HTTP entity body parsed as '{CONTENT_TYPE_JSON}' must be an object, got {type(parsed_payload).__name__}")
    return parsed_payload


def parse_payload(method: str, content_type: Optional[str], body: str, payload_methods: Iterable[str] = PAYLOAD_METHODS) -> Dict[str, Any]:
    """
    Parse the request entity body to a field mapping

    :param method: HTTP request method
    :param content_type: Content-Type request header (None if missing)
    :param body: raw request body
    :param payload_methods: the HTTP methods for which we parse the body
    :return: parsed payload, empty if the method carries no payload or the body is empty
    :raises PayloadParseError: when the body can't be parsed
    """
    payload_methods = [m.upper() for m in payload_methods]
    if method.upper() not in payload_methods or not (body or "").strip():
        return {}

    request_media_type = media_type(content_type)
    if request_media_type == CONTENT_TYPE_FORM_ENCODE:
        return parse_form_encoded(body)
    if request_media_type == CONTENT_TYPE_JSON:
        return parse_json(body)

    header_value = "<missing>" if content_type is None else f"'{content_type}'"
    raise PayloadParseError(
        "Unknown or missing 'Content-Type' HTTP header value."
        f"  Value found: {header_value}  Supported Content-Type are '{CONTENT_TYPE_JSON}' and '{CONTENT_TYPE_FORM_ENCODE}'"
    )
