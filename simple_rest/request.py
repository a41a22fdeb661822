"""
Request class installed on the Flask app by SimpleRestApi

The payload property parses the raw entity body string of all the payload carrying methods
(json and form-encoded) with one parser, so the controllers can treat it as submitted form data.
request.form and request.get_json are not used.
"""
from flask import Request
from .config import get_config_list
from .payload import parse_payload, PAYLOAD_METHODS


# pylint: disable=too-many-ancestors
class SimpleRestRequest(Request):
    """
    Parse the request entity body:
    - header: Content-Type should be "application/json" or "application/x-www-form-urlencoded"
    - body: valid json object or url-encoded key/value pairs
    """

    _payload = None

    @property
    def payload_methods(self):
        return get_config_list("PAYLOAD_METHODS") or list(PAYLOAD_METHODS)

    @property
    def payload(self):
        """
        :return: the parsed request payload (field_name => value)
        :raises PayloadParseError: when the entity body can't be parsed
        """
        if self._payload is None:
            body = self.get_data(cache=True, as_text=True)
            self._payload = parse_payload(self.method, self.headers.get("Content-Type"), body, self.payload_methods)
        return self._payload
