# Response class
from flask import Response


class SimpleRestResponse(Response):
    """
    Response class, the controllers set the json content type of the API responses
    """
