# Configuration settings should be set in app.config or passed to SimpleRestApi
# The get_config function looks them up in this order:
# app.config, SimpleRest class variables, environment variables
import os
import logging
from flask import current_app
import simple_rest
from typing import Any, Optional


def get_config(option: str) -> Optional[Any]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # KeyError: not configured in the app, RuntimeError: no app context
        result = getattr(simple_rest.SimpleRest, option, None)
    if result is None:
        result = os.environ.get(option, None)
    return result


def get_config_list(option: str) -> list:
    """
    Retrieve a list of (upper case) names, environment variables may hold a comma separated list
    """
    value = get_config(option) or []
    if isinstance(value, str):
        value = value.split(",")
    return [str(item).strip().upper() for item in value if str(item).strip()]


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return simple_rest.log.getEffectiveLevel() < logging.INFO
