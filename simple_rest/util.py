#
# Mapping helpers used to bind statement parameters
#
from typing import Any, Dict, Mapping

# Named placeholder sigil shared by the statement builder and the parameter binding
PLACEHOLDER = ":"


def prefix_array_key(prefix: str, mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Prefix every key of a mapping, values are left untouched
    e.g. prefix_array_key(":", {"name": "bob"}) => {":name": "bob"}

    :param prefix: string prepended to each key
    :param mapping: field name => value mapping
    :return: new dict with the prefixed keys
    """
    return {f"{prefix}{key}": value for key, value in mapping.items()}


def strip_array_key_prefix(prefix: str, mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Inverse of prefix_array_key: keys that don't start with the prefix are kept as is
    """
    return {key[len(prefix) :] if key.startswith(prefix) else key: value for key, value in mapping.items()}
