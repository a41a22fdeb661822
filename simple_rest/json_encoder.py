# json encoding of the database rows

import datetime
import decimal
from uuid import UUID
from flask.json.provider import DefaultJSONProvider
import simple_rest
from typing import Any


class _SimpleRestJSONEncoder:
    """
    JSON encoding for the column types returned by the database drivers
    """

    # pylint: disable=too-many-return-statements,arguments-differ,method-hidden
    def default(self, obj: Any, **kwargs) -> Any:
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if obj is None:
            return None
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, (bytes, memoryview)):
            obj = bytes(obj)
            if obj == b"":
                return ""
            simple_rest.log.debug("SimpleRestJSONEncoder: serializing bytes obj")
            return obj.hex()

        simple_rest.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
        return str(obj)


class SimpleRestJSONProvider(_SimpleRestJSONEncoder, DefaultJSONProvider):
    """
    Flask JSON encoding
    """

    sort_keys = False
