#
# Resource descriptor: the table, primary key and field allow-list exposed by a controller
#
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple
from .validation import Rule, parse_rules


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Immutable description of a single table resource

    :param table_name: database table
    :param fields: allow-list of the fields accepted from client input, field_name => rules
    :param primary_key_field: identifier column
    :param collection_name: url path segment of the collection, defaults to the table name
    """

    table_name: str
    fields: Mapping[str, Tuple[Rule, ...]] = field(default_factory=dict)
    primary_key_field: str = "id"
    collection_name: str = ""

    def __post_init__(self) -> None:
        if not self.table_name:
            raise ValueError("A resource needs a table_name")
        rules = {field_name: parse_rules(field_rules) for field_name, field_rules in dict(self.fields).items()}
        object.__setattr__(self, "fields", MappingProxyType(rules))
        if not self.collection_name:
            object.__setattr__(self, "collection_name", self.table_name)

    def allowed(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        :param data: client input
        :return: the items of data whose key is in the allow-list
        """
        return {key: value for key, value in data.items() if key in self.fields}

    @staticmethod
    def non_scalar(data: Mapping[str, Any]) -> Tuple[str, ...]:
        """
        :return: the fields of data holding a list or an object, these can't be bound to a column
        """
        return tuple(key for key, value in data.items() if isinstance(value, (Mapping, list, tuple, set)))

    def rules_for(self, data: Mapping[str, Any]) -> Dict[str, Tuple[Rule, ...]]:
        """
        :return: the rules of the fields present in data (used for partial updates)
        """
        return {field_name: rules for field_name, rules in self.fields.items() if field_name in data}
