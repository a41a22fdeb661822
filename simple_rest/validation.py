#
# Field validation
#
# A resource declares the validation rules of its fields, e.g.
#
#   fields = {
#       "name": ["not_empty", ("max_length", [":value", 50])],
#       "email": {"not_empty": None, "email": None},
#       "nickname": [],
#   }
#
# Rule definitions come in two forms:
#  - a bare rule name (or callable), called with the field value
#  - a rule name with a list of rule parameters, where the bound parameters
#    ":value", ":field" and ":validation" are replaced when the rule is checked
#
import ipaddress
import os
import re
import datetime
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union
import yaml
import simple_rest

RuleName = Union[str, Callable]
MESSAGES_DIR = os.path.join(os.path.dirname(__file__), "messages")
DEFAULT_CATALOG = "validation"


@dataclass(frozen=True)
class BareRule:
    """
    Rule without parameters, the field value is the only argument
    """

    name: RuleName
    params = None


@dataclass(frozen=True)
class ParameterizedRule:
    """
    Rule with an ordered parameter list
    """

    name: RuleName
    params: Tuple[Any, ...]


Rule = Union[BareRule, ParameterizedRule]


def make_rule(name: RuleName, params: Optional[Iterable[Any]] = None) -> Rule:
    if params is None:
        return BareRule(name)
    return ParameterizedRule(name, tuple(params))


def _is_rule_tuple(rules: Any) -> bool:
    """
    ("max_length", [":value", 5]) is a single rule, ("not_empty", "email") are two bare rules
    """
    if not (isinstance(rules, tuple) and len(rules) == 2):
        return False
    name, params = rules
    return (isinstance(name, str) or callable(name)) and (params is None or isinstance(params, (list, tuple)))


def parse_rules(rules: Any) -> Tuple[Rule, ...]:
    """
    Normalize the rule declaration of a field to a tuple of rules

    Accepted entries:
    - "rule_name" or a callable
    - ("rule_name", [params])
    - {"rule_name": [params], "other_rule": None}
    - BareRule / ParameterizedRule instances
    """
    if rules is None:
        return ()
    if isinstance(rules, (str, BareRule, ParameterizedRule)) or callable(rules) or _is_rule_tuple(rules):
        rules = [rules]
    if isinstance(rules, Mapping):
        rules = list(rules.items())

    result: List[Rule] = []
    for rule in rules:
        if isinstance(rule, (BareRule, ParameterizedRule)):
            result.append(rule)
        elif isinstance(rule, Mapping):
            result.extend(parse_rules(rule))
        elif isinstance(rule, tuple) and len(rule) == 2:
            name, params = rule
            result.append(make_rule(name, params))
        elif isinstance(rule, str) or callable(rule):
            result.append(BareRule(rule))
        else:
            raise TypeError(f"Invalid rule definition: {rule!r}")
    return tuple(result)


#
# Rules
#
def not_empty(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return False
    return True


def regex(value: Any, expression: str) -> bool:
    return re.search(expression, str(value)) is not None


def _lengths(length):
    if isinstance(length, (list, tuple)):
        return [int(l) for l in length]
    return [int(length)]


def min_length(value: Any, length: int) -> bool:
    return len(str(value)) >= int(length)


def max_length(value: Any, length: int) -> bool:
    return len(str(value)) <= int(length)


def exact_length(value: Any, length: Union[int, List[int]]) -> bool:
    return len(str(value)) in _lengths(length)


def equals(value: Any, required: Any) -> bool:
    return value == required


def email(value: Any) -> bool:
    return re.match(r"^[\w.!#$%&'*+/=?^`{|}~-]+@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)+$", str(value)) is not None


def url(value: Any) -> bool:
    return re.match(r"^(https?|ftp)://[^\s/$.?#][^\s]*$", str(value), re.IGNORECASE) is not None


def ip(value: Any, allow_private: bool = True) -> bool:
    try:
        address = ipaddress.ip_address(str(value))
    except ValueError:
        return False
    return allow_private or not address.is_private


def date(value: Any) -> bool:
    if isinstance(value, (datetime.date, datetime.datetime)):
        return True
    try:
        datetime.datetime.fromisoformat(str(value))
    except ValueError:
        return False
    return True


def alpha(value: Any) -> bool:
    return str(value).isalpha()


def alpha_numeric(value: Any) -> bool:
    return str(value).isalnum()


def alpha_dash(value: Any) -> bool:
    return re.match(r"^[-\w]+$", str(value)) is not None


def digit(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return str(value).isdigit()


def numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return re.match(r"^-?(?=.*[0-9])[0-9]*\.?[0-9]*$", str(value)) is not None


def decimal(value: Any, places: int = 2, digits: Optional[int] = None) -> bool:
    digits_expr = f"{{{int(digits)}}}" if digits else "+"
    return re.match(rf"^[+-]?[0-9]{digits_expr}\.[0-9]{{{int(places)}}}$", str(value)) is not None


def range(value: Any, minimum: Any, maximum: Any) -> bool:  # pylint: disable=redefined-builtin
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return float(minimum) <= number <= float(maximum)


def in_array(value: Any, options: Iterable[Any]) -> bool:
    return value in options


def matches(validation: "Validation", field: str, match: str) -> bool:
    return validation[field] == validation[match]


RULES: Dict[str, Callable[..., bool]] = {
    "not_empty": not_empty,
    "regex": regex,
    "min_length": min_length,
    "max_length": max_length,
    "exact_length": exact_length,
    "equals": equals,
    "email": email,
    "url": url,
    "ip": ip,
    "date": date,
    "alpha": alpha,
    "alpha_numeric": alpha_numeric,
    "alpha_dash": alpha_dash,
    "digit": digit,
    "numeric": numeric,
    "decimal": decimal,
    "range": range,
    "in_array": in_array,
    "matches": matches,
}


#
# Message catalogs
#
@lru_cache(maxsize=32)
def load_messages(catalog: str, directory: str = MESSAGES_DIR) -> Dict[str, Any]:
    """
    Load a yaml message catalog, e.g. messages/api.yaml
    :return: the catalog dict, empty if the file doesn't exist
    """
    path = os.path.join(directory, f"{catalog}.yaml")
    if not os.path.isfile(path):
        simple_rest.log.warning(f"Message catalog {path} not found")
        return {}
    with open(path, "rt") as fp:
        return yaml.safe_load(fp) or {}


def message(catalog: str, path: str) -> Optional[str]:
    """
    :param catalog: message catalog name
    :param path: dot separated path in the catalog, e.g. "PATCH.missing_identifier"
    :return: the message or None
    """
    result: Any = load_messages(catalog)
    for key in path.split("."):
        if not isinstance(result, Mapping) or key not in result:
            return None
        result = result[key]
    return result if isinstance(result, str) else None


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _substitute(text: str, values: Mapping[str, Any]) -> str:
    if not values:
        return text
    keys = sorted(values, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda m: _format_value(values[m.group(0)]), text)


class Validation:
    """
    Validate an input mapping against per-field rules:

    validation = Validation({"name": "bob"})
    validation.rule("name", "not_empty")
    validation.rule("name", "max_length", [":value", 10])
    if not validation.check():
        errors = validation.errors("api")
    """

    # rules that are checked even if the field is empty
    empty_rules = ("not_empty", "matches")

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = dict(data)
        self._rules: Dict[str, List[Tuple[RuleName, List[Any]]]] = {}
        self._labels: Dict[str, str] = {}
        self._bound: Dict[str, Any] = {}
        self._errors: Dict[str, Tuple[str, Optional[List[Any]]]] = {}
        self._checked = False

    def __getitem__(self, field: str) -> Any:
        return self._data.get(field)

    def __contains__(self, field: str) -> bool:
        return field in self._data

    @property
    def is_valid(self) -> bool:
        return self._checked and not self._errors

    def label(self, field: str, label: str) -> "Validation":
        self._labels[field] = label
        return self

    def rule(self, field: str, rule: RuleName, params: Optional[Iterable[Any]] = None) -> "Validation":
        """
        Register a rule for a field, the default parameter list is [":value"]
        """
        if params is None:
            params = [":value"]
        if field not in self._labels:
            self._labels[field] = re.sub(r"[^a-zA-Z]+", " ", field).strip() or field
        self._rules.setdefault(field, []).append((rule, list(params)))
        return self

    def rules(self, field: str, rules: Any) -> "Validation":
        for rule in parse_rules(rules):
            self.rule(field, rule.name, rule.params)
        return self

    def bind(self, key: str, value: Any) -> "Validation":
        self._bound[key] = value
        return self

    def error(self, field: str, error: str, params: Optional[List[Any]] = None) -> "Validation":
        self._errors[field] = (error, params)
        return self

    def _bind_params(self, params: List[Any]) -> List[Any]:
        return [self._bound.get(param, param) if isinstance(param, str) else param for param in params]

    def check(self) -> bool:
        """
        Run the registered rules, the first failing rule of a field is recorded as its error
        :return: True if all the rules passed
        """
        self._errors = {}
        self.bind(":validation", self)
        for field, rules in self._rules.items():
            value = self._data.get(field)
            self.bind(":field", field)
            self.bind(":value", value)
            for rule, params in rules:
                rule_name = getattr(rule, "__name__", str(rule)) if callable(rule) else rule
                if rule_name not in self.empty_rules and not not_empty(value):
                    continue
                bound_params = self._bind_params(params)
                if callable(rule):
                    passed = rule(*bound_params)
                elif rule in RULES:
                    passed = RULES[rule](*bound_params)
                else:
                    raise ValueError(f"Unknown validation rule '{rule}' for field '{field}'")
                if passed is False:
                    self.error(field, rule_name, bound_params)
                    break
        self._checked = True
        return not self._errors

    def data(self) -> Dict[str, Any]:
        """
        :return: copy of the validated input
        """
        return dict(self._data)

    def errors(self, catalog: Optional[str] = None) -> Dict[str, Any]:
        """
        :param catalog: name of the message catalog used to translate the errors,
                        if None the raw [error, params] pairs are returned
        :return: field => error message
        """
        if catalog is None:
            return {field: [error, params] for field, (error, params) in self._errors.items()}

        messages = {}
        for field, (error, params) in self._errors.items():
            label = self._labels.get(field, field)
            values = {":field": label, ":value": self._data.get(field)}
            for index, param in enumerate(params or [], 1):
                if isinstance(param, Validation):
                    continue
                if isinstance(param, str) and param in self._labels:
                    param = self._labels[param]
                values[f":param{index}"] = param
            text = (
                message(catalog, f"{field}.{error}")
                or message(catalog, f"{field}.default")
                or message(catalog, error)
                or message(DEFAULT_CATALOG, error)
                or f"{catalog}/{field}.{error}"
            )
            messages[field] = _substitute(text, values)
        return messages


def validate(data: Mapping[str, Any], fields: Mapping[str, Any], labels: Optional[Mapping[str, str]] = None) -> Validation:
    """
    Build a validator for the input, register the field rules and check them

    :param data: input mapping
    :param fields: field_name => rule declaration
    :param labels: field_name => label used in the error messages
    :return: the checked Validation
    """
    validation = Validation(data)
    for field, label in (labels or {}).items():
        validation.label(field, label)
    for field, rules in fields.items():
        validation.rules(field, rules)
    validation.check()
    return validation
