import pytest

from simple_rest.resource import ResourceDescriptor
from simple_rest.validation import BareRule, ParameterizedRule, Validation, parse_rules, validate


def test_parse_rules_forms() -> None:
    rules = parse_rules(["not_empty", ("max_length", [":value", 5])])
    assert rules == (BareRule("not_empty"), ParameterizedRule("max_length", (":value", 5)))
    assert parse_rules({"not_empty": None, "regex": [":value", "^a"]}) == (BareRule("not_empty"), ParameterizedRule("regex", (":value", "^a")))
    assert parse_rules("email") == (BareRule("email"),)
    assert parse_rules(("max_length", [":value", 5])) == (ParameterizedRule("max_length", (":value", 5)),)
    assert parse_rules(("not_empty", "email")) == (BareRule("not_empty"), BareRule("email"))
    assert parse_rules(None) == ()


def test_parse_rules_rejects_garbage() -> None:
    with pytest.raises(TypeError):
        parse_rules([42])


def test_validation_passes() -> None:
    validation = validate({"name": "bob"}, {"name": ["not_empty", ("max_length", [":value", 5])]})
    assert validation.is_valid
    assert validation.data() == {"name": "bob"}
    assert validation.errors("api") == {}


def test_first_failing_rule_is_reported() -> None:
    validation = validate({"name": "bobbybobby"}, {"name": ["not_empty", ("max_length", [":value", 5]), "alpha_numeric"]})
    assert not validation.is_valid
    assert validation.errors() == {"name": ["max_length", ["bobbybobby", 5]]}
    assert validation.errors("api") == {"name": "name must not exceed 5 characters long"}


def test_empty_values_only_run_empty_rules() -> None:
    assert validate({"email": ""}, {"email": ["email"]}).is_valid
    validation = validate({}, {"email": ["not_empty", "email"]})
    assert validation.errors("api") == {"email": "email must not be empty"}


def test_labels_are_used_in_messages() -> None:
    validation = validate({"first_name": ""}, {"first_name": ["not_empty"]}, labels={"first_name": "First name"})
    assert validation.errors("api") == {"first_name": "First name must not be empty"}


def test_default_labels_replace_non_letters() -> None:
    validation = validate({}, {"first_name": ["not_empty"]})
    assert validation.errors("api") == {"first_name": "first name must not be empty"}


def test_callable_rule() -> None:
    def is_even(value):
        return int(value) % 2 == 0

    assert validate({"n": "4"}, {"n": [is_even]}).is_valid
    validation = validate({"n": "3"}, {"n": [is_even]})
    assert validation.errors() == {"n": ["is_even", ["3"]]}


def test_matches_uses_the_validation() -> None:
    rules = {"password": [("matches", [":validation", ":field", "confirm"])]}
    assert validate({"password": "a", "confirm": "a"}, rules).is_valid
    validation = validate({"password": "a", "confirm": "b"}, rules)
    assert validation.errors("api") == {"password": "password must be the same as confirm"}


@pytest.mark.parametrize(
    "rule, value, expected",
    [
        ("email", "bob@example.org", True),
        ("email", "bob@", False),
        ("url", "https://example.org/x", True),
        ("url", "example.org", False),
        ("digit", "123", True),
        ("digit", "12a", False),
        ("numeric", "-1.5", True),
        ("numeric", "1e", False),
        ("alpha", "abc", True),
        ("alpha_dash", "a-b_c1", True),
        ("ip", "10.0.0.1", True),
        ("ip", "10.0.0.300", False),
        ("date", "2024-02-29", True),
        ("date", "yesterday-ish", False),
    ],
)
def test_bare_rules(rule, value, expected) -> None:
    assert validate({"f": value}, {"f": [rule]}).is_valid is expected


def test_parameterized_rules() -> None:
    assert validate({"f": "5"}, {"f": [("range", [":value", 1, 10])]}).is_valid
    assert not validate({"f": "11"}, {"f": [("range", [":value", 1, 10])]}).is_valid
    assert validate({"f": "red"}, {"f": [("in_array", [":value", ["red", "blue"]])]}).is_valid
    assert validate({"f": "abc"}, {"f": [("regex", [":value", "^a"])]}).is_valid
    assert validate({"f": "1.25"}, {"f": [("decimal", [":value", 2])]}).is_valid


def test_unknown_rule() -> None:
    with pytest.raises(ValueError):
        validate({"f": "x"}, {"f": ["no_such_rule"]})


def test_custom_error_is_translated() -> None:
    validation = Validation({}).label("id", "id")
    validation.error("id", "PATCH.missing_identifier")
    assert not validation.is_valid
    assert validation.errors("api") == {"id": "id is required in the URI to PATCH a resource"}


def test_untranslated_error() -> None:
    validation = Validation({}).error("id", "custom")
    assert validation.errors("api") == {"id": "api/id.custom"}


def test_check_resets_errors() -> None:
    validation = Validation({"name": "bob"}).rule("name", "not_empty")
    validation.error("name", "custom")
    assert validation.check()
    assert validation.is_valid


def test_resource_descriptor() -> None:
    descriptor = ResourceDescriptor("users", {"name": "not_empty", "email": None})
    assert descriptor.primary_key_field == "id"
    assert descriptor.collection_name == "users"
    assert descriptor.fields["name"] == (BareRule("not_empty"),)
    assert descriptor.fields["email"] == ()
    assert descriptor.allowed({"name": "bob", "admin": True}) == {"name": "bob"}
    assert descriptor.rules_for({"email": "x"}) == {"email": ()}
    assert descriptor.non_scalar({"name": ["bob"], "email": {"a": 1}, "id": 1}) == ("name", "email")
    with pytest.raises(TypeError):
        descriptor.fields["admin"] = ()


def test_resource_descriptor_needs_a_table() -> None:
    with pytest.raises(ValueError):
        ResourceDescriptor("")
