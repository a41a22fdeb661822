import re

import pytest

from simple_rest.errors import InvalidArgument
from simple_rest.sql import build_delete, build_insert, build_select, build_update, quote_identifier
from simple_rest.util import prefix_array_key, strip_array_key_prefix


def test_build_insert() -> None:
    sql = build_insert("users", {"name": "bob", "email": "bob@example.org"})
    assert sql == "INSERT INTO `users` (`name`, `email`) VALUES(:name, :email)"


def test_build_insert_placeholders_follow_columns() -> None:
    fields = {"c": 3, "a": 1, "b": 2}
    sql = build_insert("t", fields)
    columns = re.findall(r"`(\w+)`", sql.split("VALUES")[0])[1:]
    placeholders = re.findall(r":(\w+)", sql)
    assert columns == placeholders == list(fields)


def test_values_are_never_interpolated() -> None:
    sql = build_insert("users", {"name": "'; DROP TABLE users; --"})
    assert "DROP" not in sql


@pytest.mark.parametrize("builder", [lambda: build_insert("users", {}), lambda: build_update("users", "id", {})])
def test_empty_fields_are_rejected(builder) -> None:
    with pytest.raises(InvalidArgument):
        builder()


def test_invalid_argument_is_a_value_error() -> None:
    assert issubclass(InvalidArgument, ValueError)


def test_build_update() -> None:
    sql = build_update("users", "id", {"name": "bob", "email": "b@x.org"})
    assert sql == "UPDATE `users` SET `name` = :name, `email` = :email WHERE `id` = :id"


def test_build_delete() -> None:
    assert build_delete("users", "user_id") == "DELETE FROM `users` WHERE `user_id` = :user_id"


def test_build_select() -> None:
    assert build_select("users") == "SELECT * FROM `users`"
    assert build_select("users", "id") == "SELECT * FROM `users` WHERE `id` = :id"


def test_quote_identifier_doubles_quotes() -> None:
    assert quote_identifier("we`ird") == "`we``ird`"


def test_prefix_array_key() -> None:
    mapping = {"name": "bob", "age": 3}
    result = prefix_array_key(":", mapping)
    assert result == {":name": "bob", ":age": 3}
    assert mapping == {"name": "bob", "age": 3}


def test_prefix_array_key_empty() -> None:
    assert prefix_array_key(":", {}) == {}


def test_strip_array_key_prefix() -> None:
    assert strip_array_key_prefix(":", {":name": "bob", "id": 1}) == {"name": "bob", "id": 1}
