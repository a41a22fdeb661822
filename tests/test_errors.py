import logging
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

import simple_rest
from simple_rest.controller import http_method_decorator
from simple_rest.errors import NotFoundError, PersistenceError, ValidationError


def test_error_body() -> None:
    error = ValidationError(errors={"name": "name must not be empty"})
    assert error.to_dict() == {
        "__error": {"__code": 400, "__message": "There was validation error", "__validation": {"name": "name must not be empty"}}
    }


def test_not_found_is_a_werkzeug_not_found() -> None:
    from werkzeug.exceptions import NotFound

    assert isinstance(NotFoundError("x"), NotFound)
    assert NotFoundError("x").to_dict()["__error"]["__code"] == 404


def test_persistence_error_hides_detail() -> None:
    error = PersistenceError("UNIQUE constraint failed: users.email")
    assert error.status_code == 500
    assert error.message == "Server Error"


def test_persistence_error_detail_in_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(simple_rest.log, "level", logging.DEBUG)
    error = PersistenceError("UNIQUE constraint failed")
    assert error.message == "Server Error: UNIQUE constraint failed"


def test_decorator_converts_database_errors(app) -> None:
    @http_method_decorator
    def handler():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    with app.test_request_context("/api/users"):
        response = handler()
    assert response.status_code == 500
    assert response.get_json()["__error"]["__message"] == "Server Error"


def test_decorator_converts_unexpected_errors(app) -> None:
    @http_method_decorator
    def handler():
        raise KeyError("boom")

    with app.test_request_context("/api/users"):
        response = handler()
    assert response.status_code == 500
    assert response.get_json()["__error"]["__message"].startswith("Generic Error")


def test_patch_without_identifier_never_reaches_persistence(app, users_controller, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("persistence should not be called")

    monkeypatch.setattr(users_controller, "database", SimpleNamespace(fetch=fail, insert=fail, execute=fail))
    with app.test_request_context("/api/users", method="PATCH", json={"name": "bob"}):
        response = users_controller().dispatch_request()
    assert response.status_code == 400
    assert response.get_json()["__error"]["__validation"] == {"id": "id is required in the URI to PATCH a resource"}


def test_post_without_data_never_reaches_persistence(app, users_controller, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("persistence should not be called")

    monkeypatch.setattr(users_controller, "database", SimpleNamespace(fetch=fail, insert=fail, execute=fail))
    with app.test_request_context("/api/users", method="POST", json={"id": 3}):
        response = users_controller().dispatch_request()
    assert response.status_code == 400
    assert response.get_json()["__error"]["__validation"] == {"name": "name must not be empty"}


def test_known_method_without_handler_is_not_allowed(app, users_controller) -> None:
    app.config["KNOWN_METHODS"] = ["GET", "TRACE"]
    with app.test_request_context("/api/users", method="TRACE"):
        response = users_controller().dispatch_request()
    assert response.status_code == 405
    assert response.get_json()["__error"]["__message"] == "TRACE method not allowed for Resource: 'users'"


@pytest.fixture
def failing_database(users_controller, monkeypatch: pytest.MonkeyPatch):
    def fetch(table_name, identifier_field, identifier=None):
        return [{"id": identifier, "name": "bob", "email": None}]

    def execute(sql, parameters):
        raise OperationalError(sql, dict(parameters), Exception("disk I/O error"))

    monkeypatch.setattr(users_controller, "database", SimpleNamespace(fetch=fetch, execute=execute))


@pytest.mark.parametrize(
    "method, kwargs",
    [
        ("patch", {"json": {"name": "robert"}}),
        ("put", {"json": {"name": "robert"}}),
        ("delete", {}),
    ],
)
def test_write_persistence_error(client, failing_database, method: str, kwargs: dict) -> None:
    response = getattr(client, method)("/api/users/1", **kwargs)
    assert response.status_code == 500
    assert response.get_json() == {"__error": {"__code": 500, "__message": "Server Error"}}
