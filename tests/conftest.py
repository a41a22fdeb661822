import pytest
from flask import Flask
from sqlalchemy import text
from simple_rest import DB, SimpleRestApi, ApiController, CrudController


class Users(CrudController):
    """
    description: users with a required name
    """

    table_name = "users"
    fields = {
        "id": [],
        "name": ["not_empty", ("max_length", [":value", 20])],
        "email": ["email"],
    }


class Tags(CrudController):
    table_name = "tags"
    fields = {"label": {"max_length": [":value", 10]}}


class Notes(ApiController):
    """
    read-only resource: only GET is supported
    """

    table_name = "notes"
    primary_key_field = "note_id"
    fields = {"body": ["not_empty"]}

    def get(self, resource_id=None, **kwargs):
        return self.fulfill_get_request(resource_id)


SCHEMA = [
    "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name VARCHAR(20) NOT NULL, email VARCHAR(50) UNIQUE)",
    "CREATE TABLE tags (id INTEGER PRIMARY KEY AUTOINCREMENT, label VARCHAR(10))",
    "CREATE TABLE notes (note_id INTEGER PRIMARY KEY AUTOINCREMENT, body TEXT)",
]


@pytest.fixture
def app():
    app = Flask("test_app")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    DB.init_app(app)
    api = SimpleRestApi(app, prefix="/api")
    api.expose(Users, Tags, Notes)
    with app.app_context():
        for statement in SCHEMA:
            DB.session.execute(text(statement))
        DB.session.commit()
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(client):
    response = client.post("/api/users", json={"name": "bob", "email": "bob@example.org"})
    assert response.status_code == 201
    return response.get_json()


@pytest.fixture
def users_controller():
    return Users
