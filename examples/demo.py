#!/usr/bin/env python
# run:
# $ python demo.py
# $ curl -X POST -H "Content-Type: application/json" -d '{"name": "bob", "email": "bob@example.org"}' http://127.0.0.1:5000/api/users
# $ curl -X PATCH -d "name=robert" http://127.0.0.1:5000/api/users/1
from flask import Flask
from sqlalchemy import text
from simple_rest import DB, SimpleRestApi, ApiController, CrudController


class Users(CrudController):
    """
    Users: all the CRUD methods
    """

    table_name = "users"
    fields = {
        "name": ["not_empty", ("max_length", [":value", 50])],
        "email": ["email"],
        "age": [("range", [":value", 0, 150])],
    }


class Books(ApiController):
    """
    Books can only be listed and created
    """

    table_name = "books"
    primary_key_field = "book_id"
    fields = {"title": ["not_empty"], "user_id": ["digit"]}

    def get(self, resource_id=None, **kwargs):
        return self.fulfill_get_request(resource_id)

    def post(self, **kwargs):
        validation = self.post_validate(self.payload)
        if not validation.is_valid:
            self.raise_validation_error(validation)
        data = validation.data()
        data["title"] = data["title"].strip()
        return self.fulfill_post_request(data)


def create_app(host="127.0.0.1"):
    app = Flask("demo_app")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite:///demo.sqlitedb", DEBUG=True)
    DB.init_app(app)
    api = SimpleRestApi(app, prefix="/api")
    api.expose(Users, Books)
    with app.app_context():
        DB.session.execute(text("CREATE TABLE IF NOT EXISTS users (id INTEGER PRIMARY KEY, name VARCHAR(50), email VARCHAR(100), age INTEGER)"))
        DB.session.execute(text("CREATE TABLE IF NOT EXISTS books (book_id INTEGER PRIMARY KEY, title TEXT, user_id INTEGER)"))
        DB.session.commit()
    print(f"Starting API: http://{host}:5000/api/users")
    return app


app = create_app()

if __name__ == "__main__":
    app.run()
