# -*- coding: utf-8 -*-
#
# Persistence: executes the parameterized statements on the Flask-SQLAlchemy session
#
# Every write statement is committed on its own, a failing statement is rolled back
# and the sqlalchemy exception is propagated to the caller
#
from typing import Any, Dict, List, Mapping, Optional, Tuple
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import simple_rest
from .sql import build_select, placeholder
from .util import PLACEHOLDER, strip_array_key_prefix


class Database:
    """
    Persistence collaborator of the controllers

    The generated identifier of an insert is read from the DBAPI cursor lastrowid,
    this is only supported by the SQLite and MySQL drivers. With other backends
    insert returns None as identifier.

    :param db: flask_sqlalchemy.SQLAlchemy instance, defaults to simple_rest.DB
    """

    def __init__(self, db: Any = None) -> None:
        self._db = db

    @property
    def session(self):
        db = self._db if self._db is not None else simple_rest.DB
        return db.session

    def fetch(self, table_name: str, identifier_field: str, identifier: Optional[Any] = None) -> List[Dict[str, Any]]:
        """
        :param table_name: table to select from
        :param identifier_field: primary key column
        :param identifier: if None, this is a get all
        :return: list of rows (column => value)
        """
        if identifier is None:
            sql = build_select(table_name)
            params = {}
        else:
            sql = build_select(table_name, identifier_field)
            params = {placeholder(identifier_field): identifier}
        result = self._execute(sql, params)
        return [dict(row._mapping) for row in result]

    def insert(self, sql: str, parameters: Mapping[str, Any]) -> Tuple[Any, int]:
        """
        :param sql: INSERT statement
        :param parameters: placeholder-keyed parameters, e.g. {":name": "bob"}
        :return: generated identifier, affected rows
        """
        result = self._execute(sql, parameters)
        identifier, rows_affected = result.lastrowid, result.rowcount
        self._commit()
        return identifier, rows_affected

    def execute(self, sql: str, parameters: Mapping[str, Any]) -> int:
        """
        Execute an UPDATE or DELETE statement
        :return: affected rows
        """
        rows_affected = self._execute(sql, parameters).rowcount
        self._commit()
        return rows_affected

    def _execute(self, sql: str, parameters: Mapping[str, Any]):
        session = self.session
        bind_params = strip_array_key_prefix(PLACEHOLDER, parameters)
        simple_rest.log.debug("Executing %s %s", sql, bind_params)
        try:
            return session.execute(text(sql), bind_params)
        except SQLAlchemyError:
            session.rollback()
            raise

    def _commit(self) -> None:
        session = self.session
        try:
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
