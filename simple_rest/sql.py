#
# Parameterized SQL statement construction for single table CRUD
#
# Table and column names are quoted identifiers taken from the resource allow-list,
# values are never written into the statement text: they're bound through named placeholders
# e.g. INSERT INTO `Users` (`name`, `email`) VALUES(:name, :email)
#
from typing import Any, Mapping, Optional
from .errors import InvalidArgument
from .util import PLACEHOLDER

IDENTIFIER_QUOTE = "`"


def quote_identifier(name: str) -> str:
    """
    :param name: table or column name
    :return: quoted identifier, embedded quote characters are doubled
    """
    escaped = str(name).replace(IDENTIFIER_QUOTE, IDENTIFIER_QUOTE * 2)
    return f"{IDENTIFIER_QUOTE}{escaped}{IDENTIFIER_QUOTE}"


def placeholder(name: str) -> str:
    return f"{PLACEHOLDER}{name}"


def _where_identifier(identifier_field: str) -> str:
    return f"WHERE {quote_identifier(identifier_field)} = {placeholder(identifier_field)}"


def build_insert(table_name: str, fields: Mapping[str, Any]) -> str:
    """
    :param table_name: name of the table
    :param fields: field_name => value mapping, e.g. {"name": "bob", ...}
    :return: INSERT statement with one placeholder per field
    :raises InvalidArgument: when fields is empty
    """
    if not fields:
        raise InvalidArgument("Param: fields cannot be empty")
    fields_list = ", ".join(quote_identifier(field_name) for field_name in fields)
    placeholder_list = ", ".join(placeholder(field_name) for field_name in fields)
    return f"INSERT INTO {quote_identifier(table_name)} ({fields_list}) VALUES({placeholder_list})"


def build_update(table_name: str, identifier_field: str, fields: Mapping[str, Any]) -> str:
    """
    The identifier field should not be part of fields, the caller has to strip it

    :param table_name: name of the table
    :param identifier_field: primary key column used in the WHERE clause
    :param fields: field_name => value mapping of the columns to update
    :return: UPDATE statement
    :raises InvalidArgument: when fields is empty
    """
    if not fields:
        raise InvalidArgument("Param: fields cannot be empty")
    set_list = ", ".join(f"{quote_identifier(field_name)} = {placeholder(field_name)}" for field_name in fields)
    return f"UPDATE {quote_identifier(table_name)} SET {set_list} {_where_identifier(identifier_field)}"


def build_delete(table_name: str, identifier_field: str) -> str:
    return f"DELETE FROM {quote_identifier(table_name)} {_where_identifier(identifier_field)}"


def build_select(table_name: str, identifier_field: Optional[str] = None) -> str:
    """
    :param table_name: name of the table
    :param identifier_field: if given, select a single row by this column
    :return: SELECT statement for the whole table or a single row
    """
    sql = f"SELECT * FROM {quote_identifier(table_name)}"
    if identifier_field:
        sql = f"{sql} {_where_identifier(identifier_field)}"
    return sql
