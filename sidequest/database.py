"""SQLite storage with cached prepared statements and column lookups."""

from __future__ import annotations

import math
import os
import re
import sqlite3
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple, Union


class ResultCode(IntEnum):
    """SQLite result codes used by the storage layer."""

    OK = 0
    ERROR = 1
    CONSTRAINT = 19
    MISUSE = 21
    RANGE = 25
    ROW = 100
    DONE = 101


class DatabaseNotFoundException(RuntimeError):
    """The database file could not be opened."""


class ParameterBindException(RuntimeError):
    """A statement could not be prepared or a parameter could not be bound."""

    def __init__(self, message: str, error_code: int) -> None:
        super().__init__(message)
        self.error_code = error_code


class UnableToCreateObjectException(RuntimeError):
    """An object could not be inserted."""

    def __init__(self, key: str) -> None:
        super().__init__("UnableToCreateObject: " + key)


class UnableToReadObjectException(RuntimeError):
    """An object could not be found."""

    def __init__(self, key: str) -> None:
        super().__init__("UnableToReadObjectException: " + key)


class UnableToUpdateObjectException(RuntimeError):
    """An object could not be updated."""

    def __init__(self, key: str) -> None:
        super().__init__("UnableToUpdateObjectException: " + key)


class UnableToDeleteObjectException(RuntimeError):
    """An object could not be deleted."""

    def __init__(self, key: str) -> None:
        super().__init__("UnableToDeleteObjectException: " + key)


_SQL_TOKENS = re.compile(
    r"'[^']*'|\"[^\"]*\"|`[^`]*`|\[[^\]]*\]|--[^\n]*|/\*.*?(?:\*/|\Z)|\?(\d*)",
    re.DOTALL,
)
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def _parameter_count(sql: str) -> int:
    """Return the largest positional parameter index used in ``sql``."""
    count = 0
    for match in _SQL_TOKENS.finditer(sql):
        if not match.group(0).startswith("?"):
            continue
        number = match.group(1)
        count = max(count, int(number)) if number else count + 1
    return count


def _error_code(exc: BaseException) -> int:
    code = getattr(exc, "sqlite_errorcode", None)
    if code is not None:
        return code & 0xFF
    if isinstance(exc, sqlite3.IntegrityError):
        return ResultCode.CONSTRAINT
    return ResultCode.ERROR


def _to_int32(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, float):
        number = 0 if math.isnan(value) or math.isinf(value) else int(value)
    elif isinstance(value, (str, bytes)):
        text = value.decode("utf-8", "replace") if isinstance(value, bytes) else value
        match = _LEADING_INTEGER.match(text)
        number = int(match.group(1)) if match else 0
    else:
        number = int(value)
    return ((number + 2**31) % 2**32) - 2**31


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return str(value)


class PreparedStatement:
    """A compiled SQL statement with positional bindings and a current row."""

    def __init__(self, connection: sqlite3.Connection, sql: str) -> None:
        self.sql = sql
        self.parameter_count = _parameter_count(sql)
        self.row: Optional[Tuple[Any, ...]] = None
        self._connection = connection
        self._bindings: List[Any] = [None] * self.parameter_count
        self._cursor: Optional[sqlite3.Cursor] = None
        self._columns: Tuple[str, ...] = ()
        try:
            connection.execute("EXPLAIN " + sql, self._bindings).close()
        except (sqlite3.Error, sqlite3.Warning) as exc:
            raise ParameterBindException(sql, _error_code(exc)) from exc

    @property
    def column_names(self) -> Tuple[str, ...]:
        """Names of the result columns, known once the statement has run."""
        return self._columns

    def _bind(self, parameter_index: int, value: Any) -> int:
        if self.row is not None:
            return ResultCode.MISUSE
        if not 1 <= parameter_index <= self.parameter_count:
            return ResultCode.RANGE
        self._bindings[parameter_index - 1] = value
        return ResultCode.OK

    def _step(self) -> int:
        try:
            if self._cursor is None:
                self._cursor = self._connection.execute(self.sql, self._bindings)
                if self._cursor.description is not None:
                    self._columns = tuple(column[0] for column in self._cursor.description)
            self.row = self._cursor.fetchone()
        except (sqlite3.Error, sqlite3.Warning) as exc:
            self._reset()
            return _error_code(exc)
        if self.row is None:
            # A finished statement starts over on its next step.
            self._reset()
            return ResultCode.DONE
        return ResultCode.ROW

    def _reset(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
        self._cursor = None
        self.row = None


class StatementCache:
    """Prepared statements of one database, keyed by their SQL text."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.prepared_statements: Dict[str, PreparedStatement] = {}

    def get_statement(self, statement_sql: str) -> Optional[PreparedStatement]:
        """Return the cached statement for ``statement_sql``, or None."""
        return self.prepared_statements.get(statement_sql)

    def add_statement(self, statement_sql: str) -> PreparedStatement:
        """Prepare ``statement_sql`` and cache it."""
        statement = PreparedStatement(self.database._connection, statement_sql)
        self.prepared_statements[statement_sql] = statement
        return statement

    def _close_all(self) -> None:
        for statement in self.prepared_statements.values():
            statement._reset()
        self.prepared_statements.clear()


ColumnMap = Dict[str, int]


class ColumnCache:
    """Maps column names to indices for each prepared statement."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.columns_by_statement: Dict[PreparedStatement, ColumnMap] = {}

    def get_column_index(self, statement: PreparedStatement, column_name: str) -> int:
        """Return the index of ``column_name``; unknown names map to column 0."""
        return self.get_columns_of_statement(statement).get(column_name, 0)

    def get_columns_of_statement(self, statement: PreparedStatement) -> ColumnMap:
        """Return the cached column map of ``statement``, building it if needed."""
        columns = self.columns_by_statement.get(statement)
        if columns is None:
            return self.add_columns_of_statement(statement)
        return columns

    def add_columns_of_statement(self, statement: PreparedStatement) -> ColumnMap:
        """Build the column map of ``statement``; cached once its columns are known."""
        columns = {name: index for index, name in enumerate(statement.column_names)}
        if columns:
            self.columns_by_statement[statement] = columns
        return columns


class Database:
    """An open SQLite database with statement and column caches."""

    def __init__(self, filepath_of_database: Union[str, "os.PathLike[str]"]) -> None:
        self.is_open = False
        self._connection = self._open(os.fspath(filepath_of_database))
        self.statement_cache = StatementCache(self)
        self.column_cache = ColumnCache(self)

    def _open(self, url: str) -> sqlite3.Connection:
        try:
            connection = sqlite3.connect(url, isolation_level=None)
        except sqlite3.Error as exc:
            raise DatabaseNotFoundException("database not found: " + url) from exc
        self.is_open = True
        return connection

    def prepare(self, statement_sql: str) -> PreparedStatement:
        """Return a prepared statement for ``statement_sql``, reusing cached ones."""
        statement = self.statement_cache.get_statement(statement_sql)
        if statement is None:
            statement = self.statement_cache.add_statement(statement_sql)
        return statement

    def bind(self, prepared_statement: PreparedStatement, parameter_index: int, value: Union[str, int]) -> None:
        """Bind a text or integer value to a 1-based parameter index."""
        if not isinstance(value, (str, int)):
            raise TypeError(f"cannot bind value of type {type(value).__name__}")
        error_code = prepared_statement._bind(parameter_index, value)
        if error_code != ResultCode.OK:
            raise ParameterBindException(
                f"error binding parameter {parameter_index} to {value}", error_code
            )

    def execute(self, prepared_statement: PreparedStatement) -> int:
        """Advance the statement by one step and return the result code."""
        return prepared_statement._step()

    def execute_script(self, sql_statement: str) -> int:
        """Run one or more SQL statements and return the result code."""
        try:
            self._connection.executescript(sql_statement)
        except (sqlite3.Error, sqlite3.Warning) as exc:
            return _error_code(exc)
        return ResultCode.OK

    def reset_statement(self, prepared_statement: PreparedStatement) -> None:
        """Rewind a statement so it can run again; bindings are kept."""
        prepared_statement._reset()

    def read_int_value(self, prepared_statement: PreparedStatement, column_name: str) -> int:
        """Read a column of the current row as a 32-bit integer."""
        index = self.column_cache.get_column_index(prepared_statement, column_name)
        return _to_int32(self._column_value(prepared_statement, index))

    def read_text_value(self, prepared_statement: PreparedStatement, column_name: str) -> str:
        """Read a column of the current row as text."""
        index = self.column_cache.get_column_index(prepared_statement, column_name)
        return _to_text(self._column_value(prepared_statement, index))

    @staticmethod
    def _column_value(statement: PreparedStatement, index: int) -> Any:
        row = statement.row
        if row is None or not 0 <= index < len(row):
            return None
        return row[index]

    def close(self) -> None:
        """Release all statements and close the connection."""
        if not self.is_open:
            return
        self.statement_cache._close_all()
        self.column_cache.columns_by_statement.clear()
        self._connection.close()
        self.is_open = False

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()