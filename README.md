# sidequest

The storage layer of the Sidequest server: a small wrapper around SQLite
with cached prepared statements and column lookups, plus persistent domain
objects that create, read, update and delete themselves.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from sidequest.database import Database, UnableToReadObjectException
from sidequest.server_user import ServerUser

with Database(":memory:") as database:
    database.execute_script(
        "create table user(email text primary key, display_name text, password text);"
    )

    user = ServerUser(database, "someone@example.com", "Temporary User", "")
    user.create_on_database()

    user.display_name = "Changed Display Name"
    user.update_on_database()

    loaded = ServerUser(database, "someone@example.com")
    loaded.read_on_database()
    print(loaded.display_name)  # Changed Display Name

    loaded.delete_on_database()
    try:
        ServerUser(database, "someone@example.com").read_on_database()
    except UnableToReadObjectException as error:
        print(error)  # UnableToReadObjectException: someone@example.com
```

`ServerUser` stores its `email`, `display_name` and `password` in a table
named `user`, keyed by `email`; the table must exist before it is used.
Its `class_id()` is `"user"`.

## Modules

- `sidequest.models` – the plain dataclasses `User` (`email`,
  `display_name`, `password`, `main_quests`) and `Quest` (`id`, `caption`,
  `parent`, `subquests`).
- `sidequest.database` – `Database`, `PreparedStatement`, `StatementCache`,
  `ColumnCache`, the `ResultCode` enum and the exceptions.
- `sidequest.persistable` – the abstract base class `Persistable`.
- `sidequest.server_user` – `ServerUser`, a `User` that is also a
  `Persistable`.
- `sidequest.server` – the `main` function behind the `sidequest-server`
  command.

## Working with `Database` directly

```python
from sidequest.database import Database, ResultCode

with Database(":memory:") as database:
    database.execute_script("create table item(name text, amount integer);")

    insert = database.prepare("INSERT INTO item(name, amount) VALUES (?, ?);")
    database.bind(insert, 1, "apples")
    database.bind(insert, 2, 3)
    assert database.execute(insert) == ResultCode.DONE
    database.reset_statement(insert)

    select = database.prepare("SELECT * FROM item WHERE name = ?;")
    database.bind(select, 1, "apples")
    assert database.execute(select) == ResultCode.ROW
    print(database.read_int_value(select, "amount"))  # 3
    database.reset_statement(select)
```

- `Database(path)` opens (or creates) an SQLite file; `":memory:"` gives an
  in-memory database. It is a context manager, and `close()` releases all
  statements and the connection.
- `prepare(sql)` returns a `PreparedStatement`, reusing the one cached for
  the same SQL text. SQL that cannot be prepared raises
  `ParameterBindException`.
- `bind(statement, index, value)` binds a `str` or `int` to a 1-based
  parameter. An index out of range, or binding while the statement is in the
  middle of a result, raises `ParameterBindException` carrying the result
  code in `error_code`; other value types raise `TypeError`.
- `execute(statement)` steps the statement once and returns a result code:
  `ResultCode.ROW` when a row is available, `ResultCode.DONE` when it has
  finished, or an error code such as `ResultCode.CONSTRAINT`.
- `execute_script(sql)` runs one or more statements and returns
  `ResultCode.OK` or an error code.
- `reset_statement(statement)` rewinds a statement so it can run again; its
  bindings are kept.
- `read_int_value(statement, column)` and `read_text_value(statement, column)`
  read a column of the current row by name, as a 32-bit integer or as text.
  A missing value reads as `0` or `""`; an unknown column name reads
  column 0.

## Errors

Each failed operation of a persistent object raises its own exception:
`UnableToCreateObjectException`, `UnableToReadObjectException`,
`UnableToUpdateObjectException` and `UnableToDeleteObjectException`, each
carrying the object's key in its message. A database that cannot be opened
raises `DatabaseNotFoundException`. All of them derive from `RuntimeError`.

New persistent types derive from `sidequest.persistable.Persistable`, which
keeps the database in `self.database`, and implement `create_on_database`,
`read_on_database`, `update_on_database`, `delete_on_database` and
`class_id`.

## Server

```
sidequest-server
```

prints the banner `Sidequest Server` and exits with status 0. It accepts
`--help` and no other options.

## What this package does not do

The `sidequest-server` command does not listen for connections or serve
any requests; the package is the storage layer and domain model only.
Only users are persistent: `Quest` is a plain dataclass with no database
storage, and a user's `main_quests` are not saved. The package creates no
tables itself.