import pytest

from sidequest.database import (
    ColumnCache,
    Database,
    DatabaseNotFoundException,
    ParameterBindException,
    ResultCode,
    UnableToCreateObjectException,
    UnableToDeleteObjectException,
    UnableToReadObjectException,
    UnableToUpdateObjectException,
)

CREATE_USER_TABLE = "create table user(email text primary key, display_name text, password text);"
INSERT_USER = "INSERT INTO user(email, display_name) VALUES (?, ?);"
SELECT_USER = "SELECT email, display_name FROM user WHERE email = ?;"


@pytest.fixture
def database():
    with Database(":memory:") as db:
        assert db.execute_script(CREATE_USER_TABLE) == ResultCode.OK
        yield db


def insert_user(db, email, display_name):
    statement = db.prepare(INSERT_USER)
    db.bind(statement, 1, email)
    db.bind(statement, 2, display_name)
    result = db.execute(statement)
    db.reset_statement(statement)
    return result


def test_prepare_reuses_cached_statement(database):
    first = database.prepare(SELECT_USER)
    second = database.prepare(SELECT_USER)
    other = database.prepare(INSERT_USER)
    assert first is second
    assert other is not first
    assert database.statement_cache.get_statement(SELECT_USER) is first


def test_statement_cache_lookup_and_add(database):
    cache = database.statement_cache
    assert cache.get_statement("SELECT 1;") is None
    added = cache.add_statement("SELECT 1;")
    assert cache.get_statement("SELECT 1;") is added
    assert added.sql == "SELECT 1;"


def test_prepare_invalid_sql_raises(database):
    with pytest.raises(ParameterBindException) as info:
        database.prepare("NOT VALID SQL")
    assert str(info.value) == "NOT VALID SQL"
    assert info.value.error_code == ResultCode.ERROR


def test_prepare_unknown_table_raises(database):
    with pytest.raises(ParameterBindException):
        database.prepare("SELECT * FROM missing;")


def test_parameter_count_ignores_quoted_marks(database):
    assert database.prepare("SELECT '?', ?;").parameter_count == 1
    assert database.prepare("SELECT ?1, ?3;").parameter_count == 3


def test_bind_out_of_range_raises(database):
    statement = database.prepare(SELECT_USER)
    with pytest.raises(ParameterBindException) as info:
        database.bind(statement, 2, "x")
    assert info.value.error_code == ResultCode.RANGE
    assert str(info.value) == "error binding parameter 2 to x"


def test_bind_unsupported_type_raises(database):
    statement = database.prepare(SELECT_USER)
    with pytest.raises(TypeError):
        database.bind(statement, 1, 1.5)


def test_bind_while_rows_pending_is_misuse(database):
    insert_user(database, "a@example.com", "A")
    statement = database.prepare(SELECT_USER)
    database.bind(statement, 1, "a@example.com")
    assert database.execute(statement) == ResultCode.ROW
    with pytest.raises(ParameterBindException) as info:
        database.bind(statement, 1, "b@example.com")
    assert info.value.error_code == ResultCode.MISUSE


def test_insert_then_select_steps(database):
    assert insert_user(database, "a@example.com", "Alice") == ResultCode.DONE
    statement = database.prepare(SELECT_USER)
    database.bind(statement, 1, "a@example.com")
    assert database.execute(statement) == ResultCode.ROW
    assert database.read_text_value(statement, "display_name") == "Alice"
    assert database.read_text_value(statement, "email") == "a@example.com"
    assert database.execute(statement) == ResultCode.DONE


def test_select_without_match_is_done(database):
    statement = database.prepare(SELECT_USER)
    database.bind(statement, 1, "nobody@example.com")
    assert database.execute(statement) == ResultCode.DONE


def test_duplicate_insert_is_constraint_error(database):
    assert insert_user(database, "a@example.com", "A") == ResultCode.DONE
    assert insert_user(database, "a@example.com", "B") == ResultCode.CONSTRAINT


def test_reset_keeps_bindings(database):
    insert_user(database, "a@example.com", "Alice")
    statement = database.prepare(SELECT_USER)
    database.bind(statement, 1, "a@example.com")
    assert database.execute(statement) == ResultCode.ROW
    database.reset_statement(statement)
    assert database.execute(statement) == ResultCode.ROW
    assert database.read_text_value(statement, "display_name") == "Alice"


def test_null_text_reads_as_empty(database):
    statement = database.prepare("INSERT INTO user(email) VALUES (?);")
    database.bind(statement, 1, "a@example.com")
    assert database.execute(statement) == ResultCode.DONE
    select = database.prepare(SELECT_USER)
    database.bind(select, 1, "a@example.com")
    assert database.execute(select) == ResultCode.ROW
    assert database.read_text_value(select, "display_name") == ""


def test_read_int_values(database):
    assert database.execute_script("create table numbers(value integer, label text);") == ResultCode.OK
    insert = database.prepare("INSERT INTO numbers(value, label) VALUES (?, ?);")
    database.bind(insert, 1, 2**31)
    database.bind(insert, 2, "42abc")
    assert database.execute(insert) == ResultCode.DONE
    select = database.prepare("SELECT value, label FROM numbers;")
    assert database.execute(select) == ResultCode.ROW
    assert database.read_int_value(select, "value") == -(2**31)
    assert database.read_int_value(select, "label") == 42
    assert database.read_text_value(select, "label") == "42abc"


def test_column_cache_known_after_execution(database):
    insert_user(database, "a@example.com", "A")
    statement = database.prepare(SELECT_USER)
    cache = ColumnCache(database)
    assert cache.get_columns_of_statement(statement) == {}
    database.bind(statement, 1, "a@example.com")
    database.execute(statement)
    assert cache.get_columns_of_statement(statement) == {"email": 0, "display_name": 1}
    assert cache.get_column_index(statement, "display_name") == 1
    assert cache.get_columns_of_statement(statement) is cache.get_columns_of_statement(statement)


def test_execute_script_failure_reports_error(database):
    assert database.execute_script("this is not sql") == ResultCode.ERROR


def test_missing_directory_raises(tmp_path):
    path = tmp_path / "missing" / "db.sqlite"
    with pytest.raises(DatabaseNotFoundException) as info:
        Database(path)
    assert str(info.value).startswith("database not found: ")


def test_context_manager_closes(tmp_path):
    with Database(tmp_path / "store.sqlite") as db:
        assert db.is_open
    assert db.is_open is False


def test_object_exception_messages():
    assert str(UnableToCreateObjectException("k")) == "UnableToCreateObject: k"
    assert str(UnableToReadObjectException("k")) == "UnableToReadObjectException: k"
    assert str(UnableToUpdateObjectException("k")) == "UnableToUpdateObjectException: k"
    assert str(UnableToDeleteObjectException("k")) == "UnableToDeleteObjectException: k"