"""Users stored in the server database."""

from __future__ import annotations

from sidequest.database import (
    Database,
    ResultCode,
    UnableToCreateObjectException,
    UnableToDeleteObjectException,
    UnableToReadObjectException,
    UnableToUpdateObjectException,
)
from sidequest.models import User
from sidequest.persistable import Persistable

_NO_PASSWORD = ""


class ServerUser(User, Persistable):
    """A user that can be stored in the ``user`` table, keyed by e-mail."""

    def __init__(
        self,
        database: Database,
        email: str = "",
        display_name: str = "",
        password: str = _NO_PASSWORD,
    ) -> None:
        User.__init__(self, email, display_name, password)
        Persistable.__init__(self, database)

    def create_on_database(self) -> None:
        statement = self.database.prepare(
            "INSERT INTO user(email, display_name, password) VALUES (?, ?, ?);"
        )
        self.database.bind(statement, 1, self.email)
        self.database.bind(statement, 2, self.display_name)
        self.database.bind(statement, 3, self.password)
        if self.database.execute(statement) != ResultCode.DONE:
            raise UnableToCreateObjectException(self.email)
        self.database.reset_statement(statement)

    def read_on_database(self) -> None:
        statement = self.database.prepare("SELECT * FROM user WHERE email = ?;")
        self.database.bind(statement, 1, self.email)
        if self.database.execute(statement) != ResultCode.ROW:
            raise UnableToReadObjectException(self.email)
        self.display_name = self.database.read_text_value(statement, "display_name")
        self.password = self.database.read_text_value(statement, "password")
        self.database.reset_statement(statement)

    def update_on_database(self) -> None:
        statement = self.database.prepare(
            "UPDATE user set display_name=?, password=? WHERE email=?;"
        )
        self.database.bind(statement, 1, self.display_name)
        self.database.bind(statement, 2, self.password)
        self.database.bind(statement, 3, self.email)
        if self.database.execute(statement) != ResultCode.DONE:
            raise UnableToUpdateObjectException(self.email)
        self.database.reset_statement(statement)

    def delete_on_database(self) -> None:
        statement = self.database.prepare("DELETE FROM user WHERE email=?;")
        self.database.bind(statement, 1, self.email)
        if self.database.execute(statement) != ResultCode.DONE:
            raise UnableToDeleteObjectException(self.email)
        self.database.reset_statement(statement)

    def class_id(self) -> str:
        return "user"