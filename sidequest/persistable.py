"""Base class of persistent domain objects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sidequest.database import Database


class Persistable(ABC):
    """An object that can be created, read, updated and deleted in a database."""

    def __init__(self, database: Database) -> None:
        self.database = database

    @abstractmethod
    def create_on_database(self) -> None:
        """Insert the object."""

    @abstractmethod
    def read_on_database(self) -> None:
        """Load the object's fields."""

    @abstractmethod
    def update_on_database(self) -> None:
        """Store the object's changed fields."""

    @abstractmethod
    def delete_on_database(self) -> None:
        """Remove the object."""

    @abstractmethod
    def class_id(self) -> str:
        """Name identifying the object's kind in storage."""