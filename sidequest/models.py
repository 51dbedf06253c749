"""Domain model shared by the client and the server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

_NO_PASSWORD = ""


@dataclass
class Quest:
    """A task that may have a parent quest and be split into subquests."""

    id: int = 0
    caption: str = ""
    parent: Optional[Quest] = field(default=None, repr=False, compare=False)
    subquests: List[Quest] = field(default_factory=list, repr=False, compare=False)


@dataclass
class User:
    """A user identified by e-mail address, owning a list of main quests."""

    email: str = ""
    display_name: str = ""
    password: str = _NO_PASSWORD
    main_quests: List[Quest] = field(default_factory=list)