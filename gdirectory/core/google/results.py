"""Tagged outcomes for existence checks."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Found:
    """The identifier resolved to a directory record."""
    record: Dict[str, Any]

    def __bool__(self) -> bool:
        return True


class NotFound:
    """The identifier definitely does not resolve (not an error)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

LookupResult = Union[Found, NotFound]
