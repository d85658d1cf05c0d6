"""Node id generation."""

from __future__ import annotations

from typing import Callable
from uuid import uuid4

IdFactory = Callable[[], str]


def new_id() -> str:
    """Return a fresh opaque node id."""
    return uuid4().hex
