"""Identifier generation for new blocks."""

import uuid
from typing import Callable

IdFactory = Callable[[], str]


def generate_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())
