"""Object identifier generators.

Xcode identifies every object in a project by a 24-character hex token.
The store only needs a zero-argument callable returning a fresh string,
so tests can swap in ``sequential_ids`` and assert on structure.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def xcode_ids() -> IdGenerator:
    """Return a generator of random Xcode-style object ids."""

    def generate() -> str:
        return uuid.uuid4().hex[:24].upper()

    return generate


def sequential_ids(prefix: str = "ID") -> IdGenerator:
    """Return a generator yielding ``<prefix>0001``, ``<prefix>0002``, ..."""
    counter = itertools.count(1)

    def generate() -> str:
        return f"{prefix}{next(counter):04d}"

    return generate
