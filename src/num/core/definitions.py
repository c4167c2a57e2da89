"""
Definition table: the global names visible to expressions.

The table keeps every inserted Definition in declaration order (for
listing) plus a name index (for lookup). Redefining a name repoints the
index at the new Definition but leaves the old entry in the ordered list, so
a listing shows the superseded entry too; ``is_current()`` tells them apart.
Trees that already reference the old Definition keep using it.

Not thread-safe: insert() mutates both structures without locking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from num.core.ir.definition import Definition

logger = logging.getLogger(__name__)


class DefinitionTable:
    """Ordered, append-only collection of Definitions with name lookup."""

    def __init__(self) -> None:
        self._ordered: list[Definition] = []
        self._by_name: dict[str, Definition] = {}

    def lookup(self, name: str) -> Definition | None:
        return self._by_name.get(name)

    def insert(self, definition: Definition) -> None:
        """Append ``definition`` and make it the target of its name."""
        if not definition.is_bound:
            raise ValueError(f"Cannot insert '{definition.name}' before its body is bound")
        if definition.name in self._by_name:
            logger.debug("Redefining %s", definition.name)
        else:
            logger.debug("Defining %s", definition.name)
        self._ordered.append(definition)
        self._by_name[definition.name] = definition

    def is_current(self, definition: Definition) -> bool:
        """True if lookup of the definition's name returns this object."""
        return self._by_name.get(definition.name) is definition

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def names(self) -> list[str]:
        """Currently defined names, in order of first definition."""
        return list(self._by_name)
