"""Event filters deciding which serialized events are delivered."""

from __future__ import annotations


class AllowAllFilter:
    """Filter used when the host does not supply one."""

    def eval(self, serialized_event: str) -> bool:
        return True
