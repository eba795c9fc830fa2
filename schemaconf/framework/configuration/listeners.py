"""
Per-field change listeners.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List

ListenerFunction = Callable[[Any, Any], None]


class ListenerRegistry:
    """
    Ordered callbacks per field name.

    Registration order is call order and nothing is deduplicated: adding the
    same callback twice makes it run twice. Dispatch is synchronous and a
    raising callback stops the remaining ones for that dispatch.
    """

    def __init__(self):
        self._listeners: Dict[str, List[ListenerFunction]] = defaultdict(list)

    def add(self, field: str, listener: ListenerFunction) -> None:
        self._listeners[field].append(listener)

    def remove(self, field: str, listener: ListenerFunction) -> bool:
        """Remove the first registration of ``listener``; returns whether one was found."""
        listeners = self._listeners.get(field)
        if listeners and listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def count(self, field: str) -> int:
        return len(self._listeners.get(field, ()))

    def dispatch(self, field: str, new_value: Any, old_value: Any) -> int:
        """Call every listener of ``field`` with ``(new_value, old_value)``; returns how many ran."""
        listeners = list(self._listeners.get(field, ()))
        for listener in listeners:
            listener(new_value, old_value)
        return len(listeners)
