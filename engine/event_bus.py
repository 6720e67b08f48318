from typing import Any, Callable, Dict, List

Listener = Callable[..., None]

# Session notifications for UI collaborators.
HISTORY_CHANGED = "history_changed"          # (can_undo, can_redo)
SELECTION_CHANGED = "selection_changed"      # (start, end)
ACTIVE_GROUP_CHANGED = "active_group_changed"  # (group_id or None)
PROJECT_LOADED = "project_loaded"            # (dimensions)

SESSION_EVENTS = (HISTORY_CHANGED, SELECTION_CHANGED, ACTIVE_GROUP_CHANGED, PROJECT_LOADED)


class EventBus:
    """Synchronous pub/sub; listeners run in subscription order on the caller's thread."""
    def __init__(self) -> None:
        self._subs: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, cb: Listener) -> Callable[[], None]:
        """Register ``cb`` and return a callable that removes it again."""
        self._subs.setdefault(event, []).append(cb)
        return lambda: self.unsubscribe(event, cb)

    def unsubscribe(self, event: str, cb: Listener) -> None:
        listeners = self._subs.get(event)
        if listeners and cb in listeners:
            listeners.remove(cb)
            if not listeners:
                del self._subs[event]

    def listener_count(self, event: str) -> int:
        return len(self._subs.get(event, ()))

    def emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        # Snapshot so listeners may unsubscribe while being notified.
        for cb in list(self._subs.get(event, ())):
            cb(*args, **kwargs)
