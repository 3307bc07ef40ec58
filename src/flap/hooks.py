from __future__ import annotations

from typing import Callable


class EventHooks:
    """
    Grouped Panda3D `accept`/`ignore` bindings. Every handler runs through
    `safe_call` so a failing input handler never takes down the frame loop.
    """

    def __init__(self, *, base, safe_call: Callable[[str, Callable[[], None]], object]) -> None:
        self._base = base
        self._safe_call = safe_call
        self._groups: dict[str, list[str]] = {}

    def bind(self, *, group: str, event: str, context: str, fn: Callable[[], None]) -> None:
        evt = str(event)
        self._base.accept(evt, lambda: self._safe_call(str(context), fn))
        self._groups.setdefault(str(group), []).append(evt)

    def unbind_group(self, group: str) -> None:
        for evt in self._groups.pop(str(group), []):
            self._base.ignore(evt)


__all__ = ["EventHooks"]
