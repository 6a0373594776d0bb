"""Action markers.

``route(router, name=None, **options)`` tags a function so that the
``Router`` called ``router`` picks it up when it scans its owner's class.
Nothing is registered at decoration time; the marker is a tuple of
``ActionMarker`` records stored on the function, one per router, so a single
method may be exposed by several routers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

__all__ = ["ACTION_MARKERS", "ActionMarker", "markers_of", "route"]

ACTION_MARKERS = "__smartdispatch_actions__"


@dataclass(frozen=True)
class ActionMarker:
    router: str
    name: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)


def markers_of(func: Any) -> Tuple[ActionMarker, ...]:
    return getattr(func, ACTION_MARKERS, ())


def route(router: str, *, name: Optional[str] = None, **options: Any) -> Callable:
    """Expose the decorated method as an action of ``router``.

    ``name`` replaces the method name (after prefix stripping) as the action
    name. ``options`` travel with the action; keys shaped ``<plugin>_<key>``
    become per-action configuration of that plugin.
    """

    def mark(func: Callable) -> Callable:
        setattr(func, ACTION_MARKERS, markers_of(func) + (ActionMarker(router, name, options),))
        return func

    return mark
