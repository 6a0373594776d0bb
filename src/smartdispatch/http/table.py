"""Ordered route table.

Registration order is match priority: the dispatcher walks the table from
the first route to the last and stops at the first static-path + method
match. Duplicates are allowed; the earlier one always wins.

The table is written during setup and read during dispatch. ``freeze()``
closes it; any later registration raises ``RuntimeError``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

from .route import HttpMethod, Route, RoutePattern

__all__ = ["RouteTable"]


class RouteTable:
    """Registration API plus read-only views for the dispatcher.

    Usage::

        table = RouteTable()
        table.get("/users/show/:id", on_show)
        table.post("/users/create", None)
        table.freeze()
    """

    __slots__ = ("_routes", "_frozen")

    def __init__(self) -> None:
        self._routes: List[Route] = []
        self._frozen = False

    def add(self, method: Any, uri: str, handler: Any = None) -> Route:
        """Append a route for ``method`` + ``uri``. Returns the new Route."""
        if self._frozen:
            raise RuntimeError("Cannot add routes after the table is frozen.")
        if not isinstance(uri, str):
            raise TypeError(f"Route URI must be a string, got {type(uri).__name__}")
        route = Route(
            method=HttpMethod.parse(method),
            uri=uri,
            pattern=RoutePattern.parse(uri),
            handler=handler,
        )
        self._routes.append(route)
        return route

    def get(self, uri: str, handler: Any = None) -> Route:
        return self.add(HttpMethod.GET, uri, handler)

    def post(self, uri: str, handler: Any = None) -> Route:
        return self.add(HttpMethod.POST, uri, handler)

    def put(self, uri: str, handler: Any = None) -> Route:
        return self.add(HttpMethod.PUT, uri, handler)

    def patch(self, uri: str, handler: Any = None) -> Route:
        return self.add(HttpMethod.PATCH, uri, handler)

    def delete(self, uri: str, handler: Any = None) -> Route:
        return self.add(HttpMethod.DELETE, uri, handler)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> Tuple[Route, ...]:
        return tuple(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(tuple(self._routes))

    def __len__(self) -> int:
        return len(self._routes)

    def describe(self) -> List[Dict[str, Any]]:
        """Registration-ordered summary of every route."""
        return [
            {
                "method": route.method.value,
                "uri": route.uri,
                "static_path": route.static_path,
                "params": list(route.param_names),
            }
            for route in self._routes
        ]
