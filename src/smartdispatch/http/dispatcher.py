"""Request dispatcher (source of truth).

Matching
--------
For every route, in registration order:

1. the incoming path is decomposed into ``(static_path, values)``; routes
   were decomposed when they were registered;
2. the route is skipped unless its static path equals the incoming one and
   its method equals the incoming method (case-insensitive);
3. on the first match the parameters are bound positionally and the
   controller name is derived from the first static segment (one trailing
   ``s`` stripped, first letter capitalized);
4. the controller must be registered and must expose the action named by the
   second static segment. A missing or parameter-shaped second segment, an
   unknown controller or an unknown action is a ``NotFound`` for the whole
   request: later routes are never tried;
5. a callable route handler is called once with the bound parameters, then
   the action is called once with a ``RequestContext``.

No match at all is also a ``NotFound``.

Outcomes
--------
``resolve()`` returns a ``ResolvedTarget`` or raises ``NotFound``.
``dispatch()`` runs the target and returns a ``DispatchOutcome``; it turns
``NotFound`` into an outcome and lets every other exception propagate.
``route()`` is the boolean entry point used by transports: on failure it
passes the outcome to the ``not_found`` responder and returns ``False``.
Without an explicit responder the outcome goes to ``write_not_found``, which
writes the status and body to the ``smartdispatch`` logger at warning level.

Options
-------
Keyword options are merged over ``DEFAULT_OPTIONS`` with ``SmartOptions``:
``param_sigil``, ``not_found_status``, ``not_found_body``, ``parse_json``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from smartseeds import SmartOptions

from smartdispatch.errors import NOT_FOUND_BODY, NotFound

from .controllers import ControllerRegistry
from .request import RequestContext, RequestView, parse_body
from .route import Route
from .table import RouteTable
from .uri import PARAM_SIGIL, action_name, associate, decompose, derive_identity

__all__ = ["DEFAULT_OPTIONS", "Dispatcher", "DispatchOutcome", "ResolvedTarget"]

logger = logging.getLogger("smartdispatch")

DEFAULT_OPTIONS: Dict[str, Any] = {
    "param_sigil": PARAM_SIGIL,
    "not_found_status": 404,
    "not_found_body": NOT_FOUND_BODY,
    "parse_json": True,
}


@dataclass(frozen=True)
class ResolvedTarget:
    """The route, controller and action chosen for one request."""

    route: Route
    controller_name: str
    action: str
    handler: Callable
    url_params: Dict[str, str] = field(default_factory=dict)


@dataclass
class DispatchOutcome:
    """What happened to one request; truthy when an action ran."""

    found: bool
    status: int = 200
    body: str = ""
    target: Optional[ResolvedTarget] = None
    result: Any = None
    error: Optional[NotFound] = None

    def __bool__(self) -> bool:
        return self.found


class Dispatcher:
    """Match requests against a route table and run controller actions.

    Usage::

        dispatcher = Dispatcher(controllers=[Users()])
        dispatcher.get("/users/show/:id")
        dispatcher.route("/users/show/42", "GET")
    """

    def __init__(
        self,
        table: Optional[RouteTable] = None,
        controllers: Any = None,
        *,
        not_found: Optional[Callable[[DispatchOutcome], Any]] = None,
        **options: Any,
    ) -> None:
        self.table = table if table is not None else RouteTable()
        if isinstance(controllers, ControllerRegistry):
            self.controllers = controllers
        else:
            self.controllers = ControllerRegistry(controllers or ())
        self.not_found = not_found if not_found is not None else self.write_not_found
        self.options = SmartOptions(options, defaults=DEFAULT_OPTIONS)

    # ------------------------------------------------------------------
    # Registration (delegates to the table)
    # ------------------------------------------------------------------
    def add(self, method: Any, uri: str, handler: Any = None) -> Route:
        return self.table.add(method, uri, handler)

    def get(self, uri: str, handler: Any = None) -> Route:
        return self.table.get(uri, handler)

    def post(self, uri: str, handler: Any = None) -> Route:
        return self.table.post(uri, handler)

    def put(self, uri: str, handler: Any = None) -> Route:
        return self.table.put(uri, handler)

    def patch(self, uri: str, handler: Any = None) -> Route:
        return self.table.patch(uri, handler)

    def delete(self, uri: str, handler: Any = None) -> Route:
        return self.table.delete(uri, handler)

    def controller(self, controller: Any, name: Optional[str] = None) -> Any:
        """Register a controller; returns it."""
        return self.controllers.add(controller, name=name)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def resolve(self, request: RequestView) -> ResolvedTarget:
        """Find the target for ``request`` or raise ``NotFound``."""
        self.table.freeze()
        sigil = self.options.param_sigil
        static_path, values = decompose(request.path)
        for route in self.table:
            if route.static_path != static_path or not route.method.matches(request.method):
                continue
            return self._resolve_route(route, values, sigil)
        raise NotFound(
            f"no route matches {request.method.upper()} {request.path!r}",
            status=self.options.not_found_status,
        )

    def _resolve_route(self, route: Route, values: list, sigil: str) -> ResolvedTarget:
        url_params = associate(route.param_names, values, sigil=sigil)
        controller_name = derive_identity(route.static_path)
        status = self.options.not_found_status
        if controller_name not in self.controllers:
            raise NotFound(f"controller {controller_name!r} is not registered", status=status)
        name = action_name(route.static_path, sigil=sigil)
        if name is None:
            raise NotFound(f"route {route.uri!r} does not name an action", status=status)
        handler = self.controllers.resolve(controller_name, name)
        if handler is None:
            raise NotFound(
                f"controller {controller_name!r} has no action {name!r}", status=status
            )
        logger.debug(
            "%s %s matched %s.%s %s", route.method.value, route.uri, controller_name, name, url_params
        )
        return ResolvedTarget(
            route=route,
            controller_name=controller_name,
            action=name,
            handler=handler,
            url_params=url_params,
        )

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------
    def dispatch(self, request: RequestView) -> DispatchOutcome:
        """Resolve and run ``request``; ``NotFound`` becomes an outcome."""
        try:
            target = self.resolve(request)
        except NotFound as exc:
            logger.info("%s %s: %s", request.method.upper(), request.uri, exc.reason)
            return DispatchOutcome(
                found=False,
                status=exc.status,
                body=self.options.not_found_body,
                error=exc,
            )
        context = self._build_context(request, target)
        route_handler = target.route.handler
        if callable(route_handler):
            route_handler(dict(target.url_params))
        result = target.handler(context)
        return DispatchOutcome(found=True, target=target, result=result)

    def _build_context(self, request: RequestView, target: ResolvedTarget) -> RequestContext:
        data = parse_body(request.body) if self.options.parse_json else request.body
        return RequestContext(
            data=data,
            headers=dict(request.headers),
            url_params=dict(target.url_params),
        )

    def route(
        self,
        uri: str,
        method: str,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
    ) -> bool:
        """Dispatch ``method`` + ``uri``; on failure hand off to ``not_found``."""
        outcome = self.dispatch(RequestView(method=method, uri=uri, headers=headers or {}, body=body))
        if not outcome:
            self.not_found(outcome)
        return outcome.found

    def write_not_found(self, outcome: DispatchOutcome) -> None:
        """Default not-found responder for callers without a transport."""
        logger.warning("%s %s", outcome.status, outcome.body)
