"""Controllers: named groups of actions resolved by derived identity.

A controller is a ``RoutedClass`` whose actions live on a router named
``"actions"``. The registry maps a controller name (``"User"``) to the
instance serving it; the dispatcher derives that name from the first URI
segment and asks the registry for the action named by the second one.

A controller is registered under ``controller_name`` when the class sets it,
otherwise under its class name passed through the same rule the dispatcher
applies to URIs, so ``class Users`` and ``class User`` both serve
``/users/...``::

    class Users(Controller):
        @action()
        def show(self, ctx):
            return {"id": ctx.url_params["id"]}

    registry = ControllerRegistry([Users()])
    registry.names()  # ("User",)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from smartdispatch.core.decorators import route
from smartdispatch.core.routed import RoutedClass, is_routed_class
from smartdispatch.core.router import Router

from .uri import singular_name

__all__ = ["ACTIONS_ROUTER", "Controller", "ControllerRegistry", "action", "controller_key"]

ACTIONS_ROUTER = "actions"


def action(name: Optional[str] = None, **options: Any) -> Callable:
    """Mark a controller method as an action (``route("actions", ...)``)."""
    return route(ACTIONS_ROUTER, name=name, **options)


def controller_key(controller: Any) -> str:
    """Registry name of ``controller``: ``controller_name`` or its singular class name."""
    return getattr(controller, "controller_name", None) or singular_name(
        type(controller).__name__
    )


class Controller(RoutedClass):
    """Base class for controllers.

    ``plugins`` lists plugin codes to attach to the action router; a
    ``(code, config)`` pair attaches with settings. ``prefix`` is stripped
    from method names to form action names.
    """

    controller_name: Optional[str] = None

    def __init__(self, *, plugins: Iterable[Any] = (), prefix: Optional[str] = None):
        self.actions = Router(self, name=ACTIONS_ROUTER, prefix=prefix)
        for plugin in plugins:
            if isinstance(plugin, str):
                self.actions.plug(plugin)
            else:
                code, config = plugin
                self.actions.plug(code, **config)


class ControllerRegistry:
    """Lookup table from controller name to controller instance."""

    __slots__ = ("_controllers",)

    def __init__(self, controllers: Iterable[Any] = ()) -> None:
        self._controllers: Dict[str, Any] = {}
        for controller in controllers:
            self.add(controller)

    def add(self, controller: Any, name: Optional[str] = None) -> Any:
        """Register ``controller`` and return it.

        Raises:
            TypeError: if ``controller`` is not a RoutedClass instance.
            ValueError: if the name is already taken by another controller.
        """
        if not is_routed_class(controller):
            raise TypeError(
                f"Controllers must be RoutedClass instances, got {type(controller).__name__}"
            )
        key = name or controller_key(controller)
        existing = self._controllers.get(key)
        if existing is not None and existing is not controller:
            raise ValueError(f"Controller name collision: {key}")
        self._controllers[key] = controller
        return controller

    def get(self, name: str) -> Optional[Any]:
        return self._controllers.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._controllers)

    def __contains__(self, name: object) -> bool:
        return name in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)

    def _actions(self, name: str) -> Optional[Router]:
        controller = self._controllers.get(name)
        if controller is None:
            return None
        try:
            return controller.routedclass.get_router(ACTIONS_ROUTER)
        except AttributeError:
            return None

    def has_action(self, name: str, action_name: str) -> bool:
        router = self._actions(name)
        return router is not None and action_name in router

    def resolve(self, name: str, action_name: str) -> Optional[Callable]:
        """Wrapped action callable, or ``None`` if the controller or action is missing."""
        router = self._actions(name)
        if router is None or action_name not in router:
            return None
        return router.get(action_name)
