"""SmartDispatch public API surface.

- HTTP side: ``Dispatcher``, ``RouteTable``, ``Controller``, ``action``,
  ``RequestView``, ``RequestContext``, ``NotFound``.
- Action runtime: ``Router``, ``RoutedClass``, ``route``.
- Built-in plugins (``logging``, ``pydantic``) are imported for their side
  effect of calling ``Router.register_plugin``.
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import RoutedClass, Router, route
from .errors import DispatchError, NotFound
from .http import (
    Controller,
    ControllerRegistry,
    Dispatcher,
    DispatchOutcome,
    HttpMethod,
    RequestContext,
    RequestView,
    RouteTable,
    action,
)

for _plugin in ("logging", "pydantic"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "Controller",
    "ControllerRegistry",
    "Dispatcher",
    "DispatchOutcome",
    "DispatchError",
    "HttpMethod",
    "NotFound",
    "RequestContext",
    "RequestView",
    "RouteTable",
    "action",
    "Router",
    "RoutedClass",
    "route",
]
