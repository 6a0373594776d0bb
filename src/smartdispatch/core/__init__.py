"""Action routing: the ``Router`` bound to a controller, the ``route`` marker
and the ``RoutedClass`` owner mixin. Built-in plugins register themselves
when ``smartdispatch`` is imported.
"""

from .decorators import route
from .routed import RoutedClass
from .router import Router

__all__ = [
    "Router",
    "route",
    "RoutedClass",
]
