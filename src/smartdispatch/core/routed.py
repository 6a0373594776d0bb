"""Mixin for objects that own action routers.

``RoutedClass`` keeps the routers built on an instance in a per-instance
registry (a ``Router`` calls ``_register_router`` on its owner when it is
created) and exposes ``routedclass``, a proxy to look routers up by name and
to configure their plugins from outside the class::

    users.routedclass.configure("actions:logging/show,list*", before=False)

A target reads ``<router>:<plugin>`` for router-wide settings, or
``<router>:<plugin>/<patterns>`` where ``patterns`` is a comma-separated list
of ``fnmatch`` patterns over the router's action names.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Any, Dict, List

from smartseeds.typeutils import safe_is_instance

from smartdispatch.plugins._base_plugin import ROUTER_LEVEL

if TYPE_CHECKING:  # pragma: no cover
    from .router import Router

__all__ = ["RoutedClass", "is_routed_class"]

_ROUTERS_ATTR = "__smartdispatch_routers__"
_PROXY_ATTR = "__smartdispatch_proxy__"


class RoutedClass:
    """Owner side of ``Router``: remembers the routers built on the instance."""

    __slots__ = (_ROUTERS_ATTR, _PROXY_ATTR)

    def _register_router(self, router: "Router") -> None:
        routers = getattr(self, _ROUTERS_ATTR, None)
        if routers is None:
            routers = {}
            setattr(self, _ROUTERS_ATTR, routers)
        if router.name:
            routers[router.name] = router

    @property
    def routedclass(self) -> "_RouterProxy":
        proxy = getattr(self, _PROXY_ATTR, None)
        if proxy is None:
            proxy = _RouterProxy(self)
            setattr(self, _PROXY_ATTR, proxy)
        return proxy


class _RouterProxy:
    __slots__ = ("_owner",)

    def __init__(self, owner: RoutedClass) -> None:
        self._owner = owner

    def routers(self) -> Dict[str, "Router"]:
        return dict(getattr(self._owner, _ROUTERS_ATTR, None) or {})

    def get_router(self, name: str) -> "Router":
        router = self.routers().get(name)
        if router is None:
            raise AttributeError(f"{type(self._owner).__name__} has no router named {name!r}")
        return router

    def configure(self, target: str, **options: Any) -> List[str]:
        """Configure a plugin router-wide or for the matching actions.

        Returns the configured action names, or ``["*"]`` for router-wide.

        Raises:
            ValueError: malformed target or no options.
            AttributeError: unknown router or plugin not attached.
            KeyError: no action matches the patterns.
        """
        router_name, sep, rest = target.partition(":")
        plugin_code, _, selector = rest.partition("/")
        router_name, plugin_code = router_name.strip(), plugin_code.strip()
        if not sep or not router_name or not plugin_code:
            raise ValueError(f"Expected '<router>:<plugin>[/<actions>]', got {target!r}")
        if not options:
            raise ValueError("No settings given")
        router = self.get_router(router_name)
        plugin = getattr(router, plugin_code)
        patterns = [pattern.strip() for pattern in selector.split(",") if pattern.strip()]
        if not patterns:
            plugin.configure(**options)
            return [ROUTER_LEVEL]
        matched = [
            name for name in router.names() if any(fnmatchcase(name, p) for p in patterns)
        ]
        if not matched:
            raise KeyError(f"No action of router {router_name!r} matches {selector.strip()!r}")
        plugin.configure(_target=",".join(matched), **options)
        return matched


def is_routed_class(obj: Any) -> bool:
    """True when ``obj`` is a RoutedClass instance."""
    return safe_is_instance(obj, "smartdispatch.core.routed.RoutedClass")
