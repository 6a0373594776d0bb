"""Per-controller action router (source of truth).

A ``Router`` is bound to one owner object and maps action names to the
owner's bound methods. The dispatcher only asks it two things:
``name in router`` and ``router.get(name)``.

Registration
------------
- On construction the router announces itself to its owner through the
  ``_register_router`` hook (see ``RoutedClass``) and, unless
  ``auto_discover=False``, scans the owner's class for methods marked with
  ``route(<router name>)``. The class namespace is read the way attribute
  lookup sees it: an override in a subclass replaces the inherited method,
  marked or not.
- ``add_entry(target, name=None, replace=False, **options)`` registers one
  callable, or the owner attribute called ``target``.
- The action name is ``name`` when given, else the function name with
  ``prefix`` removed. Registering a taken name raises ``ValueError`` unless
  ``replace`` is true.
- Options shaped ``<plugin>_<key>`` for a registered plugin code become that
  plugin's settings for the action (``logging_before=False``); the rest are
  kept on the ``ActionEntry``.

Plugins
-------
Plugin classes register globally with ``Router.register_plugin`` and are
attached per router with ``plug(code, **config)``, at most once each.
Attached plugins are reachable as attributes (``router.logging``). Every
action is wrapped by every attached plugin, the first attached being the
outermost layer; a plugin whose ``enabled`` setting is false for an action is
bypassed for that action.
"""

from __future__ import annotations

import inspect
from functools import wraps
from types import MethodType
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from smartdispatch.plugins._base_plugin import ActionEntry, BasePlugin

from .decorators import markers_of

__all__ = ["Router"]

_PLUGINS: Dict[str, Type[BasePlugin]] = {}


class Router:
    """Named actions of one owner instance, wrapped by attached plugins."""

    __slots__ = ("_plugins", "owner", "name", "prefix", "_entries", "_handlers")

    def __init__(
        self,
        owner: Any,
        name: Optional[str] = None,
        prefix: Optional[str] = None,
        *,
        auto_discover: bool = True,
    ) -> None:
        if owner is None:
            raise ValueError("Router needs an owner instance")
        self._plugins: Dict[str, BasePlugin] = {}
        self.owner = owner
        self.name = name
        self.prefix = prefix or ""
        self._entries: Dict[str, ActionEntry] = {}
        self._handlers: Dict[str, Callable] = {}
        hook = getattr(owner, "_register_router", None)
        if callable(hook):
            hook(self)
        if auto_discover:
            self.discover()

    # ------------------------------------------------------------------
    # Plugin registry
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin]) -> Type[BasePlugin]:
        if not (isinstance(plugin_class, type) and issubclass(plugin_class, BasePlugin)):
            raise TypeError(f"{plugin_class!r} is not a BasePlugin subclass")
        code = plugin_class.plugin_code
        if not code:
            raise ValueError(f"{plugin_class.__name__} has no plugin_code")
        current = _PLUGINS.get(code)
        if current is not None and current is not plugin_class:
            raise ValueError(f"Plugin code {code!r} is taken by {current.__name__}")
        _PLUGINS[code] = plugin_class
        return plugin_class

    @classmethod
    def available_plugins(cls) -> Tuple[str, ...]:
        return tuple(sorted(_PLUGINS))

    def plug(self, code: str, **config: Any) -> "Router":
        """Attach the plugin registered as ``code``; returns the router."""
        plugin_class = _PLUGINS.get(code)
        if plugin_class is None:
            known = ", ".join(sorted(_PLUGINS)) or "none"
            raise ValueError(f"Unknown plugin {code!r} (registered: {known})")
        if code in self._plugins:
            raise ValueError(f"Plugin {code!r} is already attached to router {self.name!r}")
        plugin = plugin_class(self, **config)
        self._plugins[code] = plugin
        for entry in self._entries.values():
            self._introduce(plugin, entry)
        self._rebuild()
        return self

    @property
    def plugins(self) -> Tuple[BasePlugin, ...]:
        return tuple(self._plugins.values())

    def __getattr__(self, name: str) -> BasePlugin:
        plugins = object.__getattribute__(self, "_plugins")
        try:
            return plugins[name]
        except KeyError:
            raise AttributeError(f"No plugin {name!r} attached to this router") from None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def discover(self) -> "Router":
        """Register the owner's methods marked for this router."""
        for func in self._marked_functions():
            for marker in markers_of(func):
                if marker.router == self.name:
                    self.add_entry(func, name=marker.name, **marker.options)
        return self

    def _marked_functions(self) -> List[Callable]:
        namespace: Dict[str, Any] = {}
        for klass in reversed(type(self.owner).__mro__):
            namespace.update(vars(klass))
        return [
            value
            for value in namespace.values()
            if inspect.isfunction(value) and markers_of(value)
        ]

    def add_entry(
        self,
        target: Any,
        *,
        name: Optional[str] = None,
        replace: bool = False,
        **options: Any,
    ) -> "Router":
        if isinstance(target, str):
            func = getattr(self.owner, target)
        elif inspect.isfunction(target):
            func = MethodType(target, self.owner)
        elif callable(target):
            func = target
        else:
            raise TypeError(f"Cannot register {target!r} as an action")

        action = name or self._action_name(func)
        if action in self._entries and not replace:
            raise ValueError(f"Action {action!r} is already registered on router {self.name!r}")

        entry = ActionEntry(action, func)
        for key, value in options.items():
            code, _, setting = key.partition("_")
            if setting and code in _PLUGINS:
                entry.plugin_config.setdefault(code, {})[setting] = value
            else:
                entry.options[key] = value
        for plugin in self._plugins.values():
            self._introduce(plugin, entry)
        self._entries[action] = entry
        self._rebuild()
        return self

    def _action_name(self, func: Callable) -> str:
        func_name = getattr(func, "__name__", None)
        if not func_name:
            raise ValueError(f"{func!r} has no __name__; pass name= explicitly")
        if self.prefix and func_name.startswith(self.prefix):
            return func_name[len(self.prefix) :]
        return func_name

    def _introduce(self, plugin: BasePlugin, entry: ActionEntry) -> None:
        settings = entry.plugin_config.get(plugin.name)
        if settings:
            plugin.configure(_target=entry.name, **settings)
        plugin.on_register(entry)

    # ------------------------------------------------------------------
    # Wrapping
    # ------------------------------------------------------------------
    def _rebuild(self) -> None:
        self._handlers = {name: self._wrap(entry) for name, entry in self._entries.items()}

    def _wrap(self, entry: ActionEntry) -> Callable:
        handler = entry.func
        for plugin in reversed(self.plugins):
            handler = self._layer(plugin, entry, handler)
        return handler

    @staticmethod
    def _layer(plugin: BasePlugin, entry: ActionEntry, inner: Callable) -> Callable:
        wrapped = plugin.wrap(entry, inner)
        if wrapped is inner:
            return inner

        @wraps(inner)
        def layer(*args, **kwargs):
            if plugin.enabled_for(entry.name):
                return wrapped(*args, **kwargs)
            return inner(*args, **kwargs)

        return layer

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get(self, name: str) -> Callable:
        """Wrapped callable of action ``name``; ``KeyError`` if there is none."""
        try:
            return self._handlers[name]
        except KeyError:
            raise KeyError(f"No action {name!r} on router {self.name!r}") from None

    def entry(self, name: str) -> ActionEntry:
        return self._entries[name]

    def names(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers
