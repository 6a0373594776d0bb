"""Plugin contract for action routers.

A plugin class registers globally under its ``plugin_code`` and is attached to
one router with ``Router.plug(code, **config)``. From then on it sees every
action of that router twice: once when the action (or the plugin) arrives,
through ``on_register``, and on every call, through the callable returned by
``wrap``.

Settings live on the plugin instance, router-wide under ``"*"`` and per action
under the action name. A subclass declares the keys it accepts by the
signature of its ``configure`` method; ``__init_subclass__`` replaces that
method with one that

- expands ``flags="before:off,after"`` into booleans,
- checks the keywords against the declared signature with pydantic's
  ``validate_call``,
- stores them for the router (``_target="*"``) or for the listed actions
  (``_target="show,list"``).

Every plugin understands ``enabled``; the router skips a plugin for the
actions where it resolves to ``False``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from pydantic import validate_call

__all__ = ["ROUTER_LEVEL", "ActionEntry", "BasePlugin", "parse_flags"]

ROUTER_LEVEL = "*"


@dataclass
class ActionEntry:
    """One registered action: its name, the bound callable and its options."""

    name: str
    func: Callable
    options: Dict[str, Any] = field(default_factory=dict)
    plugin_config: Dict[str, Dict[str, Any]] = field(default_factory=dict)


def parse_flags(flags: str) -> Dict[str, bool]:
    """``"enabled,before:off"`` → ``{"enabled": True, "before": False}``."""
    parsed: Dict[str, bool] = {}
    for token in flags.split(","):
        key, _, state = token.strip().partition(":")
        if key.strip():
            parsed[key.strip()] = state.strip().lower() != "off"
    return parsed


def _targets(target: str) -> List[str]:
    return [name.strip() for name in target.split(",") if name.strip()]


def _storing(configure: Callable) -> Callable:
    check = validate_call(configure)

    @wraps(configure)
    def configure_and_store(
        self: "BasePlugin",
        *,
        _target: str = ROUTER_LEVEL,
        flags: Optional[str] = None,
        **options: Any,
    ) -> None:
        if flags:
            options.update(parse_flags(flags))
        check(self, **options)
        if not options:
            return
        for target in _targets(_target):
            self._settings.setdefault(target, {}).update(options)

    return configure_and_store


class BasePlugin:
    """Base class of router plugins; the default hooks change nothing."""

    __slots__ = ("router", "_settings")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _storing(cls.__dict__["configure"])

    def __init__(self, router: Any, **config: Any) -> None:
        self.router = router
        self._settings: Dict[str, Dict[str, Any]] = {ROUTER_LEVEL: {}}
        self.configure(**config)

    @property
    def name(self) -> str:
        return self.plugin_code

    def configure(self, enabled: bool = True) -> None:
        """Declare the accepted settings; storing is done by the wrapper."""

    def configuration(self, action: Optional[str] = None) -> Dict[str, Any]:
        """Router-wide settings, overlaid with those of ``action`` if given."""
        merged = dict(self._settings[ROUTER_LEVEL])
        if action is not None:
            merged.update(self._settings.get(action, {}))
        return merged

    def enabled_for(self, action: str) -> bool:
        return self.configuration(action).get("enabled", True) is not False

    def on_register(self, entry: ActionEntry) -> None:
        return None

    def wrap(self, entry: ActionEntry, call_next: Callable) -> Callable:
        return call_next


BasePlugin.configure = _storing(BasePlugin.configure)
