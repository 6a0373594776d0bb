"""Logging plugin: one line when an action starts, one when it returns.

Messages are ``"<action> start"`` and ``"<action> end (<ms> ms)"``. They go to
``logger.info`` (default logger ``smartdispatch.actions``) unless ``print`` is
set, or unless the logger has no handler anywhere up its hierarchy, in which
case they are printed so they are not lost. ``log=False`` and ``print=False``
together silence the plugin without detaching it.

Settings: ``enabled``, ``before``, ``after``, ``log``, ``print``; router-wide
(``plug("logging", before=False)``), per action on the marker
(``@action(logging_after=False)`` or ``logging_flags="before:off"``), or at
runtime through ``router.logging.configure``.

When the action raises, the end line is not written.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from smartdispatch.core.router import Router
from smartdispatch.plugins._base_plugin import ActionEntry, BasePlugin

_DEFAULTS: Dict[str, bool] = {"before": True, "after": True, "log": True, "print": False}


class LoggingPlugin(BasePlugin):
    """Logs action calls with their duration."""

    plugin_code = "logging"
    plugin_description = "Logs action calls with their duration"

    __slots__ = ("logger",)

    def __init__(self, router: Router, *, logger: Optional[logging.Logger] = None, **config: Any):
        self.logger = logger or logging.getLogger("smartdispatch.actions")
        super().__init__(router, **config)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - setting name
    ) -> None:
        pass

    def wrap(self, entry: ActionEntry, call_next: Callable) -> Callable:
        def timed(*args, **kwargs):
            settings = {**_DEFAULTS, **self.configuration(entry.name)}
            if settings["before"]:
                self._write(f"{entry.name} start", settings)
            started = time.perf_counter()
            result = call_next(*args, **kwargs)
            if settings["after"]:
                elapsed = (time.perf_counter() - started) * 1000
                self._write(f"{entry.name} end ({elapsed:.2f} ms)", settings)
            return result

        return timed

    def _write(self, message: str, settings: Dict[str, Any]) -> None:
        if settings["print"] or (settings["log"] and not self.logger.hasHandlers()):
            print(message)
        elif settings["log"]:
            self.logger.info(message)


Router.register_plugin(LoggingPlugin)
