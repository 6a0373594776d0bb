"""Route, RoutePattern and HttpMethod."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple

from .uri import decompose

__all__ = ["HttpMethod", "RoutePattern", "Route"]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: Any) -> "HttpMethod":
        """Case-insensitive lookup; any other verb raises ValueError."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"HTTP method must be a string, got {type(value).__name__}")
        try:
            return cls(value.strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unsupported HTTP method {value!r} (expected one of {allowed})"
            ) from None

    def matches(self, value: str) -> bool:
        return self.value == value.strip().upper()


@dataclass(frozen=True)
class RoutePattern:
    """Decomposed route pattern: static path plus raw parameter names."""

    static_path: str
    param_names: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, uri: str) -> "RoutePattern":
        static_path, names = decompose(uri)
        return cls(static_path, tuple(names))


@dataclass(frozen=True)
class Route:
    """A registered route. Created by ``RouteTable.add`` and never changed."""

    method: HttpMethod
    uri: str
    pattern: RoutePattern
    handler: Any = field(default=None, compare=False)

    @property
    def static_path(self) -> str:
        return self.pattern.static_path

    @property
    def param_names(self) -> Tuple[str, ...]:
        return self.pattern.param_names
