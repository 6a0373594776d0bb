"""Request data handed to the dispatcher and on to actions.

``RequestView`` is what the transport layer supplies per call: method, raw
URI, headers and the raw body bytes. ``RequestContext`` is what an action
receives: the decoded JSON body, the headers and the bound URI parameters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qs

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["RequestView", "RequestContext", "parse_body"]


def parse_body(body: bytes | str | None) -> Any:
    """Decode a JSON body; empty or malformed input gives ``None``."""
    if not body:
        return None
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        return json.loads(body)
    except ValueError:
        return None


@dataclass(frozen=True)
class RequestView:
    """One incoming request as seen by the dispatcher."""

    method: str
    uri: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def path(self) -> str:
        """``uri`` without query string or fragment.

        Leading separators are left alone: ``//users/show`` is a path here,
        never a network location.
        """
        return self.uri.split("#", 1)[0].split("?", 1)[0]

    @property
    def query(self) -> Dict[str, list]:
        _, _, query = self.uri.split("#", 1)[0].partition("?")
        return parse_qs(query, keep_blank_values=True)


class RequestContext(BaseModel):
    """Argument passed to every dispatched action."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    data: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
    url_params: Dict[str, Optional[str]] = Field(default_factory=dict, alias="urlParams")

    def as_dict(self) -> Dict[str, Any]:
        """Wire shape: ``{"data", "headers", "urlParams"}``."""
        return self.model_dump(by_alias=True)
