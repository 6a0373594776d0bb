"""HTTP routing: route table, URI matching, controllers and dispatch."""

from .controllers import Controller, ControllerRegistry, action
from .dispatcher import Dispatcher, DispatchOutcome, ResolvedTarget
from .request import RequestContext, RequestView
from .route import HttpMethod, Route, RoutePattern
from .table import RouteTable
from .uri import associate, decompose, derive_identity

__all__ = [
    "Controller",
    "ControllerRegistry",
    "action",
    "Dispatcher",
    "DispatchOutcome",
    "ResolvedTarget",
    "RequestContext",
    "RequestView",
    "HttpMethod",
    "Route",
    "RoutePattern",
    "RouteTable",
    "associate",
    "decompose",
    "derive_identity",
]
