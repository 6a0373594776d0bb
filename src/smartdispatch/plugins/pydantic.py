"""Pydantic plugin: validate annotated action arguments before the call.

When an action is registered the plugin reads its type hints and builds a
pydantic model with one field per annotated parameter (defaults carried
over). On each call the annotated arguments go through that model and the
validated (possibly coerced) values are passed on; unannotated arguments are
passed untouched. A failure raises ``ValidationError`` titled
``"Validation error in <action>"``.

Dispatched actions receive one ``RequestContext``; annotating the parameter
as such rejects direct calls with anything else.

Actions without usable hints are not wrapped. A hint naming something that is
not a parameter is a registration error (``ValueError``).
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Optional, Tuple, Type, get_type_hints

from pydantic import BaseModel, ValidationError, create_model

from smartdispatch.core.router import Router
from smartdispatch.plugins._base_plugin import ActionEntry, BasePlugin


def argument_model(action: str, func: Callable) -> Optional[Type[BaseModel]]:
    """Model of the annotated parameters of ``func``, or ``None``."""
    try:
        hints = get_type_hints(func)
    except (NameError, TypeError):
        return None
    hints.pop("return", None)
    if not hints:
        return None
    parameters = inspect.signature(func).parameters
    unknown = sorted(set(hints) - set(parameters))
    if unknown:
        raise ValueError(f"Action {action!r} annotates {unknown}, which are not parameters")
    fields: Dict[str, Any] = {}
    for arg, hint in hints.items():
        default = parameters[arg].default
        fields[arg] = (hint, ... if default is inspect.Parameter.empty else default)
    return create_model(f"{action}_arguments", **fields)


class PydanticPlugin(BasePlugin):
    """Validates action arguments against their type hints."""

    plugin_code = "pydantic"
    plugin_description = "Validates action arguments with pydantic"

    __slots__ = ("_models",)

    def __init__(self, router: Router, **config: Any) -> None:
        self._models: Dict[str, Tuple[Type[BaseModel], inspect.Signature]] = {}
        super().__init__(router, **config)

    def configure(self, enabled: bool = True) -> None:
        pass

    def on_register(self, entry: ActionEntry) -> None:
        self._models.pop(entry.name, None)
        model = argument_model(entry.name, entry.func)
        if model is not None:
            self._models[entry.name] = (model, inspect.signature(entry.func))

    def model_for(self, action: str) -> Optional[Type[BaseModel]]:
        found = self._models.get(action)
        return found[0] if found else None

    def wrap(self, entry: ActionEntry, call_next: Callable) -> Callable:
        found = self._models.get(entry.name)
        if found is None:
            return call_next
        model, signature = found

        def validated(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            annotated = {
                key: value for key, value in bound.arguments.items() if key in model.model_fields
            }
            try:
                checked = model(**annotated)
            except ValidationError as exc:
                raise ValidationError.from_exception_data(
                    title=f"Validation error in {entry.name}",
                    line_errors=exc.errors(),
                ) from exc
            bound.arguments.update(dict(checked))
            return call_next(*bound.args, **bound.kwargs)

        return validated


Router.register_plugin(PydanticPlugin)
