"""
Operation catalog contract.

Each InDesign operation is declared once as an ``Operation``:
- its parameters (JSON type, default, enum, minimum, required)
- a human label used to prefix successful results
- the message rendered when no document is open (if the operation needs one)
- whether it is undoable (grouped into one InDesign undo step)
- whether it is long-running (exports, packaging, data merge)
- a builder that turns validated parameters into ExtendScript

``Operation.validate`` is the contract check that runs before anything is
rendered; ``Operation.render`` is pure.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable

import extendscript
from extendscript import Code

PARAM_TYPES = {"string", "number", "integer", "boolean", "array"}

_DOCUMENT_GUARD = """
if (app.documents.length === 0) {
    $MESSAGE$;
} else {
    var doc = app.activeDocument;
    $BODY$
}
"""


class ValidationError(ValueError):
    """Parameters do not satisfy an operation's declared shape."""


@dataclass(frozen=True)
class Param:
    name: str
    type: str
    description: str = ""
    default: Any = None
    required: bool = False
    enum: tuple[str, ...] | None = None
    minimum: float | None = None
    items: dict | None = None

    def __post_init__(self):
        if self.type not in PARAM_TYPES:
            raise ValueError(f"unknown parameter type {self.type!r} for {self.name}")

    def schema(self) -> dict:
        """JSON Schema fragment for this parameter."""
        schema: dict[str, Any] = {"type": self.type}
        if self.description:
            schema["description"] = self.description
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.items is not None:
            schema["items"] = self.items
        return schema

    def check(self, value: Any) -> Any:
        """Return *value* normalised to this parameter's type or raise."""
        if self.type == "string":
            if not isinstance(value, str):
                raise ValidationError(f"{self.name} must be a string")
            if self.enum is not None and value not in self.enum:
                raise ValidationError(f"{self.name} must be one of: {', '.join(self.enum)}")
            return value

        if self.type == "boolean":
            if not isinstance(value, bool):
                raise ValidationError(f"{self.name} must be a boolean")
            return value

        if self.type in ("number", "integer"):
            value = _check_number(self.name, value)
            if self.type == "integer":
                if isinstance(value, float):
                    if not value.is_integer():
                        raise ValidationError(f"{self.name} must be an integer")
                    value = int(value)
            if self.minimum is not None and value < self.minimum:
                raise ValidationError(f"{self.name} must be >= {self.minimum:g}")
            return value

        if not isinstance(value, list):
            raise ValidationError(f"{self.name} must be an array")
        item_type = (self.items or {}).get("type")
        if item_type == "number":
            return [_check_number(f"{self.name}[{i}]", item) for i, item in enumerate(value)]
        if item_type == "array":
            for i, item in enumerate(value):
                if not isinstance(item, list):
                    raise ValidationError(f"{self.name}[{i}] must be an array")
        return list(value)


@dataclass(frozen=True)
class Operation:
    name: str
    label: str
    group: str
    description: str
    build: Callable[[dict], Code]
    params: tuple[Param, ...] = ()
    no_document: str | None = None
    undoable: bool = False
    long_running: bool = False
    check: Callable[[dict], None] | None = None

    @property
    def undo_name(self) -> str | None:
        return f"MCP: {self.label}" if self.undoable else None

    def input_schema(self) -> dict:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.schema() for p in self.params},
        }
        required = [p.name for p in self.params if p.required]
        if required:
            schema["required"] = required
        schema["additionalProperties"] = False
        return schema

    def validate(self, arguments: dict | None) -> dict:
        """Check *arguments* against the declared parameters.

        Returns a new dict with defaults applied and absent optional
        parameters left out.  ``None`` counts as absent.
        """
        arguments = dict(arguments or {})
        known = {p.name for p in self.params}
        unknown = sorted(set(arguments) - known)
        if unknown:
            raise ValidationError(f"Unknown parameter(s) for {self.name}: {', '.join(unknown)}")

        params: dict[str, Any] = {}
        for param in self.params:
            value = arguments.get(param.name)
            if value is None:
                if param.required:
                    raise ValidationError(f"Missing required parameter: {param.name}")
                if param.default is not None:
                    params[param.name] = param.default
                continue
            params[param.name] = param.check(value)

        if self.check is not None:
            self.check(params)
        return params

    def render(self, params: dict) -> str:
        """Build the ExtendScript payload for already validated *params*."""
        body = self.build(params)
        if self.no_document is None:
            return body.text
        return extendscript.template(_DOCUMENT_GUARD, message=self.no_document, body=body).text


def _check_number(name: str, value: Any) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number")
    return value
