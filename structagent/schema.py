"""
Declarative description of the JSON an agent must answer with.

A schema is a small tree of immutable nodes. Each node can render itself as a
JSON-schema fragment for the request and check a decoded value against itself:

    schema = obj({
        "name": string("The name of the person."),
        "tags": array(string(), "Free-form labels."),
    })
    schema.to_wire_schema()
    schema.validate({"name": "Jane", "tags": []}).ok  # True
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"


@dataclass(frozen=True)
class Validation:
    ok: bool
    value: Any = None
    errors: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.ok


class Schema:
    description: Optional[str] = None

    def to_wire_schema(self) -> dict:
        out = self._wire()
        if self.description:
            out["description"] = self.description
        return out

    def validate(self, value: Any) -> Validation:
        errors: list[str] = []
        self._check(value, "$", errors)
        if errors:
            return Validation(ok=False, errors=tuple(errors))
        return Validation(ok=True, value=value)

    def _wire(self) -> dict:
        raise NotImplementedError

    def _check(self, value: Any, path: str, errors: list[str]) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class StringSchema(Schema):
    description: Optional[str] = None

    def _wire(self) -> dict:
        return {"type": "string"}

    def _check(self, value, path, errors):
        if not isinstance(value, str):
            errors.append(f"{path}: expected string, got {_type_name(value)}")


@dataclass(frozen=True)
class NumberSchema(Schema):
    description: Optional[str] = None

    def _wire(self) -> dict:
        return {"type": "number"}

    def _check(self, value, path, errors):
        # bool is an int subclass but never a JSON number
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{path}: expected number, got {_type_name(value)}")


@dataclass(frozen=True)
class BooleanSchema(Schema):
    description: Optional[str] = None

    def _wire(self) -> dict:
        return {"type": "boolean"}

    def _check(self, value, path, errors):
        if not isinstance(value, bool):
            errors.append(f"{path}: expected boolean, got {_type_name(value)}")


@dataclass(frozen=True)
class ArraySchema(Schema):
    items: Schema = field(default_factory=StringSchema)
    description: Optional[str] = None

    def _wire(self) -> dict:
        return {"type": "array", "items": self.items.to_wire_schema()}

    def _check(self, value, path, errors):
        if not isinstance(value, list):
            errors.append(f"{path}: expected array, got {_type_name(value)}")
            return
        for i, item in enumerate(value):
            self.items._check(item, f"{path}[{i}]", errors)


@dataclass(frozen=True)
class ObjectSchema(Schema):
    fields: tuple[tuple[str, Schema], ...] = ()
    description: Optional[str] = None

    def _wire(self) -> dict:
        return {
            "type": "object",
            "properties": {name: s.to_wire_schema() for name, s in self.fields},
            "required": [name for name, _ in self.fields],
            "additionalProperties": False,
        }

    def _check(self, value, path, errors):
        if not isinstance(value, dict):
            errors.append(f"{path}: expected object, got {_type_name(value)}")
            return
        for name, s in self.fields:
            child = f"{name}" if path == "$" else f"{path}.{name}"
            if name not in value:
                errors.append(f"{child}: missing required field")
                continue
            s._check(value[name], child, errors)


def string(description: str | None = None) -> StringSchema:
    return StringSchema(description=description)


def number(description: str | None = None) -> NumberSchema:
    return NumberSchema(description=description)


def boolean(description: str | None = None) -> BooleanSchema:
    return BooleanSchema(description=description)


def array(items: Schema, description: str | None = None) -> ArraySchema:
    return ArraySchema(items=items, description=description)


def obj(fields: Mapping[str, Schema], description: str | None = None) -> ObjectSchema:
    return ObjectSchema(fields=tuple(fields.items()), description=description)


def wire_schema(schema: Schema) -> dict:
    """Root-level JSON schema sent as ``response_format.schema``."""
    return {**schema.to_wire_schema(), "$schema": JSON_SCHEMA_DRAFT}


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
