"""Strict validation of untyped vendor JSON against pydantic models."""

from __future__ import annotations

import json
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from .errors import ValidationError, ValidationIssue

ModelT = TypeVar("ModelT", bound=BaseModel)


def _issues(exc: pydantic.ValidationError) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        issues.append(ValidationIssue(field=loc, message=err["msg"], type=err["type"]))
    return issues


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """Validate a decoded JSON value into *model*.

    Validation runs in strict JSON mode, so a number where a string is
    expected is rejected instead of converted. Failures raise
    :class:`ValidationError` listing every offending field.
    """
    try:
        raw = json.dumps(data)
    except (TypeError, ValueError) as exc:
        issue = ValidationIssue(field="<root>", message=str(exc), type="json_invalid")
        raise ValidationError([issue], model=model.__name__) from exc

    try:
        return model.model_validate_json(raw, strict=True)
    except pydantic.ValidationError as exc:
        raise ValidationError(_issues(exc), model=model.__name__) from exc


def json_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON Schema sent to the vendor for schema-driven extraction."""
    return model.model_json_schema(by_alias=True)
