#!/usr/bin/env python3
"""Minimal JSON contract validator for persisted log collections."""

from __future__ import annotations

from typing import Any


LOG_ENTRY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "text", "createdAt", "tagIDs"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "text": {"type": "string"},
        "createdAt": {"type": ["string", "number"]},
        "tagIDs": {"type": "array", "items": {"type": "string"}},
    },
    "additionalProperties": True,
}

LOG_COLLECTION_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": LOG_ENTRY_SCHEMA,
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return (isinstance(value, int) or isinstance(value, float)) and not isinstance(value, bool)


def _matches_type(expected_type: str, value: Any) -> bool:
    if expected_type == "object":
        return isinstance(value, dict)
    if expected_type == "array":
        return isinstance(value, list)
    if expected_type == "string":
        return isinstance(value, str)
    if expected_type == "integer":
        return _is_int(value)
    if expected_type == "number":
        return _is_number(value)
    if expected_type == "boolean":
        return isinstance(value, bool)
    if expected_type == "null":
        return value is None
    return False


def _validate(schema: dict[str, Any], value: Any, path: str, errors: list[str]) -> None:
    schema_type = schema.get("type")
    if schema_type is not None:
        if isinstance(schema_type, list):
            if not any(_matches_type(str(t), value) for t in schema_type):
                errors.append(f"{path}: expected one of {schema_type}, got {type(value).__name__}")
                return
        else:
            if not _matches_type(str(schema_type), value):
                errors.append(f"{path}: expected {schema_type}, got {type(value).__name__}")
                return

    if isinstance(value, str):
        min_length = schema.get("minLength")
        if min_length is not None and len(value) < int(min_length):
            errors.append(f"{path}: string shorter than {min_length}")

    if isinstance(value, dict):
        for key in schema.get("required", []):
            if key not in value:
                errors.append(f"{path}: missing required property {key!r}")

        properties = schema.get("properties", {})
        additional_allowed = schema.get("additionalProperties", True)

        for key, item in value.items():
            child_path = f"{path}.{key}"
            if key in properties:
                prop_schema = properties[key]
                if isinstance(prop_schema, dict):
                    _validate(prop_schema, item, child_path, errors)
            elif additional_allowed is False:
                errors.append(f"{path}: additional property {key!r} is not allowed")

    if isinstance(value, list):
        item_schema = schema.get("items")
        if isinstance(item_schema, dict):
            for idx, item in enumerate(value):
                _validate(item_schema, item, f"{path}[{idx}]", errors)


def contract_errors(payload: Any, schema: dict[str, Any] = LOG_COLLECTION_SCHEMA) -> list[str]:
    errors: list[str] = []
    _validate(schema, payload, "$", errors)
    return errors


def validate_log_collection(payload: Any) -> None:
    errors = contract_errors(payload)
    if errors:
        joined = "; ".join(errors[:10])
        raise ValueError(f"persisted logs do not match contract: {joined}")
