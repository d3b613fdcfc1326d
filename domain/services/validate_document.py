"""Document validation: JSON Schema shape check plus the ID tree check.

Both passes always run and never stop at the first problem. The schema pass
only looks at field shapes; the ID tree pass only looks at ids and the
references between them, and tolerates missing or malformed containers so it
can run on documents the schema pass already rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker

from domain.fdl_schema import get_fdl_json_schema
from domain.models import FdlDocument
from domain.services.identifiers import framing_decision_id

logger = logging.getLogger(__name__)

SCHEMA_ERROR_PREFIX = "Schema Error"
ID_TREE_ERROR_PREFIX = "ID Tree Error"


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def describe(self) -> str:
        return f"{self.path or '/'} {self.message}"


@dataclass(frozen=True)
class ValidationReport:
    schema_errors: tuple[ValidationIssue, ...]
    id_tree_errors: tuple[ValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return not self.schema_errors and not self.id_tree_errors

    @property
    def errors(self) -> list[str]:
        return [f"{SCHEMA_ERROR_PREFIX}: {issue.describe()}" for issue in self.schema_errors] + [
            f"{ID_TREE_ERROR_PREFIX}: {issue.message}" for issue in self.id_tree_errors
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "schema_errors": [{"path": i.path, "message": i.message} for i in self.schema_errors],
            "id_tree_errors": [{"path": i.path, "message": i.message} for i in self.id_tree_errors],
        }


def validate_document(document: FdlDocument | Mapping[str, Any]) -> ValidationReport:
    payload = document.to_fdl_dict() if isinstance(document, FdlDocument) else dict(document)
    schema_errors = tuple(check_schema(payload))
    id_tree_errors = tuple(check_id_tree(payload))
    logger.debug(
        "Validated FDL %s: %d schema error(s), %d id tree error(s)",
        payload.get("uuid"),
        len(schema_errors),
        len(id_tree_errors),
    )
    return ValidationReport(schema_errors=schema_errors, id_tree_errors=id_tree_errors)


@lru_cache(maxsize=1)
def _schema_validator() -> Draft202012Validator:
    return Draft202012Validator(get_fdl_json_schema(), format_checker=FormatChecker())


def check_schema(payload: Mapping[str, Any]) -> list[ValidationIssue]:
    issues = [
        ValidationIssue(path=_json_pointer(error.absolute_path), message=error.message)
        for error in _schema_validator().iter_errors(payload)
    ]
    return sorted(issues, key=lambda issue: (issue.path, issue.message))


def _json_pointer(parts: Iterable[Any]) -> str:
    return "".join(f"/{part}" for part in parts)


def check_id_tree(payload: Mapping[str, Any]) -> list[ValidationIssue]:
    errors: list[ValidationIssue] = []

    intent_locations: dict[str, str] = {}
    for index, intent in _objects(payload.get("framing_intents")):
        intent_id = _string_id(intent, "id")
        location = f"/framing_intents/{index}"
        if intent_id is None:
            continue
        first = intent_locations.get(intent_id)
        if first is not None:
            errors.append(
                ValidationIssue(
                    path=location,
                    message=(
                        f"Framing Intent {intent_id} ({intent.get('label') or ''}): "
                        f"ID duplicated at {first} and {location}"
                    ),
                )
            )
            continue
        intent_locations[intent_id] = location

    default_intent = _string_id(payload, "default_framing_intent")
    if default_intent is not None and default_intent not in intent_locations:
        errors.append(
            ValidationIssue(
                path="/default_framing_intent",
                message=f"Default Framing Intent {default_intent}: Not in framing_intents",
            )
        )

    canvas_locations: dict[str, str] = {}
    decision_locations: dict[str, str] = {}
    source_canvas_ids: list[str] = []
    for context_index, context in _objects(payload.get("contexts")):
        context_label = context.get("label") or ""
        for canvas_index, canvas in _objects(context.get("canvases")):
            canvas_id = _string_id(canvas, "id")
            canvas_label = canvas.get("label") or ""
            canvas_path = f"/contexts/{context_index}/canvases/{canvas_index}"
            canvas_name = f"Context ({context_label}) > Canvas {canvas_id} ({canvas_label})"

            source_canvas_id = _string_id(canvas, "source_canvas_id")
            if source_canvas_id is not None and source_canvas_id not in source_canvas_ids:
                source_canvas_ids.append(source_canvas_id)

            if canvas_id is not None:
                first = canvas_locations.get(canvas_id)
                if first is not None:
                    errors.append(
                        ValidationIssue(
                            path=canvas_path,
                            message=f"{canvas_name}: ID duplicated at {first} and {canvas_path}",
                        )
                    )
                else:
                    canvas_locations[canvas_id] = canvas_path

            for decision_index, decision in _objects(canvas.get("framing_decisions")):
                errors.extend(
                    _check_decision(
                        decision,
                        path=f"{canvas_path}/framing_decisions/{decision_index}",
                        canvas_id=canvas_id,
                        canvas_name=canvas_name,
                        intent_ids=intent_locations,
                        decision_locations=decision_locations,
                    )
                )

    unknown_sources = [item for item in source_canvas_ids if item not in canvas_locations]
    if unknown_sources:
        errors.append(
            ValidationIssue(
                path="/contexts",
                message=f"Source Canvas IDs [{', '.join(unknown_sources)}] not in canvases",
            )
        )

    template_locations: dict[str, str] = {}
    for index, template in _objects(payload.get("canvas_templates")):
        template_id = _string_id(template, "id")
        location = f"/canvas_templates/{index}"
        if template_id is None:
            continue
        first = template_locations.get(template_id)
        if first is not None:
            errors.append(
                ValidationIssue(
                    path=location,
                    message=(
                        f"Canvas Template {template_id} ({template.get('label') or ''}): "
                        f"ID duplicated at {first} and {location}"
                    ),
                )
            )
            continue
        template_locations[template_id] = location

    return errors


def _check_decision(
    decision: Mapping[str, Any],
    *,
    path: str,
    canvas_id: str | None,
    canvas_name: str,
    intent_ids: Mapping[str, str],
    decision_locations: dict[str, str],
) -> list[ValidationIssue]:
    errors: list[ValidationIssue] = []
    decision_id = _string_id(decision, "id")
    intent_id = _string_id(decision, "framing_intent_id")
    name = f"{canvas_name} > Framing Decision {decision_id}"

    if decision_id is not None:
        first = decision_locations.get(decision_id)
        if first is not None:
            errors.append(ValidationIssue(path=path, message=f"{name}: ID duplicated at {first} and {path}"))
        else:
            decision_locations[decision_id] = path

    if intent_id is not None and intent_id not in intent_ids:
        errors.append(
            ValidationIssue(
                path=f"{path}/framing_intent_id",
                message=f"{name}: Framing Intent ID {intent_id} not in framing_intents",
            )
        )

    if decision_id is not None and canvas_id is not None and intent_id is not None:
        expected = framing_decision_id(canvas_id, intent_id)
        if decision_id != expected:
            errors.append(
                ValidationIssue(
                    path=f"{path}/id",
                    message=f"{name}: ID doesn't match expected {expected}",
                )
            )
    return errors


def _objects(value: Any) -> list[tuple[int, Mapping[str, Any]]]:
    if not isinstance(value, list):
        return []
    return [(index, item) for index, item in enumerate(value) if isinstance(item, Mapping)]


def _string_id(item: Mapping[str, Any], key: str) -> str | None:
    value = item.get(key)
    return value if isinstance(value, str) else None
