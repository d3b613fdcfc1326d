from __future__ import annotations

from typing import Any

ELEMENT_ID_PATTERN = r"^[A-Za-z0-9_]{1,32}$"
DECISION_ID_PATTERN = r"^[A-Za-z0-9_]{1,32}-[A-Za-z0-9_]{1,32}$"


def _dimensions(number_type: str, *, exclusive_minimum: float | None = 0) -> dict[str, Any]:
    axis: dict[str, Any] = {"type": number_type}
    if exclusive_minimum is not None:
        axis["exclusiveMinimum"] = exclusive_minimum
    return {
        "type": "object",
        "properties": {"width": axis, "height": dict(axis)},
        "required": ["width", "height"],
        "additionalProperties": False,
    }


def _point() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
        "required": ["x", "y"],
        "additionalProperties": False,
    }


def get_fdl_json_schema() -> dict[str, Any]:
    """Draft 2020-12 schema for ASC FDL 1.0 / 1.1 documents."""
    label = {"type": "string", "maxLength": 512}
    element_id = {"type": "string", "pattern": ELEMENT_ID_PATTERN}

    framing_intent = {
        "type": "object",
        "properties": {
            "label": label,
            "id": element_id,
            "aspect_ratio": _dimensions("integer"),
            "protection": {"type": "number", "minimum": 0, "maximum": 99},
        },
        "required": ["id", "aspect_ratio"],
        "additionalProperties": False,
    }

    framing_decision = {
        "type": "object",
        "properties": {
            "label": label,
            "id": {"type": "string", "pattern": DECISION_ID_PATTERN},
            "framing_intent_id": element_id,
            "dimensions": _dimensions("number"),
            "anchor_point": _point(),
            "protection_dimensions": _dimensions("number"),
            "protection_anchor_point": _point(),
        },
        "required": ["id", "framing_intent_id", "dimensions", "anchor_point"],
        "dependentRequired": {
            "protection_dimensions": ["protection_anchor_point"],
            "protection_anchor_point": ["protection_dimensions"],
        },
        "additionalProperties": False,
    }

    canvas = {
        "type": "object",
        "properties": {
            "label": label,
            "id": element_id,
            "source_canvas_id": element_id,
            "dimensions": _dimensions("integer"),
            "effective_dimensions": _dimensions("integer"),
            "effective_anchor_point": _point(),
            "photosite_dimensions": _dimensions("integer"),
            "physical_dimensions": _dimensions("number"),
            "anamorphic_squeeze": {"type": "number", "exclusiveMinimum": 0},
            "recording_codec": {"type": "string"},
            "framing_decisions": {"type": "array", "items": framing_decision},
        },
        "required": ["id", "source_canvas_id", "dimensions"],
        "dependentRequired": {"effective_dimensions": ["effective_anchor_point"]},
        "additionalProperties": False,
    }

    context = {
        "type": "object",
        "properties": {
            "label": label,
            "context_creator": {"type": "string", "maxLength": 512},
            "canvases": {"type": "array", "items": canvas},
        },
        "additionalProperties": False,
    }

    preserve_choices = [
        "none",
        "framing_decision.dimensions",
        "framing_decision.protection_dimensions",
        "canvas.dimensions",
        "canvas.effective_dimensions",
    ]
    canvas_template = {
        "type": "object",
        "properties": {
            "label": label,
            "id": element_id,
            "target_dimensions": _dimensions("integer"),
            "target_anamorphic_squeeze": {"type": "number", "minimum": 0},
            "fit_source": {"enum": preserve_choices[1:]},
            "fit_method": {"enum": ["width", "height", "fit_all", "fill"]},
            "alignment_method_vertical": {"enum": ["top", "center", "bottom"]},
            "alignment_method_horizontal": {"enum": ["left", "center", "right"]},
            "preserve_from_source_canvas": {"enum": preserve_choices},
            "maximum_dimensions": _dimensions("integer"),
            "pad_to_maximum": {"type": "boolean"},
            "round": {
                "type": "object",
                "properties": {
                    "even": {"enum": ["whole", "even"]},
                    "mode": {"enum": ["up", "down", "round"]},
                },
                "required": ["even", "mode"],
                "additionalProperties": False,
            },
        },
        "required": ["id", "target_dimensions", "target_anamorphic_squeeze", "fit_source", "fit_method"],
        "additionalProperties": False,
    }

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "ASC Framing Decision List",
        "type": "object",
        "properties": {
            "uuid": {"type": "string", "format": "uuid"},
            "version": {
                "type": "object",
                "properties": {
                    "major": {"const": 1},
                    "minor": {"enum": [0, 1]},
                },
                "required": ["major", "minor"],
                "additionalProperties": False,
            },
            "fdl_creator": {"type": "string", "maxLength": 512},
            "default_framing_intent": element_id,
            "framing_intents": {"type": "array", "items": framing_intent},
            "contexts": {"type": "array", "items": context},
            "canvas_templates": {"type": "array", "items": canvas_template},
        },
        "required": ["uuid", "version"],
        "additionalProperties": False,
    }
