"""Framing decision geometry.

This is the only place fit and protection math lives; previews, exports and
info panels all call :func:`derive_geometry` rather than re-deriving boxes.
Intents are fitted inside the canvas (contain, never cover) and centred.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from fractions import Fraction
from numbers import Real
from typing import Any, Optional

from domain.models import (
    Canvas,
    DecisionGeometry,
    Dimensions,
    FdlDocument,
    FramingDecision,
    FramingIntent,
    Point,
    RoundingConfig,
    SensorInfo,
)
from domain.services.identifiers import framing_decision_id
from domain.services.precision import (
    DEFAULT_ROUNDING,
    round_dimension,
    round_dimensions,
    round_offset,
    to_fraction,
)

logger = logging.getLogger(__name__)


class GeometryError(ValueError):
    """Raised when a decision cannot be derived from an intent and a canvas."""


def derive_geometry(
    intent: FramingIntent,
    canvas: Canvas,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> DecisionGeometry:
    canvas_width, canvas_height = _positive_pair(
        canvas.dimensions.width, canvas.dimensions.height, f"Canvas {canvas.id} dimensions"
    )
    ratio_width, ratio_height = _positive_pair(
        intent.aspect_ratio.width, intent.aspect_ratio.height, f"Framing intent {intent.id} aspect_ratio"
    )
    canvas_ratio = canvas_width / canvas_height
    intent_ratio = ratio_width / ratio_height

    if canvas_ratio > intent_ratio:
        # Pillarbox: full height, margins left and right.
        height = canvas.dimensions.height
        width = min(round_dimension(canvas_height * intent_ratio, rounding), canvas.dimensions.width)
        anchor = Point(x=round_offset((canvas_width - width) / 2, rounding), y=0)
    elif canvas_ratio < intent_ratio:
        # Letterbox: full width, margins top and bottom.
        width = canvas.dimensions.width
        height = min(round_dimension(canvas_width / intent_ratio, rounding), canvas.dimensions.height)
        anchor = Point(x=0, y=round_offset((canvas_height - height) / 2, rounding))
    else:
        width = canvas.dimensions.width
        height = canvas.dimensions.height
        anchor = Point(x=0, y=0)

    dimensions = Dimensions(width=width, height=height)
    if not intent.has_protection():
        return DecisionGeometry(dimensions=dimensions, anchor_point=anchor)

    protection_dimensions, protection_anchor = _protection_box(
        dimensions, anchor, intent.protection, rounding
    )
    return DecisionGeometry(
        dimensions=dimensions,
        anchor_point=anchor,
        protection_dimensions=protection_dimensions,
        protection_anchor_point=protection_anchor,
    )


def _protection_box(
    dimensions: Dimensions,
    anchor: Point,
    protection: float,
    rounding: RoundingConfig,
) -> tuple[Dimensions, Point]:
    share = to_fraction(protection) / 100
    width = to_fraction(dimensions.width)
    height = to_fraction(dimensions.height)
    protection_dimensions = round_dimensions(width * (1 - share), height * (1 - share), rounding)
    protection_anchor = Point(
        x=anchor.x + round_offset(width * share / 2, rounding),
        y=anchor.y + round_offset(height * share / 2, rounding),
    )
    return protection_dimensions, protection_anchor


def derive_decision(
    intent: FramingIntent,
    canvas: Canvas,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
    *,
    decision_id: Optional[str] = None,
    label: Optional[str] = None,
) -> FramingDecision:
    geometry = derive_geometry(intent, canvas, rounding)
    return FramingDecision(
        id=decision_id or framing_decision_id(canvas.id, intent.id),
        label=label if label is not None else intent.label,
        framing_intent_id=intent.id,
        dimensions=geometry.dimensions,
        anchor_point=geometry.anchor_point,
        protection_dimensions=geometry.protection_dimensions,
        protection_anchor_point=geometry.protection_anchor_point,
    )


def apply_geometry(decision: FramingDecision, geometry: DecisionGeometry) -> FramingDecision:
    return decision.model_copy(
        update={
            "dimensions": geometry.dimensions,
            "anchor_point": geometry.anchor_point,
            "protection_dimensions": geometry.protection_dimensions,
            "protection_anchor_point": geometry.protection_anchor_point,
        }
    )


def recompute_canvas(
    canvas: Canvas,
    intents_by_id: Mapping[str, FramingIntent],
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> Canvas:
    """Refresh every decision on ``canvas`` from the current intents.

    Decisions whose intent is gone, or whose geometry can no longer be
    derived, are dropped rather than kept with stale geometry.
    """
    decisions: list[FramingDecision] = []
    for decision in canvas.framing_decisions:
        intent = intents_by_id.get(decision.framing_intent_id)
        if intent is None:
            logger.info(
                "Dropping framing decision %s on canvas %s: framing intent %s no longer exists",
                decision.id,
                canvas.id,
                decision.framing_intent_id,
            )
            continue
        try:
            geometry = derive_geometry(intent, canvas, rounding)
        except GeometryError as exc:
            logger.warning("Dropping framing decision %s on canvas %s: %s", decision.id, canvas.id, exc)
            continue
        decisions.append(apply_geometry(decision, geometry))
    return canvas.model_copy(update={"framing_decisions": decisions})


def recompute_all_decisions(
    document: FdlDocument,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    intents_by_id = document.intent_by_id()
    contexts = [
        context.model_copy(
            update={
                "canvases": [
                    recompute_canvas(canvas, intents_by_id, rounding) for canvas in context.canvases
                ]
            }
        )
        for context in document.contexts
    ]
    return document.model_copy(update={"contexts": contexts})


def sync_decisions(
    document: FdlDocument,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    """Give every canvas exactly one decision per framing intent, then recompute."""
    intents = list(document.intent_by_id().values())
    contexts = []
    for context in document.contexts:
        canvases = []
        for canvas in context.canvases:
            decisions: list[FramingDecision] = []
            for intent in intents:
                existing = canvas.decision_for_intent(intent.id)
                if existing is not None:
                    decisions.append(existing)
                    continue
                try:
                    decisions.append(derive_decision(intent, canvas, rounding))
                except GeometryError as exc:
                    logger.warning("Skipping intent %s on canvas %s: %s", intent.id, canvas.id, exc)
            canvases.append(canvas.model_copy(update={"framing_decisions": decisions}))
        contexts.append(context.model_copy(update={"canvases": canvases}))
    return recompute_all_decisions(document.model_copy(update={"contexts": contexts}), rounding)


def compute_effective_dimensions(
    dimensions: Dimensions,
    anamorphic_squeeze: Optional[float] = None,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> Dimensions:
    squeeze = _positive(1.0 if anamorphic_squeeze is None else anamorphic_squeeze, "anamorphic_squeeze")
    width = round_dimension(to_fraction(dimensions.width) * squeeze, rounding)
    return Dimensions(width=width, height=dimensions.height)


def with_canvas_changes(
    canvas: Canvas,
    *,
    dimensions: Optional[Dimensions] = None,
    anamorphic_squeeze: Optional[float] = None,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> Canvas:
    updated_dimensions = dimensions or canvas.dimensions
    squeeze = anamorphic_squeeze if anamorphic_squeeze is not None else canvas.anamorphic_squeeze
    update: dict[str, Any] = {"dimensions": updated_dimensions, "anamorphic_squeeze": squeeze}
    try:
        _positive_pair(updated_dimensions.width, updated_dimensions.height, f"Canvas {canvas.id} dimensions")
        update["effective_dimensions"] = compute_effective_dimensions(updated_dimensions, squeeze, rounding)
    except GeometryError as exc:
        # Left for the schema pass to report; decisions are dropped on recompute.
        logger.warning("Not re-deriving effective dimensions of canvas %s: %s", canvas.id, exc)
        return canvas.model_copy(update=update)
    update["effective_anchor_point"] = canvas.effective_anchor_point or Point(x=0, y=0)
    return canvas.model_copy(update=update)


def desqueeze_dimensions(
    width: Real,
    height: Real,
    squeeze_x: Real,
    squeeze_y: Real = 1.0,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> Dimensions:
    factor_x = _positive(squeeze_x, "squeeze_x")
    factor_y = _positive(squeeze_y, "squeeze_y")
    return round_dimensions(to_fraction(width) * factor_x, to_fraction(height) * factor_y, rounding)


def compute_sensor_info(photosite_dimensions: Dimensions, physical_dimensions: Dimensions) -> SensorInfo:
    photosite_width, photosite_height = _positive_pair(
        photosite_dimensions.width, photosite_dimensions.height, "photosite_dimensions"
    )
    sensor_width = float(physical_dimensions.width)
    sensor_height = float(physical_dimensions.height)
    return SensorInfo(
        pixel_pitch_mm=sensor_width / float(photosite_width),
        photosite_count=int(photosite_width * photosite_height),
        sensor_width_mm=sensor_width,
        sensor_height_mm=sensor_height,
        image_circle_mm=math.hypot(sensor_width, sensor_height),
    )


def _positive(value: Real, name: str) -> Fraction:
    try:
        exact = to_fraction(value)
    except (TypeError, ValueError) as exc:
        msg = f"{name} must be a finite number, got {value!r}"
        raise GeometryError(msg) from exc
    if exact <= 0:
        msg = f"{name} must be positive, got {value!r}"
        raise GeometryError(msg)
    return exact


def _positive_pair(width: Real, height: Real, name: str) -> tuple[Fraction, Fraction]:
    return _positive(width, f"{name}.width"), _positive(height, f"{name}.height")
