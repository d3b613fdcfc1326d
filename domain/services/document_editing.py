from __future__ import annotations

from typing import Any, Literal, Optional

from domain.models import (
    DEFAULT_VERSION_MINOR,
    Canvas,
    Context,
    FdlDocument,
    FdlVersion,
    FramingIntent,
    RoundingConfig,
)
from domain.services.framing_geometry import recompute_all_decisions, with_canvas_changes
from domain.services.identifiers import generate_document_id
from domain.services.precision import DEFAULT_ROUNDING


def create_empty_document(
    creator: Optional[str] = None,
    *,
    version_minor: int = DEFAULT_VERSION_MINOR,
) -> FdlDocument:
    return FdlDocument(
        uuid=generate_document_id(),
        version=FdlVersion(minor=version_minor),
        fdl_creator=creator or None,
    )


def add_framing_intent(
    document: FdlDocument,
    intent: FramingIntent,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    updated = document.model_copy(update={"framing_intents": [*document.framing_intents, intent]})
    return recompute_all_decisions(updated, rounding)


def update_framing_intent(
    document: FdlDocument,
    intent_id: str,
    changes: dict[str, Any],
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    if "id" in changes:
        msg = "Framing intent ids cannot be changed in place; remove and add the intent instead"
        raise ValueError(msg)
    found = False
    intents: list[FramingIntent] = []
    for intent in document.framing_intents:
        if intent.id == intent_id and not found:
            found = True
            payload = {**intent.model_dump(), **changes}
            intents.append(FramingIntent.model_validate(payload))
        else:
            intents.append(intent)
    if not found:
        msg = f"Framing intent not found: {intent_id}"
        raise ValueError(msg)
    return recompute_all_decisions(document.model_copy(update={"framing_intents": intents}), rounding)


def remove_framing_intent(
    document: FdlDocument,
    intent_id: str,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    intents = [intent for intent in document.framing_intents if intent.id != intent_id]
    if len(intents) == len(document.framing_intents):
        msg = f"Framing intent not found: {intent_id}"
        raise ValueError(msg)
    update: dict[str, Any] = {"framing_intents": intents}
    if document.default_framing_intent == intent_id:
        update["default_framing_intent"] = None
    return recompute_all_decisions(document.model_copy(update=update), rounding)


def set_default_framing_intent(document: FdlDocument, intent_id: Optional[str]) -> FdlDocument:
    if intent_id is not None and intent_id not in document.intent_by_id():
        msg = f"Framing intent not found: {intent_id}"
        raise ValueError(msg)
    return document.model_copy(update={"default_framing_intent": intent_id})


def add_context(
    document: FdlDocument,
    context: Context,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    updated = document.model_copy(update={"contexts": [*document.contexts, context]})
    return recompute_all_decisions(updated, rounding)


def update_context(
    document: FdlDocument,
    index: int,
    changes: dict[str, Any],
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    """Apply ``changes`` to the context at ``index``. Contexts carry no id."""
    _check_context_index(document, index)
    contexts = list(document.contexts)
    payload = {**contexts[index].model_dump(), **changes}
    contexts[index] = Context.model_validate(payload)
    return recompute_all_decisions(document.model_copy(update={"contexts": contexts}), rounding)


def remove_context(
    document: FdlDocument,
    index: int,
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    _check_context_index(document, index)
    contexts = [context for position, context in enumerate(document.contexts) if position != index]
    return recompute_all_decisions(document.model_copy(update={"contexts": contexts}), rounding)


def move_framing_intent(
    document: FdlDocument,
    intent_id: str,
    direction: Literal["up", "down"],
) -> FdlDocument:
    """Swap the intent with its neighbour. Moving past either end is a no-op."""
    intents = list(document.framing_intents)
    position = next((i for i, intent in enumerate(intents) if intent.id == intent_id), None)
    if position is None:
        msg = f"Framing intent not found: {intent_id}"
        raise ValueError(msg)
    if direction not in ("up", "down"):
        msg = f"Unknown direction: {direction}"
        raise ValueError(msg)
    target = position - 1 if direction == "up" else position + 1
    if not 0 <= target < len(intents):
        return document
    intents[position], intents[target] = intents[target], intents[position]
    return document.model_copy(update={"framing_intents": intents})


def update_canvas(
    document: FdlDocument,
    canvas_id: str,
    changes: dict[str, Any],
    rounding: RoundingConfig = DEFAULT_ROUNDING,
) -> FdlDocument:
    """Apply ``changes`` to the first canvas with ``canvas_id``.

    ``effective_dimensions`` is re-derived whenever ``dimensions`` or
    ``anamorphic_squeeze`` change, and all decisions are recomputed.
    """
    derived = sorted({"framing_decisions", "effective_dimensions"} & changes.keys())
    if derived:
        msg = f"{', '.join(derived)} are derived; they cannot be edited through update_canvas"
        raise ValueError(msg)
    found = False
    contexts: list[Context] = []
    for context in document.contexts:
        canvases: list[Canvas] = []
        for canvas in context.canvases:
            if canvas.id == canvas_id and not found:
                found = True
                canvas = _apply_canvas_changes(canvas, changes, rounding)
            canvases.append(canvas)
        contexts.append(context.model_copy(update={"canvases": canvases}))
    if not found:
        msg = f"Canvas not found: {canvas_id}"
        raise ValueError(msg)
    return recompute_all_decisions(document.model_copy(update={"contexts": contexts}), rounding)


def _apply_canvas_changes(canvas: Canvas, changes: dict[str, Any], rounding: RoundingConfig) -> Canvas:
    payload = {**canvas.model_dump(), **changes}
    updated = Canvas.model_validate(payload)
    if "dimensions" in changes or "anamorphic_squeeze" in changes:
        updated = with_canvas_changes(updated, rounding=rounding)
    return updated


def _check_context_index(document: FdlDocument, index: int) -> None:
    if not 0 <= index < len(document.contexts):
        msg = f"Context not found at index {index}"
        raise ValueError(msg)
