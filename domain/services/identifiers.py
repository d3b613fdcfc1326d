from __future__ import annotations

import re
import uuid

ELEMENT_ID_MAX_LENGTH = 32

_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_ELEMENT_ID_PATTERN = re.compile(r"[A-Za-z0-9_]{1,32}")


def generate_document_id() -> str:
    return str(uuid.uuid4())


def generate_element_id(seed_label: str) -> str:
    """Slug ``seed_label`` into an FDL element id.

    Collisions are not resolved here; two elements seeded with the same label
    get the same id and the validator reports the duplicate.
    """
    return _INVALID_ID_CHARS.sub("_", str(seed_label))[:ELEMENT_ID_MAX_LENGTH]


def framing_decision_id(canvas_id: str, framing_intent_id: str) -> str:
    return f"{canvas_id}-{framing_intent_id}"


def is_valid_element_id(value: str) -> bool:
    return bool(_ELEMENT_ID_PATTERN.fullmatch(str(value or "")))
