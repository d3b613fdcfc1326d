from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FDL_VERSION_MAJOR = 1
DEFAULT_VERSION_MINOR = 0

RoundEven = Literal["whole", "even"]
RoundMode = Literal["up", "down", "round"]
FitSource = Literal[
    "framing_decision.dimensions",
    "framing_decision.protection_dimensions",
    "canvas.dimensions",
    "canvas.effective_dimensions",
]
FitMethod = Literal["width", "height", "fit_all", "fill"]
AlignmentVertical = Literal["top", "center", "bottom"]
AlignmentHorizontal = Literal["left", "center", "right"]
PreserveFromSourceCanvas = Literal[
    "none",
    "framing_decision.dimensions",
    "framing_decision.protection_dimensions",
    "canvas.dimensions",
    "canvas.effective_dimensions",
]


class FdlModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    def to_fdl_dict(self) -> Dict[str, Any]:
        # Absent optionals are omitted, never written as null.
        return self.model_dump(mode="json", exclude_none=True)


class Dimensions(FdlModel):
    width: int | float
    height: int | float


class Point(FdlModel):
    x: int | float = 0
    y: int | float = 0


class AspectRatio(FdlModel):
    width: int
    height: int


class FdlVersion(FdlModel):
    major: int = FDL_VERSION_MAJOR
    minor: int = DEFAULT_VERSION_MINOR


class RoundingConfig(FdlModel):
    even: RoundEven = "whole"
    mode: RoundMode = "round"


class FramingIntent(FdlModel):
    id: str
    label: Optional[str] = None
    aspect_ratio: AspectRatio
    protection: Optional[float] = None

    def has_protection(self) -> bool:
        return self.protection is not None and 0 < self.protection < 100


class FramingDecision(FdlModel):
    id: str
    label: Optional[str] = None
    framing_intent_id: str
    dimensions: Dimensions
    anchor_point: Point
    protection_dimensions: Optional[Dimensions] = None
    protection_anchor_point: Optional[Point] = None


class Canvas(FdlModel):
    id: str
    label: Optional[str] = None
    source_canvas_id: str
    dimensions: Dimensions
    effective_dimensions: Optional[Dimensions] = None
    effective_anchor_point: Optional[Point] = None
    photosite_dimensions: Optional[Dimensions] = None
    physical_dimensions: Optional[Dimensions] = None
    anamorphic_squeeze: Optional[float] = None
    recording_codec: Optional[str] = None
    framing_decisions: List[FramingDecision] = Field(default_factory=list)

    def decision_for_intent(self, intent_id: str) -> Optional[FramingDecision]:
        for decision in self.framing_decisions:
            if decision.framing_intent_id == intent_id:
                return decision
        return None


class Context(FdlModel):
    label: Optional[str] = None
    context_creator: Optional[str] = None
    canvases: List[Canvas] = Field(default_factory=list)


class CanvasTemplate(FdlModel):
    """Target output transform. Carried through untouched by the engine."""

    id: str
    label: Optional[str] = None
    target_dimensions: Dimensions
    target_anamorphic_squeeze: float = 1.0
    fit_source: FitSource = "framing_decision.dimensions"
    fit_method: FitMethod = "fit_all"
    alignment_method_vertical: Optional[AlignmentVertical] = None
    alignment_method_horizontal: Optional[AlignmentHorizontal] = None
    preserve_from_source_canvas: Optional[PreserveFromSourceCanvas] = None
    maximum_dimensions: Optional[Dimensions] = None
    pad_to_maximum: Optional[bool] = None
    round: Optional[RoundingConfig] = None


class FdlDocument(FdlModel):
    uuid: str
    version: FdlVersion = Field(default_factory=FdlVersion)
    fdl_creator: Optional[str] = None
    default_framing_intent: Optional[str] = None
    framing_intents: List[FramingIntent] = Field(default_factory=list)
    contexts: List[Context] = Field(default_factory=list)
    canvas_templates: List[CanvasTemplate] = Field(default_factory=list)

    def intent_by_id(self) -> Dict[str, FramingIntent]:
        # First definition wins; duplicates are reported by the validator.
        intents: Dict[str, FramingIntent] = {}
        for intent in self.framing_intents:
            intents.setdefault(intent.id, intent)
        return intents

    def iter_canvases(self) -> List[Canvas]:
        return [canvas for context in self.contexts for canvas in context.canvases]


@dataclass(frozen=True)
class DecisionGeometry:
    dimensions: Dimensions
    anchor_point: Point
    protection_dimensions: Optional[Dimensions] = None
    protection_anchor_point: Optional[Point] = None


@dataclass(frozen=True)
class SensorInfo:
    pixel_pitch_mm: float
    photosite_count: int
    sensor_width_mm: float
    sensor_height_mm: float
    image_circle_mm: float
