from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.models import Canvas, Dimensions, Point
from domain.services.framing_geometry import compute_effective_dimensions
from domain.services.identifiers import generate_element_id


class SensorResolution(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    physical_width_mm: Optional[float] = Field(default=None, gt=0)
    physical_height_mm: Optional[float] = Field(default=None, gt=0)

    def physical_dimensions(self) -> Optional[Dimensions]:
        if self.physical_width_mm is None or self.physical_height_mm is None:
            return None
        return Dimensions(width=self.physical_width_mm, height=self.physical_height_mm)


class CameraModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    resolutions: List[SensorResolution] = Field(default_factory=list)

    def resolution(self, name: str) -> Optional[SensorResolution]:
        return next((item for item in self.resolutions if item.name == name), None)


class CameraManufacturer(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    models: List[CameraModel] = Field(default_factory=list)

    def model(self, name: str) -> Optional[CameraModel]:
        return next((item for item in self.models if item.name == name), None)


def canvas_from_resolution(
    resolution: SensorResolution,
    *,
    canvas_id: Optional[str] = None,
    label: Optional[str] = None,
    anamorphic_squeeze: float = 1.0,
) -> Canvas:
    identifier = canvas_id or generate_element_id(resolution.name)
    dimensions = Dimensions(width=resolution.width, height=resolution.height)
    return Canvas(
        id=identifier,
        label=label if label is not None else resolution.name,
        source_canvas_id=identifier,
        dimensions=dimensions,
        effective_dimensions=compute_effective_dimensions(dimensions, anamorphic_squeeze),
        effective_anchor_point=Point(x=0, y=0),
        photosite_dimensions=Dimensions(width=resolution.width, height=resolution.height),
        physical_dimensions=resolution.physical_dimensions(),
        anamorphic_squeeze=anamorphic_squeeze,
    )
