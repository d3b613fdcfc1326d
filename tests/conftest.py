from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from domain.models import AspectRatio, Canvas, Dimensions, FramingIntent
from tests.helpers.fdl_fixtures import load_fdl_payload


def _clear_fdl_env() -> None:
    for key in list(os.environ):
        if key.startswith("FDL_"):
            os.environ.pop(key, None)


_clear_fdl_env()


@pytest.fixture(autouse=True)
def clear_fdl_env() -> Generator[None, None, None]:
    _clear_fdl_env()
    yield
    _clear_fdl_env()


@pytest.fixture
def hd_payload() -> dict[str, Any]:
    return load_fdl_payload("hd_capture.fdl")


@pytest.fixture
def broken_payload() -> dict[str, Any]:
    return load_fdl_payload("broken_ids.fdl")


@pytest.fixture
def canvas_factory() -> Callable[..., Canvas]:
    def _factory(width: int = 1920, height: int = 1080, **overrides: Any) -> Canvas:
        canvas_id = overrides.pop("id", "cam_a")
        return Canvas(
            id=canvas_id,
            source_canvas_id=overrides.pop("source_canvas_id", canvas_id),
            dimensions=Dimensions(width=width, height=height),
            **overrides,
        )

    return _factory


@pytest.fixture
def intent_factory() -> Callable[..., FramingIntent]:
    def _factory(width: int, height: int, **overrides: Any) -> FramingIntent:
        return FramingIntent(
            id=overrides.pop("id", f"ar_{width}x{height}"),
            aspect_ratio=AspectRatio(width=width, height=height),
            **overrides,
        )

    return _factory
