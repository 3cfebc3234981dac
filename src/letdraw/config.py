"""Configuration management."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class LineCap(str, Enum):
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class LineJoin(str, Enum):
    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


class CanvasConfig(BaseModel):
    width: int = Field(800, gt=0)
    height: int = Field(600, gt=0)
    origin_x: float | None = None  # default: width / 2
    origin_y: float | None = None  # default: height / 2
    scale: float = Field(1.0, gt=0)
    line_width: float = Field(2.0, gt=0)
    line_cap: LineCap = LineCap.BUTT
    line_join: LineJoin = LineJoin.MITER

    @property
    def origin(self) -> tuple[float, float]:
        ox = self.width / 2 if self.origin_x is None else self.origin_x
        oy = self.height / 2 if self.origin_y is None else self.origin_y
        return ox, oy


class PenConfig(BaseModel):
    up_angle: int = 90
    down_angle: int = 40
    travel_speed: int = 1000
    draw_speed: int = 500


class Config(BaseModel):
    canvas: CanvasConfig = CanvasConfig()
    pen: PenConfig = PenConfig()
    stack_limit: int | None = Field(None, ge=0)

    @classmethod
    def load(cls, path: str | Path) -> "Config":
        with open(path) as f:
            return cls(**json.load(f))

    def save(self, path: str | Path):
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=4)
