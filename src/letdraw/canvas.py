"""Drawing surfaces the interpreter renders onto."""

import math
from pathlib import Path
from typing import Protocol

from PIL import Image, ImageDraw

from .config import CanvasConfig, LineCap, LineJoin

SUPERSAMPLE = 4


class Canvas(Protocol):
    """Absolute pen commands in turtle coordinates."""

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def finish(self, path: str | Path) -> None: ...


class RecordingCanvas:
    """Records pen commands without rendering anything."""

    def __init__(self):
        self.calls: list[tuple] = []

    def move_to(self, x: float, y: float):
        self.calls.append(("move_to", x, y))

    def line_to(self, x: float, y: float):
        self.calls.append(("line_to", x, y))

    def finish(self, path: str | Path | None = None):
        self.calls.append(("finish", path))

    @property
    def segments(self) -> list[tuple[tuple[float, float], tuple[float, float]]]:
        """(start, end) of every drawn line."""
        segments = []
        pen = (0.0, 0.0)
        for name, *args in self.calls:
            if name == "move_to":
                pen = tuple(args)
            elif name == "line_to":
                segments.append((pen, tuple(args)))
                pen = tuple(args)
        return segments

    def bounds(self) -> tuple[float, float, float, float] | None:
        """(min_x, min_y, max_x, max_y) over all drawn points."""
        points = [p for segment in self.segments for p in segment]
        if not points:
            return None
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        return min(xs), min(ys), max(xs), max(ys)


class PathCanvas:
    """Collects pen motion as polylines in canvas coordinates.

    The frame is translated to the configured origin and scaled by
    `config.scale`. The pen starts at the origin.
    """

    def __init__(self, config: CanvasConfig | None = None):
        self.config = config or CanvasConfig()
        self.paths: list[list[tuple[float, float]]] = []
        self._current_path: list[tuple[float, float]] = []
        self._pen = self.to_canvas(0.0, 0.0)

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        ox, oy = self.config.origin
        s = self.config.scale
        return ox + x * s, oy + y * s

    def move_to(self, x: float, y: float):
        self._end_path()
        self._pen = self.to_canvas(x, y)

    def line_to(self, x: float, y: float):
        if not self._current_path:
            self._current_path = [self._pen]
        self._pen = self.to_canvas(x, y)
        self._current_path.append(self._pen)

    def _end_path(self):
        if len(self._current_path) > 1:
            self.paths.append(self._current_path)
        self._current_path = []

    def finish(self, path: str | Path):
        """Render collected paths to `path` and release the canvas."""
        self._end_path()
        try:
            self.render(Path(path))
        finally:
            self.paths = []

    def render(self, path: Path):
        raise NotImplementedError


def _extend_ends(points: list, d: float) -> list:
    """Lengthen the first and last segment of a polyline by `d`."""

    def extend(p, q):
        # move p away from q
        length = math.hypot(p[0] - q[0], p[1] - q[1])
        if length == 0:
            return p
        return (p[0] + (p[0] - q[0]) / length * d, p[1] + (p[1] - q[1]) / length * d)

    points = list(points)
    points[0] = extend(points[0], points[1])
    points[-1] = extend(points[-1], points[-2])
    return points


class ImageCanvas(PathCanvas):
    """Rasterizes paths with Pillow; format follows the file extension."""

    def render(self, path: Path):
        cfg = self.config
        k = SUPERSAMPLE
        image = Image.new("RGB", (cfg.width * k, cfg.height * k), "white")
        try:
            draw = ImageDraw.Draw(image)
            width = max(1, round(cfg.line_width * k))
            # Pillow only knows round joints; miter and bevel draw plain segments
            joint = "curve" if cfg.line_join is LineJoin.ROUND else None

            for points in self.paths:
                points = [(x * k, y * k) for x, y in points]
                if cfg.line_cap is LineCap.SQUARE:
                    points = _extend_ends(points, width / 2)
                draw.line(points, fill="black", width=width, joint=joint)

                if cfg.line_cap is LineCap.ROUND:
                    r = width / 2
                    for x, y in (points[0], points[-1]):
                        draw.ellipse((x - r, y - r, x + r, y + r), fill="black")

            with image.resize((cfg.width, cfg.height), Image.Resampling.LANCZOS) as output:
                output.save(path)
        finally:
            image.close()


def _fmt(x: float, precision: int = 3) -> str:
    s = f"{x:.{precision}f}".rstrip("0").rstrip(".")
    return "0" if s in ("", "-0") else s


class SvgCanvas(PathCanvas):
    """Writes paths as SVG polylines."""

    def render(self, path: Path):
        cfg = self.config
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
            f'width="{cfg.width}" height="{cfg.height}" '
            f'viewBox="0 0 {cfg.width} {cfg.height}">',
            f'  <rect width="{cfg.width}" height="{cfg.height}" fill="white" />',
        ]
        style = (
            f'stroke="black" stroke-width="{_fmt(cfg.line_width)}" fill="none" '
            f'stroke-linecap="{cfg.line_cap.value}" '
            f'stroke-linejoin="{cfg.line_join.value}"'
        )
        for points in self.paths:
            pts = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in points)
            lines.append(f'  <polyline points="{pts}" {style} />')
        lines.append("</svg>")

        path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def open_canvas(config: CanvasConfig, path: str | Path, pen=None) -> PathCanvas:
    """Pick a backend from the output file extension."""
    suffix = Path(path).suffix.lower()
    if suffix == ".svg":
        return SvgCanvas(config)
    if suffix in (".gcode", ".nc"):
        from .gcode import GcodeCanvas

        return GcodeCanvas(config, pen)
    return ImageCanvas(config)
