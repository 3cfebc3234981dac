"""GCode output for pen plotters."""

from pathlib import Path

from .canvas import PathCanvas
from .config import CanvasConfig, PenConfig


class GcodeCanvas(PathCanvas):
    """Plotter gcode for the collected paths.

    Machine coordinates are y-up with home at (0, 0). The turtle origin sits
    at (origin_x, origin_y) when configured, otherwise at home; y is flipped
    so heading 0 points up. Width and height are unused, and the stroke is
    whatever pen is mounted, so line width, cap and join have no effect.
    """

    def __init__(self, config: CanvasConfig | None = None, pen: PenConfig | None = None):
        super().__init__(config)
        self.pen = pen or PenConfig()

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        ox = self.config.origin_x or 0.0
        oy = self.config.origin_y or 0.0
        s = self.config.scale
        # + 0.0 normalizes -0.0
        return ox + x * s + 0.0, oy - y * s + 0.0

    def _pen_up(self) -> str:
        return f"M280 P0 S{self.pen.up_angle} ; pen up"

    def _stroke(self, points: list[tuple[float, float]]) -> list[str]:
        (x0, y0), rest = points[0], points[1:]
        return [
            f"G0 X{x0:.2f} Y{y0:.2f} F{self.pen.travel_speed}",
            f"M280 P0 S{self.pen.down_angle} ; pen down",
            *(f"G1 X{x:.2f} Y{y:.2f} F{self.pen.draw_speed}" for x, y in rest),
            self._pen_up(),
            "",
        ]

    def export(self, comment: str = "") -> str:
        """Gcode program drawing every collected path."""
        header = [f"; {comment}"] if comment else []
        header += ["; letdraw", "", "G21 ; mm", "G90 ; absolute", self._pen_up(), "G28 ; home", ""]
        body = [line for points in self.paths for line in self._stroke(points)]
        footer = [
            f"G0 X0 Y0 F{self.pen.travel_speed} ; return home",
            self._pen_up(),
            "M84 ; motors off",
        ]
        return "\n".join(header + body + footer)

    def render(self, path: Path):
        path.write_text(self.export(path.stem) + "\n")
