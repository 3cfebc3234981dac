"""Discrete-heading turtle state machine."""

from dataclasses import dataclass, field

HEADINGS = 24  # 15 degree steps

# sin(15° * i) for i in 0..6; cos(15° * i) == TRIG15[6 - i]
TRIG15 = (0, 0.25882, 0.5, 0.70711, 0.86603, 0.96593, 1)


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0


@dataclass
class State:
    """Position and heading of the turtle."""

    position: Point = field(default_factory=Point)
    heading: int = 0

    def copy(self) -> "State":
        return State(Point(self.position.x, self.position.y), self.heading)


def offset(heading: int, dist: float) -> tuple[float, float]:
    """Displacement for moving `dist` units along `heading`.

    Heading 0 points towards negative y, headings grow counterclockwise.
    """
    if heading < 7:
        return -dist * TRIG15[heading], -dist * TRIG15[6 - heading]
    if heading < 13:
        return -dist * TRIG15[12 - heading], dist * TRIG15[heading - 6]
    if heading < 19:
        return dist * TRIG15[heading - 12], dist * TRIG15[18 - heading]
    return dist * TRIG15[24 - heading], -dist * TRIG15[heading - 18]


def rotate_ccw(heading: int, count: int) -> int:
    return (heading + count) % HEADINGS


def rotate_cw(heading: int, count: int) -> int:
    count %= HEADINGS
    if heading >= count:
        return heading - count
    return HEADINGS - (count - heading)


@dataclass
class Turtle:
    """Turtle graphics state machine."""

    state: State = field(default_factory=State)

    @property
    def position(self) -> tuple[float, float]:
        return self.state.position.x, self.state.position.y

    @property
    def heading(self) -> int:
        return self.state.heading

    def advance(self, dist: float):
        dx, dy = offset(self.state.heading, dist)
        self.state.position.x += dx
        self.state.position.y += dy

    def rotate_ccw(self, count: int):
        self.state.heading = rotate_ccw(self.state.heading, count)

    def rotate_cw(self, count: int):
        self.state.heading = rotate_cw(self.state.heading, count)

    def home(self):
        """Move to the origin keeping the heading."""
        self.state.position = Point()

    def reset(self):
        self.state = State()

    def snapshot(self) -> State:
        return self.state.copy()

    def restore(self, state: State):
        self.state = state.copy()
