"""Character-stream interpreter driving the turtle onto a canvas.

Every character is processed to completion before the next one is read:

- digits multiply the pending repeat count ("23d" draws 6 units),
- the eight command characters in COMMANDS consume the repeat count,
- everything else is ignored.

Consecutive draw commands are batched into a single line segment which is
flushed before any other command runs and at the end of the stream.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from .canvas import Canvas
from .stack import InterpreterError, StateStack
from .turtle import State, Turtle

# char -> (operation, description)
COMMANDS = {
    "d": ("draw", "Move forward drawing line"),
    "u": ("move", "Move forward without drawing"),
    "r": ("reset", "Move to origin without drawing and reset angle to 0 degrees"),
    "o": ("home", "Move to origin without drawing"),
    "[": ("push", "Push state (position and direction) into stack"),
    "]": ("pop", "Pop state (position and direction) from stack"),
    "<": ("rotate_ccw", "Turn 15 degrees counterclockwise"),
    ">": ("rotate_cw", "Turn 15 degrees clockwise"),
}


class RepeatAccumulator:
    """Pending multiplier for the next command."""

    def __init__(self):
        self.count = 1

    def feed_digit(self, digit: int):
        self.count *= digit

    def consume(self) -> int:
        count = self.count
        self.count = 1
        return count


class DrawBatcher:
    """Collapses runs of draw commands into one line segment."""

    def __init__(self):
        self.pending = 0
        self.segments = 0
        self._pen = (0.0, 0.0)  # canvas pen, turtle coordinates

    def add(self, count: int):
        self.pending += count

    def flush(self, turtle: Turtle, canvas: Canvas):
        if self.pending <= 0:
            return
        start = turtle.position
        turtle.advance(self.pending)
        end = turtle.position
        if start != self._pen:
            canvas.move_to(*start)
        canvas.line_to(*end)
        self._pen = end
        self.pending = 0
        self.segments += 1


@dataclass
class RunResult:
    ok: bool
    error: InterpreterError | None = None
    consumed: int = 0
    commands: int = 0
    segments: int = 0
    max_depth: int = 0


class Interpreter:
    """Turtle, stack, repeat count and draw batcher for one run."""

    def __init__(self, canvas: Canvas, stack_limit: int | None = None):
        self.canvas = canvas
        self.turtle = Turtle()
        self.stack = StateStack(limit=stack_limit)
        self.repeat = RepeatAccumulator()
        self.batcher = DrawBatcher()
        self.commands = 0

    @property
    def state(self) -> State:
        return self.turtle.snapshot()

    @property
    def position(self) -> tuple[float, float]:
        return self.turtle.position

    @property
    def heading(self) -> int:
        return self.turtle.heading

    @property
    def pending(self) -> int:
        return self.batcher.pending

    def feed(self, ch: str):
        """Process one character. Raises InterpreterError on fatal failure."""
        if ch.isdigit() and ch.isascii():
            self.repeat.feed_digit(int(ch))
            return
        command = COMMANDS.get(ch)
        if command is None:
            return
        count = self.repeat.consume()
        self.commands += 1
        getattr(self, f"_op_{command[0]}")(count)

    def flush(self):
        self.batcher.flush(self.turtle, self.canvas)

    def finish(self):
        """Flush the pending draw segment at end of stream."""
        self.flush()

    def run(self, chars: Iterable[str]) -> RunResult:
        """Feed characters until exhausted or a fatal error, then flush."""
        result = RunResult(ok=True)
        try:
            for ch in chars:
                result.consumed += 1
                self.feed(ch)
        except InterpreterError as e:
            result.ok = False
            result.error = e
        self.finish()
        result.commands = self.commands
        result.segments = self.batcher.segments
        result.max_depth = self.stack.max_depth
        return result

    def _op_draw(self, count: int):
        self.batcher.add(count)

    def _op_move(self, count: int):
        self.flush()
        self.turtle.advance(count)

    def _op_reset(self, count: int):
        self.flush()
        self.turtle.reset()

    def _op_home(self, count: int):
        self.flush()
        self.turtle.home()

    def _op_push(self, count: int):
        self.flush()
        snapshot = self.turtle.snapshot()
        for _ in range(count):
            self.stack.push(snapshot)

    def _op_pop(self, count: int):
        self.flush()
        for _ in range(count):
            self.turtle.restore(self.stack.pop())

    def _op_rotate_ccw(self, count: int):
        self.flush()
        self.turtle.rotate_ccw(count)

    def _op_rotate_cw(self, count: int):
        self.flush()
        self.turtle.rotate_cw(count)
