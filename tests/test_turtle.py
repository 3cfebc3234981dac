import pytest

from letdraw.stack import AllocationFailure, StackUnderflow, StateStack
from letdraw.turtle import HEADINGS, TRIG15, Point, State, Turtle, offset, rotate_ccw, rotate_cw


class TestOffset:
    def test_heading_zero_points_up(self) -> None:
        dx, dy = offset(0, 6)
        assert dx == 0
        assert dy == -6

    def test_quarter_turns(self) -> None:
        assert offset(6, 1) == pytest.approx((-1, 0))
        assert offset(12, 1) == pytest.approx((0, 1))
        assert offset(18, 1) == pytest.approx((1, 0))

    def test_quadrant_boundaries(self) -> None:
        # Each quadrant branch uses its own table lookups
        assert offset(7, 2) == pytest.approx((-2 * TRIG15[5], 2 * TRIG15[1]))
        assert offset(13, 2) == pytest.approx((2 * TRIG15[1], 2 * TRIG15[5]))
        assert offset(19, 2) == pytest.approx((2 * TRIG15[5], -2 * TRIG15[1]))
        assert offset(23, 2) == pytest.approx((2 * TRIG15[1], -2 * TRIG15[5]))

    def test_unit_length(self) -> None:
        for h in range(HEADINGS):
            dx, dy = offset(h, 1)
            assert dx * dx + dy * dy == pytest.approx(1, abs=1e-4)


class TestRotation:
    def test_ccw_wraps(self) -> None:
        assert rotate_ccw(20, 6) == 2

    def test_cw_wraps(self) -> None:
        assert rotate_cw(0, 1) == 23
        assert rotate_cw(5, 3) == 2

    def test_cw_count_over_full_turn(self) -> None:
        assert rotate_cw(0, 25) == 23

    def test_composition(self) -> None:
        for h in range(HEADINGS):
            for a in range(HEADINGS):
                for b in (0, 1, 5, 23):
                    assert rotate_ccw(rotate_ccw(h, a), b) == rotate_ccw(h, (a + b) % HEADINGS)
                    assert rotate_cw(rotate_cw(h, a), b) == rotate_cw(h, (a + b) % HEADINGS)

    def test_inverse(self) -> None:
        for h in range(HEADINGS):
            for k in range(HEADINGS):
                assert rotate_ccw(rotate_cw(h, k), k) == h
                assert rotate_cw(rotate_ccw(h, k), k) == h


class TestTurtle:
    def test_advance_and_home(self) -> None:
        t = Turtle()
        t.rotate_ccw(6)
        t.advance(3)
        assert t.position == pytest.approx((-3, 0))
        t.home()
        assert t.position == (0, 0)
        assert t.heading == 6

    def test_reset(self) -> None:
        t = Turtle()
        t.rotate_cw(2)
        t.advance(4)
        t.reset()
        assert t.position == (0, 0)
        assert t.heading == 0

    def test_snapshot_is_independent(self) -> None:
        t = Turtle()
        snap = t.snapshot()
        t.advance(5)
        assert snap.position == Point(0, 0)
        t.restore(snap)
        t.advance(1)
        assert snap.position == Point(0, 0)


class TestStateStack:
    def test_lifo(self) -> None:
        stack = StateStack()
        stack.push(State(Point(1, 2), 3))
        stack.push(State(Point(4, 5), 6))
        assert stack.pop() == State(Point(4, 5), 6)
        assert stack.pop() == State(Point(1, 2), 3)
        assert len(stack) == 0

    def test_push_copies(self) -> None:
        stack = StateStack()
        state = State(Point(1, 1), 0)
        stack.push(state)
        state.position.x = 9
        assert stack.pop().position.x == 1

    def test_pop_empty(self) -> None:
        with pytest.raises(StackUnderflow):
            StateStack().pop()

    def test_doubles_when_full(self) -> None:
        stack = StateStack(capacity=2)
        for _ in range(5):
            stack.push(State())
        assert stack.capacity == 8
        assert stack.max_depth == 5

    def test_limit(self) -> None:
        stack = StateStack(capacity=2, limit=3)
        for _ in range(3):
            stack.push(State())
        assert stack.capacity == 3
        with pytest.raises(AllocationFailure):
            stack.push(State())
        assert len(stack) == 3

    def test_memory_error_while_growing(self) -> None:
        class FullList(list):
            def extend(self, items):
                raise MemoryError

        stack = StateStack(capacity=1)
        stack._slots = FullList(stack._slots)
        stack.push(State())
        with pytest.raises(AllocationFailure):
            stack.push(State())
        assert len(stack) == 1
