"""Save/restore stack for branching paths."""

from .turtle import State

INITIAL_CAPACITY = 20


class InterpreterError(Exception):
    """Fatal condition that halts instruction processing."""


class StackUnderflow(InterpreterError):
    def __init__(self, message: str = "Stack underflow: pop on an empty stack"):
        super().__init__(message)


class AllocationFailure(InterpreterError):
    def __init__(self, message: str = "Memory allocation error while expanding stack"):
        super().__init__(message)


class StateStack:
    """LIFO of State snapshots.

    Storage is a slot list that doubles when full. `limit` caps the number
    of slots; growing past it raises AllocationFailure.
    """

    def __init__(self, capacity: int = INITIAL_CAPACITY, limit: int | None = None):
        if limit is not None:
            capacity = min(capacity, limit)
        self._slots: list[State | None] = [None] * capacity
        self._size = 0
        self.limit = limit
        self.max_depth = 0

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def _grow(self):
        new_capacity = max(1, self.capacity * 2)
        if self.limit is not None:
            if self.capacity >= self.limit:
                raise AllocationFailure(
                    f"Stack limit reached ({self.limit} states)"
                )
            new_capacity = min(new_capacity, self.limit)
        try:
            self._slots.extend([None] * (new_capacity - self.capacity))
        except MemoryError as e:
            raise AllocationFailure() from e

    def push(self, state: State):
        if self._size == self.capacity:
            self._grow()
        self._slots[self._size] = state.copy()
        self._size += 1
        self.max_depth = max(self.max_depth, self._size)

    def pop(self) -> State:
        if self._size == 0:
            raise StackUnderflow()
        self._size -= 1
        state = self._slots[self._size]
        self._slots[self._size] = None
        return state

