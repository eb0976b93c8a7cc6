from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import StrEnum, auto
from typing import NamedTuple

__all__ = ["Kind", "Entry", "IndentStack", "LineState", "Trace"]


class Kind(StrEnum):
    NORMAL = auto()
    ONE_SHOT = auto()  # popped the first time it is applied to a line
    NEXT_LINE = auto()  # ignored until the current line ends


class Entry(NamedTuple):
    width: int
    kind: Kind


class IndentStack:
    __slots__ = ("_entries", "_capacity")

    def __init__(self, capacity: int = 255):
        if capacity < 0:
            raise AssertionError("indent capacity can't be negative")
        self._entries = list[Entry]()
        self._capacity = capacity

    def push(self, width: int, kind: Kind = Kind.NORMAL) -> None:
        if width < 0:
            raise AssertionError("indent width can't be negative")
        if len(self._entries) >= self._capacity:
            raise AssertionError("indent stack is full")
        self._entries.append(Entry(width, kind))

    def pop(self) -> Entry:
        if not self._entries:
            raise AssertionError("indent stack is empty")
        return self._entries.pop()

    def retag(self, was: Kind, now: Kind) -> int:
        count = 0
        for index, entry in enumerate(self._entries):
            if entry.kind is was:
                self._entries[index] = Entry(entry.width, now)
                count += 1
        return count

    def discard(self, kind: Kind) -> int:
        before = len(self._entries)
        self._entries[:] = [it for it in self._entries if it.kind is not kind]
        return before - len(self._entries)

    def count(self, kind: Kind) -> int:
        return sum(1 for it in self._entries if it.kind is kind)

    def current(self) -> int:
        return sum(it.width for it in self._entries if it.kind is not Kind.NEXT_LINE)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        widths = " ".join(f"{it.width}{it.kind[0]}" for it in self._entries)
        return f"<IndentStack {len(self)}/{self._capacity} [{widths}]>"


Trace = Callable[[str, "LineState"], None]


class LineState:
    """Indentation bookkeeping shared by the sync and async writers.

    Nothing here touches a sink. Pushing only primes the state: the spaces are
    written by the owning writer when content next reaches the start of a line.
    """

    __slots__ = ("_stack", "_indent_width", "_line_empty", "_applied", "_trace")

    def __init__(
        self,
        *,
        indent_width: int = 4,
        capacity: int = 255,
        trace: Trace | None = None,
    ):
        if indent_width < 0:
            raise AssertionError("indent width can't be negative")
        self._stack = IndentStack(capacity)
        self._indent_width = indent_width
        self._line_empty: bool = True
        self._applied: int = 0
        self._trace = trace

    def _event(self, name: str) -> None:
        if self._trace is not None:
            self._trace(name, self)

    # ---------------------------------------------------------------------- stack

    def push_indent(self) -> None:
        self.push_indent_n(self._indent_width)

    def push_indent_n(self, width: int) -> None:
        self._stack.push(width)
        self._event("push")

    def push_indent_one_shot(self, width: int | None = None) -> None:
        """Push an indent that is popped automatically once it is applied."""
        self._stack.push(self._width(width), Kind.ONE_SHOT)
        self._event("push")

    def lock_one_shot_indent(self) -> int:
        """Turn every one-shot indent into a regular one.

        Returns how many indents the caller must now pop by hand.
        """
        count = self._stack.retag(Kind.ONE_SHOT, Kind.NORMAL)
        self._event("lock")
        return count

    def push_indent_next_line(self, width: int | None = None) -> None:
        """Push an indent that only takes effect from the next line on."""
        self._stack.push(self._width(width), Kind.NEXT_LINE)
        self._event("push")

    def pop_indent(self) -> None:
        self._stack.pop()
        self._event("pop")

    @contextmanager
    def indented(self, width: int | None = None) -> Iterator[None]:
        self.push_indent_n(self._width(width))
        try:
            yield
        finally:
            self.pop_indent()

    def _width(self, width: int | None) -> int:
        return self._indent_width if width is None else width

    # ---------------------------------------------------------------------- lines

    def _pending_indent(self) -> int:
        """Spaces owed before the first content of the line, or -1 if none."""
        if not self._line_empty:
            return -1
        return self._stack.current()

    def _indent_applied(self, width: int) -> None:
        self._applied = width
        self._stack.discard(Kind.ONE_SHOT)
        self._line_empty = False
        self._event("apply")

    def _reset_line(self) -> None:
        self._line_empty = True
        self._applied = 0
        self._stack.retag(Kind.NEXT_LINE, Kind.NORMAL)
        self._event("reset")

    def is_line_over_indented(self) -> bool:
        """Check if the indent written for this line exceeds the pushed indents."""
        if self._line_empty:
            return False
        return self._applied > self._stack.current()

    # ----------------------------------------------------------------- inspection

    @property
    def current_indent(self) -> int:
        return self._stack.current()

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def capacity(self) -> int:
        return self._stack.capacity

    @property
    def one_shot_count(self) -> int:
        return self._stack.count(Kind.ONE_SHOT)

    @property
    def deferred_count(self) -> int:
        return self._stack.count(Kind.NEXT_LINE)

    @property
    def current_line_empty(self) -> bool:
        return self._line_empty

    @property
    def applied_indent(self) -> int:
        return self._applied

    @property
    def indent_width(self) -> int:
        return self._indent_width

    @property
    def stack(self) -> IndentStack:
        return self._stack
