import sys
from typing import Literal, Protocol, TypeAlias

from .stack import Entry, IndentStack, Kind, LineState, Trace

__all__ = [
    "Encoded",
    "Sink",
    "Kind",
    "Entry",
    "IndentStack",
    "LineState",
    "Trace",
    "IndentingWriter",
]

Encoded: TypeAlias = bytes | bytearray | memoryview
ByteOrder: TypeAlias = Literal["little", "big"]
FOREIGN: ByteOrder = "big" if sys.byteorder == "little" else "little"


class Sink(Protocol):
    """Anything with a raw-I/O style `write`: `BytesIO`, buffered files, ...

    May consume fewer bytes than offered; the writer retries with the rest.
    """

    def write(self, data: memoryview, /) -> int | None: ...


class IndentingWriter(LineState):
    """Writes to `sink`, prefixing spaces whenever a line gets its first content.

    Only a `\\n` that is the last byte of a single `write` call starts a new
    line. Multi-line content must be split at the newlines by the caller (or
    ended with `insert_newline`) to get every line indented.
    """

    __slots__ = ("_sink", "_chunk")

    def __init__(
        self,
        sink: Sink,
        *,
        indent_width: int = 4,
        capacity: int = 255,
        chunk_size: int = 256,
        trace: Trace | None = None,
    ):
        super().__init__(indent_width=indent_width, capacity=capacity, trace=trace)
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._sink = sink
        self._chunk = chunk_size

    @property
    def sink(self) -> Sink:
        return self._sink

    # ---------------------------------------------------------------------- write

    def write(self, data: Encoded) -> None:
        if not data:
            return
        view = memoryview(data).cast("B")
        self._apply_indent()
        self._write_no_indent(view)
        if view[-1] == 10:
            self._reset_line()

    def write_byte(self, byte: int) -> None:
        self.write(bytes((byte,)))

    def write_byte_n_times(self, byte: int, n: int) -> None:
        if not 0 <= byte <= 0xFF:
            raise ValueError("bytes must be in range(0, 256)")
        self._apply_indent()
        self._write_byte_n_times_no_indent(byte, n)

    def insert_newline(self) -> None:
        self._write_no_indent(memoryview(b"\n"))
        self._reset_line()

    def maybe_insert_newline(self) -> None:
        """Insert a newline unless the current line is blank."""
        if not self._line_empty:
            self.insert_newline()

    def print(self, template: bytes, *args) -> None:
        """Write `template % args` (bytes %-formatting); a literal `%` is `%%`."""
        self.write(template % args)

    # ------------------------------------------------------------------- integers

    def write_int(
        self, value: int, size: int, byteorder: ByteOrder, *, signed: bool = False
    ) -> None:
        self.write(value.to_bytes(size, byteorder, signed=signed))

    def write_int_native(self, value: int, size: int, *, signed: bool = False) -> None:
        self.write_int(value, size, sys.byteorder, signed=signed)

    def write_int_foreign(self, value: int, size: int, *, signed: bool = False) -> None:
        self.write_int(value, size, FOREIGN, signed=signed)

    def write_int_little(self, value: int, size: int, *, signed: bool = False) -> None:
        self.write_int(value, size, "little", signed=signed)

    def write_int_big(self, value: int, size: int, *, signed: bool = False) -> None:
        self.write_int(value, size, "big", signed=signed)

    # ------------------------------------------------------------------- internal

    def _apply_indent(self) -> None:
        width = self._pending_indent()
        if width < 0:
            return
        if width:
            self._write_byte_n_times_no_indent(32, width)
        self._indent_applied(width)

    def _write_byte_n_times_no_indent(self, byte: int, n: int) -> None:
        chunk = memoryview(bytes((byte,)) * min(n, self._chunk))
        remaining = n
        while remaining > 0:
            size = min(remaining, len(chunk))
            self._write_no_indent(chunk[:size])
            remaining -= size

    def _write_no_indent(self, view: memoryview) -> None:
        while view:
            written = self._sink.write(view)
            if not written:
                raise BlockingIOError("sink accepted no bytes")
            view = view[written:]
