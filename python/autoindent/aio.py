import sys
from typing import Protocol

from . import FOREIGN, ByteOrder, Encoded
from .stack import LineState, Trace

__all__ = ["AsyncSink", "AsyncIndentingWriter"]


class AsyncSink(Protocol):
    async def write(self, data: memoryview, /) -> int | None: ...


class AsyncIndentingWriter(LineState):
    """`IndentingWriter` for sinks whose `write` must be awaited.

    The sink call is the only suspension point. One task at a time: a write
    abandoned by cancellation leaves the line state undefined.
    """

    __slots__ = ("_sink", "_chunk")

    def __init__(
        self,
        sink: AsyncSink,
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
    def sink(self) -> AsyncSink:
        return self._sink

    async def write(self, data: Encoded) -> None:
        if not data:
            return
        view = memoryview(data).cast("B")
        await self._apply_indent()
        await self._write_no_indent(view)
        if view[-1] == 10:
            self._reset_line()

    async def write_byte(self, byte: int) -> None:
        await self.write(bytes((byte,)))

    async def write_byte_n_times(self, byte: int, n: int) -> None:
        if not 0 <= byte <= 0xFF:
            raise ValueError("bytes must be in range(0, 256)")
        await self._apply_indent()
        await self._write_byte_n_times_no_indent(byte, n)

    async def insert_newline(self) -> None:
        await self._write_no_indent(memoryview(b"\n"))
        self._reset_line()

    async def maybe_insert_newline(self) -> None:
        if not self._line_empty:
            await self.insert_newline()

    async def print(self, template: bytes, *args) -> None:
        await self.write(template % args)

    async def write_int(
        self, value: int, size: int, byteorder: ByteOrder, *, signed: bool = False
    ) -> None:
        await self.write(value.to_bytes(size, byteorder, signed=signed))

    async def write_int_native(
        self, value: int, size: int, *, signed: bool = False
    ) -> None:
        await self.write_int(value, size, sys.byteorder, signed=signed)

    async def write_int_foreign(
        self, value: int, size: int, *, signed: bool = False
    ) -> None:
        await self.write_int(value, size, FOREIGN, signed=signed)

    async def write_int_little(
        self, value: int, size: int, *, signed: bool = False
    ) -> None:
        await self.write_int(value, size, "little", signed=signed)

    async def write_int_big(
        self, value: int, size: int, *, signed: bool = False
    ) -> None:
        await self.write_int(value, size, "big", signed=signed)

    async def _apply_indent(self) -> None:
        width = self._pending_indent()
        if width < 0:
            return
        if width:
            await self._write_byte_n_times_no_indent(32, width)
        self._indent_applied(width)

    async def _write_byte_n_times_no_indent(self, byte: int, n: int) -> None:
        chunk = memoryview(bytes((byte,)) * min(n, self._chunk))
        remaining = n
        while remaining > 0:
            size = min(remaining, len(chunk))
            await self._write_no_indent(chunk[:size])
            remaining -= size

    async def _write_no_indent(self, view: memoryview) -> None:
        while view:
            written = await self._sink.write(view)
            if not written:
                raise BlockingIOError("sink accepted no bytes")
            view = view[written:]
