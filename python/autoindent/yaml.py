from collections.abc import Mapping, Sequence
from io import StringIO
from math import isinf, isnan
from typing import Any

from . import IndentingWriter

__all__ = ["YAML"]

LONGEST_IMPLICIT_KEY = 1000


class YAML:
    """Writes plain Python data as block-style YAML through an `IndentingWriter`.

    This class prioritizes simple code that preserves all the input. No attempt is
    made to make the output look nice: every key is double-quoted and multi-line
    text becomes a literal block scalar. It never writes a space of indentation
    itself, it only pushes and pops levels and leaves the rest to the writer.
    """

    def __init__(self, writer: IndentingWriter):
        if writer.indent_width < 1:
            raise ValueError("nesting needs an indent width of at least 1")
        self.writer = writer
        self._errors = list[str]()
        self._path = list[str | int]()

    # -------------------------------------------------------------------------- errors

    def _error(self, message: str) -> str:
        match self._errors:
            case []:
                return message
            case _:
                sep = "\n\t"
                return f"{message}:{sep}{sep.join(self._errors)}"

    def _errors_add(self, *parts: Any) -> None:
        message = StringIO()
        for part in parts:
            message.write(f"{part} ")
        message.write("@")
        for key in self._path:
            message.write("/")
            message.write(str(key).replace("~", "~0").replace("/", "~1"))
        self._errors.append(message.getvalue())

    def _check(self, any: Any) -> None:
        match any:
            case None | bool() | int() | float() | str():
                return
            case Mapping():
                for key, value in any.items():
                    self._path.append(str(key))
                    if isinstance(key, str):
                        self._check(value)
                    else:
                        self._errors_add("key is", type(key))
                    self._path.pop()
                return
            case Sequence() if not isinstance(any, (bytes, bytearray)):
                for index, value in enumerate(any):
                    self._path.append(index)
                    self._check(value)
                    self._path.pop()
                return
        self._errors_add("value is", type(any))

    # -------------------------------------------------------------------------- encode

    def encode(self, data: Mapping) -> None:
        """Write one `---` ... `...` document holding `data`.

        Everything is validated before the first byte goes out, so a `ValueError`
        leaves the writer untouched.
        """
        self._errors.clear()
        self._path.clear()
        try:
            if not isinstance(data, Mapping):
                self._errors_add("root is", type(data))
            else:
                self._check(data)
            if self._errors:
                raise ValueError(self._error("can't be written as YAML"))
            self.writer.maybe_insert_newline()
            self.writer.write(b"---\n")
            if data:
                self._mapping(data)
            else:
                self.writer.write(b"{}\n")
            self.writer.write(b"...\n")
        finally:
            self._errors.clear()
            self._path.clear()

    def _mapping(self, data: Mapping) -> None:
        for key, value in data.items():
            quoted = self._quoted(key)
            if len(quoted) > LONGEST_IMPLICIT_KEY:
                # implicit keys are limited to 1024 chars, so use `? key` then `: value`
                self.writer.write(b"? " + quoted + b"\n")
            else:
                self.writer.write(quoted)
            self.writer.write(b":")
            self._value(value)

    def _sequence(self, data: Sequence) -> None:
        writer = self.writer
        for value in data:
            writer.write(b"-")
            if isinstance(value, Mapping) and value:
                # compact `- "k": v`, later keys line up under the first one
                writer.write(b" ")
                writer.push_indent_next_line(2)
                self._mapping(value)
                writer.pop_indent()
            else:
                self._value(value)

    def _value(self, value: Any) -> None:
        writer = self.writer
        match value:
            case str() if self._block(value):
                lines = value.split("\n")
                keep = lines[-1] == ""
                if keep:
                    lines.pop()
                writer.print(b" |%d%s\n", writer.indent_width, b"+" if keep else b"-")
                with writer.indented():
                    for line in lines:
                        if line:
                            writer.write(line.encode() + b"\n")
                        else:
                            writer.insert_newline()
            case Mapping() if value:
                writer.write(b"\n")
                with writer.indented():
                    self._mapping(value)
            case Mapping():
                writer.write(b" {}\n")
            case str() | None | bool() | int() | float():
                writer.write(b" " + self._scalar(value) + b"\n")
            case Sequence() if value:
                writer.write(b"\n")
                with writer.indented():
                    self._sequence(value)
            case _:
                writer.write(b" []\n")

    def _block(self, text: str) -> bool:
        """check if `text` should be written as a literal block scalar."""
        if "\n" not in text or not 1 <= self.writer.indent_width <= 9:
            return False
        return all(c == "\t" or c.isprintable() for c in text.replace("\n", ""))

    def _scalar(self, value: None | bool | int | float | str) -> bytes:
        match value:
            case None:
                return b"null"
            case bool():
                return b"true" if value else b"false"
            case int():
                return b"%d" % value
            case float() if isnan(value):
                return b".nan"
            case float() if isinf(value):
                return b".inf" if value > 0 else b"-.inf"
            case float():
                text = repr(value)
                if "." not in text:
                    mantissa, _, exponent = text.partition("e")
                    text = f"{mantissa}.0e{exponent}" if exponent else f"{mantissa}.0"
                return text.encode()
        return self._quoted(value)

    def _quoted(self, text: str) -> bytes:
        quoted = StringIO()
        quoted.write('"')
        for c in text:
            match c:
                case '"' | "\\":
                    quoted.write("\\")
                    quoted.write(c)
                case "\n":
                    quoted.write("\\n")
                case "\t":
                    quoted.write("\\t")
                case _ if c.isprintable():
                    quoted.write(c)
                case _ if ord(c) <= 0xFF:
                    quoted.write(f"\\x{ord(c):02x}")
                case _ if ord(c) <= 0xFFFF:
                    quoted.write(f"\\u{ord(c):04x}")
                case _:
                    quoted.write(f"\\U{ord(c):08x}")
        quoted.write('"')
        return quoted.getvalue().encode()
