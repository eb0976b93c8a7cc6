from collections.abc import Mapping
from cProfile import Profile
from io import BytesIO
from pathlib import Path
from time import perf_counter_ns
from typing import Any

from autoindent import IndentingWriter, Trace
from autoindent.yaml import YAML
import ruamel.yaml
from ruamel.yaml.error import YAMLError


class Trickle(BytesIO):
    """Sink that consumes at most `most` bytes per call and counts the calls."""

    def __init__(self, most: int = 1):
        super().__init__()
        self.most = most
        self.calls = 0

    def write(self, data) -> int:
        self.calls += 1
        return super().write(memoryview(data)[: self.most])


class Broken(BytesIO):
    """Sink that fails once `limit` bytes have gone through."""

    def __init__(self, limit: int):
        super().__init__()
        self.limit = limit

    def write(self, data) -> int:
        room = self.limit - self.tell()
        if room <= 0:
            raise OSError("sink is broken")
        return super().write(memoryview(data)[:room])


class Stuck:
    def write(self, data) -> int:
        return 0


class AsyncTrickle(Trickle):
    async def write(self, data) -> int:  # type: ignore[override]
        return Trickle.write(self, data)


class Timer:
    def __init__(self, denominator: "Timer|None" = None):
        self.total = 0
        self.count = 0
        self.start = 0
        self.denom = denominator

    def __enter__(self):
        self.start = perf_counter_ns()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.total += perf_counter_ns() - self.start
        self.count += 1

    @property
    def avg(self) -> float:
        return self.total / self.count if self.count else 0

    @property
    def mul(self) -> float:
        denom = self.denom
        if denom is None:
            return 0
        denom = denom.avg
        if denom == 0:
            return 0
        return round(self.avg / denom, 2)


class TimedYAML:
    def __init__(self, pstats: Path | None, width: int, trace: Trace | None = None):
        self.encode_timer = Timer()
        self.buffer = BytesIO()
        self.writer = IndentingWriter(self.buffer, indent_width=width, trace=trace)
        self.yaml = YAML(self.writer)
        self.pstats = pstats
        self.profile = Profile(builtins=False) if pstats else None

    def encode(self, data: Mapping) -> bytes:
        self.buffer.seek(0)
        self.buffer.truncate()
        with self.profile if self.profile else self.encode_timer:
            self.yaml.encode(data)
        return self.buffer.getvalue()

    def timers(self) -> None:
        print("   autoindent YAML")
        if self.pstats and self.profile:
            self.profile.dump_stats(self.pstats)
            print(f"\t(written to {self.pstats})")
        else:
            print(f"\tencode = {self.encode_timer.avg}")


class TimedRuamel:
    def __init__(self, encoder: TimedYAML):
        self.load_timer = Timer()
        self.dump_timer = Timer(encoder.encode_timer)
        self.buffer = BytesIO()
        self.ruamel = ruamel.yaml.YAML(typ="safe", pure=True)

    def load(self, value: bytes) -> Any:
        with self.load_timer:
            try:
                return self.ruamel.load(value)
            except YAMLError:
                print(value.decode())
                raise

    def dump(self, data: Mapping) -> None:
        self.buffer.seek(0)
        self.buffer.truncate()
        with self.dump_timer:
            self.ruamel.dump(data, self.buffer)

    def timers(self) -> None:
        print("   ruamel.yaml safe")
        print(f"\t  dump = {self.dump_timer.avg}  ({self.dump_timer.mul})")
        print(f"\t  load = {self.load_timer.avg}")
