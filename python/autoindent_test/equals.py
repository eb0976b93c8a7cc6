from typing import TypeVar

from deepdiff import DeepDiff

T = TypeVar("T")


def diff_any(was: T, now: T) -> bool:
    if was == now:
        return False
    print()
    print(DeepDiff(was, now, verbose_level=2).pretty())
    return True


def diff_text(was: bytes, now: bytes) -> bool:
    """Compare writer output line by line, so the report names the bad lines."""
    return diff_any(was.split(b"\n"), now.split(b"\n"))
