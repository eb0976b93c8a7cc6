from random import randrange, choice, choices, uniform
from typing import Any

bools = (False, True)
ascii = "\t" + "".join(chr(it) for it in range(32, 127))


class Random:
    "single thread only"

    def __init__(self, *, deepest=6, widest=8) -> None:
        self.deepest = deepest
        self.widest = widest
        self.key = ascii
        self.text = ascii

    def _text(self) -> str:
        lines = list[str]()
        for loop in range(randrange(4)):
            lines.append("".join(choices(self.text, k=randrange(40))))
        return "\n".join(lines)

    def _list(self, depth: int) -> list:
        array = list[Any]()
        if depth < randrange(self.deepest):
            for loop in range(randrange(self.widest)):
                array.append(self._value(depth))
        return array

    def _dict(self, depth: int) -> dict:
        array = dict[str, Any]()
        if depth < randrange(self.deepest):
            for loop in range(randrange(self.widest)):
                key = "".join(choices(self.key, k=randrange(20)))
                array[key] = self._value(depth)
        return array

    def _value(self, depth: int) -> Any:
        match randrange(5):
            case 0:
                return self._dict(depth + 1)
            case 1:
                return self._list(depth + 1)
            case 2:
                return self._text()
            case 3:
                return choice((None, True, False))
            case 4:
                return choice((randrange(-(2**40), 2**40), uniform(-1e6, 1e6)))
        raise RuntimeError("impossible randrange case")

    def document(self) -> dict:
        return self._dict(0)
