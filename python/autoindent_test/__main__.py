import sys
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.progress import track
from typer import Typer, Exit, Option

from autoindent import LineState
from . import TimedYAML, TimedRuamel, unit_tests
from .equals import diff_any
from .generate import Random


def FAILED(message: str):
    print(f"FAILED {message}", file=sys.stderr)
    raise Exit(code=1)


app = Typer()
profile_option = Option(
    help="write profile stats here (fail if already exists)",
    file_okay=False,
    dir_okay=False,
)
loops_option = Option(
    help="number of repetitions",
    min=0,
)
deepest_option = Option(
    help="limit the depth of generated random data structure",
    min=0,
)
widest_option = Option(
    help="limit the breadth of generated random data structure",
    min=0,
)
width_option = Option(
    help="default indent width pushed by the YAML writer",
    min=1,
)
trace_option = Option(
    help="print every indent state transition to stderr",
)


@app.command(
    help="""Run unit tests, then write random data as YAML and load it back.

    Without the `pstats` option broad timing information is gathered and compared with
    ruamel.yaml's own dumper. The `pstats` option switches to detailed cProfile stats,
    focused only on the autoindent writer (ruamel.yaml dumping is skipped).""",
)
def main(
    pstats: Annotated[Path | None, profile_option] = None,
    loops: Annotated[int, loops_option] = 250,
    deepest: Annotated[int, deepest_option] = 6,
    widest: Annotated[int, widest_option] = 8,
    width: Annotated[int, width_option] = 2,
    trace: Annotated[bool, trace_option] = False,
):
    if pstats and pstats.exists():
        FAILED(f"won't overwrite: {pstats}")

    if unit_tests.problem_count():
        FAILED("unit tests")

    console = Console(stderr=True)

    def tracer(name: str, state: LineState) -> None:
        console.print(
            f"{name:>5} depth={state.depth} indent={state.current_indent}"
            f" applied={state.applied_indent} empty={state.current_line_empty}",
            highlight=False,
        )

    random = Random(deepest=deepest, widest=widest)
    encoder = TimedYAML(pstats, width, tracer if trace else None)
    ruamel = TimedRuamel(encoder)

    if loops:
        for loop in track(range(loops)):
            data = random.document()
            written = encoder.encode(data)

            if encoder.writer.depth:
                FAILED(f"unbalanced indents: {encoder.writer.stack}")

            if diff_any(data, ruamel.load(written)):
                FAILED("write then load")

            if not pstats:
                ruamel.dump(data)

        encoder.timers()
        ruamel.timers()


if __name__ == "__main__":
    app()
