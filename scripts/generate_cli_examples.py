from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--x-res", "160", "--y-res", "160"]
SMALL_ANIMATION = ["--frames", "8", "--workers", "4", *BASE_ARGS]


@dataclass
class Expected:
    path: Path
    is_dir: bool = False


@dataclass
class Example:
    name: str
    command: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return ["python", "ifs_cli.py", self.command, *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="newton",
        command="newton",
        args=[*BASE_ARGS, "--output", str(EXAMPLES_ROOT / "newton" / "roots.png")],
        expected=[Expected(EXAMPLES_ROOT / "newton" / "roots.png")],
        clean=[EXAMPLES_ROOT / "newton"],
    ),
    Example(
        name="newton-zoom",
        command="newton",
        args=[*BASE_ARGS, "--x-center", "0.5", "--y-center", "0.5", "--x-width", "0.5", "--y-width", "0.5",
              "--output", str(EXAMPLES_ROOT / "newton-zoom" / "detail.png")],
        expected=[Expected(EXAMPLES_ROOT / "newton-zoom" / "detail.png")],
        clean=[EXAMPLES_ROOT / "newton-zoom"],
    ),
    Example(
        name="julia-single",
        command="julia-single",
        args=[*BASE_ARGS, "--re", "-0.8", "--im", "0.156", "--x-width", "3", "--y-width", "3",
              "--output", str(EXAMPLES_ROOT / "julia-single" / "dendrite.png")],
        expected=[Expected(EXAMPLES_ROOT / "julia-single" / "dendrite.png")],
        clean=[EXAMPLES_ROOT / "julia-single"],
    ),
    Example(
        name="colormap",
        command="julia-single",
        args=[*BASE_ARGS, "--colormap", "inferno", "--output", str(EXAMPLES_ROOT / "colormap" / "inferno.png")],
        expected=[Expected(EXAMPLES_ROOT / "colormap" / "inferno.png")],
        clean=[EXAMPLES_ROOT / "colormap"],
    ),
    Example(
        name="format",
        command="julia-single",
        args=[*BASE_ARGS, "--format", "webp", "--output", str(EXAMPLES_ROOT / "format" / "custom.webp")],
        expected=[Expected(EXAMPLES_ROOT / "format" / "custom.webp")],
        clean=[EXAMPLES_ROOT / "format"],
    ),
    Example(
        name="angor",
        command="julia",
        args=[*SMALL_ANIMATION, "--path", "Angor", "--output", str(EXAMPLES_ROOT / "angor" / "angor.gif")],
        expected=[Expected(EXAMPLES_ROOT / "angor" / "angor.gif")],
        clean=[EXAMPLES_ROOT / "angor"],
    ),
    Example(
        name="wabbit",
        command="julia",
        args=[*SMALL_ANIMATION, "--path", "Wabbit", "--output", str(EXAMPLES_ROOT / "wabbit" / "wabbit.gif")],
        expected=[Expected(EXAMPLES_ROOT / "wabbit" / "wabbit.gif")],
        clean=[EXAMPLES_ROOT / "wabbit"],
    ),
    Example(
        name="exp",
        command="julia",
        args=[*SMALL_ANIMATION, "--path", "Exp", "--output", str(EXAMPLES_ROOT / "exp" / "exp.gif")],
        expected=[Expected(EXAMPLES_ROOT / "exp" / "exp.gif")],
        clean=[EXAMPLES_ROOT / "exp"],
    ),
    Example(
        name="frame-dir",
        command="julia",
        args=[
            *SMALL_ANIMATION,
            "--path",
            "Exp",
            "--frame-dir",
            str(EXAMPLES_ROOT / "frame-dir" / "frames"),
            "--output",
            str(EXAMPLES_ROOT / "frame-dir" / "exp.gif"),
        ],
        expected=[
            Expected(EXAMPLES_ROOT / "frame-dir" / "exp.gif"),
            Expected(EXAMPLES_ROOT / "frame-dir" / "frames", is_dir=True),
        ],
        clean=[EXAMPLES_ROOT / "frame-dir"],
    ),
    Example(
        name="single-worker",
        command="julia",
        args=["--frames", "4", "--workers", "1", *BASE_ARGS, "--output", str(EXAMPLES_ROOT / "single-worker" / "serial.gif")],
        expected=[Expected(EXAMPLES_ROOT / "single-worker" / "serial.gif")],
        clean=[EXAMPLES_ROOT / "single-worker"],
    ),
    Example(
        name="verbose",
        command="julia-single",
        args=[*BASE_ARGS, "--verbose", "--output", str(EXAMPLES_ROOT / "verbose" / "diagnostic.png")],
        expected=[Expected(EXAMPLES_ROOT / "verbose" / "diagnostic.png")],
        clean=[EXAMPLES_ROOT / "verbose"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    clean = example.clean or []
    _ensure_clean(clean)
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if expected.is_dir:
            if not expected.path.is_dir():
                raise RuntimeError(f"Expected directory {expected.path} was not created")
            if not any(expected.path.iterdir()):
                raise RuntimeError(f"Directory {expected.path} is empty")
        else:
            if not expected.path.is_file():
                raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
