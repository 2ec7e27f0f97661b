from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Path

    def full_args(self) -> list[str]:
        return ["python", "viewer.py", "--snapshot", str(self.expected), *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="iterations",
        args=["--iterations", "250"],
        expected=EXAMPLES_ROOT / "iterations" / "deep.png",
    ),
    Example(
        name="shallow",
        args=["--iterations", "8"],
        expected=EXAMPLES_ROOT / "shallow" / "ramp-start.png",
    ),
    Example(
        name="ranges",
        args=["--iterations", "200", "--range-x", "-0.80", "-0.70", "--range-y", "0.05", "0.12"],
        expected=EXAMPLES_ROOT / "ranges" / "seahorse-valley.png",
    ),
    Example(
        name="workers",
        args=["--iterations", "100", "--workers", "1"],
        expected=EXAMPLES_ROOT / "workers" / "single-thread.png",
    ),
    Example(
        name="format",
        args=["--iterations", "100", "--format", "jpg"],
        expected=EXAMPLES_ROOT / "format" / "compressed.jpg",
    ),
    Example(
        name="verbose",
        args=["--iterations", "100", "--verbose"],
        expected=EXAMPLES_ROOT / "verbose" / "diagnostic.png",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def _verify(example: Example) -> None:
    if not example.expected.is_file():
        raise RuntimeError(f"Expected file {example.expected} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.expected.parent])
        example.expected.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
