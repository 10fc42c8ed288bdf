from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height-px", "160", "--samples", "4", "--max-iterations", "200"]


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Path

    def full_args(self) -> list[str]:
        return [sys.executable, "render.py", *self.args, "--output", str(self.expected)]


EXAMPLES: list[Example] = [
    Example(
        name="defaults",
        args=BASE_ARGS,
        expected=EXAMPLES_ROOT / "defaults" / "full-set.png",
    ),
    Example(
        name="viewport",
        args=[*BASE_ARGS, "--pos-x", "-0.8", "--pos-y", "0.05", "--height", "0.1"],
        expected=EXAMPLES_ROOT / "viewport" / "seahorse-valley.png",
    ),
    Example(
        name="max-iterations",
        args=[*BASE_ARGS, "--max-iterations", "2000"],
        expected=EXAMPLES_ROOT / "max-iterations" / "high-iterations.png",
    ),
    Example(
        name="samples",
        args=[*BASE_ARGS, "--samples", "32"],
        expected=EXAMPLES_ROOT / "samples" / "smooth-edges.png",
    ),
    Example(
        name="aspect",
        args=[*BASE_ARGS, "--width", "240", "--height-px", "120"],
        expected=EXAMPLES_ROOT / "aspect" / "wide.png",
    ),
    Example(
        name="blocks",
        args=[*BASE_ARGS, "--blocks", "16", "--threads", "4"],
        expected=EXAMPLES_ROOT / "blocks" / "sixteen-tiles.png",
    ),
    Example(
        name="legacy-tiling",
        args=[*BASE_ARGS, "--width", "150", "--height-px", "150", "--legacy-tiling"],
        expected=EXAMPLES_ROOT / "legacy-tiling" / "uncovered-strip.png",
    ),
    Example(
        name="fixed-jitter",
        args=[*BASE_ARGS, "--samples", "1", "--fixed-jitter", "0.5"],
        expected=EXAMPLES_ROOT / "fixed-jitter" / "deterministic.png",
    ),
    Example(
        name="tensorflow",
        args=[*BASE_ARGS, "--backend", "tensorflow", "--seed", "7"],
        expected=EXAMPLES_ROOT / "tensorflow" / "batched.png",
    ),
    Example(
        name="format",
        args=[*BASE_ARGS, "--format", "raw"],
        expected=EXAMPLES_ROOT / "format" / "pixels.raw",
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose"],
        expected=EXAMPLES_ROOT / "verbose" / "diagnostic.png",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.expected.parent])
        example.expected.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        if not example.expected.is_file():
            raise RuntimeError(f"Expected file {example.expected} was not created")
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
