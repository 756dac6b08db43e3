"""Single quiz round: pick a block, blank a line, grade the answer.

The round is synchronous and blocks on exactly one prompt. Randomness
and input are injected so callers (and tests) control which block and
line are chosen and what the "user" types.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal, Optional, Sequence

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from .core.config import ClozeError
from .diff import DiffSegment, diff_chars, render_diff, render_legend
from .extractor import CodeResource

__all__ = [
    "PLACEHOLDER",
    "PROMPT_LABEL",
    "UNNAMED",
    "InputProvider",
    "NoResourcesError",
    "QuizRound",
    "RoundResult",
    "build_cloze",
    "choose_round",
    "display_path",
    "grade",
    "highlight",
    "resolve_lexer",
    "run_round",
]

PLACEHOLDER = "// =====???====="
PROMPT_LABEL = "missing line"
UNNAMED = "unnamed"

InputProvider = Callable[[str], str]
Outcome = Literal["correct", "incorrect", "no-answer"]


class NoResourcesError(ClozeError):
    """Raised when a round is requested without any code blocks."""


@dataclass(frozen=True)
class QuizRound:
    """The block and line selected for one round."""

    resource: CodeResource
    line_index: int
    lines: tuple[str, ...]
    cloze_lines: tuple[str, ...]

    @property
    def expected(self) -> str:
        return self.lines[self.line_index]

    @property
    def cloze_text(self) -> str:
        return "\n".join(self.cloze_lines)


@dataclass(frozen=True)
class RoundResult:
    """Return value from ``run_round``."""

    round: QuizRound
    answer: Optional[str]
    outcome: Outcome
    segments: tuple[DiffSegment, ...] = ()


def build_cloze(lines: Sequence[str], line_index: int) -> list[str]:
    """Copy ``lines`` with ``line_index`` swapped for the placeholder."""
    if not 0 <= line_index < len(lines):
        raise IndexError(
            f"line index {line_index} out of range for {len(lines)} line(s)"
        )
    return [
        PLACEHOLDER if idx == line_index else line
        for idx, line in enumerate(lines)
    ]


def choose_round(
    resources: Sequence[CodeResource],
    rng: random.Random,
    *,
    resource_index: Optional[int] = None,
    line_index: Optional[int] = None,
) -> QuizRound:
    """Pick a block and a line uniformly at random.

    ``resource_index`` and ``line_index`` pin either choice. Splitting an
    empty block yields one empty line, so every block has a valid line 0.
    """

    if not resources:
        raise NoResourcesError("No code blocks available to quiz on.")
    if resource_index is None:
        resource_index = rng.randrange(len(resources))
    resource = resources[resource_index]

    lines = resource.code.split("\n")
    if line_index is None:
        line_index = rng.randrange(len(lines))
    cloze = build_cloze(lines, line_index)
    return QuizRound(
        resource=resource,
        line_index=line_index,
        lines=tuple(lines),
        cloze_lines=tuple(cloze),
    )


def grade(expected: str, answer: str) -> bool:
    return answer == expected


def display_path(path: Path, cwd: Optional[Path] = None) -> str:
    base = cwd if cwd is not None else Path.cwd().resolve()
    try:
        return str(Path(path).relative_to(base))
    except ValueError:
        return str(path)


def resolve_lexer(language: Optional[str]) -> str:
    """Return a lexer name pygments knows, or ``"text"``."""
    if not language:
        return "text"
    try:
        get_lexer_by_name(language)
    except ClassNotFound:
        return "text"
    return language


def highlight(code: str, language: Optional[str]) -> Syntax:
    return Syntax(code, resolve_lexer(language), theme="ansi_dark")


def run_round(
    resources: Sequence[CodeResource],
    console: Console,
    input_provider: Optional[InputProvider] = None,
    *,
    err_console: Optional[Console] = None,
    rng: Optional[random.Random] = None,
    cwd: Optional[Path] = None,
    resource_index: Optional[int] = None,
    line_index: Optional[int] = None,
) -> RoundResult:
    """Run one round and render it on ``console``.

    An aborted prompt (EOF or Ctrl-C) reports ``no answer`` on
    ``err_console`` and skips grading; it is not an error.
    """

    quiz = choose_round(
        resources,
        rng or random.Random(),
        resource_index=resource_index,
        line_index=line_index,
    )
    resource = quiz.resource
    _render_header(console, resource, cwd)
    console.print(highlight(quiz.cloze_text, resource.language))
    console.print()

    ask = input_provider or _console_provider(console)
    try:
        answer: Optional[str] = ask(PROMPT_LABEL)
    except (EOFError, KeyboardInterrupt):
        answer = None

    if answer is None:
        (err_console or console).print(Text("no answer", style="yellow"))
        return RoundResult(quiz, None, "no-answer")

    if grade(quiz.expected, answer):
        console.print(Text("correct", style="bold green"))
        return RoundResult(quiz, answer, "correct")

    segments = tuple(diff_chars(quiz.expected, answer))
    console.print(render_legend())
    console.print()
    console.print(render_diff(segments))
    console.print()
    console.print(highlight(resource.code, resource.language))
    return RoundResult(quiz, answer, "incorrect", segments)


def _render_header(
    console: Console, resource: CodeResource, cwd: Optional[Path]
) -> None:
    header = Text.assemble(
        (resource.heading or UNNAMED, "bold cyan"),
        (f" ({display_path(resource.source_path, cwd)})", "dim"),
    )
    console.print()
    console.print(header)
    console.print()


def _console_provider(console: Console) -> InputProvider:
    def _ask(label: str) -> str:
        return console.input(f"[bold green]?[/] {label} [dim]›[/] ")

    return _ask
