"""Character-level diff between the expected line and the user's answer."""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Iterable, Literal

from rich.text import Text

SegmentKind = Literal["unchanged", "added", "removed"]

EXPECTED_STYLE = "green"
ACTUAL_STYLE = "red"
_STYLES: dict[str, str] = {
    "added": ACTUAL_STYLE,
    "removed": EXPECTED_STYLE,
    "unchanged": "grey50",
}


@dataclass(frozen=True)
class DiffSegment:
    kind: SegmentKind
    value: str


def diff_chars(expected: str, actual: str) -> list[DiffSegment]:
    """Align ``expected`` and ``actual`` character by character.

    Keeping only ``unchanged`` and ``removed`` segments rebuilds
    ``expected``; keeping ``unchanged`` and ``added`` rebuilds ``actual``.
    ``SequenceMatcher`` prefers long contiguous matches, so the alignment
    is always valid but not guaranteed to be a minimal (LCS) edit.
    """

    matcher = SequenceMatcher(None, expected, actual, autojunk=False)
    segments: list[DiffSegment] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append(segments, "unchanged", expected[i1:i2])
            continue
        if tag in ("replace", "delete"):
            _append(segments, "removed", expected[i1:i2])
        if tag in ("replace", "insert"):
            _append(segments, "added", actual[j1:j2])
    return segments


def reconstruct(segments: Iterable[DiffSegment], side: str) -> str:
    """Rebuild one side of the diff: ``"expected"`` or ``"actual"``."""

    skip = "added" if side == "expected" else "removed"
    return "".join(seg.value for seg in segments if seg.kind != skip)


def render_diff(segments: Iterable[DiffSegment]) -> Text:
    text = Text()
    for segment in segments:
        text.append(segment.value, style=_STYLES[segment.kind])
    return text


def render_legend() -> Text:
    return Text.assemble(
        "  ",
        ("expected", EXPECTED_STYLE),
        "\n  ",
        ("actual", ACTUAL_STYLE),
    )


def _append(segments: list[DiffSegment], kind: SegmentKind, value: str) -> None:
    if not value:
        return
    if segments and segments[-1].kind == kind:
        segments[-1] = DiffSegment(kind, segments[-1].value + value)
        return
    segments.append(DiffSegment(kind, value))
