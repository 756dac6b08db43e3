"""Cloze quizzes over the code blocks in your Markdown notes."""

from .cli import build_arg_parser, main
from .diff import DiffSegment, diff_chars, render_diff
from .extractor import CodeResource, extract, extract_text
from .runner import (
    PLACEHOLDER,
    NoResourcesError,
    QuizRound,
    RoundResult,
    build_cloze,
    choose_round,
    grade,
    run_round,
)
from .store import default_state, load_state, save_state

__all__ = [
    "build_arg_parser",
    "main",
    "DiffSegment",
    "diff_chars",
    "render_diff",
    "CodeResource",
    "extract",
    "extract_text",
    "PLACEHOLDER",
    "NoResourcesError",
    "QuizRound",
    "RoundResult",
    "build_cloze",
    "choose_round",
    "grade",
    "run_round",
    "default_state",
    "load_state",
    "save_state",
]
