from __future__ import annotations

import random
from pathlib import Path

import pytest

from fixtures import make_console, make_provider

from code_cloze.diff import DiffSegment
from code_cloze.extractor import CodeResource
from code_cloze.runner import (
    PLACEHOLDER,
    PROMPT_LABEL,
    NoResourcesError,
    build_cloze,
    choose_round,
    display_path,
    grade,
    highlight,
    resolve_lexer,
    run_round,
)


def make_resource(
    code: str,
    *,
    heading: str | None = "# Foo",
    language: str | None = "js",
    path: Path = Path("/work/notes/foo.md"),
    index: int = 0,
) -> CodeResource:
    return CodeResource(
        source_path=path,
        sequence_index=index,
        heading=heading,
        code=code,
        language=language,
    )


def test_choose_round_requires_resources():
    with pytest.raises(NoResourcesError):
        choose_round([], random.Random(0))


@pytest.mark.parametrize("seed", range(25))
def test_line_index_in_bounds_and_line_count_preserved(seed):
    resources = [
        make_resource("a\nb\nc"),
        make_resource("one line", index=1),
        make_resource("x\n\ny\n", index=2),
    ]

    quiz = choose_round(resources, random.Random(seed))

    assert 0 <= quiz.line_index < len(quiz.lines)
    assert len(quiz.cloze_lines) == len(quiz.lines)
    assert quiz.cloze_lines[quiz.line_index] == PLACEHOLDER
    assert quiz.cloze_text.count("\n") == quiz.resource.code.count("\n")


def test_choose_round_is_reproducible_with_seeded_rng():
    resources = [make_resource(f"{i}\n{i + 1}", index=i) for i in range(5)]

    first = choose_round(resources, random.Random(42))
    second = choose_round(resources, random.Random(42))

    assert first == second


def test_empty_block_has_single_blank_line():
    quiz = choose_round([make_resource("")], random.Random(7))

    assert quiz.line_index == 0
    assert quiz.lines == ("",)
    assert quiz.cloze_text == PLACEHOLDER
    assert quiz.expected == ""


def test_pinned_indices():
    resources = [make_resource("a"), make_resource("x\ny\nz", index=1)]

    quiz = choose_round(
        resources, random.Random(0), resource_index=1, line_index=1
    )

    assert quiz.resource is resources[1]
    assert quiz.expected == "y"
    assert quiz.cloze_text == f"x\n{PLACEHOLDER}\nz"


def test_build_cloze_rejects_out_of_range():
    with pytest.raises(IndexError):
        build_cloze(["a"], 1)


def test_grade_is_exact():
    assert grade("y", "y")
    assert not grade("y", " y")
    assert not grade("Y", "y")
    assert not grade("y", "y ")


def test_display_path_strips_working_directory():
    assert display_path(Path("/work/notes/foo.md"), Path("/work")) == (
        str(Path("notes/foo.md"))
    )
    assert display_path(Path("/elsewhere/x.md"), Path("/work")) == (
        "/elsewhere/x.md"
    )


def test_display_path_resolves_symlinked_working_directory(
    tmp_path, monkeypatch
):
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real, target_is_directory=True)
    monkeypatch.chdir(link)

    assert display_path((real / "notes.md").resolve()) == "notes.md"


@pytest.mark.parametrize(
    ("language", "expected"),
    [("js", "js"), ("python", "python"), ("no-such-lang", "text"), (None, "text")],
)
def test_resolve_lexer_degrades_to_text(language, expected):
    assert resolve_lexer(language) == expected


def test_highlight_never_raises_for_unknown_language():
    console = make_console()

    console.print(highlight("some code", "definitely-not-a-language"))

    assert "some code" in console.export_text()


def test_correct_answer_shows_success_without_diff():
    console = make_console()
    provider = make_provider(["y"])

    result = run_round(
        [make_resource("x\ny\nz")],
        console,
        provider,
        line_index=1,
        cwd=Path("/work"),
    )

    output = console.export_text()
    assert result.outcome == "correct"
    assert result.segments == ()
    assert provider.labels == [PROMPT_LABEL]
    assert "# Foo" in output
    assert str(Path("notes/foo.md")) in output
    assert PLACEHOLDER in output
    assert "correct" in output
    assert "expected" not in output


def test_wrong_answer_shows_diff_and_full_block():
    console = make_console()

    result = run_round(
        [make_resource("x\ny\nz")],
        console,
        make_provider(["w"]),
        line_index=1,
        cwd=Path("/work"),
    )

    output = console.export_text()
    assert result.outcome == "incorrect"
    assert result.answer == "w"
    assert result.segments == (
        DiffSegment("removed", "y"),
        DiffSegment("added", "w"),
    )
    assert "expected" in output and "actual" in output
    assert "yw" in output
    after_diff = output.split("yw", 1)[1]
    assert "x" in after_diff and "y" in after_diff and "z" in after_diff
    assert PLACEHOLDER not in after_diff


@pytest.mark.parametrize("abort", [EOFError(), KeyboardInterrupt()])
def test_aborted_prompt_reports_no_answer(abort):
    console = make_console()
    err_console = make_console(stderr=True)

    result = run_round(
        [make_resource("x\ny")],
        console,
        make_provider([abort]),
        err_console=err_console,
        rng=random.Random(1),
    )

    assert result.outcome == "no-answer"
    assert result.answer is None
    assert "no answer" in err_console.export_text()
    assert "no answer" not in console.export_text()


def test_unnamed_heading_and_empty_block_grading():
    console = make_console()

    result = run_round(
        [make_resource("", heading=None, language=None)],
        console,
        make_provider([""]),
        rng=random.Random(3),
    )

    assert result.outcome == "correct"
    assert "unnamed" in console.export_text()
