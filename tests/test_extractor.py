from __future__ import annotations

import pytest

from code_cloze.extractor import (
    CodeResource,
    count_by_file,
    extract,
    extract_text,
    serialize_heading,
)


def test_single_heading_and_fence(workspace):
    path = workspace.write("notes.md", "# Foo\n\n```js\na\nb\nc\n```\n")

    resources = extract([path])

    assert resources == (
        CodeResource(
            source_path=path,
            sequence_index=0,
            heading="# Foo",
            code="a\nb\nc",
            language="js",
        ),
    )


def test_heading_tracks_latest_and_does_not_stack(tmp_path):
    text = (
        "```sh\necho before\n```\n\n"
        "# Top\n\n"
        "## Child\n\n"
        "```py\nx = 1\n```\n\n"
        "Some prose.\n\n"
        "# Next\n\n"
        "```\nplain\n```\n"
    )

    resources = extract_text(text, tmp_path / "doc.md")

    assert [r.heading for r in resources] == [None, "## Child", "# Next"]
    assert [r.sequence_index for r in resources] == [0, 1, 2]
    assert [r.language for r in resources] == ["sh", "py", None]


def test_setext_heading_serializes_as_atx(tmp_path):
    text = "Title\n=====\n\nSub\n---\n\n```\ncode\n```\n"

    (resource,) = extract_text(text, tmp_path / "doc.md")

    assert resource.heading == "## Sub"


def test_nested_fences_are_ignored(tmp_path):
    text = (
        "- item\n\n  ```py\n  nested = True\n  ```\n\n"
        "> ```py\n> quoted = True\n> ```\n\n"
        "```py\ntop = True\n```\n"
    )

    resources = extract_text(text, tmp_path / "doc.md")

    assert [r.code for r in resources] == ["top = True"]


def test_empty_fence_and_indented_block(tmp_path):
    text = "# E\n\n```rust\n```\n\nparagraph\n\n    indented = 1\n    two = 2\n"

    empty, indented = extract_text(text, tmp_path / "doc.md")

    assert empty.code == ""
    assert empty.language == "rust"
    assert indented.code == "indented = 1\ntwo = 2"
    assert indented.language is None
    assert indented.heading == "# E"


def test_language_is_first_word_of_info_string(tmp_path):
    (resource,) = extract_text(
        "```python title=demo.py\nprint()\n```\n", tmp_path / "doc.md"
    )

    assert resource.language == "python"


def test_multiple_files_keep_order_and_reset_index(workspace):
    first = workspace.write("a.md", "```\n1\n```\n\n```\n2\n```\n")
    empty = workspace.write("b.md", "# no code here\n")
    second = workspace.write("c.md", "# C\n\n```\n3\n```\n")

    resources = extract([first, empty, second])

    assert [(r.source_path.name, r.sequence_index, r.code) for r in resources] == [
        ("a.md", 0, "1"),
        ("a.md", 1, "2"),
        ("c.md", 0, "3"),
    ]
    assert count_by_file(resources) == {first: 2, second: 1}


def test_file_without_code_blocks_yields_nothing(workspace):
    path = workspace.write("prose.md", "# Only prose\n\nNothing to see.\n")

    assert extract([path]) == ()


def test_unreadable_file_propagates(workspace):
    bad = workspace.write("bad.md", b"\xff\xfe")

    with pytest.raises(UnicodeDecodeError):
        extract([bad])


@pytest.mark.parametrize(
    ("level", "text", "expected"),
    [(1, "Foo", "# Foo"), (3, " Bar ", "### Bar"), (2, "", "##")],
)
def test_serialize_heading(level, text, expected):
    assert serialize_heading(level, text) == expected
