"""Extract quizzable code blocks from Markdown documents.

Only top-level blocks count: a fence nested inside a list item or block
quote is ignored, matching how the document's own outline reads. Each
block remembers the closest heading above it so the quiz can show where
the snippet came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .core.files import read_text_file

__all__ = [
    "CodeResource",
    "build_markdown_it",
    "count_by_file",
    "extract",
    "extract_text",
    "serialize_heading",
]

_CODE_TOKENS = {"fence", "code_block"}


@dataclass(frozen=True)
class CodeResource:
    """A single code block plus the context it was found in."""

    source_path: Path
    sequence_index: int
    heading: Optional[str]
    code: str
    language: Optional[str]


@dataclass(frozen=True)
class _Node:
    kind: str
    text: str
    level: int = 0
    info: str = ""


@dataclass(frozen=True)
class _FoldState:
    heading: Optional[str] = None
    resources: tuple[CodeResource, ...] = ()


def build_markdown_it() -> MarkdownIt:
    return MarkdownIt("commonmark")


def serialize_heading(level: int, text: str) -> str:
    """Render a heading back to ATX Markdown (``"# Foo"``)."""
    marker = "#" * max(1, min(level, 6))
    text = text.strip()
    return f"{marker} {text}" if text else marker


def extract(
    file_paths: Sequence[Path],
    *,
    md: Optional[MarkdownIt] = None,
) -> tuple[CodeResource, ...]:
    """Return every top-level code block in ``file_paths``, in order.

    Files are read as UTF-8; read and decode errors propagate to the
    caller. A file without code blocks simply contributes nothing.
    """

    parser = md or build_markdown_it()
    resources: list[CodeResource] = []
    for path in file_paths:
        text = read_text_file(path)
        resources.extend(extract_text(text, Path(path), md=parser))
    return tuple(resources)


def extract_text(
    text: str,
    source_path: Path,
    *,
    md: Optional[MarkdownIt] = None,
) -> tuple[CodeResource, ...]:
    parser = md or build_markdown_it()
    nodes = _iter_nodes(parser.parse(text))

    def step(state: _FoldState, node: _Node) -> _FoldState:
        if node.kind == "heading":
            return _FoldState(
                heading=serialize_heading(node.level, node.text),
                resources=state.resources,
            )
        resource = CodeResource(
            source_path=source_path,
            sequence_index=len(state.resources),
            heading=state.heading,
            code=node.text,
            language=_language_from_info(node.info),
        )
        return _FoldState(
            heading=state.heading,
            resources=state.resources + (resource,),
        )

    return reduce(step, nodes, _FoldState()).resources


def _iter_nodes(tokens: Sequence[Token]) -> Iterator[_Node]:
    """Collapse the token stream into top-level heading and code nodes."""

    for idx, token in enumerate(tokens):
        if token.level != 0:
            continue
        if token.type == "heading_open":
            inline = _next_inline(tokens, idx)
            yield _Node(
                kind="heading",
                text=inline.content if inline is not None else "",
                level=int(token.tag[1:]) if token.tag.startswith("h") else 1,
            )
        elif token.type in _CODE_TOKENS:
            yield _Node(
                kind="code",
                text=_strip_final_newline(token.content),
                info=token.info or "",
            )


def _next_inline(tokens: Sequence[Token], idx: int) -> Optional[Token]:
    if idx + 1 < len(tokens) and tokens[idx + 1].type == "inline":
        return tokens[idx + 1]
    return None


def _strip_final_newline(content: str) -> str:
    return content[:-1] if content.endswith("\n") else content


def _language_from_info(info: str) -> Optional[str]:
    parts = info.strip().split()
    return parts[0] if parts else None


def count_by_file(resources: Iterable[CodeResource]) -> dict[Path, int]:
    """Return how many resources each source file contributed."""

    counts: dict[Path, int] = {}
    for resource in resources:
        counts[resource.source_path] = counts.get(resource.source_path, 0) + 1
    return counts
