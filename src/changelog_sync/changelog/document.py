"""
Changelog document model, parser and storage.

A changelog is split into blocks at *boundary lines*: level-2 headings
(``## ...``) and horizontal rules (``---``). The first block is the
preamble and has no heading. Every other block starts with its boundary
line and runs up to the next boundary. Parsing is lossless, so
``parse_changelog(text).serialize() == text`` for any input.

Editing a document never mutates it; the ``with_*`` helpers return a new
:class:`ChangelogDocument`.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


HISTORY_HEADER = "## Commit History"
UNRELEASED_HEADER = "## [Unreleased]"
SECTION_RULE = "---"

CHANGELOG_TEMPLATE = (
    "# Changelog\n"
    "\n"
    "All notable changes to this project will be documented in this file.\n"
    "\n"
    f"{UNRELEASED_HEADER}\n"
    "\n"
)


class ChangelogError(Exception):
    """Raised when the changelog file cannot be read or written."""

    pass


def _is_boundary(line: str) -> bool:
    stripped = line.rstrip("\r\n")
    return stripped.startswith("## ") or stripped.rstrip() == SECTION_RULE


@dataclass(frozen=True)
class Block:
    """A run of lines starting at a boundary line.

    Attributes
    ----------
    heading_line : str
        The boundary line including its line ending, or ``""`` for the
        preamble.
    body : str
        Everything after the heading line up to the next boundary.
    """

    heading_line: str
    body: str = ""

    @property
    def heading(self) -> str:
        return self.heading_line.rstrip("\r\n")

    def render(self) -> str:
        return self.heading_line + self.body


@dataclass(frozen=True)
class ChangelogDocument:
    """Typed view of a changelog file."""

    blocks: Tuple[Block, ...]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def index_of(self, header: str) -> Optional[int]:
        """Index of the first block whose heading starts with ``header``."""
        for index, block in enumerate(self.blocks):
            if block.heading_line and block.heading.startswith(header):
                return index
        return None

    @property
    def has_history(self) -> bool:
        return self.index_of(HISTORY_HEADER) is not None

    @property
    def history_entries(self) -> str:
        """Body of the commit history section, or ``""`` if it is absent."""
        index = self.index_of(HISTORY_HEADER)
        return "" if index is None else self.blocks[index].body

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def with_block(self, index: int, block: Block) -> "ChangelogDocument":
        blocks = list(self.blocks)
        blocks[index] = block
        return replace(self, blocks=tuple(blocks))

    def with_body(self, index: int, body: str) -> "ChangelogDocument":
        """Replace the body of block ``index``, keeping its heading."""
        block = self.blocks[index]
        heading_line = block.heading_line
        if heading_line and not heading_line.endswith("\n"):
            heading_line += "\n"
        return self.with_block(index, Block(heading_line=heading_line, body=body))

    def with_appended(self, block: Block) -> "ChangelogDocument":
        """Append ``block`` after a blank line at the end of the document."""
        document = self
        text = self.serialize()
        if text:
            padding = "" if text.endswith("\n\n") else ("\n" if text.endswith("\n") else "\n\n")
            last = self.blocks[-1]
            document = self.with_block(
                len(self.blocks) - 1, replace(last, body=last.body + padding)
            )
        return replace(document, blocks=document.blocks + (block,))

    def serialize(self) -> str:
        return "".join(block.render() for block in self.blocks)


def parse_changelog(text: str) -> ChangelogDocument:
    """Split ``text`` into a :class:`ChangelogDocument`."""
    headings = [""]
    bodies = [[]]
    for line in text.splitlines(keepends=True):
        if _is_boundary(line):
            headings.append(line)
            bodies.append([])
        else:
            bodies[-1].append(line)
    blocks = tuple(
        Block(heading_line=heading, body="".join(body)) for heading, body in zip(headings, bodies)
    )
    return ChangelogDocument(blocks=blocks)


# ----------------------------------------------------------------------
# Storage
# ----------------------------------------------------------------------
def load_changelog(path: Path) -> str:
    """Read the changelog at ``path`` as UTF-8, dropping a leading BOM."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read changelog %s: %s", path, exc)
        raise ChangelogError(f"Cannot read {path}: {exc}") from exc
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return content


def save_changelog(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` atomically.

    The content goes to a temporary file in the same directory which then
    replaces the target, so a failure never leaves a half-written file.
    """
    directory = path.resolve().parent
    tmp_path: Optional[str] = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as exc:
        logger.error("Failed to write changelog %s: %s", path, exc)
        raise ChangelogError(f"Cannot write {path}: {exc}") from exc
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
    logger.debug("Wrote %d characters to %s", len(text), path)
