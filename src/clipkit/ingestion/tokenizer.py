"""Split a decoded clippings file into delimiter-separated blocks."""

from __future__ import annotations

import re

from clipkit.ingestion.models import TokenizedBlock
from clipkit.ingestion.normalization import normalize_line_endings, remove_bom

# A delimiter line holds nothing but ten or more "=" characters.
_SEPARATOR_RE = re.compile(r"^[ \t]*={10,}[ \t]*$", re.MULTILINE)


def _split_lines(segment: str) -> list[str]:
    lines = segment.split("\n")

    # Only blank lines at the block edges go; line content is left to the sanitizers.
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def tokenize(content: str) -> list[TokenizedBlock]:
    """Return the non-blank blocks of *content* in file order.

    End of input terminates the last block even without a closing
    delimiter. Blank lines inside a block are kept; whitespace-only blocks
    are dropped silently.
    """

    if not content:
        return []

    text = normalize_line_endings(remove_bom(content))
    blocks: list[TokenizedBlock] = []

    for index, segment in enumerate(_SEPARATOR_RE.split(text)):
        if not segment.strip():
            continue

        lines = _split_lines(segment)
        blocks.append(TokenizedBlock(index=index, lines=tuple(lines), raw="\n".join(lines)))

    return blocks
