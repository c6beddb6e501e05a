"""Word wrapping for fixed-pitch blocks."""

import re
from typing import Optional


def get_hanging_indent_width(paragraph: str) -> int:
    """Return hanging indent width for bullet/numbered paragraphs.

    Detects optional leading spaces, then one of:
    - '-' or '*' followed by exactly one space
    - one or more digits followed by '.' or ')' and exactly one space

    Returns total columns before first text char (base indent + marker + one space),
    or 0 if not a bullet/numbered paragraph.
    """
    m = re.match(r"^(\s*)(?:([-*]) (?=\S)|((?:\d+)(?:[\.)]) (?=\S)))", paragraph)
    if not m:
        return 0
    leading = m.group(1) or ""
    marker = m.group(2)
    numbered = m.group(3)
    if marker is not None:
        return len(leading) + len(marker) + 1
    if numbered is not None:
        return len(leading) + len(numbered)
    return 0


def wrap_block(text: str, num_columns: int) -> tuple[list[str], list[int]]:
    """Wrap a block into visual lines with hanging indents.

    Returns (lines, cumulative_counts) where cumulative_counts[i] is the number
    of block characters consumed by the end of line i. The space a line breaks
    on belongs to the line before the break, so the first character of line
    i + 1 is always cumulative_counts[i].
    """
    if not text:
        return ([""], [0])

    hanging_width = get_hanging_indent_width(text)
    indent_prefix = " " * hanging_width

    lines: list[str] = []
    cumulative_counts: list[int] = []
    char_count = 0
    current_line: Optional[str] = None

    def width_for(line_index: int) -> int:
        if line_index == 0:
            return max(1, num_columns)
        return max(1, num_columns - hanging_width)

    def commit(line: str, consumed: int) -> None:
        nonlocal char_count
        prefix = indent_prefix if lines else ""
        lines.append(prefix + line)
        char_count += consumed
        cumulative_counts.append(char_count)

    for word in text.split(" "):
        if current_line is not None:
            if len(current_line) + 1 + len(word) < width_for(len(lines)):
                current_line += " " + word
                continue
            commit(current_line, len(current_line) + 1)
        # Break words longer than the line
        while len(word) >= width_for(len(lines)):
            width = width_for(len(lines))
            commit(word[:width], width)
            word = word[width:]
        current_line = word

    assert current_line is not None
    commit(current_line, len(current_line))
    return (lines, cumulative_counts)
