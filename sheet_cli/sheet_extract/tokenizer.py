"""CSV line splitting that tolerates hand-edited quoting."""

from __future__ import annotations


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed cells.

    Commas inside double quotes do not split, and ``""`` inside a quoted region
    is a literal quote. An unterminated quote runs to the end of the line.
    """

    cells: list[str] = []
    current: list[str] = []
    in_quote = False
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == '"':
            if in_quote and index + 1 < length and line[index + 1] == '"':
                current.append('"')
                index += 1
            else:
                in_quote = not in_quote
        elif char == "," and not in_quote:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1
    cells.append("".join(current).strip())
    return cells
