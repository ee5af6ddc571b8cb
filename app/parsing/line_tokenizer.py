"""
app/parsing/line_tokenizer.py

Single-line tokenizer for comma-delimited input.

Quoted segments may contain commas; inside quotes a doubled quote (``""``)
yields one literal quote. Fields spanning several lines are not supported.
"""

from __future__ import annotations

QUOTE = '"'
DELIMITER = ","


def tokenize_line(line: str) -> list[str]:
    """
    Split one line into trimmed field values.

    Never raises: unbalanced quotes simply leave the scan inside quotes until
    the end of the line. An empty line yields ``[""]``.
    """

    values: list[str] = []
    current: list[str] = []
    inside_quotes = False
    index = 0
    length = len(line)

    while index < length:
        char = line[index]

        if char == QUOTE:
            if inside_quotes and index + 1 < length and line[index + 1] == QUOTE:
                current.append(QUOTE)
                index += 2
                continue
            inside_quotes = not inside_quotes
        elif char == DELIMITER and not inside_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1

    values.append("".join(current).strip())
    return values
