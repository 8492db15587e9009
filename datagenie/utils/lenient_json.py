"""
Lenient JSON loading.

Accepts the relaxed JSON that hand-edited schema and config files tend to
contain: `//` line comments, `/* */` block comments and trailing commas
before `}` or `]`. Everything else must be strict JSON.
"""

import json
from typing import Any


def strip_comments_and_trailing_commas(text: str) -> str:
    """Remove comments and trailing commas that sit outside string literals."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    # index in `out` of a comma that may turn out to be trailing
    pending_comma: int | None = None
    # last significant character emitted outside strings and comments
    previous = ""

    while i < n:
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == "/" and i + 1 < n and text[i + 1] == "/":
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue

        if ch == "/" and i + 1 < n and text[i + 1] == "*":
            end = text.find("*/", i + 2)
            # Unterminated block comment: leave it for the decoder to reject
            if end == -1:
                out.append(text[i:])
                break
            i = end + 2
            continue

        if ch in "}]" and pending_comma is not None:
            out[pending_comma] = ""
            pending_comma = None
        elif ch == ",":
            # Only a comma that follows a value is trailing; `[,]` stays invalid
            pending_comma = len(out) if previous not in ("", "[", "{", ",") else None
        elif not ch.isspace():
            pending_comma = None
        if not ch.isspace():
            previous = ch

        if ch == '"':
            in_string = True
        out.append(ch)
        i += 1

    return "".join(out)


def loads_lenient(text: str) -> Any:
    """
    Parse relaxed JSON.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON once comments and
            trailing commas have been removed
    """
    return json.loads(strip_comments_and_trailing_commas(text))
