"""
SQL Formatter

Pretty-prints a single SQL statement for display: major clauses start new
lines, joins and the SELECT column list are indented, and top-level select
columns get one line each.

This is keyword/position matching, not a parser. String literals are not
recognised, so a keyword, comma or parenthesis inside a quoted string can
be picked up as if it were SQL.
"""

import re

INDENT = "    "
ON_INDENT = INDENT * 2

MAJOR_KEYWORDS = (
    "SELECT",
    "FROM",
    "WHERE",
    "GROUP BY",
    "HAVING",
    "ORDER BY",
    "UNION",
    "EXCEPT",
    "INTERSECT",
)

_WHITESPACE = re.compile(r"\s+")

# Leading \s+ means a keyword at the very start of the statement is never matched
_MAJOR_PATTERNS = tuple(
    re.compile(r"\s+(" + keyword.replace(" ", r"\s+") + r")\b", re.IGNORECASE)
    for keyword in MAJOR_KEYWORDS
)

# Longest variant first: INNER/CROSS JOIN, LEFT/RIGHT/FULL [OUTER] JOIN, JOIN
_JOIN_PATTERN = re.compile(
    r"\s+((?:(?:INNER|CROSS)\s+|(?:LEFT|RIGHT|FULL)\s+(?:OUTER\s+)?)?JOIN)\b",
    re.IGNORECASE,
)

_SELECT_LIST_START = re.compile(
    r"\b(SELECT(?:\s+TOP\s*\(\s*\d+\s*\)|\s+TOP\s+\d+|\s+DISTINCT)?)\s+",
    re.IGNORECASE,
)

_ON_PATTERN = re.compile(r"\s+(ON)\s+", re.IGNORECASE)

_BLANK_LINES = re.compile(r"\n\s*\n")


def format_sql(sql: str) -> str:
    """
    Format a SQL statement with line breaks and indentation.

    Args:
        sql: Raw SQL, possibly on one line

    Returns:
        Formatted SQL. Empty or whitespace-only input is returned unchanged.

    Example:
        >>> print(format_sql("SELECT a, b FROM t JOIN u ON t.id = u.id"))
        SELECT
            a,
            b
        FROM t
            JOIN u
                ON t.id = u.id
    """
    if not sql or not sql.strip():
        return sql

    sql = _WHITESPACE.sub(" ", sql.strip())

    for pattern in _MAJOR_PATTERNS:
        sql = pattern.sub(r"\n\1", sql)

    sql = _JOIN_PATTERN.sub(rf"\n{INDENT}\1", sql)
    sql = _SELECT_LIST_START.sub(rf"\1\n{INDENT}", sql)
    sql = format_select_columns(sql)
    sql = _ON_PATTERN.sub(rf"\n{ON_INDENT}\1 ", sql)
    sql = _BLANK_LINES.sub("\n", sql)

    return "\n".join(line.rstrip() for line in sql.split("\n")).strip()


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _keyword_at(sql: str, pos: int, keyword: str) -> bool:
    """True when `keyword` occurs at `pos` as a whole word (case-insensitive)."""
    end = pos + len(keyword)
    if end > len(sql) or sql[pos:end].upper() != keyword:
        return False
    if pos > 0 and _is_word_char(sql[pos - 1]):
        return False
    if end < len(sql) and _is_word_char(sql[end]):
        return False
    return True


def format_select_columns(sql: str) -> str:
    """
    Put each top-level column of a SELECT list on its own line.

    A comma breaks the line only while the scanner is inside a SELECT clause
    (after SELECT, before FROM) and outside any parentheses, so commas in
    function calls such as SUBSTRING(Name, 1, 10) and in IN (...) lists stay
    where they are.
    """
    out: list[str] = []
    depth = 0
    in_select = False
    i = 0
    n = len(sql)

    while i < n:
        if _keyword_at(sql, i, "SELECT"):
            in_select = True
        elif _keyword_at(sql, i, "FROM"):
            in_select = False

        ch = sql[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)

        out.append(ch)

        if ch == "," and in_select and depth == 0:
            out.append(f"\n{INDENT}")
            while i + 1 < n and sql[i + 1].isspace():
                i += 1
        i += 1

    return "".join(out)
