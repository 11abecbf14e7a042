"""Filter Rewriting - parameterized row scoping and placeholder binding.

Invariants:
    - Row ids are ALWAYS bound as parameters, never spliced into filter text
    - A row-scoped filter is '_id = ?' AND (caller filter), id bound first
    - '?' inside quoted literals or quoted identifiers is not a placeholder
    - Placeholder count must equal argument count (FilterArgumentError)

Design Decisions:
    - Positional '?' at the API, named ':pN' at SQLAlchemy: text() only binds
      named parameters, and this keeps caller filters dialect-neutral
    - Literal ':' escaped for text() so 'a:b' inside a string stays a string
"""

from typing import Sequence

from simpledb.core.domain_types import ID_COLUMN, RowId
from simpledb.core.errors import FilterArgumentError

_QUOTES = ("'", '"')


def scope_filter(
    where: str | None, args: Sequence[object], row_id: RowId | None,
) -> tuple[str | None, tuple[object, ...]]:
    """Conjoin an identity filter for row-scoped addresses."""
    where = where.strip() if where else None
    args = tuple(args or ())
    if row_id is None:
        return where or None, args
    if not where:
        return f"{ID_COLUMN} = ?", (row_id,)
    return f"{ID_COLUMN} = ? AND ({where})", (row_id, *args)


def count_placeholders(where: str | None) -> int:
    if not where:
        return 0
    return sum(1 for token in _scan(where) if token == "?")


def bind_positional(
    where: str | None, args: Sequence[object],
) -> tuple[str | None, dict[str, object]]:
    """Rewrite '?' placeholders to ':p0', ':p1', ... with a params dict."""
    args = tuple(args or ())
    if not where:
        if args:
            raise FilterArgumentError(0, len(args))
        return None, {}

    out: list[str] = []
    index = 0
    for token in _scan(where):
        if token == "?":
            out.append(f":p{index}")
            index += 1
        else:
            out.append(token.replace(":", "\\:"))
    if index != len(args):
        raise FilterArgumentError(index, len(args))
    return "".join(out), {f"p{i}": value for i, value in enumerate(args)}


def _scan(text: str):
    """Yield text chunks; every unquoted '?' comes out as its own chunk."""
    buf: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            buf.append(ch)
            if ch == quote:
                # doubled quote is an escaped quote, stay inside the literal
                if i + 1 < len(text) and text[i + 1] == quote:
                    buf.append(text[i + 1])
                    i += 1
                else:
                    quote = None
        elif ch in _QUOTES:
            quote = ch
            buf.append(ch)
        elif ch == "?":
            if buf:
                yield "".join(buf)
                buf = []
            yield "?"
        else:
            buf.append(ch)
        i += 1
    if buf:
        yield "".join(buf)
