"""URI decomposition and parameter binding.

A route pattern and an incoming URI go through the same :func:`decompose`:
the first two segments form the *static path*, everything after is the
*remainder*. For a pattern the remainder holds parameter names
(``":id"``); for a request it holds the literal values. :func:`associate`
pairs the two lists by position.

    >>> decompose("/users/show/42")
    ('users/show', ['42'])
    >>> associate([":id"], ["42"])
    {'id': '42'}
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

__all__ = [
    "PARAM_SIGIL",
    "SEPARATOR",
    "STATIC_SEGMENTS",
    "decompose",
    "associate",
    "split_static",
    "singular_name",
    "derive_identity",
    "action_name",
]

SEPARATOR = "/"
PARAM_SIGIL = ":"
STATIC_SEGMENTS = 2


def decompose(uri: str) -> Tuple[str, List[str]]:
    """Split ``uri`` into ``(static_path, remainder)``.

    URIs with up to two segments are their own static path and have an empty
    remainder, which makes the function idempotent on them. Empty inner
    segments are kept.
    """
    segments = uri.strip(SEPARATOR).split(SEPARATOR)
    if len(segments) <= STATIC_SEGMENTS:
        return SEPARATOR.join(segments), []
    return SEPARATOR.join(segments[:STATIC_SEGMENTS]), segments[STATIC_SEGMENTS:]


def associate(
    param_names: Sequence[str], values: Sequence[str], *, sigil: str = PARAM_SIGIL
) -> Dict[str, str]:
    """Zip parameter names with values by position.

    Names lose every ``sigil`` at either end (``":id:"`` binds ``id``). Names
    without a value are left out; values without a name are dropped.
    """
    return {
        (name.strip(sigil) if sigil else name): value
        for name, value in zip(param_names, values)
    }


def split_static(static_path: str) -> List[str]:
    return static_path.split(SEPARATOR)


def singular_name(word: str) -> str:
    """One trailing ``s`` removed, first letter upper-cased, rest untouched.

    ``"users"`` and ``"Users"`` both give ``"User"``; ``"news"`` gives ``"New"``.
    """
    if word.endswith("s"):
        word = word[:-1]
    return word[:1].upper() + word[1:]


def derive_identity(static_path: str) -> str:
    """Controller name for a static path: ``singular_name`` of its first segment."""
    return singular_name(split_static(static_path)[0])


def action_name(static_path: str, *, sigil: str = PARAM_SIGIL) -> Optional[str]:
    """Second static segment, or ``None`` when absent, empty or a parameter."""
    segments = split_static(static_path)
    if len(segments) < STATIC_SEGMENTS:
        return None
    name = segments[1]
    if not name or (sigil and name.startswith(sigil)):
        return None
    return name
