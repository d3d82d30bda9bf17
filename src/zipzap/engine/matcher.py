"""
Query matching for zipzap.

Turns the tokens of a jump request into a SQL LIKE pattern requiring every
token to appear in the path, in order, separated by anything. Paths and
tokens go through the same case policy; if the two ever diverged, stored
paths would silently stop matching.
"""

from typing import List, Sequence

from ..errors import NotFoundError
from ..models.config import CaseNormalization


LIKE_ESCAPE = "\\"

_LIKE_SPECIALS = (LIKE_ESCAPE, "%", "_")


def normalize_path(path: str, policy: CaseNormalization = CaseNormalization.LOWER) -> str:
    """Apply the case policy to a path before it is written or compared."""
    if policy is CaseNormalization.LOWER:
        return path.lower()
    return path


def normalize_token(token: str, policy: CaseNormalization = CaseNormalization.LOWER) -> str:
    """Apply the case policy to a query token."""
    return normalize_path(token, policy)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally."""
    for special in _LIKE_SPECIALS:
        text = text.replace(special, LIKE_ESCAPE + special)
    return text


def build_pattern(tokens: Sequence[str], policy: CaseNormalization = CaseNormalization.LOWER) -> str:
    """
    Build a containment pattern from query tokens.

    Args:
        tokens: Ordered query substrings
        policy: Case policy shared with stored paths

    Returns:
        A pattern of the form ``%token1%token2%...%tokenN%``

    Raises:
        NotFoundError: If there are no tokens, since nothing can match
    """
    if not tokens:
        raise NotFoundError("no pattern given")

    parts: List[str] = []
    for token in tokens:
        parts.append("%")
        parts.append(escape_like(normalize_token(token, policy)))
    parts.append("%")
    return "".join(parts)
