"""
Canonical rendering of token slices back to TypeScript text.

Type expressions are stored as text. Rebuilding that text from tokens
(rather than slicing the source) drops comments and line breaks, so the
same declaration always renders identically regardless of how it was
formatted.
"""

from typing import List

from ..lexer import Token, TokenType


NO_SPACE_AFTER = frozenset(['(', '[', '<', '.', '...', '?.', '@', '#'])
NO_SPACE_BEFORE = frozenset([')', ']', '>', ',', ';', '.', ':', '?', '?.', '!'])
SPACE_AROUND = frozenset(['|', '&', '=>', '=', '{', '}', '??', '&&', '||'])
OPENING_BRACKETS = frozenset(['(', '[', '<'])

# Type operators that read as words but must stay separated from what follows
TYPE_OPERATOR_WORDS = frozenset([
    'keyof', 'typeof', 'readonly', 'infer', 'unique', 'extends',
    'is', 'as', 'new', 'in', 'asserts', 'abstract',
])


def _needs_space(prev: Token, cur: Token) -> bool:
    p, c = prev.value, cur.value

    if p == '{' and c == '}':
        return False
    if p in NO_SPACE_AFTER:
        return False
    if c in NO_SPACE_BEFORE:
        return False
    if p in SPACE_AROUND or c in SPACE_AROUND:
        return True
    if p in (',', ';', ':', '?'):
        return True
    if prev.is_word and p in TYPE_OPERATOR_WORDS:
        return True
    if c in OPENING_BRACKETS:
        return False
    return True


def render_tokens(tokens: List[Token]) -> str:
    """Render a token slice as canonical TypeScript text."""
    parts: List[str] = []
    prev = None
    for tok in tokens:
        if tok.type == TokenType.EOF:
            break
        if prev is not None and _needs_space(prev, tok):
            parts.append(' ')
        parts.append(tok.value)
        prev = tok
    return ''.join(parts)


def render_type(tokens: List[Token]) -> str:
    """Render a type expression, dropping a leading '|' or '&'.

    TypeScript allows ``type A =\\n  | B\\n  | C``; the leading operator has
    no meaning and is not kept.
    """
    if tokens and tokens[0].value in ('|', '&'):
        tokens = tokens[1:]
    return render_tokens(tokens)
