"""
Analysis of type expression text.

Type expressions are stored as canonical text by the parser. The helpers
here re-tokenize that text to classify return types and to extract the
named types an expression refers to.
"""

from typing import List

from ..lexer import Lexer, Token
from ..parser.printer import render_type
from .builtins import is_builtin_type


# Tokens after which a name followed by ':' is a member key or parameter
# name rather than a type (e.g. '{ id: T }', '(a: T)', '[x: T]').
_KEY_PREFIXES = frozenset(['{', ';', ',', '(', '[', '...', 'readonly'])


def normalize_type_text(text: str) -> str:
    """Re-render arbitrary type text in canonical form."""
    return render_type(Lexer(text).tokenize())


def is_void_type(type_text: str) -> bool:
    """A return type is a no-response signal iff its text is exactly 'void'."""
    return type_text.strip() == 'void'


def _is_key_position(tokens: List[Token], i: int) -> bool:
    """Check if the name at tokens[i] is a member key or parameter name."""
    nxt = tokens[i + 1].value if i + 1 < len(tokens) else ''
    after = tokens[i + 2].value if i + 2 < len(tokens) else ''
    if not (nxt == ':' or (nxt == '?' and after == ':')):
        return False
    prev = tokens[i - 1].value if i > 0 else ''
    return prev in _KEY_PREFIXES


def referenced_type_names(type_text: str) -> List[str]:
    """
    Extract the candidate type names a type expression refers to.

    Walks every token of the expression, so names inside unions,
    intersections, generic arguments, tuples, object literal members,
    function parameter and return types, array and indexed access bases
    and typeof/keyof/readonly operands are all found. Literals, member keys,
    parameter names, mapped-type keys and 'infer' bindings are ignored; a
    qualified name contributes its first segment. Only capitalized names
    that are not built in are returned, in first-occurrence order.
    """
    tokens = [t for t in Lexer(type_text).tokenize() if t.value != '']
    names: List[str] = []
    for i, tok in enumerate(tokens):
        if not tok.is_word:
            continue
        prev = tokens[i - 1].value if i > 0 else ''
        if prev in ('.', '?.', 'infer'):
            continue
        if _is_key_position(tokens, i):
            continue
        # Mapped type key: [K in keyof T]
        if prev == '[' and i + 1 < len(tokens) and tokens[i + 1].value == 'in':
            continue
        name = tok.value
        if not name[0].isupper():
            continue
        if is_builtin_type(name):
            continue
        if name not in names:
            names.append(name)
    return names
