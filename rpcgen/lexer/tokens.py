"""
Token definitions for the TypeScript declaration lexer.

This module contains the TokenType enum, Token dataclass, and
constant mappings for keywords and punctuation.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Enumeration of all token types recognized by the lexer."""

    # Keywords
    IMPORT = auto()
    EXPORT = auto()
    FROM = auto()
    AS = auto()
    TYPE = auto()
    INTERFACE = auto()
    EXTENDS = auto()
    IMPLEMENTS = auto()
    ENUM = auto()
    CLASS = auto()
    ABSTRACT = auto()
    FUNCTION = auto()
    CONST = auto()
    LET = auto()
    VAR = auto()
    DECLARE = auto()
    DEFAULT = auto()
    NAMESPACE = auto()
    MODULE = auto()
    READONLY = auto()
    ASYNC = auto()

    # Operators
    ARROW = auto()
    ELLIPSIS = auto()
    QUESTION_DOT = auto()
    AMPERSAND_AMPERSAND = auto()
    PIPE_PIPE = auto()
    QUESTION_QUESTION = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    AMPERSAND = auto()
    PIPE = auto()
    CARET = auto()
    TILDE = auto()
    LT = auto()
    GT = auto()
    BANG = auto()
    EQ = auto()
    QUESTION = auto()
    COLON = auto()
    AT = auto()
    HASH = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()

    # Literals
    NUMBER = auto()
    STRING_LITERAL = auto()
    TEMPLATE_LITERAL = auto()
    IDENTIFIER = auto()

    # Special
    EOF = auto()


@dataclass
class Token:
    """Represents a single token from the lexer."""
    type: TokenType
    value: str
    line: int
    column: int

    @property
    def is_word(self) -> bool:
        """True for identifiers and keywords (anything that reads as a name)."""
        return self.type in WORD_TYPES


# Keyword to TokenType mapping. TypeScript keywords are contextual, so the
# parser still accepts every one of these where a name is expected.
KEYWORDS = {
    'import': TokenType.IMPORT,
    'export': TokenType.EXPORT,
    'from': TokenType.FROM,
    'as': TokenType.AS,
    'type': TokenType.TYPE,
    'interface': TokenType.INTERFACE,
    'extends': TokenType.EXTENDS,
    'implements': TokenType.IMPLEMENTS,
    'enum': TokenType.ENUM,
    'class': TokenType.CLASS,
    'abstract': TokenType.ABSTRACT,
    'function': TokenType.FUNCTION,
    'const': TokenType.CONST,
    'let': TokenType.LET,
    'var': TokenType.VAR,
    'declare': TokenType.DECLARE,
    'default': TokenType.DEFAULT,
    'namespace': TokenType.NAMESPACE,
    'module': TokenType.MODULE,
    'readonly': TokenType.READONLY,
    'async': TokenType.ASYNC,
}

WORD_TYPES = frozenset([TokenType.IDENTIFIER, *KEYWORDS.values()])

# Three-character operators
THREE_CHAR_OPS = {
    '...': TokenType.ELLIPSIS,
}

# Two-character operators. '>>' is deliberately absent so that nested
# generics such as Promise<Array<T>> close one bracket at a time.
TWO_CHAR_OPS = {
    '=>': TokenType.ARROW,
    '?.': TokenType.QUESTION_DOT,
    '??': TokenType.QUESTION_QUESTION,
    '&&': TokenType.AMPERSAND_AMPERSAND,
    '||': TokenType.PIPE_PIPE,
}

# Single-character operators and delimiters
SINGLE_CHAR_OPS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '&': TokenType.AMPERSAND,
    '|': TokenType.PIPE,
    '^': TokenType.CARET,
    '~': TokenType.TILDE,
    '<': TokenType.LT,
    '>': TokenType.GT,
    '!': TokenType.BANG,
    '=': TokenType.EQ,
    '?': TokenType.QUESTION,
    ':': TokenType.COLON,
    '@': TokenType.AT,
    '#': TokenType.HASH,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ';': TokenType.SEMICOLON,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
}
