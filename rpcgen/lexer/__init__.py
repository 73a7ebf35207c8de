"""
Lexer module for the socket RPC binding generator.

This module provides tokenization of TypeScript declaration files.
"""

from .tokens import TokenType, Token, KEYWORDS, WORD_TYPES, THREE_CHAR_OPS, TWO_CHAR_OPS, SINGLE_CHAR_OPS
from .lexer import Lexer

__all__ = [
    'TokenType',
    'Token',
    'KEYWORDS',
    'WORD_TYPES',
    'THREE_CHAR_OPS',
    'TWO_CHAR_OPS',
    'SINGLE_CHAR_OPS',
    'Lexer',
]
