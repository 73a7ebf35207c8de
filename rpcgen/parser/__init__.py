"""
Parser module for the socket.io RPC generator.

This module provides AST node definitions and the TypeScript declaration
parser implementation.
"""

from .ast_nodes import (
    # Base
    ASTNode,
    # Module-level
    SourceUnit,
    ImportDirective,
    ExportDirective,
    # Interface members
    ParameterDeclaration,
    InterfaceMember,
    HeritageClause,
    # Declarations
    Declaration,
    InterfaceDeclaration,
    TypeAliasDeclaration,
    EnumDeclaration,
    ClassDeclaration,
    FunctionDeclaration,
    VariableDeclaration,
    NamespaceDeclaration,
)
from .parser import Parser, split_function_type, parse_parameter_tokens
from .printer import render_tokens, render_type


def parse_source(source: str) -> SourceUnit:
    """Tokenize and parse TypeScript source text."""
    from ..lexer import Lexer

    return Parser(Lexer(source).tokenize()).parse()


__all__ = [
    # Base
    'ASTNode',
    # Module-level
    'SourceUnit',
    'ImportDirective',
    'ExportDirective',
    # Interface members
    'ParameterDeclaration',
    'InterfaceMember',
    'HeritageClause',
    # Declarations
    'Declaration',
    'InterfaceDeclaration',
    'TypeAliasDeclaration',
    'EnumDeclaration',
    'ClassDeclaration',
    'FunctionDeclaration',
    'VariableDeclaration',
    'NamespaceDeclaration',
    # Parser
    'Parser',
    'parse_source',
    'split_function_type',
    'parse_parameter_tokens',
    'render_tokens',
    'render_type',
]
