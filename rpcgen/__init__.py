"""
Socket.IO RPC binding generator

This package reads TypeScript contract interfaces and generates typed
socket.io call and handler bindings for both ends of a connection.

Module Structure:
- lexer/: Tokenization (TokenType, Token, Lexer)
- parser/: AST nodes and parsing (Parser, declaration node types)
- type_system/: Module registry and type expression utilities (TypeRegistry)
- resolver/: Contract flattening and type import resolution (ContractResolver)
- codegen/: Code generation (BindingGenerator and specialized generators)
- ts2rpc.py: Orchestration and command-line interface

Usage:
    from rpcgen import SocketRpcGenerator, build_config

    SocketRpcGenerator(build_config('define.ts')).run()
"""

__version__ = '1.0.0'

# Re-export main classes for convenience
from .ts2rpc import SocketRpcGenerator, main
from .config import GenerationConfig, build_config
from .errors import (
    GenerationError,
    InputFileNotFoundError,
    ContractNotFoundError,
    OutputWriteError,
    ConfigError,
)
from .diagnostics import GeneratorDiagnostics, Diagnostic, DiagnosticSeverity
from .type_system import TypeRegistry
from .resolver import ContractResolver, Precedence
from .codegen import BindingGenerator

__all__ = [
    'SocketRpcGenerator',
    'main',
    'GenerationConfig',
    'build_config',
    'GenerationError',
    'InputFileNotFoundError',
    'ContractNotFoundError',
    'OutputWriteError',
    'ConfigError',
    'GeneratorDiagnostics',
    'Diagnostic',
    'DiagnosticSeverity',
    'TypeRegistry',
    'ContractResolver',
    'Precedence',
    'BindingGenerator',
]
