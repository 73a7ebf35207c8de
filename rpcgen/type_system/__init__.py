"""
Types module for the socket.io RPC generator.

This module provides the module registry and type expression utilities.
"""

from .registry import TypeRegistry
from .builtins import (
    is_builtin_type,
    BUILTIN_TYPE_NAMES,
    GENERATED_NAMES,
)
from .expressions import (
    is_void_type,
    normalize_type_text,
    referenced_type_names,
)

__all__ = [
    'TypeRegistry',
    'is_builtin_type',
    'BUILTIN_TYPE_NAMES',
    'GENERATED_NAMES',
    'is_void_type',
    'normalize_type_text',
    'referenced_type_names',
]
