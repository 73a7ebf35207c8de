"""
Code generation module for the socket.io RPC generator.

This module provides TypeScript code generation from resolved contracts.
"""

from .context import CodeGenerationContext, Side, GENERATED_LOCALS, TYPES_MODULE
from .base import BaseGenerator
from .imports import ImportGenerator, relative_module_path, strip_source_extension
from .calls import CallGenerator
from .handlers import HandlerGenerator
from .factory import FactoryGenerator
from .types_module import TypesModuleGenerator
from .scaffold import IndexGenerator, scaffold_files, SCAFFOLD_FILES
from .generator import BindingGenerator, GENERATED_FILES

__all__ = [
    'CodeGenerationContext',
    'Side',
    'GENERATED_LOCALS',
    'TYPES_MODULE',
    'BaseGenerator',
    'ImportGenerator',
    'relative_module_path',
    'strip_source_extension',
    'CallGenerator',
    'HandlerGenerator',
    'FactoryGenerator',
    'TypesModuleGenerator',
    'IndexGenerator',
    'scaffold_files',
    'SCAFFOLD_FILES',
    'BindingGenerator',
    'GENERATED_FILES',
]
