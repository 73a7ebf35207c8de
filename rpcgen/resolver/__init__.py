"""
Resolver module for the socket.io RPC generator.

This module flattens contract interfaces into signatures and works out
which user types the generated bindings must import.
"""

from .contracts import (
    Precedence,
    Parameter,
    Signature,
    ContractNode,
    ResolvedContractSignatures,
    ContractResolver,
    is_valid_identifier,
    JS_RESERVED_WORDS,
)
from .type_references import (
    TypeReferenceTable,
    TypeReferenceResolver,
    signature_type_names,
)

__all__ = [
    'Precedence',
    'Parameter',
    'Signature',
    'ContractNode',
    'ResolvedContractSignatures',
    'ContractResolver',
    'is_valid_identifier',
    'JS_RESERVED_WORDS',
    'TypeReferenceTable',
    'TypeReferenceResolver',
    'signature_type_names',
]
