"""
Names that never need an import in generated bindings.

Type references found in contract signatures are checked against these
sets before the import graph is searched.
"""

# Primitive and special types
PRIMITIVE_TYPES = frozenset([
    'string', 'number', 'boolean', 'bigint', 'symbol', 'object',
    'any', 'unknown', 'never', 'void', 'undefined', 'null', 'this',
    'true', 'false',
])

# TypeScript's built-in utility types
UTILITY_TYPES = frozenset([
    'Record', 'Partial', 'Required', 'Readonly', 'Pick', 'Omit',
    'Exclude', 'Extract', 'NonNullable', 'Parameters', 'ConstructorParameters',
    'ReturnType', 'InstanceType', 'ThisParameterType', 'OmitThisParameter',
    'ThisType', 'Awaited', 'NoInfer',
    'Uppercase', 'Lowercase', 'Capitalize', 'Uncapitalize',
    'ReadonlyArray', 'ReadonlyMap', 'ReadonlySet', 'ArrayLike', 'PromiseLike',
    'PropertyKey', 'PropertyDescriptor', 'Iterable', 'Iterator',
    'IterableIterator', 'AsyncIterable', 'AsyncIterator', 'AsyncIterableIterator',
    'Generator', 'AsyncGenerator',
])

# Global constructors and their instance types
GLOBAL_TYPES = frozenset([
    'Object', 'Function', 'String', 'Number', 'Boolean', 'Symbol', 'BigInt',
    'Array', 'Promise', 'Date', 'RegExp', 'Error', 'TypeError', 'RangeError',
    'SyntaxError', 'ReferenceError', 'EvalError', 'URIError', 'AggregateError',
    'Map', 'Set', 'WeakMap', 'WeakSet', 'WeakRef', 'JSON', 'Math',
    'ArrayBuffer', 'SharedArrayBuffer', 'DataView',
    'Int8Array', 'Uint8Array', 'Uint8ClampedArray', 'Int16Array', 'Uint16Array',
    'Int32Array', 'Uint32Array', 'Float32Array', 'Float64Array',
    'BigInt64Array', 'BigUint64Array',
    'Buffer', 'Blob', 'File', 'URL', 'URLSearchParams',
    'TextEncoder', 'TextDecoder', 'AbortSignal', 'AbortController',
])

# Imported by every generated side file from the transport module
TRANSPORT_TYPES = frozenset(['Socket'])

# Names the generated modules declare themselves
GENERATED_NAMES = frozenset(['RpcError', 'Unsubscribe', 'Socket'])

BUILTIN_TYPE_NAMES = PRIMITIVE_TYPES | UTILITY_TYPES | GLOBAL_TYPES | TRANSPORT_TYPES


def is_builtin_type(name: str) -> bool:
    """Check if a referenced type name is available without an import."""
    return name in BUILTIN_TYPE_NAMES
