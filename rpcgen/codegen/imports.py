"""
Import generation for the generated binding files.

This module handles the import block of each side's file: the transport's
Socket type, the shared error vocabulary, the optional error logger and the
user types the bindings reference.
"""

import os
from pathlib import Path, PurePosixPath
from typing import Dict, List, TYPE_CHECKING

from .context import TYPES_MODULE

if TYPE_CHECKING:
    from .context import CodeGenerationContext


# Longest first, so 'x.d.ts' loses '.d.ts' and not just '.ts'
STRIPPED_EXTENSIONS = ('.d.mts', '.d.cts', '.d.ts', '.mts', '.cts', '.tsx', '.ts')


def strip_source_extension(name: str) -> str:
    """'define.ts' -> 'define', 'types.d.ts' -> 'types'."""
    for ext in STRIPPED_EXTENSIONS:
        if name.endswith(ext):
            return name[:-len(ext)]
    return name


def relative_module_path(from_dir: Path, target_file: Path) -> str:
    """Compute the module specifier that imports ``target_file`` from ``from_dir``.

    Args:
        from_dir: Directory of the importing (generated) file
        target_file: The TypeScript file being imported

    Returns:
        A './' or '../' prefixed POSIX specifier without the source extension
    """
    current_parts = PurePosixPath(Path(os.path.abspath(from_dir)).as_posix()).parts
    target = PurePosixPath(Path(os.path.abspath(target_file)).as_posix())
    target_parts = target.parent.parts + (strip_source_extension(target.name),)

    # Find common prefix length
    common_len = 0
    for i, (c, t) in enumerate(zip(current_parts, target_parts[:-1])):
        if c == t:
            common_len = i + 1
        else:
            break

    # Go up from current dir, then down to target
    ups = len(current_parts) - common_len
    downs = target_parts[common_len:]

    if ups == 0:
        return './' + '/'.join(downs)
    return '../' * ups + '/'.join(downs)


class ImportGenerator:
    """
    Generates TypeScript import statements for one side's file.

    Order is fixed so that regeneration is byte-stable:
    - the transport's Socket type
    - RpcError and Unsubscribe (type-only) and isRpcError from the types module
    - the configured error logger, if any
    - referenced user types, one statement per declaring file
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        """
        Initialize the import generator.

        Args:
            ctx: The code generation context
        """
        self._ctx = ctx

    def generate(self, type_names: List[str]) -> List[str]:
        """Generate the import block for a side file.

        Args:
            type_names: Candidate user type names the file references

        Returns:
            The import statements, one per line
        """
        side = self._ctx.side
        lines = [
            f'import type {{ Socket }} from "{side.transport_module}";',
            f'import type {{ RpcError, Unsubscribe }} from "./{TYPES_MODULE}";',
            f'import {{ isRpcError }} from "./{TYPES_MODULE}";',
        ]

        logger = self._ctx.config.logger_import
        if logger is not None:
            module, name = logger
            lines.append(f'import {{ {name} }} from "{module}";')

        lines.extend(self._generate_type_imports(type_names))
        return lines

    def _generate_type_imports(self, type_names: List[str]) -> List[str]:
        """Generate type-only import statements for user types."""
        lines = []
        by_file: Dict[Path, List[str]] = self._ctx.type_table.imports_for(type_names)
        for path, names in by_file.items():
            specifier = relative_module_path(self._ctx.output_dir, path)
            lines.append(f'import type {{ {", ".join(names)} }} from "{specifier}";')
        return lines
