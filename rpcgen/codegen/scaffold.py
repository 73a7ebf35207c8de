"""
Package scaffolding for the output directory.

index.ts is regenerated on every run. package.json and tsconfig.json are
only created when absent; a user's edits to them are never overwritten.
"""

import json
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, TYPE_CHECKING

from .context import TYPES_MODULE
from .imports import relative_module_path

if TYPE_CHECKING:
    from .context import CodeGenerationContext
    from ..config import GenerationConfig


PACKAGE_JSON = 'package.json'
TSCONFIG_JSON = 'tsconfig.json'
INDEX_FILE = 'index.ts'

SCAFFOLD_FILES = (PACKAGE_JSON, TSCONFIG_JSON)


def package_json(config: 'GenerationConfig') -> Dict[str, Any]:
    return OrderedDict([
        ('name', config.package_name),
        ('version', '1.0.0'),
        ('description', 'Auto-generated RPC package for Socket.IO'),
        ('main', 'index.ts'),
        ('module', 'index.ts'),
        ('type', 'module'),
        ('scripts', OrderedDict([('build', 'tsc'), ('dev', 'tsc --watch')])),
        ('dependencies', OrderedDict([
            ('socket.io', '^4.8.1'),
            ('socket.io-client', '^4.8.1'),
        ])),
        ('devDependencies', OrderedDict([
            ('@types/node', '^20.0.0'),
            ('typescript', '^5.0.0'),
        ])),
        ('peerDependencies', OrderedDict([
            ('socket.io', '^4.0.0'),
            ('socket.io-client', '^4.0.0'),
        ])),
    ])


def tsconfig_json() -> Dict[str, Any]:
    return OrderedDict([
        ('compilerOptions', OrderedDict([
            ('target', 'ES2020'),
            ('module', 'ESNext'),
            ('lib', ['ES2020']),
            ('moduleResolution', 'node'),
            ('esModuleInterop', True),
            ('forceConsistentCasingInFileNames', True),
            ('strict', True),
            ('skipLibCheck', True),
            ('declaration', True),
            ('declarationMap', True),
            ('sourceMap', True),
            ('outDir', './dist'),
            ('rootDir', './'),
            ('composite', True),
        ])),
        ('include', ['**/*.ts']),
        ('exclude', ['node_modules', 'dist']),
    ])


def render_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + '\n'


def scaffold_files(config: 'GenerationConfig') -> Dict[str, str]:
    """Rendered scaffold files, keyed by file name."""
    return {
        PACKAGE_JSON: render_json(package_json(config)),
        TSCONFIG_JSON: render_json(tsconfig_json()),
    }


class IndexGenerator:
    """
    Generates index.ts, the package entry point.

    The entry module and the types module are re-exported flat. The two side
    modules both export handleRpcError, so they are re-exported as the
    ``client`` and ``server`` namespaces.
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        self._ctx = ctx

    def generate(self) -> List[str]:
        config = self._ctx.config
        entry = relative_module_path(self._ctx.output_dir, Path(self._ctx.entry_file))
        return [
            '/**',
            f' * @{config.package_name.lstrip("@")}',
            ' * Auto-generated RPC package for Socket.IO',
            ' */',
            '',
            f'export * from "{entry}";',
            f'export * from "./{TYPES_MODULE}";',
            'export * as client from "./client.generated";',
            'export * as server from "./server.generated";',
        ]
