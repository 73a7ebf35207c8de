#!/usr/bin/env python3
"""
TypeScript contract to socket.io RPC binding generator

Reads a TypeScript file declaring a ServerFunctions and a ClientFunctions
interface and writes a small TypeScript package of typed socket.io bindings
next to it (or into the chosen output directory).

Key features:
- Contracts may extend other interfaces, including ones in other files
- No-response (void) members become fire-and-forget emits
- Every other call is bounded by an acknowledgment timeout
- Handler and transport failures surface as RpcError values
- Handler registrations return an Unsubscribe; a grouped factory disposes them

Usage:
    python -m rpcgen path/to/define.ts

The generator uses a modular architecture with separate packages for:
- lexer: Tokenization (tokens.py, lexer.py)
- parser: AST nodes and parsing (ast_nodes.py, parser.py, printer.py)
- type_system: Module registry and type expressions (registry.py, expressions.py)
- resolver: Contract flattening and type imports (contracts.py, type_references.py)
- codegen: Code generation (generator.py + specialized generators)
"""

import os
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .config import GenerationConfig, build_config
from .diagnostics import GeneratorDiagnostics
from .errors import ConfigError, GenerationError, InputFileNotFoundError, OutputWriteError
from .type_system import TypeRegistry
from .resolver import (
    ContractResolver,
    ResolvedContractSignatures,
    TypeReferenceResolver,
)
from .codegen import BindingGenerator, GENERATED_FILES, scaffold_files


class SocketRpcGenerator:
    """Main generator class that orchestrates one read, resolve, emit and write pass."""

    def __init__(self, config: GenerationConfig, verbose: bool = False):
        self.config = config
        self.diagnostics = GeneratorDiagnostics(verbose=verbose)
        self.registry: Optional[TypeRegistry] = None
        self.server_functions: Optional[ResolvedContractSignatures] = None
        self.client_functions: Optional[ResolvedContractSignatures] = None

    @property
    def input_path(self) -> Path:
        return Path(self.config.input_path).resolve()

    @property
    def output_dir(self) -> Path:
        return Path(self.config.resolved_output_dir).resolve()

    def generate(self) -> Dict[Path, str]:
        """Resolve the contracts and render every file due to be written."""
        input_path = self.input_path
        if not input_path.is_file():
            raise InputFileNotFoundError(input_path)
        for name in GENERATED_FILES:
            if self.output_dir / name == input_path:
                raise ConfigError(f'Input file {input_path} would be overwritten by the generated {name}')

        self.diagnostics.clear()
        self.registry = TypeRegistry(self.diagnostics)
        resolver = ContractResolver(self.registry, self.diagnostics, self.config.precedence)
        self.server_functions = resolver.resolve_contract(input_path, self.config.server_contract)
        self.client_functions = resolver.resolve_contract(input_path, self.config.client_contract)

        type_table = TypeReferenceResolver(self.registry, self.diagnostics).build(
            input_path, [self.server_functions, self.client_functions]
        )
        generator = BindingGenerator(
            self.config, self.server_functions, self.client_functions, type_table, self.diagnostics
        )

        results = {self.output_dir / name: text for name, text in generator.generate().items()}

        # Scaffold files are only created once
        for name, text in scaffold_files(self.config).items():
            path = self.output_dir / name
            if path.exists():
                self.diagnostics.info_scaffold_kept(str(path))
            else:
                results[path] = text
        return results

    def write_output(self, results: Dict[Path, str]) -> List[Path]:
        """Write generated files to disk, skipping files whose content is unchanged."""
        written = []
        for path, content in results.items():
            if _read_text(path) == content:
                continue
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, 'w', encoding='utf-8', newline='\n') as f:
                    f.write(content)
            except OSError as e:
                raise OutputWriteError(path, e)
            print(f"Written: {path}")
            written.append(path)
        return written

    def run(self) -> List[Path]:
        """Generate and write the package, then report diagnostics."""
        written = self.write_output(self.generate())
        self.print_generation_summary()
        self.diagnostics.print_summary()
        return written

    def print_generation_summary(self) -> None:
        """List the bindings generated for each side."""
        if self.server_functions is None or self.client_functions is None:
            return
        print(f'Generated RPC package in {self.output_dir}')
        for label, calls, handlers in (
            ('client', self.server_functions, self.client_functions),
            ('server', self.client_functions, self.server_functions),
        ):
            print(f'  {label}.generated.ts ({len(calls)} call functions, {len(handlers)} handler functions)')
            for sig in calls:
                params = ', '.join(p.name for p in sig.params)
                print(f'    - {sig.name}({params}) -> {sig.return_type}')
            for sig in handlers:
                print(f'    - {sig.handler_name}(socket, handler)')

    # =========================================================================
    # WATCH MODE
    # =========================================================================

    def watched_files(self) -> List[Path]:
        """The input file and every file loaded while resolving it."""
        files = [self.input_path]
        if self.registry is not None:
            files.extend(p for p in self.registry.loaded_files if p not in files)
        return files

    def _snapshot(self) -> Dict[Path, Optional[float]]:
        mtimes: Dict[Path, Optional[float]] = {}
        for path in self.watched_files():
            try:
                mtimes[path] = os.stat(path).st_mtime
            except OSError:
                mtimes[path] = None
        return mtimes

    def _run_reporting_errors(self) -> bool:
        try:
            self.run()
        except (GenerationError, SyntaxError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return False
        return True

    def watch(self, interval: float = 1.0, max_polls: Optional[int] = None) -> None:
        """
        Regenerate whenever a watched file changes.

        Runs are serial: a regeneration, including its writes, finishes
        before the next poll. Errors are reported and watching continues.
        """
        print(f"Watching {self.input_path} for changes...")
        self._run_reporting_errors()
        mtimes = self._snapshot()

        polls = 0
        while max_polls is None or polls < max_polls:
            time.sleep(interval)
            polls += 1
            current = self._snapshot()
            if current != mtimes:
                print(f"\n{self.input_path.name} changed, regenerating...")
                self._run_reporting_errors()
                mtimes = self._snapshot()


def _read_text(path: Path) -> Optional[str]:
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        return None


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog='socketrpc-gen',
        description='Generate Socket.IO RPC code from interface definitions.',
    )
    parser.add_argument('input', nargs='?',
                        help='Path to the input TypeScript file containing interface definitions')
    parser.add_argument('-o', '--output', metavar='DIR',
                        help='Output directory (default: the input file\'s directory)')
    parser.add_argument('-p', '--package-name', metavar='NAME',
                        help='Package name for the generated RPC package')
    parser.add_argument('-t', '--timeout', type=int, metavar='MS',
                        help='Default timeout for RPC calls in milliseconds')
    parser.add_argument('--error-logger', metavar='REF',
                        help='Error logger to import, as "module" or "module#export"')
    parser.add_argument('--auto-cleanup', action='store_true', default=None,
                        help='Dispose grouped RPC objects when the socket disconnects')
    parser.add_argument('--no-factory', dest='emit_factory', action='store_false', default=None,
                        help='Do not emit createClientRpc / createServerRpc')
    parser.add_argument('--precedence', choices=['descendant', 'ancestor'],
                        help='Which declaration wins when an extension chain redeclares a member')
    parser.add_argument('--config', metavar='FILE', help='JSON config file')
    parser.add_argument('-w', '--watch', action='store_true',
                        help='Watch for changes and regenerate automatically')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print every diagnostic')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    args = parser.parse_args(argv)

    try:
        config = build_config(
            input_path=Path(args.input) if args.input else None,
            config_file=Path(args.config) if args.config else None,
            output_dir=Path(args.output) if args.output else None,
            package_name=args.package_name,
            default_timeout=args.timeout,
            error_logger=args.error_logger,
            auto_cleanup=args.auto_cleanup,
            emit_factory=args.emit_factory,
            precedence=args.precedence,
        )
    except GenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    generator = SocketRpcGenerator(config, verbose=args.verbose)

    if args.watch:
        try:
            generator.watch()
        except KeyboardInterrupt:
            print("\nStopping watch mode...")
        return 0

    try:
        generator.run()
    except (GenerationError, SyntaxError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
