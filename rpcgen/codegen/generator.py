"""
Main binding generator orchestrator.

This module provides the BindingGenerator class that coordinates the
specialized generators and assembles the text of every generated file.
"""

from pathlib import Path
from typing import Dict, List, Optional

from .context import CodeGenerationContext, Side, TYPES_MODULE
from .imports import ImportGenerator
from .calls import CallGenerator
from .handlers import HandlerGenerator
from .factory import FactoryGenerator
from .types_module import TypesModuleGenerator
from .scaffold import IndexGenerator, INDEX_FILE
from ..config import GenerationConfig
from ..diagnostics import GeneratorDiagnostics
from ..resolver import ResolvedContractSignatures, Signature, TypeReferenceTable, signature_type_names


GENERATED_FILES = (
    f'{TYPES_MODULE}.ts',
    'client.generated.ts',
    'server.generated.ts',
    INDEX_FILE,
)


class BindingGenerator:
    """
    Generates the TypeScript binding files from resolved contracts.

    This is the main entry point for code generation. It builds one context
    per file and delegates to the specialized generators:
    - ImportGenerator: import block
    - CallGenerator: functions calling the peer
    - HandlerGenerator: handler registrations and handleRpcError
    - FactoryGenerator: grouped Rpc object
    - TypesModuleGenerator / IndexGenerator: shared modules
    """

    def __init__(
        self,
        config: GenerationConfig,
        server_functions: ResolvedContractSignatures,
        client_functions: ResolvedContractSignatures,
        type_table: Optional[TypeReferenceTable] = None,
        diagnostics: Optional[GeneratorDiagnostics] = None,
    ):
        """
        Initialize the generator.

        Args:
            config: Settings for the run
            server_functions: The resolved contract the server implements
            client_functions: The resolved contract the client implements
            type_table: Declaring file of every imported user type
            diagnostics: Collector for skipped members
        """
        self.config = config
        self.server_functions = server_functions
        self.client_functions = client_functions
        self.type_table = type_table or TypeReferenceTable()
        self.diagnostics = diagnostics or GeneratorDiagnostics()
        self.output_dir = Path(config.resolved_output_dir).resolve()
        self.entry_file = Path(config.input_path).resolve()

    def _context(self, side: Optional[Side] = None) -> CodeGenerationContext:
        return CodeGenerationContext(
            config=self.config,
            side=side,
            type_table=self.type_table,
            output_dir=self.output_dir,
            entry_file=self.entry_file,
            _diagnostics=self.diagnostics,
        )

    def _contract(self, name: str) -> ResolvedContractSignatures:
        if name == self.config.server_contract:
            return self.server_functions
        return self.client_functions

    # =========================================================================
    # MAIN ENTRY POINTS
    # =========================================================================

    def generate(self) -> Dict[str, str]:
        """Generate every file that is rewritten on each run.

        Returns:
            File text keyed by file name, in a fixed order
        """
        return {
            f'{TYPES_MODULE}.ts': self.generate_types(),
            'client.generated.ts': self.generate_side(Side.client(self.config)),
            'server.generated.ts': self.generate_side(Side.server(self.config)),
            INDEX_FILE: self.generate_index(),
        }

    def generate_types(self) -> str:
        return self._join(TypesModuleGenerator(self._context()).generate())

    def generate_index(self) -> str:
        return self._join(IndexGenerator(self._context()).generate())

    def generate_side(self, side: Side) -> str:
        """Generate the file for one side of the connection."""
        ctx = self._context(side)
        calls = self._contract(side.call_contract).signatures
        handlers = self._handlers_without_conflicts(side, calls, self._contract(side.handler_contract).signatures)

        lines = self._header(side)
        lines.append('')
        lines.extend(ImportGenerator(ctx).generate(signature_type_names(calls + handlers)))
        lines.append('')

        call_gen = CallGenerator(ctx)
        lines.append(f'// === {side.label} CALLING {side.peer_label} FUNCTIONS ===')
        for i, sig in enumerate(calls):
            if i:
                lines.append('')
            lines.extend(call_gen.generate(sig))
        lines.append('')

        handler_gen = HandlerGenerator(ctx)
        lines.append(f'// === {side.label} HANDLER FUNCTIONS ===')
        for sig in handlers:
            lines.extend(handler_gen.generate(sig))
            lines.append('')
        lines.extend(handler_gen.generate_rpc_error_handler())

        if self.config.emit_factory:
            lines.append('')
            lines.append(f'// === {side.label} RPC FACTORY ===')
            lines.extend(FactoryGenerator(ctx).generate(calls, handlers))

        return self._join(lines)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _header(self, side: Side) -> List[str]:
        return [
            '/**',
            f' * Auto-generated {side.name} functions from {self.entry_file.name}',
            f' * These functions allow {side.label} to call {side.peer_label} functions '
            f'({side.call_contract} interface)',
            f' * and set up handlers for {side.label} functions ({side.handler_contract} interface)',
            ' */',
        ]

    def _handlers_without_conflicts(
        self, side: Side, calls: List[Signature], handlers: List[Signature]
    ) -> List[Signature]:
        """Drop handlers whose registration name is already taken by a call."""
        call_names = {sig.name for sig in calls}
        kept = []
        for sig in handlers:
            if sig.handler_name in call_names:
                self.diagnostics.warn_invalid_member_name(
                    f'"{sig.name}"', sig.contract,
                    f'its handler {sig.handler_name} collides with the {side.call_contract} member of that name',
                    str(sig.source_file), sig.line,
                )
                continue
            kept.append(sig)
        return kept

    @staticmethod
    def _join(lines: List[str]) -> str:
        return '\n'.join(lines).rstrip('\n') + '\n'
