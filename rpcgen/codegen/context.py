"""
Code generation context for the binding generator.

This module provides the per-side naming (which contract a side calls,
which it handles, which transport module it imports) and the context that
holds all state needed while a side's file is emitted.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from ..config import GenerationConfig
from ..diagnostics import GeneratorDiagnostics
from ..resolver import Parameter, Signature, TypeReferenceTable


# Local names the generated functions declare. A contract parameter with one
# of these names would shadow it, so it is renamed in generated code.
GENERATED_LOCALS = frozenset([
    'socket', 'timeout', 'handler', 'listener', 'callback', 'result', 'err',
    'isRpcError', 'console',
])

TYPES_MODULE = 'types.generated'


@dataclass(frozen=True)
class Side:
    """One end of the connection and the bindings generated for it."""
    name: str                 # 'client' or 'server'
    label: str                # 'CLIENT'
    peer_name: str            # 'server'
    peer_label: str           # 'SERVER'
    transport_module: str
    call_contract: str        # contract implemented by the peer; this side calls it
    handler_contract: str     # contract implemented by this side
    factory_name: str
    rpc_interface: str

    @property
    def file_stem(self) -> str:
        return f'{self.name}.generated'

    @property
    def file_name(self) -> str:
        return f'{self.file_stem}.ts'

    @classmethod
    def client(cls, config: GenerationConfig) -> 'Side':
        return cls(
            name='client',
            label='CLIENT',
            peer_name='server',
            peer_label='SERVER',
            transport_module=config.client_transport_module,
            call_contract=config.server_contract,
            handler_contract=config.client_contract,
            factory_name='createClientRpc',
            rpc_interface='ClientRpc',
        )

    @classmethod
    def server(cls, config: GenerationConfig) -> 'Side':
        return cls(
            name='server',
            label='SERVER',
            peer_name='client',
            peer_label='CLIENT',
            transport_module=config.server_transport_module,
            call_contract=config.client_contract,
            handler_contract=config.server_contract,
            factory_name='createServerRpc',
            rpc_interface='ServerRpc',
        )


@dataclass
class CodeGenerationContext:
    """
    Holds all state needed while one generated file is emitted.
    """

    config: GenerationConfig
    side: Optional[Side] = None

    # Indentation state
    indent_level: int = 0
    indent_str: str = '    '

    # Resolved input
    type_table: TypeReferenceTable = field(default_factory=TypeReferenceTable)

    # File context
    output_dir: Path = Path('.')
    entry_file: Path = Path('define.ts')

    # Diagnostics collector
    _diagnostics: Optional[GeneratorDiagnostics] = None

    @property
    def diagnostics(self) -> GeneratorDiagnostics:
        """Get the diagnostics collector, creating one if needed."""
        if self._diagnostics is None:
            self._diagnostics = GeneratorDiagnostics()
        return self._diagnostics

    def indent(self) -> str:
        """Return the current indentation string."""
        return self.indent_str * self.indent_level

    @property
    def logger_name(self) -> Optional[str]:
        logger = self.config.logger_import
        return logger[1] if logger else None

    def reserved_locals(self, sig: Signature) -> Set[str]:
        """Names a parameter of ``sig`` must not take in generated code."""
        reserved = set(GENERATED_LOCALS)
        reserved.add(sig.name)
        if self.logger_name:
            reserved.add(self.logger_name)
        return reserved

    def local_names(self, sig: Signature) -> List[str]:
        """
        The names used for ``sig``'s parameters in generated code.

        A parameter that collides with a generated local gets trailing
        underscores until it is unique within the signature.
        """
        reserved = self.reserved_locals(sig)
        taken = {p.name for p in sig.params}
        names: List[str] = []
        for param in sig.params:
            name = param.name
            if name in reserved:
                while name in reserved or name in taken:
                    name += '_'
                taken.add(name)
            names.append(name)
        return names

    def renamed_params(self, sig: Signature) -> List[Parameter]:
        """``sig``'s parameters under their generated local names."""
        return [
            Parameter(name, p.type_text, p.is_optional)
            for name, p in zip(self.local_names(sig), sig.params)
        ]
