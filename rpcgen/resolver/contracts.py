"""
Contract resolution across interface extension chains.

A contract is an interface whose function-valued members become RPC
bindings. The ContractResolver builds the extension graph of a contract
(which may span files), flattens it with cycle and diamond protection and
deduplicates members by name under a configurable precedence rule.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from ..diagnostics import GeneratorDiagnostics
from ..errors import ContractNotFoundError
from ..parser.ast_nodes import InterfaceDeclaration, InterfaceMember
from ..type_system import TypeRegistry, is_void_type


# JavaScript reserved words cannot name an exported function
JS_RESERVED_WORDS = frozenset([
    'break', 'case', 'catch', 'class', 'const', 'continue', 'debugger',
    'default', 'delete', 'do', 'else', 'enum', 'export', 'extends', 'false',
    'finally', 'for', 'function', 'if', 'import', 'in', 'instanceof', 'new',
    'null', 'return', 'super', 'switch', 'this', 'throw', 'true', 'try',
    'typeof', 'var', 'void', 'while', 'with', 'yield', 'let', 'static',
    'implements', 'interface', 'package', 'private', 'protected', 'public',
    'await', 'arguments', 'eval',
])

# Event names the transport reserves for itself
TRANSPORT_RESERVED_EVENTS = frozenset([
    'connect', 'connect_error', 'disconnect', 'disconnecting',
    'newListener', 'removeListener',
])

# Names the generated modules and grouped factory objects already use
GENERATED_MEMBER_NAMES = frozenset([
    'rpcError', 'isRpcError', 'handleRpcError',
    'createClientRpc', 'createServerRpc',
    'socket', 'dispose', 'disposed',
    'activeRegistrations', 'trackRegistration', 'isDisposed',
])


class Precedence(Enum):
    """Which declaration wins when an extension chain redeclares a member."""
    DESCENDANT = 'descendant'
    ANCESTOR = 'ancestor'


def is_valid_identifier(name: str) -> bool:
    """Check if a member name can be used as a JavaScript binding name."""
    if not name or name in JS_RESERVED_WORDS:
        return False
    # Python's identifier rules match ECMAScript's apart from '$'
    return name.replace('$', '_').isidentifier()


@dataclass(frozen=True)
class Parameter:
    """A parameter of a contract member."""
    name: str
    type_text: str = 'any'
    is_optional: bool = False


@dataclass
class Signature:
    """A resolved contract member."""
    name: str
    params: List[Parameter]
    return_type: str
    source_file: Path
    contract: str
    line: int = 0

    @property
    def is_void(self) -> bool:
        """No-response member: the return type text is exactly 'void'."""
        return is_void_type(self.return_type)

    @property
    def handler_name(self) -> str:
        return 'handle' + self.name[0].upper() + self.name[1:]

    def type_texts(self) -> List[str]:
        """Every type expression the bindings for this member mention."""
        texts = [p.type_text for p in self.params]
        if not self.is_void:
            texts.append(self.return_type)
        return texts


@dataclass
class ContractNode:
    """One interface in a contract extension graph, keyed by (file, name)."""
    name: str
    file: Path
    declaration: InterfaceDeclaration
    parents: List['ContractNode'] = field(default_factory=list)

    @property
    def key(self) -> Tuple[Path, str]:
        return self.file, self.name


@dataclass
class ResolvedContractSignatures:
    """The deduplicated members of a contract, in registration order."""
    contract: ContractNode
    signatures: List[Signature]
    visit_order: List[ContractNode]

    def __iter__(self) -> Iterator[Signature]:
        return iter(self.signatures)

    def __len__(self) -> int:
        return len(self.signatures)

    def names(self) -> List[str]:
        return [sig.name for sig in self.signatures]

    def get(self, name: str) -> Optional[Signature]:
        for sig in self.signatures:
            if sig.name == name:
                return sig
        return None


class ContractResolver:
    """
    Resolves contracts to their flattened, deduplicated signatures.

    Contract nodes are cached per (file, interface name), so a base shared by
    both contracts is parsed and resolved once.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        diagnostics: Optional[GeneratorDiagnostics] = None,
        precedence: Precedence = Precedence.DESCENDANT,
    ):
        self._registry = registry
        self._diagnostics = diagnostics or GeneratorDiagnostics()
        self.precedence = precedence
        self._nodes: Dict[Tuple[Path, str], ContractNode] = {}

    def find_contract(self, entry: Path, name: str) -> ContractNode:
        """Find a root contract declared in the entry file."""
        entry = entry.resolve()
        decl = self._registry.load(entry, is_entry=True).find_interface(name)
        if decl is None:
            raise ContractNotFoundError(name, entry)
        return self._node(entry, decl)

    def _node(self, path: Path, decl: InterfaceDeclaration) -> ContractNode:
        key = (path, decl.name)
        if key in self._nodes:
            return self._nodes[key]

        node = ContractNode(name=decl.name, file=path, declaration=decl)
        # Registered before parents are resolved so that cycles terminate
        self._nodes[key] = node

        for clause in decl.extends:
            found = self._registry.resolve_interface(path, clause.name)
            if found is None:
                self._diagnostics.warn_unresolved_parent(
                    clause.name, decl.name, str(path), decl.line
                )
                continue
            parent_path, parent_decl = found
            node.parents.append(self._node(parent_path, parent_decl))
        return node

    def flatten(self, root: ContractNode) -> List[ContractNode]:
        """
        Order the contract graph for member registration.

        Depth-first over parent edges, recording each parent after its own
        ancestors (post-order), so the farthest ancestors come first and the
        root comes last. Every node appears once.
        """
        visited = {root.key}
        order: List[ContractNode] = []

        def visit(node: ContractNode) -> None:
            for parent in node.parents:
                if parent.key in visited:
                    continue
                visited.add(parent.key)
                visit(parent)
                order.append(parent)

        visit(root)
        order.append(root)
        return order

    def resolve(self, root: ContractNode) -> ResolvedContractSignatures:
        """Flatten a contract into one signature per distinct member name."""
        order = self.flatten(root)
        positions: Dict[str, int] = {}
        signatures: List[Signature] = []

        for node in order:
            # Overloads within one interface: the first declaration is bound
            declared: Dict[str, Signature] = {}
            for member in node.declaration.members:
                sig = self._signature(node, member)
                if sig is None:
                    continue
                if sig.name in declared:
                    self._diagnostics.warn_overload(
                        sig.name, node.name, declared[sig.name].line, str(node.file), sig.line
                    )
                    continue
                declared[sig.name] = sig
                if sig.name not in positions:
                    positions[sig.name] = len(signatures)
                    signatures.append(sig)
                elif self.precedence == Precedence.DESCENDANT:
                    signatures[positions[sig.name]] = sig

        return ResolvedContractSignatures(contract=root, signatures=signatures, visit_order=order)

    def resolve_contract(self, entry: Path, name: str) -> ResolvedContractSignatures:
        """Find a contract in the entry file and resolve it."""
        return self.resolve(self.find_contract(entry, name))

    def _signature(self, node: ContractNode, member: InterfaceMember) -> Optional[Signature]:
        file_path = str(node.file)

        if not member.is_identifier_name or not is_valid_identifier(member.name):
            shown = f'"{member.name}"' if member.is_identifier_name else member.name
            self._diagnostics.warn_invalid_member_name(
                shown, node.name, 'not a valid identifier', file_path, member.line
            )
            return None
        if member.name in TRANSPORT_RESERVED_EVENTS or member.name in GENERATED_MEMBER_NAMES:
            self._diagnostics.warn_invalid_member_name(
                f'"{member.name}"', node.name, 'the name is reserved by the transport or the generated bindings',
                file_path, member.line,
            )
            return None
        if not member.is_function_valued:
            self._diagnostics.info_non_function_member(member.name, node.name, file_path, member.line)
            return None

        if member.type_parameters:
            self._diagnostics.warn_generic_member(
                member.name, member.type_parameters, node.name, file_path, member.line
            )
            return None

        for param in member.parameters:
            if param.is_rest or param.is_pattern:
                self._diagnostics.warn_unsupported_parameter(
                    member.name, param.name, node.name, file_path, member.line
                )
                return None

        return Signature(
            name=member.name,
            params=[Parameter(p.name, p.type_text, p.is_optional) for p in member.parameters],
            return_type=member.return_type or 'any',
            source_file=node.file,
            contract=node.name,
            line=member.line,
        )
