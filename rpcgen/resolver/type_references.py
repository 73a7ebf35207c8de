"""
Type-reference resolution for generated imports.

Generated bindings mention the parameter and return types of every contract
member. Each named user type must be imported, type-only, from the file
that declares and exports it.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..diagnostics import GeneratorDiagnostics
from ..type_system import TypeRegistry, GENERATED_NAMES, referenced_type_names
from .contracts import ResolvedContractSignatures, Signature


class TypeReferenceTable:
    """Mapping of declaring file to the type names imported from it."""

    def __init__(self):
        self._by_file: Dict[Path, List[str]] = {}
        self._origin: Dict[str, Path] = {}

    def add(self, path: Path, name: str) -> None:
        if name in self._origin:
            return
        self._origin[name] = path
        self._by_file.setdefault(path, []).append(name)

    def origin(self, name: str) -> Optional[Path]:
        """The file a type name is imported from, if it resolved."""
        return self._origin.get(name)

    def imports_for(self, names: Iterable[str]) -> Dict[Path, List[str]]:
        """Restrict the table to the names one generated file uses.

        Files keep their table order; names keep their first-reference order.
        """
        wanted = set(names)
        result: Dict[Path, List[str]] = {}
        for path, file_names in self._by_file.items():
            selected = [n for n in file_names if n in wanted]
            if selected:
                result[path] = selected
        return result

    def __contains__(self, name: str) -> bool:
        return name in self._origin

    def __len__(self) -> int:
        return len(self._origin)


def signature_type_names(signatures: Iterable[Signature]) -> List[str]:
    """Candidate type names referenced by a set of signatures, in order."""
    names: List[str] = []
    for sig in signatures:
        for text in sig.type_texts():
            for name in referenced_type_names(text):
                if name not in names:
                    names.append(name)
    return names


class TypeReferenceResolver:
    """
    Builds the TypeReferenceTable for a run.

    Each candidate name is looked up in the entry file's exported
    declarations first, then in the files reachable through its imports,
    breadth first; the first exporting file wins.
    """

    def __init__(self, registry: TypeRegistry, diagnostics: Optional[GeneratorDiagnostics] = None):
        self._registry = registry
        self._diagnostics = diagnostics or GeneratorDiagnostics()

    def build(self, entry: Path, contracts: Iterable[ResolvedContractSignatures]) -> TypeReferenceTable:
        entry = entry.resolve()
        search_order = self._registry.reachable_files(entry)
        table = TypeReferenceTable()

        signatures: List[Signature] = []
        for contract in contracts:
            signatures.extend(contract.signatures)

        for name in signature_type_names(signatures):
            origin = self._registry.exporting_file(search_order, name)
            if name in GENERATED_NAMES:
                # A user declaration would shadow the generated one
                if origin is not None:
                    self._diagnostics.warn_reserved_type_name(name, str(origin))
                continue
            if origin is None:
                self._diagnostics.info_unresolved_type(name, str(entry))
                continue
            table.add(origin, name)

        return table
