"""
Registry of parsed TypeScript modules.

The TypeRegistry loads and caches contract files, resolves relative module
specifiers to files on disk, and answers which declaration a name refers to
from a given file, following imports and re-exports.
"""

from collections import deque
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from ..parser.ast_nodes import SourceUnit, Declaration, InterfaceDeclaration

if TYPE_CHECKING:
    from ..diagnostics import GeneratorDiagnostics


# Extensions tried, in order, when a specifier omits one
SOURCE_EXTENSIONS = ('.ts', '.tsx', '.d.ts', '.mts', '.d.mts', '.cts', '.d.cts')

# Emitted-JS extensions that map back to their TypeScript source
JS_TO_TS = {
    '.js': ('.ts', '.tsx', '.d.ts'),
    '.jsx': ('.tsx',),
    '.mjs': ('.mts', '.d.mts'),
    '.cjs': ('.cts', '.d.cts'),
}

Resolved = Tuple[Path, Declaration]


class TypeRegistry:
    """
    Registry of parsed TypeScript source files.

    Files are parsed on first use and cached for the rest of the run. The
    entry file must parse; any other file that fails to parse is reported
    as a warning and treated as empty.
    """

    def __init__(self, diagnostics: Optional['GeneratorDiagnostics'] = None):
        self.units: Dict[Path, SourceUnit] = {}
        self._diagnostics = diagnostics

    @property
    def loaded_files(self) -> List[Path]:
        """Every file read during this run, in load order."""
        return list(self.units)

    def load_source(self, source: str, path: Path) -> SourceUnit:
        """Parse source text and register it under ``path``."""
        from ..parser import parse_source

        unit = parse_source(source)
        self.units[path.resolve()] = unit
        return unit

    def load(self, path: Path, is_entry: bool = False) -> SourceUnit:
        """Load a file, parsing it on first use."""
        path = path.resolve()
        if path in self.units:
            return self.units[path]

        try:
            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()
            return self.load_source(source, path)
        except (SyntaxError, OSError, UnicodeDecodeError) as e:
            if is_entry:
                raise
            if self._diagnostics is not None:
                self._diagnostics.warn_parse_failure(str(path), str(e))
            unit = SourceUnit()
            self.units[path] = unit
            return unit

    # =========================================================================
    # MODULE RESOLUTION
    # =========================================================================

    def resolve_module(self, from_file: Path, specifier: str) -> Optional[Path]:
        """Resolve a relative module specifier to a source file.

        Package specifiers ('socket.io', '@scope/pkg') are never followed.
        """
        if not specifier.startswith('.'):
            return None

        base = from_file.resolve().parent / specifier
        candidates: List[Path] = []

        suffix = base.suffix
        if suffix in JS_TO_TS:
            stem = base.with_suffix('')
            candidates.extend(stem.with_name(stem.name + ext) for ext in JS_TO_TS[suffix])
        if suffix in ('.ts', '.tsx', '.mts', '.cts'):
            candidates.append(base)
        candidates.extend(base.with_name(base.name + ext) for ext in SOURCE_EXTENSIONS)
        candidates.extend(base / f'index{ext}' for ext in SOURCE_EXTENSIONS)

        for candidate in candidates:
            if candidate.is_file():
                return candidate.resolve()
        return None

    def dependencies(self, path: Path) -> List[Path]:
        """Files a module imports or re-exports from, in declaration order."""
        unit = self.load(path)
        deps: List[Path] = []
        specifiers = [imp.module for imp in unit.imports]
        specifiers.extend(exp.module for exp in unit.exports if exp.module is not None)
        for specifier in specifiers:
            target = self.resolve_module(path, specifier)
            if target is not None and target not in deps:
                deps.append(target)
        return deps

    def reachable_files(self, entry: Path) -> List[Path]:
        """The entry file followed by its import graph, breadth first."""
        entry = entry.resolve()
        order: List[Path] = []
        seen = {entry}
        queue = deque([entry])
        while queue:
            current = queue.popleft()
            order.append(current)
            for dep in self.dependencies(current):
                if dep not in seen:
                    seen.add(dep)
                    queue.append(dep)
        return order

    # =========================================================================
    # NAME RESOLUTION
    # =========================================================================

    def _own_declaration(self, path: Path, name: str) -> Optional[Declaration]:
        unit = self.load(path)
        return unit.find_interface(name) or unit.find_declaration(name)

    def find_exported(self, path: Path, name: str, _seen: Optional[Set] = None) -> Optional[Resolved]:
        """Resolve the symbol a module exports as ``name`` to its declaration."""
        path = path.resolve()
        if _seen is None:
            _seen = set()
        if (path, name) in _seen:
            return None
        _seen.add((path, name))

        unit = self.load(path)

        # Declared here: 'export interface X' or 'interface X; export { X as Y }'
        if unit.exports_declaration(name):
            decl = self._own_declaration(path, name)
            if decl is not None and decl.is_exported:
                return path, decl
            for export in unit.exports:
                if export.module is not None:
                    continue
                for exported, source in export.exported_names():
                    if exported == name:
                        decl = self._own_declaration(path, source)
                        if decl is not None:
                            return path, decl

        for export in unit.exports:
            if export.module is None:
                # import { X } from './a'; export { X };
                for exported, source in export.exported_names():
                    if exported == name and unit.find_declaration(source) is None:
                        found = self.resolve_local(path, source, _seen)
                        if found is not None:
                            return found
                continue

            target = self.resolve_module(path, export.module)
            if target is None:
                continue
            if export.is_wildcard:
                if export.namespace is None:
                    found = self.find_exported(target, name, _seen)
                    if found is not None:
                        return found
                continue
            for exported, source in export.exported_names():
                if exported == name:
                    found = self.find_exported(target, source, _seen)
                    if found is not None:
                        return found
        return None

    def resolve_local(self, path: Path, name: str, _seen: Optional[Set] = None) -> Optional[Resolved]:
        """Resolve what ``name`` refers to inside a file: a local declaration or an import."""
        path = path.resolve()
        decl = self._own_declaration(path, name)
        if decl is not None:
            return path, decl

        unit = self.load(path)
        for imp in unit.imports:
            target = None
            imported = None
            for local, source in imp.local_names():
                if local == name:
                    imported = source
            if imported is not None:
                target = self.resolve_module(path, imp.module)
                if target is not None:
                    return self.find_exported(target, imported, _seen)
            elif imp.default_name == name:
                target = self.resolve_module(path, imp.module)
                if target is not None:
                    return self._find_default(target)
        return None

    def _find_default(self, path: Path) -> Optional[Resolved]:
        unit = self.load(path)
        for decl in unit.declarations():
            if decl.is_default:
                return path, decl
        return None

    def resolve_interface(self, path: Path, name: str) -> Optional[Tuple[Path, InterfaceDeclaration]]:
        """
        Resolve an 'extends' reference to an interface declaration.

        Handles plain names (local or imported) and 'ns.Name' through a
        namespace import. Interfaces are returned merged across repeated
        declarations in their declaring file.
        """
        path = path.resolve()
        if '.' in name:
            namespace, member = name.split('.', 1)
            found = None
            for imp in self.load(path).imports:
                if imp.namespace == namespace:
                    target = self.resolve_module(path, imp.module)
                    if target is not None:
                        found = self.find_exported(target, member)
                    break
        else:
            found = self.resolve_local(path, name)

        if found is None:
            return None
        decl_path, decl = found
        if not isinstance(decl, InterfaceDeclaration):
            return None
        merged = self.load(decl_path).find_interface(decl.name)
        return decl_path, merged or decl

    def exporting_file(self, files: List[Path], name: str) -> Optional[Path]:
        """First file in ``files`` that exports its own declaration of ``name``."""
        for path in files:
            if self.load(path).exports_declaration(name):
                return path
        return None
