"""
AST node definitions for TypeScript declaration parsing.

This module contains the dataclasses representing the declarations the
generator cares about. Type expressions are not modelled as trees; they are
kept as normalized text (see printer.py) and analyzed by the type system.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple


# =============================================================================
# BASE NODE
# =============================================================================

@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    pass


# =============================================================================
# MODULE-LEVEL DIRECTIVES
# =============================================================================

@dataclass
class ImportDirective(ASTNode):
    """Represents an import statement."""
    module: str
    symbols: List[Tuple[str, Optional[str]]] = field(default_factory=list)  # (name, alias)
    default_name: Optional[str] = None
    namespace: Optional[str] = None
    is_type_only: bool = False

    def local_names(self) -> List[Tuple[str, str]]:
        """Return (local name, imported name) pairs for the named symbols."""
        return [(alias or name, name) for name, alias in self.symbols]


@dataclass
class ExportDirective(ASTNode):
    """Represents an export list or re-export (export { A } / export * from)."""
    module: Optional[str] = None
    symbols: List[Tuple[str, Optional[str]]] = field(default_factory=list)  # (name, alias)
    is_wildcard: bool = False
    namespace: Optional[str] = None

    def exported_names(self) -> List[Tuple[str, str]]:
        """Return (exported name, source name) pairs."""
        return [(alias or name, name) for name, alias in self.symbols]


# =============================================================================
# INTERFACE MEMBERS
# =============================================================================

@dataclass
class ParameterDeclaration(ASTNode):
    """A parameter of a function type or method signature."""
    name: str
    type_text: str = 'any'
    is_optional: bool = False
    is_rest: bool = False
    is_pattern: bool = False  # destructured ({ a, b }: T)


@dataclass
class InterfaceMember(ASTNode):
    """
    A property or method signature inside an interface body.

    ``parameters`` is set only when the member is function-valued, i.e. a
    method signature or a property whose type is a function type.
    """
    name: str
    kind: str = 'property'  # 'property' or 'method'
    type_text: str = 'any'
    is_optional: bool = False
    is_readonly: bool = False
    is_identifier_name: bool = True
    parameters: Optional[List[ParameterDeclaration]] = None
    return_type: Optional[str] = None
    type_parameters: List[str] = field(default_factory=list)
    line: int = 0

    @property
    def is_function_valued(self) -> bool:
        return self.parameters is not None


@dataclass
class HeritageClause(ASTNode):
    """One entry of an 'extends' list (e.g. Base or ns.Base<T>)."""
    name: str
    type_arguments: str = ''


# =============================================================================
# DECLARATIONS
# =============================================================================

@dataclass
class Declaration(ASTNode):
    """Base class for named module-level declarations."""
    name: str
    is_exported: bool = False
    is_default: bool = False
    line: int = 0


@dataclass
class InterfaceDeclaration(Declaration):
    """Represents an interface declaration."""
    type_parameters: List[str] = field(default_factory=list)
    extends: List[HeritageClause] = field(default_factory=list)
    members: List[InterfaceMember] = field(default_factory=list)


@dataclass
class TypeAliasDeclaration(Declaration):
    """Represents a 'type X = ...' declaration."""
    type_parameters: List[str] = field(default_factory=list)
    type_text: str = ''


@dataclass
class EnumDeclaration(Declaration):
    """Represents an enum (or const enum) declaration."""
    members: List[str] = field(default_factory=list)
    is_const: bool = False


@dataclass
class ClassDeclaration(Declaration):
    """Represents a class declaration; the body is skipped."""
    is_abstract: bool = False


@dataclass
class FunctionDeclaration(Declaration):
    """Represents a function declaration; the body is skipped."""
    pass


@dataclass
class VariableDeclaration(Declaration):
    """Represents a const/let/var declaration; the initializer is skipped."""
    kind: str = 'const'


@dataclass
class NamespaceDeclaration(Declaration):
    """Represents a namespace or module block; the body is skipped."""
    pass


# =============================================================================
# SOURCE UNIT
# =============================================================================

@dataclass
class SourceUnit(ASTNode):
    """Root node representing an entire TypeScript source file."""
    imports: List[ImportDirective] = field(default_factory=list)
    exports: List[ExportDirective] = field(default_factory=list)
    interfaces: List[InterfaceDeclaration] = field(default_factory=list)
    type_aliases: List[TypeAliasDeclaration] = field(default_factory=list)
    enums: List[EnumDeclaration] = field(default_factory=list)
    classes: List[ClassDeclaration] = field(default_factory=list)
    functions: List[FunctionDeclaration] = field(default_factory=list)
    variables: List[VariableDeclaration] = field(default_factory=list)
    namespaces: List[NamespaceDeclaration] = field(default_factory=list)

    def declarations(self) -> List[Declaration]:
        """All named declarations, grouped by kind in a stable order."""
        return [
            *self.interfaces,
            *self.type_aliases,
            *self.enums,
            *self.classes,
            *self.functions,
            *self.variables,
            *self.namespaces,
        ]

    def find_declaration(self, name: str) -> Optional[Declaration]:
        """Find a declaration by name, exported or not."""
        for decl in self.declarations():
            if decl.name == name:
                return decl
        return None

    def find_interface(self, name: str) -> Optional[InterfaceDeclaration]:
        """Find an interface by name, exported or not.

        TypeScript merges repeated interface declarations; the merged view
        is returned with members and parents in declaration order.
        """
        matches = [iface for iface in self.interfaces if iface.name == name]
        if not matches:
            return None
        if len(matches) == 1:
            return matches[0]
        merged = InterfaceDeclaration(
            name=name,
            is_exported=any(m.is_exported for m in matches),
            line=matches[0].line,
            type_parameters=list(matches[0].type_parameters),
        )
        for match in matches:
            merged.extends.extend(match.extends)
            merged.members.extend(match.members)
        return merged

    def exported_names(self) -> List[str]:
        """Names this file exports from its own declarations.

        Covers 'export interface X' as well as local export lists
        ('interface X {}; export { X }'). Re-exports from other modules are
        not declarations of this file and are excluded, as are default
        exports, which cannot be imported by name.
        """
        names: List[str] = []
        for decl in self.declarations():
            if decl.is_exported and not decl.is_default and decl.name not in names:
                names.append(decl.name)
        declared = {decl.name for decl in self.declarations()}
        for export in self.exports:
            if export.module is not None:
                continue
            for exported, source in export.exported_names():
                if source in declared and exported not in names:
                    names.append(exported)
        return names

    def exports_declaration(self, name: str) -> bool:
        """Check if this file exports its own declaration called ``name``."""
        return name in self.exported_names()
