"""
Diagnostic/warning system for the generator.

Collects and reports contract members, parent references and type
references that were skipped during generation, so a developer can see
why a binding they expected is missing.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for generator diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    file_path: str = ''
    line: Optional[int] = None
    construct: str = ''  # e.g., 'member name', 'extends', 'type import'

    def __str__(self) -> str:
        location = self.file_path
        if self.line:
            location = f'{location}:{self.line}'
        if location:
            return f'[{self.severity.value}] {location}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'


class GeneratorDiagnostics:
    """
    Collects generator warnings/diagnostics during a run.

    A contract shared by both sides is walked twice; identical diagnostics
    are recorded once.

    Usage:
        diag = GeneratorDiagnostics()
        diag.warn_unresolved_parent("Base", "ServerFunctions", "define.ts", line=3)
        # ... after generation ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def infos(self) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.INFO]

    @property
    def count(self) -> int:
        """Get total diagnostic count."""
        return len(self._diagnostics)

    def codes(self) -> List[str]:
        """Codes of all collected diagnostics, in order."""
        return [d.code for d in self._diagnostics]

    def clear(self) -> None:
        """Clear all diagnostics."""
        self._diagnostics.clear()

    def _add(self, diagnostic: Diagnostic) -> None:
        if diagnostic not in self._diagnostics:
            self._diagnostics.append(diagnostic)

    # =========================================================================
    # SPECIFIC WARNING METHODS
    # =========================================================================

    def warn_invalid_member_name(
        self,
        member_name: str,
        contract: str,
        reason: str,
        file_path: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a member was skipped because its name cannot become a binding."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=f'Member {member_name} of {contract} was skipped: {reason}.',
            file_path=file_path,
            line=line,
            construct='member name',
        ))

    def warn_unsupported_parameter(
        self,
        member_name: str,
        parameter: str,
        contract: str,
        file_path: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a member was skipped because of a rest or destructured parameter."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message=f'Member "{member_name}" of {contract} was skipped: parameter '
                    f'"{parameter}" is a rest or destructured parameter.',
            file_path=file_path,
            line=line,
            construct='parameter',
        ))

    def warn_generic_member(
        self,
        member_name: str,
        type_parameters: List[str],
        contract: str,
        file_path: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a member was skipped because it declares its own type parameters."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message=f'Member "{member_name}" of {contract} was skipped: generic signatures '
                    f'<{", ".join(type_parameters)}> are not supported.',
            file_path=file_path,
            line=line,
            construct='parameter',
        ))

    def warn_overload(
        self,
        member_name: str,
        contract: str,
        kept_line: int,
        file_path: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that an overload was dropped in favour of another declaration."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=f'Overload of "{member_name}" in {contract} was skipped: '
                    f'only the declaration at line {kept_line} is bound.',
            file_path=file_path,
            line=line,
            construct='member name',
        ))

    def warn_unresolved_parent(
        self,
        parent: str,
        contract: str,
        file_path: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that an extended interface could not be found."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W003',
            message=f'Could not resolve "{parent}" extended by {contract}; '
                    f'its members are missing from the bindings.',
            file_path=file_path,
            line=line,
            construct='extends',
        ))

    def warn_reserved_type_name(
        self,
        type_name: str,
        file_path: str = '',
    ) -> None:
        """Warn that a user type shadows a name the generated modules declare."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W004',
            message=f'Type "{type_name}" collides with a generated name and was not imported; '
                    f'the generated declaration is used instead.',
            file_path=file_path,
            construct='type import',
        ))

    def warn_parse_failure(
        self,
        file_path: str,
        error: str,
    ) -> None:
        """Warn that a referenced file could not be parsed."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W005',
            message=f'Could not parse file, treating it as empty: {error}',
            file_path=file_path,
            construct='parse',
        ))

    def info_non_function_member(
        self,
        member_name: str,
        contract: str,
        file_path: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Info that a property whose type is not a function was skipped."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message=f'Member "{member_name}" of {contract} is not a function and was skipped.',
            file_path=file_path,
            line=line,
            construct='member',
        ))

    def info_unresolved_type(
        self,
        type_name: str,
        file_path: str = '',
    ) -> None:
        """Info that a referenced type is not exported by any reachable file."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I002',
            message=f'Type "{type_name}" is not exported by the input or its imports; '
                    f'no import was generated for it.',
            file_path=file_path,
            construct='type import',
        ))

    def info_scaffold_kept(
        self,
        file_path: str,
    ) -> None:
        """Info that an existing scaffold file was left untouched."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I003',
            message='File exists and was not overwritten.',
            file_path=file_path,
            construct='scaffold',
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        if not self._diagnostics:
            return

        warnings = self.warnings
        infos = self.infos

        if warnings:
            print(f'\nGenerator warnings ({len(warnings)}):', file=file)
            # Group by construct type
            by_construct: dict = {}
            for w in warnings:
                key = w.construct or 'other'
                if key not in by_construct:
                    by_construct[key] = []
                by_construct[key].append(w)

            for construct, diags in sorted(by_construct.items()):
                print(f'  {construct}: {len(diags)} occurrence(s)', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

        if infos and self._verbose:
            print(f'\nGenerator info ({len(infos)}):', file=file)
            for d in infos:
                print(f'  {d}', file=file)

    def get_summary(self) -> str:
        """Get a summary string of all diagnostics."""
        warnings = self.warnings
        if not warnings:
            return 'No generator warnings.'

        by_construct: dict = {}
        for w in warnings:
            key = w.construct or 'other'
            if key not in by_construct:
                by_construct[key] = 0
            by_construct[key] += 1

        parts = [f'{count} {construct}' for construct, count in sorted(by_construct.items())]
        return f'Generator warnings: {", ".join(parts)}'
