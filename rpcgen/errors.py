"""
Fatal generation errors.

Recoverable problems are reported through GeneratorDiagnostics instead;
anything raised from here aborts the run.
"""

from pathlib import Path
from typing import Optional


class GenerationError(Exception):
    """Base class for errors that abort a generation run."""


class InputFileNotFoundError(GenerationError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f'Input file not found: {path}')


class ContractNotFoundError(GenerationError):
    def __init__(self, contract: str, path: Path):
        self.contract = contract
        self.path = path
        super().__init__(
            f'Could not find interface "{contract}" in {path}. '
            f'The input must declare both contract interfaces.'
        )


class OutputWriteError(GenerationError):
    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f': {cause}' if cause else ''
        super().__init__(f'Failed to write {path}{detail}')


class ConfigError(GenerationError):
    """Invalid configuration file or option value."""
