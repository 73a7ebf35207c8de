"""
Base generator class with shared utilities.

This module provides the BaseGenerator class that contains common utilities
used across all specialized generator classes in the code generation pipeline.
"""

from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext

from ..resolver import Parameter, Signature


INTERNAL_ERROR_CODE = 'INTERNAL_ERROR'
RPC_ERROR_EVENT = 'rpcError'

# (type, name, description) of one @param tag
DocParam = Tuple[str, str, str]


class BaseGenerator:
    """
    Base class for all code generators.

    Provides shared utilities for:
    - Indentation management
    - Parameter list and JSDoc rendering
    - Error value construction and error logging
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        """
        Initialize the base generator.

        Args:
            ctx: The code generation context containing all state
        """
        self._ctx = ctx

    # =========================================================================
    # INDENTATION
    # =========================================================================

    def indent(self) -> str:
        """Return the current indentation string."""
        return self._ctx.indent()

    @property
    def indent_level(self) -> int:
        """Get the current indentation level."""
        return self._ctx.indent_level

    @indent_level.setter
    def indent_level(self, value: int):
        """Set the current indentation level."""
        self._ctx.indent_level = value

    def line(self, text: str = '') -> str:
        """Return ``text`` at the current indentation (blank lines stay empty)."""
        return f'{self.indent()}{text}' if text else ''

    # =========================================================================
    # SIGNATURE RENDERING
    # =========================================================================

    @staticmethod
    def quote(value: str) -> str:
        """Render a single-quoted TypeScript string literal."""
        escaped = value.replace('\\', '\\\\').replace("'", "\\'")
        return f"'{escaped}'"

    @staticmethod
    def param_list(params: Sequence[Parameter]) -> str:
        """Render 'a: string, b?: number'."""
        return ', '.join(
            f'{p.name}{"?" if p.is_optional else ""}: {p.type_text}' for p in params
        )

    def call_args(self, sig: Signature) -> str:
        """Render the ', a, b' suffix passing a signature's arguments on."""
        names = self._ctx.local_names(sig)
        return ''.join(f', {name}' for name in names)

    def handler_type(self, sig: Signature) -> str:
        """Type of the user handler for ``sig``: (params) => Promise<R | RpcError>."""
        result = 'void' if sig.is_void else sig.return_type
        params = self.param_list(self._ctx.renamed_params(sig))
        return f'({params}) => Promise<{result} | RpcError>'

    # =========================================================================
    # JSDOC
    # =========================================================================

    def jsdoc(
        self,
        description: str,
        params: Sequence[DocParam] = (),
        returns: Optional[Tuple[str, str]] = None,
    ) -> List[str]:
        """Render a JSDoc block with @param and @returns tags."""
        lines = [self.line('/**'), self.line(f' * {description}')]
        for type_text, name, text in params:
            tag = f' * @param {{{type_text}}} {name}'
            lines.append(self.line(f'{tag} {text}' if text else tag))
        if returns is not None:
            type_text, text = returns
            lines.append(self.line(f' * @returns {{{type_text}}} {text}'))
        lines.append(self.line(' */'))
        return lines

    def doc_params(self, sig: Signature) -> List[DocParam]:
        """@param entries for a signature's own parameters."""
        return [(p.type_text, p.name, '') for p in self._ctx.renamed_params(sig)]

    # =========================================================================
    # ERROR HANDLING
    # =========================================================================

    @staticmethod
    def error_value(error_var: str = 'err') -> str:
        """An RpcError literal built from a caught error."""
        return (
            f'{{ message: {error_var} instanceof Error ? {error_var}.message : String({error_var}), '
            f"code: '{INTERNAL_ERROR_CODE}', data: undefined }}"
        )

    def log_error(self, message: str, error_var: str = 'err') -> str:
        """A statement logging a caught error through the configured logger."""
        logger = self._ctx.logger_name or 'console.error'
        return f'{logger}({self.quote(message)}, {error_var});'
