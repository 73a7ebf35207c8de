"""
Call function generation.

This module emits one exported function per member of the contract the
peer implements. Void members become fire-and-forget emits; every other
member awaits an acknowledgment bounded by a timeout and turns transport
failures into RpcError values.
"""

from typing import List

from .base import BaseGenerator
from ..resolver import Signature


class CallGenerator(BaseGenerator):
    """
    Generates the functions a side uses to call its peer.

    This class handles:
    - Notify (no response) functions that return immediately
    - Request functions with an acknowledgment timeout
    - Conversion of timeouts and transport errors to RpcError
    """

    def generate(self, sig: Signature) -> List[str]:
        """Generate the call function for one member.

        Args:
            sig: The resolved member signature

        Returns:
            Lines of TypeScript code
        """
        if sig.is_void:
            return self._generate_notify(sig)
        return self._generate_request(sig)

    def parameters(self, sig: Signature) -> str:
        """The contract parameters as declared by the generated function."""
        return self.param_list(self._ctx.renamed_params(sig))

    def _describe(self, sig: Signature, with_ack: bool) -> str:
        side = self._ctx.side
        mode = 'with acknowledgment' if with_ack else 'without acknowledgment'
        return (
            f'{side.label} calls {side.peer_label}: Emits {self.quote(sig.name)} event to '
            f'{side.peer_name} {mode}. Includes built-in error handling.'
        )

    def _generate_notify(self, sig: Signature) -> List[str]:
        lines = []
        doc_params = [('Socket', 'socket', 'The socket instance for communication.')]
        doc_params.extend(self.doc_params(sig))
        lines.extend(self.jsdoc(self._describe(sig, with_ack=False), doc_params))

        params = ', '.join(filter(None, ['socket: Socket', self.parameters(sig)]))
        lines.append(self.line(f'export function {sig.name}({params}): void {{'))
        self.indent_level += 1
        lines.append(self.line(f'socket.emit({self.quote(sig.name)}{self.call_args(sig)});'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines

    def _generate_request(self, sig: Signature) -> List[str]:
        side = self._ctx.side
        timeout = self._ctx.config.default_timeout
        result_type = f'Promise<{sig.return_type} | RpcError>'

        lines = []
        doc_params = [('Socket', 'socket', 'The socket instance for communication.')]
        doc_params.extend(self.doc_params(sig))
        doc_params.append(('number', 'timeout', 'The timeout for the acknowledgment in milliseconds.'))
        returns = (
            result_type,
            f'A promise that resolves with the result from the {side.peer_name}, '
            f'or an RpcError if one occurred.',
        )
        lines.extend(self.jsdoc(self._describe(sig, with_ack=True), doc_params, returns))

        params = ', '.join(filter(None, [
            'socket: Socket', self.parameters(sig), f'timeout: number = {timeout}',
        ]))
        lines.append(self.line(f'export async function {sig.name}({params}): {result_type} {{'))
        self.indent_level += 1
        lines.append(self.line('try {'))
        self.indent_level += 1
        lines.append(self.line(
            f'return await socket.timeout(timeout).emitWithAck({self.quote(sig.name)}{self.call_args(sig)});'
        ))
        self.indent_level -= 1
        lines.append(self.line('} catch (err) {'))
        self.indent_level += 1
        lines.append(self.line(f'return {self.error_value()};'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines
