"""
Handler registration generation.

This module emits one registration function per member of the contract a
side implements, plus handleRpcError. Every registration returns an
Unsubscribe that removes exactly the listener it installed.
"""

from typing import List

from .base import BaseGenerator, RPC_ERROR_EVENT
from ..resolver import Signature


class HandlerGenerator(BaseGenerator):
    """
    Generates the functions a side uses to serve its peer's calls.

    This class handles:
    - Notify listeners that forward returned or thrown errors on 'rpcError'
    - Request listeners that acknowledge with the result or an RpcError
    - The handleRpcError listener
    """

    def generate(self, sig: Signature) -> List[str]:
        """Generate the handler registration for one member.

        Args:
            sig: The resolved member signature

        Returns:
            Lines of TypeScript code
        """
        side = self._ctx.side
        suffix = '' if sig.is_void else ' with acknowledgment'
        description = f'Sets up listener for {self.quote(sig.name)} events from {side.peer_name}{suffix}'
        lines = self.jsdoc(
            description,
            [
                ('Socket', 'socket', 'The socket instance for communication.'),
                (self.handler_type(sig), 'handler', 'The handler function to process incoming events.'),
            ],
            ('Unsubscribe', 'A function that removes the listener.'),
        )

        lines.append(self.line(
            f'export function {sig.handler_name}(socket: Socket, handler: {self.handler_type(sig)}): Unsubscribe {{'
        ))
        self.indent_level += 1
        if sig.is_void:
            lines.extend(self._notify_listener(sig))
        else:
            lines.extend(self._request_listener(sig))
        lines.extend(self._register(sig.name))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines

    def _listener_params(self, sig: Signature) -> str:
        return self.param_list(self._ctx.renamed_params(sig))

    def _handler_args(self, sig: Signature) -> str:
        return ', '.join(self._ctx.local_names(sig))

    def _notify_listener(self, sig: Signature) -> List[str]:
        lines = [self.line(f'const listener = async ({self._listener_params(sig)}) => {{')]
        self.indent_level += 1
        lines.append(self.line('try {'))
        self.indent_level += 1
        lines.append(self.line(f'const result = await handler({self._handler_args(sig)});'))
        lines.append(self.line('if (isRpcError(result)) {'))
        self.indent_level += 1
        lines.append(self.line(f'socket.emit({self.quote(RPC_ERROR_EVENT)}, result);'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        self.indent_level -= 1
        lines.append(self.line('} catch (err) {'))
        self.indent_level += 1
        lines.append(self.line(self.log_error(f'[{sig.name}] Handler error:')))
        lines.append(self.line(f'socket.emit({self.quote(RPC_ERROR_EVENT)}, {self.error_value()});'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        return lines

    def _request_listener(self, sig: Signature) -> List[str]:
        params = ', '.join(filter(None, [
            self._listener_params(sig),
            f'callback: (response: {sig.return_type} | RpcError) => void',
        ]))
        lines = [self.line(f'const listener = async ({params}) => {{')]
        self.indent_level += 1
        lines.append(self.line('try {'))
        self.indent_level += 1
        lines.append(self.line(f'const result = await handler({self._handler_args(sig)});'))
        lines.extend(self._acknowledge('result'))
        self.indent_level -= 1
        lines.append(self.line('} catch (err) {'))
        self.indent_level += 1
        lines.append(self.line(self.log_error(f'[{sig.name}] Handler error:')))
        lines.extend(self._acknowledge(self.error_value()))
        self.indent_level -= 1
        lines.append(self.line('}'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        return lines

    def _acknowledge(self, value: str) -> List[str]:
        # A peer may emit without an ack function
        lines = [self.line("if (typeof callback === 'function') {")]
        self.indent_level += 1
        lines.append(self.line(f'callback({value});'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines

    def _register(self, event: str) -> List[str]:
        """Install ``listener`` on ``event`` and return its Unsubscribe."""
        lines = [
            self.line(f'socket.on({self.quote(event)}, listener);'),
            self.line('return () => {'),
        ]
        self.indent_level += 1
        lines.append(self.line(f'socket.off({self.quote(event)}, listener);'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        return lines

    def generate_rpc_error_handler(self) -> List[str]:
        """Generate handleRpcError, which listens for errors reported by the peer."""
        lines = self.jsdoc(
            f'Sets up listener for {self.quote(RPC_ERROR_EVENT)} events. '
            'This handler is called whenever an RPC error occurs during function execution.',
            [
                ('Socket', 'socket', 'The socket instance for communication.'),
                ('(error: RpcError) => Promise<void>', 'handler', 'The handler function to process incoming events.'),
            ],
            ('Unsubscribe', 'A function that removes the listener.'),
        )
        lines.append(self.line(
            'export function handleRpcError(socket: Socket, handler: (error: RpcError) => Promise<void>): Unsubscribe {'
        ))
        self.indent_level += 1
        lines.append(self.line('const listener = async (error: RpcError) => {'))
        self.indent_level += 1
        lines.append(self.line('try {'))
        self.indent_level += 1
        lines.append(self.line('await handler(error);'))
        self.indent_level -= 1
        lines.append(self.line('} catch (err) {'))
        self.indent_level += 1
        lines.append(self.line(self.log_error('[handleRpcError] Error in RPC error handler:')))
        self.indent_level -= 1
        lines.append(self.line('}'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        lines.extend(self._register(RPC_ERROR_EVENT))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines
