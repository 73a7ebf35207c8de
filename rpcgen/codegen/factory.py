"""
Grouped RPC factory generation.

Emits the ClientRpc / ServerRpc interface and the createClientRpc /
createServerRpc factory that binds every call and handler registration of a
side to one socket, tracks registrations and tears them down on dispose().
"""

from typing import List

from .base import BaseGenerator
from ..resolver import Signature


class FactoryGenerator(BaseGenerator):
    """
    Generates the grouped-namespace wrapper for one side.

    This class handles:
    - The exported Rpc interface describing the grouped object
    - Registration tracking with idempotent unregistration
    - Idempotent, reverse-order disposal and optional disconnect cleanup
    """

    def generate(self, calls: List[Signature], handlers: List[Signature]) -> List[str]:
        """Generate the interface and factory function.

        Args:
            calls: Signatures this side calls on its peer
            handlers: Signatures this side handles

        Returns:
            Lines of TypeScript code
        """
        lines = self._generate_interface(calls, handlers)
        lines.append('')
        lines.extend(self._generate_factory(calls, handlers))
        return lines

    # =========================================================================
    # INTERFACE
    # =========================================================================

    def _call_member(self, sig: Signature) -> str:
        params = self.param_list(self._ctx.renamed_params(sig))
        if sig.is_void:
            return f'{sig.name}({params}): void;'
        params = ', '.join(filter(None, [params, 'timeout?: number']))
        return f'{sig.name}({params}): Promise<{sig.return_type} | RpcError>;'

    def _generate_interface(self, calls: List[Signature], handlers: List[Signature]) -> List[str]:
        side = self._ctx.side
        lines = [
            self.line('/**'),
            self.line(f' * {side.label} calls and handler registrations bound to one socket.'),
            self.line(' * Registrations made through this object are removed by dispose().'),
            self.line(' */'),
            self.line(f'export interface {side.rpc_interface} {{'),
        ]
        self.indent_level += 1
        lines.append(self.line('readonly socket: Socket;'))
        lines.append(self.line('readonly disposed: boolean;'))
        for sig in calls:
            lines.append(self.line(self._call_member(sig)))
        for sig in handlers:
            lines.append(self.line(f'{sig.handler_name}(handler: {self.handler_type(sig)}): Unsubscribe;'))
        lines.append(self.line('handleRpcError(handler: (error: RpcError) => Promise<void>): Unsubscribe;'))
        lines.append(self.line('dispose(): void;'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines

    # =========================================================================
    # FACTORY
    # =========================================================================

    def _generate_factory(self, calls: List[Signature], handlers: List[Signature]) -> List[str]:
        side = self._ctx.side
        lines = self.jsdoc(
            f'Creates a {side.rpc_interface} bound to the given socket.',
            [('Socket', 'socket', 'The socket instance for communication.')],
            (side.rpc_interface, f'The grouped {side.name} RPC object.'),
        )
        lines.append(self.line(f'export function {side.factory_name}(socket: Socket): {side.rpc_interface} {{'))
        self.indent_level += 1
        lines.append(self.line('const activeRegistrations: Unsubscribe[] = [];'))
        lines.append(self.line('let isDisposed = false;'))
        lines.append('')
        lines.extend(self._generate_track_registration())
        lines.append('')
        lines.extend(self._generate_dispose())
        if self._ctx.config.auto_cleanup:
            lines.append('')
            lines.append(self.line("socket.on('disconnect', dispose);"))
        lines.append('')
        lines.extend(self._generate_return(calls, handlers))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return lines

    def _generate_track_registration(self) -> List[str]:
        side = self._ctx.side
        lines = [self.line('const trackRegistration = (register: () => Unsubscribe): Unsubscribe => {')]
        self.indent_level += 1
        lines.append(self.line('if (isDisposed) {'))
        self.indent_level += 1
        lines.append(self.line(f"throw new Error('{side.rpc_interface} has been disposed');"))
        self.indent_level -= 1
        lines.append(self.line('}'))
        lines.append(self.line('const unsubscribe = register();'))
        lines.append(self.line('let active = true;'))
        lines.append(self.line('const tracked = () => {'))
        self.indent_level += 1
        lines.append(self.line('if (!active) {'))
        self.indent_level += 1
        lines.append(self.line('return;'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        lines.append(self.line('active = false;'))
        lines.append(self.line('const index = activeRegistrations.indexOf(tracked);'))
        lines.append(self.line('if (index !== -1) {'))
        self.indent_level += 1
        lines.append(self.line('activeRegistrations.splice(index, 1);'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        lines.append(self.line('unsubscribe();'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        lines.append(self.line('activeRegistrations.push(tracked);'))
        lines.append(self.line('return tracked;'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        return lines

    def _generate_dispose(self) -> List[str]:
        lines = [self.line('const dispose = (): void => {')]
        self.indent_level += 1
        lines.append(self.line('if (isDisposed) {'))
        self.indent_level += 1
        lines.append(self.line('return;'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        lines.append(self.line('isDisposed = true;'))
        if self._ctx.config.auto_cleanup:
            lines.append(self.line("socket.off('disconnect', dispose);"))
        # Most recent registration first
        lines.append(self.line('for (const unsubscribe of activeRegistrations.splice(0).reverse()) {'))
        self.indent_level += 1
        lines.append(self.line('unsubscribe();'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        return lines

    def _generate_return(self, calls: List[Signature], handlers: List[Signature]) -> List[str]:
        lines = [self.line('return {')]
        self.indent_level += 1
        lines.append(self.line('socket,'))
        lines.append(self.line('get disposed() {'))
        self.indent_level += 1
        lines.append(self.line('return isDisposed;'))
        self.indent_level -= 1
        lines.append(self.line('},'))

        for sig in calls:
            params = self.param_list(self._ctx.renamed_params(sig))
            args = self.call_args(sig)
            if not sig.is_void:
                params = ', '.join(filter(None, [params, 'timeout?: number']))
                args += ', timeout'
            lines.append(self.line(f'{sig.name}: ({params}) => {sig.name}(socket{args}),'))

        for sig in handlers:
            lines.append(self.line(
                f'{sig.handler_name}: (handler: {self.handler_type(sig)}) => '
                f'trackRegistration(() => {sig.handler_name}(socket, handler)),'
            ))
        lines.append(self.line(
            'handleRpcError: (handler: (error: RpcError) => Promise<void>) => '
            'trackRegistration(() => handleRpcError(socket, handler)),'
        ))
        lines.append(self.line('dispose,'))
        self.indent_level -= 1
        lines.append(self.line('};'))
        return lines
