"""
Generation of types.generated.ts, the error vocabulary shared by both sides.
"""

from typing import List

from .base import BaseGenerator


class TypesModuleGenerator(BaseGenerator):
    """Generates RpcError, the isRpcError type guard and Unsubscribe."""

    def generate(self) -> List[str]:
        lines = [
            '/**',
            ' * Auto-generated types for the RPC package',
            ' */',
            '/** Represents an error that occurred during an RPC call. */',
            'export interface RpcError {',
        ]
        self.indent_level += 1
        for name, type_text, doc in (
            ('message', 'string', 'The error message.'),
            ('code', 'string', 'The error code.'),
            ('data', 'any', 'The error data.'),
        ):
            lines.append(self.line(f'/** {doc} */'))
            lines.append(self.line(f'{name}: {type_text};'))
        self.indent_level -= 1
        lines.append('}')
        lines.append('')

        lines.append('/** Type guard to check if an object is an RpcError. */')
        lines.append('export function isRpcError(obj: any): obj is RpcError {')
        self.indent_level += 1
        lines.append(self.line(
            "return !!obj && typeof (obj as RpcError).message === 'string' "
            "&& typeof (obj as RpcError).code === 'string';"
        ))
        self.indent_level -= 1
        lines.append('}')
        lines.append('')

        lines.append('/** Removes a listener installed by a handler registration. */')
        lines.append('export type Unsubscribe = () => void;')
        return lines
