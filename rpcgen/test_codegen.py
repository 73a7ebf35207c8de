#!/usr/bin/env python3
"""
Unit tests for the generated TypeScript bindings.

Run with: python3 -m pytest rpcgen/test_codegen.py
   or: cd .. && python3 rpcgen/test_codegen.py
"""

import sys
import os
# Add parent directory to path for proper imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import tempfile
import textwrap
import unittest
from pathlib import Path
from typing import Dict

from rpcgen.config import build_config
from rpcgen.codegen import relative_module_path
from rpcgen.ts2rpc import SocketRpcGenerator


DEFINE = '''
    import type { Plan } from './types';

    export interface ServerFunctions {
        generateText(prompt: string): string;
        notify(msg: string): void;
        getPlan(planId: string): Promise<Plan | null>;
    }

    export interface ClientFunctions {
        showError(error: Error): void;
        getBrowserVersion(): string;
    }
'''

TYPES = '''
    export interface Plan {
        id: string;
        steps: string[];
    }
'''


def function_body(text: str, signature_start: str) -> str:
    """The text of the top-level function starting with ``signature_start``."""
    start = text.index(signature_start)
    end = text.index('\n}\n', start)
    return text[start:end + 3]


class GeneratorTestCase(unittest.TestCase):
    """Generates bindings for sources written to a temporary directory."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()

    def write(self, name: str, source: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding='utf-8')
        return path

    def generate(self, source: str = DEFINE, **options) -> Dict[str, str]:
        self.write('types.ts', TYPES)
        entry = self.write('define.ts', source)
        generator = SocketRpcGenerator(build_config(entry, **options))
        results = generator.generate()
        self.diagnostics = generator.diagnostics
        return {path.name: text for path, text in results.items()}


class TestCallGeneration(GeneratorTestCase):
    """Test the functions one side uses to call the other."""

    def test_notify_call_has_no_timeout(self):
        client = self.generate()['client.generated.ts']
        body = function_body(client, 'export function notify(')
        self.assertEqual(body, (
            "export function notify(socket: Socket, msg: string): void {\n"
            "    socket.emit('notify', msg);\n"
            "}\n"
        ))

    def test_request_call_uses_timeout_and_ack(self):
        client = self.generate()['client.generated.ts']
        body = function_body(client, 'export async function generateText(')
        self.assertIn(
            'export async function generateText(socket: Socket, prompt: string, '
            'timeout: number = 5000): Promise<string | RpcError> {', body)
        self.assertIn("return await socket.timeout(timeout).emitWithAck('generateText', prompt);", body)

    def test_request_call_returns_internal_error(self):
        client = self.generate()['client.generated.ts']
        body = function_body(client, 'export async function generateText(')
        self.assertIn('} catch (err) {', body)
        self.assertIn(
            "return { message: err instanceof Error ? err.message : String(err), "
            "code: 'INTERNAL_ERROR', data: undefined };", body)
        self.assertNotIn('throw', body)

    def test_configured_default_timeout(self):
        client = self.generate(default_timeout=1500)['client.generated.ts']
        self.assertIn('prompt: string, timeout: number = 1500)', client)
        self.assertNotIn('timeout: number = 5000', client)

    def test_call_without_parameters(self):
        server = self.generate()['server.generated.ts']
        self.assertIn(
            'export async function getBrowserVersion(socket: Socket, timeout: number = 5000): '
            'Promise<string | RpcError> {', server)
        self.assertIn("emitWithAck('getBrowserVersion');", server)

    def test_jsdoc_describes_direction(self):
        client = self.generate()['client.generated.ts']
        self.assertIn(
            " * CLIENT calls SERVER: Emits 'generateText' event to server with acknowledgment. "
            "Includes built-in error handling.", client)
        self.assertIn(' * @param {number} timeout The timeout for the acknowledgment in milliseconds.', client)
        server = self.generate()['server.generated.ts']
        self.assertIn(
            " * SERVER calls CLIENT: Emits 'showError' event to client without acknowledgment. "
            "Includes built-in error handling.", server)


class TestHandlerGeneration(GeneratorTestCase):
    """Test handler registrations."""

    def test_void_handler_forwards_errors(self):
        server = self.generate()['server.generated.ts']
        body = function_body(server, 'export function handleNotify(')
        self.assertEqual(body, (
            "export function handleNotify(socket: Socket, handler: (msg: string) => Promise<void | RpcError>): "
            "Unsubscribe {\n"
            "    const listener = async (msg: string) => {\n"
            "        try {\n"
            "            const result = await handler(msg);\n"
            "            if (isRpcError(result)) {\n"
            "                socket.emit('rpcError', result);\n"
            "            }\n"
            "        } catch (err) {\n"
            "            console.error('[notify] Handler error:', err);\n"
            "            socket.emit('rpcError', { message: err instanceof Error ? err.message : String(err), "
            "code: 'INTERNAL_ERROR', data: undefined });\n"
            "        }\n"
            "    };\n"
            "    socket.on('notify', listener);\n"
            "    return () => {\n"
            "        socket.off('notify', listener);\n"
            "    };\n"
            "}\n"
        ))

    def test_request_handler_acknowledges(self):
        server = self.generate()['server.generated.ts']
        body = function_body(server, 'export function handleGenerateText(')
        self.assertIn(
            'const listener = async (prompt: string, callback: (response: string | RpcError) => void) => {', body)
        self.assertIn('callback(result);', body)
        self.assertIn("callback({ message: err instanceof Error ? err.message : String(err), "
                      "code: 'INTERNAL_ERROR', data: undefined });", body)
        # Errors go back through the acknowledgment, not the rpcError event
        self.assertNotIn("socket.emit('rpcError'", body)
        self.assertIn("socket.off('generateText', listener);", body)

    def test_request_handler_without_ack_function(self):
        server = self.generate()['server.generated.ts']
        body = function_body(server, 'export function handleGenerateText(')
        self.assertIn(
            "            if (typeof callback === 'function') {\n"
            "                callback(result);\n"
            "            }\n"
            "        } catch (err) {\n", body)
        self.assertIn(
            "            console.error('[generateText] Handler error:', err);\n"
            "            if (typeof callback === 'function') {\n"
            "                callback({ message: err instanceof Error ? err.message : String(err), "
            "code: 'INTERNAL_ERROR', data: undefined });\n"
            "            }\n", body)
        # Every acknowledgment is guarded
        self.assertEqual(body.count('callback('), body.count("if (typeof callback === 'function') {"))

    def test_rpc_error_handler(self):
        client = self.generate()['client.generated.ts']
        body = function_body(client, 'export function handleRpcError(')
        self.assertIn('handler: (error: RpcError) => Promise<void>): Unsubscribe {', body)
        self.assertIn('await handler(error);', body)
        self.assertIn("console.error('[handleRpcError] Error in RPC error handler:', err);", body)
        self.assertIn("socket.on('rpcError', listener);", body)
        self.assertIn("socket.off('rpcError', listener);", body)

    def test_error_logger(self):
        files = self.generate(error_logger='./logger#report')
        server = files['server.generated.ts']
        self.assertIn('import { report } from "./logger";', server)
        self.assertIn("report('[notify] Handler error:', err);", server)
        self.assertNotIn('console.error', server)

    def test_error_logger_default_export_name(self):
        server = self.generate(error_logger='@app/log')['server.generated.ts']
        self.assertIn('import { logError } from "@app/log";', server)

    def test_colliding_parameters_are_renamed(self):
        source = '''
            export interface ServerFunctions {
                send(socket: string, timeout: number, callback: string): string;
                echo(echo: string, echo_: string): void;
            }
            export interface ClientFunctions {}
        '''
        files = self.generate(source)
        client = files['client.generated.ts']
        self.assertIn(
            'export async function send(socket: Socket, socket_: string, timeout_: number, '
            'callback_: string, timeout: number = 5000)', client)
        self.assertIn("emitWithAck('send', socket_, timeout_, callback_);", client)
        self.assertIn("export function echo(socket: Socket, echo__: string, echo_: string): void {", client)

        server = files['server.generated.ts']
        self.assertIn(
            'const listener = async (socket_: string, timeout_: number, callback_: string, '
            'callback: (response: string | RpcError) => void) => {', server)
        self.assertIn('const result = await handler(socket_, timeout_, callback_);', server)

    def test_handler_name_collision_is_reported(self):
        source = '''
            export interface ServerFunctions { handleFoo(): void; }
            export interface ClientFunctions { foo(): void; }
        '''
        client = self.generate(source)['client.generated.ts']
        self.assertEqual(client.count('export function handleFoo('), 1)
        self.assertIn('W001', self.diagnostics.codes())


class TestFactoryGeneration(GeneratorTestCase):
    """Test the grouped RPC object."""

    def test_factory_interface_and_bindings(self):
        client = self.generate()['client.generated.ts']
        self.assertIn('// === CLIENT RPC FACTORY ===', client)
        self.assertIn('export interface ClientRpc {', client)
        self.assertIn('    readonly disposed: boolean;', client)
        self.assertIn('    notify(msg: string): void;', client)
        self.assertIn('    generateText(prompt: string, timeout?: number): Promise<string | RpcError>;', client)
        self.assertIn('export function createClientRpc(socket: Socket): ClientRpc {', client)
        self.assertIn(
            '        generateText: (prompt: string, timeout?: number) => generateText(socket, prompt, timeout),',
            client)
        self.assertIn('        notify: (msg: string) => notify(socket, msg),', client)
        self.assertIn(
            '        handleShowError: (handler: (error: Error) => Promise<void | RpcError>) => '
            'trackRegistration(() => handleShowError(socket, handler)),', client)

    def test_dispose_is_idempotent_and_reversed(self):
        server = self.generate()['server.generated.ts']
        body = function_body(server, 'export function createServerRpc(')
        self.assertIn("throw new Error('ServerRpc has been disposed');", body)
        self.assertIn('    const dispose = (): void => {\n'
                      '        if (isDisposed) {\n'
                      '            return;\n'
                      '        }\n'
                      '        isDisposed = true;\n', body)
        self.assertIn('for (const unsubscribe of activeRegistrations.splice(0).reverse()) {', body)
        self.assertIn('activeRegistrations.splice(index, 1);', body)
        self.assertIn('get disposed() {', body)

    def test_auto_cleanup(self):
        body = function_body(self.generate()['client.generated.ts'], 'export function createClientRpc(')
        self.assertNotIn("'disconnect'", body)

        body = function_body(self.generate(auto_cleanup=True)['client.generated.ts'],
                             'export function createClientRpc(')
        self.assertIn("    socket.on('disconnect', dispose);", body)
        self.assertIn("        socket.off('disconnect', dispose);", body)

    def test_no_factory(self):
        client = self.generate(emit_factory=False)['client.generated.ts']
        self.assertNotIn('createClientRpc', client)
        self.assertNotIn('ClientRpc', client)


class TestModuleOutput(GeneratorTestCase):
    """Test imports, the shared types module and index.ts."""

    def test_side_imports(self):
        files = self.generate()
        client = files['client.generated.ts']
        self.assertIn(
            'import type { Socket } from "socket.io-client";\n'
            'import type { RpcError, Unsubscribe } from "./types.generated";\n'
            'import { isRpcError } from "./types.generated";\n'
            'import type { Plan } from "./types";\n', client)
        self.assertIn('import type { Socket } from "socket.io";', files['server.generated.ts'])

    def test_header(self):
        client = self.generate()['client.generated.ts']
        self.assertTrue(client.startswith(
            '/**\n'
            ' * Auto-generated client functions from define.ts\n'
            ' * These functions allow CLIENT to call SERVER functions (ServerFunctions interface)\n'
            ' * and set up handlers for CLIENT functions (ClientFunctions interface)\n'
            ' */\n'))

    def test_types_module(self):
        types = self.generate()['types.generated.ts']
        self.assertIn('export interface RpcError {', types)
        self.assertIn('    code: string;', types)
        self.assertIn('export function isRpcError(obj: any): obj is RpcError {', types)
        self.assertIn('export type Unsubscribe = () => void;', types)

    def test_index_reexports(self):
        index = self.generate(package_name='@acme/rpc')['index.ts']
        self.assertIn(' * @acme/rpc\n', index)
        self.assertIn('export * from "./define";', index)
        self.assertIn('export * from "./types.generated";', index)
        self.assertIn('export * as client from "./client.generated";', index)
        self.assertIn('export * as server from "./server.generated";', index)

    def test_separate_output_directory(self):
        files = self.generate(output_dir=self.root / 'out' / 'rpc')
        self.assertIn('export * from "../../define";', files['index.ts'])
        self.assertIn('import type { Plan } from "../../types";', files['client.generated.ts'])

    def test_scaffold_files(self):
        files = self.generate(package_name='@acme/rpc')
        self.assertIn('"name": "@acme/rpc"', files['package.json'])
        self.assertIn('"composite": true', files['tsconfig.json'])

    def test_output_is_deterministic(self):
        self.assertEqual(self.generate(), self.generate())


class TestRelativeModulePath(unittest.TestCase):
    """Test module specifiers between generated files and user files."""

    def test_same_directory(self):
        self.assertEqual(relative_module_path(Path('/a/b'), Path('/a/b/define.ts')), './define')

    def test_declaration_file(self):
        self.assertEqual(relative_module_path(Path('/a/b'), Path('/a/b/types.d.ts')), './types')

    def test_child_directory(self):
        self.assertEqual(relative_module_path(Path('/a'), Path('/a/b/c/model.tsx')), './b/c/model')

    def test_parent_directory(self):
        self.assertEqual(relative_module_path(Path('/a/b/c'), Path('/a/x/model.ts')), '../../x/model')


if __name__ == '__main__':
    # Run tests with verbosity
    unittest.main(verbosity=2)
