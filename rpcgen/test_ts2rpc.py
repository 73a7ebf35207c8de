#!/usr/bin/env python3
"""
End-to-end tests for the generator: writing, configuration and the CLI.

Run with: python3 -m pytest rpcgen/test_ts2rpc.py
   or: cd .. && python3 rpcgen/test_ts2rpc.py
"""

import sys
import os
# Add parent directory to path for proper imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
import json
import tempfile
import textwrap
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from rpcgen.config import GenerationConfig, build_config, load_config_file, parse_error_logger
from rpcgen.errors import ConfigError
from rpcgen.resolver import Precedence
from rpcgen.ts2rpc import SocketRpcGenerator, main


DEFINE = '''
    export interface ServerFunctions {
        generateText(prompt: string): string;
    }

    export interface ClientFunctions {
        showError(error: Error): void;
    }
'''


class CliTestCase(unittest.TestCase):
    """Runs the generator against a temporary directory."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()
        self.entry = self.write('define.ts', DEFINE)

    def write(self, name: str, source: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding='utf-8')
        return path

    def run_cli(self, *args: str):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(list(args))
        return code, stdout.getvalue(), stderr.getvalue()


class TestWriting(CliTestCase):
    """Test the files written by a run."""

    def test_writes_package(self):
        code, out, err = self.run_cli(str(self.entry))
        self.assertEqual(code, 0, err)
        for name in ('types.generated.ts', 'client.generated.ts', 'server.generated.ts',
                     'index.ts', 'package.json', 'tsconfig.json'):
            self.assertTrue((self.root / name).is_file(), name)
            self.assertIn(f'Written: {self.root / name}', out)

    def test_regeneration_is_byte_identical(self):
        self.run_cli(str(self.entry))
        first = {p.name: p.read_bytes() for p in self.root.iterdir()}

        generator = SocketRpcGenerator(build_config(self.entry))
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            written = generator.run()
        second = {p.name: p.read_bytes() for p in self.root.iterdir()}

        self.assertEqual(written, [])
        self.assertEqual(first, second)

    def test_files_use_unix_newlines(self):
        self.run_cli(str(self.entry))
        content = (self.root / 'client.generated.ts').read_bytes()
        self.assertNotIn(b'\r\n', content)
        self.assertTrue(content.endswith(b'}\n'))

    def test_scaffold_files_are_kept(self):
        package = self.write('package.json', '{"name": "mine"}\n')
        generator = SocketRpcGenerator(build_config(self.entry))
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            generator.run()
        self.assertEqual(package.read_text(encoding='utf-8'), '{"name": "mine"}\n')
        self.assertEqual(generator.diagnostics.codes(), ['I003'])
        self.assertTrue((self.root / 'tsconfig.json').is_file())

    def test_package_json_contents(self):
        self.run_cli(str(self.entry), '-p', '@acme/rpc')
        package = json.loads((self.root / 'package.json').read_text(encoding='utf-8'))
        self.assertEqual(package['name'], '@acme/rpc')
        self.assertEqual(package['dependencies']['socket.io-client'], '^4.8.1')
        self.assertEqual(package['peerDependencies']['socket.io'], '^4.0.0')

    def test_output_directory(self):
        code, _, err = self.run_cli(str(self.entry), '-o', str(self.root / 'out'))
        self.assertEqual(code, 0, err)
        index = (self.root / 'out' / 'index.ts').read_text(encoding='utf-8')
        self.assertIn('export * from "../define";', index)


class TestFailures(CliTestCase):
    """Test exit status and messages for fatal errors."""

    def test_missing_input(self):
        code, _, err = self.run_cli(str(self.root / 'missing.ts'))
        self.assertEqual(code, 1)
        self.assertIn('Input file not found', err)

    def test_missing_contract(self):
        entry = self.write('only_server.ts', 'export interface ServerFunctions {}')
        code, _, err = self.run_cli(str(entry))
        self.assertEqual(code, 1)
        self.assertIn('ClientFunctions', err)
        self.assertFalse((self.root / 'client.generated.ts').exists())

    def test_entry_syntax_error(self):
        entry = self.write('broken.ts', 'export interface ServerFunctions { a(: void; }')
        code, _, err = self.run_cli(str(entry))
        self.assertEqual(code, 1)
        self.assertIn('line 1', err)

    def test_write_failure(self):
        self.write('blocker', 'not a directory')
        code, _, err = self.run_cli(str(self.entry), '-o', str(self.root / 'blocker' / 'rpc'))
        self.assertEqual(code, 1)
        self.assertIn('Failed to write', err)

    def test_input_named_like_generated_file(self):
        entry = self.write('index.ts', DEFINE)
        code, _, err = self.run_cli(str(entry))
        self.assertEqual(code, 1)
        self.assertIn('would be overwritten', err)
        self.assertEqual(entry.read_text(encoding='utf-8'), textwrap.dedent(DEFINE))

    def test_no_input(self):
        code, _, err = self.run_cli()
        self.assertEqual(code, 1)
        self.assertIn('No input file given', err)

    def test_invalid_timeout(self):
        code, _, err = self.run_cli(str(self.entry), '-t', '-5')
        self.assertEqual(code, 1)
        self.assertIn('Invalid default timeout', err)

    def test_version(self):
        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(SystemExit) as cm:
                main(['--version'])
        self.assertEqual(cm.exception.code, 0)
        self.assertIn('1.0.0', out.getvalue())


class TestConfiguration(CliTestCase):
    """Test defaults, config files and overrides."""

    def test_defaults(self):
        config = GenerationConfig(input_path='define.ts')
        self.assertEqual(config.default_timeout, 5000)
        self.assertEqual(config.package_name, '@socket-rpc/rpc')
        self.assertEqual(config.precedence, Precedence.DESCENDANT)
        self.assertTrue(config.emit_factory)
        self.assertFalse(config.auto_cleanup)
        self.assertEqual(config.resolved_output_dir, Path('.'))
        self.assertIsNone(config.logger_import)

    def test_precedence_from_string(self):
        config = GenerationConfig(input_path='define.ts', precedence='ancestor')
        self.assertEqual(config.precedence, Precedence.ANCESTOR)
        with self.assertRaises(ConfigError):
            GenerationConfig(input_path='define.ts', precedence='sideways')

    def test_parse_error_logger(self):
        self.assertEqual(parse_error_logger('./log'), ('./log', 'logError'))
        self.assertEqual(parse_error_logger('@app/log#report'), ('@app/log', 'report'))
        with self.assertRaises(ConfigError):
            parse_error_logger('#report')
        with self.assertRaises(ConfigError):
            parse_error_logger('./log#1bad')

    def test_config_file_paths_are_relative_to_file(self):
        config_path = self.write('config/rpc.json', json.dumps({
            'inputPath': '../define.ts',
            'outputDir': '../out',
        }))
        values = load_config_file(config_path)
        self.assertEqual(values['input_path'], self.root / 'config' / '../define.ts')
        self.assertEqual(values['output_dir'], self.root / 'config' / '../out')

    def test_config_file_with_cli_overrides(self):
        config_path = self.write('rpc.json', json.dumps({
            'inputPath': 'define.ts',
            'packageName': '@cfg/rpc',
            'defaultTimeout': 100,
            'autoCleanup': True,
        }))
        code, _, err = self.run_cli('--config', str(config_path), '-t', '200')
        self.assertEqual(code, 0, err)

        client = (self.root / 'client.generated.ts').read_text(encoding='utf-8')
        self.assertIn('timeout: number = 200', client)
        self.assertIn("socket.on('disconnect', dispose);", client)
        package = json.loads((self.root / 'package.json').read_text(encoding='utf-8'))
        self.assertEqual(package['name'], '@cfg/rpc')

    def test_config_file_unknown_key(self):
        config_path = self.write('rpc.json', json.dumps({'inputPath': 'define.ts', 'timeout': 1}))
        code, _, err = self.run_cli('--config', str(config_path))
        self.assertEqual(code, 1)
        self.assertIn('Unknown key "timeout"', err)

    def test_config_file_invalid_json(self):
        config_path = self.write('rpc.json', '{ not json')
        with self.assertRaises(ConfigError):
            build_config(config_file=config_path)

    def test_cli_flags(self):
        code, _, err = self.run_cli(str(self.entry), '--no-factory', '--error-logger', './log#report',
                                    '--precedence', 'ancestor')
        self.assertEqual(code, 0, err)
        client = (self.root / 'client.generated.ts').read_text(encoding='utf-8')
        self.assertNotIn('createClientRpc', client)
        self.assertIn('import { report } from "./log";', client)


class TestWatchMode(CliTestCase):
    """Test regeneration on change."""

    def touch_later(self, path: Path, source: str) -> None:
        stat = path.stat()
        path.write_text(textwrap.dedent(source), encoding='utf-8')
        os.utime(path, (stat.st_atime + 10, stat.st_mtime + 10))

    def test_regenerates_after_change(self):
        generator = SocketRpcGenerator(build_config(self.entry))
        changed = DEFINE.replace('generateText(prompt: string): string;',
                                 'generateText(prompt: string): string;\n        ping(): void;')

        with mock.patch('rpcgen.ts2rpc.time.sleep', side_effect=lambda _: self.touch_later(self.entry, changed)):
            with redirect_stdout(io.StringIO()) as out, redirect_stderr(io.StringIO()):
                generator.watch(interval=0, max_polls=1)

        self.assertIn('changed, regenerating', out.getvalue())
        client = (self.root / 'client.generated.ts').read_text(encoding='utf-8')
        self.assertIn('export function ping(socket: Socket): void {', client)

    def test_watches_imported_files(self):
        self.write('base.ts', 'export interface Base { a(): void; }')
        entry = self.write('define.ts', '''
            import { Base } from './base';
            export interface ServerFunctions extends Base {}
            export interface ClientFunctions {}
        ''')
        generator = SocketRpcGenerator(build_config(entry))
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            generator.run()
        self.assertIn((self.root / 'base.ts').resolve(), generator.watched_files())

    def test_errors_do_not_stop_watching(self):
        generator = SocketRpcGenerator(build_config(self.entry))
        with mock.patch('rpcgen.ts2rpc.time.sleep',
                        side_effect=lambda _: self.touch_later(self.entry, 'export interface {')):
            with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()) as err:
                generator.watch(interval=0, max_polls=2)
        self.assertIn('Error:', err.getvalue())


if __name__ == '__main__':
    # Run tests with verbosity
    unittest.main(verbosity=2)
