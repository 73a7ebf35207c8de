#!/usr/bin/env python3
"""
Unit tests for contract resolution and type-reference resolution.

Run with: python3 -m pytest rpcgen/test_resolver.py
   or: cd .. && python3 rpcgen/test_resolver.py
"""

import sys
import os
# Add parent directory to path for proper imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import tempfile
import textwrap
import unittest
from pathlib import Path

from rpcgen.diagnostics import GeneratorDiagnostics
from rpcgen.errors import ContractNotFoundError
from rpcgen.resolver import ContractResolver, Precedence, TypeReferenceResolver
from rpcgen.type_system import TypeRegistry


class ContractTestCase(unittest.TestCase):
    """Writes TypeScript sources to a temporary directory."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()
        self.diagnostics = GeneratorDiagnostics()
        self.registry = TypeRegistry(self.diagnostics)

    def write(self, name: str, source: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding='utf-8')
        return path

    def resolve(self, entry: Path, name: str = 'ServerFunctions',
                precedence: Precedence = Precedence.DESCENDANT):
        resolver = ContractResolver(self.registry, self.diagnostics, precedence)
        return resolver.resolve_contract(entry, name)


class TestContractFlattening(ContractTestCase):
    """Test extension-chain flattening and member deduplication."""

    def test_extension_chain_of_depth_n(self):
        depth = 6
        parts = ['interface L0 { m0(): void; }']
        for i in range(1, depth):
            parts.append(f'interface L{i} extends L{i - 1} {{ m{i}(): void; shared(): string; }}')
        parts.append(f'export interface ServerFunctions extends L{depth - 1} {{ own(): void; }}')
        entry = self.write('define.ts', '\n'.join(parts))

        resolved = self.resolve(entry)
        expected = [f'm{i}' for i in range(depth)]
        expected.insert(2, 'shared')
        expected.append('own')
        self.assertEqual(resolved.names(), expected)
        self.assertEqual(len(resolved.names()), len(set(resolved.names())))
        self.assertEqual([n.name for n in resolved.visit_order],
                         [f'L{i}' for i in range(depth)] + ['ServerFunctions'])

    def test_diamond_visits_shared_base_once(self):
        entry = self.write('define.ts', '''
            interface A { a(): void; }
            interface B extends A { b(): void; }
            interface C extends A { c(): void; }
            export interface ServerFunctions extends B, C { d(): void; }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual([n.name for n in resolved.visit_order], ['A', 'B', 'C', 'ServerFunctions'])
        self.assertEqual(resolved.names(), ['a', 'b', 'c', 'd'])

    def test_cycle_terminates(self):
        entry = self.write('define.ts', '''
            interface X extends ServerFunctions { x(): void; }
            export interface ServerFunctions extends X { s(): void; }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual(resolved.names(), ['x', 's'])

    def test_redeclared_member_descendant_wins(self):
        entry = self.write('define.ts', '''
            interface Base { ping(): number; base(): void; }
            export interface Greeter extends Base { ping(): string; hello(): void; }
        ''')
        resolved = self.resolve(entry, 'Greeter')
        self.assertEqual(resolved.names(), ['ping', 'base', 'hello'])
        ping = resolved.get('ping')
        self.assertEqual(ping.contract, 'Greeter')
        self.assertEqual(ping.return_type, 'string')

    def test_redeclared_member_ancestor_precedence(self):
        entry = self.write('define.ts', '''
            interface Base { ping(): number; base(): void; }
            export interface Greeter extends Base { ping(): string; hello(): void; }
        ''')
        resolved = self.resolve(entry, 'Greeter', Precedence.ANCESTOR)
        self.assertEqual(resolved.names(), ['ping', 'base', 'hello'])
        ping = resolved.get('ping')
        self.assertEqual(ping.contract, 'Base')
        self.assertEqual(ping.return_type, 'number')

    def test_parent_in_other_file(self):
        self.write('base.ts', '''
            export interface Base { shared(): string; }
        ''')
        self.write('more.ts', '''
            export interface Extra { extra(): void; }
        ''')
        entry = self.write('define.ts', '''
            import { Base as Renamed } from './base';
            import * as more from './more.js';
            export interface ServerFunctions extends Renamed, more.Extra { own(): void; }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual(resolved.names(), ['shared', 'extra', 'own'])
        self.assertEqual(resolved.get('shared').source_file, (self.root / 'base.ts').resolve())

    def test_parent_through_reexport(self):
        self.write('contracts/base.ts', 'export interface Base { fromBase(): void; }')
        self.write('contracts/index.ts', "export * from './base';")
        entry = self.write('define.ts', '''
            import { Base } from './contracts';
            export interface ServerFunctions extends Base {}
        ''')
        self.assertEqual(self.resolve(entry).names(), ['fromBase'])

    def test_unresolved_parent_is_reported(self):
        entry = self.write('define.ts', '''
            export interface ServerFunctions extends Missing { own(): void; }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual(resolved.names(), ['own'])
        self.assertEqual(self.diagnostics.codes(), ['W003'])

    def test_unparseable_parent_file(self):
        self.write('broken.ts', 'export interface Base { oops(: void; }')
        entry = self.write('define.ts', '''
            import { Base } from './broken';
            export interface ServerFunctions extends Base { own(): void; }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual(resolved.names(), ['own'])
        self.assertIn('W005', self.diagnostics.codes())
        self.assertIn('W003', self.diagnostics.codes())

    def test_missing_contract(self):
        entry = self.write('define.ts', 'export interface ServerFunctions {}')
        with self.assertRaises(ContractNotFoundError) as cm:
            self.resolve(entry, 'ClientFunctions')
        self.assertEqual(cm.exception.contract, 'ClientFunctions')

    def test_entry_syntax_error_propagates(self):
        entry = self.write('define.ts', 'export interface ServerFunctions { a(: void; }')
        with self.assertRaises(SyntaxError):
            self.resolve(entry)


class TestMemberFiltering(ContractTestCase):
    """Test which members are skipped and how they are reported."""

    def test_skipped_members(self):
        entry = self.write('define.ts', '''
            export interface ServerFunctions {
                'quoted-name'(): void;
                connect(): void;
                dispose(): void;
                delete(id: string): void;
                count: number;
                spread(...args: string[]): void;
                pick({ a }: Options): void;
                ok(value: string): boolean;
            }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual(resolved.names(), ['ok'])
        self.assertEqual(self.diagnostics.codes(), ['W001', 'W001', 'W001', 'W001', 'I001', 'W002', 'W002'])

    def test_generic_members_are_skipped(self):
        entry = self.write('define.ts', '''
            export interface ServerFunctions {
                echo<T>(x: T): T;
                pair: <A>(a: A) => A;
                ok(value: string): boolean;
            }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual(resolved.names(), ['ok'])
        self.assertEqual(self.diagnostics.codes(), ['W002', 'W002'])
        self.assertIn('<T>', self.diagnostics.warnings[0].message)

    def test_overloads_bind_first_declaration(self):
        entry = self.write('define.ts', '''
            export interface ServerFunctions {
                overload(a: string): string;
                overload(a: number): number;
                other(): void;
            }
        ''')
        for precedence in (Precedence.DESCENDANT, Precedence.ANCESTOR):
            with self.subTest(precedence=precedence):
                self.diagnostics.clear()
                resolver = ContractResolver(TypeRegistry(self.diagnostics), self.diagnostics, precedence)
                resolved = resolver.resolve_contract(entry, 'ServerFunctions')
                self.assertEqual(resolved.names(), ['overload', 'other'])
                self.assertEqual(resolved.get('overload').params[0].type_text, 'string')
                self.assertEqual(self.diagnostics.codes(), ['W001'])
                self.assertIn('line 3', self.diagnostics.warnings[0].message)

    def test_shared_contract_reports_once(self):
        entry = self.write('define.ts', '''
            interface Shared { connect(): void; }
            export interface ServerFunctions extends Shared {}
            export interface ClientFunctions extends Shared {}
        ''')
        resolver = ContractResolver(self.registry, self.diagnostics)
        resolver.resolve_contract(entry, 'ServerFunctions')
        resolver.resolve_contract(entry, 'ClientFunctions')
        self.assertEqual(self.diagnostics.codes(), ['W001'])

    def test_is_void_follows_return_text(self):
        entry = self.write('define.ts', '''
            export interface ServerFunctions {
                a(): void;
                b(): Promise<void>;
                c(): undefined;
                d: () => void;
                e();
            }
        ''')
        resolved = self.resolve(entry)
        self.assertEqual([sig.is_void for sig in resolved], [True, False, False, True, False])
        self.assertEqual(resolved.get('e').return_type, 'any')


class TestTypeReferences(ContractTestCase):
    """Test which files referenced types are imported from."""

    def build(self, entry: Path):
        resolver = ContractResolver(self.registry, self.diagnostics)
        contracts = [
            resolver.resolve_contract(entry, 'ServerFunctions'),
            resolver.resolve_contract(entry, 'ClientFunctions'),
        ]
        return TypeReferenceResolver(self.registry, self.diagnostics).build(entry, contracts)

    def test_types_resolved_across_files(self):
        self.write('types.ts', '''
            export interface Plan { id: string; }
            export type Status = 'ok' | 'error';
        ''')
        self.write('models/user.ts', 'export interface User { name: string; }')
        self.write('models/index.ts', "export * from './user';")
        entry = self.write('define.ts', '''
            import type { Plan, Status } from './types';
            import { User } from './models';

            export interface Local { value: number; }

            export interface ServerFunctions {
                getPlan(id: string): Promise<Plan | null>;
                whoami(): User;
                local(value: Local): void;
            }
            export interface ClientFunctions {
                status(s: Status, missing: Missing): void;
            }
        ''')
        table = self.build(entry)
        self.assertEqual(table.origin('Plan'), (self.root / 'types.ts').resolve())
        self.assertEqual(table.origin('Status'), (self.root / 'types.ts').resolve())
        self.assertEqual(table.origin('User'), (self.root / 'models/user.ts').resolve())
        self.assertEqual(table.origin('Local'), entry.resolve())
        self.assertNotIn('Missing', table)
        self.assertEqual(self.diagnostics.codes(), ['I002'])

    def test_entry_declaration_wins(self):
        self.write('types.ts', 'export interface Plan { id: string; }')
        entry = self.write('define.ts', '''
            import './types';
            export interface Plan { other: string; }
            export interface ServerFunctions { getPlan(): Plan; }
            export interface ClientFunctions {}
        ''')
        table = self.build(entry)
        self.assertEqual(table.origin('Plan'), entry.resolve())

    def test_generated_names_are_not_imported(self):
        entry = self.write('define.ts', '''
            export interface Unsubscribe { stop(): void; }
            export interface ServerFunctions {
                fail(): RpcError;
                stop(): Unsubscribe;
            }
            export interface ClientFunctions {}
        ''')
        table = self.build(entry)
        self.assertEqual(len(table), 0)
        self.assertEqual(self.diagnostics.codes(), ['W004'])

    def test_imports_for_groups_by_file(self):
        self.write('a.ts', 'export interface A {} export interface B {}')
        self.write('c.ts', 'export interface C {}')
        entry = self.write('define.ts', '''
            import { A, B } from './a';
            import { C } from './c';
            export interface ServerFunctions { x(a: A, c: C): B; }
            export interface ClientFunctions {}
        ''')
        table = self.build(entry)
        grouped = table.imports_for(['B', 'C'])
        self.assertEqual(grouped, {
            (self.root / 'a.ts').resolve(): ['B'],
            (self.root / 'c.ts').resolve(): ['C'],
        })


if __name__ == '__main__':
    # Run tests with verbosity
    unittest.main(verbosity=2)
