"""
TypeScript declaration parser implementation.

The Parser converts a stream of tokens from the Lexer into a SourceUnit
holding the module's imports, exports and declarations. Interfaces are
parsed in full; type expressions are kept as canonical text; value-level
code (class bodies, function bodies, initializers) is skipped.
"""

from typing import List, Optional, Tuple

from ..lexer import Token, TokenType
from .ast_nodes import (
    SourceUnit,
    ImportDirective,
    ExportDirective,
    ParameterDeclaration,
    InterfaceMember,
    HeritageClause,
    InterfaceDeclaration,
    TypeAliasDeclaration,
    EnumDeclaration,
    ClassDeclaration,
    FunctionDeclaration,
    VariableDeclaration,
    NamespaceDeclaration,
)
from .printer import render_tokens, render_type


# A type continues onto the next line after one of these tokens...
CONTINUATION_END = frozenset([
    '|', '&', '=>', ':', ',', '?', '.', '<', '(', '[', '{', '=',
    'extends', 'keyof', 'typeof', 'readonly', 'infer', 'is', 'as', 'new', 'unique',
])

# ...or when the next line starts with one of these.
CONTINUATION_START = frozenset(['|', '&', '=>', '.', '?', '?.', ':', 'extends', 'is'])

STATEMENT_START = frozenset([
    'export', 'import', 'interface', 'type', 'enum', 'class', 'abstract',
    'function', 'async', 'const', 'let', 'var', 'declare', 'namespace', 'module',
])

OPENERS = frozenset(['(', '[', '{', '<'])
CLOSERS = frozenset([')', ']', '}', '>'])

PARAMETER_MODIFIERS = frozenset(['public', 'private', 'protected', 'readonly', 'override'])


def matching_index(tokens: List[Token], start: int) -> int:
    """Return the index of the bracket closing tokens[start], or -1."""
    depth = 0
    for i in range(start, len(tokens)):
        value = tokens[i].value
        if value in OPENERS:
            depth += 1
        elif value in CLOSERS:
            depth -= 1
            if depth == 0:
                return i
    return -1


def split_tokens(tokens: List[Token], separator: str = ',') -> List[List[Token]]:
    """Split a token slice on a separator at bracket depth 0.

    Empty groups (e.g. from a trailing comma) are dropped.
    """
    groups: List[List[Token]] = []
    current: List[Token] = []
    depth = 0
    for tok in tokens:
        if tok.value in OPENERS:
            depth += 1
        elif tok.value in CLOSERS:
            depth -= 1
        if depth == 0 and tok.value == separator:
            if current:
                groups.append(current)
            current = []
            continue
        current.append(tok)
    if current:
        groups.append(current)
    return groups


def split_function_type(tokens: List[Token]) -> Optional[Tuple[List[Token], List[Token]]]:
    """
    Split a function type into (parameter tokens, return type tokens).

    Returns None unless the whole slice is a function type such as
    ``(a: string) => void`` or ``<T>(x: T) => T``. A parenthesized or
    union-wrapped function type is not itself a function type.
    """
    i = 0
    if tokens and tokens[0].value == '<':
        i = matching_index(tokens, 0) + 1
        if i <= 0:
            return None
    if i >= len(tokens) or tokens[i].value != '(':
        return None
    close = matching_index(tokens, i)
    if close < 0 or close + 1 >= len(tokens) or tokens[close + 1].value != '=>':
        return None
    return tokens[i + 1:close], tokens[close + 2:]


def type_parameter_names(tokens: List[Token]) -> List[str]:
    """Names declared by the tokens inside '<T, U extends X = Y>'."""
    names: List[str] = []
    for group in split_tokens(tokens, ','):
        words = [t for t in group if t.is_word]
        # Skip variance and const modifiers: <in out T>, <const T>
        while len(words) > 1 and words[0].value in ('in', 'out', 'const'):
            words = words[1:]
        if words:
            names.append(words[0].value)
    return names


def parse_parameter_tokens(tokens: List[Token]) -> List[ParameterDeclaration]:
    """Parse the tokens between a parameter list's parentheses."""
    params: List[ParameterDeclaration] = []
    for group in split_tokens(tokens, ','):
        j = 0
        while (j + 1 < len(group) and group[j].value in PARAMETER_MODIFIERS
               and (group[j + 1].is_word or group[j + 1].value in ('{', '[', '...'))):
            j += 1

        is_rest = group[j].value == '...'
        if is_rest:
            j += 1
        if j >= len(group):
            tok = group[-1]
            raise SyntaxError(
                f"Expected parameter name at line {tok.line}, column {tok.column}"
            )

        first = group[j]
        is_pattern = False
        if first.value in ('{', '['):
            close = matching_index(group, j)
            if close < 0:
                raise SyntaxError(
                    f"Unterminated parameter pattern at line {first.line}, column {first.column}"
                )
            name = render_tokens(group[j:close + 1])
            is_pattern = True
            j = close + 1
        elif first.is_word:
            name = first.value
            j += 1
        else:
            raise SyntaxError(
                f"Unexpected '{first.value}' in parameter list "
                f"at line {first.line}, column {first.column}"
            )

        is_optional = False
        if j < len(group) and group[j].value == '?':
            is_optional = True
            j += 1

        type_text = 'any'
        if j < len(group) and group[j].value == ':':
            rest = group[j + 1:]
            parts = split_tokens(rest, '=')
            if len(parts) > 1:
                rest = parts[0]
                is_optional = True
            type_text = render_type(rest) or 'any'
        elif j < len(group) and group[j].value == '=':
            is_optional = True

        # A 'this' parameter only types the receiver; it is not an argument.
        if name == 'this' and not is_pattern:
            continue

        params.append(ParameterDeclaration(
            name=name,
            type_text=type_text,
            is_optional=is_optional,
            is_rest=is_rest,
            is_pattern=is_pattern,
        ))
    return params


class Parser:
    """
    Recursive descent parser for TypeScript declaration files.

    Parses a stream of tokens into a SourceUnit.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        """Look ahead in the token stream without consuming."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def current(self) -> Token:
        """Return the current token."""
        return self.peek()

    def advance(self) -> Token:
        """Consume and return the current token."""
        token = self.current()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current().type in types

    def expect(self, token_type: TokenType, message: str = '') -> Token:
        """Consume the current token if it matches, otherwise raise an error."""
        if self.current().type != token_type:
            raise SyntaxError(
                f"Expected {token_type.name} but got {self.current().type.name} "
                f"at line {self.current().line}, column {self.current().column}: {message}"
            )
        return self.advance()

    def expect_name(self, message: str = '') -> Token:
        """Consume an identifier (contextual keywords are valid names)."""
        tok = self.current()
        if not tok.is_word:
            raise SyntaxError(
                f"Expected identifier but got '{tok.value or tok.type.name}' "
                f"at line {tok.line}, column {tok.column}: {message}"
            )
        return self.advance()

    def expect_string(self, message: str = '') -> str:
        """Consume a string literal and return its unquoted value."""
        tok = self.expect(TokenType.STRING_LITERAL, message)
        return tok.value[1:-1]

    def consume_semicolon(self) -> None:
        if self.match(TokenType.SEMICOLON):
            self.advance()

    # =========================================================================
    # TOKEN COLLECTION
    # =========================================================================

    def collect_balanced(self, open_value: str, close_value: str) -> List[Token]:
        """Consume a bracketed group and return the tokens inside it."""
        start = self.current()
        if start.value != open_value:
            raise SyntaxError(
                f"Expected '{open_value}' but got '{start.value or start.type.name}' "
                f"at line {start.line}, column {start.column}"
            )
        self.advance()
        depth = 1
        inner: List[Token] = []
        while True:
            if self.match(TokenType.EOF):
                raise SyntaxError(
                    f"Unterminated '{open_value}' starting at line {start.line}, "
                    f"column {start.column}"
                )
            tok = self.advance()
            if tok.value == open_value:
                depth += 1
            elif tok.value == close_value:
                depth -= 1
                if depth == 0:
                    return inner
            inner.append(tok)

    def collect_type_tokens(
        self,
        stop_values: Tuple[str, ...] = (';', ','),
        newline_ends: bool = True,
        stop_at_body: bool = False,
    ) -> List[Token]:
        """
        Collect the tokens of a type expression starting at the current token.

        The type ends at a depth-0 stop value or unbalanced closer, or at a
        line break that neither the previous line's last token nor the next
        line's first token continues. With ``stop_at_body`` a depth-0 '{'
        after a complete type ends it (a function or class body).
        """
        tokens: List[Token] = []
        depth = 0
        while not self.match(TokenType.EOF):
            tok = self.current()
            if depth == 0:
                if tok.value in stop_values or tok.value in CLOSERS:
                    break
                if tokens and tokens[-1].value not in CONTINUATION_END:
                    if stop_at_body and tok.value == '{':
                        break
                    if (newline_ends and tok.line > tokens[-1].line
                            and tok.value not in CONTINUATION_START):
                        break
            if tok.value in OPENERS:
                depth += 1
            elif tok.value in CLOSERS:
                depth -= 1
            tokens.append(self.advance())
        return tokens

    def skip_statement(self) -> None:
        """Skip a value-level statement, honoring automatic semicolon insertion."""
        depth = 0
        last: Optional[Token] = None
        while not self.match(TokenType.EOF):
            tok = self.current()
            if depth == 0:
                if tok.value == ';':
                    self.advance()
                    return
                if (last is not None and tok.line > last.line
                        and tok.value in STATEMENT_START
                        and last.value not in CONTINUATION_END):
                    return
                if tok.value in (')', ']', '}'):
                    self.advance()
                    return
            if tok.value in ('(', '[', '{'):
                depth += 1
            elif tok.value in (')', ']', '}'):
                depth -= 1
            last = self.advance()

    def skip_initializer(self) -> None:
        """Skip a value expression up to a depth-0 ',' or '}'."""
        depth = 0
        while not self.match(TokenType.EOF):
            value = self.current().value
            if depth == 0 and value in (',', '}'):
                return
            if value in ('(', '[', '{'):
                depth += 1
            elif value in (')', ']', '}'):
                depth -= 1
            self.advance()

    def skip_decorator(self) -> None:
        self.expect(TokenType.AT)
        self.expect_name('decorator')
        while self.match(TokenType.DOT):
            self.advance()
            self.expect_name('decorator')
        if self.match(TokenType.LPAREN):
            self.collect_balanced('(', ')')

    # =========================================================================
    # TOP-LEVEL PARSING
    # =========================================================================

    def parse(self) -> SourceUnit:
        """Parse the entire source file into a SourceUnit AST."""
        unit = SourceUnit()

        while not self.match(TokenType.EOF):
            if self.match(TokenType.SEMICOLON):
                self.advance()
            elif self.match(TokenType.AT):
                self.skip_decorator()
            elif self.match(TokenType.IMPORT) and self.peek(1).value not in ('(', '.'):
                directive = self.parse_import()
                if directive is not None:
                    unit.imports.append(directive)
            elif self.match(TokenType.EXPORT):
                self.parse_export(unit)
            elif not self.parse_declaration(unit, is_exported=False):
                self.skip_statement()

        return unit

    def parse_import(self) -> Optional[ImportDirective]:
        """Parse an import statement; returns None for 'import x = require()'."""
        self.expect(TokenType.IMPORT)

        is_type_only = False
        if self.match(TokenType.TYPE) and self.peek(1).value not in (',', 'from', '='):
            self.advance()
            is_type_only = True

        # Side-effect import: import './polyfill';
        if self.match(TokenType.STRING_LITERAL):
            directive = ImportDirective(module=self.expect_string(), is_type_only=is_type_only)
            self.consume_semicolon()
            return directive

        directive = ImportDirective(module='', is_type_only=is_type_only)

        if self.current().is_word and not self.match(TokenType.FROM):
            if self.peek(1).value == '=':
                self.skip_statement()
                return None
            directive.default_name = self.advance().value
            if self.match(TokenType.COMMA):
                self.advance()

        if self.match(TokenType.STAR):
            self.advance()
            self.expect(TokenType.AS, 'namespace import')
            directive.namespace = self.expect_name('namespace import').value
        elif self.match(TokenType.LBRACE):
            directive.symbols = self.parse_specifier_list()

        self.expect(TokenType.FROM, 'import')
        directive.module = self.expect_string('import path')

        # Import attributes: with { type: 'json' }
        if self.current().value in ('with', 'assert') and self.peek(1).value == '{':
            self.advance()
            self.collect_balanced('{', '}')
        self.consume_semicolon()
        return directive

    def parse_specifier_list(self) -> List[Tuple[str, Optional[str]]]:
        """Parse '{ A, B as C, type D }' into (name, alias) pairs."""
        self.expect(TokenType.LBRACE)
        symbols: List[Tuple[str, Optional[str]]] = []
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            if self.match(TokenType.COMMA):
                self.advance()
                continue

            # Inline 'type' modifier, but '{ type as X }' imports a symbol named 'type'
            nxt = self.peek(1)
            if (self.match(TokenType.TYPE)
                    and (nxt.is_word or nxt.type == TokenType.STRING_LITERAL)
                    and not (nxt.value == 'as' and self.peek(2).value not in (',', '}'))):
                self.advance()

            tok = self.current()
            if tok.type == TokenType.STRING_LITERAL:
                name = self.expect_string()
            else:
                name = self.expect_name('import/export specifier').value

            alias = None
            if self.match(TokenType.AS):
                self.advance()
                if self.match(TokenType.STRING_LITERAL):
                    alias = self.expect_string()
                else:
                    alias = self.expect_name('specifier alias').value
            symbols.append((name, alias))
        self.expect(TokenType.RBRACE)
        return symbols

    def parse_export(self, unit: SourceUnit) -> None:
        """Parse any form of export statement into the unit."""
        self.expect(TokenType.EXPORT)

        if self.match(TokenType.DEFAULT):
            self.advance()
            if not self.parse_declaration(unit, is_exported=True, is_default=True):
                self.skip_statement()
            return

        if self.match(TokenType.STAR):
            self.advance()
            namespace = None
            if self.match(TokenType.AS):
                self.advance()
                namespace = self.expect_name('export namespace').value
            self.expect(TokenType.FROM, 'export *')
            module = self.expect_string('export path')
            self.consume_semicolon()
            unit.exports.append(ExportDirective(module=module, is_wildcard=True, namespace=namespace))
            return

        if self.match(TokenType.TYPE) and self.peek(1).type == TokenType.LBRACE:
            self.advance()

        if self.match(TokenType.LBRACE):
            symbols = self.parse_specifier_list()
            module = None
            if self.match(TokenType.FROM):
                self.advance()
                module = self.expect_string('export path')
            self.consume_semicolon()
            unit.exports.append(ExportDirective(module=module, symbols=symbols))
            return

        # export = X; export import A = B; export as namespace X;
        if self.match(TokenType.EQ, TokenType.IMPORT, TokenType.AS):
            self.skip_statement()
            return

        if not self.parse_declaration(unit, is_exported=True):
            self.skip_statement()

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    def parse_declaration(self, unit: SourceUnit, is_exported: bool, is_default: bool = False) -> bool:
        """Parse a declaration into the unit; return False if none starts here."""
        tok = self.current()
        nxt = self.peek(1)

        if self.match(TokenType.DECLARE):
            self.advance()
            return self.parse_declaration(unit, is_exported, is_default)

        if self.match(TokenType.INTERFACE):
            unit.interfaces.append(self.parse_interface(is_exported, is_default))
            return True

        if self.match(TokenType.TYPE) and nxt.is_word and self.peek(2).value in ('=', '<'):
            unit.type_aliases.append(self.parse_type_alias(is_exported))
            return True

        if self.match(TokenType.ENUM) or (self.match(TokenType.CONST) and nxt.type == TokenType.ENUM):
            unit.enums.append(self.parse_enum(is_exported))
            return True

        if self.match(TokenType.CLASS) or (self.match(TokenType.ABSTRACT) and nxt.type == TokenType.CLASS):
            decl = self.parse_class(is_exported, is_default)
            if decl.name:
                unit.classes.append(decl)
            return True

        if self.match(TokenType.FUNCTION) or (self.match(TokenType.ASYNC) and nxt.type == TokenType.FUNCTION):
            decl = self.parse_function(is_exported, is_default)
            if decl.name:
                unit.functions.append(decl)
            return True

        if self.match(TokenType.CONST, TokenType.LET, TokenType.VAR):
            decl = self.parse_variable(is_exported)
            if decl is not None:
                unit.variables.append(decl)
            return True

        if (self.match(TokenType.NAMESPACE, TokenType.MODULE)
                and (nxt.is_word or nxt.type == TokenType.STRING_LITERAL)
                and nxt.line == tok.line):
            unit.namespaces.append(self.parse_namespace(is_exported))
            return True

        # declare global { ... }
        if tok.value == 'global' and nxt.value == '{':
            self.advance()
            self.collect_balanced('{', '}')
            return True

        return False

    def parse_type_parameter_names(self) -> List[str]:
        """Parse '<T, U extends X = Y>' and return the parameter names."""
        return type_parameter_names(self.collect_balanced('<', '>'))

    def parse_interface(self, is_exported: bool, is_default: bool = False) -> InterfaceDeclaration:
        """Parse an interface declaration."""
        start = self.expect(TokenType.INTERFACE)
        name = self.expect_name('interface name').value

        type_parameters: List[str] = []
        if self.match(TokenType.LT):
            type_parameters = self.parse_type_parameter_names()

        extends: List[HeritageClause] = []
        if self.match(TokenType.EXTENDS):
            self.advance()
            while True:
                parts = [self.expect_name('extends clause').value]
                while self.match(TokenType.DOT):
                    self.advance()
                    parts.append(self.expect_name('extends clause').value)
                type_arguments = ''
                if self.match(TokenType.LT):
                    type_arguments = '<' + render_tokens(self.collect_balanced('<', '>')) + '>'
                extends.append(HeritageClause(name='.'.join(parts), type_arguments=type_arguments))
                if self.match(TokenType.COMMA):
                    self.advance()
                    continue
                break

        members = self.parse_type_members()

        return InterfaceDeclaration(
            name=name,
            is_exported=is_exported,
            is_default=is_default,
            line=start.line,
            type_parameters=type_parameters,
            extends=extends,
            members=members,
        )

    def parse_type_members(self) -> List[InterfaceMember]:
        """Parse a '{ ... }' body of property and method signatures."""
        self.expect(TokenType.LBRACE, 'interface body')
        members: List[InterfaceMember] = []
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            if self.match(TokenType.SEMICOLON, TokenType.COMMA):
                self.advance()
                continue
            member = self.parse_type_member()
            if member is not None:
                members.append(member)
        self.expect(TokenType.RBRACE, 'interface body')
        return members

    def parse_type_member(self) -> Optional[InterfaceMember]:
        """
        Parse one member signature.

        Returns None for index, call and construct signatures, which have
        no name and can never become an RPC function.
        """
        start = self.current()

        is_readonly = False
        if (self.match(TokenType.READONLY)
                and self.peek(1).value not in ('(', ':', '?', '<', ';', ',', '}')):
            self.advance()
            is_readonly = True

        tok = self.current()
        is_identifier_name = True

        if tok.value == '[':
            inner = self.collect_balanced('[', ']')
            if len(inner) >= 2 and inner[0].is_word and inner[1].value in (':', 'in'):
                self.collect_type_tokens()
                return None
            name = '[' + render_tokens(inner) + ']'
            is_identifier_name = False
        elif tok.value in ('(', '<'):
            self.collect_type_tokens()
            return None
        elif tok.value == 'new' and self.peek(1).value in ('(', '<'):
            self.collect_type_tokens()
            return None
        elif tok.type in (TokenType.STRING_LITERAL, TokenType.NUMBER):
            name = self.advance().value
            is_identifier_name = False
        elif (tok.value in ('get', 'set') and self.peek(1).line == tok.line
              and (self.peek(1).is_word or self.peek(1).type == TokenType.STRING_LITERAL)):
            # Accessor signatures describe properties, never functions
            self.advance()
            name_tok = self.advance()
            self.collect_type_tokens()
            return InterfaceMember(
                name=name_tok.value,
                is_identifier_name=name_tok.is_word,
                line=start.line,
            )
        elif tok.is_word:
            name = self.advance().value
        else:
            raise SyntaxError(
                f"Unexpected '{tok.value or tok.type.name}' in interface body "
                f"at line {tok.line}, column {tok.column}"
            )

        is_optional = False
        if self.match(TokenType.QUESTION):
            self.advance()
            is_optional = True
        elif self.match(TokenType.BANG):
            self.advance()

        # Method signature: name<T>(params): R
        if self.match(TokenType.LPAREN, TokenType.LT):
            type_parameters: List[str] = []
            if self.match(TokenType.LT):
                type_parameters = self.parse_type_parameter_names()
            param_tokens = self.collect_balanced('(', ')')
            return_type = 'any'
            if self.match(TokenType.COLON):
                self.advance()
                return_type = render_type(self.collect_type_tokens()) or 'any'
            return InterfaceMember(
                name=name,
                kind='method',
                type_text=f'({render_tokens(param_tokens)}) => {return_type}',
                is_optional=is_optional,
                is_readonly=is_readonly,
                is_identifier_name=is_identifier_name,
                parameters=parse_parameter_tokens(param_tokens),
                return_type=return_type,
                type_parameters=type_parameters,
                line=start.line,
            )

        # Property signature: name: T
        type_tokens: List[Token] = []
        if self.match(TokenType.COLON):
            self.advance()
            type_tokens = self.collect_type_tokens()

        member = InterfaceMember(
            name=name,
            kind='property',
            type_text=render_type(type_tokens) or 'any',
            is_optional=is_optional,
            is_readonly=is_readonly,
            is_identifier_name=is_identifier_name,
            line=start.line,
        )

        function_type = split_function_type(type_tokens)
        if function_type is not None:
            param_tokens, return_tokens = function_type
            member.parameters = parse_parameter_tokens(param_tokens)
            member.return_type = render_type(return_tokens) or 'any'
            if type_tokens[0].value == '<':
                member.type_parameters = type_parameter_names(
                    type_tokens[1:matching_index(type_tokens, 0)]
                )
        return member

    def parse_type_alias(self, is_exported: bool) -> TypeAliasDeclaration:
        start = self.expect(TokenType.TYPE)
        name = self.expect_name('type alias name').value
        type_parameters: List[str] = []
        if self.match(TokenType.LT):
            type_parameters = self.parse_type_parameter_names()
        self.expect(TokenType.EQ, 'type alias')
        type_text = render_type(self.collect_type_tokens(stop_values=(';',)))
        self.consume_semicolon()
        return TypeAliasDeclaration(
            name=name,
            is_exported=is_exported,
            line=start.line,
            type_parameters=type_parameters,
            type_text=type_text,
        )

    def parse_enum(self, is_exported: bool) -> EnumDeclaration:
        is_const = False
        if self.match(TokenType.CONST):
            self.advance()
            is_const = True
        start = self.expect(TokenType.ENUM)
        name = self.expect_name('enum name').value
        self.expect(TokenType.LBRACE, 'enum body')

        members: List[str] = []
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            if self.match(TokenType.COMMA):
                self.advance()
                continue
            tok = self.advance()
            members.append(tok.value[1:-1] if tok.type == TokenType.STRING_LITERAL else tok.value)
            if self.match(TokenType.EQ):
                self.advance()
                self.skip_initializer()
        self.expect(TokenType.RBRACE, 'enum body')

        return EnumDeclaration(
            name=name,
            is_exported=is_exported,
            line=start.line,
            members=members,
            is_const=is_const,
        )

    def parse_class(self, is_exported: bool, is_default: bool = False) -> ClassDeclaration:
        is_abstract = False
        if self.match(TokenType.ABSTRACT):
            self.advance()
            is_abstract = True
        start = self.expect(TokenType.CLASS)
        name = ''
        if self.current().is_word and not self.match(TokenType.EXTENDS, TokenType.IMPLEMENTS):
            name = self.advance().value
        self.collect_type_tokens(stop_values=(), newline_ends=False, stop_at_body=True)
        self.collect_balanced('{', '}')
        return ClassDeclaration(
            name=name,
            is_exported=is_exported,
            is_default=is_default,
            line=start.line,
            is_abstract=is_abstract,
        )

    def parse_function(self, is_exported: bool, is_default: bool = False) -> FunctionDeclaration:
        if self.match(TokenType.ASYNC):
            self.advance()
        start = self.expect(TokenType.FUNCTION)
        if self.match(TokenType.STAR):
            self.advance()
        name = self.advance().value if self.current().is_word else ''
        if self.match(TokenType.LT):
            self.collect_balanced('<', '>')
        self.collect_balanced('(', ')')
        if self.match(TokenType.COLON):
            self.advance()
            self.collect_type_tokens(stop_values=(';',), stop_at_body=True)
        if self.match(TokenType.LBRACE):
            self.collect_balanced('{', '}')
        else:
            self.consume_semicolon()
        return FunctionDeclaration(
            name=name,
            is_exported=is_exported,
            is_default=is_default,
            line=start.line,
        )

    def parse_variable(self, is_exported: bool) -> Optional[VariableDeclaration]:
        start = self.advance()
        decl = None
        if self.current().is_word:
            decl = VariableDeclaration(
                name=self.current().value,
                is_exported=is_exported,
                line=start.line,
                kind=start.value,
            )
        self.skip_statement()
        return decl

    def parse_namespace(self, is_exported: bool) -> NamespaceDeclaration:
        start = self.advance()
        if self.match(TokenType.STRING_LITERAL):
            name = self.expect_string()
        else:
            parts = [self.expect_name('namespace name').value]
            while self.match(TokenType.DOT):
                self.advance()
                parts.append(self.expect_name('namespace name').value)
            name = '.'.join(parts)
        if self.match(TokenType.LBRACE):
            self.collect_balanced('{', '}')
        else:
            self.consume_semicolon()
        return NamespaceDeclaration(name=name, is_exported=is_exported, line=start.line)
