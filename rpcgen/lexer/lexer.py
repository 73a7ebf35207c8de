"""
Lexer implementation for TypeScript declaration files.

The Lexer tokenizes TypeScript source code into a stream of tokens
that can be consumed by the parser. Only the lexical subset needed to
read contract definitions is recognized; value-level code is tokenized
well enough for the parser to skip over it.
"""

from typing import List

from .tokens import Token, TokenType, KEYWORDS, THREE_CHAR_OPS, TWO_CHAR_OPS, SINGLE_CHAR_OPS


class Lexer:
    """
    Lexer for TypeScript source code.

    Converts source text into a list of tokens for parsing.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def peek(self, offset: int = 0) -> str:
        """Look ahead in the source without consuming."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ''
        return self.source[pos]

    def advance(self) -> str:
        """Consume and return the current character."""
        ch = self.peek()
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def skip_whitespace(self) -> None:
        """Skip over whitespace characters (including a leading BOM)."""
        ch = self.peek()
        while ch and ch in ' \t\r\n\ufeff\u00a0':
            self.advance()
            ch = self.peek()

    def skip_comment(self) -> None:
        """Skip over single-line and multi-line comments."""
        if self.peek() == '/' and self.peek(1) == '/':
            while self.peek() and self.peek() != '\n':
                self.advance()
        elif self.peek() == '/' and self.peek(1) == '*':
            self.advance()  # skip /
            self.advance()  # skip *
            while self.peek():
                if self.peek() == '*' and self.peek(1) == '/':
                    self.advance()  # skip *
                    self.advance()  # skip /
                    break
                self.advance()

    def read_string(self) -> str:
        """Read a quoted string literal including its quotes."""
        quote = self.advance()
        result = quote
        while self.peek() and self.peek() != quote and self.peek() != '\n':
            if self.peek() == '\\':
                result += self.advance()
            result += self.advance()
        if self.peek() == quote:
            result += self.advance()
        return result

    def read_template(self) -> str:
        """Read a template literal, including nested ${...} substitutions."""
        result = self.advance()  # opening backtick
        while self.peek() and self.peek() != '`':
            if self.peek() == '\\':
                result += self.advance()
                result += self.advance()
            elif self.peek() == '$' and self.peek(1) == '{':
                result += self.advance()
                result += self.advance()
                depth = 1
                while self.peek() and depth > 0:
                    ch = self.peek()
                    if ch in '"\'':
                        result += self.read_string()
                        continue
                    if ch == '`':
                        result += self.read_template()
                        continue
                    if ch == '{':
                        depth += 1
                    elif ch == '}':
                        depth -= 1
                    result += self.advance()
            else:
                result += self.advance()
        if self.peek() == '`':
            result += self.advance()
        return result

    def read_number(self) -> str:
        """Read a numeric literal (decimal, hex, octal, binary or bigint)."""
        result = ''
        if self.peek() == '0' and self.peek(1) in ('x', 'X', 'o', 'O', 'b', 'B'):
            result += self.advance()
            result += self.advance()
            while self.peek() and (self.peek().isalnum() or self.peek() == '_'):
                result += self.advance()
            return result

        while self.peek() and (self.peek().isdigit() or self.peek() == '_'):
            result += self.advance()
        if self.peek() == '.' and self.peek(1).isdigit():
            result += self.advance()
            while self.peek() and (self.peek().isdigit() or self.peek() == '_'):
                result += self.advance()
        if self.peek() in ('e', 'E') and (self.peek(1).isdigit() or self.peek(1) in ('+', '-')):
            result += self.advance()
            if self.peek() in ('+', '-'):
                result += self.advance()
            while self.peek() and self.peek().isdigit():
                result += self.advance()
        if self.peek() == 'n':
            result += self.advance()
        return result

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        result = ''
        while self.peek() and (self.peek().isalnum() or self.peek() in '_$'):
            result += self.advance()
        return result

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source and return a list of tokens.

        Returns:
            List of Token objects, ending with an EOF token.
        """
        while self.pos < len(self.source):
            self.skip_whitespace()

            if self.pos >= len(self.source):
                break

            if self.peek() == '/' and self.peek(1) in ('/', '*'):
                self.skip_comment()
                continue

            start_line = self.line
            start_col = self.column
            ch = self.peek()

            if ch in ('"', "'"):
                value = self.read_string()
                self.tokens.append(Token(TokenType.STRING_LITERAL, value, start_line, start_col))
                continue

            if ch == '`':
                value = self.read_template()
                self.tokens.append(Token(TokenType.TEMPLATE_LITERAL, value, start_line, start_col))
                continue

            if ch.isdigit() or (ch == '.' and self.peek(1).isdigit()):
                value = self.read_number()
                self.tokens.append(Token(TokenType.NUMBER, value, start_line, start_col))
                continue

            if ch.isalpha() or ch in '_$':
                value = self.read_identifier()
                token_type = KEYWORDS.get(value, TokenType.IDENTIFIER)
                self.tokens.append(Token(token_type, value, start_line, start_col))
                continue

            three_char = self.source[self.pos:self.pos + 3]
            if three_char in THREE_CHAR_OPS:
                for _ in range(3):
                    self.advance()
                self.tokens.append(Token(THREE_CHAR_OPS[three_char], three_char, start_line, start_col))
                continue

            two_char = self.source[self.pos:self.pos + 2]
            # '?.' followed by a digit is a conditional with a decimal (a?.5:b)
            if two_char in TWO_CHAR_OPS and not (two_char == '?.' and self.peek(2).isdigit()):
                self.advance()
                self.advance()
                self.tokens.append(Token(TWO_CHAR_OPS[two_char], two_char, start_line, start_col))
                continue

            if ch in SINGLE_CHAR_OPS:
                self.advance()
                self.tokens.append(Token(SINGLE_CHAR_OPS[ch], ch, start_line, start_col))
                continue

            # Unknown character - skip
            self.advance()

        self.tokens.append(Token(TokenType.EOF, '', self.line, self.column))
        return self.tokens
