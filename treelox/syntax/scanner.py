"""Scanner for treelox source text. Produces the flat token list the parser consumes.

Lexical grammar, loosely:

```
<number>     ::= <digit>+ ( "." <digit>+ )?         ; always a float at runtime
<string>     ::= '"' <any char but '"'>* '"'         ; may span lines, no escapes
<identifier> ::= <alpha> ( <alpha> | <digit> )*      ; <alpha> includes '_'
<comment>    ::= "//" <char>* | "/*" ... "*/"        ; block comments nest
```

Scanning never stops at an error: the error is reported, the offending character is skipped, and success() will
return False afterwards.
"""

from treelox.lang.error import ScanError
from treelox.syntax.token import KEYWORDS, Token, TokenType


class Scanner:
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }
    # char: (type if followed by '=', type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    }

    def __init__(self, source):
        self.source = source
        self.tokens = []

        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char about to be consumed
        self.line = 1

        self.had_error = False

    def scan_tokens(self):
        """Scans the whole source. The returned list always ends with an EOF token."""
        while not self.is_at_end():
            self.start = self.current
            try:
                self.scan_token()
            except ScanError:
                self.had_error = True

        self.tokens.append(Token.eof(self.line))
        return self.tokens

    def success(self):
        return not self.had_error

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            with_equal, alone = Scanner.DOUBLE[char]
            self.add_token(with_equal if self.match("=") else alone)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            elif self.match("*"):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char in " \r\t":
            pass
        elif char == "\n":
            self.line += 1
        elif char == '"':
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            raise ScanError("Unexpected character.", self.line)

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            raise ScanError("Unterminated string.", self.line)

        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alpha(self.peek()) or Scanner.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def block_comment(self):
        """Skips a block comment whose opening '/*' has been consumed. Nested comments must be balanced."""
        depth = 1
        while depth:
            if self.is_at_end():
                raise ScanError("Unterminated comment.", self.line)

            char = self.advance()
            if char == "\n":
                self.line += 1
            elif char == "*" and self.match("/"):
                depth -= 1
            elif char == "/" and self.match("*"):
                depth += 1

    @staticmethod
    def is_digit(char):
        return char.isascii() and char.isdigit()

    @staticmethod
    def is_alpha(char):
        return char.isascii() and (char.isalpha() or char == "_")

    def add_token(self, token_type, literal=None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def is_at_end(self):
        return self.current >= len(self.source)
