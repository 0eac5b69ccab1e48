"""
lispwat Token Definitions

Defines all token types, the reserved-word table and the Token class
for lexical analysis.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """All token types in the lispwat source language."""
    
    # Delimiters
    LEFT_PAREN = auto()     # (
    RIGHT_PAREN = auto()    # )
    LEFT_BRACE = auto()     # {
    RIGHT_BRACE = auto()    # }
    LEFT_BRACKET = auto()   # [
    RIGHT_BRACKET = auto()  # ]
    COMMA = auto()          # ,
    DOT = auto()            # .
    COLON = auto()          # :
    
    # Operators
    MINUS = auto()          # -
    PLUS = auto()           # +
    SLASH = auto()          # /
    STAR = auto()           # *
    BANG = auto()           # !
    BANG_EQUAL = auto()     # !=
    EQUAL = auto()          # =
    DOUBLE_EQUAL = auto()   # ==
    GREATER = auto()        # >
    GREATER_EQUAL = auto()  # >=
    LESS = auto()           # <
    LESS_EQUAL = auto()     # <=
    
    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()
    MAP_KEY = auto()        # :name
    
    # Reserved words
    AND = auto()
    OR = auto()
    DEF = auto()
    DEFN = auto()
    MAIN = auto()
    PRINT = auto()
    NIL = auto()
    TRUE = auto()
    FALSE = auto()
    COND = auto()
    FOR = auto()
    
    # Trivia, dropped before parsing
    COMMENT = auto()
    WHITESPACE = auto()
    
    EOF = auto()


# Reserved word lookup, exact match only
KEYWORDS = {
    'and': TokenType.AND,
    'or': TokenType.OR,
    'def': TokenType.DEF,
    'defn': TokenType.DEFN,
    'main': TokenType.MAIN,
    'print': TokenType.PRINT,
    'nil': TokenType.NIL,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'cond': TokenType.COND,
    'for': TokenType.FOR,
}

# Source text of operator-like tokens, used when reporting them
SYMBOLS = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.STAR: '*',
    TokenType.SLASH: '/',
    TokenType.AND: 'and',
    TokenType.OR: 'or',
    TokenType.PRINT: 'print',
}

TRIVIA = (TokenType.COMMENT, TokenType.WHITESPACE)


@dataclass(frozen=True)
class Position:
    """A 1-indexed line/column location in the source."""
    
    line: int = 1
    column: int = 1
    
    def advance(self, char: str) -> 'Position':
        """Return the position following the consumed character."""
        if char == '\n':
            return Position(self.line + 1, 1)
        return Position(self.line, self.column + 1)
    
    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """Represents a single token from the source code."""
    
    type: TokenType
    lexeme: str
    value: Any
    position: Position
    
    @property
    def line(self) -> int:
        return self.position.line
    
    @property
    def column(self) -> int:
        return self.position.column
    
    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.lexeme!r}, {self.value!r}, at={self.position})"
        return f"Token({self.type.name}, {self.lexeme!r}, at={self.position})"
    
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.type in KEYWORDS.values()
    
    def is_literal(self) -> bool:
        """Check if this token is a number or string literal."""
        return self.type in (TokenType.NUMBER, TokenType.STRING)
    
    def is_trivia(self) -> bool:
        """Check if this token is whitespace or a comment."""
        return self.type in TRIVIA


def format_tokens(tokens) -> str:
    """Render tokens one per line as 'line:column TYPE lexeme'."""
    lines = []
    for token in tokens:
        lexeme = f" {token.lexeme!r}" if token.lexeme else ""
        lines.append(f"{token.position} {token.type.name}{lexeme}")
    return "\n".join(lines)
