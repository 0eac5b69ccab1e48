"""
lispwat Scanner

Tokenizes lispwat source code into a stream of tokens.
"""

from typing import List, Union

from .tokens import Token, TokenType, Position, KEYWORDS
from .errors import UnknownCharacter, UnterminatedString


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    '[': TokenType.LEFT_BRACKET,
    ']': TokenType.RIGHT_BRACKET,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    '*': TokenType.STAR,
}

# first character -> (type alone, type when followed by '=')
EQUAL_SUFFIXED_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.DOUBLE_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
}

WHITESPACE = ' \t\r\n'


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_'


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    """Lexical analyzer for lispwat source code."""
    
    def __init__(self, source: str):
        """
        Initialize the scanner.
        
        Args:
            source: lispwat source code to tokenize
        """
        self.source = source
        self.start = 0                  # Start of current token
        self.current = 0                # Current position
        self.position = Position()      # Position of the next character
        self.start_position = Position()
    
    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.
        
        Whitespace and comments are dropped. The list always ends with
        exactly one EOF token.
        
        Returns:
            List of tokens
        """
        tokens = []
        while True:
            token = self.scan_token()
            if token.is_trivia():
                continue
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens
    
    def scan_token(self) -> Token:
        """
        Scan the next token, including whitespace and comment tokens.
        
        Raises:
            UnknownCharacter: If the next character starts no token
            UnterminatedString: If a string literal is never closed
        """
        self.start = self.current
        self.start_position = self.position
        
        if self.is_at_end():
            return self.make_token(TokenType.EOF)
        
        c = self.advance()
        
        if c in SINGLE_CHAR_TOKENS:
            return self.make_token(SINGLE_CHAR_TOKENS[c])
        
        if c in EQUAL_SUFFIXED_TOKENS:
            alone, with_equal = EQUAL_SUFFIXED_TOKENS[c]
            return self.make_token(with_equal if self.match('=') else alone)
        
        if c == ':':
            if is_alpha(self.peek()):
                return self.map_key()
            return self.make_token(TokenType.COLON)
        
        if c == '/':
            if self.match('/'):
                return self.comment()
            return self.make_token(TokenType.SLASH)
        
        if c == '"':
            return self.string()
        if c in WHITESPACE:
            return self.make_token(TokenType.WHITESPACE)
        if is_digit(c):
            return self.number()
        if is_alpha(c):
            return self.identifier()
        
        raise UnknownCharacter(self.start_position, self.source[self.start:self.current])
    
    def advance(self) -> str:
        """Consume and return the current character."""
        c = self.source[self.current]
        self.current += 1
        self.position = self.position.advance(c)
        return c
    
    def peek(self) -> str:
        """Return the current character without consuming it."""
        if self.is_at_end():
            return '\0'
        return self.source[self.current]
    
    def peek_next(self) -> str:
        """Return the next character without consuming it."""
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]
    
    def match(self, expected: str) -> bool:
        """Consume the current character if it matches expected."""
        if self.is_at_end() or self.peek() != expected:
            return False
        self.advance()
        return True
    
    def is_at_end(self) -> bool:
        """Check if we've reached the end of the source."""
        return self.current >= len(self.source)
    
    def make_token(self, type: TokenType, value=None) -> Token:
        """Build a token spanning start..current."""
        lexeme = self.source[self.start:self.current]
        return Token(type, lexeme, value, self.start_position)
    
    def comment(self) -> Token:
        """Scan a line comment; the newline is left for the next token."""
        while self.peek() != '\n' and not self.is_at_end():
            self.advance()
        return self.make_token(TokenType.COMMENT)
    
    def string(self) -> Token:
        """Scan a string literal. No escape sequences are processed."""
        while self.peek() != '"' and not self.is_at_end():
            self.advance()
        
        if self.is_at_end():
            raise UnterminatedString(self.start_position)
        
        # Consume closing quote
        self.advance()
        
        return self.make_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])
    
    def number(self) -> Token:
        """Scan a number literal, with an optional fractional part."""
        while is_digit(self.peek()):
            self.advance()
        
        # A '.' without a digit after it is left for the next token
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        
        text = self.source[self.start:self.current]
        value: Union[int, float] = float(text) if '.' in text else int(text)
        return self.make_token(TokenType.NUMBER, value)
    
    def scan_word(self) -> str:
        """Consume letters, digits and underscores; return the whole lexeme."""
        while is_alphanumeric(self.peek()):
            self.advance()
        return self.source[self.start:self.current]
    
    def identifier(self) -> Token:
        """Scan an identifier or reserved word."""
        text = self.scan_word()
        token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)
        value = text if token_type == TokenType.IDENTIFIER else None
        return self.make_token(token_type, value)
    
    def map_key(self) -> Token:
        """Scan a :name map key; the value is the name without the colon."""
        text = self.scan_word()
        return self.make_token(TokenType.MAP_KEY, text[1:])
