"""
lispwat Compiler Errors

Defines exception classes for scanning, parsing and memory layout errors.
"""

from typing import Optional

from .tokens import Position, TokenType


class LispwatError(Exception):
    """Base exception for all lispwat errors."""
    
    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(self._format_message())
    
    def _format_message(self) -> str:
        """Format the error message with location information."""
        parts = []
        
        if self.filename:
            parts.append(self.filename)
        
        if self.line is not None:
            if parts:
                parts.append(f"{self.line}")
            else:
                parts.append(f"line {self.line}")
            
            if self.column is not None:
                parts.append(f"{self.column}")
        
        if parts:
            return f"{':'.join(parts)}: {self.message}"
        return self.message
    
    def with_filename(self, filename: str) -> 'LispwatError':
        """Attach a filename and refresh the formatted message."""
        self.filename = filename
        self.args = (self._format_message(),)
        return self


# =============================================================================
# Scanning
# =============================================================================

class ScanError(LispwatError):
    """Raised for lexical errors."""
    pass


class UnknownCharacter(ScanError):
    """A character that starts no token."""
    
    def __init__(self, position: Position, text: str):
        self.position = position
        self.text = text
        super().__init__(f"Unknown character {text!r}", position.line, position.column)


class UnterminatedString(ScanError):
    """A string literal with no closing quote."""
    
    def __init__(self, position: Position):
        self.position = position
        super().__init__("Unterminated string", position.line, position.column)


# =============================================================================
# Parsing
# =============================================================================

class ParseError(LispwatError):
    """Raised for grammar violations."""
    pass


class UnexpectedEndOfFile(ParseError):
    """The token stream ran out in the middle of a form."""
    
    def __init__(self):
        super().__init__("Unexpected end of file")


class UnexpectedToken(ParseError):
    """A token that is not valid at its place in the grammar."""
    
    def __init__(self, position: Position, token_type: TokenType):
        self.position = position
        self.token_type = token_type
        super().__init__(f"Unexpected token {token_type.name}", position.line, position.column)


class InvalidFunctionName(ParseError):
    """A defn form whose name is neither an identifier nor main."""
    
    def __init__(self, position: Position, token_type: TokenType):
        self.position = position
        self.token_type = token_type
        super().__init__(f"Invalid function name {token_type.name}",
                         position.line, position.column)


class DuplicateMainFunction(ParseError):
    """A second main definition in one program."""
    
    def __init__(self, position: Position):
        self.position = position
        super().__init__("main is already defined", position.line, position.column)


# =============================================================================
# Module layout
# =============================================================================

class MemoryLayoutError(LispwatError):
    """Raised when data segments do not fit in linear memory."""
    pass
