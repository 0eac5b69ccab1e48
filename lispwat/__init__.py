"""
lispwat Compiler Package

Compiles a small S-expression language to WebAssembly text format.

Example:
    import lispwat

    text = lispwat.compile_source('(defn main (print "Hello world"))')
    lispwat.write_module("main.wat", text)
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .tokens import Token, TokenType, Position
from .scanner import Scanner
from .ast import *
from .parser import Parser
from .instructions import OpData
from .emitter import Emitter, EmitterOptions
from .errors import (
    LispwatError, ScanError, UnknownCharacter, UnterminatedString, ParseError,
    UnexpectedEndOfFile, UnexpectedToken, InvalidFunctionName, DuplicateMainFunction,
    MemoryLayoutError,
)

__version__ = "0.1.0"
__all__ = [
    "Token",
    "TokenType",
    "Position",
    "Scanner",
    "Parser",
    "Program",
    "Emitter",
    "EmitterOptions",
    "OpData",
    "LispwatError",
    "ScanError",
    "ParseError",
    "compile_source",
    "compile_file",
    "parse_source",
    "write_module",
]

logger = logging.getLogger(__name__)


def parse_source(source: str) -> Program:
    """
    Scan and parse source code.
    
    Raises:
        ScanError: On the first unrecognized character
        ParseError: On the first grammar violation
    """
    tokens = Scanner(source).tokenize()
    program = Parser(tokens).parse()
    logger.debug("parsed %d tokens into %d top-level forms", len(tokens), len(program))
    return program


def compile_source(source: str, options: Optional[EmitterOptions] = None) -> str:
    """
    Compile lispwat source code to WebAssembly text.
    
    Args:
        source: lispwat source code string
        options: Emitter settings, defaults when omitted
        
    Returns:
        Module text ready to be assembled
        
    Raises:
        LispwatError: If compilation fails
    """
    program = parse_source(source)
    return Emitter(options).emit(program)


def compile_file(filepath: Union[str, Path], options: Optional[EmitterOptions] = None) -> str:
    """
    Compile a lispwat source file to WebAssembly text.
    
    Args:
        filepath: Path to the source file
        
    Returns:
        Module text ready to be assembled
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()
    try:
        return compile_source(source, options)
    except LispwatError as e:
        e.with_filename(str(filepath))
        raise


def write_module(filepath: Union[str, Path], text: str) -> None:
    """Write complete module text to a file."""
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(text)
    logger.debug("wrote %d bytes to %s", len(text), filepath)
