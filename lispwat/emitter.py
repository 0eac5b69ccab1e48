"""
lispwat Emitter

Walks the AST and writes a WebAssembly text module.

Imports and data segments are discovered while walking function bodies
but have to appear in the module header, so the walk collects them and
the header is assembled only after the whole body has been emitted.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from .tokens import TokenType
from .ast import (
    ASTNode, ASTVisitor, NullNode, ConstantNode, KeywordNode, VariableNode, MapNode,
    VectorNode, ListNode, FunctionNode, MainNode, Program,
)
from .instructions import (
    CLOSE, Add, Const, Drop, FdWrite, GetLocal, I32Param, OpData, Store, Subtract,
    WasiImport,
)
from .memory import build_memory_image, overlapping_segments

logger = logging.getLogger(__name__)

# Fixed linear-memory layout used by print:
#   0..4   iovec pointer field
#   4..8   iovec length field
#   8..    string data
#   20     bytes-written output of fd_write
IOVEC_ADDRESS = 0
IOVEC_LENGTH_ADDRESS = 4
NWRITTEN_ADDRESS = 20
STDOUT = 1

ENTRY_FUNCTION = "$main"


@dataclass
class EmitterOptions:
    """Output settings for the emitter."""
    
    # Appended to every string literal's bytes
    string_suffix: str = "\n"
    # Linear-memory offset string literals are loaded at
    data_offset: int = 8
    # External name the entry function is exported under
    entry_point: str = "_start"
    memory_pages: int = 1


class Emitter(ASTVisitor):
    """Generates WebAssembly text from an AST."""
    
    def __init__(self, options: Optional[EmitterOptions] = None):
        self.options = options or EmitterOptions()
        self.imports: List[WasiImport] = []
        self.data: List[OpData] = []
        self.has_entry = False
        self.locals: Optional[Dict[str, int]] = None
    
    def emit(self, program: Iterable[ASTNode]) -> str:
        """
        Generate the module text for a program.
        
        Args:
            program: Program node, or any iterable of top-level nodes
            
        Returns:
            The complete module text
            
        Raises:
            MemoryLayoutError: If a data segment does not fit in the memory
        """
        self.imports = []
        self.data = []
        self.has_entry = False
        self.locals = None
        
        body = self.build_body(program)
        module = self.assemble(body)
        
        for first, second in overlapping_segments(self.data):
            logger.warning(
                "data segments %d and %d overlap at fixed offset %d; "
                "only the last one written is printed correctly",
                first, second, self.data[second].offset,
            )
        
        build_memory_image(self.data, self.options.memory_pages)
        return module
    
    # =========================================================================
    # Module assembly
    # =========================================================================
    
    def assemble(self, body: List[str]) -> str:
        """Wrap the emitted body in the module header and exports."""
        sections = [str(item) for item in self.imports]
        sections.append(self.memory_declaration())
        sections.extend(str(item) for item in self.data)
        sections.extend(body)
        if self.has_entry:
            sections.append(self.export_declaration())
        
        lines = ["(module"]
        lines.extend(f"  {section}" for section in sections)
        lines.append(")")
        return "\n".join(lines)
    
    def memory_declaration(self) -> str:
        return f'(memory {self.options.memory_pages}) (export "memory" (memory 0))'
    
    def export_declaration(self) -> str:
        return f'(export "{self.options.entry_point}" (func {ENTRY_FUNCTION}))'
    
    def build_body(self, nodes: Iterable[ASTNode]) -> List[str]:
        body = []
        for node in nodes:
            body.extend(node.accept(self))
        return body
    
    def instructions(self, node: ASTNode) -> List[str]:
        """Emit a node nested inside a call or function body."""
        return node.accept(self)
    
    def require_import(self, host_function: WasiImport) -> None:
        if host_function not in self.imports:
            self.imports.append(host_function)
    
    # =========================================================================
    # Functions
    # =========================================================================
    
    def visit_main(self, node: MainNode) -> List[str]:
        """Emit the exported entry function."""
        self.has_entry = True
        self.locals = {name: index for index, name in enumerate(node.param_names) if name}
        
        function = [f"(func {ENTRY_FUNCTION}"]
        function.extend(str(I32Param(index)) for index in range(len(node.params)))
        for expression in node.body:
            function.extend(self.instructions(expression))
        function.append(CLOSE)
        
        self.locals = None
        return function
    
    def visit_function(self, node: FunctionNode) -> List[str]:
        logger.debug("skipping definition of %s: only main is emitted", node.name.name)
        return []
    
    # =========================================================================
    # Calls
    # =========================================================================
    
    def visit_list(self, node: ListNode) -> List[str]:
        """Emit a call, dispatching on its head keyword."""
        if not isinstance(node.head, KeywordNode):
            logger.warning("cannot emit call with non-keyword head %r", node.head)
            return []
        
        operator = node.head.token_type
        if operator == TokenType.PLUS:
            return self.emit_fold(Add(), node.rest, "+")
        if operator == TokenType.MINUS:
            if len(node.rest) == 1:
                return self.emit_negate(node.rest[0])
            return self.emit_fold(Subtract(), node.rest, "-")
        if operator == TokenType.PRINT:
            return self.emit_print(node.rest)
        
        logger.warning("builtin %r is not supported by the emitter", node.head.symbol)
        return []
    
    def emit_fold(self, opcode, args: Sequence[ASTNode], symbol: str) -> List[str]:
        """
        Fold arguments left to right: (op a b c) -> (op (op a b) c).
        
        All nested operations are opened up front and each one is closed
        right after its right-hand operand.
        """
        if not args:
            logger.warning("%r called without arguments", symbol)
            return []
        
        body = [str(opcode)] * (len(args) - 1)
        body.extend(self.instructions(args[0]))
        for argument in args[1:]:
            body.extend(self.instructions(argument))
            body.append(CLOSE)
        return body
    
    def emit_negate(self, argument: ASTNode) -> List[str]:
        body = [str(Subtract()), str(Const(0))]
        body.extend(self.instructions(argument))
        body.append(CLOSE)
        return body
    
    def emit_print(self, args: Sequence[ASTNode]) -> List[str]:
        """
        Write each argument to standard output with fd_write.
        
        The I/O vector lives at fixed addresses, so every print in a module
        shares it along with the data offset of its string. Only string
        literals put bytes at that offset; any other argument is still
        emitted in place but its write length is 0.
        """
        if args:
            self.require_import(WasiImport.FD_WRITE)
        body = []
        
        for argument in args:
            if isinstance(argument, ConstantNode) and argument.is_string:
                length = len(self.encode_string(argument.value))
            else:
                logger.warning("print writes no bytes for non-string argument %r", argument)
                length = 0
            
            body.append(str(Store(IOVEC_ADDRESS, self.options.data_offset)))
            body.append(str(Store(IOVEC_LENGTH_ADDRESS, length)))
            body.append(str(FdWrite(
                Const(STDOUT),
                Const(IOVEC_ADDRESS),
                Const(1),
                Const(NWRITTEN_ADDRESS),
            )))
            body.extend(self.instructions(argument))
            body.append(str(Drop()))
        
        return body
    
    # =========================================================================
    # Values
    # =========================================================================
    
    def visit_constant(self, node: ConstantNode) -> List[str]:
        """Integers are pushed; strings become data segments."""
        value = node.value
        
        if isinstance(value, str):
            self.data.append(OpData(Const(self.options.data_offset), self.encode_string(value)))
            return []
        if isinstance(value, int) and not isinstance(value, bool):
            return [str(Const(value))]
        
        logger.warning("constant %r has no i32 representation", value)
        return []
    
    def encode_string(self, value: str) -> bytes:
        return (value + self.options.string_suffix).encode("utf-8")
    
    def visit_variable(self, node: VariableNode) -> List[str]:
        if self.locals is None:
            logger.debug("skipping top-level variable %s", node.name)
            return []
        if node.name not in self.locals:
            logger.warning("unbound variable %s", node.name)
            return []
        return [str(GetLocal(self.locals[node.name]))]
    
    def visit_null(self, node: NullNode) -> List[str]:
        return []
    
    def visit_keyword(self, node: KeywordNode) -> List[str]:
        logger.debug("skipping bare keyword %s", node.symbol)
        return []
    
    def visit_map(self, node: MapNode) -> List[str]:
        logger.debug("skipping map literal with %d entries", len(node.items))
        return []
    
    def visit_vector(self, node: VectorNode) -> List[str]:
        logger.debug("skipping vector literal with %d items", len(node.items))
        return []
    
    def visit_program(self, node: Program) -> List[str]:
        return self.build_body(node.forms)
