"""
lispwat Abstract Syntax Tree

Defines AST node classes for the lispwat language. Nodes are built once
by the parser and only read afterwards.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence, Tuple, Union

from .tokens import TokenType, SYMBOLS


# =============================================================================
# Base Class
# =============================================================================

class ASTNode(ABC):
    """Base class for all AST nodes."""
    
    @abstractmethod
    def accept(self, visitor: 'ASTVisitor') -> Any:
        """Accept a visitor for traversal."""
        pass


def _freeze(node: ASTNode, *names: str) -> None:
    """Store the named sequence fields as tuples so nodes stay hashable."""
    for name in names:
        object.__setattr__(node, name, tuple(getattr(node, name)))


# =============================================================================
# Leaves
# =============================================================================

@dataclass(frozen=True)
class NullNode(ASTNode):
    """An absent or unsupported item."""
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_null(self)


@dataclass(frozen=True)
class ConstantNode(ASTNode):
    """Integer, float or string literal."""
    value: Union[int, float, str]
    
    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_constant(self)


@dataclass(frozen=True)
class KeywordNode(ASTNode):
    """Reserved operator or builtin (+, -, print, and, or)."""
    token_type: TokenType
    
    @property
    def symbol(self) -> str:
        return SYMBOLS.get(self.token_type, self.token_type.name.lower())
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_keyword(self)


@dataclass(frozen=True)
class VariableNode(ASTNode):
    """Reference to a name."""
    name: str
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_variable(self)


# =============================================================================
# Collections
# =============================================================================

@dataclass(frozen=True)
class MapItem:
    """One key/value entry of a map literal."""
    key: str
    value: ASTNode


@dataclass(frozen=True)
class MapNode(ASTNode):
    """Map literal. Entries keep source order; duplicate keys are kept."""
    items: Tuple[MapItem, ...] = ()
    
    def __post_init__(self):
        _freeze(self, "items")
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_map(self)


@dataclass(frozen=True)
class VectorNode(ASTNode):
    """Vector literal, also used for parameter lists."""
    items: Tuple[ASTNode, ...] = ()
    
    def __post_init__(self):
        _freeze(self, "items")
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_vector(self)


@dataclass(frozen=True)
class ListNode(ASTNode):
    """Call-shaped form: head names the operation, rest are the operands."""
    head: ASTNode
    rest: Tuple[ASTNode, ...] = ()
    
    def __post_init__(self):
        _freeze(self, "rest")
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_list(self)


# =============================================================================
# Definitions
# =============================================================================

@dataclass(frozen=True)
class FunctionNode(ASTNode):
    """Named function definition (defn name [params] body...)."""
    name: VariableNode
    params: Tuple[ASTNode, ...] = ()
    body: Tuple[ASTNode, ...] = ()
    
    def __post_init__(self):
        _freeze(self, "params", "body")
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_function(self)


@dataclass(frozen=True)
class MainNode(ASTNode):
    """The program entry point (defn main [params] body...)."""
    params: Tuple[ASTNode, ...] = ()
    body: Tuple[ASTNode, ...] = ()
    
    def __post_init__(self):
        _freeze(self, "params", "body")
    
    @property
    def param_names(self) -> List[str]:
        return [p.name if isinstance(p, VariableNode) else "" for p in self.params]
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_main(self)


@dataclass(frozen=True)
class Program(ASTNode):
    """Root node: the ordered top-level forms."""
    forms: Tuple[ASTNode, ...] = ()
    
    def __post_init__(self):
        _freeze(self, "forms")
    
    def __iter__(self) -> Iterator[ASTNode]:
        return iter(self.forms)
    
    def __len__(self) -> int:
        return len(self.forms)
    
    def __getitem__(self, index: int) -> ASTNode:
        return self.forms[index]
    
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_program(self)


# =============================================================================
# Visitor
# =============================================================================

class ASTVisitor(ABC):
    """Base class for AST visitors."""
    
    @abstractmethod
    def visit_null(self, node: NullNode) -> Any:
        pass
    
    @abstractmethod
    def visit_constant(self, node: ConstantNode) -> Any:
        pass
    
    @abstractmethod
    def visit_keyword(self, node: KeywordNode) -> Any:
        pass
    
    @abstractmethod
    def visit_variable(self, node: VariableNode) -> Any:
        pass
    
    @abstractmethod
    def visit_map(self, node: MapNode) -> Any:
        pass
    
    @abstractmethod
    def visit_vector(self, node: VectorNode) -> Any:
        pass
    
    @abstractmethod
    def visit_list(self, node: ListNode) -> Any:
        pass
    
    @abstractmethod
    def visit_function(self, node: FunctionNode) -> Any:
        pass
    
    @abstractmethod
    def visit_main(self, node: MainNode) -> Any:
        pass
    
    @abstractmethod
    def visit_program(self, node: Program) -> Any:
        pass


# =============================================================================
# AST Printer (for debugging)
# =============================================================================

class ASTPrinter(ASTVisitor):
    """Prints AST for debugging."""
    
    def __init__(self):
        self.indent = 0
    
    def print(self, node: ASTNode) -> str:
        return node.accept(self)
    
    def _indent(self) -> str:
        return "  " * self.indent
    
    def _children(self, nodes: Sequence[ASTNode]) -> List[str]:
        self.indent += 1
        lines = [n.accept(self) for n in nodes]
        self.indent -= 1
        return lines
    
    def visit_null(self, node: NullNode) -> str:
        return f"{self._indent()}Null"
    
    def visit_constant(self, node: ConstantNode) -> str:
        return f"{self._indent()}Constant({node.value!r})"
    
    def visit_keyword(self, node: KeywordNode) -> str:
        return f"{self._indent()}Keyword({node.symbol})"
    
    def visit_variable(self, node: VariableNode) -> str:
        return f"{self._indent()}Variable({node.name})"
    
    def visit_map(self, node: MapNode) -> str:
        self.indent += 1
        entries = [f"{self._indent()}:{item.key}\n{self._children([item.value])[0]}"
                   for item in node.items]
        self.indent -= 1
        return "\n".join([f"{self._indent()}Map"] + entries)
    
    def visit_vector(self, node: VectorNode) -> str:
        return "\n".join([f"{self._indent()}Vector"] + self._children(node.items))
    
    def visit_list(self, node: ListNode) -> str:
        return "\n".join([f"{self._indent()}List"] + self._children([node.head, *node.rest]))
    
    def visit_function(self, node: FunctionNode) -> str:
        params = ", ".join(getattr(p, "name", "?") for p in node.params)
        header = f"{self._indent()}Function({node.name.name}({params}))"
        return "\n".join([header] + self._children(node.body))
    
    def visit_main(self, node: MainNode) -> str:
        header = f"{self._indent()}Main({', '.join(node.param_names)})"
        return "\n".join([header] + self._children(node.body))
    
    def visit_program(self, node: Program) -> str:
        forms = [form.accept(self) for form in node.forms]
        return "Program\n" + "\n".join(forms)
