"""
lispwat Parser

Recursive descent parser that produces an AST from tokens.

Grammar, in terms of tokens::

    program    := form* EOF
    form       := '(' (definition | list) | '{' map | '[' vector
    definition := 'defn' (IDENTIFIER | 'main') ('[' item* ']')? ('(' (definition | list))* ')'
    list       := (item | '(' (definition | list))+ ')'
    vector     := item* ']'
    map        := (MAP_KEY token | token)* '}'
"""

from typing import List, Optional

from .tokens import Token, TokenType
from .ast import (
    ASTNode, NullNode, ConstantNode, KeywordNode, VariableNode, MapItem, MapNode,
    VectorNode, ListNode, FunctionNode, MainNode, Program,
)
from .errors import (
    UnexpectedEndOfFile, UnexpectedToken, InvalidFunctionName, DuplicateMainFunction,
)


# Tokens carried into the tree as keywords
KEYWORD_ITEMS = (
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.AND,
    TokenType.OR,
    TokenType.PRINT,
)


class Parser:
    """Recursive descent parser for lispwat."""
    
    def __init__(self, tokens: List[Token]):
        """
        Initialize the parser.
        
        Args:
            tokens: List of tokens from the scanner, whitespace and
                comments already removed
        """
        self.tokens = tokens
        self.current = 0
        self.main_defined = False
    
    def parse(self) -> Program:
        """
        Parse the token stream into an AST.
        
        Returns:
            Program AST node holding the top-level forms in order
        
        Raises:
            ParseError: On the first grammar violation
        """
        forms = []
        
        while not self.is_at_end():
            forms.append(self.form())
        
        return Program(forms)
    
    # =========================================================================
    # Forms
    # =========================================================================
    
    def form(self) -> ASTNode:
        """Parse one top-level form."""
        token = self.advance()
        
        if token.type == TokenType.LEFT_PAREN:
            return self.list_or_definition()
        if token.type == TokenType.LEFT_BRACE:
            return self.map_literal()
        if token.type == TokenType.LEFT_BRACKET:
            return self.vector_literal()
        
        raise UnexpectedToken(token.position, token.type)
    
    def list_or_definition(self) -> ASTNode:
        """Parse the inside of a '(' form; 'defn' right after it starts a definition."""
        if self.check(TokenType.DEFN):
            self.advance()
            return self.function_definition()
        return self.list_form()
    
    def function_definition(self) -> ASTNode:
        """Parse a definition after 'defn' up to its closing ')'."""
        name_token = self.advance()
        
        name: Optional[VariableNode] = None
        if name_token.type == TokenType.IDENTIFIER:
            name = VariableNode(name_token.value)
        elif name_token.type == TokenType.MAIN:
            if self.main_defined:
                raise DuplicateMainFunction(name_token.position)
            self.main_defined = True
        else:
            raise InvalidFunctionName(name_token.position, name_token.type)
        
        params: List[ASTNode] = []
        if self.check(TokenType.LEFT_BRACKET):
            self.advance()
            params = self.vector_items()
        
        body = []
        while True:
            token = self.advance()
            if token.type == TokenType.RIGHT_PAREN:
                break
            if token.type != TokenType.LEFT_PAREN:
                raise UnexpectedToken(token.position, token.type)
            body.append(self.list_or_definition())
        
        if name is None:
            return MainNode(params, body)
        return FunctionNode(name, params, body)
    
    def list_form(self) -> ListNode:
        """Parse a call-shaped list up to its closing ')'."""
        items = []
        
        while True:
            token = self.advance()
            if token.type == TokenType.RIGHT_PAREN:
                break
            if token.type == TokenType.LEFT_PAREN:
                items.append(self.list_or_definition())
            else:
                items.append(self.item(token))
        
        if not items:
            raise UnexpectedToken(token.position, token.type)
        
        return ListNode(items[0], items[1:])
    
    def vector_literal(self) -> VectorNode:
        """Parse a vector after '['."""
        return VectorNode(self.vector_items())
    
    def vector_items(self) -> List[ASTNode]:
        """Parse items up to and including the closing ']'."""
        items = []
        
        while True:
            token = self.advance()
            if token.type == TokenType.RIGHT_BRACKET:
                return items
            items.append(self.item(token))
    
    def map_literal(self) -> MapNode:
        """
        Parse a map after '{'.
        
        A map key takes the next token as its value. Any other token is
        kept as an entry with an empty key.
        """
        items = []
        
        while True:
            token = self.advance()
            if token.type == TokenType.RIGHT_BRACE:
                return MapNode(items)
            
            if token.type == TokenType.MAP_KEY:
                value = self.advance()
                if value.type == TokenType.RIGHT_BRACE:
                    raise UnexpectedToken(value.position, value.type)
                items.append(MapItem(token.value, self.item(value)))
            else:
                items.append(MapItem("", self.item(token)))
    
    def item(self, token: Token) -> ASTNode:
        """Convert a single token to a node; unsupported tokens become Null."""
        if token.type in (TokenType.NUMBER, TokenType.STRING):
            return ConstantNode(token.value)
        if token.type in KEYWORD_ITEMS:
            return KeywordNode(token.type)
        if token.type == TokenType.IDENTIFIER:
            return VariableNode(token.value)
        return NullNode()
    
    # =========================================================================
    # Helper Methods
    # =========================================================================
    
    def check(self, type: TokenType) -> bool:
        """Check if current token is of given type."""
        if self.is_at_end():
            return False
        return self.peek().type == type
    
    def advance(self) -> Token:
        """
        Consume and return the current token.
        
        Raises:
            UnexpectedEndOfFile: If no tokens remain
        """
        if self.is_at_end():
            raise UnexpectedEndOfFile()
        self.current += 1
        return self.tokens[self.current - 1]
    
    def is_at_end(self) -> bool:
        """Check if we've reached EOF or run out of tokens."""
        token = self.peek()
        return token is None or token.type == TokenType.EOF
    
    def peek(self) -> Optional[Token]:
        """Return the current token, or None past the end of the list."""
        if self.current >= len(self.tokens):
            return None
        return self.tokens[self.current]
