"""
lispwat Scanner Tests

Tests for tokenization: literals, reserved words, operators, map keys,
comments and source positions.
"""

import pytest
from lispwat import Scanner
from lispwat.tokens import Token, TokenType, Position, format_tokens
from lispwat.errors import UnknownCharacter, UnterminatedString, ScanError


def types(source):
    return [t.type for t in Scanner(source).tokenize()]


# =============================================================================
# Basics
# =============================================================================

class TestScannerBasics:
    """Basic scanner functionality tests."""
    
    def test_empty_source(self):
        tokens = Scanner("").tokenize()
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
    
    def test_whitespace_only(self):
        tokens = Scanner("   \t\r\n  ").tokenize()
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
    
    def test_single_eof_at_end(self):
        tokens = Scanner("(+ 1 2)").tokenize()
        assert [t.type for t in tokens].count(TokenType.EOF) == 1
        assert tokens[-1].type == TokenType.EOF
    
    def test_scan_token_keeps_whitespace(self):
        scanner = Scanner("1 2")
        kinds = [scanner.scan_token().type for _ in range(4)]
        assert kinds == [TokenType.NUMBER, TokenType.WHITESPACE,
                         TokenType.NUMBER, TokenType.EOF]
    
    def test_eof_repeats(self):
        scanner = Scanner("")
        assert scanner.scan_token().type == TokenType.EOF
        assert scanner.scan_token().type == TokenType.EOF


# =============================================================================
# Literals
# =============================================================================

class TestScannerNumbers:
    """Number literal tokenization tests."""
    
    def test_integer(self):
        tokens = Scanner("123").tokenize()
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 123
        assert isinstance(tokens[0].value, int)
    
    def test_fraction(self):
        tokens = Scanner("3.14").tokenize()
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 3.14
        assert tokens[0].lexeme == "3.14"
    
    def test_trailing_dot_is_separate(self):
        tokens = Scanner("1.").tokenize()
        assert [t.type for t in tokens] == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
        assert tokens[0].value == 1
    
    def test_dot_before_identifier(self):
        assert types("1.x") == [TokenType.NUMBER, TokenType.DOT,
                                TokenType.IDENTIFIER, TokenType.EOF]
    
    def test_only_one_fraction(self):
        tokens = Scanner("1.2.3").tokenize()
        assert tokens[0].value == 1.2
        assert tokens[1].type == TokenType.DOT
        assert tokens[2].value == 3


class TestScannerStrings:
    """String literal tokenization tests."""
    
    def test_string(self):
        tokens = Scanner('"hello world"').tokenize()
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"
        assert tokens[0].lexeme == '"hello world"'
    
    def test_empty_string(self):
        tokens = Scanner('""').tokenize()
        assert tokens[0].value == ""
    
    def test_no_escape_processing(self):
        tokens = Scanner(r'"a\nb"').tokenize()
        assert tokens[0].value == "a\\nb"
    
    def test_string_spans_lines(self):
        tokens = Scanner('"a\nb" 1').tokenize()
        assert tokens[0].value == "a\nb"
        assert tokens[1].position == Position(2, 4)
    
    def test_unterminated_string(self):
        with pytest.raises(UnterminatedString) as exc:
            Scanner('(print "abc').tokenize()
        assert exc.value.position == Position(1, 8)


# =============================================================================
# Words
# =============================================================================

class TestScannerKeywords:
    """Reserved word tokenization tests."""
    
    @pytest.mark.parametrize("keyword,expected_type", [
        ("and", TokenType.AND),
        ("or", TokenType.OR),
        ("def", TokenType.DEF),
        ("defn", TokenType.DEFN),
        ("main", TokenType.MAIN),
        ("print", TokenType.PRINT),
        ("nil", TokenType.NIL),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
        ("cond", TokenType.COND),
        ("for", TokenType.FOR),
    ])
    def test_keywords(self, keyword, expected_type):
        tokens = Scanner(keyword).tokenize()
        assert tokens[0].type == expected_type
        assert tokens[0].is_keyword()
    
    @pytest.mark.parametrize("word", [
        "a", "an", "andy", "d", "de", "defnx", "mains", "printer", "f", "fo", "forty",
    ])
    def test_exact_match_only(self, word):
        tokens = Scanner(word).tokenize()
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == word
    
    def test_identifier_with_digits_and_underscore(self):
        tokens = Scanner("_foo1").tokenize()
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "_foo1"


class TestScannerMapKeys:
    """Map key and colon tokenization tests."""
    
    def test_map_key(self):
        tokens = Scanner(":guten").tokenize()
        assert tokens[0].type == TokenType.MAP_KEY
        assert tokens[0].value == "guten"
        assert tokens[0].lexeme == ":guten"
    
    def test_colon_before_space(self):
        assert types(": x") == [TokenType.COLON, TokenType.IDENTIFIER, TokenType.EOF]
    
    def test_colon_at_end(self):
        assert types(":") == [TokenType.COLON, TokenType.EOF]
    
    def test_colon_before_digit(self):
        assert types(":1") == [TokenType.COLON, TokenType.NUMBER, TokenType.EOF]
    
    def test_keyword_text_as_map_key(self):
        tokens = Scanner(":main").tokenize()
        assert tokens[0].type == TokenType.MAP_KEY
        assert tokens[0].value == "main"


# =============================================================================
# Operators and punctuation
# =============================================================================

class TestScannerOperators:
    """Operator and delimiter tokenization tests."""
    
    @pytest.mark.parametrize("op,expected_type", [
        ("(", TokenType.LEFT_PAREN),
        (")", TokenType.RIGHT_PAREN),
        ("{", TokenType.LEFT_BRACE),
        ("}", TokenType.RIGHT_BRACE),
        ("[", TokenType.LEFT_BRACKET),
        ("]", TokenType.RIGHT_BRACKET),
        (",", TokenType.COMMA),
        (".", TokenType.DOT),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("*", TokenType.STAR),
        ("/", TokenType.SLASH),
        ("!", TokenType.BANG),
        ("!=", TokenType.BANG_EQUAL),
        ("=", TokenType.EQUAL),
        ("==", TokenType.DOUBLE_EQUAL),
        (">", TokenType.GREATER),
        (">=", TokenType.GREATER_EQUAL),
        ("<", TokenType.LESS),
        ("<=", TokenType.LESS_EQUAL),
    ])
    def test_operators(self, op, expected_type):
        tokens = Scanner(op).tokenize()
        assert len(tokens) == 2
        assert tokens[0].type == expected_type
        assert tokens[0].lexeme == op
    
    def test_separated_two_char_operator(self):
        assert types("! =") == [TokenType.BANG, TokenType.EQUAL, TokenType.EOF]
    
    def test_minus_before_number(self):
        assert types("-1") == [TokenType.MINUS, TokenType.NUMBER, TokenType.EOF]


class TestScannerComments:
    """Comment handling tests."""
    
    def test_line_comment(self):
        tokens = Scanner("42 // this is a comment").tokenize()
        assert len(tokens) == 2  # NUMBER, EOF
        assert tokens[0].type == TokenType.NUMBER
    
    def test_comment_ends_at_newline(self):
        tokens = Scanner("42 // comment\n10").tokenize()
        assert [t.value for t in tokens[:2]] == [42, 10]
        assert tokens[1].position == Position(2, 1)
    
    def test_raw_comment_token(self):
        scanner = Scanner("// note\n")
        comment = scanner.scan_token()
        assert comment.type == TokenType.COMMENT
        assert comment.lexeme == "// note"
        assert scanner.scan_token().type == TokenType.WHITESPACE
        assert scanner.scan_token().type == TokenType.EOF


# =============================================================================
# Positions and errors
# =============================================================================

class TestScannerPositions:
    """Source position tracking tests."""
    
    def test_positions(self):
        tokens = Scanner("(+ 1\n  2)").tokenize()
        assert [t.position for t in tokens] == [
            Position(1, 1),
            Position(1, 2),
            Position(1, 4),
            Position(2, 3),
            Position(2, 4),
            Position(2, 5),
        ]
    
    def test_line_and_column_properties(self):
        token = Scanner("\n\n   x").tokenize()[0]
        assert token.line == 3
        assert token.column == 4
    
    def test_position_advance(self):
        assert Position().advance("a") == Position(1, 2)
        assert Position(1, 9).advance("\n") == Position(2, 1)


class TestScannerErrors:
    """Lexical error tests."""
    
    def test_unknown_character(self):
        with pytest.raises(UnknownCharacter) as exc:
            Scanner("(+ 1 @)").tokenize()
        assert exc.value.position == Position(1, 6)
        assert exc.value.text == "@"
        assert exc.value.line == 1
        assert exc.value.column == 6
    
    def test_unknown_character_is_scan_error(self):
        with pytest.raises(ScanError):
            Scanner("é").tokenize()
    
    def test_error_message(self):
        with pytest.raises(UnknownCharacter) as exc:
            Scanner("\n  #").tokenize()
        assert str(exc.value) == "line 2:3: Unknown character '#'"


class TestFormatTokens:
    
    def test_format(self):
        listing = format_tokens(Scanner("(+ 1)").tokenize())
        assert listing.splitlines() == [
            "1:1 LEFT_PAREN '('",
            "1:2 PLUS '+'",
            "1:4 NUMBER '1'",
            "1:5 RIGHT_PAREN ')'",
            "1:6 EOF",
        ]
