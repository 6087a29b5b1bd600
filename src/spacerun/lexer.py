"""Lexer: converts JavaScript-like source text into a flat token stream.

Whitespace and line breaks are skipped rather than emitted; every other
character of the source belongs to exactly one token. Comments are emitted
inline, in source order, alongside code tokens.
"""

from __future__ import annotations

from spacerun.errors import LexError
from spacerun.tokens import (
    KEYWORDS,
    LINEBREAKS,
    Position,
    Span,
    Token,
    TokenType,
    is_comment,
    is_ident_char,
    is_ident_start,
)

# Longest first so that a prefix never shadows a longer operator
_PUNCTUATORS = (
    ">>>=",
    "...", "===", "!==", "**=", "<<=", ">>=", ">>>", "&&=", "||=", "??=",
    "=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.", "++", "--",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<", ">>", "**",
    "{", "}", "(", ")", "[", "]", ";", ",", "<", ">", "+", "-", "*", "/",
    "%", "&", "|", "^", "!", "~", "?", ":", "=", ".", "@", "#",
)  # fmt: skip

# After these a slash is a division operator, not the start of a regex
_DIVISION_PRECEDERS = frozenset({")", "]", "}"})

# Keywords after which an expression (and so a regex) may start
_REGEX_KEYWORDS = frozenset(
    {
        "return", "typeof", "case", "do", "else", "in", "instanceof", "new",
        "delete", "void", "throw", "yield", "await", "of",
    }
)  # fmt: skip


class Lexer:
    """Tokenize source text into a list of Token objects."""

    def __init__(self, source: str, filename: str = "input.js") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []
        self._last_code: Token | None = None

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list, ending with EOF."""
        while self._pos < len(self._source):
            self._lex_next()
        self._emit(TokenType.EOF, "", "")
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        # \r\n counts as one break, attributed to the \n
        if ch in LINEBREAKS and not (ch == "\r" and self._peek() == "\n"):
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        if tt is not TokenType.EOF and not is_comment(tok):
            self._last_code = tok
        return tok

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    def _raw_from(self, start: Position) -> str:
        return self._source[start.offset : self._pos]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_next(self) -> None:
        ch = self._peek()

        if ch == "\0":
            raise self._error("NUL character in source")

        if ch in LINEBREAKS or ch.isspace() or ch == "\ufeff":
            self._advance()
            return

        if ch == "/" and self._peek(1) == "/":
            self._lex_line_comment()
            return

        if ch == "/" and self._peek(1) == "*":
            self._lex_block_comment()
            return

        if ch == "/" and self._regex_allowed():
            self._lex_regex()
            return

        if ch in "'\"":
            self._lex_string(ch)
            return

        if ch == "`":
            start = self._current_pos()
            self._skip_template(start)
            raw = self._raw_from(start)
            self._emit(TokenType.TEMPLATE, raw, raw, start)
            return

        if ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
            self._lex_number()
            return

        if is_ident_start(ch):
            self._lex_identifier()
            return

        self._lex_punctuator()

    def _regex_allowed(self) -> bool:
        prev = self._last_code
        if prev is None:
            return True
        if prev.type is TokenType.PUNCTUATOR:
            return prev.value not in _DIVISION_PRECEDERS
        if prev.type is TokenType.KEYWORD:
            return prev.value in _REGEX_KEYWORDS
        return False

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _lex_line_comment(self) -> None:
        start = self._current_pos()
        self._advance()
        self._advance()
        body_start = self._pos
        while not self._at_end() and self._peek() not in LINEBREAKS:
            self._advance()
        body = self._source[body_start : self._pos]
        self._emit(TokenType.LINE_COMMENT, body, self._raw_from(start), start)

    def _lex_block_comment(self) -> None:
        start = self._current_pos()
        self._advance()
        self._advance()
        body_start = self._pos
        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                body = self._source[body_start : self._pos]
                self._advance()
                self._advance()
                self._emit(TokenType.BLOCK_COMMENT, body, self._raw_from(start), start)
                return
            self._advance()
        raise self._error("unterminated block comment", start)

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _lex_string(self, quote: str) -> None:
        start = self._current_pos()
        self._skip_string(quote, start)
        raw = self._raw_from(start)
        self._emit(TokenType.STRING, raw, raw, start)

    def _skip_string(self, quote: str, start: Position) -> None:
        self._advance()  # opening quote
        while not self._at_end():
            ch = self._peek()
            if ch == quote:
                self._advance()
                return
            if ch == "\\":
                self._advance()
                if self._at_end():
                    break
                # Line continuation: \ followed by \r\n
                if self._peek() == "\r" and self._peek(1) == "\n":
                    self._advance()
                self._advance()
                continue
            if ch in "\n\r":
                break
            self._advance()
        raise self._error("unterminated string literal", start)

    def _skip_template(self, start: Position) -> None:
        """Consume a template literal, nested ${ } expressions included."""
        self._advance()  # opening backtick
        while not self._at_end():
            ch = self._peek()
            if ch == "`":
                self._advance()
                return
            if ch == "\\":
                self._advance()
                if not self._at_end():
                    self._advance()
                continue
            if ch == "$" and self._peek(1) == "{":
                self._advance()
                self._advance()
                self._skip_template_expression(start)
                continue
            self._advance()
        raise self._error("unterminated template literal", start)

    def _skip_template_expression(self, start: Position) -> None:
        depth = 1
        while not self._at_end():
            ch = self._peek()
            if ch in "'\"":
                self._skip_string(ch, self._current_pos())
            elif ch == "`":
                self._skip_template(self._current_pos())
            elif ch == "{":
                depth += 1
                self._advance()
            elif ch == "}":
                depth -= 1
                self._advance()
                if depth == 0:
                    return
            else:
                self._advance()
        raise self._error("unterminated template literal", start)

    def _lex_regex(self) -> None:
        start = self._current_pos()
        self._advance()  # opening slash
        in_class = False
        while True:
            if self._at_end() or self._peek() in LINEBREAKS:
                raise self._error("unterminated regular expression", start)
            ch = self._advance()
            if ch == "\\":
                if self._at_end() or self._peek() in LINEBREAKS:
                    raise self._error("unterminated regular expression", start)
                self._advance()
            elif ch == "[":
                in_class = True
            elif ch == "]":
                in_class = False
            elif ch == "/" and not in_class:
                break
        while not self._at_end() and is_ident_char(self._peek()):
            self._advance()
        raw = self._raw_from(start)
        self._emit(TokenType.REGEX, raw, raw, start)

    def _lex_number(self) -> None:
        start = self._current_pos()
        hex_like = self._peek() == "0" and self._peek(1) in ("x", "X")
        while not self._at_end():
            ch = self._peek()
            if ch.isalnum() or ch in "_.":
                self._advance()
            elif ch in "+-" and not hex_like and self._source[self._pos - 1] in "eE":
                self._advance()
            else:
                break
        raw = self._raw_from(start)
        self._emit(TokenType.NUMBER, raw, raw, start)

    # ------------------------------------------------------------------
    # Names and operators
    # ------------------------------------------------------------------

    def _lex_identifier(self) -> None:
        start = self._current_pos()
        while not self._at_end() and is_ident_char(self._peek()):
            self._advance()
        text = self._raw_from(start)
        tt = TokenType.KEYWORD if text in KEYWORDS else TokenType.IDENTIFIER
        self._emit(tt, text, text, start)

    def _lex_punctuator(self) -> None:
        start = self._current_pos()
        for punct in _PUNCTUATORS:
            if self._source.startswith(punct, self._pos):
                # a?.5 is a conditional, not optional chaining
                if punct == "?." and self._peek(2).isdigit():
                    continue
                for _ in punct:
                    self._advance()
                self._emit(TokenType.PUNCTUATOR, punct, punct, start)
                return
        # Anything unrecognized becomes a single-character punctuator
        ch = self._advance()
        self._emit(TokenType.PUNCTUATOR, ch, ch, start)


def tokenize(source: str, filename: str = "input.js") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
