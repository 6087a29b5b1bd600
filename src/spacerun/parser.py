"""Parser: builds an ESTree-style syntax tree with source ranges.

The tree lets a run of spaces be attributed to the smallest syntax node
around it. Statements and declarations are parsed by recursive descent and
expressions by precedence climbing. The parser is forgiving: a token it
cannot place is skipped, and only unbalanced brackets raise ParseError.
"""

from __future__ import annotations

from spacerun.ast import Document, Node
from spacerun.errors import ParseError
from spacerun.lexer import tokenize
from spacerun.tokens import Position, Span, Token, TokenType, is_comment, same_line

_OPENERS = {"{": "}", "[": "]", "(": ")"}
_CLOSERS = frozenset(_OPENERS.values())

# Binding power of binary operators; higher binds tighter
_BINARY_PRECEDENCE = {
    "??": 1, "||": 2, "&&": 3, "|": 4, "^": 5, "&": 6,
    "==": 7, "!=": 7, "===": 7, "!==": 7,
    "<": 8, ">": 8, "<=": 8, ">=": 8, "instanceof": 8, "in": 8,
    "<<": 9, ">>": 9, ">>>": 9,
    "+": 10, "-": 10,
    "*": 11, "/": 11, "%": 11,
    "**": 12,
}  # fmt: skip

_LOGICAL_OPERATORS = frozenset({"??", "||", "&&"})

_ASSIGNMENT_OPERATORS = frozenset(
    {
        "=", "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=",
        "&=", "|=", "^=", "&&=", "||=", "??=",
    }
)  # fmt: skip

_UNARY_OPERATORS = frozenset({"!", "~", "+", "-"})
_UNARY_KEYWORDS = frozenset({"typeof", "void", "delete"})

# Keywords that are ordinary identifiers wherever an expression is expected
_NAME_KEYWORDS = frozenset({"of", "let", "yield", "await"})

_LITERAL_KEYWORDS = frozenset({"true", "false", "null"})
_KEYWORD_NODES = {"this": "ThisExpression", "super": "Super", "import": "Import"}

# Prefixes that may come before an object or class member key
_MEMBER_MODIFIERS = frozenset({"get", "set", "static", "async"})


def _is_punct(tok: Token, *values: str) -> bool:
    return tok.type == TokenType.PUNCTUATOR and tok.value in values


def _is_keyword(tok: Token, *values: str) -> bool:
    return tok.type == TokenType.KEYWORD and tok.value in values


def _is_name(tok: Token) -> bool:
    """Return True if tok can be used as a property name."""
    return tok.type in (TokenType.IDENTIFIER, TokenType.KEYWORD)


def _is_binding_name(tok: Token) -> bool:
    """Return True if tok can name a variable or parameter."""
    return tok.type == TokenType.IDENTIFIER or _is_keyword(tok, *_NAME_KEYWORDS)


def _starts_binding(tok: Token) -> bool:
    return _is_binding_name(tok) or _is_punct(tok, "[", "{")


def _starts_key(tok: Token) -> bool:
    """Return True if tok can begin a member key after a modifier."""
    if tok.type in (TokenType.IDENTIFIER, TokenType.KEYWORD, TokenType.STRING, TokenType.NUMBER):
        return True
    return _is_punct(tok, "[", "#", "*", "{")


def _node(node_type: str, first: Token | Node, last: Token | Node, *children: Node | None) -> Node:
    """Build a node spanning first's start to last's end, dropping absent children."""
    return Node(
        node_type,
        Span(first.span.start, last.span.end),
        tuple(c for c in children if c is not None),
    )


class Parser:
    """Recursive-descent parser over a comment-free token list."""

    def __init__(self, tokens: list[Token], source: str, filename: str) -> None:
        self._tokens = tokens
        self._source = source
        self._filename = filename
        self._pos = 0
        # Set while parsing a for-loop initializer, where `in` ends the expression
        self._no_in = False

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _token(self, idx: int) -> Token:
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _peek(self, offset: int = 0) -> Token:
        return self._token(self._pos + offset)

    def _last(self) -> Token:
        """Return the most recently consumed token."""
        return self._tokens[self._pos - 1]

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _at_closer(self) -> bool:
        tok = self._peek()
        return tok.type == TokenType.EOF or _is_punct(tok, *_CLOSERS)

    def _at_punct(self, *values: str) -> bool:
        return _is_punct(self._peek(), *values)

    def _at_keyword(self, *values: str) -> bool:
        return _is_keyword(self._peek(), *values)

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _eat(self, value: str) -> bool:
        """Consume the punctuator value if it is next."""
        if self._at_punct(value):
            self._advance()
            return True
        return False

    def _finish(self, node_type: str, first: Token | Node, *children: Node | None) -> Node:
        """Build a node from first up to the last consumed token."""
        return _node(node_type, first, self._last(), *children)

    def _expect_close(self, opener: Token) -> Token:
        closer = _OPENERS[opener.value]
        tok = self._peek()
        if tok.type == TokenType.EOF:
            raise self._error(f"unclosed '{opener.value}' (expected '{closer}')", opener.span)
        if not self._at_punct(closer):
            raise self._error(
                f"mismatched '{tok.value}' (expected '{closer}' to close "
                f"'{opener.value}' at line {opener.span.start.line})",
                tok.span,
            )
        return self._advance()

    def _matching_close(self, idx: int) -> int | None:
        """Return the index of the bracket closing the opener at idx."""
        depth = 0
        for j in range(idx, len(self._tokens)):
            tok = self._tokens[j]
            if tok.type != TokenType.PUNCTUATOR:
                continue
            if tok.value in _OPENERS:
                depth += 1
            elif tok.value in _CLOSERS:
                depth -= 1
                if depth == 0:
                    return j
        return None

    def _error(self, message: str, span: Span) -> ParseError:
        return ParseError(message, span, self._source)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Node:
        body = self._parse_statements()
        if not self._at_eof():
            tok = self._peek()
            raise self._error(f"unexpected '{tok.value}'", tok.span)
        end = self._tokens[-1].span.end
        return Node("Program", Span(Position(1, 1, 0), end), tuple(body))

    def _parse_statements(self, *stop_keywords: str) -> list[Node]:
        """Parse statements up to a closer, EOF, or one of stop_keywords."""
        body: list[Node] = []
        while not self._at_closer() and not self._at_keyword(*stop_keywords):
            node = self._parse_statement()
            if node is not None:
                body.append(node)
        return body

    def _parse_statement(self) -> Node | None:
        """Parse one statement. Always consumes at least one token."""
        tok = self._peek()
        if tok.type == TokenType.PUNCTUATOR:
            if tok.value == ";":
                self._advance()
                return _node("EmptyStatement", tok, tok)
            if tok.value == "{":
                return self._parse_block()
        elif tok.type == TokenType.KEYWORD:
            statement = self._parse_keyword_statement(tok)
            if statement is not None:
                return statement
        elif tok.type == TokenType.IDENTIFIER:
            nxt = self._peek(1)
            if tok.value == "async" and _is_keyword(nxt, "function") and same_line(tok, nxt):
                return self._parse_function("FunctionDeclaration")
            if _is_punct(nxt, ":"):
                return self._parse_labeled()
        return self._parse_expression_statement()

    def _parse_keyword_statement(self, tok: Token) -> Node | None:
        value = tok.value
        if value in ("var", "const") or (value == "let" and _starts_binding(self._peek(1))):
            return self._parse_variable_declaration()
        if value == "function":
            return self._parse_function("FunctionDeclaration")
        if value == "class":
            return self._parse_class("ClassDeclaration")
        if value == "if":
            return self._parse_if()
        if value == "for":
            return self._parse_for()
        if value == "while":
            return self._parse_headed("WhileStatement")
        if value == "with":
            return self._parse_headed("WithStatement")
        if value == "do":
            return self._parse_do_while()
        if value == "return":
            return self._parse_argument_statement("ReturnStatement")
        if value == "throw":
            return self._parse_argument_statement("ThrowStatement")
        if value == "break":
            return self._parse_jump("BreakStatement")
        if value == "continue":
            return self._parse_jump("ContinueStatement")
        if value == "switch":
            return self._parse_switch()
        if value == "try":
            return self._parse_try()
        if value == "debugger":
            self._advance()
            self._eat(";")
            return self._finish("DebuggerStatement", tok)
        if value == "export":
            return self._parse_export()
        if value == "import" and not _is_punct(self._peek(1), "(", "."):
            return self._parse_import()
        return None

    def _parse_expression_statement(self) -> Node | None:
        expr = self._parse_expression()
        if expr is None:
            self._advance()  # no statement starts with this token
            return None
        self._eat(";")
        return self._finish("ExpressionStatement", expr, expr)

    def _parse_block(self) -> Node:
        opener = self._advance()
        body = self._parse_statements()
        close = self._expect_close(opener)
        return _node("BlockStatement", opener, close, *body)

    def _parse_body(self) -> Node | None:
        """Parse the statement governed by a loop or conditional, if any."""
        if self._at_closer():
            return None
        return self._parse_statement()

    def _parse_head(self) -> list[Node | None]:
        """Parse a parenthesized head such as the condition of `if`."""
        if not self._at_punct("("):
            return []
        opener = self._advance()
        head: list[Node | None] = [self._parse_expression()]
        head.extend(self._parse_statements())
        self._expect_close(opener)
        return head

    def _parse_labeled(self) -> Node:
        label = self._parse_identifier()
        self._advance()  # :
        return self._finish("LabeledStatement", label, label, self._parse_body())

    def _parse_variable_declaration(self, in_head: bool = False) -> Node:
        kind = self._advance()
        declarators: list[Node] = []
        while True:
            target = self._parse_binding()
            if target is None:
                break
            init = self._parse_assignment() if self._eat("=") else None
            declarators.append(self._finish("VariableDeclarator", target, target, init))
            if not self._eat(","):
                break
        if not in_head:
            self._eat(";")
        return self._finish("VariableDeclaration", kind, *declarators)

    def _parse_binding(self) -> Node | None:
        if self._at_punct("["):
            return self._parse_array(self._advance(), "ArrayPattern")
        if self._at_punct("{"):
            return self._parse_object(self._advance(), "ObjectPattern")
        if _is_binding_name(self._peek()):
            return self._parse_identifier()
        return None

    def _parse_if(self) -> Node:
        first = self._advance()
        children = self._parse_head()
        children.append(self._parse_body())
        if self._at_keyword("else"):
            self._advance()
            children.append(self._parse_body())
        return self._finish("IfStatement", first, *children)

    def _parse_headed(self, node_type: str) -> Node:
        first = self._advance()
        children = self._parse_head()
        children.append(self._parse_body())
        return self._finish(node_type, first, *children)

    def _parse_do_while(self) -> Node:
        first = self._advance()
        children = [self._parse_body()]
        if self._at_keyword("while"):
            self._advance()
            children.extend(self._parse_head())
            self._eat(";")
        return self._finish("DoWhileStatement", first, *children)

    def _parse_for(self) -> Node:
        first = self._advance()
        if self._at_keyword("await"):
            self._advance()
        if not self._at_punct("("):
            return self._finish("ForStatement", first, self._parse_body())
        opener = self._advance()

        saved, self._no_in = self._no_in, True
        if self._at_keyword("var", "const") or (
            self._at_keyword("let") and _starts_binding(self._peek(1))
        ):
            init = self._parse_variable_declaration(in_head=True)
        else:
            init = self._parse_expression()
        self._no_in = saved

        node_type = "ForStatement"
        children: list[Node | None] = [init]
        if self._at_keyword("of", "in"):
            node_type = "ForOfStatement" if self._advance().value == "of" else "ForInStatement"
            children.append(self._parse_expression())
        else:
            while self._eat(";"):
                children.append(self._parse_expression())
        children.extend(self._parse_statements())
        self._expect_close(opener)
        children.append(self._parse_body())
        return self._finish(node_type, first, *children)

    def _parse_argument_statement(self, node_type: str) -> Node:
        """Parse `return` or `throw` with an argument on the same line."""
        first = self._advance()
        argument = self._parse_expression() if same_line(first, self._peek()) else None
        self._eat(";")
        return self._finish(node_type, first, argument)

    def _parse_jump(self, node_type: str) -> Node:
        first = self._advance()
        label = None
        if same_line(first, self._peek()) and self._peek().type == TokenType.IDENTIFIER:
            label = self._parse_identifier()
        self._eat(";")
        return self._finish(node_type, first, label)

    def _parse_switch(self) -> Node:
        first = self._advance()
        children = self._parse_head()
        if self._at_punct("{"):
            opener = self._advance()
            while not self._at_closer():
                children.append(self._parse_switch_case())
            self._expect_close(opener)
        return self._finish("SwitchStatement", first, *children)

    def _parse_switch_case(self) -> Node | None:
        if not self._at_keyword("case", "default"):
            return self._parse_statement()
        first = self._advance()
        test = self._parse_expression() if first.value == "case" else None
        self._eat(":")
        body = self._parse_statements("case", "default")
        return self._finish("SwitchCase", first, test, *body)

    def _parse_try(self) -> Node:
        first = self._advance()
        children: list[Node | None] = []
        if self._at_punct("{"):
            children.append(self._parse_block())
        if self._at_keyword("catch"):
            catch = self._advance()
            param = self._parse_head()
            block = self._parse_block() if self._at_punct("{") else None
            children.append(self._finish("CatchClause", catch, *param, block))
        if self._at_keyword("finally"):
            self._advance()
            if self._at_punct("{"):
                children.append(self._parse_block())
        return self._finish("TryStatement", first, *children)

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def _parse_import(self) -> Node:
        first = self._advance()
        specifiers: list[Node] = []
        while not self._at_closer() and not self._at_punct(";"):
            tok = self._peek()
            if tok.type == TokenType.STRING:
                specifiers.append(self._parse_literal())
                break
            if _is_punct(tok, "{"):
                specifiers.extend(self._parse_specifiers(self._advance(), "ImportSpecifier"))
            elif _is_punct(tok, "*"):
                self._advance()
                if self._peek().value == "as":
                    self._advance()
                    if _is_binding_name(self._peek()):
                        self._advance()
                specifiers.append(self._finish("ImportNamespaceSpecifier", tok))
            elif tok.type == TokenType.IDENTIFIER and tok.value != "from":
                self._advance()
                specifiers.append(_node("ImportDefaultSpecifier", tok, tok))
            else:
                self._advance()
        self._eat(";")
        return self._finish("ImportDeclaration", first, *specifiers)

    def _parse_export(self) -> Node:
        first = self._advance()
        if self._at_keyword("default"):
            self._advance()
            tok = self._peek()
            if _is_keyword(tok, "function") or (
                tok.value == "async" and _is_keyword(self._peek(1), "function")
            ):
                declaration = self._parse_function("FunctionDeclaration")
            elif _is_keyword(tok, "class"):
                declaration = self._parse_class("ClassDeclaration")
            else:
                declaration = self._parse_assignment()
                self._eat(";")
            return self._finish("ExportDefaultDeclaration", first, declaration)

        if self._at_punct("*"):
            source = None
            while not self._at_closer() and not self._at_punct(";"):
                if self._peek().type == TokenType.STRING:
                    source = self._parse_literal()
                    break
                self._advance()
            self._eat(";")
            return self._finish("ExportAllDeclaration", first, source)

        if self._at_punct("{"):
            children = self._parse_specifiers(self._advance(), "ExportSpecifier")
            if self._peek().value == "from" and self._peek(1).type == TokenType.STRING:
                self._advance()
                children.append(self._parse_literal())
            self._eat(";")
            return self._finish("ExportNamedDeclaration", first, *children)

        declaration = self._parse_body()
        return self._finish("ExportNamedDeclaration", first, declaration)

    def _parse_specifiers(self, opener: Token, node_type: str) -> list[Node]:
        """Parse `{ a, b as c }` into one node per specifier."""
        specifiers: list[Node] = []
        while not self._at_closer():
            if self._eat(","):
                continue
            first = self._advance()
            while not self._at_closer() and not self._at_punct(","):
                self._advance()
            specifiers.append(self._finish(node_type, first))
        self._expect_close(opener)
        return specifiers

    # ------------------------------------------------------------------
    # Functions and classes
    # ------------------------------------------------------------------

    def _parse_function(self, node_type: str) -> Node:
        first = self._advance()  # `function`, or the `async` before it
        if first.value == "async":
            self._advance()
        self._eat("*")
        name = self._parse_identifier() if _is_binding_name(self._peek()) else None
        return self._finish(node_type, first, name, *self._parse_function_rest())

    def _parse_function_rest(self) -> list[Node]:
        """Parse `(params) { body }`, returning the params then the body."""
        children: list[Node] = []
        if self._at_punct("("):
            children.extend(self._parse_params(self._advance()))
        if self._at_punct("{"):
            children.append(self._parse_block())
        return children

    def _parse_params(self, opener: Token) -> list[Node]:
        params = self._parse_elements("RestElement")
        self._expect_close(opener)
        return params

    def _parse_method(self) -> Node:
        first = self._peek()
        return self._finish("FunctionExpression", first, *self._parse_function_rest())

    def _parse_class(self, node_type: str) -> Node:
        first = self._advance()
        children: list[Node | None] = []
        if _is_binding_name(self._peek()):
            children.append(self._parse_identifier())
        if self._at_keyword("extends"):
            self._advance()
            children.append(self._parse_call_member())
        if self._at_punct("{"):
            children.append(self._parse_class_body(self._advance()))
        return self._finish(node_type, first, *children)

    def _parse_class_body(self, opener: Token) -> Node:
        members: list[Node] = []
        while not self._at_closer():
            if self._eat(";"):
                continue
            member = self._parse_class_member()
            if member is not None:
                members.append(member)
        close = self._expect_close(opener)
        return _node("ClassBody", opener, close, *members)

    def _parse_class_member(self) -> Node | None:
        first = self._peek()
        start = self._pos
        self._skip_modifiers()
        if self._at_punct("{"):
            block = self._parse_block()
            return _node("StaticBlock", first, block, *block.children)
        key = self._parse_property_key()
        if self._pos == start:
            self._advance()  # no member starts with this token
            return None
        if self._at_punct("("):
            return self._finish("MethodDefinition", first, key, self._parse_method())
        value = self._parse_assignment() if self._eat("=") else None
        self._eat(";")
        return self._finish("PropertyDefinition", first, key, value)

    def _skip_modifiers(self) -> None:
        """Skip get/set/static/async and a generator star before a member key."""
        while (
            _is_name(self._peek())
            and self._peek().value in _MEMBER_MODIFIERS
            and _starts_key(self._peek(1))
        ):
            self._advance()
        self._eat("*")

    def _parse_property_key(self) -> Node | None:
        tok = self._peek()
        if _is_name(tok):
            return self._parse_identifier()
        if tok.type in (TokenType.STRING, TokenType.NUMBER):
            return self._parse_literal()
        if _is_punct(tok, "["):
            opener = self._advance()
            key = self._parse_assignment()
            self._parse_statements()
            self._expect_close(opener)
            return key
        if _is_punct(tok, "#"):
            return self._parse_member_name()
        return None

    # ------------------------------------------------------------------
    # Object and array literals
    # ------------------------------------------------------------------

    def _parse_object(self, opener: Token, node_type: str = "ObjectExpression") -> Node:
        spread = "SpreadElement" if node_type == "ObjectExpression" else "RestElement"
        members: list[Node] = []
        while not self._at_closer():
            if self._eat(","):
                continue
            member = self._parse_property(spread)
            if member is not None:
                members.append(member)
        close = self._expect_close(opener)
        return _node(node_type, opener, close, *members)

    def _parse_property(self, spread_type: str) -> Node | None:
        first = self._peek()
        if self._eat("..."):
            return self._finish(spread_type, first, self._parse_assignment())
        start = self._pos
        self._skip_modifiers()
        key = self._parse_property_key()
        if self._pos == start:
            self._advance()  # no member starts with this token
            return None
        if self._at_punct("("):
            return self._finish("Property", first, key, self._parse_method())
        if self._eat(":"):
            return self._finish("Property", first, key, self._parse_assignment())
        if key is not None and self._eat("="):
            # shorthand with a default, only valid as a pattern
            default = self._finish("AssignmentPattern", key, key, self._parse_assignment())
            return self._finish("Property", first, default)
        return self._finish("Property", first, key)

    def _parse_array(self, opener: Token, node_type: str = "ArrayExpression") -> Node:
        spread = "SpreadElement" if node_type == "ArrayExpression" else "RestElement"
        elements = self._parse_elements(spread)
        close = self._expect_close(opener)
        return _node(node_type, opener, close, *elements)

    def _parse_elements(self, spread_type: str) -> list[Node]:
        """Parse comma-separated elements up to the closing bracket."""
        elements: list[Node] = []
        while not self._at_closer():
            if self._eat(","):
                continue
            first = self._peek()
            if self._eat("..."):
                elements.append(self._finish(spread_type, first, self._parse_assignment()))
                continue
            node = self._parse_assignment()
            if node is None:
                node = self._parse_statement()
            if node is not None:
                elements.append(node)
        return elements

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Node | None:
        """Parse a comma expression. Returns None without consuming anything
        if no expression starts here."""
        first = self._parse_assignment()
        if first is None or not self._at_punct(","):
            return first
        expressions = [first]
        while self._eat(","):
            expr = self._parse_assignment()
            if expr is None:
                break
            expressions.append(expr)
        return self._finish("SequenceExpression", first, *expressions)

    def _parse_assignment(self) -> Node | None:
        if self._at_keyword("yield"):
            return self._parse_yield()
        if self._at_arrow():
            return self._parse_arrow()
        left = self._parse_conditional()
        if left is None:
            return None
        if self._at_punct(*_ASSIGNMENT_OPERATORS):
            self._advance()
            return self._finish("AssignmentExpression", left, left, self._parse_assignment())
        return left

    def _parse_yield(self) -> Node:
        first = self._advance()
        self._eat("*")
        argument = None
        if same_line(self._last(), self._peek()):
            argument = self._parse_assignment()
        return self._finish("YieldExpression", first, argument)

    def _at_arrow(self) -> bool:
        """Return True if the tokens ahead start an arrow function."""
        idx = self._pos
        tok = self._token(idx)
        nxt = self._token(idx + 1)
        if (
            tok.type == TokenType.IDENTIFIER
            and tok.value == "async"
            and same_line(tok, nxt)
            and (_is_binding_name(nxt) or _is_punct(nxt, "("))
        ):
            idx += 1
            tok = nxt
        if _is_binding_name(tok):
            return _is_punct(self._token(idx + 1), "=>")
        if _is_punct(tok, "("):
            close = self._matching_close(idx)
            return close is not None and _is_punct(self._token(close + 1), "=>")
        return False

    def _parse_arrow(self) -> Node:
        first = self._peek()
        if first.value == "async" and not _is_punct(self._peek(1), "=>"):
            self._advance()
        if self._at_punct("("):
            params = self._parse_params(self._advance())
        else:
            params = [self._parse_identifier()]
        self._advance()  # =>
        body = self._parse_block() if self._at_punct("{") else self._parse_assignment()
        return self._finish("ArrowFunctionExpression", first, *params, body)

    def _parse_conditional(self) -> Node | None:
        test = self._parse_binary(1)
        if test is None or not self._at_punct("?"):
            return test
        self._advance()
        saved, self._no_in = self._no_in, False
        consequent = self._parse_assignment()
        self._no_in = saved
        alternate = self._parse_assignment() if self._eat(":") else None
        return self._finish("ConditionalExpression", test, test, consequent, alternate)

    def _parse_binary(self, min_precedence: int) -> Node | None:
        left = self._parse_unary()
        if left is None:
            return None
        while True:
            precedence = self._binary_precedence()
            if precedence is None or precedence < min_precedence:
                return left
            op = self._advance()
            # ** groups to the right, everything else to the left
            right = self._parse_binary(precedence if op.value == "**" else precedence + 1)
            node_type = "LogicalExpression" if op.value in _LOGICAL_OPERATORS else "BinaryExpression"
            left = self._finish(node_type, left, left, right)
            if right is None:
                return left

    def _binary_precedence(self) -> int | None:
        tok = self._peek()
        if tok.type == TokenType.KEYWORD:
            if tok.value == "instanceof" or (tok.value == "in" and not self._no_in):
                return _BINARY_PRECEDENCE[tok.value]
            return None
        if tok.type == TokenType.PUNCTUATOR:
            return _BINARY_PRECEDENCE.get(tok.value)
        return None

    def _parse_unary(self) -> Node | None:
        tok = self._peek()
        if _is_punct(tok, *_UNARY_OPERATORS) or _is_keyword(tok, *_UNARY_KEYWORDS):
            self._advance()
            return self._finish("UnaryExpression", tok, self._parse_unary())
        if _is_punct(tok, "++", "--"):
            self._advance()
            return self._finish("UpdateExpression", tok, self._parse_unary())
        if _is_keyword(tok, "await"):
            self._advance()
            return self._finish("AwaitExpression", tok, self._parse_unary())
        expr = self._parse_call_member()
        if expr is not None and self._at_punct("++", "--") and same_line(self._last(), self._peek()):
            self._advance()
            expr = self._finish("UpdateExpression", expr, expr)
        return expr

    def _parse_call_member(self) -> Node | None:
        expr = self._parse_new() if self._at_keyword("new") else self._parse_primary()
        if expr is None:
            return None
        return self._parse_chain(expr)

    def _parse_new(self) -> Node:
        first = self._advance()
        if self._eat("."):
            return self._finish("MetaProperty", first, self._parse_member_name())
        callee = self._parse_new() if self._at_keyword("new") else self._parse_primary()
        if callee is not None:
            callee = self._parse_chain(callee, calls=False)
        args: list[Node] = []
        if self._at_punct("("):
            args = self._parse_arguments(self._advance())
        return self._finish("NewExpression", first, callee, *args)

    def _parse_chain(self, expr: Node, calls: bool = True) -> Node:
        """Extend expr with member accesses, calls, and tagged templates."""
        while True:
            tok = self._peek()
            if tok.type == TokenType.TEMPLATE:
                self._advance()
                quasi = _node("TemplateLiteral", tok, tok)
                expr = self._finish("TaggedTemplateExpression", expr, expr, quasi)
            elif _is_punct(tok, ".", "?."):
                self._advance()
                if tok.value == "?." and self._at_punct("(", "["):
                    continue
                expr = self._finish("MemberExpression", expr, expr, self._parse_member_name())
            elif _is_punct(tok, "["):
                opener = self._advance()
                index = self._parse_expression()
                rest = self._parse_statements()
                self._expect_close(opener)
                expr = self._finish("MemberExpression", expr, expr, index, *rest)
            elif _is_punct(tok, "(") and calls:
                args = self._parse_arguments(self._advance())
                expr = self._finish("CallExpression", expr, expr, *args)
            else:
                return expr

    def _parse_arguments(self, opener: Token) -> list[Node]:
        args = self._parse_elements("SpreadElement")
        self._expect_close(opener)
        return args

    def _parse_member_name(self) -> Node | None:
        tok = self._peek()
        if _is_name(tok):
            return self._parse_identifier()
        if _is_punct(tok, "#") and _is_name(self._peek(1)):
            self._advance()
            self._advance()
            return self._finish("PrivateIdentifier", tok)
        return None

    def _parse_primary(self) -> Node | None:
        """Parse an operand. Returns None without consuming anything if no
        expression starts here."""
        tok = self._peek()
        if tok.type == TokenType.IDENTIFIER:
            nxt = self._peek(1)
            if tok.value == "async" and _is_keyword(nxt, "function") and same_line(tok, nxt):
                return self._parse_function("FunctionExpression")
            return self._parse_identifier()
        if tok.type in (TokenType.NUMBER, TokenType.STRING, TokenType.REGEX):
            return self._parse_literal()
        if tok.type == TokenType.TEMPLATE:
            self._advance()
            return _node("TemplateLiteral", tok, tok)
        if tok.type == TokenType.KEYWORD:
            return self._parse_keyword_primary(tok)
        if _is_punct(tok, "("):
            return self._parse_parenthesized(self._advance())
        if _is_punct(tok, "["):
            return self._parse_array(self._advance())
        if _is_punct(tok, "{"):
            return self._parse_object(self._advance())
        if _is_punct(tok, "#"):
            return self._parse_member_name()
        return None

    def _parse_keyword_primary(self, tok: Token) -> Node | None:
        if tok.value == "function":
            return self._parse_function("FunctionExpression")
        if tok.value == "class":
            return self._parse_class("ClassExpression")
        if tok.value in _LITERAL_KEYWORDS:
            return self._parse_literal()
        if tok.value == "import" and _is_punct(self._peek(1), "."):
            self._advance()
            self._advance()
            return self._finish("MetaProperty", tok, self._parse_member_name())
        if tok.value in _KEYWORD_NODES:
            self._advance()
            return _node(_KEYWORD_NODES[tok.value], tok, tok)
        if tok.value in _NAME_KEYWORDS:
            return self._parse_identifier()
        return None

    def _parse_parenthesized(self, opener: Token) -> Node:
        saved, self._no_in = self._no_in, False
        expr = self._parse_expression()
        rest = self._parse_statements()
        self._no_in = saved
        close = self._expect_close(opener)
        return _node("ParenthesizedExpression", opener, close, expr, *rest)

    def _parse_identifier(self) -> Node:
        tok = self._advance()
        return _node("Identifier", tok, tok)

    def _parse_literal(self) -> Node:
        tok = self._advance()
        return _node("Literal", tok, tok)


def parse(source: str, filename: str = "input.js") -> Document:
    """Tokenize and parse source text."""
    tokens = tokenize(source, filename)
    code = [t for t in tokens if not is_comment(t)]
    program = Parser(code, source, filename).parse_program()
    return Document(
        source=source,
        tokens=tuple(tokens),
        comments=tuple(t for t in tokens if is_comment(t)),
        program=program,
    )
