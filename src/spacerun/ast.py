"""Syntax tree node types.

Nodes carry an ESTree type name, a source range, and their child nodes in
source order. Tokens that ESTree folds into a parent (operators, keywords,
punctuation) have no node of their own.
"""

from __future__ import annotations

from dataclasses import dataclass

from spacerun.tokens import Span, Token

# Every node type the parser produces
NODE_TYPES = frozenset(
    {
        "ArrayExpression", "ArrayPattern", "ArrowFunctionExpression",
        "AssignmentExpression", "AssignmentPattern", "AwaitExpression",
        "BinaryExpression", "BlockStatement", "BreakStatement",
        "CallExpression", "CatchClause", "ClassBody", "ClassDeclaration",
        "ClassExpression", "ConditionalExpression", "ContinueStatement",
        "DebuggerStatement", "DoWhileStatement", "EmptyStatement",
        "ExportAllDeclaration", "ExportDefaultDeclaration",
        "ExportNamedDeclaration", "ExportSpecifier", "ExpressionStatement",
        "ForInStatement", "ForOfStatement", "ForStatement",
        "FunctionDeclaration", "FunctionExpression", "Identifier",
        "IfStatement", "Import", "ImportDeclaration",
        "ImportDefaultSpecifier", "ImportNamespaceSpecifier",
        "ImportSpecifier", "LabeledStatement", "Literal", "LogicalExpression",
        "MemberExpression", "MetaProperty", "MethodDefinition",
        "NewExpression", "ObjectExpression", "ObjectPattern",
        "ParenthesizedExpression", "PrivateIdentifier", "Program", "Property",
        "PropertyDefinition", "RestElement", "ReturnStatement",
        "SequenceExpression", "SpreadElement", "StaticBlock", "Super",
        "SwitchCase", "SwitchStatement", "TaggedTemplateExpression",
        "TemplateLiteral", "ThisExpression", "ThrowStatement", "TryStatement",
        "UnaryExpression", "UpdateExpression", "VariableDeclaration",
        "VariableDeclarator", "WhileStatement", "WithStatement",
        "YieldExpression",
    }
)  # fmt: skip


@dataclass(frozen=True, slots=True)
class Node:
    """A syntax node: ESTree type name, source range, and ordered children."""

    type: str
    span: Span
    children: tuple[Node, ...] = ()

    def contains(self, offset: int) -> bool:
        """Return True if offset lies in the half-open range of this node."""
        return self.span.start.offset <= offset < self.span.end.offset


@dataclass(frozen=True, slots=True)
class Document:
    """A tokenized and parsed source text."""

    source: str
    tokens: tuple[Token, ...]
    comments: tuple[Token, ...]
    program: Node
