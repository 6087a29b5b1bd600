"""Test offset lookups over tokens and syntax nodes."""

from spacerun.index import TokenIndex
from spacerun.parser import parse


def index_for(source: str) -> TokenIndex:
    return TokenIndex.from_document(parse(source, "test.js"))


class TestTokenAt:
    def test_exact_start(self):
        idx = index_for("a = 1;")
        tok = idx.token_at(4)
        assert tok is not None
        assert tok.value == "1"

    def test_inside_token(self):
        idx = index_for("abc = 1;")
        assert idx.token_at(1) is None

    def test_whitespace(self):
        idx = index_for("a  = 1;")
        assert idx.token_at(2) is None

    def test_comment(self):
        idx = index_for("a; // c")
        tok = idx.token_at(3)
        assert tok is not None
        assert tok.value == " c"

    def test_eof_excluded(self):
        idx = index_for("a  ")
        assert idx.token_at(3) is None


class TestNeighbours:
    def test_before_and_after(self):
        idx = index_for("a /* b */ c")
        b = idx.token_at(2)
        assert b is not None
        before = idx.token_before(b)
        after = idx.token_after(b)
        assert before is not None and before.value == "a"
        assert after is not None and after.value == "c"

    def test_edges(self):
        idx = index_for("a b")
        a = idx.token_at(0)
        b = idx.token_at(2)
        assert a is not None and b is not None
        assert idx.token_before(a) is None
        assert idx.token_after(b) is None


class TestNodeAt:
    def test_smallest_node(self):
        source = "var o = { foo:  1 };"
        idx = index_for(source)
        node = idx.node_at(source.index("  1") + 1)
        assert node is not None
        assert node.type == "Property"

    def test_between_members(self):
        source = "o = { a: 1,  b: 2 };"
        idx = index_for(source)
        node = idx.node_at(source.index(",  b") + 2)
        assert node is not None
        assert node.type == "ObjectExpression"

    def test_top_level(self):
        idx = index_for("a = 1;  b = 2;")
        node = idx.node_at(7)
        assert node is not None
        assert node.type == "Program"

    def test_past_end(self):
        idx = index_for("a;")
        assert idx.node_at(2) is None

    def test_without_tree(self):
        idx = TokenIndex(parse("a;", "test.js").tokens)
        assert idx.node_at(0) is None

    def test_expression_inside_property(self):
        source = "var o = { a: b  + c };"
        idx = index_for(source)
        node = idx.node_at(source.index("  +") + 1)
        assert node is not None
        assert node.type == "BinaryExpression"

    def test_leaf(self):
        source = "foo(bar);"
        idx = index_for(source)
        node = idx.node_at(source.index("bar") + 1)
        assert node is not None
        assert node.type == "Identifier"

    def test_deep_nesting(self):
        source = "x = " + "[" * 50 + "1" + "]" * 50 + ";"
        idx = index_for(source)
        node = idx.node_at(source.index("1"))
        assert node is not None
        assert node.type == "Literal"

    def test_matches_linear_search(self):
        source = (
            "function f(a,  b) {\n"
            "  for (let i = 0; i <  n; i++) { g(a[i],  { k:  v }); }\n"
            "  return a ?  b : c;\n"
            "}\n"
        )
        doc = parse(source, "test.js")
        idx = TokenIndex.from_document(doc)

        def smallest(node, offset):
            for child in node.children:
                if child.contains(offset):
                    return smallest(child, offset)
            return node

        for offset in range(len(source)):
            assert idx.node_at(offset) is smallest(doc.program, offset)
