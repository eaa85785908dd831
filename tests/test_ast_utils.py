# tests/test_ast_utils.py
from structsim.tokens import tokenize
from structsim.parse_utils import parse
from structsim.ast_utils import linearize, tree_similarity_zhang_shasha
from structsim.tree import Node, dump, kind_name, PROGRAM, BLOCK, TOKEN, STMT


def tree_of(src):
    return parse(tokenize(src))


def test_linearize_statement():
    assert linearize(tree_of("int a=1;")) == [
        "<PROGRAM>",
        "<STMT>",
        "<TOKEN>", "KW", "</TOKEN>",
        "<TOKEN>", "var_0", "</TOKEN>",
        "<TOKEN>", "=", "</TOKEN>",
        "<TOKEN>", "NUM", "</TOKEN>",
        "</STMT>",
        "</PROGRAM>",
    ]


def test_linearize_none_and_marker_labels():
    assert linearize(None) == []
    root = Node(PROGRAM)
    block = root.add_child(Node(BLOCK, "CASE BODY"))
    block.add_child(Node(TOKEN, ""))
    assert linearize(root) == ["<PROGRAM>", "<BLOCK>", "<TOKEN>", "</TOKEN>", "</BLOCK>", "</PROGRAM>"]


def test_whitespace_and_renaming_invariance():
    a = linearize(tree_of("if(x>5){return 1;}"))
    b = linearize(tree_of("if (x > 5) {\n  return 1 ;\n}"))
    c = linearize(tree_of("if (count > 9) { return 42; }"))
    assert a == b == c


def test_zhang_shasha_identical_and_different():
    ta = tree_of("int f(int x) { if (x) { return 1; } return 0; }")
    tb = tree_of("int g(int y) { if (y) { return 2; } return 3; }")
    tc = tree_of("while (1) { x++; }")
    assert tree_similarity_zhang_shasha(ta, tb) == (0, 1.0)
    dist, sim = tree_similarity_zhang_shasha(ta, tc)
    assert dist > 0
    assert 0.0 <= sim < 1.0


def test_zhang_shasha_empty_trees():
    assert tree_similarity_zhang_shasha(None, None) == (0, 1.0)
    dist, sim = tree_similarity_zhang_shasha(tree_of(""), None)
    assert dist == 1
    assert sim == 0.0


def test_dump_and_kind_name():
    out = dump(tree_of("x = 1;"))
    assert out.splitlines() == [
        "PROGRAM",
        "  STMT",
        "    TOKEN: var_0",
        "    TOKEN: =",
        "    TOKEN: NUM",
    ]
    assert kind_name(STMT) == "STMT"
    assert kind_name("nope") == "UNKNOWN"


def test_walk_size_and_clear():
    root = tree_of("if (a) b;")
    kinds = [n.kind for n in root.walk()]
    assert kinds[:3] == ["PROGRAM", "IF", "EXPR"]
    assert root.size() == len(kinds)
    root.clear()
    assert root.children == []
    assert root.size() == 1
