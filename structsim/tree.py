# structsim/tree.py
# node kinds, spelled the way they appear in linearized sequences
PROGRAM = "PROGRAM"
FUNCTION = "FUNCTION"
BLOCK = "BLOCK"
IF = "IF"
FOR = "FOR"
WHILE = "WHILE"
DO_WHILE = "DO_WHILE"
SWITCH = "SWITCH"
CASE = "CASE"
DEFAULT = "DEFAULT"
RETURN = "RETURN"
BREAK = "BREAK"
CONTINUE = "CONTINUE"
STMT = "STMT"
EXPR = "EXPR"
TOKEN = "TOKEN"

NODE_KINDS = (
    PROGRAM, FUNCTION, BLOCK,
    IF, FOR, WHILE, DO_WHILE, SWITCH, CASE, DEFAULT,
    RETURN, BREAK, CONTINUE,
    STMT, EXPR, TOKEN,
)


class Node:
    """
    Node of the coarse structural tree.

    Only TOKEN nodes carry a label that ends up in the linearized sequence;
    other kinds may hold a marker label ("ELSE", "CASE BODY", ...) for
    debugging. `line` and `name` are diagnostics and never compared.
    """

    def __init__(self, kind, label=None, line=None, name=None):
        self.kind = kind
        self.label = label
        self.children = []
        self.line = line
        self.name = name

    def add_child(self, child):
        if child is not None:
            self.children.append(child)
        return child

    def walk(self):
        """Preorder iteration over the subtree rooted at this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def size(self):
        return sum(1 for _ in self.walk())

    def clear(self):
        """Recursively drop the whole subtree below this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            stack.extend(node.children)
            node.children = []

    def __repr__(self):
        if self.label:
            return f"Node({self.kind!r}, {self.label!r}, children={len(self.children)})"
        return f"Node({self.kind!r}, children={len(self.children)})"


def kind_name(kind):
    if kind in NODE_KINDS:
        return kind
    return "UNKNOWN"


def dump(node, indent=0):
    """
    Indented, one node per line debug rendering (preorder). TOKEN leaves are
    shown as `TOKEN: <label>`.
    """
    if node is None:
        return ""
    lines = []
    stack = [(node, indent)]
    while stack:
        n, depth = stack.pop()
        pad = "  " * depth
        if n.kind == TOKEN and n.label:
            lines.append(f"{pad}{kind_name(n.kind)}: {n.label}")
        else:
            lines.append(f"{pad}{kind_name(n.kind)}")
        for child in reversed(n.children):
            stack.append((child, depth + 1))
    return "\n".join(lines)
