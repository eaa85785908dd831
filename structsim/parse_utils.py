# structsim/parse_utils.py
from collections import OrderedDict

from structsim import tokens as tk
from structsim.tree import (
    Node, PROGRAM, FUNCTION, BLOCK, IF, FOR, WHILE, DO_WHILE, SWITCH, CASE,
    DEFAULT, RETURN, BREAK, CONTINUE, STMT, EXPR, TOKEN,
)

DEFAULT_MAX_DEPTH = 100
# ceiling for max_depth; each nesting level costs a few Python frames
MAX_DEPTH_LIMIT = 200

_KEYWORD_LABELS = {
    "IF": "IF", "ELSE": "ELSE", "FOR": "FOR", "WHILE": "WHILE", "DO": "DO",
    "SWITCH": "SWITCH", "CASE": "CASE", "DEFAULT": "DEFAULT",
    "BREAK": "BREAK", "CONTINUE": "CONTINUE", "RETURN": "RETURN",
}


def token_label(t):
    """
    Label used for a TOKEN leaf. Constants collapse to NUM/STR/CHR and
    identifiers keep their var_N spelling, so renaming and reformatting do
    not change the leaves.
    """
    if t is None:
        return "NULL"
    if t.kind == tk.KEYWORD:
        return _KEYWORD_LABELS.get(t.keyword_kind, "KW")
    if t.kind == tk.IDENT:
        return t.text or "ID"
    if t.kind == tk.NUMBER:
        return "NUM"
    if t.kind == tk.STRING:
        return "STR"
    if t.kind == tk.CHAR:
        return "CHR"
    if t.kind in (tk.OPERATOR, tk.PUNCTUATION) and t.text:
        return t.text
    return "TOK"


def _leaf(t):
    return Node(TOKEN, token_label(t), line=getattr(t, "line", None))


def _is_eof(t):
    return t is None or t.kind == tk.EOF


def _is_punc(t, s):
    return t is not None and t.kind == tk.PUNCTUATION and t.text == s


def _is_kw(t, kw):
    return t is not None and t.kind == tk.KEYWORD and t.keyword_kind == kw


class _Parser:
    def __init__(self, tokens, max_depth=DEFAULT_MAX_DEPTH):
        self.toks = list(tokens)
        self.pos = 0
        self.depth = 0
        self.max_depth = max(1, min(int(max_depth), MAX_DEPTH_LIMIT))

    # ---------- token cursor ----------
    def peek(self, offset=0):
        i = self.pos + offset
        if i < len(self.toks):
            return self.toks[i]
        return None

    def cur(self):
        return self.peek(0)

    def at_eof(self):
        return _is_eof(self.cur())

    def consume(self):
        t = self.cur()
        if not _is_eof(t):
            self.pos += 1
        return t

    def _line(self):
        t = self.cur()
        return t.line if t is not None else None

    # ---------- top level ----------
    def parse_program(self):
        root = Node(PROGRAM)
        while not self.at_eof():
            start = self.pos
            if self.looks_like_function():
                node = self.parse_function()
            else:
                node = self.parse_statement()
            if node is not None and self.pos > start:
                root.add_child(node)
            else:
                self.consume()
        return root

    def looks_like_function(self):
        """
        A function definition starts here when a balanced (...) closes at
        depth 0 and is directly followed by `{`, with no `;` at depth 0
        before it.
        """
        i = self.pos
        par = 0
        saw_pair = False
        prev = None
        while i < len(self.toks):
            t = self.toks[i]
            if _is_eof(t):
                return False
            if par == 0 and _is_punc(t, ";"):
                return False
            if _is_punc(t, "("):
                par += 1
            elif _is_punc(t, ")"):
                if par > 0:
                    par -= 1
                    if par == 0:
                        saw_pair = True
            elif par == 0 and _is_punc(t, "{"):
                return saw_pair and _is_punc(prev, ")")
            prev = t
            i += 1
        return False

    def parse_function(self):
        header_start = self.cur()
        fn = Node(FUNCTION, line=getattr(header_start, "line", None))
        header = Node(STMT, "FUNC_HEADER", line=fn.line)

        name = None
        while not self.at_eof() and not _is_punc(self.cur(), "{"):
            t = self.consume()
            nxt = self.cur()
            if name is None and t.kind == tk.IDENT and _is_punc(nxt, "("):
                name = t.raw
            header.add_child(_leaf(t))
        fn.name = name
        fn.add_child(header)
        fn.add_child(self.parse_block())
        return fn

    # ---------- statements ----------
    def parse_statement(self):
        t = self.cur()
        if _is_eof(t):
            return None

        self.depth += 1
        try:
            if self.depth > self.max_depth:
                return self.parse_flat()

            if _is_punc(t, "{"):
                return self.parse_block()
            if t.kind == tk.KEYWORD:
                handler = self._keyword_handlers.get(t.keyword_kind)
                if handler is not None:
                    return handler(self)
            return self.parse_until_semicolon(STMT)
        finally:
            self.depth -= 1

    def parse_block(self):
        if not _is_punc(self.cur(), "{"):
            return None
        block = Node(BLOCK, line=self._line())
        self.consume()

        while not self.at_eof() and not _is_punc(self.cur(), "}"):
            self._parse_into(block)

        if _is_punc(self.cur(), "}"):
            self.consume()
        return block

    def _parse_into(self, parent):
        """Parse one statement into `parent`; skip a token when nothing was consumed."""
        start = self.pos
        st = self.parse_statement()
        if st is not None and self.pos > start:
            parent.add_child(st)
        else:
            self.consume()

    def parse_paren_expr(self):
        if not _is_punc(self.cur(), "("):
            return None
        expr = Node(EXPR, line=self._line())
        self.consume()

        depth = 1
        while not self.at_eof():
            t = self.consume()
            if _is_punc(t, "("):
                depth += 1
            elif _is_punc(t, ")"):
                depth -= 1
                if depth == 0:
                    break
            expr.add_child(_leaf(t))
        return expr

    def parse_until_semicolon(self, kind):
        """
        Collect tokens up to the next `;` outside ()/[] into a `kind` node.
        The `;` is consumed; `{` and `}` stop collection and stay in place.
        """
        st = Node(kind, line=self._line())
        par = brk = 0
        while not self.at_eof():
            t = self.cur()
            if _is_punc(t, "("):
                par += 1
            elif _is_punc(t, ")"):
                if par > 0:
                    par -= 1
            elif _is_punc(t, "["):
                brk += 1
            elif _is_punc(t, "]"):
                if brk > 0:
                    brk -= 1

            if par == 0 and brk == 0:
                if _is_punc(t, ";"):
                    self.consume()
                    break
                if _is_punc(t, "{") or _is_punc(t, "}"):
                    break

            self.consume()
            st.add_child(_leaf(t))
        return st

    def parse_flat(self):
        # past max_depth: no more structure, braces are tracked like brackets
        st = Node(STMT, line=self._line())
        depth = 0
        while not self.at_eof():
            t = self.cur()
            if _is_punc(t, "}") and depth == 0:
                break
            self.consume()
            if t.kind == tk.PUNCTUATION and t.text in ("(", "[", "{"):
                depth += 1
            elif t.kind == tk.PUNCTUATION and t.text in (")", "]", "}"):
                depth = max(0, depth - 1)
                if depth == 0 and t.text == "}":
                    st.add_child(_leaf(t))
                    break
            elif depth == 0 and t.text == ";":
                break
            st.add_child(_leaf(t))
        return st

    def _with_paren_and_body(self, kind):
        n = Node(kind, line=self._line())
        self.consume()
        n.add_child(self.parse_paren_expr())
        n.add_child(self.parse_statement())
        return n

    def parse_if(self):
        n = self._with_paren_and_body(IF)
        if _is_kw(self.cur(), "ELSE"):
            else_node = Node(BLOCK, "ELSE", line=self._line())
            self.consume()
            else_node.add_child(self.parse_statement())
            n.add_child(else_node)
        return n

    def parse_for(self):
        return self._with_paren_and_body(FOR)

    def parse_while(self):
        return self._with_paren_and_body(WHILE)

    def parse_switch(self):
        return self._with_paren_and_body(SWITCH)

    def parse_do_while(self):
        n = Node(DO_WHILE, line=self._line())
        self.consume()
        n.add_child(self.parse_statement())
        if _is_kw(self.cur(), "WHILE"):
            self.consume()
            n.add_child(self.parse_paren_expr())
            if _is_punc(self.cur(), ";"):
                self.consume()
        return n

    def _parse_label_body(self, label):
        body = Node(BLOCK, label, line=self._line())
        while (not self.at_eof()
               and not _is_kw(self.cur(), "CASE")
               and not _is_kw(self.cur(), "DEFAULT")
               and not _is_punc(self.cur(), "}")):
            self._parse_into(body)
        return body

    def parse_case(self):
        n = Node(CASE, line=self._line())
        self.consume()

        expr = Node(EXPR, line=self._line())
        while (not self.at_eof()
               and not _is_punc(self.cur(), ":")
               and not _is_punc(self.cur(), "{")
               and not _is_punc(self.cur(), "}")):
            expr.add_child(_leaf(self.consume()))
        if _is_punc(self.cur(), ":"):
            self.consume()
        n.add_child(expr)
        n.add_child(self._parse_label_body("CASE BODY"))
        return n

    def parse_default(self):
        n = Node(DEFAULT, line=self._line())
        self.consume()
        if _is_punc(self.cur(), ":"):
            self.consume()
        n.add_child(self._parse_label_body("DEFAULT BODY"))
        return n

    def parse_return(self):
        n = Node(RETURN, line=self._line())
        self.consume()
        n.add_child(self.parse_until_semicolon(EXPR))
        return n

    def _parse_jump(self, kind):
        n = Node(kind, line=self._line())
        self.consume()
        if _is_punc(self.cur(), ";"):
            self.consume()
        return n

    def parse_break(self):
        return self._parse_jump(BREAK)

    def parse_continue(self):
        return self._parse_jump(CONTINUE)

    _keyword_handlers = {
        "IF": parse_if,
        "FOR": parse_for,
        "WHILE": parse_while,
        "DO": parse_do_while,
        "SWITCH": parse_switch,
        "CASE": parse_case,
        "DEFAULT": parse_default,
        "RETURN": parse_return,
        "BREAK": parse_break,
        "CONTINUE": parse_continue,
    }


def parse(tokens, max_depth=DEFAULT_MAX_DEPTH):
    """
    Build the PROGRAM tree for a token sequence (with or without the
    terminal EOF token). Never fails on malformed input: unrecognized spans
    end up as STMT/EXPR leaves and unusable tokens are skipped one at a time.
    """
    return _Parser(tokens, max_depth=max_depth).parse_program()


def looks_like_function(tokens, pos=0):
    p = _Parser(tokens)
    p.pos = pos
    return p.looks_like_function()


def extract_functions(root):
    """
    Return an ordered mapping name -> FUNCTION node for the top-level
    functions of `root`. Anonymous headers become function_<i>; repeated
    names get a #<n> suffix.
    """
    out = OrderedDict()
    if root is None:
        return out
    for i, node in enumerate(c for c in root.children if c.kind == FUNCTION):
        name = node.name or f"function_{i}"
        key = name
        n = 2
        while key in out:
            key = f"{name}#{n}"
            n += 1
        out[key] = node
    return out
