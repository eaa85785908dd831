from collections import namedtuple

# token kinds
EOF = "EOF"
IDENT = "IDENT"
KEYWORD = "KEYWORD"
NUMBER = "NUMBER"
STRING = "STRING"
CHAR = "CHAR"
OPERATOR = "OPERATOR"
PUNCTUATION = "PUNCTUATION"

Token = namedtuple("Token", ["kind", "keyword_kind", "text", "raw", "line", "column"])

KEYWORDS = {
    "if": "IF", "else": "ELSE", "for": "FOR", "while": "WHILE",
    "do": "DO", "switch": "SWITCH", "case": "CASE", "default": "DEFAULT",
    "return": "RETURN", "break": "BREAK", "continue": "CONTINUE",
    "int": "INT", "char": "CHAR", "float": "FLOAT", "double": "DOUBLE",
    "void": "VOID", "struct": "STRUCT", "typedef": "TYPEDEF",
}

OPERATOR_CHARS = "+-*/%=!<>&|^~"
TWO_CHAR_OPERATORS = frozenset([
    "==", "!=", "<=", ">=", "&&", "||", "++", "--",
    "+=", "-=", "*=", "/=", "%=", "<<", ">>", "->",
])
PUNCTUATION_CHARS = "(){}[];,."

# opt-in: `?` as an operator and `:` as punctuation, so case labels and
# ternaries keep their separators
EXTENDED_OPERATOR_CHARS = OPERATOR_CHARS + "?"
EXTENDED_PUNCTUATION_CHARS = PUNCTUATION_CHARS + ":"

_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_IDENT_CHARS = _LETTERS | _DIGITS
_NUMBER_SUFFIXES = frozenset("LlUuFf")
_WHITESPACE = frozenset(" \t\n\r\v\f")


class Tokenizer:
    """
    Pull-based lexer over C-like source text.

    Whitespace, comments and unknown characters never produce tokens.
    Identifiers are renamed to var_<N>; with reuse_names=False every
    occurrence takes the next ordinal, with reuse_names=True a spelling keeps
    the ordinal of its first appearance.

    With extended_punctuation=True `?` and `:` are emitted as tokens instead
    of being skipped.
    """

    def __init__(self, source, reuse_names=False, extended_punctuation=False):
        self.source = source or ""
        self.pos = 0
        self.line = 1
        self.column = 1
        self.reuse_names = reuse_names
        self.ident_counter = 0
        self.name_map = {}
        if extended_punctuation:
            self.operator_chars = EXTENDED_OPERATOR_CHARS
            self.punctuation_chars = EXTENDED_PUNCTUATION_CHARS
        else:
            self.operator_chars = OPERATOR_CHARS
            self.punctuation_chars = PUNCTUATION_CHARS

    def __iter__(self):
        return self

    def __next__(self):
        tok = self.next_token()
        if tok.kind == EOF:
            raise StopIteration
        return tok

    def _peek(self, offset=0):
        i = self.pos + offset
        if i < len(self.source):
            return self.source[i]
        return ""

    def _advance(self):
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_whitespace_and_comments(self):
        while self.pos < len(self.source):
            ch = self._peek()
            if ch in _WHITESPACE:
                self._advance()
            elif ch == "/" and self._peek(1) == "/":
                while self.pos < len(self.source) and self._peek() != "\n":
                    self._advance()
            elif ch == "/" and self._peek(1) == "*":
                self._advance()
                self._advance()
                while self.pos < len(self.source):
                    if self._peek() == "*" and self._peek(1) == "/":
                        self._advance()
                        self._advance()
                        break
                    self._advance()
            else:
                break

    def at_end(self):
        self._skip_whitespace_and_comments()
        return self.pos >= len(self.source)

    def next_token(self):
        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                return Token(EOF, None, "", "", self.line, self.column)
            ch = self._peek()
            if ch in _LETTERS:
                return self._read_identifier()
            if ch in _DIGITS:
                return self._read_number()
            if ch == '"':
                return self._read_quoted('"', STRING, "STR")
            if ch == "'":
                return self._read_quoted("'", CHAR, "CHR")
            if ch in self.operator_chars:
                return self._read_operator()
            if ch in self.punctuation_chars:
                line, column = self.line, self.column
                self._advance()
                return Token(PUNCTUATION, None, ch, ch, line, column)
            # unknown character: skip it
            self._advance()

    def _read_identifier(self):
        line, column = self.line, self.column
        start = self.pos
        while self._peek() and self._peek() in _IDENT_CHARS:
            self._advance()
        word = self.source[start:self.pos]

        kw = KEYWORDS.get(word)
        if kw is not None:
            return Token(KEYWORD, kw, word, word, line, column)
        return Token(IDENT, None, self._normalize_name(word), word, line, column)

    def _normalize_name(self, word):
        if self.reuse_names and word in self.name_map:
            return self.name_map[word]
        normalized = f"var_{self.ident_counter}"
        self.ident_counter += 1
        self.name_map.setdefault(word, normalized)
        return normalized

    def _read_digits(self, allowed):
        while self._peek() and self._peek() in allowed:
            self._advance()

    def _read_number(self):
        line, column = self.line, self.column
        start = self.pos

        if self._peek() == "0" and self._peek(1) in ("x", "X"):
            self._advance()
            self._advance()
            self._read_digits(_HEX_DIGITS)
        else:
            self._read_digits(_DIGITS)
            if self._peek() == ".":
                self._advance()
                self._read_digits(_DIGITS)
            if self._peek() in ("e", "E"):
                self._advance()
                if self._peek() in ("+", "-"):
                    self._advance()
                self._read_digits(_DIGITS)

        self._read_digits(_NUMBER_SUFFIXES)
        return Token(NUMBER, None, "NUM", self.source[start:self.pos], line, column)

    def _read_quoted(self, quote, kind, normalized):
        line, column = self.line, self.column
        start = self.pos
        self._advance()
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == "\\":
                if self.pos < len(self.source):
                    self._advance()
            elif ch == quote:
                break
        return Token(kind, None, normalized, self.source[start:self.pos], line, column)

    def _read_operator(self):
        line, column = self.line, self.column
        op = self._advance()
        if op + self._peek() in TWO_CHAR_OPERATORS:
            op += self._advance()
        return Token(OPERATOR, None, op, op, line, column)


def tokenize(source, reuse_names=False, include_eof=False, extended_punctuation=False):
    """
    Return the list of tokens of `source`. An empty or whitespace-only source
    gives []. The terminal EOF token is appended only when include_eof is set.
    """
    tk = Tokenizer(source, reuse_names=reuse_names, extended_punctuation=extended_punctuation)
    tokens = list(tk)
    if include_eof:
        tokens.append(tk.next_token())
    return tokens


def normalized_texts(tokens):
    return [t.text for t in tokens if t.kind != EOF]
