from typing import Dict, Any, List, Tuple, Optional

from .tokens import tokenize, normalized_texts
from .parse_utils import parse, extract_functions, DEFAULT_MAX_DEPTH
from .ast_utils import linearize, tree_similarity_zhang_shasha
from .distance import compare
from .tree import Node, TOKEN
from .utils import read_source_file

METHODS = ("levenshtein", "zhang_shasha")


def _section(config, name) -> dict:
    return (config or {}).get(name, {}) or {}


def _compare_method(config) -> str:
    method = _section(config, "compare").get("method", "levenshtein")
    if method not in METHODS:
        raise ValueError(f"unknown compare method {method!r}; expected one of {', '.join(METHODS)}")
    return method


def fingerprint_source(src: str, config: Optional[dict] = None, verbose: bool = False) -> Dict[str, Any]:
    """
    Run tokenizer, structural parser and linearizer over one source.
    Returns {"tokens": normalized token texts, "tree": PROGRAM root, "sequence": flat sequence}.
    """
    tok_conf = _section(config, "tokenizer")
    parser_conf = _section(config, "parser")

    if verbose:
        print("  [step 1] tokenizing...")
    tokens = tokenize(src, reuse_names=bool(tok_conf.get("reuse_names", False)),
                      extended_punctuation=bool(tok_conf.get("extended_punctuation", False)))
    if verbose:
        print(f"  {len(tokens)} tokens")

    if verbose:
        print("  [step 2] parsing...")
    tree = parse(tokens, max_depth=int(parser_conf.get("max_depth", DEFAULT_MAX_DEPTH)))

    if verbose:
        print("  [step 3] linearizing...")
    sequence = linearize(tree)
    if verbose:
        print(f"  {len(sequence)} sequence elements")

    return {"tokens": normalized_texts(tokens), "tree": tree, "sequence": sequence}


def classify_similarity(similarity: float, config: Optional[dict] = None) -> str:
    bands = _section(config, "verdict")
    if similarity >= float(bands.get("high", 0.9)):
        return "highly similar"
    if similarity >= float(bands.get("moderate", 0.6)):
        return "moderately similar"
    if similarity >= float(bands.get("slight", 0.3)):
        return "slightly similar"
    return "dissimilar"


def _score_trees(tree_a: Node, tree_b: Node, method: str) -> Tuple[int, float]:
    if method == "zhang_shasha":
        return tree_similarity_zhang_shasha(tree_a, tree_b)
    return compare(linearize(tree_a), linearize(tree_b))


def compare_sources(src_a: str, src_b: str, config: Optional[dict] = None, verbose: bool = False) -> Dict[str, Any]:
    """
    Structural comparison of two sources. The returned report holds the
    distance and similarity for the configured method, the verdict band,
    a token-level similarity for reference and the linearized sequences.
    """
    method = _compare_method(config)
    if verbose:
        print("[compare] input a")
    fp_a = fingerprint_source(src_a, config, verbose=verbose)
    if verbose:
        print("[compare] input b")
    fp_b = fingerprint_source(src_b, config, verbose=verbose)
    report = _report(fp_a, fp_b, method, config)
    fp_a["tree"].clear()
    fp_b["tree"].clear()
    return report


def _report(fp_a, fp_b, method, config):
    empty = [name for name, fp in (("a", fp_a), ("b", fp_b)) if not fp["tokens"]]

    if method == "zhang_shasha":
        distance, similarity = tree_similarity_zhang_shasha(fp_a["tree"], fp_b["tree"])
    else:
        distance, similarity = compare(fp_a["sequence"], fp_b["sequence"])
    _, token_similarity = compare(fp_a["tokens"], fp_b["tokens"])

    return {
        "method": method,
        "distance": distance,
        "similarity": similarity,
        "verdict": classify_similarity(similarity, config),
        "length_a": len(fp_a["sequence"]),
        "length_b": len(fp_b["sequence"]),
        "token_count_a": len(fp_a["tokens"]),
        "token_count_b": len(fp_b["tokens"]),
        "token_similarity": token_similarity,
        "empty": empty,
        "tokens_a": fp_a["tokens"],
        "tokens_b": fp_b["tokens"],
        "sequence_a": fp_a["sequence"],
        "sequence_b": fp_b["sequence"],
    }


def compare_two_files(path_a, path_b, config=None, verbose=False):
    """
    Flat file comparison entry point (used by the CLI).
    """
    src_a = read_source_file(path_a)
    src_b = read_source_file(path_b)
    report = compare_sources(src_a, src_b, config, verbose=verbose)
    report["file_a"] = path_a
    report["file_b"] = path_b
    return report


def _renumbered(node: Node) -> Node:
    """
    Copy of a subtree whose var_N leaves are renumbered from var_0 in order
    of first appearance, so functions compare independently of their
    position in the file.
    """
    mapping: Dict[str, str] = {}

    def copy(n):
        label = n.label
        if n.kind == TOKEN and label and label.startswith("var_"):
            if label not in mapping:
                mapping[label] = f"var_{len(mapping)}"
            label = mapping[label]
        out = Node(n.kind, label, line=n.line, name=n.name)
        for c in n.children:
            out.add_child(copy(c))
        return out

    return copy(node)


def greedy_pair_entities(dict_a, dict_b, score_fn):
    """
    Greedy matching: score every (a, b) pair, then take pairs in descending
    score order while both sides are still free.
    """
    names_a = list(dict_a.keys())
    names_b = list(dict_b.keys())
    pairs: List[Tuple[float, int, str, str, Any]] = []
    order = 0
    for a in names_a:
        for b in names_b:
            result = score_fn(dict_a[a], dict_b[b])
            # order keeps ties in source order
            pairs.append((result[1], -order, a, b, result))
            order += 1
    pairs.sort(reverse=True, key=lambda x: (x[0], x[1]))
    used_a = set()
    used_b = set()
    matched = []
    for _, _, a, b, result in pairs:
        if a in used_a or b in used_b:
            continue
        used_a.add(a)
        used_b.add(b)
        matched.append((a, b, result))
    unmatched_a = [n for n in names_a if n not in used_a]
    unmatched_b = [n for n in names_b if n not in used_b]
    return matched, unmatched_a, unmatched_b


def compare_source_hierarchies(src_a: str, src_b: str, config: Optional[dict] = None) -> Dict[str, Any]:
    """
    Per-function comparison: top-level functions of both sources are paired
    greedily by structural similarity. Unpaired functions score 0.0.
    """
    method = _compare_method(config)
    fp_a = fingerprint_source(src_a, config)
    fp_b = fingerprint_source(src_b, config)
    overall = _report(fp_a, fp_b, method, config)

    funcs_a = {name: _renumbered(node) for name, node in extract_functions(fp_a["tree"]).items()}
    funcs_b = {name: _renumbered(node) for name, node in extract_functions(fp_b["tree"]).items()}

    matched, unmatched_a, unmatched_b = greedy_pair_entities(
        funcs_a, funcs_b, lambda x, y: _score_trees(x, y, method))

    functions = []
    for a, b, (distance, similarity) in matched:
        functions.append({
            "function_a": a,
            "function_b": b,
            "line_a": funcs_a[a].line,
            "line_b": funcs_b[b].line,
            "distance": distance,
            "similarity": similarity,
            "verdict": classify_similarity(similarity, config),
        })
    for name in unmatched_a:
        functions.append({"function_a": name, "function_b": None, "line_a": funcs_a[name].line,
                          "line_b": None, "distance": None, "similarity": 0.0,
                          "verdict": classify_similarity(0.0, config)})
    for name in unmatched_b:
        functions.append({"function_a": None, "function_b": name, "line_a": None,
                          "line_b": funcs_b[name].line, "distance": None, "similarity": 0.0,
                          "verdict": classify_similarity(0.0, config)})

    for node in [fp_a["tree"], fp_b["tree"], *funcs_a.values(), *funcs_b.values()]:
        node.clear()

    return {
        "method": method,
        "overall": overall,
        "functions": functions,
        "unmatched_a": unmatched_a,
        "unmatched_b": unmatched_b,
    }


def compare_hierarchies(path_a, path_b, config=None):
    """
    Hierarchical comparison of two files (functions paired across files).
    """
    src_a = read_source_file(path_a)
    src_b = read_source_file(path_b)
    report = compare_source_hierarchies(src_a, src_b, config)
    report["file_a"] = path_a
    report["file_b"] = path_b
    return report
