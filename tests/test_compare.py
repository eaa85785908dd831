# tests/test_compare.py
import copy

import pytest

from structsim.compare import (
    compare_sources, compare_two_files, compare_source_hierarchies, compare_hierarchies,
    fingerprint_source, classify_similarity,
)
from structsim.config import DEFAULT_CONFIG
from structsim.tree import Node


def write_temp(tmp_path, name, src):
    p = tmp_path / name
    p.write_text(src, encoding="utf-8")
    return str(p)


def config_with(**sections):
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    for name, values in sections.items():
        cfg[name].update(values)
    return cfg


def test_structurally_identical_programs():
    a = "if(a>0){return 1;}else{return 0;}"
    b = "if(b>10){return 2;}else{return 3;}"
    res = compare_sources(a, b, DEFAULT_CONFIG)
    assert res["distance"] == 0
    assert res["similarity"] == 1.0
    assert res["verdict"] == "highly similar"
    assert res["sequence_a"] == res["sequence_b"]


def test_different_operator_reduces_similarity():
    a = "if(a>0){return 1;}else{return 0;}"
    b = "if(b<10){return 2;}else{return 3;}"
    res = compare_sources(a, b, DEFAULT_CONFIG)
    assert res["distance"] == 1
    assert 0.9 < res["similarity"] < 1.0


def test_empty_sources(capsys):
    res = compare_sources("", "  // nothing\n", DEFAULT_CONFIG)
    assert capsys.readouterr().out == ""
    assert res["similarity"] == 1.0
    assert res["empty"] == ["a", "b"]
    assert res["sequence_a"] == ["<PROGRAM>", "</PROGRAM>"]


def test_fingerprint_source():
    fp = fingerprint_source("int a=1;", DEFAULT_CONFIG)
    assert fp["tokens"] == ["int", "var_0", "=", "NUM", ";"]
    assert fp["tree"].kind == "PROGRAM"
    assert fp["sequence"][0] == "<PROGRAM>"


def test_reuse_names_option():
    src = "x = y + x;"
    plain = fingerprint_source(src, DEFAULT_CONFIG)["tokens"]
    reused = fingerprint_source(src, config_with(tokenizer={"reuse_names": True}))["tokens"]
    assert plain == ["var_0", "=", "var_1", "+", "var_2", ";"]
    assert reused == ["var_0", "=", "var_1", "+", "var_0", ";"]


def test_compare_two_files(tmp_path):
    fa = write_temp(tmp_path, "a.c", "int main() { int x = 1; while (x < 10) { x++; } return x; }\n")
    fb = write_temp(tmp_path, "b.c", "int main()\n{\n  int n = 5;\n  while (n < 99)\n  {\n    n++;\n  }\n  return n;\n}\n")
    res = compare_two_files(fa, fb, DEFAULT_CONFIG)
    assert res["file_a"] == fa and res["file_b"] == fb
    assert res["similarity"] == 1.0
    assert res["token_similarity"] == 1.0


def test_zhang_shasha_method():
    cfg = config_with(compare={"method": "zhang_shasha"})
    res = compare_sources("for(;;){x;}", "for(;;){y;}", cfg)
    assert res["method"] == "zhang_shasha"
    assert res["similarity"] == 1.0
    res = compare_sources("for(;;){x;}", "if(a){b;}", cfg)
    assert res["similarity"] < 1.0


def test_unknown_method():
    with pytest.raises(ValueError):
        compare_sources("a;", "b;", config_with(compare={"method": "nope"}))


def test_classify_similarity():
    assert classify_similarity(0.95) == "highly similar"
    assert classify_similarity(0.9) == "highly similar"
    assert classify_similarity(0.6) == "moderately similar"
    assert classify_similarity(0.3) == "slightly similar"
    assert classify_similarity(0.29) == "dissimilar"
    assert classify_similarity(0.5, {"verdict": {"high": 0.8, "moderate": 0.5}}) == "moderately similar"


def test_hierarchy_pairs_reordered_functions():
    a = (
        "int f(int x) { return x + 1; }\n"
        "int g(int y) { while (y) { y--; } return y; }\n"
    )
    b = (
        "int h(int q) { while (q) { q--; } return q; }\n"
        "int k(int z) { return z + 1; }\n"
    )
    report = compare_source_hierarchies(a, b, DEFAULT_CONFIG)
    pairs = {(e["function_a"], e["function_b"]): e["similarity"] for e in report["functions"]}
    assert pairs == {("f", "k"): 1.0, ("g", "h"): 1.0}
    assert report["unmatched_a"] == [] and report["unmatched_b"] == []
    assert report["overall"]["similarity"] < 1.0


def test_hierarchy_unmatched_functions(tmp_path):
    fa = write_temp(tmp_path, "a.c", "void f() { }\nvoid g() { }\n")
    fb = write_temp(tmp_path, "b.c", "void h() { }\n")
    report = compare_hierarchies(fa, fb, DEFAULT_CONFIG)
    assert report["file_a"] == fa
    assert len(report["unmatched_a"]) == 1
    assert report["unmatched_b"] == []
    unmatched = [e for e in report["functions"] if e["function_b"] is None]
    assert unmatched[0]["similarity"] == 0.0
    assert unmatched[0]["verdict"] == "dissimilar"


def test_extended_punctuation_option():
    src = "int f(int x) { return x ? 1 : 0; }"
    plain = fingerprint_source(src, DEFAULT_CONFIG)["tokens"]
    extended = fingerprint_source(src, config_with(tokenizer={"extended_punctuation": True}))["tokens"]
    assert "?" not in plain and ":" not in plain
    assert extended[-6:] == ["?", "NUM", ":", "NUM", ";", "}"]


def test_hierarchy_clears_trees(monkeypatch):
    cleared = []
    original_clear = Node.clear

    def recording_clear(self):
        cleared.append(self.kind)
        original_clear(self)

    monkeypatch.setattr(Node, "clear", recording_clear)
    compare_source_hierarchies("int f() { return 1; }", "int g() { return 2; }", DEFAULT_CONFIG)
    assert cleared.count("PROGRAM") == 2
    assert cleared.count("FUNCTION") == 2


def test_large_max_depth_is_capped():
    src = "{" * 300 + "x;" + "}" * 300
    res = compare_sources(src, src, config_with(parser={"max_depth": 5000}))
    assert res["similarity"] == 1.0
