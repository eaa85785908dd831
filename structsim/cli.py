# structsim/cli.py
import argparse
import json
import os
import sys

import yaml

from .config import load_config
from .compare import compare_two_files, compare_hierarchies, fingerprint_source, METHODS
from .tree import dump
from .utils import read_source_file


def parse_args(argv=None):

    p = argparse.ArgumentParser(description="Structural similarity of two C-like source files.")
    p.add_argument("file_a", help="First source file")
    p.add_argument("file_b", help="Second source file")
    p.add_argument("--config", "-c", help="YAML config file (optional)", default=None)
    p.add_argument("--hierarchy", "-H", action="store_true", help="Pair functions across files and score each pair")
    p.add_argument("--json", "-j", help="Write JSON report to given file (optional)", default=None)
    p.add_argument("--method", choices=METHODS, default=None, help="Override compare.method from the config")
    p.add_argument("--show-sequences", action="store_true", help="Print both linearized sequences")
    p.add_argument("--dump-tree", action="store_true", help="Print both structural trees")
    p.add_argument("--verbose", "-v", action="store_true", help="Print pipeline steps")
    return p.parse_args(argv)


def _write_json(path, report):
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2)
    print(f"JSON report written to {path}")


def _print_hierarchy(args, report):
    print(f"Hierarchical comparison: {args.file_a} <-> {args.file_b}")
    overall = report["overall"]
    print(f"  overall: {overall['similarity'] * 100:.2f}% ({overall['verdict']})")
    print("Functions:")
    for entry in report["functions"]:
        a = entry["function_a"] or "-"
        b = entry["function_b"] or "-"
        print(f"  {a} <-> {b}: {entry['similarity'] * 100:.2f}% ({entry['verdict']})")


def _print_flat(args, report):
    print("Comparison results:")
    print(f"  method:           {report['method']}")
    print(f"  edit distance:    {report['distance']}")
    print(f"  sequence lengths: A={report['length_a']}, B={report['length_b']}")
    print(f"  token similarity: {report['token_similarity']:.4f}")
    print(f"  similarity:       {report['similarity'] * 100:.2f}%")
    print(f"  verdict:          {report['verdict']}")
    print()
    print(f"Normalized tokens {os.path.basename(args.file_a)}: {report['token_count_a']} tokens")
    print(f"Normalized tokens {os.path.basename(args.file_b)}: {report['token_count_b']} tokens")
    if args.show_sequences:
        print()
        print(f"Sequence {os.path.basename(args.file_a)}:")
        print("  " + " ".join(report["sequence_a"]))
        print(f"Sequence {os.path.basename(args.file_b)}:")
        print("  " + " ".join(report["sequence_b"]))


def main(argv=None):

    args = parse_args(argv)

    try:
        config = load_config(args.config)
        if args.method:
            config.setdefault("compare", {})["method"] = args.method

        if args.dump_tree:
            for path in (args.file_a, args.file_b):
                print(f"Tree {path}:")
                print(dump(fingerprint_source(read_source_file(path), config)["tree"], indent=1))

        if args.hierarchy:
            report = compare_hierarchies(args.file_a, args.file_b, config)
            _print_hierarchy(args, report)
            empty = report["overall"]["empty"]
        else:
            report = compare_two_files(args.file_a, args.file_b, config, verbose=args.verbose)
            _print_flat(args, report)
            empty = report["empty"]

        for name in empty:
            print(f"[compare] input {name} contains no tokens; nothing to compare")

        if args.json:
            _write_json(args.json, report)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error during comparison: {e}", file=sys.stderr)
        return 1

    return 1 if empty else 0


if __name__ == "__main__":
    sys.exit(main())
