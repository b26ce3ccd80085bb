import argparse
import logging
import os
import sys

from dfamin.automaton import DEFAULT_MAX_ALPHABET_SIZE, DEFAULT_MAX_STATES, GraphLimits
from dfamin.conversion import minimize
from dfamin.errors import DfaminError
from dfamin.parsing import FORMATS, detect_format_from_ext, load_automaton, write_minimized
from dfamin.rendering import render_table

logger = logging.getLogger(__name__)


def build_arg_parser():
    p = argparse.ArgumentParser(
        prog="dfamin",
        description="Minimize a DFA (JSON/XML) by removing unreachable states and merging equivalent ones.",
    )
    p.add_argument("input", help="Input file (.json or .xml) describing a DFA")
    p.add_argument("-o", "--output", help="Write the minimized DFA to this file (.json or .xml)")
    p.add_argument("--in-format", choices=FORMATS, help="Force the input format (default: by extension)")
    p.add_argument("--out-format", choices=FORMATS, help="Force the output format (default: by extension)")
    p.add_argument("--name", help="Name of the output automaton")
    p.add_argument("--max-states", type=int, default=DEFAULT_MAX_STATES, help="Maximum number of states")
    p.add_argument(
        "--max-alphabet-size", type=int, default=DEFAULT_MAX_ALPHABET_SIZE, help="Maximum alphabet size"
    )
    p.add_argument("--plot", metavar="PNG", help="Save a drawing of the minimized DFA to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every refinement pass")
    return p


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        limits = GraphLimits(max_states=args.max_states, max_alphabet_size=args.max_alphabet_size)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    in_fmt = args.in_format or detect_format_from_ext(args.input)
    try:
        graph, start, name = load_automaton(args.input, in_fmt, limits)
        print(f"Original DFA loaded: {name}")
        print(f"States: {len(graph)}, Alphabet: {list(graph.alphabet)}, Start: {start.name}")

        dfa = minimize(graph, start, name=args.name or f"{name}__MIN")
    except DfaminError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    print(f"\nMinimization complete: {dfa.name}")
    print(f"Removed unreachable: {dfa.removed_states} | Refinement passes: {dfa.refinement_passes}")
    print()
    print(render_table(dfa))

    if args.output:
        out_fmt = args.out_format or detect_format_from_ext(args.output)
        try:
            write_minimized(dfa, args.output, out_fmt)
        except OSError as e:
            print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"\nInput: {args.input} ({in_fmt})  ->  Output: {args.output} ({out_fmt})")

    if args.plot:
        from dfamin.visualization import save_plot

        try:
            dirname = os.path.dirname(args.plot)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            save_plot(dfa, args.plot)
        except OSError as e:
            print(f"Error: cannot write {args.plot}: {e}", file=sys.stderr)
            return 1
        print(f"Plot saved to {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
