"""Command-line interface for Karnaugh map minimization."""

import argparse
import sys

from .errors import MinimizerError
from .export import to_equations, to_verilog
from .kmap import print_kmap
from .solver import METHODS, BooleanMinimizer
from .truth_tables import DEFAULT_VARIABLES, TruthTableSpec, print_truth_table


def parse_index_list(text: str) -> list[int]:
    """Parse ``"1,2,5"`` (whitespace allowed) into a list of ints."""
    if not text or not text.strip():
        return []
    try:
        return [int(part) for part in text.replace(" ", "").split(",") if part]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid index list: {text!r}")


def parse_variables(text: str) -> list[str]:
    if "," in text:
        return [name.strip() for name in text.split(",")]
    return list(text)


def build_spec(args) -> TruthTableSpec:
    if args.outputs is not None:
        if args.vars is None:
            n_vars = max(len(args.outputs).bit_length() - 1, 0)
            variables = list(DEFAULT_VARIABLES[:n_vars])
        else:
            variables = args.vars
        return TruthTableSpec.from_outputs(variables, args.outputs, args.dont_cares)

    variables = args.vars if args.vars is not None else list(DEFAULT_VARIABLES[:4])
    return TruthTableSpec.from_indices(variables, args.minterms, args.dont_cares)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Minimize a Boolean function of 2-6 variables (SOP/POS)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kmap-minimize --vars ABC --minterms 3,5,6,7
  kmap-minimize --vars ABCD --minterms 0,2,5 --dont-cares 8,10
  kmap-minimize --outputs 1011011111------      Output vector, 4 variables
  kmap-minimize --outputs 0111 --kmap           Also print the K-map
  kmap-minimize --method maxsat ...             Exact cover via MaxSAT
  kmap-minimize --format verilog ...            Output as Verilog module
        """,
    )

    parser.add_argument(
        "--vars",
        type=parse_variables,
        default=None,
        help="Variable names, MSB first: 'ABCD' or 'x1,x2,x3' (default: A, B, ...)",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--minterms", "-m",
        type=parse_index_list,
        default=[],
        help="Comma-separated indices where the function is 1",
    )
    parser.add_argument(
        "--dont-cares", "-d",
        type=parse_index_list,
        default=[],
        help="Comma-separated don't-care indices",
    )
    source.add_argument(
        "--outputs", "-o",
        default=None,
        help="Output vector (1/0/X per index) instead of --minterms",
    )
    parser.add_argument(
        "--method",
        choices=METHODS,
        default="greedy",
        help="Covering method (default: greedy)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["text", "equations", "verilog"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--kmap",
        action="store_true",
        help="Print the Karnaugh map",
    )
    parser.add_argument(
        "--truth-table",
        action="store_true",
        help="Print the truth table and exit",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    try:
        spec = build_spec(args)

        if args.truth_table:
            print_truth_table(spec)
            return 0

        solver = BooleanMinimizer(method=args.method)
        result = solver.minimize(spec)

        if args.format == "verilog":
            print(to_verilog(result))
        elif args.format == "equations":
            print(to_equations(result))
        else:
            print("Karnaugh Map Minimizer")
            print("=" * 40)
            if args.kmap:
                print_kmap(result.grid, spec)
            solver.print_result(result)

        return 0

    except MinimizerError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
