"""
Verification of minimization results.

Ensures the selected implicants and the rendered expressions reproduce the
specified truth table on every index that is not a don't-care.
"""

import re
from typing import Iterable, Sequence

from .expressions import PRODUCT_SEPARATOR
from .quine_mccluskey import Implicant
from .solver import MinimizationResult
from .truth_tables import TruthTableSpec, minterm_to_bits


def evaluate_sop(implicants: Iterable[Implicant], index: int) -> bool:
    """Evaluate a sum-of-products on a specific input (OR of AND terms)."""
    return any(impl.covers(index) for impl in implicants)


def truth_table_of(implicants: Iterable[Implicant], n_vars: int) -> set[int]:
    """The set of indices where the sum of the implicants is 1."""
    implicants = list(implicants)
    return {i for i in range(1 << n_vars) if evaluate_sop(implicants, i)}


def _literal_pattern(variables: Sequence[str]) -> re.Pattern:
    names = sorted(variables, key=len, reverse=True)
    return re.compile("(" + "|".join(re.escape(n) for n in names) + ")(')?")


def _assignment(variables: Sequence[str], index: int) -> dict[str, int]:
    return dict(zip(variables, minterm_to_bits(index, len(variables))))


def _literal_value(name: str, complemented: bool, values: dict[str, int]) -> bool:
    return bool(values[name]) != complemented


def evaluate_sop_text(text: str, variables: Sequence[str], index: int) -> bool:
    """Evaluate rendered SOP text such as ``"AB' + C"`` at an index."""
    text = text.strip()
    if text in ("0", "1"):
        return text == "1"

    literal = _literal_pattern(variables)
    values = _assignment(variables, index)

    for term in text.split(" + "):
        term = term.strip()
        if term == "1":
            return True
        pos = 0
        product = True
        while pos < len(term):
            match = literal.match(term, pos)
            if match is None:
                raise ValueError(f"Cannot parse product term {term!r}")
            product = product and _literal_value(match.group(1), bool(match.group(2)), values)
            pos = match.end()
        if product:
            return True

    return False


def evaluate_pos_text(text: str, variables: Sequence[str], index: int) -> bool:
    """Evaluate rendered POS text such as ``"(A + B)·(A' + C)"`` at an index."""
    text = text.strip()
    if text in ("0", "1"):
        return text == "1"

    literal = _literal_pattern(variables)
    values = _assignment(variables, index)

    for term in text.split(PRODUCT_SEPARATOR):
        term = term.strip()
        if not (term.startswith("(") and term.endswith(")")):
            raise ValueError(f"Cannot parse sum term {term!r}")
        total = False
        for lit in term[1:-1].split(" + "):
            match = literal.fullmatch(lit.strip())
            if match is None:
                raise ValueError(f"Cannot parse literal {lit!r}")
            total = total or _literal_value(match.group(1), bool(match.group(2)), values)
        if not total:
            return False

    return True


def verify_result(result: MinimizationResult, spec: TruthTableSpec) -> tuple[bool, list[str]]:
    """
    Verify that a minimization result is correct for every specified index.

    The canonical POS of a constant function (POS '0' for SOP '1' and
    the reverse) is not checked; the minimal POS always is.

    Returns:
        Tuple of (all_correct, list of error messages)
    """
    errors = []
    variables = spec.variables
    check_pos = not (spec.is_constant_zero or spec.is_constant_one)

    for index in range(spec.size):
        if index in spec.dc_set:
            continue
        expected = index in spec.on_set

        if result.selected and evaluate_sop(result.selected, index) != expected:
            errors.append(f"Index {index}: cover gives {not expected}, expected {expected}")

        if evaluate_sop_text(result.sop, variables, index) != expected:
            errors.append(f"Index {index}: SOP {result.sop!r} gives {not expected}")

        if check_pos and evaluate_pos_text(result.pos, variables, index) != expected:
            errors.append(f"Index {index}: POS {result.pos!r} gives {not expected}")

        if evaluate_pos_text(result.minimal_pos, variables, index) != expected:
            errors.append(
                f"Index {index}: minimal POS {result.minimal_pos!r} gives {not expected}"
            )

    return len(errors) == 0, errors


def print_truth_table_comparison(result: MinimizationResult, spec: TruthTableSpec):
    """Print truth table comparing expected vs actual SOP outputs."""
    print("Truth Table Verification")
    print("=" * 40)
    print(f"{'Index':>5} | {''.join(spec.variables):>8} | Exp | Act | Match")
    print("-" * 40)

    all_match = True
    for index in range(spec.size):
        bits = "".join(str(b) for b in minterm_to_bits(index, spec.n_vars))
        expected = spec.output_at(index)
        actual = 1 if evaluate_sop_text(result.sop, spec.variables, index) else 0
        ok = expected == 'X' or expected == actual
        all_match = all_match and ok
        print(f"{index:>5} | {bits:>8} | {expected!s:>3} | {actual:>3} | {'.' if ok else 'X'}")

    print("-" * 40)
    print(f"All correct: {all_match}")
    return all_match
