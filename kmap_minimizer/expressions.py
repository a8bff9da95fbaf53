"""Render implicant sets and maxterms as SOP / POS text."""

from typing import Iterable, Sequence

from .quine_mccluskey import Implicant

PRODUCT_SEPARATOR = "·"

# Asserted literals sort before complemented ones, absent variables last
_RANK = {'1': 0, '0': 1, '-': 2}


def term_order(impl: Implicant) -> tuple:
    """Sort key placing terms over the leading variables first."""
    return tuple(_RANK[symbol] for symbol in impl.pattern)


def term_to_str(impl: Implicant, variables: Sequence[str]) -> str:
    return impl.to_expr_str(list(variables))


def to_sop(implicants: Iterable[Implicant], variables: Sequence[str]) -> str:
    """
    Sum of products: one product per cube, joined by ' + '.

    An empty product (a cube covering the whole domain) renders as '1', an
    empty cover as '0'.
    """
    ordered = sorted(implicants, key=term_order)
    if not ordered:
        return "0"
    return " + ".join(term_to_str(impl, variables) for impl in ordered)


def sum_term(maxterm: int, variables: Sequence[str]) -> str:
    """The sum term that is false exactly at ``maxterm``."""
    n_vars = len(variables)
    literals = []
    for i, name in enumerate(variables):
        bit = (maxterm >> (n_vars - 1 - i)) & 1
        literals.append(f"{name}'" if bit else name)
    return "(" + " + ".join(literals) + ")"


def to_pos(maxterms: Iterable[int], variables: Sequence[str]) -> str:
    """Canonical product of sums: one sum term per maxterm, ascending."""
    terms = [sum_term(m, variables) for m in sorted(set(maxterms))]
    if not terms:
        return "1"
    return PRODUCT_SEPARATOR.join(terms)


def to_pos_from_implicants(implicants: Iterable[Implicant], variables: Sequence[str]) -> str:
    """
    Product of sums from a cover of the complement.

    Each cube of the off-set becomes a sum term with inverted polarity:
    '0' -> A, '1' -> A'. An empty cover means the function is never 0.
    """
    ordered = sorted(implicants, key=term_order)
    if not ordered:
        return "1"

    terms = []
    for impl in ordered:
        literals = []
        for name, symbol in zip(variables, impl.pattern):
            if symbol == '0':
                literals.append(name)
            elif symbol == '1':
                literals.append(f"{name}'")
        if not literals:
            # The complement covers the whole domain
            return "0"
        terms.append("(" + " + ".join(literals) + ")")

    return PRODUCT_SEPARATOR.join(terms)
