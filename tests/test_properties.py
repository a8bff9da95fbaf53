"""Exhaustive and seeded sweeps over the minimizer's invariants."""

import random

import pytest

from kmap_minimizer.solver import minimize
from kmap_minimizer.truth_tables import TruthTableSpec
from kmap_minimizer.verify import (
    evaluate_pos_text,
    evaluate_sop_text,
    truth_table_of,
    verify_result,
)

VARIABLES = "ABCDEF"


def all_subsets(n_vars):
    size = 1 << n_vars
    for bits in range(1 << size):
        yield {i for i in range(size) if (bits >> i) & 1}


def random_subsets(n_vars, count, seed):
    rng = random.Random(seed)
    size = 1 << n_vars
    for _ in range(count):
        yield {i for i in range(size) if rng.random() < 0.5}


def sweep(n_vars):
    if n_vars <= 3:
        return list(all_subsets(n_vars))
    return list(random_subsets(n_vars, {4: 40, 5: 15, 6: 8}[n_vars], seed=n_vars))


@pytest.mark.parametrize("n_vars", [2, 3, 4, 5, 6])
def test_sop_round_trip(n_vars):
    variables = VARIABLES[:n_vars]
    for on_set in sweep(n_vars):
        result = minimize(TruthTableSpec.from_indices(variables, on_set))
        if result.selected:
            assert truth_table_of(result.selected, n_vars) == on_set
        rendered = {
            i for i in range(1 << n_vars)
            if evaluate_sop_text(result.sop, variables, i)
        }
        assert rendered == on_set, (on_set, result.sop)


@pytest.mark.parametrize("n_vars", [2, 3, 4])
def test_pos_matches_sop(n_vars):
    variables = VARIABLES[:n_vars]
    full = 1 << n_vars
    for on_set in sweep(n_vars):
        if len(on_set) in (0, full):
            continue
        result = minimize(TruthTableSpec.from_indices(variables, on_set))
        for i in range(full):
            sop = evaluate_sop_text(result.sop, variables, i)
            assert evaluate_pos_text(result.pos, variables, i) == sop
            assert evaluate_pos_text(result.minimal_pos, variables, i) == sop


@pytest.mark.parametrize("n_vars", [3, 4, 5])
def test_idempotence(n_vars):
    variables = VARIABLES[:n_vars]
    for on_set in list(random_subsets(n_vars, 10, seed=100 + n_vars)):
        first = minimize(TruthTableSpec.from_indices(variables, on_set))
        if not first.selected:
            continue
        again = minimize(TruthTableSpec.from_indices(
            variables, truth_table_of(first.selected, n_vars)
        ))
        assert [p.pattern for p in again.prime_implicants] == \
            [p.pattern for p in first.prime_implicants]
        assert [p.pattern for p in again.selected] == [p.pattern for p in first.selected]
        assert again.sop == first.sop


@pytest.mark.parametrize("n_vars", [3, 4, 5, 6])
def test_essential_invariant(n_vars):
    variables = VARIABLES[:n_vars]
    for on_set in random_subsets(n_vars, 12, seed=200 + n_vars):
        result = minimize(TruthTableSpec.from_indices(variables, on_set))
        for impl in result.essential_prime_implicants:
            assert impl in result.selected
            assert any(
                m in impl.minterms
                and sum(m in p.minterms for p in result.prime_implicants) == 1
                for m in on_set
            )


@pytest.mark.parametrize("n_vars", [3, 4, 5, 6])
def test_dont_cares_round_trip(n_vars):
    variables = VARIABLES[:n_vars]
    rng = random.Random(300 + n_vars)
    size = 1 << n_vars
    for _ in range(10):
        labels = [rng.choice("01X") for _ in range(size)]
        spec = TruthTableSpec.from_outputs(variables, labels)
        for method in ("greedy", "maxsat"):
            result = minimize(spec, method=method)
            ok, errors = verify_result(result, spec)
            assert ok, (spec.outputs, method, errors)


def test_maxsat_never_costs_more_than_greedy():
    for on_set in random_subsets(4, 30, seed=400):
        spec = TruthTableSpec.from_indices("ABCD", on_set)
        greedy = minimize(spec, method="greedy")
        exact = minimize(spec, method="maxsat")
        assert exact.cost + exact.num_terms <= greedy.cost + greedy.num_terms


@pytest.mark.parametrize("n_vars", [2, 3, 4, 5, 6])
def test_selected_groups_are_valid_on_the_map(n_vars):
    variables = VARIABLES[:n_vars]
    for on_set in random_subsets(n_vars, 5, seed=500 + n_vars):
        result = minimize(TruthTableSpec.from_indices(variables, on_set))
        for impl in result.selected:
            assert result.grid.is_valid_group(impl.minterms)
