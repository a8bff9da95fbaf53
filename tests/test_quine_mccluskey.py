import sys

import pytest

from kmap_minimizer.errors import ConsistencyError
from kmap_minimizer.quine_mccluskey import (
    Implicant,
    can_merge,
    expand,
    group_by_ones,
    initial_implicants,
    merge,
    merge_pass,
    quine_mccluskey,
    try_merge,
)


def cube(pattern):
    return Implicant.from_pattern(pattern)


def test_from_minterm_is_fully_fixed():
    impl = Implicant.from_minterm(5, 3)
    assert impl.pattern == "101"
    assert impl.num_literals == 3
    assert impl.minterms == frozenset({5})
    assert not impl.dont_care


def test_from_pattern_mask_and_value():
    impl = cube("1-0")
    assert impl.mask == 0b101
    assert impl.value == 0b100
    assert impl.minterms == frozenset({4, 6})
    assert impl.num_literals == 2


def test_from_pattern_rejects_bad_symbol():
    with pytest.raises(ValueError):
        cube("1x0")


def test_value_outside_mask_rejected():
    with pytest.raises(ValueError):
        Implicant(mask=0b10, value=0b01, n_vars=2)


def test_identity_ignores_cover_set():
    a = Implicant(mask=0b11, value=0b01, n_vars=2, minterms=frozenset({1}))
    b = Implicant(mask=0b11, value=0b01, n_vars=2)
    assert a == b
    assert hash(a) == hash(b)
    assert Implicant(mask=0b11, value=0b01, n_vars=3) != a


@pytest.mark.parametrize("left,right,expected", [
    ("101", "100", "10-"),
    ("100", "101", "10-"),
    ("1-0", "1-1", "1--"),
    ("0--", "1--", "---"),
])
def test_merge_replaces_single_difference(left, right, expected):
    assert can_merge(cube(left), cube(right))
    merged = merge(cube(left), cube(right))
    assert merged.pattern == expected
    assert merged.minterms == cube(left).minterms | cube(right).minterms


@pytest.mark.parametrize("left,right", [
    ("1-0", "10-"),    # dash positions differ
    ("110", "101"),    # two positions differ
    ("101", "101"),    # identical
    ("-1", "01"),      # dash against a fixed bit
])
def test_not_mergeable(left, right):
    assert not can_merge(cube(left), cube(right))
    assert try_merge(cube(left), cube(right)) is None
    with pytest.raises(ValueError):
        merge(cube(left), cube(right))


def test_different_widths_never_merge():
    assert not can_merge(cube("10"), cube("100"))


def test_expand_is_ascending_and_restartable():
    impl = cube("1-0")
    assert list(expand(impl)) == [4, 6]
    assert list(expand(impl)) == [4, 6]
    assert list(expand(cube("---"))) == list(range(8))
    assert list(expand(cube("0-1-"))) == [2, 3, 6, 7]


def test_covers_and_contains():
    big = cube("1--")
    small = cube("1-0")
    assert big.covers(6)
    assert not big.covers(3)
    assert big.contains(small)
    assert not small.contains(big)
    assert big.contains(big)
    assert not cube("0--").contains(small)


def test_to_expr_str_default_names():
    assert cube("1-0").to_expr_str() == "AC'"
    assert cube("--").to_expr_str() == "1"
    assert cube("01").to_expr_str(["x", "y"]) == "x'y"


def test_initial_implicants_tags_dont_cares():
    seeds = initial_implicants({1, 3}, {2}, n_vars=2)
    assert [s.pattern for s in seeds] == ["01", "10", "11"]
    assert [s.dont_care for s in seeds] == [False, True, False]


def test_group_by_ones():
    groups = group_by_ones(initial_implicants({0, 3, 5, 6}, (), n_vars=3))
    assert sorted(groups) == [0, 2]
    assert [i.pattern for i in groups[2]] == ["011", "101", "110"]


def test_classic_prime_implicants():
    primes = quine_mccluskey({0, 1, 2, 5, 6, 7, 8, 9, 10, 14}, n_vars=4)
    assert [p.pattern for p in primes] == [
        "--10", "-0-0", "-00-", "0-01", "01-1", "011-",
    ]
    assert primes[0].minterms == frozenset({2, 6, 10, 14})


def test_primes_carry_full_cover_set():
    primes = quine_mccluskey(set(range(8)), n_vars=3)
    assert [p.pattern for p in primes] == ["---"]
    assert primes[0].minterms == frozenset(range(8))


def test_dont_cares_merge_but_stay_tagged():
    primes = quine_mccluskey({0}, {3}, n_vars=2)
    assert [p.pattern for p in primes] == ["00", "11"]
    assert [p.dont_care for p in primes] == [False, True]


def test_dont_cares_widen_primes():
    primes = quine_mccluskey({1, 3, 7, 11, 15}, {0, 2, 5}, n_vars=4)
    assert [p.pattern for p in primes] == ["--11", "0--1", "00--"]


def test_empty_input_has_no_primes():
    assert quine_mccluskey(set(), n_vars=3) == []


def test_prime_list_is_deterministic():
    on_set = {0, 2, 3, 7, 8, 9, 13, 15}
    first = [p.pattern for p in quine_mccluskey(on_set, n_vars=4)]
    second = [p.pattern for p in quine_mccluskey(set(sorted(on_set, reverse=True)), n_vars=4)]
    assert first == second
    keys = [(p.num_literals, p.pattern) for p in quine_mccluskey(on_set, n_vars=4)]
    assert keys == sorted(keys)


def test_no_prime_contains_another():
    primes = quine_mccluskey({0, 1, 3, 4, 5, 7, 12, 13, 15, 30, 31}, n_vars=5)
    for a in primes:
        for b in primes:
            if a != b:
                assert not a.contains(b)


def test_consistency_error_is_runtime_error():
    assert issubclass(ConsistencyError, RuntimeError)


def test_merge_pass_reports_used_cubes():
    current = {c.pattern: c for c in map(cube, ["000", "001", "011"])}
    next_gen, used = merge_pass(current)
    assert sorted(next_gen) == ["00-", "0-1"]
    assert used == {"000", "001", "011"}


def test_duplicate_cube_with_different_cover_is_consistency_error():
    # Both pairs fold into 0--, but 0-1 carries a stray index 7
    current = {
        "00-": Implicant(mask=0b110, value=0b000, n_vars=3, minterms=frozenset({0, 1})),
        "01-": Implicant(mask=0b110, value=0b010, n_vars=3, minterms=frozenset({2, 3})),
        "0-0": Implicant(mask=0b101, value=0b000, n_vars=3, minterms=frozenset({0, 2})),
        "0-1": Implicant(mask=0b101, value=0b001, n_vars=3, minterms=frozenset({1, 3, 7})),
    }
    with pytest.raises(ConsistencyError, match="0--"):
        merge_pass(current)


def test_merging_beyond_n_passes_is_consistency_error(monkeypatch):
    def never_settles(current):
        return {"0-": cube("0-")}, set()

    monkeypatch.setattr(sys.modules["kmap_minimizer.quine_mccluskey"], "merge_pass", never_settles)
    with pytest.raises(ConsistencyError, match="did not terminate within 2 passes"):
        quine_mccluskey({0}, n_vars=2)
