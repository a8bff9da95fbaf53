"""
Two-level minimizer for single-output Boolean functions of 2-6 variables.

The pipeline is:
1. Quine-McCluskey prime implicant generation (don't-cares may be merged)
2. Essential prime implicant extraction from the coverage map
3. Completion of the cover, either greedily or as a weighted MaxSAT
   problem solved with RC2
4. Rendering as SOP, canonical POS and minimized POS
"""

from dataclasses import dataclass, field
from typing import Iterable

from pysat.examples.rc2 import RC2
from pysat.formula import WCNF

from .errors import ConsistencyError, ValidationError
from .expressions import to_pos, to_pos_from_implicants, to_sop
from .kmap import KMapGrid, build_grid
from .quine_mccluskey import Implicant, print_prime_implicants, quine_mccluskey
from .truth_tables import TruthTableSpec

METHODS = ("greedy", "maxsat")


@dataclass
class MinimizationResult:
    """Result of minimizing one truth table specification."""

    variables: tuple
    sop: str
    pos: str
    minimal_pos: str
    prime_implicants: list[Implicant]
    essential_prime_implicants: list[Implicant]
    selected: list[Implicant]   # Final SOP cover (essentials first)
    grid: KMapGrid
    method: str
    complement_selected: list[Implicant] = field(default_factory=list)

    @property
    def cost(self) -> int:
        """Literal count of the SOP cover."""
        return sum(impl.num_literals for impl in self.selected)

    @property
    def num_terms(self) -> int:
        return len(self.selected)

    def to_dict(self) -> dict:
        """The result contract handed to rendering and export collaborators."""
        def describe(impl: Implicant) -> dict:
            return {"pattern": impl.pattern, "coveredIndices": sorted(impl.minterms)}

        return {
            "sop": self.sop,
            "pos": self.pos,
            "primeImplicants": [describe(p) for p in self.prime_implicants],
            "essentialPrimeImplicants": [describe(p) for p in self.essential_prime_implicants],
            "grid": self.grid.to_dict(),
        }


def build_coverage_map(
    primes: list[Implicant],
    on_set: Iterable[int]
) -> dict[int, list[Implicant]]:
    """
    Map each required minterm to the primes covering it.

    Don't-cares are not keys: they may be covered but are never required.
    """
    coverage = {m: [] for m in sorted(on_set)}
    for impl in primes:
        for m in impl.minterms:
            if m in coverage:
                coverage[m].append(impl)

    uncovered = [m for m, covering in coverage.items() if not covering]
    if uncovered:
        raise ConsistencyError(f"No prime implicant covers minterms {uncovered}")

    return coverage


def find_essential(
    primes: list[Implicant],
    coverage: dict[int, list[Implicant]]
) -> list[Implicant]:
    """Primes that are the only cover of some required minterm, in prime order."""
    essential = {covering[0] for covering in coverage.values() if len(covering) == 1}
    return [impl for impl in primes if impl in essential]


def greedy_cover(
    primes: list[Implicant],
    on_set: Iterable[int],
    selected: Iterable[Implicant] = ()
) -> list[Implicant]:
    """
    Greedy set cover completing an initial selection.

    Repeatedly picks the unselected prime covering the most still-uncovered
    minterms; ties go to fewer literals, then to the smaller pattern.

    Returns:
        The initial selection followed by the greedily chosen primes
    """
    selected = list(selected)
    uncovered = set(on_set)
    for impl in selected:
        uncovered -= impl.minterms

    while uncovered:
        best_impl = None
        best_key = None

        for impl in primes:
            if impl in selected:
                continue

            gain = len(impl.minterms & uncovered)
            if not gain:
                continue

            key = (-gain, impl.num_literals, impl.pattern)
            if best_key is None or key < best_key:
                best_key = key
                best_impl = impl

        if best_impl is None:
            raise ConsistencyError(f"Cannot cover minterms {sorted(uncovered)}")

        selected.append(best_impl)
        uncovered -= best_impl.minterms

    return selected


def remove_redundant(
    selected: list[Implicant],
    on_set: Iterable[int],
    keep: Iterable[Implicant] = ()
) -> list[Implicant]:
    """
    Drop chosen primes whose required minterms are all covered by the rest.

    Primes in ``keep`` (the essentials) are never dropped. Later picks are
    tried first since they tend to cover the least.
    """
    on_set = set(on_set)
    keep = set(keep)
    result = list(selected)

    for impl in reversed(selected):
        if impl in keep:
            continue
        others = [other for other in result if other is not impl]
        covered = set()
        for other in others:
            covered |= other.minterms
        if on_set <= covered:
            result = others

    return result


def maxsat_cover(
    primes: list[Implicant],
    on_set: Iterable[int]
) -> list[Implicant]:
    """
    Minimum-cost cover as weighted MaxSAT.

    - Hard clauses: every required minterm is covered by a selected prime
    - Soft clauses: penalize each prime by its literal count + 1 (one OR input)

    Returns:
        Selected primes in prime-list order
    """
    coverage = build_coverage_map(primes, on_set)

    wcnf = WCNF()

    # Variable mapping: prime index -> SAT variable (1-indexed)
    impl_vars = {impl: i + 1 for i, impl in enumerate(primes)}

    for minterm, covering in coverage.items():
        wcnf.append([impl_vars[impl] for impl in covering])

    for impl in primes:
        if impl.minterms & set(coverage):
            wcnf.append([-impl_vars[impl]], weight=impl.num_literals + 1)
        else:
            # Covers only don't-cares: never worth selecting
            wcnf.append([-impl_vars[impl]])

    with RC2(wcnf) as rc2:
        model = rc2.compute()
        if model is None:
            raise ConsistencyError("MaxSAT solver found no cover")
        chosen = {v for v in model if v > 0}

    return [impl for impl in primes if impl_vars[impl] in chosen]


def _solve_cover(
    primes: list[Implicant],
    on_set: frozenset,
    method: str
) -> tuple[list[Implicant], list[Implicant]]:
    """Return (essential primes, selected cover) for a non-constant on-set."""
    coverage = build_coverage_map(primes, on_set)
    essential = find_essential(primes, coverage)

    if method == "maxsat":
        chosen = maxsat_cover(primes, on_set)
        # Essentials are forced by the hard clauses; list them first
        rest = [impl for impl in chosen if impl not in essential]
        return essential, essential + rest

    selected = greedy_cover(primes, on_set, selected=essential)
    selected = remove_redundant(selected, on_set, keep=essential)
    return essential, selected


class BooleanMinimizer:
    """
    Single-output two-level minimizer.

    Uses Quine-McCluskey for prime implicants, then either:
    1. Essential primes + greedy set cover (default, deterministic)
    2. MaxSAT optimization for a minimum-cost cover
    """

    def __init__(self, method: str = "greedy"):
        if method not in METHODS:
            raise ValidationError(f"Unknown method {method!r}, expected one of {METHODS}")
        self.method = method

    def minimize(self, spec: TruthTableSpec) -> MinimizationResult:
        grid = build_grid(spec)

        if spec.is_constant_zero:
            return self._constant(spec, grid, sop="0", pos="1")
        if spec.is_constant_one:
            return self._constant(spec, grid, sop="1", pos="0")

        primes = quine_mccluskey(spec.on_set, spec.dc_set, n_vars=spec.n_vars)
        essential, selected = _solve_cover(primes, spec.on_set, self.method)

        # The complement shares the don't-cares; its cover gives the minimal POS
        off_set = spec.off_set
        if off_set:
            off_primes = quine_mccluskey(off_set, spec.dc_set, n_vars=spec.n_vars)
            _, complement = _solve_cover(off_primes, off_set, self.method)
        else:
            complement = []

        return MinimizationResult(
            variables=spec.variables,
            sop=to_sop(selected, spec.variables),
            pos=to_pos(spec.maxterms, spec.variables),
            minimal_pos=to_pos_from_implicants(complement, spec.variables),
            prime_implicants=primes,
            essential_prime_implicants=essential,
            selected=selected,
            grid=grid,
            method=self.method,
            complement_selected=complement,
        )

    def _constant(
        self,
        spec: TruthTableSpec,
        grid: KMapGrid,
        sop: str,
        pos: str
    ) -> MinimizationResult:
        return MinimizationResult(
            variables=spec.variables,
            sop=sop,
            pos=pos,
            minimal_pos=sop,
            prime_implicants=[],
            essential_prime_implicants=[],
            selected=[],
            grid=grid,
            method=self.method,
        )

    def print_result(self, result: MinimizationResult):
        """Print a minimization result in human-readable format."""
        names = list(result.variables)
        print(f"Method: {result.method}")
        print(f"Variables: {', '.join(names)}")
        print()
        print_prime_implicants(result.prime_implicants, names)
        print()
        print("Essential prime implicants:")
        for impl in result.essential_prime_implicants:
            print(f"  {impl.pattern:8} {impl.to_expr_str(names)}")
        if not result.essential_prime_implicants:
            print("  (none)")
        print()
        print(f"SOP: F = {result.sop}")
        print(f"POS: F = {result.pos}")
        print(f"Minimal POS: F = {result.minimal_pos}")
        print(f"Cost: {result.num_terms} terms, {result.cost} literals")


def minimize(
    spec: TruthTableSpec,
    method: str = "greedy"
) -> MinimizationResult:
    """Minimize a truth table specification."""
    return BooleanMinimizer(method=method).minimize(spec)


def minimize_indices(
    variables,
    minterms: Iterable[int],
    dont_cares: Iterable[int] = (),
    method: str = "greedy"
) -> MinimizationResult:
    """Shortcut taking variable names and index sets directly."""
    spec = TruthTableSpec.from_indices(variables, minterms, dont_cares)
    return minimize(spec, method=method)
