"""
Pure Python implementation of the Quine-McCluskey algorithm for Boolean minimization.

Implicants (cubes) are stored as a mask/value pair; the pattern string over
{0, 1, -} is the canonical identity used for deduplication and ordering.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from .errors import ConsistencyError
from .truth_tables import DEFAULT_VARIABLES


@dataclass(frozen=True)
class Implicant:
    """
    A cube over ``n_vars`` variables together with the indices it covers.

    An implicant is represented by its mask and value:
    - mask: which bit positions matter (1 = matters, 0 = don't care)
    - value: the required bit values for positions that matter

    Variable 0 is the most significant bit. For 4 variables (A, B, C, D):
    - Bit 3 = A (MSB)
    - Bit 2 = B
    - Bit 1 = C
    - Bit 0 = D (LSB)

    ``minterms`` holds every original index folded into this cube (on-set and
    don't-care alike). ``dont_care`` is set when the cube was built from
    don't-care seeds only.
    """

    mask: int       # Which bits matter (1 = matters)
    value: int      # Required values for bits that matter
    n_vars: int = 4
    minterms: frozenset = field(default=frozenset(), compare=False)
    dont_care: bool = field(default=False, compare=False)

    def __post_init__(self):
        full = (1 << self.n_vars) - 1
        if self.mask & ~full or self.value & ~self.mask:
            raise ValueError(
                f"value {self.value:#x} / mask {self.mask:#x} "
                f"do not fit {self.n_vars} variables"
            )

    @classmethod
    def from_minterm(cls, index: int, n_vars: int, dont_care: bool = False) -> "Implicant":
        """The all-fixed cube for a single assignment index."""
        return cls(
            mask=(1 << n_vars) - 1,
            value=index,
            n_vars=n_vars,
            minterms=frozenset((index,)),
            dont_care=dont_care,
        )

    @classmethod
    def from_pattern(cls, pattern: str) -> "Implicant":
        """Build an implicant from a string such as ``"1-0"``."""
        n_vars = len(pattern)
        mask = 0
        value = 0
        for i, symbol in enumerate(pattern):
            bit = 1 << (n_vars - 1 - i)
            if symbol == '1':
                mask |= bit
                value |= bit
            elif symbol == '0':
                mask |= bit
            elif symbol != '-':
                raise ValueError(f"Invalid cube symbol {symbol!r} in {pattern!r}")
        cube = cls(mask=mask, value=value, n_vars=n_vars)
        return cls(mask=mask, value=value, n_vars=n_vars, minterms=frozenset(expand(cube)))

    @property
    def pattern(self) -> str:
        """Canonical string identity, most significant variable first."""
        symbols = []
        for i in range(self.n_vars):
            bit = 1 << (self.n_vars - 1 - i)
            if not self.mask & bit:
                symbols.append('-')
            elif self.value & bit:
                symbols.append('1')
            else:
                symbols.append('0')
        return "".join(symbols)

    @property
    def num_literals(self) -> int:
        """Count the number of literals (fixed positions) in this implicant."""
        return bin(self.mask).count('1')

    @property
    def num_ones(self) -> int:
        return bin(self.value).count('1')

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.num_literals, self.pattern)

    def covers(self, minterm: int) -> bool:
        """Check if this implicant covers a given assignment index."""
        return (minterm & self.mask) == self.value

    def contains(self, other: "Implicant") -> bool:
        """True if every index covered by ``other`` is covered by this cube."""
        if self.n_vars != other.n_vars:
            return False
        if self.mask & ~other.mask:
            return False
        return (other.value & self.mask) == self.value

    def to_expr_str(self, var_names: Optional[list[str]] = None) -> str:
        """Convert to a Boolean expression string (product term)."""
        if var_names is None:
            var_names = list(DEFAULT_VARIABLES[:self.n_vars])

        literals = []
        for i in range(self.n_vars):
            bit = 1 << (self.n_vars - 1 - i)
            if self.mask & bit:
                if self.value & bit:
                    literals.append(var_names[i])
                else:
                    literals.append(f"{var_names[i]}'")

        return "".join(literals) if literals else "1"

    def __repr__(self):
        return f"Implicant({self.pattern})"


def can_merge(impl1: Implicant, impl2: Implicant) -> bool:
    """
    Two implicants can merge if:
    1. They have the same width and the same mask (identical '-' positions)
    2. They differ in exactly one bit position within the mask
    """
    if impl1.n_vars != impl2.n_vars or impl1.mask != impl2.mask:
        return False
    diff = (impl1.value ^ impl2.value) & impl1.mask
    return bin(diff).count('1') == 1


def try_merge(impl1: Implicant, impl2: Implicant) -> Optional[Implicant]:
    """
    Try to merge two implicants differing in exactly one variable.

    Returns new implicant with one less literal, or None if can't merge.
    """
    if not can_merge(impl1, impl2):
        return None

    diff = impl1.value ^ impl2.value
    new_mask = impl1.mask & ~diff
    new_value = impl1.value & new_mask

    return Implicant(
        mask=new_mask,
        value=new_value,
        n_vars=impl1.n_vars,
        minterms=impl1.minterms | impl2.minterms,
        dont_care=impl1.dont_care and impl2.dont_care,
    )


def merge(impl1: Implicant, impl2: Implicant) -> Implicant:
    """Like try_merge, but raises ValueError when the cubes are not mergeable."""
    merged = try_merge(impl1, impl2)
    if merged is None:
        raise ValueError(f"Cannot merge {impl1.pattern} with {impl2.pattern}")
    return merged


def expand(impl: Implicant) -> Iterator[int]:
    """Yield every assignment index covered by the cube, in ascending order."""
    free_bits = [
        1 << pos for pos in range(impl.n_vars)
        if not impl.mask & (1 << pos)
    ]
    for combo in range(1 << len(free_bits)):
        index = impl.value
        for j, bit in enumerate(free_bits):
            if (combo >> j) & 1:
                index |= bit
        yield index


def initial_implicants(
    on_set: Iterable[int],
    dc_set: Iterable[int] = (),
    n_vars: int = 4
) -> list[Implicant]:
    """One fixed cube per index of on_set | dc_set, tagged with its origin."""
    on_set = set(on_set)
    dc_set = set(dc_set) - on_set
    return [
        Implicant.from_minterm(m, n_vars, dont_care=m in dc_set)
        for m in sorted(on_set | dc_set)
    ]


def group_by_ones(implicants: Iterable[Implicant]) -> dict[int, list[Implicant]]:
    """Partition implicants by their count of '1' symbols."""
    groups: dict[int, list[Implicant]] = {}
    for impl in implicants:
        groups.setdefault(impl.num_ones, []).append(impl)
    for members in groups.values():
        members.sort(key=lambda impl: impl.pattern)
    return groups


def merge_pass(current: dict[str, Implicant]) -> tuple[dict[str, Implicant], set[str]]:
    """
    Combine one generation of cubes into the next.

    Returns:
        (next generation keyed by pattern, patterns that took part in a merge)

    Raises:
        ConsistencyError: the same cube was produced with two different covers
    """
    groups = group_by_ones(current.values())
    next_gen: dict[str, Implicant] = {}
    used = set()

    # A 0<->1 flip changes the count of ones by exactly one
    for ones in sorted(groups):
        for impl1 in groups[ones]:
            for impl2 in groups.get(ones + 1, ()):
                merged = try_merge(impl1, impl2)
                if merged is None:
                    continue
                used.add(impl1.pattern)
                used.add(impl2.pattern)

                existing = next_gen.get(merged.pattern)
                if existing is None:
                    next_gen[merged.pattern] = merged
                elif existing.minterms != merged.minterms:
                    raise ConsistencyError(
                        f"Cube {merged.pattern} produced with differing covers: "
                        f"{sorted(existing.minterms)} vs {sorted(merged.minterms)}"
                    )

    return next_gen, used


def quine_mccluskey(
    on_set: set[int],
    dc_set: set[int] = None,
    n_vars: int = 4
) -> list[Implicant]:
    """
    Run Quine-McCluskey algorithm to find all prime implicants.

    Args:
        on_set: Set of minterms where function is 1
        dc_set: Set of don't-care minterms (can be used for expansion)
        n_vars: Number of input variables

    Returns:
        Deduplicated prime implicants sorted by (literal count, pattern).
        Primes built from don't-cares alone are included.
    """
    if dc_set is None:
        dc_set = set()

    current = {
        impl.pattern: impl
        for impl in initial_implicants(on_set, dc_set, n_vars)
    }

    prime_implicants: dict[str, Implicant] = {}
    passes = 0

    while current:
        next_gen, used = merge_pass(current)

        for key, impl in current.items():
            if key not in used:
                prime_implicants.setdefault(key, impl)

        if not next_gen:
            break

        passes += 1
        if passes > n_vars:
            raise ConsistencyError(
                f"Merging did not terminate within {n_vars} passes"
            )
        current = next_gen

    return sorted(prime_implicants.values(), key=lambda impl: impl.sort_key)


def print_prime_implicants(primes: list[Implicant], var_names: list[str] = None):
    """Debug helper to print all prime implicants."""
    print(f"Prime implicants ({len(primes)}):")
    for p in primes:
        covered = ", ".join(str(m) for m in sorted(p.minterms))
        print(f"  {p.pattern:8} {p.to_expr_str(var_names):10} ({p.num_literals} lit) -> {covered}")


if __name__ == "__main__":
    primes = quine_mccluskey({0, 1, 2, 5, 6, 7, 8, 9, 10, 14}, n_vars=4)
    print_prime_implicants(primes)
