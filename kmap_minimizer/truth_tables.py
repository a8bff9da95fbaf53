"""
Truth table specifications for single-output Boolean functions.

A specification names 2-6 input variables (MSB first) and partitions the
2^n assignment indices into the on-set, the don't-care set and, implicitly,
the off-set (maxterms).

Output vectors use the same notation as a K-map fill-in, one symbol per
index starting at 0:

    "0111"              -> A + B over (A, B)
    "1011011111------"  -> on for 0,2,3,5,6,7,8,9; 10-15 don't care
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from .errors import ValidationError

MIN_VARS = 2
MAX_VARS = 6

# Default input variable names (MSB to LSB)
DEFAULT_VARIABLES = "ABCDEF"

ON_SYMBOLS = {'1', 1, True}
OFF_SYMBOLS = {'0', 0, False}
DONT_CARE_SYMBOLS = {'X', 'x', '-', '*'}


def _normalize_variables(variables: Union[str, Sequence[str]]) -> tuple[str, ...]:
    if isinstance(variables, str):
        variables = list(variables)
    names = tuple(variables)

    if not MIN_VARS <= len(names) <= MAX_VARS:
        raise ValidationError(
            f"Expected {MIN_VARS}-{MAX_VARS} variables, got {len(names)}"
        )
    for name in names:
        if not isinstance(name, str) or not name:
            raise ValidationError(f"Invalid variable name: {name!r}")
    if len(set(names)) != len(names):
        raise ValidationError(f"Duplicate variable names in {list(names)}")

    return names


def _normalize_indices(indices: Iterable[int], size: int, what: str) -> frozenset:
    result = set()
    for index in indices:
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValidationError(f"{what} index {index!r} is not an integer")
        if not 0 <= index < size:
            raise ValidationError(
                f"{what} index {index} is outside the domain [0, {size})"
            )
        result.add(index)
    return frozenset(result)


@dataclass(frozen=True)
class TruthTableSpec:
    """A validated minimization request."""

    variables: tuple
    on_set: frozenset
    dc_set: frozenset = frozenset()

    def __post_init__(self):
        variables = _normalize_variables(self.variables)
        size = 1 << len(variables)
        on_set = _normalize_indices(self.on_set, size, "Minterm")
        dc_set = _normalize_indices(self.dc_set, size, "Don't-care")

        overlap = on_set & dc_set
        if overlap:
            raise ValidationError(
                f"Indices {sorted(overlap)} are both required and don't-care"
            )

        object.__setattr__(self, "variables", variables)
        object.__setattr__(self, "on_set", on_set)
        object.__setattr__(self, "dc_set", dc_set)

    @classmethod
    def from_indices(
        cls,
        variables: Union[str, Sequence[str]],
        minterms: Iterable[int],
        dont_cares: Iterable[int] = (),
    ) -> "TruthTableSpec":
        return cls(variables=variables, on_set=minterms, dc_set=dont_cares)

    @classmethod
    def from_outputs(
        cls,
        variables: Union[str, Sequence[str]],
        outputs: Union[str, Sequence],
        dont_cares: Iterable[int] = (),
    ) -> "TruthTableSpec":
        """
        Build a specification from an output vector.

        Args:
            variables: Variable names, MSB first
            outputs: One symbol per index: 1/0 or '1'/'0', 'X'/'-' for don't care
            dont_cares: Extra indices forced to don't care

        Raises:
            ValidationError: wrong vector length or unknown symbol
        """
        names = _normalize_variables(variables)
        size = 1 << len(names)
        outputs = list(outputs)

        if len(outputs) != size:
            raise ValidationError(
                f"Expected {size} output values, got {len(outputs)}"
            )

        forced = _normalize_indices(dont_cares, size, "Don't-care")
        on_set = set()
        dc_set = set(forced)

        for index, symbol in enumerate(outputs):
            if index in forced:
                continue
            try:
                hash(symbol)
            except TypeError:
                raise ValidationError(
                    f"Invalid output symbol {symbol!r} at index {index}"
                ) from None
            if symbol in DONT_CARE_SYMBOLS:
                dc_set.add(index)
            elif symbol in ON_SYMBOLS:
                on_set.add(index)
            elif symbol not in OFF_SYMBOLS:
                raise ValidationError(
                    f"Invalid output symbol {symbol!r} at index {index}"
                )

        return cls(variables=names, on_set=on_set, dc_set=dc_set)

    @property
    def n_vars(self) -> int:
        return len(self.variables)

    @property
    def size(self) -> int:
        return 1 << self.n_vars

    @property
    def off_set(self) -> frozenset:
        """Maxterms: indices that are neither required nor don't-care."""
        return frozenset(range(self.size)) - self.on_set - self.dc_set

    @property
    def maxterms(self) -> list[int]:
        return sorted(self.off_set)

    @property
    def minterms(self) -> list[int]:
        return sorted(self.on_set)

    @property
    def is_constant_zero(self) -> bool:
        return not self.on_set

    @property
    def is_constant_one(self) -> bool:
        return len(self.on_set) == self.size

    def output_at(self, index: int):
        """The K-map cell value at an index: 1, 0 or 'X'."""
        if index in self.dc_set:
            return 'X'
        return 1 if index in self.on_set else 0

    @property
    def outputs(self) -> str:
        """The output vector as a string, e.g. ``"01X1"``."""
        return "".join(str(self.output_at(i)) for i in range(self.size))


def minterm_to_bits(minterm: int, n_vars: int) -> tuple[int, ...]:
    """Convert a minterm index to its n-bit representation, MSB first."""
    return tuple(
        (minterm >> (n_vars - 1 - i)) & 1
        for i in range(n_vars)
    )


def bits_to_minterm(bits: Sequence[int]) -> int:
    """Convert an MSB-first bit sequence to a minterm index."""
    index = 0
    for bit in bits:
        index = (index << 1) | (bit & 1)
    return index


def print_truth_table(spec: TruthTableSpec):
    """Print the complete truth table of a specification."""
    width = max(len(v) for v in spec.variables) + 1
    header = " ".join(f"{v:>{width}}" for v in spec.variables)

    print(f"{'Index':>5} | {header} | F")
    print("-" * (12 + len(header)))

    for i in range(spec.size):
        bits = " ".join(f"{b:>{width}}" for b in minterm_to_bits(i, spec.n_vars))
        print(f"{i:>5} | {bits} | {spec.output_at(i)}")


if __name__ == "__main__":
    print_truth_table(TruthTableSpec.from_outputs("ABCD", "1011011111------"))
