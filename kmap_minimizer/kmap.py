"""
Karnaugh map layout for 2-6 variables.

Rows and columns follow the reflected Gray code so that neighbouring cells
(including wraparound) differ in exactly one input bit:

    n=2: 2x2      rows A,     cols B
    n=3: 4x2      rows AB,    cols C
    n=4: 4x4      rows AB,    cols CD
    n=5: 2 x 4x4  tile A,     rows BC, cols DE
    n=6: 4 x 4x4  tiles AB in Gray order 00, 01, 11, 10; rows CD, cols EF

For 5 and 6 variables an index is also adjacent to the cell at the same
position in a tile whose selector bits differ by one.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from .errors import ValidationError
from .quine_mccluskey import Implicant, expand
from .truth_tables import MAX_VARS, MIN_VARS, TruthTableSpec

# Variables beyond this many are laid out as separate tiles
GRID_VARS = 4


def gray_code(bits: int) -> list[int]:
    """Reflected Gray code sequence of the given bit width."""
    return [i ^ (i >> 1) for i in range(1 << bits)]


def _label(code: int, bits: int) -> str:
    return format(code, f"0{bits}b") if bits else ""


@dataclass(frozen=True, eq=False)
class KMapGrid:
    """Coordinate map between assignment indices and (tile, row, col) cells."""

    variables: tuple
    tile_vars: tuple
    row_vars: tuple
    col_vars: tuple
    tile_labels: tuple
    row_labels: tuple
    col_labels: tuple
    cells: dict       # (tile, row, col) -> assignment index
    positions: dict   # assignment index -> (tile, row, col)

    @property
    def n_vars(self) -> int:
        return len(self.variables)

    @property
    def rows(self) -> int:
        return 1 << len(self.row_vars)

    @property
    def cols(self) -> int:
        return 1 << len(self.col_vars)

    @property
    def tile_count(self) -> int:
        return 1 << len(self.tile_vars)

    @property
    def dimensions(self) -> dict:
        return {"rows": self.rows, "cols": self.cols, "tiles": self.tile_count}

    def index_at(self, tile: int, row: int, col: int) -> int:
        return self.cells[(tile, row, col)]

    def position_of(self, index: int) -> tuple[int, int, int]:
        return self.positions[index]

    def tiles_adjacent(self, tile1: int, tile2: int) -> bool:
        """Tiles whose selector words differ in exactly one bit."""
        codes = gray_code(len(self.tile_vars))
        return bin(codes[tile1] ^ codes[tile2]).count('1') == 1

    def are_adjacent(self, index1: int, index2: int) -> bool:
        """
        True if the two cells are neighbours on the map: next to each other
        in a row or column (with wraparound), or at the same position in
        adjacent tiles.
        """
        t1, r1, c1 = self.positions[index1]
        t2, r2, c2 = self.positions[index2]

        if t1 == t2:
            if r1 == r2:
                return _wrap_step(c1, c2, self.cols)
            if c1 == c2:
                return _wrap_step(r1, r2, self.rows)
            return False

        return r1 == r2 and c1 == c2 and self.tiles_adjacent(t1, t2)

    def is_valid_group(self, indices: Iterable[int]) -> bool:
        """
        True if the indices form a legal K-map group: a power-of-two block
        that is exactly the cover of one cube.
        """
        group = set(indices)
        if not group or any(i not in self.positions for i in group):
            return False

        full = (1 << self.n_vars) - 1
        common_ones = full
        any_ones = 0
        for index in group:
            common_ones &= index
            any_ones |= index

        fixed = ~(common_ones ^ any_ones) & full
        free = self.n_vars - bin(fixed).count('1')
        return len(group) == 1 << free

    def group_cells(self, impl: Implicant) -> list[tuple[int, int, int]]:
        """Cells covered by an implicant, in index order."""
        return [self.positions[index] for index in expand(impl)]

    def value_grid(self, spec: TruthTableSpec) -> list[list[list]]:
        """Per-tile cell values: 1, 0 or 'X'."""
        return [
            [
                [spec.output_at(self.cells[(tile, row, col)]) for col in range(self.cols)]
                for row in range(self.rows)
            ]
            for tile in range(self.tile_count)
        ]

    def to_dict(self) -> dict:
        return {
            "dimensions": self.dimensions,
            "tileCount": self.tile_count,
            "cellToIndex": dict(self.cells),
        }


def _wrap_step(a: int, b: int, size: int) -> bool:
    if size < 2:
        return False
    return (a - b) % size in (1, size - 1)


def build_grid(source: Union[TruthTableSpec, Sequence[str]]) -> KMapGrid:
    """
    Lay out every assignment index of the given variables on the map.

    Args:
        source: A TruthTableSpec or the ordered variable names

    Raises:
        ValidationError: variable count outside the supported range
    """
    if isinstance(source, TruthTableSpec):
        variables = source.variables
    else:
        variables = tuple(source)

    n_vars = len(variables)
    if not MIN_VARS <= n_vars <= MAX_VARS:
        raise ValidationError(
            f"K-map supports {MIN_VARS}-{MAX_VARS} variables only, got {n_vars}"
        )

    tile_bits = max(0, n_vars - GRID_VARS)
    grid_bits = n_vars - tile_bits
    row_bits = (grid_bits + 1) // 2
    col_bits = grid_bits - row_bits

    tile_vars = variables[:tile_bits]
    row_vars = variables[tile_bits:tile_bits + row_bits]
    col_vars = variables[tile_bits + row_bits:]

    tile_codes = gray_code(tile_bits)
    row_codes = gray_code(row_bits)
    col_codes = gray_code(col_bits)

    cells = {}
    positions = {}
    for tile, tile_code in enumerate(tile_codes):
        for row, row_code in enumerate(row_codes):
            for col, col_code in enumerate(col_codes):
                index = (tile_code << grid_bits) | (row_code << col_bits) | col_code
                cells[(tile, row, col)] = index
                positions[index] = (tile, row, col)

    selector = "".join(tile_vars)
    tile_labels = tuple(
        f"{selector}={_label(code, tile_bits)}" if tile_bits else ""
        for code in tile_codes
    )

    return KMapGrid(
        variables=tuple(variables),
        tile_vars=tuple(tile_vars),
        row_vars=tuple(row_vars),
        col_vars=tuple(col_vars),
        tile_labels=tile_labels,
        row_labels=tuple(_label(code, row_bits) for code in row_codes),
        col_labels=tuple(_label(code, col_bits) for code in col_codes),
        cells=cells,
        positions=positions,
    )


def print_kmap(grid: KMapGrid, spec: TruthTableSpec):
    """Print the map with Gray-coded headers, one block per tile."""
    values = grid.value_grid(spec)
    corner = f"{''.join(grid.row_vars)}\\{''.join(grid.col_vars)}"
    width = max(len(corner), max(len(label) for label in grid.row_labels))

    for tile in range(grid.tile_count):
        if grid.tile_labels[tile]:
            print(grid.tile_labels[tile])
        header = " ".join(f"{label:>3}" for label in grid.col_labels)
        print(f"{corner:>{width}} | {header}")
        print("-" * (width + 3 + len(header)))
        for row in range(grid.rows):
            cells = " ".join(f"{str(v):>3}" for v in values[tile][row])
            print(f"{grid.row_labels[row]:>{width}} | {cells}")
        print()
