"""Karnaugh map / Quine-McCluskey minimization of Boolean functions of 2-6 variables."""

from .errors import MinimizerError, ValidationError, ConsistencyError
from .truth_tables import TruthTableSpec, MIN_VARS, MAX_VARS
from .quine_mccluskey import Implicant, quine_mccluskey, try_merge, merge, can_merge, expand
from .solver import BooleanMinimizer, MinimizationResult, minimize, minimize_indices
from .expressions import to_sop, to_pos, to_pos_from_implicants
from .kmap import KMapGrid, build_grid, gray_code
from .export import to_equations, to_verilog
from .verify import verify_result

__all__ = [
    "MinimizerError",
    "ValidationError",
    "ConsistencyError",
    "TruthTableSpec",
    "MIN_VARS",
    "MAX_VARS",
    "Implicant",
    "quine_mccluskey",
    "try_merge",
    "merge",
    "can_merge",
    "expand",
    "BooleanMinimizer",
    "MinimizationResult",
    "minimize",
    "minimize_indices",
    "to_sop",
    "to_pos",
    "to_pos_from_implicants",
    "KMapGrid",
    "build_grid",
    "gray_code",
    "to_equations",
    "to_verilog",
    "verify_result",
]
__version__ = "0.1.0"
