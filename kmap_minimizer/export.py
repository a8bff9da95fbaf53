"""
Export minimization results as equations or a Verilog module.
"""

from .errors import ValidationError
from .quine_mccluskey import Implicant
from .solver import MinimizationResult


def to_equations(result: MinimizationResult) -> str:
    """
    Export a minimization result as Boolean equations.

    Returns:
        Human-readable report with primes, essentials and expressions
    """
    names = list(result.variables)
    essential = set(result.essential_prime_implicants)

    lines = []
    lines.append(f"Variables: {', '.join(names)}")
    lines.append(f"Method: {result.method}")
    lines.append(f"Cost: {result.num_terms} terms, {result.cost} literals")
    lines.append("")

    if result.prime_implicants:
        lines.append("Prime implicants:")
        for impl in result.prime_implicants:
            marker = "*" if impl in essential else " "
            covered = ",".join(str(m) for m in sorted(impl.minterms))
            lines.append(f"  {marker} {impl.pattern:8} {impl.to_expr_str(names):12} m({covered})")
        lines.append("")

    lines.append("Output equations:")
    lines.append(f"  F = {result.sop}")
    lines.append(f"  F = {result.pos}")
    if result.minimal_pos != result.pos:
        lines.append(f"  F = {result.minimal_pos}")

    return "\n".join(lines)


def impl_to_verilog(impl: Implicant, names: list[str]) -> str:
    """Convert an implicant to a Verilog expression."""
    terms = []
    for name, symbol in zip(names, impl.pattern):
        if symbol == '1':
            terms.append(name)
        elif symbol == '0':
            terms.append(f"~{name}")

    if not terms:
        return "1'b1"
    elif len(terms) == 1:
        return terms[0]
    else:
        return "(" + " & ".join(terms) + ")"


def to_verilog(result: MinimizationResult, module_name: str = "kmap_function") -> str:
    """
    Export the SOP cover as a combinational Verilog module.

    Args:
        result: The minimization result
        module_name: Name for the Verilog module

    Returns:
        Verilog source code as string
    """
    names = list(result.variables)
    for name in names:
        if not name.isidentifier():
            raise ValidationError(f"Variable {name!r} is not a valid Verilog identifier")

    if result.selected:
        expr = " | ".join(impl_to_verilog(impl, names) for impl in result.selected)
    else:
        expr = "1'b1" if result.sop == "1" else "1'b0"

    lines = []
    lines.append(f"// F = {result.sop}")
    lines.append(f"// {result.num_terms} product terms, {result.cost} literals ({result.method})")
    lines.append("")
    lines.append(f"module {module_name} (")
    for name in names:
        lines.append(f"    input  wire {name},")
    lines.append("    output wire f")
    lines.append(");")
    lines.append("")
    lines.append(f"    assign f = {expr};")
    lines.append("")
    lines.append("endmodule")

    return "\n".join(lines)
