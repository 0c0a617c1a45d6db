# src/qcircuitsim/circuit/ascii.py
"""
Text rendering of an expanded circuit.

One row per step (lettered sub-rows ``2a:``, ``2b:`` when a step has
several operations), one fixed-width column per site::

    Circuit (L=4, bc=periodic, seed=0)

            q0   q1   q2   q3
      1: ┤Rst├───────────────
      2: ─────┤Rst├──────────

A multi-site gate shows its label on its lowest site and empty boxes on
the others.
"""
from __future__ import annotations

import sys
from typing import List, Optional, TextIO, Tuple

from qcircuitsim.circuit.circuit import Circuit, ExpandedOp, expand_circuit


def _box(label: str, width: int, wire: str, left: str, right: str) -> str:
    padding = width - len(label) - 2
    left_pad = padding // 2
    return left + wire * left_pad + label + wire * (padding - left_pad) + right


def render_circuit(circuit: Circuit, seed: int = 0, unicode: bool = True) -> str:
    """Render one expansion of ``circuit`` (stochastic choices from ``seed``)."""
    wire = "─" if unicode else "-"
    left = "┤" if unicode else "|"
    right = "├" if unicode else "|"

    rows: List[Tuple[str, Optional[ExpandedOp]]] = []
    for step, step_ops in enumerate(expand_circuit(circuit, seed=seed), start=1):
        if not step_ops:
            rows.append((f"{step}:", None))
        elif len(step_ops) == 1:
            rows.append((f"{step}:", step_ops[0]))
        else:
            for k, op in enumerate(step_ops):
                rows.append((f"{step}{chr(ord('a') + k)}:", op))

    max_label = max([1] + [len(op.label) for _, op in rows if op is not None])
    col_width = max_label + 2
    row_label_width = max(max([len(name) for name, _ in rows] + [0]) + 2, 5)

    lines = [f"Circuit (L={circuit.L}, bc={circuit.bc.value}, seed={seed})", ""]
    lines.append(
        " " * row_label_width + "".join(f"q{q}".rjust(col_width) for q in range(circuit.L))
    )
    for name, op in rows:
        cells = []
        for q in range(circuit.L):
            if op is not None and q in op.sites:
                label = op.label if q == min(op.sites) else ""
                cells.append(_box(label, col_width, wire, left, right))
            else:
                cells.append(wire * col_width)
        lines.append(name.rjust(row_label_width - 1) + " " + "".join(cells))
    return "\n".join(lines) + "\n"


def print_circuit(
    circuit: Circuit,
    seed: int = 0,
    unicode: bool = True,
    file: Optional[TextIO] = None,
) -> None:
    """Write :func:`render_circuit` output to ``file`` (default stdout)."""
    out = sys.stdout if file is None else file
    out.write(render_circuit(circuit, seed=seed, unicode=unicode))
