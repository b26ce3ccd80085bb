from typing import List

from dfamin.minimized import MinimizedDfa

NONE_MARKER = "-"
ACCEPT_MARKER = "*"


def render_table(dfa: MinimizedDfa) -> str:
    """Format the minimized DFA as a transition table, one row per state."""
    header = ["State (Original States)"] + [f"Next on '{sym}'" for sym in dfa.alphabet]

    rows: List[List[str]] = []
    for s in dfa.states:
        marker = ACCEPT_MARKER if s.accepting else " "
        row = [f"{s.name} {s.label}{marker}"]
        for sym in dfa.alphabet:
            target = s.transitions[sym]
            row.append(NONE_MARKER if target is None else f"S{target}")
        rows.append(row)

    widths = [len(h) for h in header]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def fmt(cells: List[str]) -> str:
        return "| ".join(cell.ljust(w + 1) for cell, w in zip(cells, widths)).rstrip()

    lines = [fmt(header), "-" * (sum(widths) + 3 * len(widths) - 2)]
    lines.extend(fmt(row) for row in rows)
    lines.append(f"Start: S{dfa.start}")
    lines.append(f"({ACCEPT_MARKER} indicates final state in minimized DFA)")
    return "\n".join(lines)
