import copy

from dfamin.automaton import StateGraph
from dfamin.conversion import minimize
from dfamin.rendering import render_table


def _cells(line):
    return [cell.strip() for cell in line.split("|")]


def test_table_rows_follow_partition_order(disconnected_dfa) -> None:
    g, start, _ = disconnected_dfa
    lines = render_table(minimize(g, start)).splitlines()

    assert _cells(lines[0]) == ["State (Original States)", "Next on '0'", "Next on '1'"]
    assert set(lines[1]) == {"-"}
    assert _cells(lines[2]) == ["S0 {q2,q3}*", "S0", "S0"]
    assert _cells(lines[3]) == ["S1 {q1}", "S0", "S0"]
    assert lines[4] == "Start: S1"
    assert lines[-1].startswith("(*")


def test_missing_transition_uses_placeholder() -> None:
    g = StateGraph(["a", "b"])
    s = g.create_state("s", True)
    g.set_transition(s, "a", s)

    lines = render_table(minimize(g, s)).splitlines()

    assert _cells(lines[2]) == ["S0 {s}*", "S0", "-"]


def test_columns_widen_for_long_labels() -> None:
    g = StateGraph(1)
    names = [f"very_long_state_name_{i}" for i in range(3)]
    states = [g.create_state(n, True) for n in names]
    for i, s in enumerate(states):
        g.set_transition(s, 0, states[(i + 1) % 3])
    states_row = render_table(minimize(g, states[0])).splitlines()[2]

    assert "{" + ",".join(names) + "}*" in states_row
    assert len(_cells(states_row)) == 2


def test_rendering_does_not_mutate_result(six_state_dfa) -> None:
    g, start = six_state_dfa
    dfa = minimize(g, start)
    before = copy.deepcopy(dfa)

    render_table(dfa)

    assert dfa == before


def test_separator_matches_row_width(disconnected_dfa) -> None:
    g, start, _ = disconnected_dfa
    lines = render_table(minimize(g, start)).splitlines()

    assert len(lines[1]) == len(lines[0])
