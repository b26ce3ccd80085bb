"""
Pytest configuration and fixtures for dfamin tests.

Provides the small reference automata used across the suite and a seeded
generator of random complete DFAs.
"""

import random

import matplotlib
import pytest

matplotlib.use("Agg")

from dfamin.automaton import StateGraph  # noqa: E402


@pytest.fixture
def disconnected_dfa():
    """
    q1 is the start state, q4 is unreachable and q2/q3 are equivalent.

    Returns (graph, start, states_by_name).
    """
    g = StateGraph(2)
    q1 = g.create_state("q1", False)
    q2 = g.create_state("q2", True)
    q3 = g.create_state("q3", True)
    q4 = g.create_state("q4", False)
    g.set_transitions(q1, {0: q2, 1: q3})
    g.set_transitions(q2, {0: q3, 1: q2})
    g.set_transitions(q3, {0: q3, 1: q2})
    g.set_transitions(q4, {0: q2, 1: q3})
    return g, q1, {"q1": q1, "q2": q2, "q3": q3, "q4": q4}


@pytest.fixture
def minimal_dfa():
    """Two-state DFA that is already minimal. Returns (graph, start)."""
    g = StateGraph(2)
    qa = g.create_state("q_a", False)
    qb = g.create_state("q_b", True)
    g.set_transitions(qa, {0: qb, 1: qa})
    g.set_transitions(qb, {0: qb, 1: qa})
    return g, qa


@pytest.fixture
def six_state_dfa():
    """
    Six reachable states over {a, b}; q1/q2/q4 and q0/q3 collapse.

    Returns (graph, start).
    """
    g = StateGraph(["a", "b"])
    q = [g.create_state(f"q{i}", accepting) for i, accepting in
         enumerate([False, True, True, False, True, False])]
    g.set_transitions(q[0], {"a": q[3], "b": q[1]})
    g.set_transitions(q[1], {"a": q[2], "b": q[5]})
    g.set_transitions(q[2], {"a": q[2], "b": q[5]})
    g.set_transitions(q[3], {"a": q[0], "b": q[4]})
    g.set_transitions(q[4], {"a": q[2], "b": q[5]})
    g.set_transitions(q[5], {"a": q[5], "b": q[5]})
    return g, q[0]


@pytest.fixture
def random_dfa_factory():
    """
    Build complete random DFAs from a seed.

    Every state has a transition on every symbol, so language equivalence
    and partition equivalence coincide.
    """

    def make(seed, n_states, alphabet_size=2, accept_ratio=0.4):
        rng = random.Random(seed)
        g = StateGraph(alphabet_size)
        states = [g.create_state(f"r{i}", rng.random() < accept_ratio) for i in range(n_states)]
        for s in states:
            for sym in g.alphabet:
                g.set_transition(s, sym, rng.choice(states))
        return g, states[0]

    return make
