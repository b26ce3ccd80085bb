"""
Structured result of a minimization run.

Pure data containers. Labels are built on demand; nothing here is needed by
the refinement itself.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Iterator, Optional, Tuple

from dfamin.automaton import GraphLimits, State, StateGraph
from dfamin.errors import ConstructionError


class TransitionTable(Mapping):
    """Read-only, hashable mapping from symbol to target state id (or ``None``)."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Tuple[Hashable, Optional[int]]] = ()):
        if isinstance(items, Mapping):
            items = items.items()
        self._items = tuple(items)

    def __getitem__(self, symbol: Hashable) -> Optional[int]:
        for sym, target in self._items:
            if sym == symbol:
                return target
        raise KeyError(symbol)

    def __iter__(self) -> Iterator[Hashable]:
        return (sym for sym, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"TransitionTable({dict(self._items)!r})"


@dataclass(frozen=True)
class MinimizedState:
    """One state of the minimized DFA, standing for one final partition."""

    id: int
    accepting: bool
    transitions: TransitionTable
    members: Tuple[str, ...]

    def __post_init__(self):
        if not isinstance(self.transitions, TransitionTable):
            object.__setattr__(self, "transitions", TransitionTable(self.transitions))

    @property
    def label(self) -> str:
        return "{" + ",".join(self.members) + "}"

    @property
    def name(self) -> str:
        return f"S{self.id}"


@dataclass(frozen=True)
class MinimizedDfa:
    """Minimized DFA: states ordered by id, plus the id of the start state."""

    alphabet: Tuple[Hashable, ...]
    states: Tuple[MinimizedState, ...]
    start: int
    refinement_passes: int = 0
    removed_states: int = 0
    name: str = field(default="automaton", compare=False)

    def __len__(self) -> int:
        return len(self.states)

    @property
    def start_state(self) -> MinimizedState:
        return self.states[self.start]

    @property
    def accept_states(self) -> Tuple[int, ...]:
        return tuple(s.id for s in self.states if s.accepting)

    def accepts(self, word: Iterable[Hashable]) -> bool:
        current: Optional[int] = self.start
        for symbol in word:
            if symbol not in self.start_state.transitions:
                raise ConstructionError(
                    f"symbol {symbol!r} is not in the alphabet {list(self.alphabet)}"
                )
            current = self.states[current].transitions[symbol]
            if current is None:
                return False
        return self.states[current].accepting

    def to_state_graph(self, limits: Optional[GraphLimits] = None) -> Tuple[StateGraph, State]:
        """Rebuild a StateGraph from this result, one state per minimized state."""
        graph = StateGraph(self.alphabet, limits)
        for s in self.states:
            graph.create_state(s.name, s.accepting)
        for s in self.states:
            for symbol, target in s.transitions.items():
                graph.set_transition(s.id, symbol, target)
        return graph, graph.state(self.start)
