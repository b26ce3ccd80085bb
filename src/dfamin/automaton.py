from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from dfamin.errors import CapacityExceededError, ConstructionError

DEFAULT_MAX_STATES = 4096
DEFAULT_MAX_ALPHABET_SIZE = 256

Symbol = Hashable


@dataclass(frozen=True)
class GraphLimits:
    """Resource bounds for a single StateGraph."""

    max_states: int = DEFAULT_MAX_STATES
    max_alphabet_size: int = DEFAULT_MAX_ALPHABET_SIZE

    def __post_init__(self):
        if self.max_states <= 0:
            raise ValueError("max_states must be > 0")
        if self.max_alphabet_size <= 0:
            raise ValueError("max_alphabet_size must be > 0")


class State:
    __slots__ = ("id", "name", "_accepting", "_next", "partition_id")

    def __init__(self, state_id: int, name: str, accepting: bool, alphabet_size: int):
        self.id = state_id
        self.name = name
        self._accepting = bool(accepting)
        self._next: List[Optional["State"]] = [None] * alphabet_size
        self.partition_id: Optional[int] = None

    @property
    def accepting(self) -> bool:
        return self._accepting

    def targets(self) -> Iterator[Optional["State"]]:
        """Transition targets in alphabet order, ``None`` where there is none."""
        return iter(self._next)

    def __repr__(self) -> str:
        marker = "*" if self._accepting else ""
        return f"State({self.id}, {self.name!r}{marker})"


StateRef = Union[State, int]


class StateGraph:
    def __init__(
        self,
        alphabet: Union[int, Sequence[Symbol]],
        limits: Optional[GraphLimits] = None,
    ):
        self.limits = limits or GraphLimits()

        if isinstance(alphabet, int):
            if alphabet < 0:
                raise ConstructionError("alphabet size must be >= 0")
            symbols: Tuple[Symbol, ...] = tuple(range(alphabet))
        else:
            symbols = tuple(alphabet)

        if len(symbols) > self.limits.max_alphabet_size:
            raise CapacityExceededError(
                f"alphabet has {len(symbols)} symbols, limit is {self.limits.max_alphabet_size}"
            )
        if len(set(symbols)) != len(symbols):
            raise ConstructionError(f"duplicate symbols in alphabet {list(symbols)}")

        self.alphabet = symbols
        self._symbol_index: Dict[Symbol, int] = {sym: i for i, sym in enumerate(symbols)}
        self._states: List[State] = []

    @property
    def states(self) -> Tuple[State, ...]:
        return tuple(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[State]:
        return iter(self._states)

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, State):
            return 0 <= ref.id < len(self._states) and self._states[ref.id] is ref
        if isinstance(ref, int) and not isinstance(ref, bool):
            return 0 <= ref < len(self._states)
        return False

    def create_state(self, name: str, accepting: bool = False) -> State:
        if len(self._states) >= self.limits.max_states:
            raise CapacityExceededError(
                f"cannot create state {name!r}: limit of {self.limits.max_states} states reached"
            )
        state = State(len(self._states), name, accepting, len(self.alphabet))
        self._states.append(state)
        return state

    def state(self, ref: StateRef) -> State:
        if ref not in self:
            raise ConstructionError(f"state {ref!r} does not belong to this graph")
        return ref if isinstance(ref, State) else self._states[ref]

    def symbol_index(self, symbol: Symbol) -> int:
        try:
            return self._symbol_index[symbol]
        except (KeyError, TypeError):
            raise ConstructionError(
                f"symbol {symbol!r} is not in the alphabet {list(self.alphabet)}"
            ) from None

    def set_transition(self, state: StateRef, symbol: Symbol, target: Optional[StateRef]) -> None:
        source = self.state(state)
        index = self.symbol_index(symbol)
        source._next[index] = None if target is None else self.state(target)

    def get_transition(self, state: StateRef, symbol: Symbol) -> Optional[State]:
        return self.state(state)._next[self.symbol_index(symbol)]

    def set_transitions(self, state: StateRef, targets: Dict[Symbol, Optional[StateRef]]) -> None:
        for symbol, target in targets.items():
            self.set_transition(state, symbol, target)

    def copy(self) -> "StateGraph":
        clone = StateGraph(self.alphabet, self.limits)
        for s in self._states:
            clone.create_state(s.name, s.accepting)
        for s, c in zip(self._states, clone._states):
            c._next = [None if t is None else clone._states[t.id] for t in s._next]
            c.partition_id = s.partition_id
        return clone

    def accepts(self, start: StateRef, word: Iterable[Symbol]) -> bool:
        current: Optional[State] = self.state(start)
        for symbol in word:
            current = current._next[self.symbol_index(symbol)]
            if current is None:
                return False
        return current.accepting

    def get_stats(self) -> Dict:
        return {
            "states": len(self._states),
            "alphabet_size": len(self.alphabet),
            "accept_states": sum(1 for s in self._states if s.accepting),
            "total_transitions": sum(
                1 for s in self._states for t in s._next if t is not None
            ),
        }

    def _replace_states(self, survivors: List[State]) -> None:
        # Transitions into states that are not kept become "no target".
        kept = {id(s) for s in survivors}
        for s in survivors:
            s._next = [t if t is not None and id(t) in kept else None for t in s._next]
        self._states = survivors
        for new_id, s in enumerate(survivors):
            s.id = new_id
