import logging
from typing import List, Optional, Tuple

from dfamin.automaton import State, StateGraph, StateRef
from dfamin.errors import UnknownStartStateError
from dfamin.minimized import MinimizedDfa, MinimizedState, TransitionTable

logger = logging.getLogger(__name__)

# Partition id used in signatures for "no transition on this symbol".
NO_TARGET = -1


class Partition:
    __slots__ = ("id", "members")

    def __init__(self, partition_id: int, members: List[State]):
        self.id = partition_id
        self.members = members

    @property
    def label(self) -> str:
        return "{" + ",".join(s.name for s in self.members) + "}"

    @property
    def is_accepting(self) -> bool:
        return self.members[0].accepting

    def __len__(self) -> int:
        return len(self.members)

    def __repr__(self) -> str:
        return f"Partition({self.id}, {self.label})"


def remove_unreachable_states(graph: StateGraph, start: StateRef) -> int:
    """
    Drop every state not reachable from ``start`` and renumber the survivors
    densely, keeping their relative order. Transitions into dropped states
    become ``None``. Returns the number of removed states.
    """
    if start not in graph:
        raise UnknownStartStateError(f"start state {start!r} is not in the graph")
    start_state = graph.state(start)

    reachable = [False] * len(graph)
    reachable[start_state.id] = True

    changed = True
    while changed:
        changed = False
        for s in graph:
            if not reachable[s.id]:
                continue
            for target in s.targets():
                if target is not None and not reachable[target.id]:
                    reachable[target.id] = True
                    changed = True

    survivors = [s for s in graph if reachable[s.id]]
    removed = len(graph) - len(survivors)
    graph._replace_states(survivors)

    if removed:
        logger.info("Removed %d unreachable state(s), %d remain", removed, len(survivors))
    return removed


def _assign(partitions: List[Partition]) -> None:
    for p in partitions:
        for s in p.members:
            s.partition_id = p.id


def _log_partitions(header: str, partitions: List[Partition]) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s (%d):", header, len(partitions))
        for p in partitions:
            logger.debug("  Partition %d %s", p.id, p.label)


def initial_partition(graph: StateGraph) -> List[Partition]:
    accepting = [s for s in graph if s.accepting]
    rejecting = [s for s in graph if not s.accepting]

    partitions = []
    for group in (accepting, rejecting):
        if group:
            partitions.append(Partition(len(partitions), group))

    for s in graph:
        s.partition_id = None
    _assign(partitions)
    _log_partitions("Initial partitions", partitions)
    return partitions


def signature(state: State) -> Tuple[int, ...]:
    return tuple(NO_TARGET if t is None else t.partition_id for t in state.targets())


def split_partition(partition: Partition) -> List[List[State]]:
    """
    Split a partition by signature. Members are visited in order; each joins
    the first sub-partition whose representative has the same signature, or
    opens a new one.
    """
    if len(partition) <= 1:
        return [list(partition.members)]

    groups: List[List[State]] = []
    representatives: List[Tuple[int, ...]] = []
    for s in partition.members:
        sig = signature(s)
        for i, rep in enumerate(representatives):
            if rep == sig:
                groups[i].append(s)
                break
        else:
            representatives.append(sig)
            groups.append([s])
    return groups


def refine_once(partitions: List[Partition]) -> Tuple[List[Partition], bool]:
    """
    Run one refinement pass. Signatures are computed against the partition
    ids of the previous pass for every partition before any id is reassigned.
    """
    split = False
    produced: List[List[State]] = []
    for p in partitions:
        groups = split_partition(p)
        if len(groups) > 1:
            split = True
        produced.extend(groups)

    if not split and len(produced) == len(partitions):
        return partitions, False

    refined = [Partition(i, members) for i, members in enumerate(produced)]
    _assign(refined)
    _log_partitions("Partitions refined", refined)
    return refined, True


def refine_partitions(partitions: List[Partition]) -> Tuple[List[Partition], int]:
    """Refine to fixpoint. Returns the final partitions and the number of passes run."""
    passes = 0
    changed = True
    while changed:
        partitions, changed = refine_once(partitions)
        passes += 1

    logger.info("Refinement reached a fixpoint after %d pass(es): %d partition(s)",
                passes, len(partitions))
    _log_partitions("Final partitions", partitions)
    return partitions, passes


def build_minimized_dfa(
    graph: StateGraph,
    partitions: List[Partition],
    start: State,
    refinement_passes: int = 0,
    removed_states: int = 0,
    name: str = "automaton",
) -> MinimizedDfa:
    states = []
    for p in partitions:
        representative = p.members[0]
        transitions = TransitionTable(
            (symbol, None if target is None else target.partition_id)
            for symbol, target in zip(graph.alphabet, representative.targets())
        )
        states.append(
            MinimizedState(
                id=p.id,
                accepting=representative.accepting,
                transitions=transitions,
                members=tuple(s.name for s in p.members),
            )
        )

    return MinimizedDfa(
        alphabet=graph.alphabet,
        states=tuple(states),
        start=start.partition_id,
        refinement_passes=refinement_passes,
        removed_states=removed_states,
        name=name,
    )


def minimize(
    graph: StateGraph,
    start: StateRef,
    copy: bool = True,
    name: Optional[str] = None,
) -> MinimizedDfa:
    """
    Run the whole pipeline: prune, partition, refine, build.

    With ``copy=True`` (the default) the caller's graph is left untouched and
    ``start`` is resolved against it; otherwise the graph is pruned and its
    states' partition ids are overwritten in place.
    """
    if start not in graph:
        raise UnknownStartStateError(f"start state {start!r} is not in the graph")

    if copy:
        start_id = graph.state(start).id
        graph = graph.copy()
        start_state = graph.state(start_id)
    else:
        start_state = graph.state(start)

    logger.info("Minimizing DFA: %d state(s), alphabet %s", len(graph), list(graph.alphabet))

    removed = remove_unreachable_states(graph, start_state)
    partitions = initial_partition(graph)
    partitions, passes = refine_partitions(partitions)

    return build_minimized_dfa(
        graph,
        partitions,
        start_state,
        refinement_passes=passes,
        removed_states=removed,
        name=name or "automaton",
    )
