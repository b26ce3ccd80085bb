from dfamin.automaton import GraphLimits, State, StateGraph
from dfamin.conversion import (
    NO_TARGET,
    Partition,
    build_minimized_dfa,
    initial_partition,
    minimize,
    refine_once,
    refine_partitions,
    remove_unreachable_states,
    signature,
    split_partition,
)
from dfamin.errors import (
    CapacityExceededError,
    ConstructionError,
    DfaminError,
    UnknownStartStateError,
)
from dfamin.minimized import MinimizedDfa, MinimizedState, TransitionTable
from dfamin.rendering import render_table

__version__ = "0.1.0"
