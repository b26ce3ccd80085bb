class DfaminError(Exception):
    """Base class for every error raised by dfamin."""


class ConstructionError(DfaminError, ValueError):
    """The automaton being built is malformed (bad symbol, bad state, bad file)."""


class CapacityExceededError(ConstructionError):
    """A configured resource limit (states or alphabet size) was exceeded."""


class UnknownStartStateError(DfaminError, LookupError):
    """The start state is not part of the graph."""
