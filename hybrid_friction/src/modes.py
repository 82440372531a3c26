"""
Discrete states and guard channels of the sliding-mass state machine.

The sliding mass is always in exactly one of five discrete states. Eight
guard channels describe the conditions under which it leaves a state; each
channel is governed by a single state and is inactive everywhere else.
"""

from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx


class DiscreteState(Enum):
    """Discrete state of the sliding mass."""

    AT_LEFT_STOP = "at_left_stop"
    SLIDING_RIGHT = "sliding_right"
    AT_REST = "at_rest"
    SLIDING_LEFT = "sliding_left"
    AT_RIGHT_STOP = "at_right_stop"

    @property
    def is_pinned(self) -> bool:
        """True when the mass is held motionless by friction or a stop."""
        return self in PINNED_STATES

    def __str__(self) -> str:
        return self.name


PINNED_STATES = frozenset(
    {DiscreteState.AT_LEFT_STOP, DiscreteState.AT_REST, DiscreteState.AT_RIGHT_STOP},
)


class Guard(IntEnum):
    """Guard channels, indexed in the order of the guard vector."""

    LEFT_STOP_BREAKAWAY = 0
    SLIDING_RIGHT_STALL = 1
    RIGHT_STOP_IMPACT = 2
    REST_BREAKAWAY_RIGHT = 3
    REST_BREAKAWAY_LEFT = 4
    SLIDING_LEFT_STALL = 5
    LEFT_STOP_IMPACT = 6
    RIGHT_STOP_BREAKAWAY = 7

    @property
    def governing_state(self) -> DiscreteState:
        """The only discrete state in which this guard is active."""
        return GOVERNING_STATE[self]


NUM_GUARDS = len(Guard)

GOVERNING_STATE: Dict[Guard, DiscreteState] = {
    Guard.LEFT_STOP_BREAKAWAY: DiscreteState.AT_LEFT_STOP,
    Guard.SLIDING_RIGHT_STALL: DiscreteState.SLIDING_RIGHT,
    Guard.RIGHT_STOP_IMPACT: DiscreteState.SLIDING_RIGHT,
    Guard.REST_BREAKAWAY_RIGHT: DiscreteState.AT_REST,
    Guard.REST_BREAKAWAY_LEFT: DiscreteState.AT_REST,
    Guard.SLIDING_LEFT_STALL: DiscreteState.SLIDING_LEFT,
    Guard.LEFT_STOP_IMPACT: DiscreteState.SLIDING_LEFT,
    Guard.RIGHT_STOP_BREAKAWAY: DiscreteState.AT_RIGHT_STOP,
}

# Target states per guard as (elastic, inelastic). Impacts with a stop
# bounce back when restitution > 0 and pin the mass otherwise or when the
# rebound is slower than the minimum bounce speed.
TRANSITION_TARGETS: Dict[Guard, Tuple[DiscreteState, DiscreteState]] = {
    Guard.LEFT_STOP_BREAKAWAY: (DiscreteState.SLIDING_RIGHT,) * 2,
    Guard.SLIDING_RIGHT_STALL: (DiscreteState.AT_REST,) * 2,
    Guard.RIGHT_STOP_IMPACT: (DiscreteState.SLIDING_LEFT, DiscreteState.AT_RIGHT_STOP),
    Guard.REST_BREAKAWAY_RIGHT: (DiscreteState.SLIDING_RIGHT,) * 2,
    Guard.REST_BREAKAWAY_LEFT: (DiscreteState.SLIDING_LEFT,) * 2,
    Guard.SLIDING_LEFT_STALL: (DiscreteState.AT_REST,) * 2,
    Guard.LEFT_STOP_IMPACT: (DiscreteState.SLIDING_RIGHT, DiscreteState.AT_LEFT_STOP),
    Guard.RIGHT_STOP_BREAKAWAY: (DiscreteState.SLIDING_LEFT,) * 2,
}


def active_guards(state: DiscreteState) -> List[Guard]:
    """Guards governed by ``state``, in index order."""
    return [guard for guard in Guard if GOVERNING_STATE[guard] is state]


def transition_graph(
    restitution: Optional[float] = None, min_bounce_speed: float = 0.0,
) -> nx.DiGraph:
    """
    Build the directed graph of legal discrete-state transitions.

    Args:
        restitution: If given, keep only the impact targets reachable with
            this coefficient of restitution. If None, include both.
        min_bounce_speed: Rebound speed below which an impact pins the mass;
            when positive, stops are reachable for any restitution.

    Returns:
        DiGraph over DiscreteState members. Each edge carries a ``guards``
        attribute listing the guards that produce it.
    """
    bounces = restitution is None or restitution > 0.0
    pins = restitution is None or restitution == 0.0 or min_bounce_speed > 0.0

    graph = nx.DiGraph()
    graph.add_nodes_from(DiscreteState)

    for guard, (elastic, inelastic) in TRANSITION_TARGETS.items():
        targets = set()
        if bounces or elastic is inelastic:
            targets.add(elastic)
        if pins or elastic is inelastic:
            targets.add(inelastic)

        source = GOVERNING_STATE[guard]
        for target in targets:
            if graph.has_edge(source, target):
                graph.edges[source, target]["guards"].append(guard)
            else:
                graph.add_edge(source, target, guards=[guard])

    return graph


def is_valid_sequence(
    states: Iterable[DiscreteState],
    restitution: Optional[float] = None,
    min_bounce_speed: float = 0.0,
) -> bool:
    """Check that consecutive distinct states are joined by a legal transition."""
    graph = transition_graph(restitution, min_bounce_speed)
    previous = None
    for state in states:
        if previous is not None and state is not previous:
            if not graph.has_edge(previous, state):
                return False
        previous = state
    return True
