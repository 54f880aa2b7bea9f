"""Route selection, per-answer flags and hub resolution."""

import logging
from typing import Dict, List, Optional

from .conditions import evaluate_all, flag_conditions_hold
from .errors import HubChainLimitError, NoRouteError, UnknownNodeError
from .schema import DecisionNode, Flags, HubResolution, RouteResult, SetFlag

logger = logging.getLogger(__name__)

MAX_HUB_HOPS = 50


def route(node: DecisionNode, selection: List[int], flags: Flags) -> Optional[RouteResult]:
    """
    Pick the first route of ``node`` whose conditions all hold.

    Args:
        node: Node being answered (or evaluated, for hubs)
        selection: Selected option indices
        flags: Flags visible to the conditions

    Returns:
        RouteResult with the destination and the route's flags, or None when
        no route matches. None means the tree lacks a default route.
    """
    for position, candidate in enumerate(node.routing):
        if evaluate_all(candidate.conditions, selection, flags):
            logger.debug(f"Node {node.id}: route #{position} -> {candidate.go_to}")
            return RouteResult(next_node_id=candidate.go_to, flags_to_set=list(candidate.set_flags))
    return None


def answer_flags(node: DecisionNode, selection: List[int], current_flags: Flags) -> List[SetFlag]:
    """Collect the flags attached to the selected options.

    An entry with guard conditions is only included when its flag checks
    hold against ``current_flags``.
    """
    collected: List[SetFlag] = []
    if not node.answer_flags:
        return collected

    for index in selection:
        config = node.answer_flags.get(str(index))
        if config is None:
            continue
        for flag in config.set_flags:
            if not flag_conditions_hold(flag.condition, current_flags):
                continue
            collected.append(SetFlag(flag_name=flag.flag_name, value=flag.value))

    return collected


def apply_flags(flags: Flags, flags_to_set: List[SetFlag]) -> Flags:
    """Return a new flags dict with ``flags_to_set`` merged in; later entries win."""
    merged = dict(flags)
    for flag in flags_to_set:
        merged[flag.flag_name] = flag.value
    return merged


def is_hub(node: DecisionNode) -> bool:
    return node.is_hub


def resolve_hubs(
    nodes: Dict[str, DecisionNode],
    start_id: str,
    flags: Flags,
    terminal_id: str = 'END',
    max_hops: int = MAX_HUB_HOPS,
) -> HubResolution:
    """
    Follow hub nodes from ``start_id`` until a question node or the terminal.

    Hubs are routed with an empty selection. Each hop's flags are merged into
    a working copy, so later hubs in the chain see what earlier ones set.

    Args:
        nodes: Decision tree nodes keyed by id
        start_id: Node to start from (returned unchanged if it is not a hub)
        flags: Flags at the start of the chain (not modified)
        terminal_id: Completion sentinel
        max_hops: Maximum number of hubs to evaluate

    Returns:
        HubResolution with the final node and every flag set along the way

    Raises:
        UnknownNodeError: A node id in the chain is not in the tree
        NoRouteError: A hub has no matching route
        HubChainLimitError: Still on a hub after ``max_hops`` evaluations
    """
    current_id = start_id
    working_flags = dict(flags)
    accumulated: List[SetFlag] = []
    hops = 0

    while current_id != terminal_id:
        node = nodes.get(current_id)
        if node is None:
            raise UnknownNodeError(current_id)
        if not is_hub(node):
            break

        if hops >= max_hops:
            logger.error(
                f"Hub chain from {start_id} exceeded {max_hops} hops at {current_id}; "
                f"the decision tree probably contains a hub cycle"
            )
            raise HubChainLimitError(start_id, current_id, max_hops)

        result = route(node, [], working_flags)
        if result is None:
            raise NoRouteError(node.id)

        for flag in result.flags_to_set:
            working_flags[flag.flag_name] = flag.value
            accumulated.append(flag)

        hops += 1
        current_id = result.next_node_id

    if hops:
        logger.debug(f"Resolved {hops} hub(s): {start_id} -> {current_id}")

    return HubResolution(final_node_id=current_id, accumulated_flags=accumulated, hops=hops)
