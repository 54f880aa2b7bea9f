"""Outcome selection, grouping and ordering."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .schema import Flags, GroupedOutcomes, Outcome
from .settings import DEFAULT_RISK_LEVEL, RISK_LEVEL_PRIORITY, ROLE_OUTCOMES, STRUCTURE_LEVELS, SYSTEM_ROLE_FLAG


def active_outcomes(flags: Flags, outcomes: Mapping[str, Outcome]) -> List[Outcome]:
    """
    Select the outcomes switched on by ``flags``.

    An outcome is active when the flag with its id is ``True`` (the boolean,
    not a truthy string) and it is not an empty structural outcome. The
    system role flag additionally activates the matching role outcome.

    Args:
        flags: Final accumulated flags
        outcomes: Outcome catalog keyed by id, in catalog order

    Returns:
        Active outcomes in catalog order, role outcome (if any) last
    """
    selected: List[Outcome] = []
    for outcome_id, outcome in outcomes.items():
        if flags.get(outcome_id) is True and not outcome.is_empty:
            selected.append(outcome)

    system_role = flags.get(SYSTEM_ROLE_FLAG)
    if isinstance(system_role, str) and system_role in ROLE_OUTCOMES:
        role_outcome = outcomes.get(ROLE_OUTCOMES[system_role])
        if (
            role_outcome is not None
            and not role_outcome.is_empty
            and all(outcome.id != role_outcome.id for outcome in selected)
        ):
            selected.append(role_outcome)

    return selected


def group_by_level(outcomes: List[Outcome]) -> GroupedOutcomes:
    """Split outcomes into role / risk_level / obligation, highest weight first.

    Sorting is stable, so equal weights keep their incoming order.
    """
    buckets: Dict[str, List[Outcome]] = {level: [] for level in STRUCTURE_LEVELS}
    for outcome in outcomes:
        buckets[outcome.structure_level].append(outcome)

    return GroupedOutcomes(**{
        level: sorted(items, key=lambda outcome: outcome.priority_weight, reverse=True)
        for level, items in buckets.items()
    })


def primary_risk_level(outcomes: List[Outcome]) -> str:
    """Return the most severe risk level among ``outcomes``."""
    present = {outcome.risk_level for outcome in outcomes}
    for risk_level in RISK_LEVEL_PRIORITY:
        if risk_level in present:
            return risk_level
    return DEFAULT_RISK_LEVEL


def applicable_articles(outcomes: List[Outcome]) -> List[int]:
    """Sorted, de-duplicated article numbers referenced by ``outcomes``."""
    return sorted({article for outcome in outcomes for article in outcome.applicable_articles})


def export_payload(outcomes: List[Outcome], assessment_date: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the downloadable assessment document for ``outcomes``.

    Args:
        outcomes: Active outcomes
        assessment_date: Timestamp to record (default: now, UTC)

    Returns:
        JSON-serialisable dict
    """
    if assessment_date is None:
        assessment_date = datetime.now(timezone.utc)

    return {
        'assessment_date': assessment_date.isoformat(),
        'primary_risk_level': primary_risk_level(outcomes),
        'outcomes': [outcome.model_dump(mode='json') for outcome in outcomes],
        'applicable_articles': applicable_articles(outcomes),
    }
