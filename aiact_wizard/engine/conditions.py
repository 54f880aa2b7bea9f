"""Condition evaluation for routes and conditional flags."""

from typing import Any, Iterable, List, Optional

from .schema import AnswerIs, Always, AnyIn, Condition, ExactMatch, FlagEquals, Flags, NoneIn


def flag_matches(flags: Flags, flag_name: str, expected: Any) -> bool:
    """Check a flag against a value, requiring the same type as well as value.

    ``True`` never equals ``"true"``, and a missing flag never matches.
    """
    if flag_name not in flags:
        return False
    actual = flags[flag_name]
    return type(actual) is type(expected) and actual == expected


def evaluate(condition: Condition, selection: List[int], flags: Flags) -> bool:
    """
    Evaluate one condition against the selected option indices and flags.

    Args:
        condition: Tagged condition (see schema.Condition)
        selection: Selected option indices for the current question
        flags: Accumulated flags

    Returns:
        True if the condition holds
    """
    if isinstance(condition, AnswerIs):
        return condition.index in selection

    if isinstance(condition, ExactMatch):
        # Order does not matter, but duplicates and extras do
        return len(selection) == len(condition.indices) and set(selection) == set(condition.indices)

    if isinstance(condition, AnyIn):
        return any(index in selection for index in condition.indices)

    if isinstance(condition, NoneIn):
        return not any(index in selection for index in condition.indices)

    if isinstance(condition, FlagEquals):
        return flag_matches(flags, condition.flag_name, condition.value)

    if isinstance(condition, Always):
        return True

    raise TypeError(f"Unsupported condition type: {type(condition).__name__}")


def evaluate_all(conditions: Optional[Iterable[Condition]], selection: List[int], flags: Flags) -> bool:
    """AND every condition together. No conditions means a default route."""
    if not conditions:
        return True
    return all(evaluate(condition, selection, flags) for condition in conditions)


def flag_conditions_hold(conditions: Optional[Iterable[Condition]], flags: Flags) -> bool:
    """Evaluate only the flag checks in ``conditions``; other kinds are ignored.

    Used for the guards on per-answer flags, which can only look at flags.
    """
    if not conditions:
        return True
    return all(
        flag_matches(flags, condition.flag_name, condition.value)
        for condition in conditions
        if isinstance(condition, FlagEquals)
    )
