"""Answer validation and selection toggling."""

from typing import List, Optional

from .schema import Question, ValidationResult, ValidationRule

REQUIRED_MESSAGE = "Please select at least one option"
SINGLE_CHOICE_MESSAGE = "Please select only one option"
EXCLUSIVE_MESSAGE = "The selected option cannot be combined with other options"


def validate(question: Question, selection: List[int], rule: Optional[ValidationRule] = None) -> ValidationResult:
    """
    Validate a selection for ``question``.

    Checks run in order. A missing required answer, several answers to a
    single choice question, or an exclusive option combined with others
    stop immediately with a single error. Min/max violations from ``rule``
    are collected together.

    Args:
        question: Question being answered
        selection: Selected option indices
        rule: Optional validation rule for this question

    Returns:
        ValidationResult (valid iff no errors)
    """
    if question.required and not selection:
        return ValidationResult(is_valid=False, errors=[REQUIRED_MESSAGE])

    if question.type == 'single_choice' and len(selection) > 1:
        return ValidationResult(is_valid=False, errors=[SINGLE_CHOICE_MESSAGE])

    errors: List[str] = []
    if rule is not None:
        # A bound of 0 or None is treated as "no bound"
        if rule.min_selections and len(selection) < rule.min_selections:
            errors.append(f"Please select at least {rule.min_selections} option(s)")
        if rule.max_selections and len(selection) > rule.max_selections:
            errors.append(f"Please select at most {rule.max_selections} option(s)")

    if len(selection) > 1 and any(is_exclusive_option(question, index) for index in selection):
        return ValidationResult(is_valid=False, errors=[EXCLUSIVE_MESSAGE])

    return ValidationResult(is_valid=not errors, errors=errors)


def is_exclusive_option(question: Question, index: int) -> bool:
    """Return True if the option at ``index`` exists and is exclusive."""
    if 0 <= index < len(question.options):
        return question.options[index].exclusive
    return False


def toggle_with_exclusivity(question: Question, current_selection: List[int], toggled_index: int) -> List[int]:
    """Return the selection after the user toggles ``toggled_index``.

    Examples:
        Single choice [1], toggle 1 -> []
        Single choice [1], toggle 2 -> [2]
        Multiple choice [1, 2], toggle exclusive 5 -> [5]
        Multiple choice [5], toggle 3 -> [3]   (5 being exclusive)
    """
    was_selected = toggled_index in current_selection

    if question.type == 'single_choice':
        return [] if was_selected else [toggled_index]

    if was_selected:
        return [index for index in current_selection if index != toggled_index]

    if is_exclusive_option(question, toggled_index):
        return [toggled_index]

    kept = [index for index in current_selection if not is_exclusive_option(question, index)]
    return kept + [toggled_index]
