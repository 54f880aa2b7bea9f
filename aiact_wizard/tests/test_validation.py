"""Tests for answer validation and exclusivity-aware toggling."""

from aiact_wizard.engine.schema import Question, ValidationRule
from aiact_wizard.engine.validation import (
    EXCLUSIVE_MESSAGE,
    REQUIRED_MESSAGE,
    SINGLE_CHOICE_MESSAGE,
    is_exclusive_option,
    toggle_with_exclusivity,
    validate,
)


class TestValidate:
    """Tests for validate()."""

    def test_valid_single_choice(self, single_choice):
        """Should accept one option for a single choice question."""
        result = validate(single_choice, [1])
        assert result.is_valid
        assert result.errors == []

    def test_required_empty(self, single_choice):
        """Should reject an empty selection for a required question."""
        result = validate(single_choice, [])
        assert not result.is_valid
        assert result.errors == [REQUIRED_MESSAGE]

    def test_optional_empty(self):
        """Should accept an empty selection for an optional question."""
        question = Question(id='OPT', type='multiple_choice', required=False, options=[{'id': '0'}])
        assert validate(question, []).is_valid

    def test_required_check_stops_before_rule(self, multiple_choice):
        """Should report only the required error even when a rule is violated too."""
        rule = ValidationRule(min_selections=2)
        assert validate(multiple_choice, [], rule).errors == [REQUIRED_MESSAGE]

    def test_single_choice_multiple_selected(self, single_choice):
        """Should reject more than one option for a single choice question."""
        result = validate(single_choice, [0, 1], ValidationRule(max_selections=1))
        assert result.errors == [SINGLE_CHOICE_MESSAGE]

    def test_min_selections(self, multiple_choice):
        """Should report a selection below min_selections."""
        result = validate(multiple_choice, [0], ValidationRule(type='multiple_choice', min_selections=2))
        assert not result.is_valid
        assert result.errors == ["Please select at least 2 option(s)"]

    def test_max_selections(self, multiple_choice):
        """Should report a selection above max_selections."""
        result = validate(multiple_choice, [0, 1, 2], ValidationRule(type='multiple_choice', max_selections=2))
        assert result.errors == ["Please select at most 2 option(s)"]

    def test_both_bounds_accumulate(self):
        """Should collect both bound errors when both are violated."""
        question = Question(id='OPT', type='multiple_choice', required=False, options=[{'id': '0'}, {'id': '1'}])
        rule = ValidationRule(type='multiple_choice', min_selections=3, max_selections=1)

        result = validate(question, [0, 1], rule)

        assert result.errors == ["Please select at least 3 option(s)", "Please select at most 1 option(s)"]

    def test_zero_bounds_ignored(self, multiple_choice):
        """Should treat min/max of 0 as no bound."""
        rule = ValidationRule(type='multiple_choice', min_selections=0, max_selections=0)
        assert validate(multiple_choice, [0, 1, 2], rule).is_valid

    def test_exclusive_combined(self, multiple_choice):
        """Should reject an exclusive option combined with others."""
        result = validate(multiple_choice, [0, 5])
        assert result.errors == [EXCLUSIVE_MESSAGE]

    def test_exclusive_overrides_bound_errors(self, multiple_choice):
        """Should replace accumulated bound errors with the exclusivity error."""
        rule = ValidationRule(type='multiple_choice', max_selections=2)
        result = validate(multiple_choice, [0, 1, 5], rule)
        assert result.errors == [EXCLUSIVE_MESSAGE]

    def test_exclusive_alone(self, multiple_choice):
        """Should accept an exclusive option on its own."""
        assert validate(multiple_choice, [5]).is_valid


class TestToggleWithExclusivity:
    """Tests for toggle_with_exclusivity()."""

    def test_single_choice_deselect(self, single_choice):
        """Should clear the selection when toggling the selected option."""
        assert toggle_with_exclusivity(single_choice, [1], 1) == []

    def test_single_choice_replace(self, single_choice):
        """Should replace the selection with the toggled option."""
        assert toggle_with_exclusivity(single_choice, [1], 2) == [2]

    def test_multiple_choice_deselect(self, multiple_choice):
        """Should remove an already selected option."""
        assert toggle_with_exclusivity(multiple_choice, [0, 2, 3], 2) == [0, 3]

    def test_multiple_choice_append(self, multiple_choice):
        """Should append a regular option."""
        assert toggle_with_exclusivity(multiple_choice, [2], 0) == [2, 0]

    def test_exclusive_clears_others(self, multiple_choice):
        """Should select an exclusive option alone."""
        assert toggle_with_exclusivity(multiple_choice, [1, 2], 5) == [5]

    def test_regular_clears_exclusive(self, multiple_choice):
        """Should drop exclusive options when selecting a regular one."""
        assert toggle_with_exclusivity(multiple_choice, [5], 3) == [3]

    def test_exclusive_replaces_other_exclusive(self, multiple_choice):
        """Should switch from one exclusive option to another."""
        assert toggle_with_exclusivity(multiple_choice, [4], 5) == [5]

    def test_does_not_modify_input(self, multiple_choice):
        """Should return a new list."""
        current = [1, 2]
        toggle_with_exclusivity(multiple_choice, current, 3)
        assert current == [1, 2]


class TestHelpers:
    """Tests for is_exclusive_option()."""

    def test_is_exclusive_option(self, multiple_choice):
        """Should report exclusive options and tolerate bad indices."""
        assert is_exclusive_option(multiple_choice, 5)
        assert not is_exclusive_option(multiple_choice, 0)
        assert not is_exclusive_option(multiple_choice, 99)
        assert not is_exclusive_option(multiple_choice, -1)
