"""Core wizard engine - drives one questionnaire session over injected datasets."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import NoRouteError, WizardCompleteError, WizardIncompleteError
from .loader import Datasets
from .outcomes import active_outcomes, applicable_articles, export_payload, group_by_level, primary_risk_level
from .routing import answer_flags, apply_flags, resolve_hubs, route
from .runner import ActionRunner
from .schema import DecisionNode, Question, ResultView, ValidationResult, WizardState
from .settings import WizardSettings
from .state import WizardStore
from .validation import toggle_with_exclusivity, validate

logger = logging.getLogger(__name__)

LEVEL_HEADERS = {
    'role': 'Your role',
    'risk_level': 'Risk classification',
    'obligation': 'Obligations',
}


class WizardEngine:
    """
    Runs a questionnaire session.

    Key responsibilities:
    - Validate answers and route to the next node
    - Fast-forward through hub nodes
    - Keep the session state with undo
    - Build the result view at the terminal node
    - Drive an interactive or headless session through an ActionRunner
    """

    def __init__(self, datasets: Datasets, settings: Optional[WizardSettings] = None):
        """
        Initialize the wizard engine.

        Args:
            datasets: Loaded questionnaire datasets (never modified)
            settings: Engine settings (default: read from environment)
        """
        self.datasets = datasets
        self.settings = settings or WizardSettings()
        self.terminal_id = self.settings.terminal_node_id
        self.store = WizardStore(datasets.start_node_id, terminal_id=self.terminal_id)
        self._enter_start()

    @property
    def state(self) -> WizardState:
        return self.store.state

    @property
    def can_go_back(self) -> bool:
        return self.store.can_go_back

    def _resolve_hubs(self, start_id: str, flags: Dict[str, Any]):
        return resolve_hubs(
            self.datasets.tree.nodes,
            start_id,
            flags,
            terminal_id=self.terminal_id,
            max_hops=self.settings.max_hub_hops,
        )

    def _enter_start(self) -> None:
        """Skip past hub nodes at the start of the tree, without an undo point."""
        start_id = self.state.current_node_id
        if start_id == self.terminal_id or not self.datasets.node(start_id).is_hub:
            return

        resolution = self._resolve_hubs(start_id, self.state.flags)
        self.store.apply_flags(resolution.accumulated_flags)
        self.store.commit(resolution.final_node_id)

    # --- Queries -------------------------------------------------------------

    def current_node(self) -> Optional[DecisionNode]:
        """Return the current node, or None at the terminal node."""
        if self.state.current_node_id == self.terminal_id:
            return None
        return self.datasets.node(self.state.current_node_id)

    def current_question(self) -> Optional[Question]:
        """Return the question to show, or None once the questionnaire is complete."""
        node = self.current_node()
        if node is None:
            return None
        return self.datasets.question(node.question_id)

    def current_selection(self) -> List[int]:
        """Selection recorded for the current question (empty if none yet)."""
        question = self.current_question()
        if question is None:
            return []
        return self.store.answers_for(question.id)

    # --- Commands ------------------------------------------------------------

    def toggle_option(self, index: int) -> List[int]:
        """
        Toggle one option of the current question and record the draft selection.

        Args:
            index: Option index to toggle

        Returns:
            The new selection
        """
        question = self.current_question()
        if question is None:
            raise WizardCompleteError("The questionnaire is already complete")

        selection = toggle_with_exclusivity(question, self.store.answers_for(question.id), index)
        self.store.record_answer(question.id, selection)
        return selection

    def submit_answer(self, selection: Optional[List[int]] = None) -> ValidationResult:
        """
        Answer the current question and move forward.

        Nothing in the session changes unless the whole step succeeds.

        Args:
            selection: Selected option indices (default: the recorded draft)

        Returns:
            ValidationResult; the session only advances when it is valid

        Raises:
            WizardCompleteError: The questionnaire is already complete
            NoRouteError: No route matched (broken decision tree)
            HubChainLimitError: Hub resolution did not terminate
        """
        node = self.current_node()
        if node is None:
            raise WizardCompleteError("The questionnaire is already complete")

        question = self.datasets.question(node.question_id)
        if selection is None:
            selection = self.store.answers_for(question.id)
        selection = list(selection)

        result = validate(question, selection, self.datasets.rule(question.id))
        if not result.is_valid:
            logger.warning(f"Rejected answer {selection} for {question.id}: {'; '.join(result.errors)}")
            return result

        flags_before = self.state.flags
        step_flags = answer_flags(node, selection, flags_before)

        routed = route(node, selection, apply_flags(flags_before, step_flags))
        if routed is None:
            logger.error(f"No route matched at node {node.id} for selection {selection}")
            raise NoRouteError(node.id)
        step_flags = step_flags + routed.flags_to_set

        resolution = self._resolve_hubs(routed.next_node_id, apply_flags(flags_before, step_flags))
        if resolution.final_node_id != self.terminal_id:
            # Fail before committing if the destination can't be shown
            self.datasets.question(self.datasets.node(resolution.final_node_id).question_id)

        self.store.record_answer(question.id, selection)
        self.store.push_snapshot(node.id, selection, flags_before)
        self.store.apply_flags(step_flags + resolution.accumulated_flags)
        self.store.commit(resolution.final_node_id)
        return result

    def go_back(self) -> bool:
        """Undo the last answer. Returns False if there is nothing to undo."""
        return self.store.go_back()

    def restart(self) -> None:
        """Start over with no answers or flags."""
        self.store.reset()
        self._enter_start()
        logger.info("Questionnaire restarted")

    # --- Results -------------------------------------------------------------

    def _active_outcomes(self):
        if not self.state.is_complete:
            raise WizardIncompleteError("Results are only available once the questionnaire is complete")
        return active_outcomes(self.state.flags, self.datasets.outcomes)

    def result_view(self) -> ResultView:
        """
        Build the final result view.

        Raises:
            WizardIncompleteError: The terminal node has not been reached
        """
        outcomes = self._active_outcomes()

        return ResultView(
            grouped_outcomes=group_by_level(outcomes),
            primary_risk_level=primary_risk_level(outcomes),
            applicable_articles=applicable_articles(outcomes),
            active_outcomes=outcomes,
        )

    def export_payload(self, assessment_date: Optional[datetime] = None) -> Dict[str, Any]:
        """Assessment document for the completed session (see outcomes.export_payload)."""
        return export_payload(self._active_outcomes(), assessment_date)

    # --- Driver --------------------------------------------------------------

    def run(self, runner: ActionRunner, headless_inputs: Optional[Dict[str, List[int]]] = None) -> Optional[ResultView]:
        """
        Drive the session to completion.

        Args:
            runner: ActionRunner used for all display and input
            headless_inputs: Dict of {question_id: [option indices]} for testing
                            If None: INTERACTIVE mode (prompt user via runner)
                            If provided: HEADLESS mode (use dict values)

        Returns:
            ResultView, or None if the user closed the input stream

        Raises:
            ValueError: In headless mode, for a missing or invalid scripted answer
        """
        headless = headless_inputs is not None

        while not self.state.is_complete:
            question = self.current_question()
            self._display_question(runner, question)

            if headless:
                if question.id not in headless_inputs:
                    raise ValueError(f"No scripted answer for question {question.id}")
                result = self.submit_answer(list(headless_inputs[question.id]))
                if not result.is_valid:
                    # Fail fast in tests
                    raise ValueError(f"Invalid answer for {question.id}: {'; '.join(result.errors)}")
                continue

            default = ','.join(str(index + 1) for index in self.current_selection())
            try:
                user_input = runner.get_input("Your answer (b = back, r = restart)", default or None)
            except EOFError:
                logger.info("Input closed before the questionnaire was complete")
                return None

            command = user_input.strip().lower()
            if command == 'b':
                if not self.go_back():
                    runner.display("Already at the first question")
                continue
            if command == 'r':
                self.restart()
                continue

            try:
                selection = parse_selection(user_input, question)
            except ValueError as e:
                runner.display(f"Error: {e}")
                continue

            result = self.submit_answer(selection)
            for error in result.errors:
                runner.display(f"Error: {error}")

        view = self.result_view()
        self._display_results(runner, view)
        return view

    def _display_question(self, runner: ActionRunner, question: Question) -> None:
        runner.display("")
        runner.display(question.text or question.id)
        if question.type == 'multiple_choice':
            runner.display("(select one or more, separated by commas)")
        for i, option in enumerate(question.options, 1):
            runner.display(f"  {i}. {option.text}")
        runner.display("")

    def _display_results(self, runner: ActionRunner, view: ResultView) -> None:
        runner.display(f"Primary risk level: {view.primary_risk_level}")
        for level, header in LEVEL_HEADERS.items():
            outcomes = getattr(view.grouped_outcomes, level)
            if not outcomes:
                continue
            runner.display("")
            runner.display(header)
            for outcome in outcomes:
                runner.display(f"- {outcome.text}")
        if view.applicable_articles:
            runner.display("")
            runner.display("Applicable articles: " + ', '.join(f"Art. {a}" for a in view.applicable_articles))


def parse_selection(raw: str, question: Question) -> List[int]:
    """
    Parse 1-based option numbers typed by the user into option indices.

    Examples:
        >>> parse_selection("1, 3", question)   # 3+ options
        [0, 2]

    Raises:
        ValueError: If an entry is not a number or is out of range
    """
    selection: List[int] = []
    for part in raw.replace(',', ' ').split():
        try:
            number = int(part)
        except ValueError:
            raise ValueError(f"Invalid option: {part}") from None
        if not 1 <= number <= len(question.options):
            raise ValueError(f"Option must be between 1 and {len(question.options)}")
        if number - 1 not in selection:
            selection.append(number - 1)
    return selection
