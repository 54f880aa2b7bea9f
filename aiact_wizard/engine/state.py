"""Session state store with snapshot based undo."""

import logging
from typing import List, Tuple

from .schema import SetFlag, Snapshot, WizardState

logger = logging.getLogger(__name__)


class WizardStore:
    """
    Owns the state of one questionnaire session.

    ``state`` and ``snapshots`` are immutable values. Every operation
    replaces them with new objects, so a reference taken earlier is never
    changed by later calls.

    The snapshot stack has one entry per forward step holding the node that
    was answered, the selection given there, and the flags as they were
    before that step. ``go_back`` pops it to undo the step.
    """

    def __init__(self, start_node_id: str, terminal_id: str = 'END'):
        """
        Initialize the store.

        Args:
            start_node_id: Node the session starts on (and returns to on reset)
            terminal_id: Node id that marks completion
        """
        self.start_node_id = start_node_id
        self.terminal_id = terminal_id
        self.state: WizardState = self._initial_state()
        self.snapshots: Tuple[Snapshot, ...] = ()

    def _initial_state(self) -> WizardState:
        return WizardState(
            current_node_id=self.start_node_id,
            is_complete=self.start_node_id == self.terminal_id,
        )

    @property
    def can_go_back(self) -> bool:
        return bool(self.snapshots)

    def answers_for(self, question_id: str) -> List[int]:
        return list(self.state.answers.get(question_id, []))

    def record_answer(self, question_id: str, selection: List[int]) -> None:
        """Insert or replace the answer for ``question_id``."""
        answers = {**self.state.answers, question_id: list(selection)}
        self.state = self.state.model_copy(update={'answers': answers})

    def apply_flags(self, flags_to_set: List[SetFlag]) -> None:
        """Merge flags into the state; the last entry for a name wins."""
        if not flags_to_set:
            return
        flags = dict(self.state.flags)
        for flag in flags_to_set:
            flags[flag.flag_name] = flag.value
        self.state = self.state.model_copy(update={'flags': flags})

    def commit(self, node_id: str) -> None:
        """Move to ``node_id`` and recompute completion."""
        self.state = self.state.model_copy(update={
            'current_node_id': node_id,
            'is_complete': node_id == self.terminal_id,
        })
        logger.info(f"Now at node {node_id}{' (complete)' if self.state.is_complete else ''}")

    def push_snapshot(self, node_id: str, selection: List[int], flags_before: dict) -> None:
        """Record an undo point for the step taken from ``node_id``."""
        snapshot = Snapshot(node_id=node_id, answers=list(selection), flags=dict(flags_before))
        self.snapshots = self.snapshots + (snapshot,)
        self.state = self.state.model_copy(update={'history': [*self.state.history, node_id]})

    def go_back(self) -> bool:
        """
        Undo the most recent forward step.

        Restores the current node and the flags from the popped snapshot.
        Answers are kept so the previous selection can be shown again.

        Returns:
            False if there is nothing to undo, True otherwise
        """
        if not self.snapshots:
            return False

        snapshot = self.snapshots[-1]
        self.snapshots = self.snapshots[:-1]
        self.state = self.state.model_copy(update={
            'current_node_id': snapshot.node_id,
            'flags': dict(snapshot.flags),
            'history': self.state.history[:-1],
            'is_complete': False,
        })
        logger.info(f"Went back to node {snapshot.node_id}")
        return True

    def reset(self) -> None:
        """Discard all answers, flags and history."""
        self.state = self._initial_state()
        self.snapshots = ()
