"""Exceptions raised by the wizard engine.

Validation problems are not exceptions: they come back as a
``ValidationResult`` so the user can correct the selection and resubmit.
"""


class WizardError(Exception):
    """Base class for all wizard engine errors."""


class DecisionTreeError(WizardError):
    """The decision tree data is inconsistent. Not recoverable at runtime."""


class NoRouteError(DecisionTreeError):
    """No route of a node matched and the node has no default route."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"No matching route for node '{node_id}' (missing default route?)")


class UnknownNodeError(DecisionTreeError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found in decision tree: {node_id}")


class UnknownQuestionError(DecisionTreeError):
    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question not found: {question_id}")


class HubChainLimitError(WizardError):
    """Hub resolution did not reach a question or the terminal node in time.

    Usually means the tree contains a cycle of hub nodes.
    """

    def __init__(self, start_id: str, last_node_id: str, max_hops: int):
        self.start_id = start_id
        self.last_node_id = last_node_id
        self.max_hops = max_hops
        super().__init__(
            f"Hub chain starting at '{start_id}' exceeded {max_hops} hops (stopped at '{last_node_id}')"
        )


class WizardStateError(WizardError):
    """An operation was called in a session state that does not allow it."""


class WizardCompleteError(WizardStateError):
    """The questionnaire is already finished."""


class WizardIncompleteError(WizardStateError):
    """Results were requested before the terminal node was reached."""
