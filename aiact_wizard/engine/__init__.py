"""Wizard engine - rule evaluation core for the compliance questionnaire."""

from .engine import WizardEngine
from .errors import (
    DecisionTreeError,
    HubChainLimitError,
    NoRouteError,
    UnknownNodeError,
    UnknownQuestionError,
    WizardCompleteError,
    WizardError,
    WizardIncompleteError,
)
from .loader import DatasetLoader, Datasets
from .runner import ActionRunner, RealActionRunner, MockActionRunner
from .schema import DecisionNode, DecisionTree, Outcome, Question, ResultView, ValidationResult, WizardState
from .settings import WizardSettings

__all__ = [
    'WizardEngine',
    'DatasetLoader',
    'Datasets',
    'ActionRunner',
    'RealActionRunner',
    'MockActionRunner',
    'WizardSettings',
    'DecisionNode',
    'DecisionTree',
    'Outcome',
    'Question',
    'ResultView',
    'ValidationResult',
    'WizardState',
    'WizardError',
    'DecisionTreeError',
    'NoRouteError',
    'UnknownNodeError',
    'UnknownQuestionError',
    'HubChainLimitError',
    'WizardCompleteError',
    'WizardIncompleteError',
]
