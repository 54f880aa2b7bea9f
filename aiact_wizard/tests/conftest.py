"""Shared fixtures for wizard engine tests."""

from pathlib import Path

import pytest

from aiact_wizard.engine.loader import DatasetLoader
from aiact_wizard.engine.engine import WizardEngine
from aiact_wizard.engine.schema import DecisionNode, Question
from aiact_wizard.engine.settings import WizardSettings

FIXTURE_DATA = Path(__file__).parent / "fixtures" / "data"


@pytest.fixture
def data_dir():
    """Directory with the small fixture questionnaire."""
    return FIXTURE_DATA


@pytest.fixture
def datasets(data_dir):
    """Fixture questionnaire loaded through DatasetLoader."""
    return DatasetLoader(base_path=data_dir).load()


@pytest.fixture
def settings():
    """Settings independent of the caller's environment."""
    return WizardSettings(terminal_node_id='END', max_hub_hops=50, verbose=False)


@pytest.fixture
def engine(datasets, settings):
    """Fresh WizardEngine on the fixture questionnaire."""
    return WizardEngine(datasets, settings=settings)


@pytest.fixture
def make_node():
    """Build a DecisionNode from raw dataset fields."""
    def _make(node_id='N', question_id='Q', type='radio', routing=None, answer_flags=None):
        return DecisionNode(
            id=node_id,
            question_id=question_id,
            type=type,
            routing=routing or [],
            answer_flags=answer_flags or {},
        )
    return _make


@pytest.fixture
def single_choice():
    """Single choice question with three options."""
    return Question(
        id='SC',
        text='Pick one',
        type='single_choice',
        required=True,
        options=[{'id': '0', 'text': 'A'}, {'id': '1', 'text': 'B'}, {'id': '2', 'text': 'C'}],
    )


@pytest.fixture
def multiple_choice():
    """Multiple choice question; options 4 and 5 are exclusive."""
    return Question(
        id='MC',
        text='Pick any',
        type='multiple_choice',
        required=True,
        options=[
            {'id': '0', 'text': 'A'},
            {'id': '1', 'text': 'B'},
            {'id': '2', 'text': 'C'},
            {'id': '3', 'text': 'D'},
            {'id': '4', 'text': 'Not sure', 'exclusive': True},
            {'id': '5', 'text': 'None of the above', 'exclusive': True},
        ],
    )
