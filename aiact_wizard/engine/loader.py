"""DatasetLoader - loads and validates the questionnaire datasets."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import UnknownNodeError, UnknownQuestionError
from .schema import DecisionNode, DecisionTree, Outcome, Question, ValidationRule

logger = logging.getLogger(__name__)

DATASET_SUFFIXES = ('.json', '.yaml', '.yml')


class Datasets:
    """
    Read-only repository over the four questionnaire collections.

    Built once at startup and passed explicitly to the engine. The
    collections are exposed as read-only mappings of frozen models.
    """

    def __init__(
        self,
        questions: Mapping[str, Question],
        tree: DecisionTree,
        outcomes: Mapping[str, Outcome],
        rules: Optional[Mapping[str, ValidationRule]] = None,
    ):
        self.questions = MappingProxyType(dict(questions))
        self.tree = tree
        self.outcomes = MappingProxyType(dict(outcomes))
        self.rules = MappingProxyType(dict(rules or {}))

    @property
    def start_node_id(self) -> str:
        return self.tree.start

    def node(self, node_id: str) -> DecisionNode:
        try:
            return self.tree.nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def question(self, question_id: str) -> Question:
        try:
            return self.questions[question_id]
        except KeyError:
            raise UnknownQuestionError(question_id) from None

    def rule(self, question_id: str) -> Optional[ValidationRule]:
        return self.rules.get(question_id)

    @classmethod
    def from_raw(
        cls,
        questions: Dict[str, Any],
        decision_tree: Dict[str, Any],
        outcomes: Dict[str, Any],
        validation_rules: Optional[Dict[str, Any]] = None,
    ) -> 'Datasets':
        """
        Build Datasets from already parsed documents.

        Each argument is either the full document (with its ``questions`` /
        ``outcomes`` / ``rules`` wrapper key) or just the inner mapping.

        Raises:
            ValidationError: If a document doesn't match the schema
        """
        question_map = _unwrap(questions, 'questions')
        outcome_map = _unwrap(outcomes, 'outcomes')
        rule_map = _unwrap(validation_rules or {}, 'rules')

        return cls(
            questions={key: Question(**{'id': key, **value}) for key, value in question_map.items()},
            tree=DecisionTree(**decision_tree),
            outcomes={key: Outcome(**{'id': key, **value}) for key, value in outcome_map.items()},
            rules={key: ValidationRule(**value) for key, value in rule_map.items()},
        )


def _unwrap(document: Dict[str, Any], key: str) -> Dict[str, Any]:
    if isinstance(document.get(key), dict):
        return document[key]
    return document


class DatasetLoader:
    """
    Loads the questionnaire datasets from a directory.

    Expects ``questions``, ``decision_tree``, ``outcomes`` and
    ``validation_rules`` files, each as ``.json``, ``.yaml`` or ``.yml``.
    ``validation_rules`` is optional.
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize loader.

        Args:
            base_path: Directory with the dataset files (default: ./data)
        """
        if base_path is None:
            base_path = Path.cwd() / "data"
        self.base_path = Path(base_path)

    def _find(self, name: str) -> Optional[Path]:
        for suffix in DATASET_SUFFIXES:
            path = self.base_path / f"{name}{suffix}"
            if path.exists():
                return path
        return None

    def load_document(self, name: str, required: bool = True) -> Dict[str, Any]:
        """
        Read one dataset file.

        Args:
            name: File name without suffix (e.g., 'questions')
            required: If False, a missing file yields an empty dict

        Returns:
            Parsed document

        Raises:
            FileNotFoundError: If a required file doesn't exist
        """
        path = self._find(name)
        if path is None:
            if required:
                raise FileNotFoundError(f"Dataset not found: {self.base_path / name}.json")
            return {}

        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        logger.debug(f"Loaded {path}")
        return data or {}

    def load(self) -> Datasets:
        """
        Load and validate all datasets.

        Returns:
            Datasets repository

        Raises:
            FileNotFoundError: If a required dataset file doesn't exist
            ValidationError: If a file doesn't match the schema
        """
        datasets = Datasets.from_raw(
            questions=self.load_document('questions'),
            decision_tree=self.load_document('decision_tree'),
            outcomes=self.load_document('outcomes'),
            validation_rules=self.load_document('validation_rules', required=False),
        )
        logger.info(
            f"Loaded {len(datasets.questions)} questions, {len(datasets.tree.nodes)} nodes, "
            f"{len(datasets.outcomes)} outcomes from {self.base_path}"
        )
        return datasets
