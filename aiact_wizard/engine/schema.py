"""Pydantic models for questionnaire datasets and wizard session state."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

FlagValue = Union[bool, str]
Flags = Dict[str, FlagValue]
Answers = Dict[str, List[int]]


class _DatasetModel(BaseModel):
    """Base for immutable dataset records; unknown fields are kept as-is."""

    model_config = ConfigDict(frozen=True, extra="allow")


# --- Questions ---------------------------------------------------------------

class Option(_DatasetModel):
    """A single answer option. ``exclusive`` marks 'None of the above' style options."""

    id: str = Field(..., description="Option identifier")
    text: str = Field("", description="Option label")
    exclusive: bool = Field(False, description="Selecting this option clears all others")


class Question(_DatasetModel):
    """A user-facing question."""

    id: str = Field(..., description="Unique question identifier")
    text: str = Field("", description="Question text")
    type: Literal["single_choice", "multiple_choice"] = Field(..., description="Selection mode")
    required: bool = Field(True, description="Whether an empty selection is rejected")
    options: List[Option] = Field(default_factory=list, description="Ordered answer options")


# --- Conditions --------------------------------------------------------------
#
# Raw routing data stores a condition as an object with one of several
# optional fields. Each field becomes its own model here, tagged by ``kind``.

class AnswerIs(_DatasetModel):
    kind: Literal["answer_is"] = "answer_is"
    index: int


class ExactMatch(_DatasetModel):
    kind: Literal["exact_match"] = "exact_match"
    indices: List[int]


class AnyIn(_DatasetModel):
    kind: Literal["any_in"] = "any_in"
    indices: List[int]


class NoneIn(_DatasetModel):
    kind: Literal["none_in"] = "none_in"
    indices: List[int]


class FlagEquals(_DatasetModel):
    kind: Literal["flag_equals"] = "flag_equals"
    flag_name: str
    value: FlagValue


class Always(_DatasetModel):
    """Condition with no predicate; used by default routes."""

    kind: Literal["always"] = "always"


Condition = Annotated[
    Union[AnswerIs, ExactMatch, AnyIn, NoneIn, FlagEquals, Always],
    Field(discriminator="kind"),
]


def tag_condition(raw: Any) -> Any:
    """Convert a raw condition object into its tagged form.

    The first populated predicate field wins, in this order:
    ``answer_is``, ``is_this_exact_match_selected``, ``if_any_answer_in``,
    ``if_none_selected_in``, ``flag_equals``. An object with none of them
    is an ``always`` condition. Already tagged input passes through.

    Examples:
        >>> tag_condition({'answer_is': 2})
        {'kind': 'answer_is', 'index': 2}
    """
    if not isinstance(raw, dict) or 'kind' in raw:
        return raw

    if raw.get('answer_is') is not None:
        return {'kind': 'answer_is', 'index': raw['answer_is']}
    if raw.get('is_this_exact_match_selected') is not None:
        return {'kind': 'exact_match', 'indices': raw['is_this_exact_match_selected']}
    if raw.get('if_any_answer_in') is not None:
        return {'kind': 'any_in', 'indices': raw['if_any_answer_in']}
    if raw.get('if_none_selected_in') is not None:
        return {'kind': 'none_in', 'indices': raw['if_none_selected_in']}
    if raw.get('flag_equals') is not None:
        flag = raw['flag_equals']
        return {'kind': 'flag_equals', 'flag_name': flag.get('flag_name'), 'value': flag.get('value')}
    return {'kind': 'always'}


def _tag_conditions(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [tag_condition(item) for item in value]
    return value


# --- Decision tree -----------------------------------------------------------

class SetFlag(_DatasetModel):
    """Assign ``value`` to ``flag_name``, optionally guarded by flag conditions."""

    flag_name: str = Field(..., description="Flag to set")
    value: FlagValue = Field(..., description="Boolean or string value")
    condition: List[Condition] = Field(default_factory=list, description="Guards evaluated against current flags")

    @field_validator('condition', mode='before')
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return _tag_conditions(value)


class Route(_DatasetModel):
    """One ordered alternative of a node: destination plus the conditions that select it."""

    conditions: List[Condition] = Field(default_factory=list, description="Implicit AND; empty means default route")
    go_to: str = Field(..., description="Destination node id")
    set_flags: List[SetFlag] = Field(default_factory=list, description="Flags set when this route wins")

    @field_validator('conditions', mode='before')
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return _tag_conditions(value)

    @field_validator('set_flags', mode='before')
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class AnswerFlagConfig(_DatasetModel):
    set_flags: List[SetFlag] = Field(default_factory=list)
    exclusive: bool = False


class DecisionNode(_DatasetModel):
    """A point in the decision tree, either a question or a hub."""

    id: str = Field(..., description="Node identifier (defaults to its key in the tree)")
    question_id: str = Field(..., description="Question shown at this node")
    type: Literal["radio", "checkbox", "hub"] = Field(..., description="Node kind")
    routing: List[Route] = Field(default_factory=list, description="Routes in evaluation order")
    answer_flags: Dict[str, AnswerFlagConfig] = Field(
        default_factory=dict, description="Per-answer flags keyed by option index as string"
    )

    @property
    def is_hub(self) -> bool:
        """Hubs have no user-facing question and only evaluate flags."""
        return self.type == 'hub' or 'hub' in self.question_id


class DecisionTree(_DatasetModel):
    start: str = Field(..., description="Start node id")
    nodes: Dict[str, DecisionNode] = Field(default_factory=dict, description="Nodes keyed by id")

    @model_validator(mode='before')
    @classmethod
    def _inject_node_ids(cls, data: Any) -> Any:
        """Nodes are stored keyed by id; copy the key into each node that lacks one."""
        if isinstance(data, dict) and isinstance(data.get('nodes'), dict):
            nodes = {}
            for key, node in data['nodes'].items():
                if isinstance(node, dict) and 'id' not in node:
                    node = {**node, 'id': key}
                nodes[key] = node
            data = {**data, 'nodes': nodes}
        return data


# --- Outcomes and validation rules ------------------------------------------

class Outcome(_DatasetModel):
    """A result entry shown once the questionnaire is complete."""

    id: str
    structure_level: Literal["role", "risk_level", "obligation"]
    priority_weight: int = 0
    risk_level: str = "general"
    display_color: str = ""
    text: str = ""
    applicable_articles: List[int] = Field(default_factory=list)
    is_empty: bool = False


class ValidationRule(_DatasetModel):
    required: bool = True
    type: Literal["single_choice", "multiple_choice"] = "single_choice"
    min_selections: int = 0
    max_selections: Optional[int] = None
    mutual_exclusivity: Optional[Dict[str, Any]] = None
    short_circuit: Optional[Dict[str, Any]] = None


# --- Session state -----------------------------------------------------------

class WizardState(BaseModel):
    """Immutable session value. Every change produces a new instance."""

    model_config = ConfigDict(frozen=True)

    current_node_id: str
    answers: Answers = Field(default_factory=dict)
    flags: Flags = Field(default_factory=dict)
    history: List[str] = Field(default_factory=list)
    is_complete: bool = False


class Snapshot(BaseModel):
    """Undo record for one forward step; ``flags`` is the value before the step."""

    model_config = ConfigDict(frozen=True)

    node_id: str
    answers: List[int] = Field(default_factory=list)
    flags: Flags = Field(default_factory=dict)


# --- Engine results ----------------------------------------------------------

class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class RouteResult(BaseModel):
    next_node_id: str
    flags_to_set: List[SetFlag] = Field(default_factory=list)


class HubResolution(BaseModel):
    final_node_id: str
    accumulated_flags: List[SetFlag] = Field(default_factory=list)
    hops: int = 0


class GroupedOutcomes(BaseModel):
    role: List[Outcome] = Field(default_factory=list)
    risk_level: List[Outcome] = Field(default_factory=list)
    obligation: List[Outcome] = Field(default_factory=list)


class ResultView(BaseModel):
    """Everything a presentation layer needs to render the final page."""

    grouped_outcomes: GroupedOutcomes
    primary_risk_level: str
    applicable_articles: List[int] = Field(default_factory=list)
    active_outcomes: List[Outcome] = Field(default_factory=list)
