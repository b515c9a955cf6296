"""
models/question_model.py

Quiz question models (pydantic v2).

A question is one of two variants, told apart by the ``type`` tag:
  - MultipleChoiceQuestion : options + index of the correct option
  - OpenEndedQuestion      : reference answer text

Option-only fields exist only on the multiple-choice variant, so code that
handles an open-ended question cannot reach them by accident.
"""

from typing import Annotated, Any, Literal, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

MULTIPLE_CHOICE = "multiple-choice"
OPEN_ENDED = "open-ended"


class _QuestionBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Question identifier, unique within its pool"
    )
    text: str = Field(
        ...,
        min_length=1,
        description="Prompt shown to the respondent"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, v: Any) -> Any:
        # test files written by hand often use plain numbers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multiple-choice"] = MULTIPLE_CHOICE
    options: Tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Options in display order"
    )
    correct_index: int = Field(
        ...,
        alias="correctAnswer",
        ge=0,
        strict=True,
        description="Index of the correct option in `options`"
    )

    @model_validator(mode="after")
    def validate_correct_index(self) -> "MultipleChoiceQuestion":
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correctAnswer index {self.correct_index} is out of range "
                f"for {len(self.options)} options"
            )
        return self

    def public_dict(self) -> dict:
        """Client-facing view without the correct answer."""
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type,
            "options": list(self.options),
        }


class OpenEndedQuestion(_QuestionBase):
    type: Literal["open-ended"] = OPEN_ENDED
    correct_text: str = Field(
        ...,
        alias="correctAnswer",
        min_length=1,
        description="Reference answer, compared by exact string equality"
    )

    def public_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "type": self.type}


Question = Annotated[
    Union[MultipleChoiceQuestion, OpenEndedQuestion],
    Field(discriminator="type"),
]

question_adapter: TypeAdapter = TypeAdapter(Question)


def correct_answer(question: Question) -> Union[int, str]:
    """Reference answer of either variant."""
    if isinstance(question, MultipleChoiceQuestion):
        return question.correct_index
    return question.correct_text


class QuestionPool(BaseModel):
    """
    All questions available for one topic's quiz.

    Loaded once per topic and never modified during a session.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(
        default="Test",
        description="Quiz title shown on the settings and results screens"
    )
    questions: Tuple[Question, ...] = Field(
        default=(),
        description="Questions in file order"
    )

    @field_validator("questions")
    @classmethod
    def validate_unique_ids(cls, v: Tuple[Question, ...]) -> Tuple[Question, ...]:
        seen = set()
        for q in v:
            if q.id in seen:
                raise ValueError(f"duplicate question id '{q.id}'")
            seen.add(q.id)
        return v

    def __len__(self) -> int:
        return len(self.questions)
