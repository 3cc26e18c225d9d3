"""Question models produced by the AI question generator.

A question is a tagged union discriminated on ``kind``. The three variants
share the same shape (prompt, four options, correct answers, explanation,
hints) and differ only in how many correct answers they may declare.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

OPTION_COUNT = 4
MIN_HINTS = 2
MAX_HINTS = 3

MULTIPLE_CHOICE = "multiple-choice"
MULTIPLE_ANSWER = "multiple-answer"
CODE_SNIPPET = "code-snippet"

SINGLE_ANSWER_KINDS = frozenset({MULTIPLE_CHOICE, CODE_SNIPPET})


class _QuestionFields(BaseModel):
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answers: list[str] = Field(..., min_length=1)
    explanation: str = ""
    hints: list[str] = Field(..., min_length=MIN_HINTS, max_length=MAX_HINTS)

    @field_validator("options", "correct_answers", "hints")
    @classmethod
    def _strip_items(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value]

    @model_validator(mode="after")
    def _correct_answers_are_options(self):
        missing = [answer for answer in self.correct_answers if answer not in self.options]
        if missing:
            raise ValueError(f"correct answers not among options: {missing}")
        return self

    @property
    def is_single_answer(self) -> bool:
        return self.kind in SINGLE_ANSWER_KINDS


class _SingleAnswerFields(_QuestionFields):
    @field_validator("correct_answers")
    @classmethod
    def _exactly_one(cls, value: list[str]) -> list[str]:
        if len(set(value)) != 1:
            raise ValueError("exactly one correct answer is required")
        return value[:1]


class MultipleChoiceQuestion(_SingleAnswerFields):
    """Plain text question with exactly one correct option."""

    kind: Literal["multiple-choice"] = MULTIPLE_CHOICE


class MultipleAnswerQuestion(_QuestionFields):
    """Plain text question with one or more correct options."""

    kind: Literal["multiple-answer"] = MULTIPLE_ANSWER

    @field_validator("correct_answers")
    @classmethod
    def _unique(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class CodeSnippetQuestion(_SingleAnswerFields):
    """Question whose prompt is a verbatim code block."""

    kind: Literal["code-snippet"] = CODE_SNIPPET

    @field_validator("question", mode="before")
    @classmethod
    def _keep_verbatim(cls, value: object) -> object:
        # Code must not be whitespace-normalized; only reject blank prompts.
        if isinstance(value, str) and not value.strip():
            raise ValueError("code snippet must not be blank")
        return value


Question = Annotated[
    Union[MultipleChoiceQuestion, MultipleAnswerQuestion, CodeSnippetQuestion],
    Field(discriminator="kind"),
]

question_adapter: TypeAdapter[Question] = TypeAdapter(Question)


def parse_question(data: object) -> Question:
    """Validate a raw mapping into the matching question variant."""
    return question_adapter.validate_python(data)
