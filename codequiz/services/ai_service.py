"""Generative AI collaborator: questions, feedback, learning paths and tutoring.

Every call asks the model for a JSON object and validates it with the
pydantic models before handing it back. Anything that goes wrong on the way
(transport, empty output, broken JSON, schema mismatch) surfaces as
``AIServiceError``.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from codequiz.config import OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS
from codequiz.errors import AIServiceError
from codequiz.models.questions import Question, parse_question
from codequiz.models.results import QuizFeedback
from codequiz.models.tutor import ChatMessage, LearningPathStep, TopicSuggestion
from codequiz.services.quiz_session import SubmittedAnswer

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
MAX_SUGGESTED_TOPICS = 3

# ------------------------------------------------------------
# Prompt templates
# ------------------------------------------------------------
QUESTIONS_SYSTEM_PROMPT = (
    "You are a strict programming quiz generator.\n"
    "Output ONLY a JSON object of the form {\"questions\": [...]}.\n"
    "Each question MUST have the keys "
    "['kind','question','options','correct_answers','explanation','hints'].\n"
    "Allowed kinds: 'multiple-choice', 'multiple-answer', 'code-snippet'.\n"
    "- 'options' is a list of exactly 4 strings.\n"
    "- 'correct_answers' lists the correct options, copied verbatim from 'options'.\n"
    "- 'multiple-choice' and 'code-snippet' have exactly 1 correct answer; "
    "'multiple-answer' has 1 or more.\n"
    "- For 'code-snippet' the 'question' is ONLY a code block; the options describe "
    "its output or behaviour.\n"
    "- 'explanation' briefly explains why the correct answer is correct.\n"
    "- 'hints' is a list of 2-3 hints, each revealing a bit more than the previous one, "
    "never giving the answer away outright.\n"
)

QUESTIONS_USER_TEMPLATE = (
    "Generate exactly {count} {difficulty} questions about \"{topic}\". "
    "Mix the three kinds when there are 3 or more questions."
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are a friendly and encouraging AI programming tutor.\n"
    "Output ONLY a JSON object with the keys 'feedback', 'suggestions', 'video_queries'.\n"
    "- 'feedback': one paragraph of personalized, constructive feedback. Acknowledge "
    "their effort, point out concepts they grasped, and gently explain the concepts "
    "behind the incorrect answers. Do not just list the wrong answers.\n"
    "- 'suggestions': 2-3 related, more advanced or foundational topics to study next.\n"
    "- 'video_queries': 2-3 search queries for videos that explain what they missed.\n"
)

LEARNING_PATH_SYSTEM_PROMPT = (
    "You are a curriculum designer for a programming education platform.\n"
    "Output ONLY a JSON object {\"path\": [{\"topic\": ..., \"description\": ...}]}.\n"
    "The path has 5-7 steps ordered from foundational to advanced concepts; each "
    "description is one sentence.\n"
)

TUTOR_SYSTEM_TEMPLATE = (
    "You are a friendly and expert AI programming tutor. The user wants to chat about "
    "the topic: \"{topic}\". Be helpful, concise, and encouraging. Explain concepts "
    "clearly; markdown is allowed.\n"
    "Output ONLY a JSON object {{\"response\": \"...\"}}.\n"
)

SUGGEST_TOPICS_SYSTEM_PROMPT = (
    "You are a friendly AI tutor on a quiz application's landing page. Understand the "
    "user's learning interests and guide them towards a programming quiz topic.\n"
    "- If the user is unsure, ask what languages or concepts interest them.\n"
    "- Suggest 1 to 3 specific topics (e.g. \"JavaScript Arrays\", \"Python Dictionaries\"), "
    "never broad ones like \"Python\".\n"
    "- Only fill 'suggested_topics' when actively recommending; otherwise leave it empty.\n"
    "Output ONLY a JSON object {\"response\": \"...\", \"suggested_topics\": [...]}.\n"
)


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def parse_json_object(text: str | None) -> dict[str, Any]:
    """Extract a JSON object from model output, tolerating fences and trailing commas."""
    if not text or not text.strip():
        raise AIServiceError("Empty response from model")

    candidates = [text.strip()]
    fenced = re.sub(r"^```(json)?|```$", "", text.strip(), flags=re.M).strip()
    candidates.append(fenced)
    start, end = fenced.find("{"), fenced.rfind("}")
    if start != -1 and end > start:
        candidates.append(fenced[start:end + 1])
    candidates.append(re.sub(r",\s*([}\]])", r"\1", candidates[-1]))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
        if isinstance(data, list):
            # Bare lists are wrapped so callers can still look them up by key.
            return {"items": data}

    raise AIServiceError(f"Invalid JSON from model: {text[:200]}")


def _first_list(data: dict[str, Any], *keys: str) -> list[Any]:
    for key in (*keys, "items"):
        value = data.get(key)
        if isinstance(value, list):
            return value
    raise AIServiceError(f"Model output is missing a list under {keys[0]!r}")


def _strings(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()][:limit]


def _normalize_question(raw: dict[str, Any]) -> dict[str, Any]:
    """Accept the camelCase and single-answer shapes models commonly emit."""
    item = dict(raw)
    if "correct_answers" not in item:
        for key in ("correctAnswers", "correct_answer", "correctAnswer"):
            if key in item:
                value = item.pop(key)
                item["correct_answers"] = value if isinstance(value, list) else [value]
                break
    if isinstance(item.get("kind"), str):
        item["kind"] = item["kind"].strip().lower().replace("_", "-")
    return item


def _answers_payload(answers: Sequence[SubmittedAnswer]) -> list[dict[str, Any]]:
    return [
        {
            "question": answer.question,
            "selected_answers": list(answer.selected_answers),
            "correct_answers": list(answer.correct_answers),
            "is_correct": answer.is_correct,
        }
        for answer in answers
    ]


# ------------------------------------------------------------
# Service
# ------------------------------------------------------------
class AIService:
    """Prompt calls against an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str = OPENAI_MODEL,
        api_key: str | None = None,
    ) -> None:
        self._client = client
        self._api_key = api_key or OPENAI_API_KEY
        self.model = model

    @property
    def client(self) -> AsyncOpenAI:
        """Create the OpenAI client on first use."""
        if self._client is None:
            if not self._api_key:
                raise AIServiceError("OPENAI_API_KEY missing. Provide via env or param.")
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=OPENAI_TIMEOUT_SECONDS)
            logger.info("OpenAI async client configured.")
        return self._client

    async def _complete_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.error(f"OpenAI request failed: {exc}")
            raise AIServiceError(f"AI service request failed: {exc}") from exc

        if not resp.choices:
            raise AIServiceError("Empty response from model")
        return parse_json_object(resp.choices[0].message.content)

    async def generate_questions(
        self, topic: str, count: int, difficulty: str
    ) -> list[Question]:
        """Generate ``count`` validated questions; invalid items are dropped."""
        data = await self._complete_json(
            QUESTIONS_SYSTEM_PROMPT,
            QUESTIONS_USER_TEMPLATE.format(count=count, difficulty=difficulty, topic=topic),
        )
        questions: list[Question] = []
        seen: set[str] = set()
        for index, raw in enumerate(_first_list(data, "questions")):
            if not isinstance(raw, dict):
                logger.warning(f"Dropping question {index}: not an object")
                continue
            try:
                question = parse_question(_normalize_question(raw))
            except ValidationError as exc:
                logger.warning(f"Dropping invalid question {index}: {exc.errors()}")
                continue
            if question.question in seen:
                logger.warning(f"Dropping duplicate question {index}")
                continue
            seen.add(question.question)
            questions.append(question)

        if not questions:
            raise AIServiceError(f"The AI could not generate questions for '{topic}'.")
        if len(questions) < count:
            logger.warning(f"Generated {len(questions)} of {count} questions for '{topic}'")
        logger.info(f"Generated {min(len(questions), count)} questions on '{topic}'")
        return questions[:count]

    async def generate_feedback(
        self, topic: str, answers: Sequence[SubmittedAnswer]
    ) -> QuizFeedback:
        """Personalized feedback on a finished answer log."""
        user_prompt = json.dumps(
            {"topic": topic, "results": _answers_payload(answers)}, ensure_ascii=False
        )
        data = await self._complete_json(FEEDBACK_SYSTEM_PROMPT, user_prompt)
        data["suggestions"] = _strings(data.get("suggestions"), MAX_SUGGESTIONS)
        data["video_queries"] = _strings(
            data.get("video_queries", data.get("youtubeSearchQueries")), MAX_SUGGESTIONS
        )
        try:
            return QuizFeedback.model_validate(data)
        except ValidationError as exc:
            raise AIServiceError(f"The AI failed to generate feedback: {exc}") from exc

    async def generate_learning_path(self, topic: str) -> list[LearningPathStep]:
        data = await self._complete_json(
            LEARNING_PATH_SYSTEM_PROMPT, f"Generate the learning path for \"{topic}\"."
        )
        try:
            steps = [
                LearningPathStep.model_validate(step)
                for step in _first_list(data, "path", "steps")
            ]
        except ValidationError as exc:
            raise AIServiceError(f"The AI failed to generate a learning path: {exc}") from exc
        if not steps:
            raise AIServiceError(f"The AI could not generate a learning path for '{topic}'.")
        return steps

    async def chat_with_tutor(self, topic: str, history: Sequence[ChatMessage]) -> str:
        data = await self._complete_json(
            TUTOR_SYSTEM_TEMPLATE.format(topic=topic), _history_prompt(history)
        )
        response = data.get("response")
        if not isinstance(response, str) or not response.strip():
            raise AIServiceError("The AI tutor failed to generate a response.")
        return response

    async def suggest_topics(self, history: Sequence[ChatMessage]) -> TopicSuggestion:
        data = await self._complete_json(SUGGEST_TOPICS_SYSTEM_PROMPT, _history_prompt(history))
        data["suggested_topics"] = _strings(
            data.get("suggested_topics", data.get("suggestedTopics")), MAX_SUGGESTED_TOPICS
        )
        try:
            return TopicSuggestion.model_validate(data)
        except ValidationError as exc:
            raise AIServiceError("The AI tutor failed to generate a response.") from exc


def _history_prompt(history: Sequence[ChatMessage]) -> str:
    lines = [f"**{message.role}**: {message.content}" for message in history]
    lines.append("Your turn to respond as the model.")
    return "Conversation history:\n" + "\n".join(lines)
