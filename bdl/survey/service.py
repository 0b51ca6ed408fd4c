"""
Surveys: listing, answering and aggregated results.

A response is stored as one survey_responses row followed by one
survey_answers row per question, unanswered questions included.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from bdl.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from bdl.survey.models import Answer, Option, Question, QuestionKind, Survey

logger = logging.getLogger(__name__)

SURVEYS_TABLE = "surveys"
QUESTIONS_TABLE = "survey_questions"
OPTIONS_TABLE = "survey_options"
RESPONSES_TABLE = "survey_responses"
ANSWERS_TABLE = "survey_answers"

LISTED_STATUSES = ["open", "closed"]

NAME_REQUIRED = "Veuillez entrer votre nom ou cocher la case « Répondre anonymement »."


@dataclass
class OptionCount:
    name: str
    value: int


@dataclass
class QuestionResult:
    kind: QuestionKind
    options: List[OptionCount] = field(default_factory=list)
    answers: List[str] = field(default_factory=list)


def collect_answers(answers: Iterable[Answer]) -> Dict[str, Answer]:
    """Answers by question id; a later answer to the same question replaces the earlier one."""
    collected: Dict[str, Answer] = {}
    for answer in answers:
        collected.pop(answer.question_id, None)
        collected[answer.question_id] = answer
    return collected


def validate(
    survey: Survey,
    questions: List[Question],
    answers: Iterable[Answer],
    respondent_name: str = "",
    anonymous: bool = False,
) -> None:
    """
    Check a response before it is submitted.

    Raises:
        ValidationError: With the message shown to the respondent: a missing
                         name, or the first required question left unanswered
    """
    if anonymous and not survey.allow_anonymous:
        raise ValidationError(
            "Ce sondage n'accepte pas les réponses anonymes.",
            field_name="anonymous",
            field_value=anonymous,
        )
    if not anonymous and not (respondent_name or "").strip():
        raise ValidationError(NAME_REQUIRED, field_name="respondent_name")

    by_question = collect_answers(answers)
    for question in questions:
        if not question.is_required:
            continue
        answer = by_question.get(question.id)
        if answer is None or not answer.is_filled_for(question):
            raise ValidationError(
                f"La question « {question.text} » est obligatoire.",
                field_name="question",
                field_value=question.id,
            )


class SurveyService:
    """Operations on surveys and their responses."""

    def __init__(self, store):
        self.store = store

    def list_surveys(self) -> List[Survey]:
        """Open and closed surveys, most recent first. Drafts are not listed."""
        rows = (
            self.store.table(SURVEYS_TABLE)
            .select("*")
            .in_("status", LISTED_STATUSES)
            .order("created_at", ascending=False)
            .execute()
        )
        return [Survey.from_record(row) for row in rows]

    def get_survey(self, survey_id: str) -> Survey:
        row = (
            self.store.table(SURVEYS_TABLE)
            .select("*")
            .eq("id", survey_id)
            .maybe_single()
            .execute()
        )
        if row is None:
            raise NotFoundError("Sondage introuvable", table=SURVEYS_TABLE, key=survey_id)
        return Survey.from_record(row)

    def load_questions(self, survey_id: str) -> List[Question]:
        """Questions in display order, each multiple-choice one with its options."""
        rows = (
            self.store.table(QUESTIONS_TABLE)
            .select("*")
            .eq("survey_id", survey_id)
            .order("display_order")
            .execute()
        )
        questions = []
        for row in rows:
            question = Question.from_record(row)
            if question.kind is QuestionKind.QCM:
                question.options = self._load_options(question.id)
            questions.append(question)
        return questions

    def _load_options(self, question_id: str) -> List[Option]:
        rows = (
            self.store.table(OPTIONS_TABLE)
            .select("*")
            .eq("question_id", question_id)
            .order("display_order")
            .execute()
        )
        return [Option.from_record(row) for row in rows]

    def submit(
        self,
        survey: Survey,
        questions: List[Question],
        answers: Iterable[Answer],
        respondent_name: str = "",
        anonymous: bool = False,
    ) -> str:
        """
        Validate and store a response.

        Returns:
            The id of the new survey_responses row

        Raises:
            PermissionDeniedError: If the survey is closed
            ValidationError: See validate()
        """
        if not survey.is_open:
            raise PermissionDeniedError("Ce sondage est fermé", action="answer_survey")

        answers = list(answers)
        validate(survey, questions, answers, respondent_name, anonymous)

        response = (
            self.store.table(RESPONSES_TABLE)
            .insert({
                "survey_id": survey.id,
                "respondent_name": None if anonymous else respondent_name.strip(),
                "is_anonymous": anonymous,
            })
            .single()
            .execute()
        )
        response_id = str(response["id"])

        by_question = collect_answers(answers)
        records = [answer.to_record(response_id) for answer in by_question.values()]
        records.extend(
            Answer(question.id).to_record(response_id)
            for question in questions
            if question.id not in by_question
        )
        self.store.table(ANSWERS_TABLE).insert(records).execute()

        logger.info(f"Response {response_id} recorded on survey {survey.id} ({len(records)} answers)")
        return response_id

    def results(self, survey: Survey, questions: List[Question]) -> Optional[Dict[str, QuestionResult]]:
        """
        Aggregated answers by question id.

        Only closed surveys that are not forms publish results; any other
        survey returns None.
        """
        if not survey.shows_results:
            return None

        results: Dict[str, QuestionResult] = {}
        for question in questions:
            if question.kind is QuestionKind.QCM:
                rows = (
                    self.store.table(ANSWERS_TABLE)
                    .select("option_id")
                    .eq("question_id", question.id)
                    .not_null("option_id")
                    .execute()
                )
                counts = Counter(str(row["option_id"]) for row in rows if row.get("option_id"))
                results[question.id] = QuestionResult(
                    kind=QuestionKind.QCM,
                    options=[OptionCount(option.text, counts[option.id]) for option in question.options],
                )
            else:
                rows = (
                    self.store.table(ANSWERS_TABLE)
                    .select("text_answer")
                    .eq("question_id", question.id)
                    .not_null("text_answer")
                    .execute()
                )
                results[question.id] = QuestionResult(
                    kind=QuestionKind.TEXT,
                    answers=[row["text_answer"] for row in rows if row.get("text_answer") is not None],
                )
        return results
