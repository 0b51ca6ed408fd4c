"""
Surveys ("sondages"): questionnaires answered by students, with aggregated
results once closed.
"""

from bdl.survey.models import Answer, Option, Question, QuestionKind, Survey

__all__ = ["Answer", "Option", "Question", "QuestionKind", "Survey"]
