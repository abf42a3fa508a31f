from __future__ import annotations

from import_export import fields, resources
from import_export.widgets import ForeignKeyWidget
from tablib import Dataset

from .models import Question, Quiz

QUESTION_COLUMNS = (
    "id",
    "quiz_id",
    "question_no",
    "question_text",
    "image_link",
    "option1",
    "option2",
    "option3",
    "option4",
    "correct_option",
    "marks",
)


class QuestionResource(resources.ModelResource):
    quiz = fields.Field(
        column_name="quiz_id",
        attribute="quiz",
        widget=ForeignKeyWidget(Quiz, "id"),
    )

    class Meta:
        model = Question
        import_id_fields = ("id",)
        fields = (
            "id",
            "quiz",
            "question_no",
            "question_text",
            "image_link",
            "option1",
            "option2",
            "option3",
            "option4",
            "correct_option",
            "marks",
        )
        export_order = fields
        skip_unchanged = True
        report_skipped = True


class QuizResource(resources.ModelResource):
    class Meta:
        model = Quiz
        fields = (
            "id",
            "title",
            "grade",
            "exam_type",
            "quiz_type",
            "time_limit",
            "start_time",
            "end_time",
            "archive",
            "created_at",
        )
        export_order = fields


def import_quiz_questions(quiz, normalized_rows):
    """Write normalized question rows for ``quiz`` through ``QuestionResource``."""
    dataset = Dataset(headers=list(QUESTION_COLUMNS))
    for row in normalized_rows:
        dataset.append(
            [
                "",
                quiz.id,
                row["question_no"],
                row["question_text"],
                row["image_link"],
                row["option1"],
                row["option2"],
                row["option3"],
                row["option4"],
                row["correct_option"],
                row["marks"],
            ]
        )

    result = QuestionResource().import_data(dataset, dry_run=False, raise_errors=True, use_transactions=True)
    totals = getattr(result, "totals", {}) or {}
    return {
        "new": int(totals.get("new", 0)),
        "updated": int(totals.get("update", 0)),
        "skipped": int(totals.get("skip", 0)),
    }
