from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


GRADE_CHOICES = [
    ("IOE", "IOE"),
    ("CEE", "CEE"),
    ("LIVE", "Live"),
    ("10", "Grade 10"),
    ("11", "Grade 11"),
    ("12", "Grade 12"),
    ("None", "None"),
]

TARGET_AUDIENCE_CHOICES = [
    ("all", "All"),
    ("authenticated", "Authenticated"),
    ("non-authenticated", "Non-authenticated"),
]

CORRECT_OPTION_CHOICES = [
    ("option1", "Option 1"),
    ("option2", "Option 2"),
    ("option3", "Option 3"),
    ("option4", "Option 4"),
]


class QuizQuerySet(models.QuerySet):
    def regular_series(self):
        return self.filter(grade__in=["IOE", "CEE"]).exclude(quiz_type=Quiz.TYPE_LIVE)

    def live(self):
        return self.filter(quiz_type=Quiz.TYPE_LIVE)

    def unarchived_live(self):
        return self.live().filter(archive=False)


class Quiz(models.Model):
    TYPE_REGULAR = "regular"
    TYPE_LIVE = "live"
    TYPE_CHOICES = [
        (TYPE_REGULAR, "Regular"),
        (TYPE_LIVE, "Live"),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    subject = models.CharField(max_length=120, blank=True)
    grade = models.CharField(max_length=10, choices=GRADE_CHOICES)
    exam_type = models.CharField(max_length=40, blank=True)
    quiz_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_REGULAR)
    time_limit = models.PositiveIntegerField(default=0, help_text="Minutes")
    target_audience = models.CharField(max_length=20, choices=TARGET_AUDIENCE_CHOICES, default="authenticated")
    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)
    archive = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_quizzes",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = QuizQuerySet.as_manager()

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["grade", "quiz_type"], name="quiz_grade_type_idx"),
            models.Index(fields=["quiz_type", "archive"], name="quiz_type_archive_idx"),
        ]
        verbose_name_plural = "quizzes"

    def __str__(self):
        return f"{self.grade} | {self.title}"

    @property
    def is_live(self):
        return self.quiz_type == self.TYPE_LIVE

    @property
    def series(self):
        return "LIVE" if self.is_live else self.grade

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({"end_time": "End time must be after start time."})


class Question(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="questions")
    question_no = models.PositiveIntegerField(default=1)
    question_text = models.TextField(blank=True)
    image_link = models.URLField(max_length=1000, blank=True)
    option1 = models.CharField(max_length=500, blank=True)
    option2 = models.CharField(max_length=500, blank=True)
    option3 = models.CharField(max_length=500, blank=True)
    option4 = models.CharField(max_length=500, blank=True)
    correct_option = models.CharField(max_length=10, choices=CORRECT_OPTION_CHOICES)
    marks = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["question_no", "id"]

    def __str__(self):
        return f"{self.quiz.title} Q{self.question_no}"


class QuizResult(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="results")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="quiz_results")
    user_name = models.CharField(max_length=200, blank=True)
    score = models.FloatField()
    total_marks = models.PositiveIntegerField(default=0)
    answers = models.JSONField(default=dict, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-submitted_at"]
        indexes = [models.Index(fields=["quiz", "score"], name="quizresult_quiz_score_idx")]

    def __str__(self):
        return f"{self.user} | {self.quiz.title} | {self.score}"
