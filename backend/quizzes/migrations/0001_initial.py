import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Quiz",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("subject", models.CharField(blank=True, max_length=120)),
                (
                    "grade",
                    models.CharField(
                        choices=[
                            ("IOE", "IOE"),
                            ("CEE", "CEE"),
                            ("LIVE", "Live"),
                            ("10", "Grade 10"),
                            ("11", "Grade 11"),
                            ("12", "Grade 12"),
                            ("None", "None"),
                        ],
                        max_length=10,
                    ),
                ),
                ("exam_type", models.CharField(blank=True, max_length=40)),
                (
                    "quiz_type",
                    models.CharField(
                        choices=[("regular", "Regular"), ("live", "Live")],
                        default="regular",
                        max_length=20,
                    ),
                ),
                ("time_limit", models.PositiveIntegerField(default=0, help_text="Minutes")),
                (
                    "target_audience",
                    models.CharField(
                        choices=[
                            ("all", "All"),
                            ("authenticated", "Authenticated"),
                            ("non-authenticated", "Non-authenticated"),
                        ],
                        default="authenticated",
                        max_length=20,
                    ),
                ),
                ("start_time", models.DateTimeField(blank=True, null=True)),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("archive", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_quizzes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "quizzes",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["grade", "quiz_type"], name="quiz_grade_type_idx"),
                    models.Index(fields=["quiz_type", "archive"], name="quiz_type_archive_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("question_no", models.PositiveIntegerField(default=1)),
                ("question_text", models.TextField(blank=True)),
                ("image_link", models.URLField(blank=True, max_length=1000)),
                ("option1", models.CharField(blank=True, max_length=500)),
                ("option2", models.CharField(blank=True, max_length=500)),
                ("option3", models.CharField(blank=True, max_length=500)),
                ("option4", models.CharField(blank=True, max_length=500)),
                (
                    "correct_option",
                    models.CharField(
                        choices=[
                            ("option1", "Option 1"),
                            ("option2", "Option 2"),
                            ("option3", "Option 3"),
                            ("option4", "Option 4"),
                        ],
                        max_length=10,
                    ),
                ),
                ("marks", models.PositiveIntegerField(default=1)),
                (
                    "quiz",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="quizzes.quiz",
                    ),
                ),
            ],
            options={
                "ordering": ["question_no", "id"],
            },
        ),
        migrations.CreateModel(
            name="QuizResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_name", models.CharField(blank=True, max_length=200)),
                ("score", models.FloatField()),
                ("total_marks", models.PositiveIntegerField(default=0)),
                ("answers", models.JSONField(blank=True, default=dict)),
                ("submitted_at", models.DateTimeField(auto_now_add=True)),
                (
                    "quiz",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="results",
                        to="quizzes.quiz",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quiz_results",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-submitted_at"],
                "indexes": [models.Index(fields=["quiz", "score"], name="quizresult_quiz_score_idx")],
            },
        ),
    ]
