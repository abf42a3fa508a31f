from django.contrib import admin, messages
from import_export.admin import ImportExportModelAdmin

from .catalog import parse_title
from .live_window import STATUS_LABELS, quiz_time_status
from .models import Question, Quiz, QuizResult
from .resources import QuestionResource, QuizResource


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 1


@admin.register(Quiz)
class QuizAdmin(ImportExportModelAdmin):
    resource_class = QuizResource
    list_display = (
        "id",
        "title",
        "display_title",
        "grade",
        "quiz_type",
        "window_status",
        "time_limit",
        "archive",
        "created_at",
    )
    list_filter = ("quiz_type", "grade", "archive")
    search_fields = ("title", "subject", "exam_type")
    ordering = ("-created_at", "id")
    inlines = [QuestionInline]
    actions = ("toggle_archive",)

    @admin.display(description="Display Title")
    def display_title(self, obj):
        return parse_title(obj.title).display_title

    @admin.display(description="Window")
    def window_status(self, obj):
        if not obj.is_live:
            return "-"
        return STATUS_LABELS[quiz_time_status(obj.start_time, obj.end_time)]

    @admin.action(description="Toggle archive for selected live quizzes")
    def toggle_archive(self, request, queryset):
        toggled = 0
        for quiz in queryset.filter(quiz_type=Quiz.TYPE_LIVE):
            quiz.archive = not quiz.archive
            quiz.save(update_fields=["archive", "updated_at"])
            toggled += 1
        if not toggled:
            self.message_user(request, "No live quiz selected.", level=messages.WARNING)
            return
        self.message_user(request, f"Toggled archive for {toggled} live quizzes.", level=messages.INFO)


@admin.register(Question)
class QuestionAdmin(ImportExportModelAdmin):
    resource_class = QuestionResource
    list_display = ("id", "quiz", "question_no", "correct_option", "marks")
    list_filter = ("quiz__grade", "quiz__quiz_type")
    search_fields = ("question_text", "quiz__title")


@admin.register(QuizResult)
class QuizResultAdmin(admin.ModelAdmin):
    list_display = ("id", "quiz", "user_name", "score", "total_marks", "submitted_at")
    list_filter = ("quiz__grade",)
    search_fields = ("user_name", "user__email", "quiz__title")
    readonly_fields = ("submitted_at",)
