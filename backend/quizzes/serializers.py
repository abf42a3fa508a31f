from rest_framework import serializers

from .catalog import parse_title
from .models import GRADE_CHOICES, Question, Quiz, QuizResult


class QuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Question
        fields = [
            "id",
            "question_no",
            "question_text",
            "image_link",
            "option1",
            "option2",
            "option3",
            "option4",
            "correct_option",
            "marks",
        ]


class QuizSerializer(serializers.ModelSerializer):
    display_title = serializers.SerializerMethodField()
    category = serializers.SerializerMethodField()
    question_count = serializers.SerializerMethodField()

    def get_display_title(self, obj):
        return parse_title(obj.title).display_title

    def get_category(self, obj):
        return parse_title(obj.title).category

    def get_question_count(self, obj):
        return obj.questions.count()

    class Meta:
        model = Quiz
        fields = [
            "id",
            "title",
            "display_title",
            "category",
            "description",
            "subject",
            "grade",
            "exam_type",
            "quiz_type",
            "time_limit",
            "target_audience",
            "start_time",
            "end_time",
            "archive",
            "question_count",
            "created_at",
            "updated_at",
        ]


class LiveQuizDetailsSerializer(serializers.ModelSerializer):
    """Validates the editable details of a live quiz; questions travel separately."""

    title = serializers.CharField(max_length=255)
    grade = serializers.ChoiceField(choices=[choice[0] for choice in GRADE_CHOICES])
    time_limit = serializers.IntegerField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()

    class Meta:
        model = Quiz
        fields = [
            "title",
            "description",
            "subject",
            "grade",
            "exam_type",
            "time_limit",
            "target_audience",
            "start_time",
            "end_time",
        ]

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required.")
        return value

    def validate_time_limit(self, value):
        if value <= 0:
            raise serializers.ValidationError("Time limit must be greater than 0.")
        return value

    def validate(self, attrs):
        start_time = attrs.get("start_time", getattr(self.instance, "start_time", None))
        end_time = attrs.get("end_time", getattr(self.instance, "end_time", None))
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs


class QuizResultSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuizResult
        fields = ["id", "quiz", "user", "user_name", "score", "total_marks", "answers", "submitted_at"]
        read_only_fields = ["id", "quiz", "user", "user_name", "submitted_at"]

    def validate_score(self, value):
        if value < 0:
            raise serializers.ValidationError("Score cannot be negative.")
        return value

    def validate_answers(self, value):
        if not isinstance(value, (dict, list)):
            raise serializers.ValidationError("answers must be an object.")
        return value

    def validate(self, attrs):
        total_marks = attrs.get("total_marks")
        if total_marks and attrs.get("score", 0) > total_marks:
            raise serializers.ValidationError({"score": f"Score cannot exceed total marks ({total_marks})."})
        return attrs
