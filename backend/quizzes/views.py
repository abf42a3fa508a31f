from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .catalog import (
    CATEGORY_FILTERS,
    SERIES_CHOICES,
    count_by_category,
    filter_by_category,
    parse_title,
    partition_series,
    series_price,
)
from .leaderboard import build_leaderboard
from .live_window import describe_window, start_block_message, submit_block_message
from .models import Quiz, QuizResult
from .question_normalizers import QuestionImportError, present_question, read_question_upload
from .resources import import_quiz_questions
from .serializers import LiveQuizDetailsSerializer, QuestionSerializer, QuizResultSerializer, QuizSerializer

logger = logging.getLogger(__name__)

NO_LIVE_TESTS_MESSAGE = "No Live Tests are currently available."
NO_ACTIVE_LIVE_TESTS_MESSAGE = "No active live tests are currently available."


def _first_error(errors):
    if isinstance(errors, dict):
        for value in errors.values():
            return _first_error(value)
    if isinstance(errors, list) and errors:
        return _first_error(errors[0])
    return str(errors)


def _locked_message(series: str) -> str:
    return f"You need to purchase the {series} test series to access the tests."


def _can_access_series(user, series: str) -> bool:
    if user.is_staff:
        return True
    return user.has_series_access(series)


def _series_candidates(series: str):
    if series == "LIVE":
        return Quiz.objects.unarchived_live()
    return Quiz.objects.regular_series().filter(grade=series)


def _quiz_row(quiz, now=None) -> dict:
    info = parse_title(quiz.title)
    row = {
        "id": quiz.id,
        "title": quiz.title,
        "display_title": info.display_title,
        "category": info.category,
        "number": info.number,
        "description": quiz.description,
        "grade": quiz.grade,
        "exam_type": quiz.exam_type,
        "series": quiz.series,
        "time_limit": quiz.time_limit,
        "question_count": quiz.questions.count(),
        "created_at": quiz.created_at,
    }
    if quiz.is_live:
        row["start_time"] = quiz.start_time
        row["end_time"] = quiz.end_time
        row["window"] = describe_window(quiz, now)
    return row


def _read_questions_from_request(request):
    uploaded_file = request.FILES.get("questions_file")
    questions = request.data.get("questions")
    if uploaded_file is None and questions in (None, "", []):
        return None
    return read_question_upload(uploaded_file=uploaded_file, questions=questions)


class SeriesOverviewView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        prices = getattr(settings, "SERIES_PRICES", {})
        exam_type = request.user.exam_type_preference
        series_rows = []
        for series in SERIES_CHOICES:
            quizzes = partition_series(_series_candidates(series), series, exam_type)
            series_rows.append(
                {
                    "series": series,
                    "price": series_price(series, prices),
                    "unlocked": _can_access_series(request.user, series),
                    "quiz_count": len(quizzes),
                }
            )
        return Response({"series": series_rows, "payment_method": settings.PAYMENT_METHOD})


class SeriesQuizListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, series):
        series = (series or "").upper()
        if series not in SERIES_CHOICES:
            return Response({"error": "Invalid series"}, status=status.HTTP_400_BAD_REQUEST)

        category = (request.query_params.get("filter") or "all").lower()
        if category not in CATEGORY_FILTERS:
            return Response({"error": "filter must be all, set or capsule"}, status=status.HTTP_400_BAD_REQUEST)

        if not _can_access_series(request.user, series):
            return Response(
                {
                    "error": _locked_message(series),
                    "series": series,
                    "price": series_price(series, getattr(settings, "SERIES_PRICES", {})),
                },
                status=status.HTTP_402_PAYMENT_REQUIRED,
            )

        now = timezone.now()
        quizzes = partition_series(
            _series_candidates(series).prefetch_related("questions"),
            series,
            request.user.exam_type_preference,
        )
        visible = filter_by_category(quizzes, category)
        return Response(
            {
                "series": series,
                "filter": category,
                "server_time": now,
                "counts": count_by_category(quizzes),
                "quizzes": [_quiz_row(quiz, now) for quiz in visible],
            }
        )


class StartQuizView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, quiz_id):
        try:
            quiz = Quiz.objects.get(id=quiz_id)
        except Quiz.DoesNotExist:
            return Response({"error": "Quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        if quiz.is_live and quiz.archive and not request.user.is_staff:
            return Response({"error": "Quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        if not _can_access_series(request.user, quiz.series):
            return Response({"error": _locked_message(quiz.series)}, status=status.HTTP_402_PAYMENT_REQUIRED)

        now = timezone.now()
        if quiz.is_live:
            blocked = start_block_message(quiz, now)
            if blocked:
                return Response({"error": blocked}, status=status.HTTP_403_FORBIDDEN)

        questions = [present_question(question, index) for index, question in enumerate(quiz.questions.all())]
        payload = _quiz_row(quiz, now)
        payload.update(
            {
                "server_time": now,
                "total_marks": sum(question["marks"] for question in questions),
                "questions": questions,
            }
        )
        return Response(payload)


class QuizResultView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, quiz_id):
        results = QuizResult.objects.filter(quiz_id=quiz_id, user=request.user)
        return Response(QuizResultSerializer(results, many=True).data)

    def post(self, request, quiz_id):
        try:
            quiz = Quiz.objects.get(id=quiz_id)
        except Quiz.DoesNotExist:
            return Response({"error": "Quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        if quiz.is_live and quiz.archive and not request.user.is_staff:
            return Response({"error": "Quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        if not _can_access_series(request.user, quiz.series):
            return Response({"error": _locked_message(quiz.series)}, status=status.HTTP_402_PAYMENT_REQUIRED)

        if quiz.is_live:
            blocked = submit_block_message(quiz, timezone.now())
            if blocked:
                return Response({"error": blocked}, status=status.HTTP_403_FORBIDDEN)

        serializer = QuizResultSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        result = serializer.save(quiz=quiz, user=request.user, user_name=request.user.name)
        logger.info("Recorded result %s for quiz %s user %s score %s", result.id, quiz.id, request.user.id, result.score)
        return Response(QuizResultSerializer(result).data, status=status.HTTP_201_CREATED)


class QuizLeaderboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, quiz_id):
        try:
            quiz = Quiz.objects.get(id=quiz_id)
        except Quiz.DoesNotExist:
            return Response({"error": "Quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        entries = build_leaderboard(quiz.results.all(), limit=settings.LEADERBOARD_SIZE)
        return Response(
            {
                "quiz_id": quiz.id,
                "quiz_title": quiz.title,
                "entries": entries,
            }
        )


class LiveQuizListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def get(self, request):
        quizzes = Quiz.objects.live().order_by("-created_at", "-id")
        return Response(QuizSerializer(quizzes, many=True).data)

    def post(self, request):
        serializer = LiveQuizDetailsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            rows = _read_questions_from_request(request)
        except QuestionImportError as exc:
            return Response(
                {"error": str(exc), "invalid_count": exc.invalid_count},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not rows:
            return Response({"error": "Please upload at least one question"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            quiz = serializer.save(quiz_type=Quiz.TYPE_LIVE, archive=False, created_by=request.user)
            summary = import_quiz_questions(quiz, rows)

        logger.info("Live quiz %s created by %s with %s questions", quiz.id, request.user.username, summary["new"])
        return Response(
            {
                "message": "Live quiz created successfully!",
                "quiz": QuizSerializer(quiz).data,
                "summary": summary,
            },
            status=status.HTTP_201_CREATED,
        )


class LiveQuizDetailView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def _get_quiz(self, quiz_id):
        return Quiz.objects.live().get(id=quiz_id)

    def get(self, request, quiz_id):
        try:
            quiz = self._get_quiz(quiz_id)
        except Quiz.DoesNotExist:
            return Response({"error": "Live quiz not found"}, status=status.HTTP_404_NOT_FOUND)
        payload = QuizSerializer(quiz).data
        payload["questions"] = QuestionSerializer(quiz.questions.all(), many=True).data
        return Response(payload)

    def put(self, request, quiz_id):
        return self._update(request, quiz_id, partial=False)

    def patch(self, request, quiz_id):
        return self._update(request, quiz_id, partial=True)

    def _update(self, request, quiz_id, partial):
        try:
            quiz = self._get_quiz(quiz_id)
        except Quiz.DoesNotExist:
            return Response({"error": "Live quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = LiveQuizDetailsSerializer(instance=quiz, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response({"error": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            rows = _read_questions_from_request(request)
        except QuestionImportError as exc:
            return Response(
                {"error": str(exc), "invalid_count": exc.invalid_count},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if rows is None and not partial and not quiz.questions.exists():
            return Response({"error": "Please upload at least one question"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            # archive is toggled only through the archive endpoint.
            quiz = serializer.save()
            if rows:
                quiz.questions.all().delete()
                import_quiz_questions(quiz, rows)

        logger.info("Live quiz %s updated by %s", quiz.id, request.user.username)
        payload = QuizSerializer(quiz).data
        payload["questions"] = QuestionSerializer(quiz.questions.all(), many=True).data
        return Response(payload)

    def delete(self, request, quiz_id):
        deleted, _ = Quiz.objects.live().filter(id=quiz_id).delete()
        if not deleted:
            return Response({"error": "Live quiz not found"}, status=status.HTTP_404_NOT_FOUND)
        logger.info("Live quiz %s deleted by %s", quiz_id, request.user.username)
        return Response({"message": "Live quiz deleted successfully."})


class LiveQuizArchiveView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def post(self, request, quiz_id):
        try:
            quiz = Quiz.objects.live().get(id=quiz_id)
        except Quiz.DoesNotExist:
            return Response({"error": "Live quiz not found"}, status=status.HTTP_404_NOT_FOUND)

        quiz.archive = not quiz.archive
        quiz.save(update_fields=["archive", "updated_at"])
        logger.info("Live quiz %s archive set to %s", quiz.id, quiz.archive)
        state = "archived" if quiz.archive else "unarchived"
        return Response({"message": f"Quiz {state} successfully.", "archive": quiz.archive})


class AvailableLiveQuizListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        now = timezone.now()
        quizzes = Quiz.objects.unarchived_live().prefetch_related("questions").order_by("-created_at", "-id")
        rows = [_quiz_row(quiz, now) for quiz in quizzes]
        payload = {"server_time": now, "quizzes": rows}
        if not rows:
            payload["message"] = NO_ACTIVE_LIVE_TESTS_MESSAGE
        return Response(payload)


class FirstLiveQuizView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        quiz = Quiz.objects.unarchived_live().order_by("created_at", "id").first()
        if quiz is None:
            return Response({"error": NO_LIVE_TESTS_MESSAGE}, status=status.HTTP_404_NOT_FOUND)
        return Response(_quiz_row(quiz))


class QuestionPreviewView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def post(self, request):
        try:
            rows = _read_questions_from_request(request)
        except QuestionImportError as exc:
            return Response(
                {"error": str(exc), "invalid_count": exc.invalid_count},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not rows:
            return Response({"error": "questions_file or questions is required"}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"count": len(rows), "questions": rows})
