import json
from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from .catalog import count_by_category, filter_by_category, parse_title, partition_series, sort_quizzes
from .leaderboard import build_leaderboard, rank_entries
from .live_window import (
    describe_window,
    format_countdown,
    quiz_time_status,
    start_block_message,
    submit_block_message,
    time_remaining_label,
)
from .models import Question, Quiz, QuizResult
from .question_normalizers import QuestionImportError, normalize_question_batch, parse_question_file, present_question

User = get_user_model()


def _quiz(title, created_at=None, grade="IOE", is_live=False, **extra):
    return SimpleNamespace(title=title, created_at=created_at, grade=grade, is_live=is_live, **extra)


def _question_row(number, **overrides):
    row = {
        "questionNo": number,
        "question": f"What is {number} + {number}?",
        "option1": str(number),
        "option2": str(number * 2),
        "option3": str(number * 3),
        "option4": str(number * 4),
        "correctOption": "2",
        "marks": 1,
    }
    row.update(overrides)
    return row


class TitleParsingTests(SimpleTestCase):
    def test_set_shapes_share_one_display_title(self):
        for title in ("Set 7", "set-7", "7 set", "s-7", "SET_7"):
            with self.subTest(title=title):
                info = parse_title(title)
                self.assertEqual(info.display_title, "Set-7")
                self.assertEqual(info.category, "set")
                self.assertEqual(info.number, 7)

    def test_capsule_shapes_share_one_display_title(self):
        for title in ("Daily Capsule 3", "cap-3", "3 capsule", "c-3", "Daily Dose 3"):
            with self.subTest(title=title):
                info = parse_title(title)
                self.assertEqual(info.display_title, "Capsule-3")
                self.assertEqual(info.category, "capsule")

    def test_unmatched_title_keeps_text_and_sorts_by_first_number(self):
        info = parse_title("Class 5 Physics")
        self.assertEqual(info.display_title, "Class 5 Physics")
        self.assertEqual(info.category, "other")
        self.assertEqual(info.number, 5)

        self.assertEqual(parse_title("Mock Test").number, 0)
        self.assertEqual(parse_title(None).display_title, "")

    def test_short_forms_need_a_word_start(self):
        for title, category in (("Physics 3", "other"), ("Topic 4", "other"), ("Physics s3", "set"), ("Physics c3", "capsule")):
            with self.subTest(title=title):
                self.assertEqual(parse_title(title).category, category)
        self.assertEqual(parse_title("Physics 3").display_title, "Physics 3")

    def test_sort_uses_number_then_creation_time(self):
        base = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        quizzes = [
            _quiz("Set 3", base),
            _quiz("Set 1", base + timedelta(days=2)),
            _quiz("Set 2", base + timedelta(days=1)),
        ]
        self.assertEqual([quiz.title for quiz in sort_quizzes(quizzes)], ["Set 1", "Set 2", "Set 3"])

        later = _quiz("Mock B", base + timedelta(hours=1))
        earlier = _quiz("Mock A", base)
        self.assertEqual(sort_quizzes([later, earlier]), [earlier, later])

    def test_category_filter_and_counts(self):
        base = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        quizzes = [_quiz("Set 2", base), _quiz("cap 1", base), _quiz("Set 1", base), _quiz("Mock", base)]

        self.assertEqual([quiz.title for quiz in filter_by_category(quizzes, "set")], ["Set 1", "Set 2"])
        self.assertEqual([quiz.title for quiz in filter_by_category(quizzes, "capsule")], ["cap 1"])
        self.assertEqual(filter_by_category(quizzes, "all"), quizzes)
        self.assertEqual(count_by_category(quizzes), {"set": 2, "capsule": 1, "other": 1})


class SeriesPartitionTests(SimpleTestCase):
    def setUp(self):
        base = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        self.ioe = _quiz("Set 1", base, grade="IOE")
        self.cee = _quiz("Set 1", base, grade="CEE")
        self.live_ioe = _quiz("Set 2", base, grade="LIVE", is_live=True, exam_type="IOE Entrance")
        self.live_cee = _quiz("Set 1", base, grade="LIVE", is_live=True, exam_type="CEE")
        self.all_quizzes = [self.ioe, self.cee, self.live_ioe, self.live_cee]

    def test_regular_series_select_exact_grade(self):
        self.assertEqual(partition_series(self.all_quizzes, "IOE"), [self.ioe])
        self.assertEqual(partition_series(self.all_quizzes, "CEE"), [self.cee])

    def test_live_series_respects_exam_type_preference(self):
        self.assertEqual(partition_series(self.all_quizzes, "LIVE", "IOE"), [self.live_ioe])
        self.assertEqual(partition_series(self.all_quizzes, "LIVE", "CEE"), [self.live_cee])

    def test_live_series_without_preference_lists_everything(self):
        self.assertEqual(partition_series(self.all_quizzes, "LIVE", None), [self.live_cee, self.live_ioe])
        self.assertEqual(partition_series(self.all_quizzes, "LIVE", "none"), [self.live_cee, self.live_ioe])


class LiveWindowTests(SimpleTestCase):
    def setUp(self):
        self.start = datetime(2024, 5, 1, 10, 0, tzinfo=dt_timezone.utc)
        self.end = self.start + timedelta(hours=2)

    def test_status_bounds_are_inclusive(self):
        self.assertEqual(quiz_time_status(self.start, self.end, self.start - timedelta(seconds=1)), "upcoming")
        self.assertEqual(quiz_time_status(self.start, self.end, self.start), "active")
        self.assertEqual(quiz_time_status(self.start, self.end, self.end), "active")
        self.assertEqual(quiz_time_status(self.start, self.end, self.end + timedelta(seconds=1)), "ended")
        self.assertEqual(quiz_time_status(None, self.end, self.start), "invalid")
        self.assertEqual(quiz_time_status(self.start, "not a date", self.start), "invalid")

    def test_countdown_formatting(self):
        self.assertEqual(format_countdown(timedelta(hours=1, minutes=2, seconds=3, milliseconds=900)), "01:02:03")
        self.assertEqual(format_countdown(timedelta(seconds=-5)), "00:00:00")
        self.assertEqual(format_countdown(0), "00:00:00")
        self.assertEqual(format_countdown(timedelta(hours=30)), "30:00:00")

    def test_time_remaining_label(self):
        now = self.start
        self.assertEqual(time_remaining_label(now + timedelta(days=1, hours=2, minutes=3), now), "1d 2h 3m")
        self.assertEqual(time_remaining_label(now + timedelta(hours=2, minutes=3), now), "2h 3m")
        self.assertEqual(time_remaining_label(now + timedelta(minutes=3, seconds=30), now), "3m")
        self.assertEqual(time_remaining_label(now - timedelta(minutes=3), now), "")
        self.assertEqual(time_remaining_label(None, now), "")

    def test_describe_window_for_upcoming_quiz(self):
        quiz = SimpleNamespace(start_time=self.start, end_time=self.end)
        window = describe_window(quiz, self.start - timedelta(minutes=5))
        self.assertEqual(window["status"], "upcoming")
        self.assertFalse(window["can_start"])
        self.assertEqual(window["starts_in_seconds"], 300)
        self.assertEqual(window["starts_in"], "00:05:00")
        self.assertEqual(window["button_label"], "Quiz Not Started")
        self.assertEqual(window["starts_in_label"], "5m")
        self.assertEqual(window["ends_in_label"], "")

    def test_describe_window_for_active_quiz(self):
        quiz = SimpleNamespace(start_time=self.start, end_time=self.end)
        window = describe_window(quiz, self.start + timedelta(minutes=30))
        self.assertTrue(window["can_start"])
        self.assertEqual(window["ends_in"], "01:30:00")
        self.assertEqual(window["ends_in_label"], "1h 30m")
        self.assertEqual(window["starts_in_label"], "")

    def test_start_block_messages(self):
        quiz = SimpleNamespace(start_time=self.start, end_time=self.end)
        self.assertIsNone(start_block_message(quiz, self.start))
        self.assertTrue(
            start_block_message(quiz, self.start - timedelta(minutes=1)).startswith(
                "This live quiz hasn't started yet. It will begin at"
            )
        )
        self.assertTrue(
            start_block_message(quiz, self.end + timedelta(minutes=1)).startswith(
                "This live quiz has ended. It was available until"
            )
        )
        broken = SimpleNamespace(start_time=None, end_time=self.end)
        self.assertEqual(start_block_message(broken, self.start), "This live quiz has invalid timing configuration.")

    def test_submission_allowed_until_time_limit_after_close(self):
        quiz = SimpleNamespace(start_time=self.start, end_time=self.end, time_limit=30)
        self.assertIsNone(submit_block_message(quiz, self.end + timedelta(minutes=30)))
        self.assertTrue(
            submit_block_message(quiz, self.end + timedelta(minutes=31)).startswith("This live quiz has ended.")
        )
        self.assertTrue(
            submit_block_message(quiz, self.start - timedelta(seconds=1)).startswith("This live quiz hasn't started yet.")
        )


class LeaderboardRankingTests(SimpleTestCase):
    def test_rank_by_score_then_name(self):
        entries = [
            {"name": "A", "score": 18},
            {"name": "B", "score": 20},
            {"name": "D", "score": 20},
            {"name": "C", "score": 15},
        ]
        ranked = rank_entries(entries)
        self.assertEqual([(entry["name"], entry["rank"]) for entry in ranked], [("B", 1), ("D", 2), ("A", 3), ("C", 4)])

    def test_best_score_per_user(self):
        base = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        results = [
            SimpleNamespace(user_id=1, user_name="Asha", score=10, submitted_at=base),
            SimpleNamespace(user_id=1, user_name="Asha", score=14, submitted_at=base + timedelta(minutes=1)),
            SimpleNamespace(user_id=2, user_name="", score=12, submitted_at=base),
        ]
        board = build_leaderboard(results)
        self.assertEqual(
            [(entry["name"], entry["score"], entry["rank"]) for entry in board],
            [("Asha", 14, 1), ("Anonymous", 12, 2)],
        )
        self.assertEqual(len(build_leaderboard(results, limit=1)), 1)


class QuestionImportTests(SimpleTestCase):
    def test_batch_is_transformed(self):
        rows = normalize_question_batch(
            [
                _question_row(1, imageLink="null"),
                _question_row(2, imageLink="https://img.test/q2.png", marks="2", correctOption=4),
                _question_row(3, marks="abc"),
            ]
        )
        self.assertEqual(rows[0]["correct_option"], "option2")
        self.assertEqual(rows[0]["image_link"], "")
        self.assertEqual(rows[1]["image_link"], "https://img.test/q2.png")
        self.assertEqual(rows[1]["marks"], 2)
        self.assertEqual(rows[1]["correct_option"], "option4")
        self.assertEqual(rows[2]["marks"], 1)

    def test_any_invalid_row_rejects_the_batch(self):
        broken = _question_row(2)
        del broken["option4"]
        with self.assertRaises(QuestionImportError) as ctx:
            normalize_question_batch([_question_row(1), broken, "not an object"])
        self.assertEqual(ctx.exception.invalid_count, 2)
        self.assertEqual(
            str(ctx.exception),
            "Found 2 invalid questions. All questions must have: questionNo, question, option1-4, correctOption, marks.",
        )

    def test_row_without_marks_rejects_the_batch(self):
        broken = _question_row(2)
        del broken["marks"]
        with self.assertRaises(QuestionImportError) as ctx:
            normalize_question_batch([_question_row(1), broken, _question_row(3)])
        self.assertEqual(ctx.exception.invalid_count, 1)
        self.assertTrue(str(ctx.exception).startswith("Found 1 invalid questions."))

    def test_non_array_payload_is_rejected(self):
        for payload in ([], {"questions": []}, None):
            with self.subTest(payload=payload), self.assertRaises(QuestionImportError) as ctx:
                normalize_question_batch(payload)
            self.assertEqual(str(ctx.exception), "Invalid JSON format. Expected a non-empty array of quiz questions.")

    def test_unparsable_file_is_rejected(self):
        with self.assertRaises(QuestionImportError) as ctx:
            parse_question_file(b"[{oops")
        self.assertTrue(str(ctx.exception).startswith("Invalid JSON file:"))

    def test_presented_question_hides_text_behind_image(self):
        question = SimpleNamespace(
            id=9,
            question_no=1,
            question_text="Look at the figure",
            image_link="https://img.test/q.png",
            option1="A",
            option2="",
            option3="C",
            option4="D",
            correct_option="option3",
            marks=1,
        )
        payload = present_question(question)
        self.assertEqual(payload["question_text"], "")
        self.assertEqual([option["id"] for option in payload["options"]], ["9-opt-1", "9-opt-3", "9-opt-4"])
        self.assertNotIn("correct_option", payload)

        question.image_link = "null"
        question.question_text = ""
        self.assertEqual(present_question(question, index=4)["question_text"], "Question 5 text missing")


class QuizApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.student = User.objects.create_user(
            username="student",
            email="student@example.com",
            password="secret123",
            display_name="Student One",
            exam_type="IOE",
        )
        self.admin = User.objects.create_user(
            username="admin",
            email="admin@example.com",
            password="secret123",
            is_staff=True,
        )
        self.ioe_quiz = Quiz.objects.create(title="Set 2", grade="IOE", time_limit=60)
        Quiz.objects.create(title="Set 1", grade="IOE", time_limit=60)
        Quiz.objects.create(title="cap 1", grade="IOE", time_limit=30)
        Question.objects.create(
            quiz=self.ioe_quiz,
            question_no=1,
            question_text="2 + 2?",
            option1="3",
            option2="4",
            option3="5",
            option4="6",
            correct_option="option2",
            marks=2,
        )

        now = timezone.now()
        self.live_quiz = Quiz.objects.create(
            title="Live Set 1",
            grade="LIVE",
            exam_type="IOE",
            quiz_type=Quiz.TYPE_LIVE,
            time_limit=60,
            start_time=now - timedelta(minutes=10),
            end_time=now + timedelta(minutes=50),
        )
        Question.objects.create(
            quiz=self.live_quiz,
            question_no=1,
            question_text="Capital of Nepal?",
            option1="Kathmandu",
            option2="Pokhara",
            option3="Lalitpur",
            option4="Butwal",
            correct_option="option1",
        )
        self.client.force_authenticate(self.student)

    def _grant(self, field):
        setattr(self.student, field, True)
        self.student.save(update_fields=[field])

    def _live_payload(self, **overrides):
        now = timezone.now()
        payload = {
            "title": "Live Capsule 4",
            "grade": "LIVE",
            "exam_type": "CEE",
            "time_limit": 45,
            "start_time": (now + timedelta(hours=1)).isoformat(),
            "end_time": (now + timedelta(hours=2)).isoformat(),
            "questions": [_question_row(1), _question_row(2, correctOption="3", imageLink="null")],
        }
        payload.update(overrides)
        return payload

    def test_locked_series_returns_payment_required(self):
        response = self.client.get("/api/quizzes/series/IOE/")
        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.data["error"], "You need to purchase the IOE test series to access the tests.")

        response = self.client.get(f"/api/quizzes/{self.ioe_quiz.id}/start/")
        self.assertEqual(response.status_code, 402)

    def test_unlocked_series_lists_sorted_quizzes_without_questions(self):
        self._grant("ioe_access")
        response = self.client.get("/api/quizzes/series/IOE/?filter=set")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["display_title"] for row in response.data["quizzes"]], ["Set-1", "Set-2"])
        self.assertEqual(response.data["counts"], {"set": 2, "capsule": 1, "other": 0})
        self.assertNotIn("questions", response.data["quizzes"][0])

    def test_series_overview_reports_prices_and_unlocks(self):
        self._grant("live_test_access")
        response = self.client.get("/api/quizzes/series/")
        rows = {row["series"]: row for row in response.data["series"]}
        self.assertEqual(rows["IOE"]["price"], 100)
        self.assertEqual(rows["LIVE"]["price"], 50)
        self.assertFalse(rows["IOE"]["unlocked"])
        self.assertTrue(rows["LIVE"]["unlocked"])
        self.assertEqual(rows["IOE"]["quiz_count"], 3)
        self.assertEqual(rows["LIVE"]["quiz_count"], 1)

    def test_live_listing_carries_server_time_and_window(self):
        self._grant("live_test_access")
        response = self.client.get("/api/quizzes/series/LIVE/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("server_time", response.data)
        self.assertEqual(response.data["quizzes"][0]["window"]["status"], "active")

    def test_start_active_live_quiz_hides_answers(self):
        self._grant("live_test_access")
        response = self.client.get(f"/api/quizzes/{self.live_quiz.id}/start/")
        self.assertEqual(response.status_code, 200)
        question = response.data["questions"][0]
        self.assertEqual(question["question_text"], "Capital of Nepal?")
        self.assertEqual(len(question["options"]), 4)
        self.assertNotIn("correct_option", question)

    def test_start_outside_window_is_forbidden(self):
        self._grant("live_test_access")
        Quiz.objects.filter(id=self.live_quiz.id).update(
            start_time=timezone.now() + timedelta(hours=1),
            end_time=timezone.now() + timedelta(hours=2),
        )
        response = self.client.get(f"/api/quizzes/{self.live_quiz.id}/start/")
        self.assertEqual(response.status_code, 403)
        self.assertTrue(response.data["error"].startswith("This live quiz hasn't started yet."))

        Quiz.objects.filter(id=self.live_quiz.id).update(
            start_time=timezone.now() - timedelta(hours=2),
            end_time=timezone.now() - timedelta(hours=1),
        )
        response = self.client.get(f"/api/quizzes/{self.live_quiz.id}/start/")
        self.assertEqual(response.status_code, 403)
        self.assertTrue(response.data["error"].startswith("This live quiz has ended."))

    def test_results_feed_the_leaderboard(self):
        self._grant("ioe_access")
        other = User.objects.create_user(username="other", email="other@example.com", password="secret123", display_name="Bina")
        QuizResult.objects.create(quiz=self.ioe_quiz, user=other, user_name="Bina", score=2, total_marks=2)

        response = self.client.post(
            f"/api/quizzes/{self.ioe_quiz.id}/results/",
            {"score": 1, "total_marks": 2, "answers": {"1": "option1"}},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["user_name"], "Student One")

        response = self.client.get(f"/api/quizzes/{self.ioe_quiz.id}/leaderboard/")
        self.assertEqual(response.data["quiz_title"], "Set 2")
        self.assertEqual(
            [(entry["name"], entry["rank"]) for entry in response.data["entries"]],
            [("Bina", 1), ("Student One", 2)],
        )

    def test_result_score_cannot_exceed_total(self):
        self._grant("ioe_access")
        response = self.client.post(
            f"/api/quizzes/{self.ioe_quiz.id}/results/",
            {"score": 5, "total_marks": 2, "answers": {}},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_live_results_follow_the_quiz_window(self):
        self._grant("live_test_access")
        url = f"/api/quizzes/{self.live_quiz.id}/results/"
        payload = {"score": 1, "total_marks": 1, "answers": {"1": "option1"}}

        Quiz.objects.filter(id=self.live_quiz.id).update(
            start_time=timezone.now() + timedelta(hours=1),
            end_time=timezone.now() + timedelta(hours=2),
        )
        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, 403)

        Quiz.objects.filter(id=self.live_quiz.id).update(
            start_time=timezone.now() - timedelta(hours=3),
            end_time=timezone.now() - timedelta(hours=2),
        )
        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, 403)
        self.assertTrue(response.data["error"].startswith("This live quiz has ended."))

        Quiz.objects.filter(id=self.live_quiz.id).update(
            start_time=timezone.now() - timedelta(hours=1),
            end_time=timezone.now() - timedelta(minutes=5),
        )
        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, 201)

        Quiz.objects.filter(id=self.live_quiz.id).update(archive=True)
        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(QuizResult.objects.filter(quiz=self.live_quiz).count(), 1)

    def test_available_and_first_live_quiz(self):
        response = self.client.get("/api/quizzes/live/first/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], self.live_quiz.id)

        Quiz.objects.filter(id=self.live_quiz.id).update(archive=True)
        response = self.client.get("/api/quizzes/live/available/")
        self.assertEqual(response.data["quizzes"], [])
        self.assertEqual(response.data["message"], "No active live tests are currently available.")

        response = self.client.get("/api/quizzes/live/first/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"], "No Live Tests are currently available.")

    def test_live_management_requires_admin(self):
        response = self.client.get("/api/quizzes/live/")
        self.assertEqual(response.status_code, 403)

    def test_admin_creates_live_quiz_with_questions(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post("/api/quizzes/live/", self._live_payload(), format="json")
        self.assertEqual(response.status_code, 201)

        quiz = Quiz.objects.get(id=response.data["quiz"]["id"])
        self.assertTrue(quiz.is_live)
        self.assertFalse(quiz.archive)
        self.assertEqual(quiz.created_by, self.admin)
        self.assertEqual(list(quiz.questions.values_list("correct_option", flat=True)), ["option2", "option3"])

    def test_admin_creates_live_quiz_from_json_file(self):
        self.client.force_authenticate(self.admin)
        payload = self._live_payload()
        questions = payload.pop("questions")
        payload["questions_file"] = SimpleUploadedFile(
            "questions.json",
            json.dumps(questions).encode("utf-8"),
            content_type="application/json",
        )
        response = self.client.post("/api/quizzes/live/", payload, format="multipart")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(Question.objects.filter(quiz_id=response.data["quiz"]["id"]).count(), 2)

    def test_create_rejects_bad_window_and_empty_questions(self):
        self.client.force_authenticate(self.admin)
        now = timezone.now()
        response = self.client.post(
            "/api/quizzes/live/",
            self._live_payload(start_time=now.isoformat(), end_time=(now - timedelta(minutes=1)).isoformat()),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "End time must be after start time.")

        response = self.client.post("/api/quizzes/live/", self._live_payload(questions=[]), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Please upload at least one question")

        response = self.client.post(
            "/api/quizzes/live/",
            self._live_payload(questions=[{"questionNo": 1}]),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["invalid_count"], 1)
        self.assertFalse(Quiz.objects.filter(title="Live Capsule 4").exists())

    def test_update_keeps_archive_flag(self):
        self.client.force_authenticate(self.admin)
        Quiz.objects.filter(id=self.live_quiz.id).update(archive=True)
        response = self.client.patch(
            f"/api/quizzes/live/{self.live_quiz.id}/",
            {"title": "Live Set 9", "archive": False},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.live_quiz.refresh_from_db()
        self.assertEqual(self.live_quiz.title, "Live Set 9")
        self.assertTrue(self.live_quiz.archive)
        self.assertEqual(self.live_quiz.questions.count(), 1)

    def test_archive_toggle_and_delete(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(f"/api/quizzes/live/{self.live_quiz.id}/archive/")
        self.assertTrue(response.data["archive"])
        response = self.client.post(f"/api/quizzes/live/{self.live_quiz.id}/archive/")
        self.assertFalse(response.data["archive"])

        response = self.client.delete(f"/api/quizzes/live/{self.live_quiz.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Quiz.objects.filter(id=self.live_quiz.id).exists())

    def test_question_preview_validates_without_saving(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            "/api/quizzes/questions/preview/",
            {"questions": [_question_row(1)]},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["questions"][0]["correct_option"], "option2")
        self.assertEqual(Question.objects.count(), 2)
