from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)

REQUIRED_IMPORT_KEYS = (
    "questionNo",
    "question",
    "option1",
    "option2",
    "option3",
    "option4",
    "correctOption",
    "marks",
)
OPTION_KEYS = ("option1", "option2", "option3", "option4")
IMAGE_NULL_SENTINEL = "null"


class QuestionImportError(ValueError):
    def __init__(self, message, invalid_count=0):
        super().__init__(message)
        self.invalid_count = invalid_count


def _to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _to_int(value, default: int = 0) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _normalize_for_compare(value: str) -> str:
    return " ".join(_to_text(value).lower().split())


def normalize_image_link(value) -> str:
    link = _to_text(value)
    if not link or link.lower() == IMAGE_NULL_SENTINEL:
        return ""
    return link


def resolve_correct_option(candidate, options: dict[str, str]) -> str:
    """Map ``2``, ``"2"``, ``"option2"``, ``"b"`` or the option text to ``option2``."""
    if candidate is None or isinstance(candidate, bool):
        return ""

    if isinstance(candidate, int):
        if 1 <= candidate <= 4:
            return f"option{candidate}"
        return ""

    value = _to_text(candidate)
    if not value:
        return ""
    lowered = value.lower()

    if lowered.isdigit():
        index = int(lowered)
        return f"option{index}" if 1 <= index <= 4 else ""

    match = re.fullmatch(r"option\s*([1-4])", lowered)
    if match:
        return f"option{match.group(1)}"

    if lowered in {"a", "b", "c", "d"}:
        return f"option{'abcd'.index(lowered) + 1}"

    compare_value = _normalize_for_compare(value)
    for key, option_text in options.items():
        if compare_value and compare_value == _normalize_for_compare(option_text):
            return key

    return ""


def parse_question_file(raw_bytes: bytes):
    try:
        text = raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise QuestionImportError(f"Invalid JSON file: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionImportError(f"Invalid JSON file: {exc}") from exc


def _is_valid_import_row(item) -> bool:
    if not isinstance(item, dict):
        return False
    if any(key not in item for key in REQUIRED_IMPORT_KEYS):
        return False
    options = {key: _to_text(item.get(key)) for key in OPTION_KEYS}
    return bool(resolve_correct_option(item.get("correctOption"), options))


def transform_import_row(item: dict, index: int) -> dict:
    options = {key: _to_text(item.get(key)) for key in OPTION_KEYS}
    return {
        "question_no": _to_int(item.get("questionNo"), index + 1) or index + 1,
        "question_text": _to_text(item.get("question")),
        "image_link": normalize_image_link(item.get("imageLink", IMAGE_NULL_SENTINEL)),
        **options,
        "correct_option": resolve_correct_option(item.get("correctOption"), options),
        "marks": max(1, _to_int(item.get("marks"), 1) or 1),
    }


def normalize_question_batch(data) -> list[dict]:
    """Validate an uploaded question array and transform every row.

    A single bad row rejects the whole batch; nothing is partially accepted.
    """
    if not isinstance(data, list) or not data:
        raise QuestionImportError("Invalid JSON format. Expected a non-empty array of quiz questions.")

    invalid_indexes = [index for index, item in enumerate(data) if not _is_valid_import_row(item)]
    if invalid_indexes:
        logger.warning("Rejected question batch: %s of %s rows invalid %s", len(invalid_indexes), len(data), invalid_indexes[:20])
        raise QuestionImportError(
            f"Found {len(invalid_indexes)} invalid questions. All questions must have: "
            "questionNo, question, option1-4, correctOption, marks.",
            invalid_count=len(invalid_indexes),
        )

    return [transform_import_row(item, index) for index, item in enumerate(data)]


def read_question_upload(uploaded_file=None, questions=None) -> list[dict]:
    if uploaded_file is not None:
        data = parse_question_file(uploaded_file.read())
    else:
        data = questions
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise QuestionImportError(f"Invalid JSON file: {exc}") from exc
    return normalize_question_batch(data)


def present_question(question, index: int = 0, include_answer: bool = False) -> dict:
    """Player-facing question payload; an image replaces the prompt text."""
    image_link = normalize_image_link(question.image_link)
    if image_link:
        question_text = ""
    else:
        question_text = question.question_text or f"Question {index + 1} text missing"

    options = []
    for position, key in enumerate(OPTION_KEYS, start=1):
        text = getattr(question, key, "")
        if text:
            options.append({"id": f"{question.id}-opt-{position}", "key": key, "text": text})

    payload = {
        "id": question.id,
        "question_no": question.question_no,
        "question_text": question_text,
        "image_link": image_link or None,
        "options": options,
        "marks": question.marks or 1,
    }
    if include_answer:
        payload["correct_option"] = question.correct_option
    return payload
