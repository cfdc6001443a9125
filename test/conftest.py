"""
Pytest configuration and fixtures for all tests.

This file contains fixtures that are automatically available to all test files.
"""

import os
import typing
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from daily_lessons.models.lesson_models import DailyLessonModel, LessonSlideModel
from daily_lessons.utils.jwt_utils import AuthSession, SessionProvider

TEST_USER_ID = "0b7f6a3c-2d4e-4f5a-9b8c-1d2e3f4a5b6c"
TEST_LESSON_ID = "9a1b2c3d-4e5f-4a6b-8c7d-0e1f2a3b4c5d"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """
    Sets up environment variables required for all tests.

    Runs once per test session. The backend URL points nowhere real; every test
    that touches HTTP patches `requests`.
    """
    os.environ["SUPABASE_URL"] = "https://test-project.supabase.co/"
    os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
    os.environ["LESSON_REQUEST_TIMEOUT_SECONDS"] = "5"
    os.environ["PROGRESS_SYNC_QUEUE_SIZE"] = "8"
    yield


def make_access_token(user_id: str = TEST_USER_ID, expires_in: timedelta = timedelta(hours=1)) -> str:
    expire = datetime.now(timezone.utc) + expires_in
    return jwt.encode({"sub": user_id, "exp": expire}, "backend-only-secret", algorithm="HS256")


@pytest.fixture
def access_token() -> str:
    return make_access_token()


@pytest.fixture
def session_provider(access_token: str) -> SessionProvider:
    return SessionProvider(access_token)


@pytest.fixture
def auth_session(session_provider: SessionProvider) -> AuthSession:
    return session_provider.get_session()


def make_slide_row(slide_index: int, /, slide_type: str = "scripture", type_index: int = 0, **overrides) -> dict:
    row: dict[str, typing.Any] = {
        "id": f"00000000-0000-4000-8000-{slide_index:012d}",
        "slide_type": slide_type,
        "slide_index": slide_index,
        "type_index": type_index,
        "subtitle": None,
        "main_text": f"Slide {slide_index} text",
        "verse_reference": None,
        "verse_text": None,
        "audio_url": None,
        "image_url": None,
        "background_color": "#4A90E2",
    }
    row.update(overrides)
    return row


def make_lesson_row(slides: typing.Optional[list[dict]] = None, **overrides) -> dict:
    row: dict[str, typing.Any] = {
        "lesson_id": TEST_LESSON_ID,
        "lesson_date": "2025-03-14",
        "title": "Trust in the Lord",
        "theme": "Faith",
        "description": "Learn to trust God completely.",
        "estimated_duration_minutes": 6,
        "slides": slides
        if slides is not None
        else [
            make_slide_row(0, "scripture", 0, verse_reference="Proverbs 3:5-6", verse_text="Trust in the Lord"),
            make_slide_row(1, "devotional", 0),
            make_slide_row(2, "prayer", 0),
        ],
    }
    row.update(overrides)
    return row


@pytest.fixture
def lesson_row() -> dict:
    return make_lesson_row()


def make_lesson(slide_count: int = 3, lesson_id: str = TEST_LESSON_ID) -> DailyLessonModel:
    slide_types = ["scripture", "devotional", "prayer"]
    slides = [
        LessonSlideModel.model_validate(make_slide_row(i, slide_types[i % 3], i // 3)) for i in range(slide_count)
    ]
    return DailyLessonModel(id=lesson_id, lesson_date="2025-03-14", title="Trust in the Lord", slides=slides)


@pytest.fixture
def three_slide_lesson() -> DailyLessonModel:
    return make_lesson(3)
