from unittest.mock import Mock

import pytest

from conftest import TEST_LESSON_ID, TEST_USER_ID, make_lesson_row, make_slide_row
from daily_lessons.models.lesson_models import SlideType
from daily_lessons.supabase.lesson_gateway import RemoteLessonGateway
from daily_lessons.utils.errors import DecodeError, NotFoundError, TransportError, WriteRejectedError


def create_gateway(rest_client=None) -> RemoteLessonGateway:
    return RemoteLessonGateway(rest_client or Mock())


def test_fetch_todays_lesson(auth_session, lesson_row):
    rest_client = Mock()
    rest_client.rpc.return_value = [lesson_row]

    lesson = create_gateway(rest_client).fetch_todays_lesson(auth_session)

    rest_client.rpc.assert_called_once_with("get_todays_lesson", auth_session)
    assert lesson.id == TEST_LESSON_ID
    assert lesson.title == "Trust in the Lord"
    assert lesson.estimated_duration_minutes == 6
    assert lesson.total_slides == 3
    assert [slide.slide_type for slide in lesson.slides] == [SlideType.SCRIPTURE, SlideType.DEVOTIONAL, SlideType.PRAYER]
    assert lesson.slides[0].verse_reference == "Proverbs 3:5-6"


def test_fetch_todays_lesson_sorts_slides(auth_session):
    rest_client = Mock()
    rest_client.rpc.return_value = [make_lesson_row([make_slide_row(1, "prayer"), make_slide_row(0)])]

    lesson = create_gateway(rest_client).fetch_todays_lesson(auth_session)

    assert [slide.slide_index for slide in lesson.slides] == [0, 1]


def test_fetch_todays_lesson_default_duration(auth_session):
    rest_client = Mock()
    rest_client.rpc.return_value = [make_lesson_row(estimated_duration_minutes=None)]

    assert create_gateway(rest_client).fetch_todays_lesson(auth_session).estimated_duration_minutes == 5


def test_fetch_todays_lesson_empty_is_not_found(auth_session):
    rest_client = Mock()
    rest_client.rpc.return_value = []

    with pytest.raises(NotFoundError) as exc_info:
        create_gateway(rest_client).fetch_todays_lesson(auth_session)
    assert exc_info.value.message == "No lesson found for today. Using offline lesson."


def test_fetch_todays_lesson_one_bad_slide_fails_whole_fetch(auth_session):
    bad_slide = make_slide_row(1, "devotional")
    del bad_slide["main_text"]
    rest_client = Mock()
    rest_client.rpc.return_value = [make_lesson_row([make_slide_row(0), bad_slide, make_slide_row(2, "prayer")])]

    with pytest.raises(DecodeError) as exc_info:
        create_gateway(rest_client).fetch_todays_lesson(auth_session)
    assert exc_info.value.context["slide_position"] == 1


@pytest.mark.parametrize(
    "row",
    [
        make_lesson_row(slides=[]),
        make_lesson_row(slides=None) | {"slides": None},
        make_lesson_row([make_slide_row(0), make_slide_row(2)]),
        make_lesson_row(title=None),
        make_lesson_row(lesson_id="not-a-uuid"),
        "garbage",
    ],
)
def test_fetch_todays_lesson_malformed_payloads(auth_session, row):
    rest_client = Mock()
    rest_client.rpc.return_value = [row]

    with pytest.raises(DecodeError):
        create_gateway(rest_client).fetch_todays_lesson(auth_session)


def test_fetch_todays_lesson_non_list_response(auth_session, lesson_row):
    rest_client = Mock()
    rest_client.rpc.return_value = lesson_row

    with pytest.raises(DecodeError):
        create_gateway(rest_client).fetch_todays_lesson(auth_session)


def test_fetch_todays_lesson_transport_error_propagates(auth_session):
    rest_client = Mock()
    rest_client.rpc.side_effect = TransportError()

    with pytest.raises(TransportError):
        create_gateway(rest_client).fetch_todays_lesson(auth_session)


def test_fetch_progress(auth_session):
    rest_client = Mock()
    rest_client.select.return_value = [
        {
            "id": "f1e2d3c4-0000-4000-8000-000000000001",
            "user_id": TEST_USER_ID,
            "lesson_id": TEST_LESSON_ID,
            "current_slide_index": 2,
            "completed_slides": [0, 1, 2],
            "is_completed": True,
            "completed_at": "2025-03-14T08:00:00Z",
            "time_spent_seconds": 120,
        }
    ]

    progress = create_gateway(rest_client).fetch_progress(auth_session, TEST_LESSON_ID)

    rest_client.select.assert_called_once_with(
        "user_lesson_progress",
        auth_session,
        filters={"user_id": TEST_USER_ID, "lesson_id": TEST_LESSON_ID},
    )
    assert progress is not None
    assert progress.current_slide_index == 2
    assert progress.completed_slides == [0, 1, 2]
    assert progress.is_completed is True


def test_fetch_progress_none_when_no_record(auth_session):
    rest_client = Mock()
    rest_client.select.return_value = []

    assert create_gateway(rest_client).fetch_progress(auth_session, TEST_LESSON_ID) is None


def test_fetch_progress_malformed_row(auth_session):
    rest_client = Mock()
    rest_client.select.return_value = [{"user_id": TEST_USER_ID, "lesson_id": TEST_LESSON_ID, "completed_slides": "x"}]

    with pytest.raises(DecodeError):
        create_gateway(rest_client).fetch_progress(auth_session, TEST_LESSON_ID)


def test_update_progress(auth_session):
    rest_client = Mock()
    rest_client.rpc.return_value = {"success": True, "message": "Progress updated"}

    response = create_gateway(rest_client).update_progress(auth_session, TEST_LESSON_ID, 2, True)

    assert response.success is True
    rest_client.rpc.assert_called_once_with(
        "update_lesson_progress",
        auth_session,
        params={"p_lesson_id": TEST_LESSON_ID, "p_slide_index": 2, "p_is_completed": True},
    )


def test_update_progress_rejected(auth_session):
    rest_client = Mock()
    rest_client.rpc.return_value = {"success": False, "error": "User not authenticated"}

    with pytest.raises(WriteRejectedError) as exc_info:
        create_gateway(rest_client).update_progress(auth_session, TEST_LESSON_ID, 1, False)
    assert exc_info.value.context["reason"] == "User not authenticated"


def test_update_progress_unexpected_response(auth_session):
    rest_client = Mock()
    rest_client.rpc.return_value = None

    with pytest.raises(DecodeError):
        create_gateway(rest_client).update_progress(auth_session, TEST_LESSON_ID, 1, False)
