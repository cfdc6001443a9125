import logging
import typing

import pydantic

from daily_lessons.models.lesson_models import (
    DailyLessonModel,
    DailyLessonResponseModel,
    LessonSlideModel,
)
from daily_lessons.models.progress_models import (
    ProgressUpdateParamsModel,
    ProgressUpdateResponseModel,
    UserLessonProgressModel,
)
from daily_lessons.utils.base_types import IsoDate, LessonId
from daily_lessons.utils.errors import DecodeError, NotFoundError, WriteRejectedError
from daily_lessons.utils.jwt_utils import AuthSession
from daily_lessons.utils.rest_utils import SupabaseRestClient

_LOGGER = logging.getLogger(__name__)

GET_TODAYS_LESSON_RPC = "get_todays_lesson"
UPDATE_LESSON_PROGRESS_RPC = "update_lesson_progress"
USER_LESSON_PROGRESS_TABLE = "user_lesson_progress"


class RemoteLessonGateway:
    """
    Reads today's lesson and the user's progress from the backend and writes
    progress updates back. Holds no state between calls.
    """

    def __init__(self, rest_client: SupabaseRestClient) -> None:
        self.rest_client = rest_client

    def _convert_slides(self, lesson_id: LessonId, slides_data: list[dict[str, typing.Any]]) -> list[LessonSlideModel]:
        slides = []
        for position, slide_data in enumerate(slides_data):
            try:
                slides.append(LessonSlideModel.model_validate(slide_data))
            except pydantic.ValidationError as e:
                _LOGGER.error(f"Slide {position} of lesson {lesson_id} is malformed: {e}")
                raise DecodeError(
                    context={"lesson_id": lesson_id, "slide_position": position, "errors": e.errors(include_url=False)}
                ) from e
        return slides

    def _convert_response_to_lesson(self, row: typing.Any) -> DailyLessonModel:
        try:
            response = DailyLessonResponseModel.model_validate(row)
        except pydantic.ValidationError as e:
            _LOGGER.error(f"Lesson payload is malformed: {e}")
            raise DecodeError(context={"errors": e.errors(include_url=False)}) from e

        lesson_id = LessonId(response.lesson_id)
        if not response.slides:
            _LOGGER.error(f"Lesson {lesson_id} has no slides.")
            raise DecodeError(context={"lesson_id": lesson_id, "reason": "no slides"})

        slides = self._convert_slides(lesson_id, response.slides)
        try:
            kwargs: dict[str, typing.Any] = {}
            if response.estimated_duration_minutes is not None:
                kwargs["estimated_duration_minutes"] = response.estimated_duration_minutes
            return DailyLessonModel(
                id=lesson_id,
                lesson_date=IsoDate(response.lesson_date),
                title=response.title,
                theme=response.theme,
                description=response.description,
                slides=tuple(slides),
                **kwargs,
            )
        except pydantic.ValidationError as e:
            _LOGGER.error(f"Lesson {lesson_id} violates slide ordering: {e}")
            raise DecodeError(context={"lesson_id": lesson_id, "errors": e.errors(include_url=False)}) from e

    def fetch_todays_lesson(self, session: AuthSession) -> DailyLessonModel:
        """
        :raises NotFoundError: the backend has no lesson for today.
        :raises DecodeError: the lesson or any of its slides is malformed.
        :raises TransportError: the backend could not be reached.
        """
        _LOGGER.info("Fetching today's lesson")
        rows = self.rest_client.rpc(GET_TODAYS_LESSON_RPC, session)

        if not isinstance(rows, list):
            _LOGGER.error(f"Expected a list from {GET_TODAYS_LESSON_RPC}, got {type(rows).__name__}")
            raise DecodeError(context={"rpc": GET_TODAYS_LESSON_RPC})

        _LOGGER.info(f"Received response with {len(rows)} lessons")
        if not rows:
            _LOGGER.warning("No lesson found for today.")
            raise NotFoundError()

        lesson = self._convert_response_to_lesson(rows[0])
        _LOGGER.info(f"Found lesson '{lesson.title}' with {lesson.total_slides} slides")
        return lesson

    def fetch_progress(
        self,
        session: AuthSession,
        lesson_id: LessonId,
    ) -> typing.Optional[UserLessonProgressModel]:
        """
        Returns the user's stored progress for the lesson, or None if they have not
        started it yet.
        """
        rows = self.rest_client.select(
            USER_LESSON_PROGRESS_TABLE,
            session,
            filters={"user_id": session.user_id, "lesson_id": lesson_id},
        )
        if not rows:
            _LOGGER.info(f"No stored progress for user {session.user_id} on lesson {lesson_id}")
            return None

        try:
            return UserLessonProgressModel.model_validate(rows[0])
        except pydantic.ValidationError as e:
            _LOGGER.error(f"Progress row for lesson {lesson_id} is malformed: {e}")
            raise DecodeError(context={"lesson_id": lesson_id, "errors": e.errors(include_url=False)}) from e

    def update_progress(
        self,
        session: AuthSession,
        lesson_id: LessonId,
        slide_index: int,
        completed: bool,
    ) -> ProgressUpdateResponseModel:
        """
        :raises WriteRejectedError: the backend answered success=false.
        :raises TransportError: the backend could not be reached.
        """
        params = ProgressUpdateParamsModel(p_lesson_id=lesson_id, p_slide_index=slide_index, p_is_completed=completed)
        raw_response = self.rest_client.rpc(UPDATE_LESSON_PROGRESS_RPC, session, params=params.model_dump())

        try:
            response = ProgressUpdateResponseModel.model_validate(raw_response)
        except pydantic.ValidationError as e:
            _LOGGER.error(f"Unexpected {UPDATE_LESSON_PROGRESS_RPC} response {raw_response}: {e}")
            raise DecodeError("Progress update returned an unexpected response.") from e

        if not response.success:
            reason = response.error or response.message or "no reason given"
            _LOGGER.warning(f"Progress update for lesson {lesson_id} rejected: {reason}")
            raise WriteRejectedError(context={"lesson_id": lesson_id, "slide_index": slide_index, "reason": reason})

        _LOGGER.info(f"Progress updated for lesson {lesson_id} at slide {slide_index}")
        return response
