import typing

import pydantic

from daily_lessons.utils.base_types import IsoTimestamp, LessonId, UserId


class UserLessonProgressModel(pydantic.BaseModel):
    """
    A `user_lesson_progress` row. One per (user, lesson); written only through the
    update_lesson_progress RPC.
    """

    model_config = pydantic.ConfigDict(extra="ignore")

    id: typing.Optional[str] = None
    user_id: UserId
    lesson_id: LessonId
    current_slide_index: int = pydantic.Field(default=0, ge=0)
    completed_slides: list[int] = pydantic.Field(default_factory=list)
    is_completed: bool = False
    completed_at: typing.Optional[IsoTimestamp] = None
    time_spent_seconds: int = 0
    created_at: typing.Optional[IsoTimestamp] = None
    updated_at: typing.Optional[IsoTimestamp] = None

    @pydantic.field_validator("current_slide_index", "time_spent_seconds", mode="before")
    @classmethod
    def null_int_to_zero(cls, v: typing.Any) -> typing.Any:
        return 0 if v is None else v

    @pydantic.field_validator("completed_slides", mode="before")
    @classmethod
    def null_list_to_empty(cls, v: typing.Any) -> typing.Any:
        return [] if v is None else v

    @pydantic.field_validator("is_completed", mode="before")
    @classmethod
    def null_bool_to_false(cls, v: typing.Any) -> typing.Any:
        return False if v is None else v


class LessonProgress(pydantic.BaseModel):
    """In-memory progress for the active lesson. Replaced, never mutated, on each update."""

    model_config = pydantic.ConfigDict(frozen=True)

    current_slide_index: int = 0
    total_slides: int = 0
    completed_slides: frozenset[int] = frozenset()
    is_completed: bool = False

    @classmethod
    def initial(cls, total_slides: int) -> "LessonProgress":
        return cls(current_slide_index=0, total_slides=total_slides, completed_slides=frozenset(), is_completed=False)

    @property
    def progress_percentage(self) -> float:
        if self.total_slides <= 0:
            return 0.0
        return (self.current_slide_index + 1) / self.total_slides

    @property
    def slides_remaining(self) -> int:
        return max(0, self.total_slides - (self.current_slide_index + 1))

    def is_slide_completed(self, slide_index: int) -> bool:
        return slide_index in self.completed_slides


class ProgressUpdateParamsModel(pydantic.BaseModel):
    """Body of the update_lesson_progress RPC."""

    p_lesson_id: LessonId
    p_slide_index: int = pydantic.Field(..., ge=0)
    p_is_completed: bool = False


class ProgressUpdateResponseModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    success: bool
    message: typing.Optional[str] = None
    error: typing.Optional[str] = None
