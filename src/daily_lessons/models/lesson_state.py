import typing

from daily_lessons.models.lesson_models import DailyLessonModel

LessonStateKind = typing.Literal["loading", "loaded", "fallback", "error"]


class LessonState(typing.NamedTuple):
    """
    Tagged value describing what the daily lesson surface can show.

    `loaded` and `fallback` both carry a displayable lesson; only `loaded`
    allows progress to be written to the backend.
    """

    kind: LessonStateKind
    lesson: typing.Optional[DailyLessonModel] = None
    message: typing.Optional[str] = None

    @classmethod
    def loading(cls) -> "LessonState":
        return cls(kind="loading")

    @classmethod
    def loaded(cls, lesson: DailyLessonModel) -> "LessonState":
        return cls(kind="loaded", lesson=lesson)

    @classmethod
    def fallback(cls, lesson: DailyLessonModel, message: typing.Optional[str] = None) -> "LessonState":
        return cls(kind="fallback", lesson=lesson, message=message)

    @classmethod
    def error(cls, message: str) -> "LessonState":
        return cls(kind="error", message=message)

    @property
    def is_fallback(self) -> bool:
        return self.kind == "fallback"

    @property
    def allows_remote_sync(self) -> bool:
        return self.kind == "loaded"
