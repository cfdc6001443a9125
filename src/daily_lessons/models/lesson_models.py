import datetime
import enum
import typing
import uuid

import pydantic

from daily_lessons.utils.base_types import IsoDate, LessonId, SlideId


class SlideType(str, enum.Enum):
    SCRIPTURE = "scripture"
    DEVOTIONAL = "devotional"
    PRAYER = "prayer"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def _canonical_uuid(value: str) -> str:
    return str(uuid.UUID(value))


class LessonSlideModel(pydantic.BaseModel):
    """
    One screen of a daily lesson. Mirrors a `lesson_slides` row as embedded in the
    get_todays_lesson RPC payload.

    Required fields are strict: the payload is loosely typed JSON and a slide with
    e.g. a string slide_index is treated as malformed rather than coerced.
    """

    model_config = pydantic.ConfigDict(frozen=True, extra="ignore")

    id: pydantic.StrictStr
    slide_type: SlideType
    slide_index: pydantic.StrictInt = pydantic.Field(ge=0)
    type_index: pydantic.StrictInt = pydantic.Field(ge=0)
    main_text: pydantic.StrictStr
    subtitle: typing.Optional[pydantic.StrictStr] = None
    verse_reference: typing.Optional[pydantic.StrictStr] = None
    verse_text: typing.Optional[pydantic.StrictStr] = None
    audio_url: typing.Optional[pydantic.StrictStr] = None
    image_url: typing.Optional[pydantic.StrictStr] = None
    background_color: typing.Optional[pydantic.StrictStr] = None

    @pydantic.field_validator("id")
    @classmethod
    def ensure_uuid(cls, v: str) -> SlideId:
        return SlideId(_canonical_uuid(v))


class DailyLessonModel(pydantic.BaseModel):
    """
    A day's lesson. Immutable once built; slides are always sorted by slide_index
    and form the contiguous sequence 0..N-1.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    id: LessonId
    lesson_date: IsoDate
    title: str
    theme: typing.Optional[str] = None
    description: typing.Optional[str] = None
    estimated_duration_minutes: int = 5
    slides: tuple[LessonSlideModel, ...]

    @pydantic.field_validator("slides")
    @classmethod
    def ensure_contiguous_slides(cls, v: tuple[LessonSlideModel, ...]) -> tuple[LessonSlideModel, ...]:
        if not v:
            raise ValueError("A lesson must contain at least one slide")
        ordered = tuple(sorted(v, key=lambda slide: slide.slide_index))
        indices = [slide.slide_index for slide in ordered]
        if indices != list(range(len(ordered))):
            raise ValueError(f"Slide indices must be contiguous from 0, got {indices}")
        return ordered

    @property
    def total_slides(self) -> int:
        return len(self.slides)

    def slides_by_type(self, slide_type: SlideType) -> list[LessonSlideModel]:
        return [slide for slide in self.slides if slide.slide_type == slide_type]

    @property
    def formatted_date(self) -> str:
        """`2024-01-01` -> `January 1`. Unparseable dates are returned as-is."""
        try:
            parsed = datetime.date.fromisoformat(self.lesson_date)
        except ValueError:
            return self.lesson_date
        return f"{parsed:%B} {parsed.day}"


class DailyLessonResponseModel(pydantic.BaseModel):
    """
    One row returned by the get_todays_lesson RPC. Slides arrive as untyped
    key/value records and are validated separately into LessonSlideModel.
    """

    model_config = pydantic.ConfigDict(extra="ignore")

    lesson_id: pydantic.StrictStr
    lesson_date: pydantic.StrictStr
    title: pydantic.StrictStr
    theme: typing.Optional[pydantic.StrictStr] = None
    description: typing.Optional[pydantic.StrictStr] = None
    estimated_duration_minutes: typing.Optional[pydantic.StrictInt] = None
    # json_agg over zero slide rows yields null
    slides: typing.Optional[list[dict[str, typing.Any]]] = None

    @pydantic.field_validator("lesson_id")
    @classmethod
    def ensure_uuid(cls, v: str) -> LessonId:
        return LessonId(_canonical_uuid(v))
