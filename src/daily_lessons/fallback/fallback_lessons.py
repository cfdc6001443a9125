import datetime
import logging
import typing

from daily_lessons.models.lesson_models import DailyLessonModel, LessonSlideModel, SlideType
from daily_lessons.utils.base_types import IsoDate, LessonId

_LOGGER = logging.getLogger(__name__)

_SCRIPTURE_COLOR = "#4A90E2"
_DEVOTIONAL_COLOR = "#F5A623"
_PRAYER_COLOR = "#7ED321"


def _build_lesson(
    *,
    lesson_id: str,
    slide_ids: tuple[str, str, str],
    title: str,
    theme: str,
    description: str,
    verse_reference: str,
    verse_text: str,
    reflection: str,
    prayer: str,
) -> DailyLessonModel:
    scripture_id, devotional_id, prayer_id = slide_ids
    return DailyLessonModel(
        id=LessonId(lesson_id),
        lesson_date=IsoDate("2024-01-01"),
        title=title,
        theme=theme,
        description=description,
        estimated_duration_minutes=5,
        slides=(
            LessonSlideModel(
                id=scripture_id,
                slide_type=SlideType.SCRIPTURE,
                slide_index=0,
                type_index=0,
                subtitle="Today's Scripture",
                main_text=verse_text,
                verse_reference=verse_reference,
                verse_text=verse_text,
                background_color=_SCRIPTURE_COLOR,
            ),
            LessonSlideModel(
                id=devotional_id,
                slide_type=SlideType.DEVOTIONAL,
                slide_index=1,
                type_index=0,
                subtitle="Reflection",
                main_text=reflection,
                background_color=_DEVOTIONAL_COLOR,
            ),
            LessonSlideModel(
                id=prayer_id,
                slide_type=SlideType.PRAYER,
                slide_index=2,
                type_index=0,
                subtitle="Prayer Focus",
                main_text=prayer,
                background_color=_PRAYER_COLOR,
            ),
        ),
    )


# Ids are fixed so that the same calendar day always yields identical content.
DEFAULT_FALLBACK_LESSONS: tuple[DailyLessonModel, ...] = (
    _build_lesson(
        lesson_id="5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a01",
        slide_ids=(
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a11",
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a12",
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a13",
        ),
        title="God's Love",
        theme="Love",
        description="Discover the depth of God's love for you",
        verse_reference="John 3:16",
        verse_text=(
            "For God so loved the world that he gave his one and only Son, "
            "that whoever believes in him shall not perish but have eternal life."
        ),
        reflection=(
            "God's love is not conditional or earned. It's given freely to all who believe. "
            "Take a moment to reflect on how this truth impacts your daily life and relationships."
        ),
        prayer=(
            "Heavenly Father, thank You for Your incredible love. Help me to receive Your love fully "
            "and to share it with others. May Your love transform my heart and guide my actions today. Amen."
        ),
    ),
    _build_lesson(
        lesson_id="5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a02",
        slide_ids=(
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a21",
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a22",
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a23",
        ),
        title="New Beginnings",
        theme="Hope",
        description="Start with hope and faith in God's plans for your future.",
        verse_reference="Jeremiah 29:11",
        verse_text=(
            "For I know the plans I have for you, declares the Lord, plans to prosper you "
            "and not to harm you, to give you hope and a future."
        ),
        reflection=(
            "God has a purpose for your life. Even when the path ahead seems uncertain, His plans "
            "are always for your good. Take a moment to reflect on the areas where you need to trust "
            "God more deeply."
        ),
        prayer=(
            "Heavenly Father, thank You for this new beginning. Help me to trust in Your perfect plans "
            "for my life. Give me the courage to step forward in faith, knowing that You are with me "
            "every step of the way. Amen."
        ),
    ),
    _build_lesson(
        lesson_id="5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a03",
        slide_ids=(
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a31",
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a32",
            "5f0c6a2e-9a51-4c1f-8a3e-0d3c1b7f2a33",
        ),
        title="Trust in the Lord",
        theme="Faith",
        description="Learn to trust God completely in all areas of your life.",
        verse_reference="Proverbs 3:5-6",
        verse_text=(
            "Trust in the Lord with all your heart and lean not on your own understanding; "
            "in all your ways submit to him, and he will make your paths straight."
        ),
        reflection=(
            "Trusting God means surrendering our need to control every outcome. It's about believing "
            "that His wisdom surpasses our understanding and that His ways are higher than ours."
        ),
        prayer=(
            "Lord, I surrender my plans to You. Help me to trust Your timing and Your ways. When I don't "
            "understand, give me the faith to follow Your lead. Amen."
        ),
    ),
)


class FallbackLessonProvider:
    """Picks a bundled lesson for offline use, rotating through the catalog by day of year."""

    def __init__(self, catalog: typing.Sequence[DailyLessonModel] = DEFAULT_FALLBACK_LESSONS) -> None:
        if not catalog:
            raise ValueError("Fallback lesson catalog must contain at least one lesson")
        self.catalog: tuple[DailyLessonModel, ...] = tuple(catalog)

    def get_todays_fallback(self, today: typing.Optional[datetime.date] = None) -> DailyLessonModel:
        today = today or datetime.date.today()
        day_of_year = today.timetuple().tm_yday
        lesson = self.catalog[(day_of_year - 1) % len(self.catalog)]
        _LOGGER.info(f"Selected fallback lesson '{lesson.title}' for day {day_of_year}")
        return lesson
