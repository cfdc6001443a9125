import datetime
import logging
import typing

from daily_lessons.fallback.fallback_lessons import FallbackLessonProvider
from daily_lessons.models.lesson_models import LessonSlideModel, SlideType
from daily_lessons.models.lesson_state import LessonState
from daily_lessons.models.progress_models import LessonProgress
from daily_lessons.supabase.lesson_gateway import RemoteLessonGateway
from daily_lessons.sync.lesson_context import LessonContext, LessonEvent, Listener
from daily_lessons.sync.navigation_controller import NavigationController
from daily_lessons.sync.progress_reconciler import ProgressReconciler
from daily_lessons.sync.sync_queue import ProgressSyncQueue
from daily_lessons.utils.errors import LessonSyncError
from daily_lessons.utils.jwt_utils import SessionProvider

_LOGGER = logging.getLogger(__name__)


class DailyLessonSession:
    """
    Entry point for one daily lesson surface.

    Loads today's lesson and the user's progress, and falls back to a bundled
    lesson whenever that fails, so there is always something to show. Navigation
    goes through `navigation`; listeners can follow state and progress changes
    through `subscribe`.
    """

    def __init__(
        self,
        gateway: RemoteLessonGateway,
        session_provider: SessionProvider,
        sync_queue: typing.Optional[ProgressSyncQueue] = None,
        fallback_provider: typing.Optional[FallbackLessonProvider] = None,
        today: typing.Optional[typing.Callable[[], datetime.date]] = None,
    ) -> None:
        self.gateway = gateway
        self.session_provider = session_provider
        self.sync_queue = sync_queue or ProgressSyncQueue()
        self.fallback_provider = fallback_provider or FallbackLessonProvider()
        self._today = today or datetime.date.today
        self.context = LessonContext()
        self.reconciler = ProgressReconciler(self.context, gateway, session_provider, self.sync_queue)
        self.navigation = NavigationController(self.context, self.reconciler)
        self.error_message: typing.Optional[str] = None
        self.is_loading = False

    @property
    def state(self) -> LessonState:
        return self.context.state

    @property
    def progress(self) -> typing.Optional[LessonProgress]:
        return self.context.progress

    def subscribe(self, event: LessonEvent, listener: Listener) -> typing.Callable[[], None]:
        return self.context.emitter.subscribe(event, listener)

    def load_todays_lesson(self) -> LessonState:
        self.is_loading = True
        self.error_message = None
        self.context.set_state(LessonState.loading())

        try:
            session = self.session_provider.get_session()
            lesson = self.gateway.fetch_todays_lesson(session)
            remote_progress = self.gateway.fetch_progress(session, lesson.id)
        except LessonSyncError as e:
            _LOGGER.warning(f"Failed to load today's lesson: {e.message} {e.context}")
            self._use_fallback(e.message)
        except Exception as e:
            _LOGGER.error(f"Unexpected error loading today's lesson: {str(e)}", exc_info=True)
            self._use_fallback(LessonSyncError.default_message)
        else:
            # Progress first so state listeners see the new lesson's progress.
            self.reconciler.load(lesson, remote_progress)
            self.context.set_state(LessonState.loaded(lesson))
            _LOGGER.info(f"Successfully loaded daily lesson '{lesson.title}'")
        finally:
            self.is_loading = False

        return self.context.state

    def refresh(self) -> LessonState:
        return self.load_todays_lesson()

    def _use_fallback(self, message: str) -> None:
        try:
            lesson = self.fallback_provider.get_todays_fallback(self._today())
        except Exception as e:
            _LOGGER.critical(f"Fallback lesson unavailable: {str(e)}", exc_info=True)
            self.error_message = message
            self.context.set_progress(None)
            self.context.set_state(LessonState.error(message))
            return

        self.error_message = message
        self.reconciler.load(lesson, None)
        self.context.set_state(LessonState.fallback(lesson, message))
        _LOGGER.info(f"Using fallback lesson: {lesson.title}")

    def is_using_fallback(self) -> bool:
        return self.context.is_using_fallback()

    def current_slide(self) -> typing.Optional[LessonSlideModel]:
        lesson = self.context.lesson
        if lesson is None or self.context.progress is None:
            return None
        if not 0 <= self.context.viewing_index < lesson.total_slides:
            return None
        return lesson.slides[self.context.viewing_index]

    def slide_type_progress(self, slide_type: SlideType) -> tuple[int, int]:
        """(position within the slide type of the slide on screen, slides of that type)."""
        lesson = self.context.lesson
        if lesson is None:
            return (0, 0)
        total = len(lesson.slides_by_type(slide_type))
        slide = self.current_slide()
        current = slide.type_index if slide is not None and slide.slide_type == slide_type else 0
        return (current, total)

    def progress_percentage(self) -> float:
        progress = self.context.progress
        return progress.progress_percentage if progress is not None else 0.0

    def close(self, wait: bool = True) -> None:
        self.sync_queue.shutdown(wait=wait)
