import enum
import logging
import typing

from daily_lessons.models.lesson_models import DailyLessonModel
from daily_lessons.models.lesson_state import LessonState
from daily_lessons.models.progress_models import LessonProgress

_LOGGER = logging.getLogger(__name__)


class LessonEvent(str, enum.Enum):
    STATE_CHANGED = "state_changed"
    PROGRESS_CHANGED = "progress_changed"


Listener = typing.Callable[[typing.Any], None]


class LessonEventEmitter:
    def __init__(self) -> None:
        self._listeners: dict[LessonEvent, list[Listener]] = {event: [] for event in LessonEvent}

    def subscribe(self, event: LessonEvent, listener: Listener) -> typing.Callable[[], None]:
        """Registers a listener and returns a callable that unsubscribes it."""
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def emit(self, event: LessonEvent, payload: typing.Any) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(payload)
            except Exception as e:
                _LOGGER.error(f"Listener for {event.value} raised: {str(e)}", exc_info=True)


class LessonContext:
    """
    Shared state of one daily lesson surface: the lesson state, the progress
    record and the slide currently on screen. The reconciler writes through this
    object and the navigation controller reads from it; listeners are notified
    of every change.

    `viewing_index` is the slide being shown. It moves freely within the lesson,
    while `progress.current_slide_index` only ever grows.
    """

    def __init__(self, emitter: typing.Optional[LessonEventEmitter] = None) -> None:
        self.emitter = emitter or LessonEventEmitter()
        self._state = LessonState.loading()
        self._progress: typing.Optional[LessonProgress] = None
        self.viewing_index = 0

    @property
    def state(self) -> LessonState:
        return self._state

    @property
    def progress(self) -> typing.Optional[LessonProgress]:
        return self._progress

    @property
    def lesson(self) -> typing.Optional[DailyLessonModel]:
        return self._state.lesson

    def is_using_fallback(self) -> bool:
        return self._state.is_fallback

    def set_state(self, state: LessonState) -> None:
        self._state = state
        self.emitter.emit(LessonEvent.STATE_CHANGED, state)

    def set_progress(self, progress: typing.Optional[LessonProgress]) -> None:
        self._progress = progress
        self.emitter.emit(LessonEvent.PROGRESS_CHANGED, progress)
