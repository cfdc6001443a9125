import logging
import typing

from daily_lessons.models.lesson_models import DailyLessonModel
from daily_lessons.models.progress_models import LessonProgress, UserLessonProgressModel
from daily_lessons.supabase.lesson_gateway import RemoteLessonGateway
from daily_lessons.sync.lesson_context import LessonContext
from daily_lessons.sync.sync_queue import ProgressSyncQueue
from daily_lessons.utils.base_types import LessonId
from daily_lessons.utils.errors import LessonSyncError
from daily_lessons.utils.jwt_utils import SessionProvider

_LOGGER = logging.getLogger(__name__)


class ProgressReconciler:
    """
    Owns the in-memory progress of the active lesson.

    Every navigation event is applied locally and synchronously first; the
    resulting cumulative state is then handed to the sync queue for a remote
    write, unless the context is showing a fallback lesson.
    """

    def __init__(
        self,
        context: LessonContext,
        gateway: RemoteLessonGateway,
        session_provider: SessionProvider,
        sync_queue: ProgressSyncQueue,
    ) -> None:
        self.context = context
        self.gateway = gateway
        self.session_provider = session_provider
        self.sync_queue = sync_queue

    def load(
        self,
        lesson: DailyLessonModel,
        remote_progress: typing.Optional[UserLessonProgressModel],
    ) -> LessonProgress:
        total_slides = lesson.total_slides
        if remote_progress is None:
            progress = LessonProgress.initial(total_slides)
        else:
            completed = frozenset(remote_progress.completed_slides)
            stale = sorted(index for index in completed if index >= total_slides)
            if stale:
                _LOGGER.info(f"Keeping stale completed slide indices {stale} for lesson {lesson.id}")
            progress = LessonProgress(
                current_slide_index=min(remote_progress.current_slide_index, total_slides - 1),
                total_slides=total_slides,
                completed_slides=completed,
                is_completed=remote_progress.is_completed and (total_slides - 1) in completed,
            )

        self.context.viewing_index = progress.current_slide_index
        self.context.set_progress(progress)
        return progress

    def advance(self, to_index: int, completed: bool = False) -> typing.Optional[LessonProgress]:
        lesson = self.context.lesson
        current = self.context.progress
        if lesson is None or current is None:
            _LOGGER.warning(f"Ignoring advance to {to_index}: no active lesson")
            return None
        if not 0 <= to_index < current.total_slides:
            _LOGGER.warning(f"Ignoring advance to {to_index}: lesson has {current.total_slides} slides")
            return None

        completed_slides = (current.completed_slides | {to_index}) if completed else current.completed_slides
        finished_now = completed and to_index == current.total_slides - 1
        updated = LessonProgress(
            current_slide_index=max(current.current_slide_index, to_index),
            total_slides=current.total_slides,
            completed_slides=completed_slides,
            # Sticky: update_lesson_progress overwrites is_completed with whatever we send.
            is_completed=current.is_completed or finished_now,
        )
        self.context.viewing_index = to_index
        self.context.set_progress(updated)

        if not self.context.state.allows_remote_sync:
            _LOGGER.info(f"Using {self.context.state.kind} lesson - skipping server progress update")
        else:
            self._schedule_remote_update(lesson.id, to_index, updated.is_completed)
        return updated

    def _schedule_remote_update(self, lesson_id: LessonId, slide_index: int, is_completed: bool) -> None:
        def push() -> None:
            try:
                session = self.session_provider.get_session()
                self.gateway.update_progress(session, lesson_id, slide_index, is_completed)
            except LessonSyncError as e:
                _LOGGER.warning(f"Failed to update progress on server: {e.message} {e.context}")

        self.sync_queue.submit(push, description=f"update progress {lesson_id}@{slide_index}")
