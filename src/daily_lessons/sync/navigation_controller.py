import typing

from daily_lessons.models.progress_models import LessonProgress
from daily_lessons.sync.lesson_context import LessonContext
from daily_lessons.sync.progress_reconciler import ProgressReconciler


class NavigationController:
    """
    Bounds-checked slide navigation over `progress.current_slide_index`.
    All state changes go through the reconciler.
    """

    def __init__(self, context: LessonContext, reconciler: ProgressReconciler) -> None:
        self.context = context
        self.reconciler = reconciler

    def _total_slides(self) -> int:
        progress = self.context.progress
        return progress.total_slides if progress is not None else 0

    def can_go_next(self) -> bool:
        progress = self.context.progress
        if progress is None:
            return False
        return progress.current_slide_index < progress.total_slides - 1

    def can_go_previous(self) -> bool:
        progress = self.context.progress
        if progress is None:
            return False
        return progress.current_slide_index > 0

    def go_next(self) -> typing.Optional[LessonProgress]:
        """Moves to the next slide, or marks the lesson finished when already on the last one."""
        progress = self.context.progress
        if progress is None:
            return None
        if self.can_go_next():
            return self.reconciler.advance(progress.current_slide_index + 1)
        return self.reconciler.advance(progress.current_slide_index, completed=True)

    def go_previous(self) -> typing.Optional[LessonProgress]:
        progress = self.context.progress
        if progress is None or not self.can_go_previous():
            return None
        return self.reconciler.advance(progress.current_slide_index - 1)

    def go_to(self, index: int) -> typing.Optional[LessonProgress]:
        if not 0 <= index < self._total_slides():
            return None
        return self.reconciler.advance(index)
