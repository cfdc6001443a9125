import typing


class LessonSyncError(Exception):
    """
    Base class for every failure raised by the lesson gateway and session provider.

    `message` is safe to show to the user; `context` holds debugging details that
    only go to the logs.
    """

    default_message = "Something went wrong loading today's lesson. Using offline lesson."

    def __init__(self, message: typing.Optional[str] = None, context: typing.Optional[dict[str, typing.Any]] = None):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)


class TransportError(LessonSyncError):
    """Network, timeout or authentication failure talking to the backend."""

    default_message = "No internet connection. Using offline lesson."

    def __init__(
        self,
        message: typing.Optional[str] = None,
        status_code: typing.Optional[int] = None,
        context: typing.Optional[dict[str, typing.Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message, ctx)
        self.status_code = status_code


class NotFoundError(LessonSyncError):
    default_message = "No lesson found for today. Using offline lesson."


class DecodeError(LessonSyncError):
    default_message = "Unable to parse lesson data. Using offline lesson."


class WriteRejectedError(LessonSyncError):
    """The backend answered a progress write with success=false."""

    default_message = "Progress update was not accepted by the server."
