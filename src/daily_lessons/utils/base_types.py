import typing

UserId = typing.NewType("UserId", str)
AccessToken = typing.NewType("AccessToken", str)

LessonId = typing.NewType("LessonId", str)
SlideId = typing.NewType("SlideId", str)
IsoDate = typing.NewType("IsoDate", str)
IsoTimestamp = typing.NewType("IsoTimestamp", str)
