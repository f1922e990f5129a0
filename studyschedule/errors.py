"""Exception hierarchy for the schedule manager.

The status / filter engine itself never raises on well-typed input; these
errors come from the layers around it (storage decoding, the event form,
import, config).
"""


class ScheduleError(Exception):
    """Base exception for all schedule errors."""

    pass


class MalformedTimestampError(ScheduleError):
    """A startTime / endTime value cannot be parsed into a valid instant.

    Only raised by strict parsing. Storage decoding catches it and keeps the
    event with a missing timestamp, which the engine classifies as past.
    """

    def __init__(self, value: object) -> None:
        super().__init__(f"Malformed timestamp: {value!r}")
        self.value = value


class EventValidationError(ScheduleError):
    """User-supplied event fields are missing or invalid."""

    pass


class EventNotFoundError(ScheduleError):
    """No event with the requested id exists in the collection."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class ScheduleImportError(ScheduleError):
    """An import source could not be read or is not a schedule document."""

    pass


class ConfigError(ScheduleError):
    """The configuration file is unreadable or contains invalid values."""

    pass
