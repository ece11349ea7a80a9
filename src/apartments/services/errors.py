"""Error kinds raised by the booking admission engine."""


class AdmissionError(Exception):
    """Base for every client-facing booking rejection."""
    kind = "ValidationError"
    default_message = "Invalid booking request."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(AdmissionError):
    kind = "NotFound"
    default_message = "Apartment not found."


class Unavailable(AdmissionError):
    kind = "Unavailable"
    default_message = "Apartment is not available for booking."


class InvalidDateRange(AdmissionError):
    kind = "InvalidDateRange"
    default_message = "Check-out date must be after check-in date."


class CapacityExceeded(AdmissionError):
    kind = "CapacityExceeded"
    default_message = "Number of guests exceeds apartment capacity."


class MissingGuestInfo(AdmissionError):
    kind = "MissingGuestInfo"
    default_message = "Guest name, email, and phone are required."


class DateConflict(AdmissionError):
    kind = "DateConflict"
    default_message = "Apartment is already booked for the selected dates."


class FieldValidationError(AdmissionError):
    kind = "ValidationError"
