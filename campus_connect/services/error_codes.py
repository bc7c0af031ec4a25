from enum import Enum


class ErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_REGISTRATION_FIELDS = "MISSING_REGISTRATION_FIELDS"
    INVALID_FILE = "INVALID_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    NOT_FOUND = "NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NOT_REGISTERED = "NOT_REGISTERED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    PHOTO_NOT_FOUND = "PHOTO_NOT_FOUND"

    CONFLICT = "CONFLICT"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    AT_CAPACITY = "AT_CAPACITY"
    CAPACITY_BELOW_ATTENDEES = "CAPACITY_BELOW_ATTENDEES"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    PROFILE_EXISTS = "PROFILE_EXISTS"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"

    INTERNAL = "INTERNAL"
