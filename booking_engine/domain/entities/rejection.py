from enum import Enum


class RejectionReason(str, Enum):
    OUTSIDE_HOURS = "OUTSIDE_HOURS"
    OVERLAPS_BOOKING = "OVERLAPS_BOOKING"
    IN_PAST = "IN_PAST"
    EMPTY_PATTERN = "EMPTY_PATTERN"
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    SERVICE_INACTIVE = "SERVICE_INACTIVE"
