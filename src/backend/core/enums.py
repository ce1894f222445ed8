"""Closed value sets shared across the products module."""

from enum import IntEnum, StrEnum


class RoleEnum(IntEnum):
    admin = 1
    user = 2


class StatusEnum(IntEnum):
    active = 1
    inactive = 2


class AuthProvidersEnum(StrEnum):
    email = "email"
    facebook = "facebook"
    google = "google"
    apple = "apple"


# Membership is checked on the string form so that "1" and 1 both match.
VALID_ROLE_IDS: frozenset[str] = frozenset(str(role.value) for role in RoleEnum)
VALID_STATUS_IDS: frozenset[str] = frozenset(str(status.value) for status in StatusEnum)
