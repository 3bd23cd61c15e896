"""Identity enums."""

from enum import Enum


class IdentityKind(str, Enum):
    """Discriminant of the identity union."""

    PRIMARY = "primary"
    LINKED = "linked"
