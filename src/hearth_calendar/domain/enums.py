from __future__ import annotations

from enum import Enum


class ActivityCategory(str, Enum):
    SPORTS = "sports"
    EDUCATION = "education"
    SOCIAL = "social"
    CHORES = "chores"
    HEALTH = "health"
    OTHER = "other"


class TransportMethod(str, Enum):
    CAR = "car"
    BUS = "bus"
    WALK = "walk"
    BIKE = "bike"


class ResolutionAction(str, Enum):
    SKIP = "skip"
    UPDATE = "update"
    CREATE = "create"
