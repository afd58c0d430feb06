"""Single-shot status signal and the snapshot published to subscribers."""

from dataclasses import dataclass
from enum import StrEnum

from weathersync.models.location import TrackedLocation


class StatusKind(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    NAVIGATE = "navigate"


@dataclass(frozen=True)
class TransientStatus:
    kind: StatusKind
    message: str = ""
    page: int | None = None  # only set for NAVIGATE

    @classmethod
    def idle(cls) -> "TransientStatus":
        return cls(StatusKind.IDLE)

    @classmethod
    def loading(cls) -> "TransientStatus":
        return cls(StatusKind.LOADING)

    @classmethod
    def success(cls, message: str) -> "TransientStatus":
        return cls(StatusKind.SUCCESS, message)

    @classmethod
    def error(cls, message: str) -> "TransientStatus":
        return cls(StatusKind.ERROR, message)

    @classmethod
    def navigate(cls, page: int) -> "TransientStatus":
        return cls(StatusKind.NAVIGATE, page=page)

    @property
    def is_idle(self) -> bool:
        return self.kind == StatusKind.IDLE


IDLE = TransientStatus.idle()


@dataclass(frozen=True)
class SyncSnapshot:
    locations: tuple[TrackedLocation, ...]
    status: TransientStatus
