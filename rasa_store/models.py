from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field

Record = dict[str, Any]


def new_id() -> str:
    return uuid.uuid4().hex[:9]


class LogEntry(BaseModel):
    id: str
    action: str
    timestamp: str


class OTPRecord(BaseModel):
    email: str
    code: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class BackupEntry(BaseModel):
    id: str
    timestamp: str
    size: str
    description: str
    snapshot: dict[str, Any]


class HealthSnapshot(BaseModel):
    status: str
    size: str
    size_bytes: int
    collections: dict[str, int] = Field(default_factory=dict)
    timestamp: str
    version: str


class StoreState(BaseModel):
    """
    Mirrors the persisted store blob:
      {
        "collections": { "<name>": [ {...newest...}, ..., {...oldest...} ] },
        "singletons": { "<name>": {...} },
        "logs": [ {"id", "action", "timestamp"}, ... ],
        "otps": [ {"email", "code", "expires_at"}, ... ]
      }
    """

    collections: dict[str, list[Record]] = Field(default_factory=dict)
    singletons: dict[str, Record] = Field(default_factory=dict)
    logs: list[LogEntry] = Field(default_factory=list)
    otps: list[OTPRecord] = Field(default_factory=list)

    @classmethod
    def from_disk_doc(cls, doc: Mapping[str, Any]) -> "StoreState":
        return cls.model_validate(doc)

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def drop_expired_otps(self, now: float) -> int:
        before = len(self.otps)
        self.otps = [o for o in self.otps if not o.is_expired(now)]
        return before - len(self.otps)


@dataclass(frozen=True)
class OTPVerification:
    success: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.success


StorePhase = Literal["uninitialized", "seeded", "active"]
