# sitecopy/schemas/content.py
# Pydantic: requests/responses del store de contenido (JSON en camelCase)
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EntryStatus = Literal["draft", "published", "archived"]
ChangeType = Literal["created", "updated", "status_changed", "published", "archived"]


class _CamelModel(BaseModel):
    # acepta snake_case y camelCase en entrada; responde en camelCase
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# ---------- Requests ----------
class ContentCreate(_CamelModel):
    key: str = Field(..., min_length=1, max_length=160)
    value: str = Field(..., min_length=1)
    locale: Optional[str] = Field(None, max_length=16)
    page: Optional[str] = Field(None, max_length=64)
    section: Optional[str] = Field(None, max_length=64)
    description: Optional[str] = Field(None, max_length=512)


class ContentUpdate(_CamelModel):
    value: str = Field(..., min_length=1)
    description: Optional[str] = Field(None, max_length=512)
    page: Optional[str] = Field(None, max_length=64)
    section: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None
    status: Optional[EntryStatus] = None
    # compare-and-swap opcional; si falta, gana la última escritura
    expected_version: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class ContentFilter:
    page: Optional[str] = None
    section: Optional[str] = None
    locale: Optional[str] = None
    search: Optional[str] = None
    limit: int = 100
    skip: int = 0


# ---------- Responses ----------
class ActorOut(_CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str


class HistorySnapshotOut(_CamelModel):
    version: int
    value: str
    description: Optional[str] = None
    status: EntryStatus
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None
    change_type: ChangeType
    updated_by_user: Optional[ActorOut] = None


class ContentEntryOut(_CamelModel):
    id: int
    key: str
    locale: str
    value: str
    description: Optional[str] = None
    page: Optional[str] = None
    section: Optional[str] = None
    is_active: bool
    status: EntryStatus
    version: int
    updated_by: Optional[int] = None
    change_history: List[HistorySnapshotOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContentListOut(_CamelModel):
    total: int
    limit: int
    skip: int
    entries: List[ContentEntryOut]


class ContentHistoryOut(_CamelModel):
    id: int
    key: str
    locale: str
    history: List[HistorySnapshotOut]


class ContentValueOut(_CamelModel):
    key: str
    locale: str
    value: str
    from_cache: bool = False


class CacheFlushOut(_CamelModel):
    key: str
    locale: Optional[str] = None
    evicted: int
