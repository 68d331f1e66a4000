"""Schemas for the notification integrity admin endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .notification import NotificationRead


class ValidationIssueRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field: str
    issue: str
    value: Any = None


class InvalidNotificationRead(BaseModel):
    notification: NotificationRead
    issues: list[ValidationIssueRead]


class InvalidNotificationScan(BaseModel):
    """Result of scanning the newest notifications for broken references."""

    total: int
    invalid: int
    types: dict[str, int] = Field(default_factory=dict)
    items: list[InvalidNotificationRead] = Field(default_factory=list)


class InvalidNotificationDeleteRequest(BaseModel):
    ids: list[int] = Field(default_factory=list)


class DeletionResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    count: int = 0
    error: str | None = None


__all__ = [
    "DeletionResultRead",
    "InvalidNotificationDeleteRequest",
    "InvalidNotificationRead",
    "InvalidNotificationScan",
    "ValidationIssueRead",
]
