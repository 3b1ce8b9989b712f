from __future__ import annotations

from datetime import datetime
from typing import Any

from models.booking import BookingFieldsMixin


class AuditService:
    """Maintains the audit sub-structure carried on every booking document."""

    UNKNOWN_USER = "Unknown"

    @staticmethod
    def _safe_username(username: str | None) -> str:
        normalized = (username or "").strip()
        return normalized or AuditService.UNKNOWN_USER

    @staticmethod
    def _stringify(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, dict):
            return str(value.get("name") or value.get("type") or "")
        if isinstance(value, list):
            return ", ".join(AuditService._stringify(item) for item in value)
        return str(value)

    @staticmethod
    def build_action(
        field: str,
        username: str | None,
        value: Any,
        at_time: datetime | None = None,
    ) -> dict:
        return {
            "field": field,
            "user": AuditService._safe_username(username),
            "value": AuditService._stringify(value),
            "timestamp": (at_time or datetime.utcnow()).isoformat(),
        }

    @staticmethod
    def stamp_created(document: BookingFieldsMixin, username: str | None) -> None:
        user = AuditService._safe_username(username)
        now = datetime.utcnow()
        document.created_by = user  # type: ignore[assignment]
        document.created_at = now  # type: ignore[assignment]
        document.last_edited_by = user  # type: ignore[assignment]
        document.last_edited_at = now  # type: ignore[assignment]
        document.actions = []  # type: ignore[assignment]

    @staticmethod
    def record_changes(
        document: BookingFieldsMixin,
        username: str | None,
        changes: dict[str, Any],
    ) -> None:
        """Append one action per changed field and bump the last-edited stamp."""
        if not changes:
            return
        now = datetime.utcnow()
        # Reassign so the JSON column is flagged dirty
        actions = list(document.actions or [])
        for field, value in changes.items():
            actions.append(AuditService.build_action(field, username, value, now))
        document.actions = actions  # type: ignore[assignment]
        document.last_edited_by = AuditService._safe_username(username)  # type: ignore[assignment]
        document.last_edited_at = now  # type: ignore[assignment]

    @staticmethod
    def trail(document: BookingFieldsMixin) -> dict:
        return {
            "created_by": document.created_by,
            "created_at": document.created_at,
            "last_edited_by": document.last_edited_by,
            "last_edited_at": document.last_edited_at,
            "actions": list(document.actions or []),
        }


__all__ = ["AuditService"]
