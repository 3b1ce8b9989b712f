from datetime import datetime

from models.booking import BookingEntry
from services.audit_service import AuditService


def test_build_action_shape():
    action = AuditService.build_action("si_filed", "ravi", True, datetime(2025, 6, 1, 9, 30))
    assert action == {
        "field": "si_filed",
        "user": "ravi",
        "value": "true",
        "timestamp": "2025-06-01T09:30:00",
    }


def test_unknown_user_fallback():
    assert AuditService.build_action("remarks", None, "x")["user"] == "Unknown"
    assert AuditService.build_action("remarks", "   ", "x")["user"] == "Unknown"


def test_values_are_stringified():
    assert AuditService._stringify({"name": "MAERSK"}) == "MAERSK"
    assert AuditService._stringify([{"type": "40HC"}, "X"]) == "40HC, X"
    assert AuditService._stringify(None) == ""


def test_record_changes_appends_in_order():
    entry = BookingEntry(booking_no="A1")
    AuditService.stamp_created(entry, "ravi")
    assert entry.created_by == "ravi"
    assert entry.actions == []

    AuditService.record_changes(entry, "sunita", {"remarks": "one", "voyage": "22W"})
    AuditService.record_changes(entry, "sunita", {})
    assert [a["field"] for a in entry.actions] == ["remarks", "voyage"]
    assert entry.last_edited_by == "sunita"
    assert AuditService.trail(entry)["actions"] == entry.actions
