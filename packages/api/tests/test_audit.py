# This project was developed with assistance from AI tools.
"""Tests for the access audit trail writer."""

import json

import pytest
from db.enums import UserRole

from src.core.errors import Forbidden
from src.services.audit import ACTION_ACCESS_DENIED, ACTION_VIEW_CASE, record_denial, write_audit_event

from factories import make_subject
from fakes import FakeQueryClient


@pytest.mark.asyncio
async def test_write_audit_event_inserts_row():
    store = FakeQueryClient()
    subject = make_subject(id=4, username="ana")

    await write_audit_event(store, subject=subject, action=ACTION_VIEW_CASE, details={"case_id": 9})

    sql, params = store.calls[0]
    assert sql == (
        "INSERT INTO access_logs (user_id, username, action, details) VALUES ($1, $2, $3, $4)"
    )
    assert params[:3] == [4, "ana", "VIEW_CASE"]
    assert json.loads(params[3]) == {"case_id": 9}


@pytest.mark.asyncio
async def test_write_audit_event_without_details():
    store = FakeQueryClient()
    await write_audit_event(store, subject=make_subject(), action=ACTION_VIEW_CASE)
    assert store.audit_rows[0][3] is None


@pytest.mark.asyncio
async def test_record_denial_carries_subject_and_resource():
    store = FakeQueryClient()
    subject = make_subject(UserRole.OVERSIGHT, home_unit_id=2, id=8)
    exc = Forbidden("outside scope", subject_id=8, resource_id=31)

    await record_denial(store, subject, exc, resource="forwardings")

    row = store.audit_rows[0]
    assert row[0] == 8
    assert row[2] == ACTION_ACCESS_DENIED
    assert json.loads(row[3]) == {
        "resource": "forwardings",
        "resource_id": 31,
        "role": "oversight",
        "reason": "outside scope",
    }
