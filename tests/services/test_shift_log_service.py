"""Tests for ShiftLogService.list_entries()."""

import uuid
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from stageplan.db.models import StageShiftLog
from stageplan.services.shift_log_service import ShiftLogService

pytestmark = pytest.mark.unit

PROJECT_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")


def _mock_session(entries: list):
    mock_scalars = MagicMock()
    mock_scalars.all = MagicMock(return_value=entries)
    mock_result = MagicMock()
    mock_result.scalars = MagicMock(return_value=mock_scalars)

    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(return_value=mock_result)
    return mock_session


def _entry(stage_code: str) -> StageShiftLog:
    return StageShiftLog(
        project_id=PROJECT_ID,
        stage_code=stage_code,
        old_forecast_due=date(2025, 9, 15),
        new_forecast_due=date(2025, 9, 17),
        delta_days=2,
        cause_type="StageCompleted",
    )


async def test_list_entries_returns_rows():
    entries = [_entry("IPA"), _entry("SOW")]
    session = _mock_session(entries)

    result = await ShiftLogService(session).list_entries(PROJECT_ID)

    assert result == entries


async def test_list_entries_orders_newest_first_and_limits():
    session = _mock_session([])

    await ShiftLogService(session).list_entries(PROJECT_ID, limit=25)

    query = session.execute.await_args.args[0]
    compiled = str(query)
    assert "ORDER BY stage_shift_logs.created_at DESC" in compiled
    assert "LIMIT" in compiled
    assert "stage_shift_logs.stage_code" not in compiled.split("WHERE", 1)[1]


async def test_list_entries_filters_by_normalized_stage_code():
    session = _mock_session([])

    await ShiftLogService(session).list_entries(PROJECT_ID, stage_code=" ipa ")

    query = session.execute.await_args.args[0]
    assert "upper(stage_shift_logs.stage_code)" in str(query)
    assert "IPA" in query.compile().params.values()
