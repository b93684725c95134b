"""Tests for the bulk recompute script."""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scripts import recompute_forecasts
from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.services.forecast_writer import RecomputeResult

pytestmark = pytest.mark.unit


def _mock_session_factory(project_ids: list):
    ids_result = MagicMock()
    ids_result.scalars = MagicMock(return_value=MagicMock(all=MagicMock(return_value=project_ids)))

    mock_session = AsyncMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    mock_session.execute = AsyncMock(return_value=ids_result)

    mock_factory = MagicMock()
    mock_factory.return_value = mock_session
    return mock_factory


async def test_failing_projects_do_not_stop_the_batch(capsys):
    project_ids = [uuid.uuid4(), uuid.uuid4(), uuid.uuid4()]
    writer = MagicMock()
    writer.recompute = AsyncMock(
        side_effect=[
            RuntimeError("connection reset"),
            ScheduleIntegrityError("DurationDays missing for stage 'IPA'"),
            RecomputeResult(project_id=project_ids[2]),
        ]
    )

    with (
        patch.object(recompute_forecasts, "configure_structlog"),
        patch.object(recompute_forecasts, "init_db", AsyncMock()),
        patch.object(recompute_forecasts, "close_db", AsyncMock()) as close_db,
        patch.object(recompute_forecasts, "get_session_factory", return_value=_mock_session_factory(project_ids)),
        patch.object(recompute_forecasts, "ForecastWriter", return_value=writer),
    ):
        await recompute_forecasts.main()

    output = capsys.readouterr().out
    assert writer.recompute.await_count == 3
    assert f"{project_ids[0]} | FAILED (RuntimeError): connection reset" in output
    assert f"{project_ids[1]} | FAILED (data)" in output
    assert f"{project_ids[2]} | shifts=0" in output
    assert "ALL DONE (2 failure(s))" in output
    close_db.assert_awaited_once()
