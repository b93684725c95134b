"""Tests for stage status-change validation."""

from datetime import date

import pytest

from stageplan.domain.stages import StageDependency, StageExecution, StageStatus
from stageplan.domain.validation import check_transition, parse_status, validate_stage_change
from stageplan.domain.workflow import default_stage_dependencies

TODAY = date(2025, 9, 15)
FS_COMPLETED = StageExecution(status=StageStatus.COMPLETED, actual_start=date(2025, 9, 1), completed_on=date(2025, 9, 10))
DEPENDENCIES = [StageDependency("IPA", "FS")]


def _validate(stages, stage_code="IPA", target_status="Completed", target_date=None, **kwargs):
    return validate_stage_change(
        stages,
        kwargs.pop("dependencies", DEPENDENCIES),
        stage_code=stage_code,
        target_status=target_status,
        target_date=target_date,
        today=TODAY,
        **kwargs,
    )


class TestParseStatus:
    @pytest.mark.parametrize("raw", ["completed", "COMPLETED", " Completed "])
    def test_case_insensitive(self, raw):
        assert parse_status(raw) == StageStatus.COMPLETED

    def test_unknown(self):
        assert parse_status("Done") is None


class TestCheckTransition:
    def test_same_status_rejected(self):
        assert check_transition(StageStatus.IN_PROGRESS, StageStatus.IN_PROGRESS, None) is not None

    def test_start_from_not_started(self):
        assert check_transition(StageStatus.NOT_STARTED, StageStatus.IN_PROGRESS, None) is None

    def test_reopen_completed_requires_date(self):
        assert check_transition(StageStatus.COMPLETED, StageStatus.IN_PROGRESS, None) == (
            "Reopening to InProgress requires an actual start date."
        )
        assert check_transition(StageStatus.COMPLETED, StageStatus.IN_PROGRESS, TODAY) is None

    def test_cannot_complete_skipped(self):
        assert check_transition(StageStatus.SKIPPED, StageStatus.COMPLETED, TODAY) == (
            "Changing from Skipped to Completed is not allowed."
        )

    def test_cannot_block_completed(self):
        assert check_transition(StageStatus.COMPLETED, StageStatus.BLOCKED, None) == "Completed stages cannot be blocked."

    def test_only_unstarted_can_be_skipped(self):
        assert check_transition(StageStatus.IN_PROGRESS, StageStatus.SKIPPED, None) is not None
        assert check_transition(StageStatus.NOT_STARTED, StageStatus.SKIPPED, None) is None

    def test_reopen_to_not_started(self):
        assert check_transition(StageStatus.BLOCKED, StageStatus.NOT_STARTED, None) is None
        assert check_transition(StageStatus.IN_PROGRESS, StageStatus.NOT_STARTED, None) == (
            "Only completed, skipped, or blocked stages can be reopened."
        )


class TestValidateStageChange:
    def test_completion_before_predecessor_rejected_with_suggestion(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution(status=StageStatus.IN_PROGRESS)}

        result = _validate(stages, target_date=date(2025, 9, 9))

        assert not result.is_valid
        assert result.suggested_auto_start == date(2025, 9, 10)
        assert (
            "Completion date cannot be earlier than 2025-09-10, when the latest predecessor completed."
            in result.errors
        )

    def test_completion_after_predecessor_accepted(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution(status=StageStatus.IN_PROGRESS)}

        result = _validate(stages, target_date=date(2025, 9, 12))

        assert result.is_valid
        assert result.errors == []
        assert result.suggested_auto_start == date(2025, 9, 10)

    def test_incomplete_predecessor_reported_missing(self):
        stages = {"FS": StageExecution(status=StageStatus.IN_PROGRESS), "IPA": StageExecution()}

        result = _validate(stages, target_status="InProgress", target_date=date(2025, 9, 12))

        assert not result.is_valid
        assert result.missing_predecessors == ["FS"]

    def test_skipped_predecessor_satisfied(self):
        stages = {"FS": StageExecution(status=StageStatus.SKIPPED), "IPA": StageExecution()}

        result = _validate(stages, target_status="InProgress", target_date=date(2025, 9, 12))

        assert result.is_valid

    def test_pnc_not_required_when_not_applicable(self):
        stages = {
            "COB": StageExecution(status=StageStatus.COMPLETED, completed_on=date(2025, 9, 5)),
            "PNC": StageExecution(),
            "EAS": StageExecution(),
        }
        dependencies = default_stage_dependencies("v")

        blocked = _validate(stages, "EAS", "InProgress", date(2025, 9, 8), dependencies=dependencies)
        allowed = _validate(
            stages, "EAS", "InProgress", date(2025, 9, 8), dependencies=dependencies, pnc_applicable=False
        )

        assert blocked.missing_predecessors == ["PNC"]
        assert allowed.is_valid

    def test_future_dates_rejected(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution()}

        started = _validate(stages, target_status="InProgress", target_date=date(2025, 9, 16))
        completed = _validate(stages, target_date=date(2025, 9, 16))

        assert "Actual start date cannot be in the future." in started.errors
        assert "Completion date cannot be in the future." in completed.errors

    def test_completion_date_required_unless_hod(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution(status=StageStatus.IN_PROGRESS)}

        assert "A completion date is required when completing a stage." in _validate(stages).errors
        assert _validate(stages, is_hod=True).is_valid

    def test_completion_before_actual_start_rejected(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution(status=StageStatus.IN_PROGRESS, actual_start=date(2025, 9, 12))}

        result = _validate(stages, target_date=date(2025, 9, 11))

        assert "Completion date cannot be before the actual start date." in result.errors

    def test_hod_gets_force_override_warning(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution(status=StageStatus.IN_PROGRESS)}

        result = _validate(stages, target_date=date(2025, 9, 9), is_hod=True)

        assert result.warnings == ["Completion before the latest predecessor requires a force override."]
        assert not result.is_valid

    @pytest.mark.parametrize(
        "stage_code,target_status,expected",
        [
            ("", "Completed", "A stage code is required."),
            ("IPA", " ", "A target status is required."),
            ("IPA", "Done", "The target status is not recognised."),
            ("XYZ", "Completed", "The requested stage was not found for this project."),
        ],
    )
    def test_request_errors(self, stage_code, target_status, expected):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution()}

        result = _validate(stages, stage_code=stage_code, target_status=target_status)

        assert result.errors == [expected]

    def test_no_stages(self):
        assert _validate({}).errors == ["No stages were found for this project."]

    def test_stage_code_case_insensitive(self):
        stages = {"FS": FS_COMPLETED, "IPA": StageExecution(status=StageStatus.IN_PROGRESS)}

        assert _validate(stages, stage_code="ipa", target_date=date(2025, 9, 12)).is_valid
