"""Tests for steps matrix filtering and sorting."""

import pytest

from src.vitelis.core.exceptions import ValidationError
from src.vitelis.models import StepStatus
from src.vitelis.schemas.report_steps import (
    MatrixCell,
    MatrixCompany,
    MatrixRow,
    MatrixStep,
    StepsMatrix,
)
from src.vitelis.services.steps_matrix import (
    cell_status,
    filter_matrix,
    parse_sort_key,
    parse_status_filter,
)

pytestmark = pytest.mark.unit


def _row(company_id: int, *statuses: StepStatus) -> MatrixRow:
    return MatrixRow(
        company_id=company_id,
        statuses=[
            MatrixCell(step_id=step_id, status=status)
            for step_id, status in zip((10, 20), statuses, strict=True)
        ],
    )


@pytest.fixture
def matrix() -> StepsMatrix:
    return StepsMatrix(
        companies=[
            MatrixCompany(id=1, name="Beta"),
            MatrixCompany(id=2, name="alpha"),
            MatrixCompany(id=3, name="Gamma"),
            MatrixCompany(id=4, name="Delta"),
        ],
        steps=[
            MatrixStep(id=10, name="collect", order=1),
            MatrixStep(id=20, name="summarize", order=2),
        ],
        matrix=[
            _row(1, StepStatus.DONE, StepStatus.PENDING),
            _row(2, StepStatus.ERROR, StepStatus.PENDING),
            _row(3, StepStatus.PROCESSING, StepStatus.DONE),
            _row(4, StepStatus.ERROR, StepStatus.ERROR),
        ],
    )


def _ids(result: StepsMatrix) -> list[int]:
    return [row.company_id for row in result.matrix]


class TestFilterMatrix:
    def test_default_sorts_by_name_case_insensitive(self, matrix):
        result = filter_matrix(matrix)
        assert _ids(result) == [2, 1, 4, 3]
        assert [c.id for c in result.companies] == [2, 1, 4, 3]

    def test_sort_by_name_descending(self, matrix):
        assert _ids(filter_matrix(matrix, descending=True)) == [3, 4, 1, 2]

    def test_sort_by_id(self, matrix):
        assert _ids(filter_matrix(matrix, sort_by="id")) == [1, 2, 3, 4]

    def test_search_matches_name_substring(self, matrix):
        result = filter_matrix(matrix, search="  ALP ")
        assert _ids(result) == [2]
        assert [c.name for c in result.companies] == ["alpha"]

    def test_search_matches_company_id(self, matrix):
        assert _ids(filter_matrix(matrix, search="3")) == [3]

    def test_blank_search_keeps_everything(self, matrix):
        assert len(filter_matrix(matrix, search="   ").matrix) == 4

    def test_status_filter_keeps_rows_with_any_matching_cell(self, matrix):
        result = filter_matrix(matrix, statuses=[StepStatus.ERROR])
        assert _ids(result) == [2, 4]

    def test_status_filter_only_considers_visible_steps(self, matrix):
        result = filter_matrix(matrix, statuses=[StepStatus.DONE], visible_step_ids=[20])
        assert _ids(result) == [3]
        assert [s.id for s in result.steps] == [20]
        assert all(len(row.statuses) == 1 for row in result.matrix)

    def test_sort_by_step_orders_by_severity_then_name(self, matrix):
        result = filter_matrix(matrix, sort_by=10)
        # ERROR (alpha, Delta), PROCESSING (Gamma), DONE (Beta)
        assert _ids(result) == [2, 4, 3, 1]

    def test_sort_by_step_descending_keeps_name_tiebreak(self, matrix):
        result = filter_matrix(matrix, sort_by=10, descending=True)
        assert _ids(result) == [1, 3, 2, 4]

    def test_input_matrix_is_not_modified(self, matrix):
        filter_matrix(matrix, visible_step_ids=[10], search="beta")
        assert len(matrix.matrix) == 4
        assert len(matrix.matrix[0].statuses) == 2


def test_cell_status_defaults_to_pending():
    row = MatrixRow(company_id=1, statuses=[])
    assert cell_status(row, 99) == StepStatus.PENDING


class TestParseSortKey:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("name", "name"), ("ID", "id"), (" 12 ", 12)],
    )
    def test_valid_values(self, value, expected):
        assert parse_sort_key(value) == expected

    @pytest.mark.parametrize("value", ["status", "-1", "1.5", ""])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationError, match="Invalid sort_by"):
            parse_sort_key(value)


class TestParseStatusFilter:
    def test_values_are_case_insensitive(self):
        assert parse_status_filter(["error", " Done "]) == [StepStatus.ERROR, StepStatus.DONE]

    @pytest.mark.parametrize("values", [None, []])
    def test_no_values_means_no_filter(self, values):
        assert parse_status_filter(values) is None

    def test_unknown_value(self):
        with pytest.raises(ValidationError, match="Invalid status value: failed"):
            parse_status_filter(["failed"])
