"""Pure filtering and sorting over an already loaded steps matrix."""

from collections.abc import Collection

from src.vitelis.core.exceptions import ValidationError
from src.vitelis.models.enums import StepStatus
from src.vitelis.schemas.report_steps import MatrixRow, StepsMatrix

# Rank used when sorting by a step column: ERROR first, DONE last
STATUS_SEVERITY_RANK: dict[StepStatus, int] = {
    StepStatus.ERROR: 0,
    StepStatus.PROCESSING: 1,
    StepStatus.PENDING: 2,
    StepStatus.DONE: 3,
}

SORT_BY_NAME = "name"
SORT_BY_ID = "id"


def cell_status(row: MatrixRow, step_id: int) -> StepStatus:
    for cell in row.statuses:
        if cell.step_id == step_id:
            return cell.status
    return StepStatus.PENDING


def filter_matrix(
    matrix: StepsMatrix,
    search: str | None = None,
    statuses: Collection[StepStatus] | None = None,
    visible_step_ids: Collection[int] | None = None,
    sort_by: str | int = SORT_BY_NAME,
    descending: bool = False,
) -> StepsMatrix:
    """Narrow a matrix snapshot for display.

    ``search`` matches the company name or id as a case-insensitive substring.
    ``visible_step_ids`` hides the other step columns. ``statuses`` keeps rows
    where a visible cell has one of the statuses. ``sort_by`` is ``"name"``,
    ``"id"`` or a step id; step columns sort by severity with ties broken by
    company name.
    """
    names = {company.id: company.name for company in matrix.companies}

    steps = matrix.steps
    if visible_step_ids is not None:
        visible = set(visible_step_ids)
        steps = [step for step in steps if step.id in visible]
    step_ids = {step.id for step in steps}

    rows = [
        MatrixRow(
            company_id=row.company_id,
            statuses=[cell for cell in row.statuses if cell.step_id in step_ids],
        )
        for row in matrix.matrix
    ]

    if search and search.strip():
        needle = search.strip().lower()
        rows = [
            row
            for row in rows
            if needle in names.get(row.company_id, "").lower() or needle in str(row.company_id)
        ]

    if statuses:
        wanted = set(statuses)
        rows = [row for row in rows if any(cell.status in wanted for cell in row.statuses)]

    def name_key(row: MatrixRow) -> str:
        return names.get(row.company_id, "").lower()

    if sort_by == SORT_BY_ID:
        rows.sort(key=lambda row: row.company_id, reverse=descending)
    elif sort_by == SORT_BY_NAME:
        rows.sort(key=name_key, reverse=descending)
    else:
        step_id = int(sort_by)
        # Two stable passes so ties stay in ascending name order
        rows.sort(key=name_key)
        rows.sort(
            key=lambda row: STATUS_SEVERITY_RANK[cell_status(row, step_id)],
            reverse=descending,
        )

    position = {row.company_id: index for index, row in enumerate(rows)}
    companies = sorted(
        (company for company in matrix.companies if company.id in position),
        key=lambda company: position[company.id],
    )
    return StepsMatrix(companies=companies, steps=steps, matrix=rows)


def parse_sort_key(value: str) -> str | int:
    """Query value for ``sort_by``: ``name``, ``id`` or a numeric step id."""
    value = value.strip().lower()
    if value in (SORT_BY_NAME, SORT_BY_ID):
        return value
    if value.isdigit():
        return int(value)
    raise ValidationError(f"Invalid sort_by value: {value}")


def parse_status_filter(values: Collection[str] | None) -> list[StepStatus] | None:
    """Query values for ``status``, matched case-insensitively."""
    if not values:
        return None
    statuses = []
    for value in values:
        try:
            statuses.append(StepStatus(value.strip().upper()))
        except ValueError as e:
            raise ValidationError(f"Invalid status value: {value}") from e
    return statuses
