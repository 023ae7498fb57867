from datetime import datetime

from pydantic import BaseModel


class IndustryRead(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CompanyRead(BaseModel):
    id: int
    name: str
    url: str | None
    industry_id: int | None

    model_config = {"from_attributes": True}


class ReportRead(BaseModel):
    id: int
    name: str
    description: str | None
    use_case: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReportDetail(ReportRead):
    companies: list[CompanyRead]
