"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ReportFactory, ...
"""

from tests.factories.analyze import (
    AnalyzeFactory,
    SalesMinerAnalyzeFactory,
    VitelisSalesAnalyzeFactory,
)
from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.report import (
    CompanyFactory,
    DataCollectionQueryFactory,
    GenerationStepFactory,
    ReportFactory,
    ReportSettingsFactory,
    ValidatorSettingsFactory,
)
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    # Analyses
    "AnalyzeFactory",
    "SalesMinerAnalyzeFactory",
    "VitelisSalesAnalyzeFactory",
    # Deep dives
    "CompanyFactory",
    "GenerationStepFactory",
    "ReportFactory",
    "ReportSettingsFactory",
    "ValidatorSettingsFactory",
    "DataCollectionQueryFactory",
]
