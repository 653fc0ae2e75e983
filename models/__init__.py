"""
Data models for the Manufacturer Search Engine
"""
from .company import CompanyRecord
from .criteria import SearchCriteria, EmployeeRange, EmployeeOperator, CreditRating
from .outcome import Outcome
from .requests import SearchRequest
from .responses import (
    SearchResponse,
    ScoredCompany,
    MatchedField,
    ResultSource,
    ConnectionStatus,
    DatabaseStatistics
)

__all__ = [
    # Records
    "CompanyRecord",
    # Criteria
    "SearchCriteria",
    "EmployeeRange",
    "EmployeeOperator",
    "CreditRating",
    # Request/Response
    "SearchRequest",
    "SearchResponse",
    "ScoredCompany",
    "MatchedField",
    "ResultSource",
    "ConnectionStatus",
    "DatabaseStatistics",
    # Results
    "Outcome",
]
