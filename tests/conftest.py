"""
PyTest configuration and fixtures for the search engine tests

Provides:
- In-memory company store that evaluates RemoteQuery predicates
- Store that fails every call (unreachable database)
- Search service wired to either store, with assist disabled
"""
import os
import sys
from typing import Any, Dict, List, Optional

import pytest

# Add the project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Settings
from models.query import RemoteQuery, Predicate, PredicateOp
from services.company_search import CompanySearchService
from services.criteria_extraction import CriteriaExtractor
from utils.errors import DataAccessError


SAMPLE_COMPANIES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "company_name_en": "Hangzhou Silkroad Textiles Co., Ltd.",
        "company_name_cn": "杭州丝路纺织有限公司",
        "province": "Zhejiang",
        "address": "Xiaoshan District, Hangzhou",
        "established_year": 2005,
        "employee_count": 300,
        "category": "Textiles",
        "main_products": "silk fabric, scarves",
        "keywords": "textile, silk",
        "credit_rating": "AA",
        "official_website": "https://silkroad.example.cn",
    },
    {
        "id": 2,
        "company_name_en": "Guangzhou Floorking PVC Co., Ltd.",
        "company_name_cn": "广州地板王有限公司",
        "province": "Guangdong",
        "address": "Panyu District, Guangzhou",
        "established_year": 2011,
        "employee_count": 50,
        "category": "Building Materials",
        "main_products": "PVC flooring, vinyl sheet",
        "keywords": "pvc, flooring",
        "credit_rating": "A",
        "official_website": "https://floorking.example.cn",
    },
    {
        "id": 3,
        "company_name_en": "Shenzhen Glow LED Co., Ltd.",
        "company_name_cn": "深圳光辉LED有限公司",
        "province": "Guangdong",
        "address": "Longhua District, Shenzhen",
        "established_year": 2016,
        "employee_count": 49,
        "category": "Lighting",
        "main_products": "LED bulbs, LED tubes",
        "keywords": "led, lighting",
        "credit_rating": "B",
        "official_website": None,
    },
    {
        "id": 4,
        "company_name_en": "Jiangsu Northstar Machinery Co., Ltd.",
        "company_name_cn": "江苏北星机械有限公司",
        "province": "Jiangsu",
        "address": "Wuxi",
        "established_year": 1999,
        "employee_count": 800,
        "category": "Machinery",
        "main_products": "packaging machines",
        "keywords": "machinery, packaging",
        "credit_rating": "AAA",
        "official_website": "https://northstar.example.cn",
    },
]


def _matches(row: Dict[str, Any], predicate: Predicate) -> bool:
    """Evaluate one predicate the way PostgREST would"""
    if predicate.op == PredicateOp.CONTAINS_ANY:
        return any(
            str(value).lower() in str(row.get(column) or "").lower()
            for value in predicate.values
            for column in predicate.columns
        )

    value = row.get(predicate.columns[0])

    if predicate.op == PredicateOp.NOT_NULL:
        return value is not None
    if predicate.op == PredicateOp.IN:
        return value in predicate.values
    if value is None:
        return False
    if predicate.op == PredicateOp.GTE:
        return value >= predicate.values[0]
    if predicate.op == PredicateOp.LTE:
        return value <= predicate.values[0]
    if predicate.op == PredicateOp.LT:
        return value < predicate.values[0]

    raise AssertionError(f"unexpected predicate {predicate.op}")


class FakeCompanyStore:
    """In-memory stand-in for utils.supabase_client.CompanyStore"""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, table: str = "companies"):
        self.rows = list(SAMPLE_COMPANIES if rows is None else rows)
        self.table = table
        self.queries: List[RemoteQuery] = []

    async def count(self) -> int:
        return len(self.rows)

    async def fetch(self, remote_query: RemoteQuery) -> List[Dict[str, Any]]:
        self.queries.append(remote_query)
        matched = [
            row for row in self.rows
            if all(_matches(row, p) for p in remote_query.predicates)
        ]
        return matched[:remote_query.limit]

    async def get_by_id(self, company_id: int) -> Optional[Dict[str, Any]]:
        return next((row for row in self.rows if row["id"] == company_id), None)

    async def sample(self, limit: int = 3) -> List[Dict[str, Any]]:
        return self.rows[:limit]

    async def distinct_values(self, column: str) -> List[str]:
        return sorted({row[column] for row in self.rows if row.get(column)})


class FailingCompanyStore(FakeCompanyStore):
    """Every call fails like an unreachable database"""

    async def count(self) -> int:
        raise DataAccessError("connection refused")

    async def fetch(self, remote_query: RemoteQuery) -> List[Dict[str, Any]]:
        raise DataAccessError("connection refused")

    async def get_by_id(self, company_id: int) -> Optional[Dict[str, Any]]:
        raise DataAccessError("connection refused")

    async def sample(self, limit: int = 3) -> List[Dict[str, Any]]:
        raise DataAccessError("connection refused")

    async def distinct_values(self, column: str) -> List[str]:
        raise DataAccessError("connection refused")


class QueryFailingStore(FakeCompanyStore):
    """Probe succeeds, the filtered query is rejected"""

    async def fetch(self, remote_query: RemoteQuery) -> List[Dict[str, Any]]:
        self.queries.append(remote_query)
        raise DataAccessError("query rejected")


@pytest.fixture
def test_settings():
    return Settings(
        supabase_url="",
        supabase_key="",
        openai_api_key="",
        companies_table="companies",
    )


@pytest.fixture
def fake_store():
    return FakeCompanyStore()


@pytest.fixture
def failing_store():
    return FailingCompanyStore()


@pytest.fixture
def search_service(fake_store, test_settings):
    return CompanySearchService(
        store=fake_store,
        extractor=CriteriaExtractor(assist=None),
        config=test_settings
    )


@pytest.fixture
def offline_search_service(failing_store, test_settings):
    return CompanySearchService(
        store=failing_store,
        extractor=CriteriaExtractor(assist=None),
        config=test_settings
    )
