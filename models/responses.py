"""
Response models for search engine API
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from enum import Enum

from models.company import CompanyRecord
from models.criteria import SearchCriteria


class MatchedField(str, Enum):
    """Rationale labels attached to a scored company"""
    PRODUCTS = "products"
    LOCATION = "location"
    NAME = "name"


class ResultSource(str, Enum):
    """Where the companies of a response came from"""
    DATABASE = "database"
    FALLBACK = "fallback"


class ScoredCompany(BaseModel):
    """Company record with its relevance score and rationale"""

    company: CompanyRecord
    relevance_score: int = Field(..., ge=0, description="Additive relevance score")
    matched_fields: List[MatchedField] = Field(default_factory=list)
    explanation: str = Field(..., description="Human-readable relevance summary")


class SearchResponse(BaseModel):
    """Response from search endpoint"""

    query: str = Field(..., description="Original query text")
    total_results: int = Field(..., ge=0)
    companies: List[ScoredCompany] = Field(default_factory=list)
    search_time_ms: int = Field(..., ge=0, description="Processing time in milliseconds")
    criteria: SearchCriteria = Field(default_factory=SearchCriteria)
    llm_assist_requested: bool = False
    source: ResultSource = ResultSource.DATABASE

    class Config:
        json_schema_extra = {
            "example": {
                "query": "Guangdong PVC flooring",
                "total_results": 1,
                "companies": [
                    {
                        "company": {"id": 17, "company_name_en": "Foshan Evergreen Flooring Co., Ltd."},
                        "relevance_score": 49,
                        "matched_fields": ["products", "location"],
                        "explanation": "High relevance; matched: products, location"
                    }
                ],
                "search_time_ms": 212,
                "criteria": {"products": ["pvc", "flooring"], "location": ["guangdong"]},
                "llm_assist_requested": False,
                "source": "database"
            }
        }


class ConnectionStatus(BaseModel):
    """Result of a store connectivity check"""

    ok: bool
    message: str
    sample: Optional[List[Dict[str, Any]]] = None


class DatabaseStatistics(BaseModel):
    """Aggregate figures about the companies table"""

    total_companies: int = 0
    provinces: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
