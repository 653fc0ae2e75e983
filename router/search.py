"""
Search API Router
Handles the company search and lookup endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from typing import List

from models.company import CompanyRecord
from models.criteria import SearchCriteria
from models.requests import SearchRequest
from models.responses import SearchResponse, ConnectionStatus, DatabaseStatistics
from services.company_search import CompanySearchService
from services.criteria_extraction import extract_basic_criteria
from config import settings
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["search"])


def get_search_service(request: Request) -> CompanySearchService:
    """Search service created at startup (see main.py)"""
    return request.app.state.search_service


@router.post("/search", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    service: CompanySearchService = Depends(get_search_service)
):
    """
    Natural-language company search

    Processes the query through:
    1. Store probe
    2. Criteria extraction (keywords, optional language-model assist)
    3. Filtered store query
    4. Relevance scoring and ranking

    Falls back to demo data when the store is unavailable.
    """
    limit = min(request.limit, settings.max_limit)
    return await service.search(request.query, limit=limit, use_assist=request.use_assist)


@router.get("/companies/search", response_model=List[CompanyRecord])
async def search_companies_by_name(
    name: str = Query(..., min_length=1, description="Fragment of the English or Chinese name"),
    service: CompanySearchService = Depends(get_search_service)
):
    """Name lookup, capped at a handful of rows"""
    return await service.search_by_name(name)


@router.get("/companies/{company_id}", response_model=CompanyRecord)
async def get_company(
    company_id: int,
    service: CompanySearchService = Depends(get_search_service)
):
    company = await service.get_company_by_id(company_id)
    if company is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Company {company_id} not found"
        )
    return company


@router.get("/connection", response_model=ConnectionStatus)
async def test_connection(
    service: CompanySearchService = Depends(get_search_service)
):
    """Store connectivity check with sample rows"""
    return await service.test_connection()


@router.get("/statistics", response_model=DatabaseStatistics)
async def get_statistics(
    service: CompanySearchService = Depends(get_search_service)
):
    return await service.get_statistics()


@router.get("/criteria/debug", response_model=SearchCriteria)
async def debug_criteria(query: str):
    """
    Debug endpoint for criteria extraction

    Keyword pass only; the language model is never called here.
    """
    return extract_basic_criteria(query)
