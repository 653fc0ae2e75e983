"""
Core service modules for the Manufacturer Search Engine
"""
from .criteria_extraction import extract_basic_criteria, CriteriaExtractor
from .llm_assist import LLMAssist
from .query_builder import build_query, build_name_query
from .relevance import score_company, rank_companies
from .fallback_data import fallback_companies, DEMO_COMPANIES
from .company_search import CompanySearchService

__all__ = [
    "extract_basic_criteria",
    "CriteriaExtractor",
    "LLMAssist",
    "build_query",
    "build_name_query",
    "score_company",
    "rank_companies",
    "fallback_companies",
    "DEMO_COMPANIES",
    "CompanySearchService",
]
