"""
Relevance Scoring Module
Additive point scheme over criteria matches and literal query overlap
"""
from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import ValidationError
from models.company import CompanyRecord
from models.criteria import SearchCriteria, EmployeeOperator, EmployeeRange, CreditRating
from models.responses import ScoredCompany, MatchedField
from services.query_builder import GOOD_CREDIT_RATINGS
import logging

logger = logging.getLogger(__name__)


# Point weights
QUERY_WORD_POINTS = 5
PRODUCT_POINTS = 10
LOCATION_POINTS = 8
EMPLOYEE_POINTS = 6
CREDIT_POINTS = 7
WEBSITE_POINTS = 3

MIN_QUERY_WORD_LENGTH = 3

# Explanation buckets (score strictly greater than)
HIGH_RELEVANCE_ABOVE = 15
MEDIUM_RELEVANCE_ABOVE = 8


def query_words(query: str) -> List[str]:
    return [w for w in (query or "").lower().split() if len(w) >= MIN_QUERY_WORD_LENGTH]


def employee_count_satisfies(count: Optional[int], employee_range: EmployeeRange) -> bool:
    """Check a head count against the stated comparison"""
    if count is None:
        return False

    if employee_range.operator == EmployeeOperator.AT_LEAST:
        return count >= employee_range.count
    if employee_range.operator == EmployeeOperator.AT_MOST:
        return count <= employee_range.count
    if employee_range.operator == EmployeeOperator.LESS_THAN:
        return count < employee_range.count

    return False


def has_good_credit(company: CompanyRecord) -> bool:
    return (company.credit_rating or "").strip().upper() in GOOD_CREDIT_RATINGS


def calculate_score(company: CompanyRecord, criteria: SearchCriteria, query: str) -> int:
    """
    Sum of independent signal points

    Args:
        company: Candidate record
        criteria: Extracted criteria
        query: Original query text

    Returns:
        Non-negative integer score
    """
    score = 0
    searchable = company.searchable_text()
    products = company.product_text()
    province = (company.province or "").lower()

    for word in query_words(query):
        if word in searchable:
            score += QUERY_WORD_POINTS

    for tag in criteria.products:
        if tag in products:
            score += PRODUCT_POINTS

    for tag in criteria.location:
        if tag in province:
            score += LOCATION_POINTS

    if criteria.employee_range and employee_count_satisfies(
        company.employee_count, criteria.employee_range
    ):
        score += EMPLOYEE_POINTS

    if criteria.credit_rating == CreditRating.GOOD and has_good_credit(company):
        score += CREDIT_POINTS

    if criteria.has_website and (company.official_website or "").strip():
        score += WEBSITE_POINTS

    return score


def matched_fields(company: CompanyRecord, criteria: SearchCriteria, query: str) -> List[MatchedField]:
    """Which of products / location / name overlap the criteria or query"""
    fields = []

    products = company.product_text()
    if any(tag in products for tag in criteria.products):
        fields.append(MatchedField.PRODUCTS)

    province = (company.province or "").lower()
    if any(tag in province for tag in criteria.location):
        fields.append(MatchedField.LOCATION)

    names = company.name_text()
    name_terms = query_words(query)
    if criteria.company_name:
        name_terms.append(criteria.company_name.lower())
    if any(term in names for term in name_terms):
        fields.append(MatchedField.NAME)

    return fields


def build_explanation(score: int, fields: List[MatchedField]) -> str:
    if score > HIGH_RELEVANCE_ABOVE:
        text = "High relevance"
    elif score > MEDIUM_RELEVANCE_ABOVE:
        text = "Medium relevance"
    else:
        text = "Low relevance"

    if fields:
        text += "; matched: " + ", ".join(f.value for f in fields)

    return text


def score_company(
    company: CompanyRecord,
    criteria: SearchCriteria,
    query: str
) -> Tuple[int, List[MatchedField], str]:
    """
    Score one company

    Returns:
        (score, matched field labels, explanation)
    """
    score = calculate_score(company, criteria, query)
    fields = matched_fields(company, criteria, query)
    return score, fields, build_explanation(score, fields)


def to_company_record(row: Union[Dict[str, Any], CompanyRecord]) -> Optional[CompanyRecord]:
    """Validate a store row; None when its columns do not fit the model"""
    if isinstance(row, CompanyRecord):
        return row

    try:
        return CompanyRecord.model_validate(row)
    except ValidationError as e:
        row_id = row.get("id") if isinstance(row, dict) else None
        logger.warning(f"Skipping malformed company row {row_id}: {e.error_count()} validation errors")
        return None


def rank_companies(
    rows: List[Union[Dict[str, Any], CompanyRecord]],
    criteria: SearchCriteria,
    query: str
) -> List[ScoredCompany]:
    """
    Score every row and sort by score, highest first

    The sort is stable: equal scores keep the store's return order.
    Rows that do not fit CompanyRecord are logged and skipped.
    """
    scored = []

    for row in rows:
        company = to_company_record(row)
        if company is None:
            continue
        score, fields, explanation = score_company(company, criteria, query)
        scored.append(ScoredCompany(
            company=company,
            relevance_score=score,
            matched_fields=fields,
            explanation=explanation
        ))

    ranked = sorted(scored, key=lambda s: s.relevance_score, reverse=True)

    if ranked:
        logger.debug(
            f"Ranked {len(ranked)} companies, top score {ranked[0].relevance_score}"
        )

    return ranked
