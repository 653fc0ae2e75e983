"""
Query Builder
Translates SearchCriteria into a declarative filter query for the companies table
"""
import re
from typing import List, Tuple
from models.criteria import SearchCriteria, EmployeeOperator, CreditRating
from models.query import RemoteQuery, Predicate, PredicateOp
from config import settings
import logging

logger = logging.getLogger(__name__)


# Text columns searched per criteria category
PRODUCT_COLUMNS: Tuple[str, ...] = ("main_products", "keywords")
LOCATION_COLUMNS: Tuple[str, ...] = ("province", "address")
INDUSTRY_COLUMNS: Tuple[str, ...] = ("category", "keywords")
NAME_COLUMNS: Tuple[str, ...] = ("company_name_en", "company_name_cn")

EMPLOYEE_COLUMN = "employee_count"
FOUNDED_COLUMN = "established_year"
WEBSITE_COLUMN = "official_website"
CREDIT_COLUMN = "credit_rating"

GOOD_CREDIT_RATINGS: Tuple[str, ...] = ("A", "AA", "AAA")


# at_most and less_than stay distinct so the store agrees with the scorer
EMPLOYEE_OPERATORS = {
    EmployeeOperator.AT_LEAST: PredicateOp.GTE,
    EmployeeOperator.AT_MOST: PredicateOp.LTE,
    EmployeeOperator.LESS_THAN: PredicateOp.LT,
}


def sanitize_term(term: str) -> str:
    """Blank out PostgREST filter metacharacters"""
    return re.sub(r"[,()*%]", " ", term).strip()


def contains_any(columns: Tuple[str, ...], terms: List[str]) -> Predicate:
    values = [clean for clean in (sanitize_term(t) for t in terms) if clean]
    return Predicate(op=PredicateOp.CONTAINS_ANY, columns=list(columns), values=values)


def build_query(
    criteria: SearchCriteria,
    limit: int,
    table: str = None,
    candidate_multiplier: int = None
) -> RemoteQuery:
    """
    Build the store query for a criteria object

    Args:
        criteria: Extracted search criteria
        limit: Number of results the caller will finally keep
        table: Table name (defaults to settings)
        candidate_multiplier: Over-fetch factor giving the scorer a larger pool

    Returns:
        RemoteQuery with one predicate per present criterion
    """
    if table is None:
        table = settings.companies_table
    if candidate_multiplier is None:
        candidate_multiplier = settings.candidate_multiplier

    predicates: List[Predicate] = []

    for terms, columns in (
        (criteria.products, PRODUCT_COLUMNS),
        (criteria.location, LOCATION_COLUMNS),
        (criteria.industry, INDUSTRY_COLUMNS),
    ):
        if terms:
            predicate = contains_any(columns, terms)
            if predicate.values:
                predicates.append(predicate)

    if criteria.employee_range:
        predicates.append(Predicate(
            op=EMPLOYEE_OPERATORS[criteria.employee_range.operator],
            columns=[EMPLOYEE_COLUMN],
            values=[criteria.employee_range.count]
        ))

    if criteria.founded_after is not None:
        predicates.append(Predicate(
            op=PredicateOp.GTE,
            columns=[FOUNDED_COLUMN],
            values=[criteria.founded_after]
        ))

    if criteria.has_website:
        predicates.append(Predicate(op=PredicateOp.NOT_NULL, columns=[WEBSITE_COLUMN]))

    if criteria.credit_rating == CreditRating.GOOD:
        predicates.append(Predicate(
            op=PredicateOp.IN,
            columns=[CREDIT_COLUMN],
            values=list(GOOD_CREDIT_RATINGS)
        ))

    if criteria.company_name:
        predicate = contains_any(NAME_COLUMNS, [criteria.company_name])
        if predicate.values:
            predicates.append(predicate)

    query = RemoteQuery(
        table=table,
        predicates=predicates,
        limit=max(1, limit) * candidate_multiplier
    )

    logger.debug(f"Built query on {table}: {len(predicates)} predicates, limit {query.limit}")

    return query


def build_name_query(name: str, limit: int, table: str = None) -> RemoteQuery:
    """Substring match on either name column, capped at limit rows"""
    return RemoteQuery(
        table=table or settings.companies_table,
        predicates=[contains_any(NAME_COLUMNS, [name])],
        limit=max(1, limit)
    )
