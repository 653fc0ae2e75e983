"""
Tests for the query builder
"""
import pytest
from conftest import FakeCompanyStore
from models.criteria import SearchCriteria, EmployeeRange, EmployeeOperator
from models.query import PredicateOp
from services.query_builder import build_query, build_name_query, sanitize_term
from services.relevance import employee_count_satisfies


def build(criteria, limit=10):
    return build_query(criteria, limit, table="companies", candidate_multiplier=2)


def test_empty_criteria_means_no_filter():
    query = build(SearchCriteria())

    assert query.table == "companies"
    assert query.predicates == []


def test_requests_twice_the_limit():
    assert build(SearchCriteria(), limit=10).limit == 20
    assert build(SearchCriteria(), limit=3).limit == 6


def test_products_search_two_columns():
    query = build(SearchCriteria(products=["pvc", "flooring"]))

    assert len(query.predicates) == 1
    predicate = query.predicates[0]
    assert predicate.op == PredicateOp.CONTAINS_ANY
    assert predicate.columns == ["main_products", "keywords"]
    assert predicate.values == ["pvc", "flooring"]


def test_categories_are_separate_predicates():
    query = build(SearchCriteria(
        products=["led"],
        location=["guangdong"],
        industry=["energy"],
    ))

    columns = [p.columns for p in query.predicates]
    assert columns == [
        ["main_products", "keywords"],
        ["province", "address"],
        ["category", "keywords"],
    ]


@pytest.mark.parametrize("operator, expected_op", [
    (EmployeeOperator.AT_LEAST, PredicateOp.GTE),
    (EmployeeOperator.AT_MOST, PredicateOp.LTE),
    (EmployeeOperator.LESS_THAN, PredicateOp.LT),
])
def test_employee_range_operators(operator, expected_op):
    query = build(SearchCriteria(employee_range=EmployeeRange(operator=operator, count=50)))

    predicate = query.predicates[0]
    assert predicate.op == expected_op
    assert predicate.columns == ["employee_count"]
    assert predicate.values == [50]


def test_less_than_is_strict_unlike_at_most():
    """at_most and less_than do not collapse onto the same store filter"""
    at_most = build(SearchCriteria(employee_range=EmployeeRange(operator="at_most", count=50)))
    less_than = build(SearchCriteria(employee_range=EmployeeRange(operator="less_than", count=50)))

    assert at_most.predicates[0].op != less_than.predicates[0].op


def test_founded_after():
    predicate = build(SearchCriteria(founded_after=2010)).predicates[0]

    assert predicate.op == PredicateOp.GTE
    assert predicate.columns == ["established_year"]
    assert predicate.values == [2010]


def test_has_website():
    predicate = build(SearchCriteria(has_website=True)).predicates[0]

    assert predicate.op == PredicateOp.NOT_NULL
    assert predicate.columns == ["official_website"]


def test_good_credit_rating():
    predicate = build(SearchCriteria(credit_rating="good")).predicates[0]

    assert predicate.op == PredicateOp.IN
    assert predicate.columns == ["credit_rating"]
    assert predicate.values == ["A", "AA", "AAA"]


def test_medium_credit_rating_has_no_store_filter():
    assert build(SearchCriteria(credit_rating="medium")).predicates == []


def test_company_name_searches_both_names():
    predicate = build(SearchCriteria(company_name="evergreen")).predicates[0]

    assert predicate.op == PredicateOp.CONTAINS_ANY
    assert predicate.columns == ["company_name_en", "company_name_cn"]
    assert predicate.values == ["evergreen"]


def test_filter_metacharacters_are_removed():
    assert sanitize_term("acme (group), ltd*") == "acme  group   ltd"

    predicate = build(SearchCriteria(company_name="(acme)")).predicates[0]
    assert predicate.values == ["acme"]


def test_name_query_has_exact_cap():
    query = build_name_query("floor", 5, table="companies")

    assert query.limit == 5
    assert query.predicates[0].columns == ["company_name_en", "company_name_cn"]


@pytest.mark.parametrize("operator", list(EmployeeOperator))
async def test_store_filter_agrees_with_scorer(operator):
    """Rows the store keeps are exactly the rows the scorer credits"""
    rows = [
        {"id": count, "company_name_en": f"Company {count}", "employee_count": count}
        for count in (49, 50, 51)
    ]
    store = FakeCompanyStore(rows=rows)
    employee_range = EmployeeRange(operator=operator, count=50)

    kept = await store.fetch(build(SearchCriteria(employee_range=employee_range)))

    kept_ids = {row["id"] for row in kept}
    credited_ids = {
        row["id"] for row in rows
        if employee_count_satisfies(row["employee_count"], employee_range)
    }
    assert kept_ids == credited_ids


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
