"""
Tests for the company search service (pipeline, fallback and lookups)
"""
import httpx
import pytest
from conftest import FakeCompanyStore, QueryFailingStore, SAMPLE_COMPANIES
from models.criteria import SearchCriteria
from models.responses import ResultSource
from services.company_search import CompanySearchService
from services.criteria_extraction import CriteriaExtractor
from services.fallback_data import DEMO_COMPANIES, FALLBACK_SCORE
from services.llm_assist import LLMAssist


class ExplodingExtractor:
    async def extract(self, query, use_assist=True):
        raise RuntimeError("unexpected extractor bug")


def service_for(store, test_settings, extractor=None):
    return CompanySearchService(
        store=store,
        extractor=extractor or CriteriaExtractor(assist=None),
        config=test_settings
    )


async def test_search_ranks_matching_company(search_service):
    response = await search_service.search("Guangdong PVC flooring", limit=10, use_assist=False)

    assert response.source == ResultSource.DATABASE
    assert response.total_results == len(response.companies) >= 1
    top = response.companies[0].company
    assert "Guangdong" in top.province
    assert "PVC" in top.main_products
    assert set(response.criteria.products) == {"pvc", "flooring"}
    assert response.llm_assist_requested is False


async def test_search_requests_twice_the_limit(search_service, fake_store):
    await search_service.search("LED lighting", limit=4, use_assist=False)

    assert fake_store.queries[-1].limit == 8


async def test_search_without_criteria_returns_sorted_truncated(search_service):
    response = await search_service.search("silk machinery", limit=2, use_assist=False)

    assert response.total_results == len(response.companies) <= 2
    scores = [c.relevance_score for c in response.companies]
    assert scores == sorted(scores, reverse=True)


async def test_search_is_deterministic_without_assist(search_service):
    first = await search_service.search("LED lighting from Guangdong", limit=5, use_assist=False)
    second = await search_service.search("LED lighting from Guangdong", limit=5, use_assist=False)

    assert [c.company.id for c in first.companies] == [c.company.id for c in second.companies]


async def test_store_unreachable(offline_search_service):
    status = await offline_search_service.test_connection()
    assert status.ok is False
    assert status.sample is None

    response = await offline_search_service.search("LED lighting", limit=5)

    assert response.source == ResultSource.FALLBACK
    assert response.total_results == len(response.companies) <= 5
    assert response.criteria == SearchCriteria()
    assert response.companies
    for entry in response.companies:
        assert "demo" in entry.explanation.lower()
        assert entry.relevance_score == FALLBACK_SCORE
    assert response.companies[0].company.main_products.startswith("LED")


async def test_fallback_default_subset_when_nothing_overlaps(offline_search_service):
    response = await offline_search_service.search("zzz qqq", limit=10, use_assist=False)

    assert [c.company.id for c in response.companies] == [c.id for c in DEMO_COMPANIES[:3]]


async def test_fallback_respects_limit(offline_search_service):
    response = await offline_search_service.search("xyz", limit=1, use_assist=False)

    assert response.total_results == 1


async def test_empty_table_falls_back(test_settings):
    service = service_for(FakeCompanyStore(rows=[]), test_settings)

    response = await service.search("LED lighting", limit=5, use_assist=False)

    assert response.source == ResultSource.FALLBACK
    assert response.criteria == SearchCriteria()


async def test_query_failure_falls_back_with_extracted_criteria(test_settings):
    store = QueryFailingStore()
    service = service_for(store, test_settings)

    response = await service.search("LED lighting", limit=5, use_assist=False)

    assert len(store.queries) == 1
    assert response.source == ResultSource.FALLBACK
    assert set(response.criteria.products) == {"led", "lighting"}
    assert all("demo" in c.explanation.lower() for c in response.companies)


async def test_unexpected_error_never_escapes(test_settings):
    service = service_for(FakeCompanyStore(), test_settings, extractor=ExplodingExtractor())

    response = await service.search("LED lighting", limit=3)

    assert response.source == ResultSource.FALLBACK
    assert response.total_results <= 3


async def test_malformed_assist_reply_keeps_database_results(test_settings):
    content_parts = [{"type": "text", "text": "{}"}]
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(
        lambda request: httpx.Response(200, json={
            "choices": [{"message": {"role": "assistant", "content": content_parts}}]
        })
    ))
    assist_config = test_settings.model_copy(update={"openai_api_key": "test-key"})
    extractor = CriteriaExtractor(
        assist=LLMAssist(assist_config, http_client=http_client),
        min_assist_length=10
    )
    service = service_for(FakeCompanyStore(), test_settings, extractor=extractor)

    response = await service.search("Guangdong PVC flooring", limit=5, use_assist=True)

    assert response.source == ResultSource.DATABASE
    assert response.companies[0].company.id == 2
    assert set(response.criteria.products) == {"pvc", "flooring"}


async def test_search_skips_malformed_rows(test_settings):
    rows = SAMPLE_COMPANIES + [{
        "id": 99,
        "company_name_en": "Broken Silk Textile Co.",
        "main_products": "silk fabric",
        "keywords": "textile, silk",
        "employee_count": "100-200",
    }]
    service = service_for(FakeCompanyStore(rows=rows), test_settings)

    response = await service.search("textile silk", limit=5, use_assist=False)

    assert response.source == ResultSource.DATABASE
    ids = [c.company.id for c in response.companies]
    assert 1 in ids
    assert 99 not in ids


async def test_malformed_row_lookups_find_nothing(test_settings):
    rows = [
        {"id": 98, "company_name_en": "Acme Plastics", "employee_count": 40},
        {"id": 99, "company_name_en": "Acme Broken", "employee_count": "100-200"},
    ]
    service = service_for(FakeCompanyStore(rows=rows), test_settings)

    assert await service.get_company_by_id(99) is None
    assert [c.id for c in await service.search_by_name("acme")] == [98]


async def test_search_by_name(search_service):
    results = await search_service.search_by_name("floorking")

    assert [c.id for c in results] == [2]


async def test_search_by_chinese_name(search_service):
    results = await search_service.search_by_name("北星")

    assert [c.id for c in results] == [4]


async def test_search_by_name_is_capped(test_settings):
    rows = [{"id": i, "company_name_en": f"Acme Plastics {i}"} for i in range(8)]
    service = service_for(FakeCompanyStore(rows=rows), test_settings)

    results = await service.search_by_name("acme")

    assert len(results) == 5


async def test_search_by_blank_name(search_service, fake_store):
    assert await search_service.search_by_name("   ") == []
    assert fake_store.queries == []


async def test_search_by_name_offline(offline_search_service):
    assert await offline_search_service.search_by_name("acme") == []


async def test_get_company_by_id(search_service):
    found = await search_service.get_company_by_id(3)

    assert found is not None
    assert found.company_name_en == "Shenzhen Glow LED Co., Ltd."
    assert await search_service.get_company_by_id(999) is None


async def test_get_company_by_id_offline(offline_search_service):
    assert await offline_search_service.get_company_by_id(1) is None


async def test_connection_ok(search_service):
    status = await search_service.test_connection()

    assert status.ok is True
    assert len(status.sample) == 3


async def test_statistics(search_service):
    stats = await search_service.get_statistics()

    assert stats.total_companies == 4
    assert stats.provinces == ["Guangdong", "Jiangsu", "Zhejiang"]
    assert stats.categories == ["Building Materials", "Lighting", "Machinery", "Textiles"]


async def test_statistics_offline(offline_search_service):
    stats = await offline_search_service.get_statistics()

    assert stats.total_companies == 0
    assert stats.provinces == []
    assert stats.categories == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
