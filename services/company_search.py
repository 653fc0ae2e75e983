"""
Company Search Service
Runs the search pipeline and the lookups exposed by the API

Search stages (linear, Fallback reachable from PROBE and RETRIEVE):
    PROBE -> EXTRACT -> RETRIEVE -> RANK -> TRUNCATE -> RESPOND
"""
import asyncio
import time
from enum import Enum
from typing import Any, Dict, List, Optional
from models.company import CompanyRecord
from models.criteria import SearchCriteria
from models.outcome import Outcome
from models.responses import SearchResponse, ResultSource, ConnectionStatus, DatabaseStatistics
from services.criteria_extraction import CriteriaExtractor
from services.llm_assist import LLMAssist
from services.query_builder import build_query, build_name_query
from services.relevance import rank_companies, to_company_record
from services.fallback_data import fallback_companies
from utils.supabase_client import CompanyStore
from utils.errors import DataAccessError
from config import Settings, settings as default_settings
import logging

logger = logging.getLogger(__name__)


class SearchStage(str, Enum):
    PROBE = "probe"
    EXTRACT = "extract"
    RETRIEVE = "retrieve"
    RANK = "rank"
    TRUNCATE = "truncate"
    RESPOND = "respond"
    FALLBACK = "fallback"


class CompanySearchService:
    """
    Search context: one instance per process, handed to the API layer

    Holds no per-search state, so concurrent searches do not interact.
    """

    def __init__(
        self,
        store: CompanyStore,
        extractor: Optional[CriteriaExtractor] = None,
        config: Optional[Settings] = None
    ):
        self.store = store
        self.config = config or default_settings
        self.extractor = extractor or CriteriaExtractor(
            assist=LLMAssist(self.config),
            min_assist_length=self.config.assist_min_query_length
        )

    # ------------------------------------------------------------------
    # Search pipeline
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        limit: int = None,
        use_assist: bool = True
    ) -> SearchResponse:
        """
        Natural-language company search

        Args:
            query: Free-text query
            limit: Maximum number of companies returned
            use_assist: Whether to request language-model assistance

        Returns:
            SearchResponse; built from the demo dataset when the store fails.
            Never raises.
        """
        start_time = time.perf_counter()
        query = query or ""
        limit = max(1, limit if limit is not None else self.config.default_limit)
        criteria: Optional[SearchCriteria] = None
        stage = SearchStage.PROBE

        logger.info(f"Search request: '{query}' (limit={limit}, assist={use_assist})")

        try:
            probe = await self._probe()
            if not probe.ok:
                logger.warning(f"Store probe failed: {probe.error}")
                return self._fallback(query, limit, use_assist, start_time, criteria, stage)

            stage = SearchStage.EXTRACT
            criteria = await self.extractor.extract(query, use_assist)

            stage = SearchStage.RETRIEVE
            retrieved = await self._retrieve(criteria, limit)
            if not retrieved.ok:
                logger.warning(f"Company query failed: {retrieved.error}")
                return self._fallback(query, limit, use_assist, start_time, criteria, stage)

            stage = SearchStage.RANK
            ranked = rank_companies(retrieved.value, criteria, query)

            stage = SearchStage.TRUNCATE
            companies = ranked[:limit]

            stage = SearchStage.RESPOND
            response = SearchResponse(
                query=query,
                total_results=len(companies),
                companies=companies,
                search_time_ms=self._elapsed_ms(start_time),
                criteria=criteria,
                llm_assist_requested=use_assist,
                source=ResultSource.DATABASE
            )

        except Exception as e:
            logger.error(f"Search failed during {stage.value}: {e}", exc_info=True)
            return self._fallback(query, limit, use_assist, start_time, criteria, stage)

        logger.info(
            f"Search completed in {response.search_time_ms}ms: "
            f"{response.total_results} of {len(retrieved.value)} candidates"
        )

        return response

    async def _probe(self) -> Outcome[int]:
        """Store must be reachable and the table non-empty"""
        try:
            total = await self.store.count()
        except DataAccessError as e:
            return Outcome.failure(str(e))

        if total <= 0:
            return Outcome.failure(f"table '{self.store.table}' is empty")

        return Outcome.success(total)

    async def _retrieve(self, criteria: SearchCriteria, limit: int) -> Outcome[List[Dict[str, Any]]]:
        remote_query = build_query(
            criteria,
            limit,
            table=self.store.table,
            candidate_multiplier=self.config.candidate_multiplier
        )
        try:
            rows = await self.store.fetch(remote_query)
        except DataAccessError as e:
            return Outcome.failure(str(e))

        logger.info(f"Retrieved {len(rows)} candidate rows")
        return Outcome.success(rows)

    def _fallback(
        self,
        query: str,
        limit: int,
        use_assist: bool,
        start_time: float,
        criteria: Optional[SearchCriteria],
        failed_stage: SearchStage
    ) -> SearchResponse:
        """
        Demo-data response

        Criteria are reported only if extraction already ran (retrieval
        failure); a failed probe reports empty criteria.
        """
        companies = fallback_companies(query, limit)

        logger.warning(
            f"Serving {len(companies)} demo companies after {failed_stage.value} stage failure"
        )

        return SearchResponse(
            query=query,
            total_results=len(companies),
            companies=companies,
            search_time_ms=self._elapsed_ms(start_time),
            criteria=criteria or SearchCriteria(),
            llm_assist_requested=use_assist,
            source=ResultSource.FALLBACK
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.perf_counter() - start_time) * 1000)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def search_by_name(self, name: str) -> List[CompanyRecord]:
        """Companies whose English or Chinese name contains the fragment"""
        if not name or not name.strip():
            return []

        remote_query = build_name_query(
            name.strip(), self.config.name_search_limit, table=self.store.table
        )
        if not remote_query.predicates[0].values:
            return []

        try:
            rows = await self.store.fetch(remote_query)
        except DataAccessError as e:
            logger.error(f"Name search failed: {e}")
            return []

        records = (to_company_record(row) for row in rows[:self.config.name_search_limit])
        return [record for record in records if record is not None]

    async def get_company_by_id(self, company_id: int) -> Optional[CompanyRecord]:
        try:
            row = await self.store.get_by_id(company_id)
        except DataAccessError as e:
            logger.error(f"Company lookup failed for id {company_id}: {e}")
            return None

        return to_company_record(row) if row else None

    async def test_connection(self) -> ConnectionStatus:
        """Check connectivity and return a few sample rows"""
        try:
            rows = await self.store.sample(limit=3)
        except DataAccessError as e:
            return ConnectionStatus(ok=False, message=f"Connection failed: {e}")

        return ConnectionStatus(
            ok=True,
            message=f"Connected to '{self.store.table}' ({len(rows)} sample rows)",
            sample=rows
        )

    async def get_statistics(self) -> DatabaseStatistics:
        """Row count, distinct provinces and distinct categories"""
        try:
            total, provinces, categories = await asyncio.gather(
                self.store.count(),
                self.store.distinct_values("province"),
                self.store.distinct_values("category"),
            )
        except DataAccessError as e:
            logger.error(f"Statistics unavailable: {e}")
            return DatabaseStatistics()

        return DatabaseStatistics(
            total_companies=total,
            provinces=provinces,
            categories=categories
        )
