"""
Supabase access for the companies table
Every failure leaving this module is a DataAccessError
"""
import asyncio
from supabase import create_client, Client
from typing import Any, Callable, Dict, List, Optional
from models.query import RemoteQuery, Predicate, PredicateOp
from utils.errors import DataAccessError
from config import settings
import logging

logger = logging.getLogger(__name__)

# Default PostgREST max-rows on Supabase
PAGE_SIZE = 1000


def get_supabase_client(url: str = None, key: str = None) -> Client:
    """
    Create a Supabase client

    Raises:
        DataAccessError: If the URL/key are missing or rejected
    """
    url = url if url is not None else settings.supabase_url
    key = key if key is not None else settings.supabase_key

    if not url or not key:
        raise DataAccessError("Supabase URL and key are not configured")

    try:
        client = create_client(url, key)
        logger.info("Supabase client created")
        return client
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        raise DataAccessError("Failed to create Supabase client", e)


def apply_predicate(query: Any, predicate: Predicate) -> Any:
    """
    Add one predicate to a postgrest request builder

    Args:
        query: supabase-py select builder
        predicate: Predicate from the query builder

    Returns:
        The builder with the filter applied
    """
    op = predicate.op

    if op == PredicateOp.CONTAINS_ANY:
        # "*" is PostgREST's URL-safe wildcard inside or=() filters
        clauses = [
            f"{column}.ilike.*{value}*"
            for value in predicate.values
            for column in predicate.columns
        ]
        return query.or_(",".join(clauses))

    column = predicate.columns[0]

    if op == PredicateOp.GTE:
        return query.gte(column, predicate.values[0])
    if op == PredicateOp.LTE:
        return query.lte(column, predicate.values[0])
    if op == PredicateOp.LT:
        return query.lt(column, predicate.values[0])
    if op == PredicateOp.NOT_NULL:
        return query.not_.is_(column, "null")
    if op == PredicateOp.IN:
        return query.in_(column, predicate.values)

    raise ValueError(f"Unsupported predicate: {op}")


class CompanyStore:
    """Read-only access to the companies table"""

    def __init__(
        self,
        client: Optional[Client] = None,
        table: str = None,
        client_factory: Callable[[], Client] = get_supabase_client
    ):
        self._client = client
        self._client_factory = client_factory
        self.table = table or settings.companies_table

    def _get_client(self) -> Client:
        # Created on first use so the service starts without a reachable store
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def _execute(self, build: Callable[[Client], Any], action: str) -> Any:
        """
        Build and execute a request off the event loop

        Raises:
            DataAccessError: On any client, transport or PostgREST failure
        """
        try:
            request = build(self._get_client())
            return await asyncio.to_thread(request.execute)
        except DataAccessError:
            raise
        except Exception as e:
            logger.error(f"{action} failed on {self.table}: {e}")
            raise DataAccessError(f"{action} failed", e)

    async def count(self) -> int:
        """Total number of rows"""
        result = await self._execute(
            lambda c: c.table(self.table).select("id", count="exact").limit(1),
            "Row count"
        )
        return result.count or 0

    async def fetch(self, remote_query: RemoteQuery) -> List[Dict[str, Any]]:
        """Run a filtered query built by the query builder"""

        def build(client: Client):
            query = client.table(remote_query.table).select("*")
            for predicate in remote_query.predicates:
                query = apply_predicate(query, predicate)
            return query.limit(remote_query.limit)

        result = await self._execute(build, "Company query")
        return result.data if result.data else []

    async def get_by_id(self, company_id: int) -> Optional[Dict[str, Any]]:
        result = await self._execute(
            lambda c: c.table(self.table).select("*").eq("id", company_id).limit(1),
            "Company lookup"
        )
        return result.data[0] if result.data else None

    async def sample(self, limit: int = 3) -> List[Dict[str, Any]]:
        result = await self._execute(
            lambda c: c.table(self.table).select("*").limit(limit),
            "Sample query"
        )
        return result.data if result.data else []

    async def distinct_values(self, column: str, page_size: int = PAGE_SIZE) -> List[str]:
        """
        Sorted distinct non-empty values of one column

        PostgREST caps each response at its max-rows setting (1000 on
        Supabase), so the column is read in ordered pages via range().
        page_size must not exceed that cap.
        """
        values = set()
        start = 0

        while True:
            result = await self._execute(
                lambda c, start=start: (
                    c.table(self.table)
                    .select(column)
                    .order(column)
                    .range(start, start + page_size - 1)
                ),
                f"Distinct {column}"
            )
            rows = result.data or []
            values.update(
                str(row[column]).strip()
                for row in rows
                if row.get(column) and str(row[column]).strip()
            )
            if len(rows) < page_size:
                break
            start += page_size

        return sorted(values)
