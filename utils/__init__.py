"""
Utility modules for the Manufacturer Search Engine
"""
from .errors import SearchEngineError, DataAccessError, AssistError
from .supabase_client import get_supabase_client, CompanyStore

__all__ = [
    "SearchEngineError",
    "DataAccessError",
    "AssistError",
    "get_supabase_client",
    "CompanyStore",
]
