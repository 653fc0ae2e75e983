"""
Error taxonomy for the search engine
"""
from typing import Optional


class SearchEngineError(Exception):
    """Base class for search engine errors"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class DataAccessError(SearchEngineError):
    """Company store unreachable, query rejected, or error payload returned"""


class AssistError(SearchEngineError):
    """Language-model call failed or its response could not be parsed"""
