"""
Manufacturer Search Engine Configuration
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    companies_table: str = "companies"

    # Language-model assist (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    assist_model: str = "gpt-4o-mini"
    assist_max_tokens: int = 500
    assist_temperature: float = 0.1
    assist_timeout: float = 30.0
    assist_min_query_length: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # Search
    default_limit: int = 10
    max_limit: int = 50
    candidate_multiplier: int = 2
    name_search_limit: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
