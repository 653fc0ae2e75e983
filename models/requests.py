"""
Request models for search engine API
"""
from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Request model for search endpoint"""

    query: str = Field(..., min_length=1, description="Search query text")
    limit: int = Field(default=10, ge=1, le=50, description="Number of results to return")
    use_assist: bool = Field(
        default=True,
        description="Whether to augment keyword extraction with the language model"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "query": "empresas de Guangdong con más de 50 empleados que fabrican piso de PVC",
                "limit": 10,
                "use_assist": True
            }
        }
