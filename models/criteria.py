"""
Structured search criteria extracted from a natural-language query
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from enum import Enum


class EmployeeOperator(str, Enum):
    """Comparison stated in an employee-count phrase"""
    AT_LEAST = "at_least"
    AT_MOST = "at_most"
    LESS_THAN = "less_than"


class CreditRating(str, Enum):
    """Credit quality requested by the user"""
    GOOD = "good"
    MEDIUM = "medium"
    LOW = "low"


class EmployeeRange(BaseModel):
    """Employee-count constraint"""

    operator: EmployeeOperator
    count: int = Field(..., ge=0)

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, value):
        # Language models tend to answer "at-least" / "AT_LEAST"
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_").replace(" ", "_")
        return value


class SearchCriteria(BaseModel):
    """
    Search intent. Absent fields mean "no filter".

    List fields behave as sets: tags are stripped, lower-cased and
    de-duplicated in first-seen order.
    """

    products: List[str] = Field(default_factory=list)
    location: List[str] = Field(default_factory=list)
    industry: List[str] = Field(default_factory=list)
    employee_range: Optional[EmployeeRange] = None
    credit_rating: Optional[CreditRating] = None
    founded_after: Optional[int] = None
    has_website: Optional[bool] = None
    company_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "products": ["pvc", "flooring"],
                "location": ["guangdong"],
                "industry": [],
                "employee_range": {"operator": "at_least", "count": 50},
                "credit_rating": "good",
                "founded_after": None,
                "has_website": None,
                "company_name": None
            }
        }

    @field_validator("products", "location", "industry", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        tags = []
        for tag in value:
            if not isinstance(tag, str):
                raise ValueError(f"tag must be a string, got {type(tag).__name__}")
            tag = tag.strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @field_validator("credit_rating", mode="before")
    @classmethod
    def normalize_rating(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @field_validator("company_name", mode="before")
    @classmethod
    def normalize_name(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    def is_empty(self) -> bool:
        """True when no constraint is present"""
        return self == SearchCriteria()

    def merge(self, other: "SearchCriteria") -> "SearchCriteria":
        """
        Combine with another criteria object

        List fields are unioned. Scalar fields keep this object's value and
        only take the other's where this one is absent.
        """
        return SearchCriteria(
            products=self.products + other.products,
            location=self.location + other.location,
            industry=self.industry + other.industry,
            employee_range=self.employee_range or other.employee_range,
            credit_rating=self.credit_rating or other.credit_rating,
            founded_after=(
                self.founded_after if self.founded_after is not None else other.founded_after
            ),
            has_website=self.has_website if self.has_website is not None else other.has_website,
            company_name=self.company_name or other.company_name,
        )
