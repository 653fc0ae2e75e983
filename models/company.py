"""
Company record model (one row of the companies table)
"""
from pydantic import BaseModel
from typing import Optional


class CompanyRecord(BaseModel):
    """Manufacturer row as returned by the store. Read-only for the core."""

    id: Optional[int] = None
    company_name_en: Optional[str] = None
    company_name_cn: Optional[str] = None
    province: Optional[str] = None
    address: Optional[str] = None
    established_year: Optional[int] = None
    employee_count: Optional[int] = None
    category: Optional[str] = None
    main_products: Optional[str] = None
    keywords: Optional[str] = None
    credit_rating: Optional[str] = None
    official_website: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "id": 17,
                "company_name_en": "Foshan Evergreen Flooring Co., Ltd.",
                "company_name_cn": "佛山常青地板有限公司",
                "province": "Guangdong",
                "established_year": 2012,
                "employee_count": 180,
                "category": "Building Materials",
                "main_products": "PVC flooring, SPC flooring, vinyl planks",
                "keywords": "pvc, flooring, vinyl",
                "credit_rating": "A",
                "official_website": "https://www.evergreen-floor.example.cn"
            }
        }

    def name_text(self) -> str:
        """Both name columns, lower-cased"""
        return f"{self.company_name_en or ''} {self.company_name_cn or ''}".lower()

    def product_text(self) -> str:
        """Product and keyword columns, lower-cased"""
        return f"{self.main_products or ''} {self.keywords or ''}".lower()

    def searchable_text(self) -> str:
        """Names, products, keywords and category, lower-cased"""
        return f"{self.name_text()} {self.product_text()} {(self.category or '').lower()}"
