"""
Built-in demonstration dataset used when the company store is unavailable
"""
from typing import List
from models.company import CompanyRecord
from models.responses import ScoredCompany
from services.relevance import query_words

FALLBACK_SCORE = 50
FALLBACK_EXPLANATION = "Demo data (database unavailable); not a live search result"
DEFAULT_SUBSET_SIZE = 3


DEMO_COMPANIES: List[CompanyRecord] = [
    CompanyRecord(
        id=900001,
        company_name_en="Shenzhen Brightstar LED Lighting Co., Ltd.",
        company_name_cn="深圳亮星照明有限公司",
        province="Guangdong",
        address="Bao'an District, Shenzhen",
        established_year=2008,
        employee_count=350,
        category="Lighting",
        main_products="LED panel lights, LED strips, LED street lights",
        keywords="led, lighting, energy saving",
        credit_rating="AA",
        official_website="https://www.brightstar-led.example.cn",
        contact_person="Li Wei",
        phone="+86 755 0000 0001",
        email="sales@brightstar-led.example.cn",
    ),
    CompanyRecord(
        id=900002,
        company_name_en="Foshan Evergreen Flooring Co., Ltd.",
        company_name_cn="佛山常青地板有限公司",
        province="Guangdong",
        address="Nanhai District, Foshan",
        established_year=2012,
        employee_count=180,
        category="Building Materials",
        main_products="PVC flooring, SPC flooring, vinyl planks",
        keywords="pvc, flooring, vinyl",
        credit_rating="A",
        official_website="https://www.evergreen-floor.example.cn",
        contact_person="Chen Jing",
        phone="+86 757 0000 0002",
        email="export@evergreen-floor.example.cn",
    ),
    CompanyRecord(
        id=900003,
        company_name_en="Ningbo Oceanic Textile Co., Ltd.",
        company_name_cn="宁波海洋纺织有限公司",
        province="Zhejiang",
        address="Yinzhou District, Ningbo",
        established_year=2003,
        employee_count=620,
        category="Textiles",
        main_products="cotton fabric, polyester fabric, home textile",
        keywords="textile, fabric, bedding",
        credit_rating="AAA",
        official_website="https://www.oceanic-textile.example.cn",
        contact_person="Wang Fang",
        phone="+86 574 0000 0003",
        email="info@oceanic-textile.example.cn",
    ),
    CompanyRecord(
        id=900004,
        company_name_en="Suzhou Precision Machinery Co., Ltd.",
        company_name_cn="苏州精密机械有限公司",
        province="Jiangsu",
        address="Suzhou Industrial Park",
        established_year=1998,
        employee_count=900,
        category="Machinery",
        main_products="CNC machines, injection molding machines",
        keywords="machinery, cnc, molding",
        credit_rating="AA",
        official_website="https://www.sz-precision.example.cn",
        contact_person="Zhang Min",
        phone="+86 512 0000 0004",
        email="sales@sz-precision.example.cn",
    ),
    CompanyRecord(
        id=900005,
        company_name_en="Yiwu Happy Toys Factory",
        company_name_cn="义乌欢乐玩具厂",
        province="Zhejiang",
        address="Futian Street, Yiwu",
        established_year=2015,
        employee_count=85,
        category="Toys",
        main_products="plush toy, plastic toy, educational toy",
        keywords="toy, plush, plastic",
        credit_rating="B",
        official_website=None,
        contact_person="Zhou Lan",
        phone="+86 579 0000 0005",
        email="happytoys@example.cn",
    ),
    CompanyRecord(
        id=900006,
        company_name_en="Qingdao Harbor Steel Co., Ltd.",
        company_name_cn="青岛港湾钢铁有限公司",
        province="Shandong",
        address="Huangdao District, Qingdao",
        established_year=2001,
        employee_count=1500,
        category="Metallurgy",
        main_products="steel pipes, steel plates, galvanized coils",
        keywords="steel, pipe, plate",
        credit_rating="AAA",
        official_website="https://www.harbor-steel.example.cn",
        contact_person="Sun Tao",
        phone="+86 532 0000 0006",
        email="trade@harbor-steel.example.cn",
    ),
    CompanyRecord(
        id=900007,
        company_name_en="Xiamen Sunpower Solar Technology Co., Ltd.",
        company_name_cn="厦门阳光能源科技有限公司",
        province="Fujian",
        address="Jimei District, Xiamen",
        established_year=2010,
        employee_count=420,
        category="New Energy",
        main_products="solar panels, photovoltaic modules, lithium battery packs",
        keywords="solar, photovoltaic, battery",
        credit_rating="A",
        official_website="https://www.sunpower-xm.example.cn",
        contact_person="Lin Hui",
        phone="+86 592 0000 0007",
        email="sales@sunpower-xm.example.cn",
    ),
    CompanyRecord(
        id=900008,
        company_name_en="Dongguan Homecraft Furniture Co., Ltd.",
        company_name_cn="东莞家工家具有限公司",
        province="Guangdong",
        address="Houjie Town, Dongguan",
        established_year=2006,
        employee_count=260,
        category="Furniture",
        main_products="office furniture, sofas, dining tables",
        keywords="furniture, sofa, office",
        credit_rating="BBB",
        official_website=None,
        contact_person="Huang Qiang",
        phone="+86 769 0000 0008",
        email="homecraft@example.cn",
    ),
]


def _record_text(company: CompanyRecord) -> str:
    return " ".join(
        str(value) for value in company.model_dump().values() if value is not None
    ).lower()


def fallback_companies(query: str, limit: int) -> List[ScoredCompany]:
    """
    Demo records overlapping the query, or a default subset when none do

    Args:
        query: Original query text
        limit: Maximum number of records

    Returns:
        Scored demo records with a constant placeholder score
    """
    words = query_words(query)
    matches = [
        company for company in DEMO_COMPANIES
        if any(word in _record_text(company) for word in words)
    ]

    if not matches:
        matches = DEMO_COMPANIES[:DEFAULT_SUBSET_SIZE]

    return [
        ScoredCompany(
            company=company,
            relevance_score=FALLBACK_SCORE,
            matched_fields=[],
            explanation=FALLBACK_EXPLANATION
        )
        for company in matches[:max(1, limit)]
    ]
