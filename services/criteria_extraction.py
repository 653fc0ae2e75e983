"""
Criteria Extraction Module
Turns a natural-language query (English, Spanish or Chinese) into SearchCriteria
using keyword dictionaries, regex patterns and fuzzy province matching
"""
import re
from functools import lru_cache
from rapidfuzz import fuzz, process
from typing import Dict, List, Optional, Tuple
from models.criteria import SearchCriteria, EmployeeRange, EmployeeOperator, CreditRating
from services.llm_assist import LLMAssist
from config import settings
import logging

logger = logging.getLogger(__name__)


# Canonical tag -> trigger substrings. Tags are the terms sent to the store.
PRODUCT_KEYWORDS: Dict[str, List[str]] = {
    "led": ["led", "diodo", "发光二极管"],
    "lighting": ["lighting", "lights", "lamp", "iluminación", "iluminacion", "lámpara", "luminaria", "照明", "灯具"],
    "pvc": ["pvc", "聚氯乙烯"],
    "flooring": ["floor", "piso", "suelo", "地板"],
    "furniture": ["furniture", "mueble", "家具"],
    "textile": ["textile", "tela", "tejido", "纺织", "面料"],
    "apparel": ["apparel", "clothing", "garment", "ropa", "prenda", "服装"],
    "electronic": ["electronic", "electrónic", "电子"],
    "machinery": ["machinery", "machine", "maquinaria", "máquina", "机械", "机器"],
    "solar": ["solar", "photovoltaic", "fotovoltaic", "光伏", "太阳能"],
    "packaging": ["packaging", "embalaje", "envase", "包装"],
    "plastic": ["plastic", "plástico", "塑料"],
    "steel": ["steel", "acero", "钢"],
    "ceramic": ["ceramic", "cerámic", "陶瓷"],
    "toy": ["toy", "juguete", "玩具"],
    "battery": ["battery", "batteries", "batería", "bateria", "电池"],
}

LOCATION_KEYWORDS: Dict[str, List[str]] = {
    "guangdong": ["guangdong", "guangzhou", "shenzhen", "dongguan", "foshan", "zhongshan",
                  "cantón", "canton", "广东", "广州", "深圳", "东莞", "佛山", "中山"],
    "zhejiang": ["zhejiang", "ningbo", "hangzhou", "yiwu", "wenzhou", "浙江", "宁波", "杭州", "义乌", "温州"],
    "jiangsu": ["jiangsu", "suzhou", "nanjing", "wuxi", "changzhou", "江苏", "苏州", "南京", "无锡", "常州"],
    "shanghai": ["shanghai", "shanghái", "上海"],
    "beijing": ["beijing", "pekín", "pekin", "peking", "北京"],
    "shandong": ["shandong", "qingdao", "jinan", "yantai", "山东", "青岛", "济南", "烟台"],
    "fujian": ["fujian", "xiamen", "fuzhou", "quanzhou", "jinjiang", "福建", "厦门", "福州", "泉州"],
    "tianjin": ["tianjin", "天津"],
    "hebei": ["hebei", "shijiazhuang", "河北", "石家庄"],
    "henan": ["henan", "zhengzhou", "河南", "郑州"],
    "hubei": ["hubei", "wuhan", "湖北", "武汉"],
    "hunan": ["hunan", "changsha", "湖南", "长沙"],
    "anhui": ["anhui", "hefei", "安徽", "合肥"],
    "jiangxi": ["jiangxi", "nanchang", "江西", "南昌"],
    "sichuan": ["sichuan", "chengdu", "四川", "成都"],
    "liaoning": ["liaoning", "dalian", "shenyang", "辽宁", "大连", "沈阳"],
    "chongqing": ["chongqing", "重庆"],
}

INDUSTRY_KEYWORDS: Dict[str, List[str]] = {
    "building materials": ["building material", "construction", "construcción", "construccion", "建材", "建筑"],
    "automotive": ["automotive", "auto parts", "automotriz", "autopartes", "汽车"],
    "chemical": ["chemical", "químic", "quimic", "化工"],
    "medical": ["medical", "médic", "医疗"],
    "food": ["food", "alimento", "食品"],
    "energy": ["energy", "energía", "energia", "renewable", "能源"],
    "appliance": ["appliance", "electrodoméstic", "electrodomestic", "家电"],
    "metallurgy": ["metallurg", "metalurg", "冶金"],
    "agriculture": ["agricultur", "agrícola", "agricola", "农业"],
}

CREDIT_KEYWORDS: List[Tuple[CreditRating, List[str]]] = [
    (CreditRating.GOOD, ["buena calificación", "buena calificacion", "buen crédito", "buen credito",
                         "alta calificación", "good credit", "good rating", "high credit",
                         "excellent credit", "信用良好", "信用好", "高信用"]),
    (CreditRating.MEDIUM, ["calificación media", "calificacion media", "crédito medio", "credito medio",
                           "medium credit", "average credit", "信用一般", "中等信用"]),
    (CreditRating.LOW, ["baja calificación", "baja calificacion", "mal crédito", "mal credito",
                        "low credit", "poor credit", "bad credit", "信用差", "低信用"]),
]

WEBSITE_KEYWORDS = [
    "sitio web", "página web", "pagina web", "website", "web site", "官网", "网站",
]

EMPLOYEE_NOUNS = r"(?:empleados|trabajadores|personas|employees|workers|staff|people|名员工|员工|人)"

# Negated phrases come before the plain ones they contain:
# "not more than" / "不超过" are at-most, "not less than" / "不少于" are at-least
EMPLOYEE_PATTERNS: List[Tuple[str, EmployeeOperator]] = [
    (r"(?:no más de|no mas de|como máximo|como maximo|máximo|maximo|hasta|at most|up to|"
     r"no more than|not more than|不超过|最多)\s*(\d+)\s*" + EMPLOYEE_NOUNS, EmployeeOperator.AT_MOST),
    (r"(?:no menos de|no less than|not less than|no fewer than|not fewer than|不少于|不低于)\s*(\d+)\s*"
     + EMPLOYEE_NOUNS, EmployeeOperator.AT_LEAST),
    (r"(?:menos de|less than|fewer than|under|below|少于|不到)\s*(\d+)\s*" + EMPLOYEE_NOUNS,
     EmployeeOperator.LESS_THAN),
    (r"(?:más de|mas de|al menos|mínimo|minimo|more than|at least|over|above|超过|多于|至少)\s*(\d+)\s*"
     + EMPLOYEE_NOUNS, EmployeeOperator.AT_LEAST),
]

FOUNDED_PATTERNS = [
    r"(?:fundad[ao]s?|establecid[ao]s?|cread[ao]s?)\s+(?:después|despues)\s+del?\s+(?:año\s+)?(\d{4})",
    r"(?:founded|established|set up|created)\s+after\s+(\d{4})",
    r"(\d{4})\s*年\s*(?:以后|之后|后)\s*成立",
    r"成立于\s*(\d{4})\s*年\s*(?:以后|之后|后)",
]

COMPANY_NAME_PATTERNS = [
    r"(?:company|firm|manufacturer|factory|supplier)\s+(?:called|named)\s+([^,;.?!]+)",
    r"(?:empresa|compañía|compania|fábrica|fabrica)\s+(?:llamada|denominada|de nombre)\s+([^,;.?!]+)",
    r"(?:名为|名叫|叫做)\s*([^，,。；;]+?)\s*的?(?:公司|企业|工厂)",
]

# Typo-tolerant province matching (rapidfuzz ratio, 0-100)
FUZZY_LOCATION_THRESHOLD = 88
FUZZY_LOCATION_MIN_LENGTH = 6


@lru_cache(maxsize=None)
def _word_start_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(term))


def contains_term(text: str, term: str) -> bool:
    """
    Check whether a trigger occurs in already lower-cased text

    Latin-script triggers must start at a word start ("led" does not fire
    inside "called"); CJK and accented triggers match anywhere.
    """
    if not term.isascii():
        return term in text

    return _word_start_pattern(term).search(text) is not None


def match_dictionary(text: str, dictionary: Dict[str, List[str]]) -> List[str]:
    """Return every canonical tag with at least one trigger in text"""
    return [
        tag for tag, triggers in dictionary.items()
        if any(contains_term(text, trigger) for trigger in triggers)
    ]


def fuzzy_match_locations(text: str, already_matched: List[str]) -> List[str]:
    """
    Catch misspelled province names ("guangdon", "zhejang")

    Only words that are not a location trigger themselves are considered.
    """
    known_triggers = {
        trigger for triggers in LOCATION_KEYWORDS.values() for trigger in triggers
    }
    provinces = list(LOCATION_KEYWORDS.keys())
    matches = []

    for word in re.findall(r"[a-z]+", text):
        if len(word) < FUZZY_LOCATION_MIN_LENGTH or word in known_triggers:
            continue

        best = process.extractOne(
            word,
            provinces,
            scorer=fuzz.ratio,
            score_cutoff=FUZZY_LOCATION_THRESHOLD
        )
        if best:
            province = best[0]
            if province not in already_matched and province not in matches:
                logger.debug(f"Fuzzy location match: '{word}' -> {province} ({best[1]:.0f})")
                matches.append(province)

    return matches


def extract_employee_range(text: str) -> Optional[EmployeeRange]:
    for pattern, operator in EMPLOYEE_PATTERNS:
        match = re.search(pattern, text)
        if match:
            return EmployeeRange(operator=operator, count=int(match.group(1)))
    return None


def extract_founded_after(text: str) -> Optional[int]:
    for pattern in FOUNDED_PATTERNS:
        match = re.search(pattern, text)
        if match:
            return int(match.group(1))
    return None


def extract_credit_rating(text: str) -> Optional[CreditRating]:
    for rating, phrases in CREDIT_KEYWORDS:
        if any(phrase in text for phrase in phrases):
            return rating
    return None


def extract_company_name(text: str) -> Optional[str]:
    for pattern in COMPANY_NAME_PATTERNS:
        match = re.search(pattern, text)
        if match:
            name = match.group(1).strip()
            if name:
                return name
    return None


def extract_basic_criteria(query: str) -> SearchCriteria:
    """
    Keyword and pattern pass over the query

    Args:
        query: Natural language query (may be empty)

    Returns:
        SearchCriteria; never raises for any string input
    """
    text = (query or "").lower()

    locations = match_dictionary(text, LOCATION_KEYWORDS)
    locations.extend(fuzzy_match_locations(text, locations))

    criteria = SearchCriteria(
        products=match_dictionary(text, PRODUCT_KEYWORDS),
        location=locations,
        industry=match_dictionary(text, INDUSTRY_KEYWORDS),
        employee_range=extract_employee_range(text),
        credit_rating=extract_credit_rating(text),
        founded_after=extract_founded_after(text),
        has_website=True if any(phrase in text for phrase in WEBSITE_KEYWORDS) else None,
        company_name=extract_company_name(text),
    )

    logger.debug(f"Keyword criteria for '{query}': {criteria.model_dump(exclude_none=True)}")

    return criteria


class CriteriaExtractor:
    """Keyword extraction with optional language-model assist"""

    def __init__(self, assist: Optional[LLMAssist] = None, min_assist_length: int = None):
        self.assist = assist
        self.min_assist_length = (
            settings.assist_min_query_length if min_assist_length is None else min_assist_length
        )

    async def extract(self, query: str, use_assist: bool = True) -> SearchCriteria:
        """
        Extract criteria from a query

        Args:
            query: Natural language query
            use_assist: Whether to ask the language model for extra criteria

        Returns:
            Keyword criteria, merged with the assist result when it succeeded
        """
        criteria = extract_basic_criteria(query)

        if not use_assist or self.assist is None:
            return criteria

        if len((query or "").strip()) <= self.min_assist_length:
            logger.debug("Query too short for language-model assist")
            return criteria

        outcome = await self.assist.suggest(query)
        if not outcome.ok:
            logger.info(f"Using keyword criteria only: {outcome.error}")
            return criteria

        merged = criteria.merge(outcome.value)
        logger.info(f"Assisted criteria: {merged.model_dump(exclude_none=True)}")

        return merged
