from dataclasses import dataclass, field, asdict
from typing import Optional


@dataclass(frozen=True)
class SearchCandidate:
    """One entry of the search result list."""
    title: str
    page_url: str
    price_text: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: SearchCandidate
    similarity: float

    @property
    def title(self) -> str:
        return self.candidate.title

    @property
    def page_url(self) -> str:
        return self.candidate.page_url

    def to_dict(self) -> dict:
        data = _drop_none(asdict(self.candidate))
        data["similarity"] = round(self.similarity, 4)
        return _camel(data)


@dataclass(frozen=True)
class Specification:
    section: str
    key: str
    value: str


@dataclass(frozen=True)
class PriceHistorySummary:
    lowest_price_in_period: Optional[str] = None
    lowest_price_date: Optional[str] = None
    lowest_price_today: Optional[str] = None
    lowest_price_today_shop: Optional[str] = None
    median_price_estimate: Optional[str] = None
    selected_period: str = "3 mois"

    def has_data(self) -> bool:
        return any([self.lowest_price_in_period, self.lowest_price_date,
                    self.lowest_price_today, self.lowest_price_today_shop,
                    self.median_price_estimate])

    def to_dict(self) -> dict:
        return _camel(_drop_none(asdict(self)))


@dataclass(frozen=True)
class ProductDetails:
    url: str
    page_title: Optional[str] = None
    section_title: Optional[str] = None
    specifications: list[Specification] = field(default_factory=list)
    image_urls: list[str] = field(default_factory=list)
    price_history: Optional[PriceHistorySummary] = None

    def specifications_by_section(self) -> dict[str, dict[str, str]]:
        """Group rows per section; a repeated key keeps the last value seen."""
        grouped: dict[str, dict[str, str]] = {}
        for spec in self.specifications:
            grouped.setdefault(spec.section, {})[spec.key] = spec.value
        return grouped

    def to_dict(self) -> dict:
        data = {
            "url": self.url,
            "page_title": self.page_title,
            "section_title": self.section_title,
            "specifications": [asdict(s) for s in self.specifications],
            "image_urls": list(self.image_urls),
            "price_history": (self.price_history.to_dict()
                              if self.price_history else None),
        }
        return _camel(_drop_none(data))


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


def _camel(data: dict) -> dict:
    out = {}
    for key, value in data.items():
        head, *rest = key.split("_")
        out[head + "".join(p.title() for p in rest)] = value
    return out
