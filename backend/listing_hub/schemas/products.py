"""
Product schemas — marketplace enum, product request, images and AI analysis.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from listing_hub.core.constants.marketplace import DESCRIPTION_MAX_LENGTH


class Marketplace(str, Enum):
    SHOPIFY = "shopify"
    AMAZON = "amazon"
    MEESHO = "meesho"


@dataclass(frozen=True)
class ImageAsset:
    """In-memory image carried by a single publication request."""
    content: bytes
    filename: str
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


def split_tags(value: Any) -> List[str]:
    """'a, b,,a ' -> ['a', 'b']: trimmed, non-empty, first occurrence wins."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    tags: List[str] = []
    for item in items:
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def split_features(value: Any) -> List[str]:
    """Newline-separated text -> ordered list of trimmed, non-empty lines."""
    if value is None:
        return []
    items = value.splitlines() if isinstance(value, str) else list(value)
    return [str(item).strip() for item in items if str(item).strip()]


def _as_items(value: Any) -> Any:
    """Wrap a lone scalar so it can be split like a list."""
    if value is None or isinstance(value, (str, list, tuple)):
        return value
    return [value]


class ProductRequest(BaseModel):
    """A validated request to publish one product on one marketplace."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    marketplace: Marketplace
    price: Optional[float] = Field(None, gt=0)
    compare_at_price: Optional[float] = Field(None, gt=0)
    inventory: Optional[int] = Field(None, ge=0)
    tags: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    images: List[ImageAsset] = Field(default_factory=list, exclude=True)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> List[str]:
        return split_tags(v)

    @field_validator("features", mode="before")
    @classmethod
    def parse_features(cls, v: Any) -> List[str]:
        return split_features(v)

    @model_validator(mode="after")
    def check_description_length(self) -> "ProductRequest":
        limit = DESCRIPTION_MAX_LENGTH.get(self.marketplace.value)
        if limit is not None and len(self.description) > limit:
            raise ValueError(
                f"Description too long for {self.marketplace.value}: "
                f"{len(self.description)} characters (max {limit})"
            )
        return self


class ProductAnalysis(BaseModel):
    """Product content suggested by the AI vision model."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    description: str = ""
    features: List[str] = Field(default_factory=list)
    category: str = ""
    suggested_tags: List[str] = Field(default_factory=list)
    confidence: float = 0.0

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def null_text_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("features", mode="before")
    @classmethod
    def coerce_features(cls, v: Any) -> List[str]:
        return split_features(_as_items(v))

    @field_validator("suggested_tags", mode="before")
    @classmethod
    def coerce_suggested_tags(cls, v: Any) -> List[str]:
        return split_tags(_as_items(v))

    @field_validator("confidence", mode="before")
    @classmethod
    def lenient_confidence(cls, v: Any) -> float:
        try:
            return float(v)
        except (TypeError, ValueError):
            return 0.0


class BulkDefaults(BaseModel):
    """Values applied to every row of a bulk upload."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    price: Optional[float] = Field(None, gt=0)
    compare_at_price: Optional[float] = Field(None, gt=0)
    inventory: Optional[int] = Field(None, ge=0)
    tags: Optional[str] = None
    features: Optional[str] = None
