"""
Publication schemas — staged upload targets and per-marketplace results.
"""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StagedUploadParameter(BaseModel):
    name: str
    value: str


class StagedUploadTarget(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    resource_url: str
    parameters: List[StagedUploadParameter] = Field(default_factory=list)


class MediaAttachResult(BaseModel):
    filename: str
    status: Literal["success", "failed"]
    media: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class PublicationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    marketplace: str = "shopify"
    status: Literal["created"] = "created"
    product: Dict[str, Any]
    media: List[MediaAttachResult] = Field(default_factory=list)
    total_images: int = 0
    published_channels: int = 0
    warnings: List[str] = Field(default_factory=list)


class ComingSoonResult(BaseModel):
    """Placeholder answer for marketplaces without an integration yet."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    marketplace: str
    status: Literal["coming_soon"] = "coming_soon"
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)


PublishOutcome = Union[PublicationResult, ComingSoonResult]
