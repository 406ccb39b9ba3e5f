"""
Admin content forms.

Each form validates the full editable row of one content table.
"""
from typing import Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, Field, HttpUrl

from portal_service.models.records import ContentType


class ContentForm(BaseModel):
    """Base form: unknown fields are rejected."""

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    def to_row(self) -> Dict:
        return self.model_dump(mode="json")


class JobForm(ContentForm):
    business_name: str = Field(min_length=1, max_length=200, description="Hiring business")
    position_sq: str = Field(min_length=1, max_length=200, description="Position (Albanian)")
    position_en: str = Field(min_length=1, max_length=200, description="Position (English)")
    location_sq: str = Field(min_length=1, max_length=200, description="Location (Albanian)")
    location_en: str = Field(min_length=1, max_length=200, description="Location (English)")
    description_sq: str = Field(min_length=1, description="Description (Albanian)")
    description_en: str = Field(min_length=1, description="Description (English)")
    application_link: Optional[Union[HttpUrl, Literal[""]]] = Field(default=None, description="Application URL, may be empty")


class ArticleForm(ContentForm):
    title_sq: str = Field(min_length=1, max_length=300, description="Title (Albanian)")
    title_en: str = Field(min_length=1, max_length=300, description="Title (English)")
    content_sq: str = Field(min_length=1, description="Body (Albanian)")
    content_en: str = Field(min_length=1, description="Body (English)")
    category_sq: str = Field(min_length=1, max_length=100, description="Category (Albanian)")
    category_en: str = Field(min_length=1, max_length=100, description="Category (English)")
    image_url: Optional[Union[HttpUrl, Literal[""]]] = Field(default=None, description="Cover image URL, may be empty")


class MythForm(ContentForm):
    claim_sq: str = Field(min_length=1, max_length=500, description="Claim (Albanian)")
    claim_en: str = Field(min_length=1, max_length=500, description="Claim (English)")
    explanation_sq: str = Field(min_length=1, description="Explanation (Albanian)")
    explanation_en: str = Field(min_length=1, description="Explanation (English)")
    is_true: bool = Field(description="Whether the claim is true")
    scientific_references: Optional[str] = Field(default=None, description="Sources")


CONTENT_FORMS: Dict[ContentType, Type[ContentForm]] = {
    ContentType.JOBS: JobForm,
    ContentType.ARTICLES: ArticleForm,
    ContentType.MYTHS: MythForm,
}
