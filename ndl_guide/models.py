"""Shared data models for the retrieval-and-grounding pipeline."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class BookRecord(BaseModel):
    id: str
    title: str = ""
    highlights: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        return str(value)

    @field_validator("title", mode="before")
    @classmethod
    def _title_as_text(cls, value):
        return value or ""

    @field_validator("highlights", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return value or []


class PageRecord(BaseModel):
    page: str
    snippet: str = ""

    @field_validator("page", mode="before")
    @classmethod
    def _page_as_text(cls, value):
        return str(value)

    @field_validator("snippet", mode="before")
    @classmethod
    def _snippet_as_text(cls, value):
        return value or ""


class EvidenceItem(BaseModel):
    title: str
    pid: str = Field(..., description="Identifier of the parent digitized book.")
    page: str = Field(..., description="Koma (page image) label within the book.")
    snippet: str = Field(..., description="Normalized excerpt text.")
    link: str = Field(..., description="Viewer URL built from pid and page.")


class SearchIntent(BaseModel):
    query: str
    focus_keywords: list[str] = Field(..., alias="focusKeywords")
    is_random: bool = Field(False, alias="isRandom")

    model_config = {"populate_by_name": True}

    @field_validator("focus_keywords", mode="before")
    @classmethod
    def _single_keyword_as_list(cls, value):
        if isinstance(value, str):
            return [value]
        return value


class GroundedAnswer(BaseModel):
    text: str
    citations: list[EvidenceItem]


class CitationSegment(BaseModel):
    text: str
    index: int | None = Field(
        None, description="1-based evidence index when the segment is a resolved citation."
    )
    source: EvidenceItem | None = None


class AnnotatedText(BaseModel):
    segments: list[CitationSegment]


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, description="Free-text question from the user.")
    model: str | None = Field(
        None, description="Generation model for the answer; intent extraction ignores it."
    )


class ChatResponse(BaseModel):
    reply: str
    sources: list[EvidenceItem]


class ErrorResponse(BaseModel):
    error: str
    details: str
