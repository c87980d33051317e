# notes_summarizer/api/schemas.py
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from notes_summarizer.summarizer.models import SummarizationResult


class SummarizeRequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # blank text is rejected by the summarization service, not here
    text: Optional[str] = Field(default=None, description="Meeting notes to summarize.")

    # the web client sends "customPrompt"; "styleHint" is accepted too
    style_hint: str = Field(
        default="",
        validation_alias=AliasChoices("customPrompt", "styleHint", "style_hint"),
        description="Free-text formatting hint, e.g. 'bullet points'.",
    )

    @field_validator("style_hint", mode="before")
    @classmethod
    def normalize_style_hint(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)


class SendEmailRequestModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    to: Optional[List[str]] = None
    subject: Optional[str] = None
    body: Optional[str] = None

    @field_validator("to", mode="before")
    @classmethod
    def normalize_recipients(cls, value: Any) -> Optional[List[str]]:
        if value is None:
            return None
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        # anything other than a list is treated as "no recipients"
        return []


class SummaryResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    summary: str
    original_length: int = Field(serialization_alias="originalLength")
    summary_length: int = Field(serialization_alias="summaryLength")
    fallback: bool

    @classmethod
    def from_domain(cls, result: SummarizationResult) -> "SummaryResponseModel":
        return cls(
            summary=result.summary,
            original_length=result.original_length,
            summary_length=result.summary_length,
            fallback=result.used_fallback,
        )


class UploadResponseModel(BaseModel):
    success: bool = True
    content: str
    filename: str


class EmailResponseModel(BaseModel):
    success: bool = True
    message: str
    recipients: int


class ErrorResponseModel(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None
