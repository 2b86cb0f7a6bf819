"""Result schemas the generative model's JSON replies are validated against."""

from typing import Annotated

from pydantic import BaseModel, Field

Percentage = Annotated[float, Field(ge=0, le=100)]


class SimilarityResult(BaseModel):
    """Forensic similarity between a reference and a target document."""

    similarity_score: Percentage
    matched_words: int = Field(..., ge=0)
    total_words: int = Field(..., ge=0)
    common_phrases: list[str] = Field(default_factory=list)
    exact_match_pct: Percentage
    paraphrase_pct: Percentage
    structural_pct: Percentage
    ref_lang: str = "unknown"
    tgt_lang: str = "unknown"


class WebSource(BaseModel):
    """A public source found to resemble the submitted document."""

    name: str
    score: Percentage


class WebScanResult(BaseModel):
    """Public sources similar to the submitted document, best match first."""

    sources: list[WebSource]


class SummaryResult(BaseModel):
    """Professional summary of the submitted document."""

    overview: str
    key_points: list[str]
    conclusion: str
