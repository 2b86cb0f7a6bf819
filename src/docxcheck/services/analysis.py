"""Analysis orchestration: prompt, call the model, validate, then record.

Each operation follows the same fail-closed protocol. The model's reply is
treated as untrusted text and parsed into a pydantic schema; the history
entry is written only after that validation succeeds, so the ledger never
holds a partial or malformed analysis.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from docxcheck.core.security import AuthenticatedIdentity
from docxcheck.models.history import AnalysisKind
from docxcheck.repositories.history import HistoryLedger, UnknownIdentityError
from docxcheck.schemas.analysis import SimilarityResult, SummaryResult, WebScanResult
from docxcheck.services.errors import MissingInputError
from docxcheck.services.model_client import GenerationOptions, ModelClient
from docxcheck.services.normalizer import ContentUnit, DocumentSide, SubmittedFile, normalize

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

SIMILARITY_FAILED = "Similarity analysis failed"
WEB_SCAN_FAILED = "Web scan failed"
SUMMARY_FAILED = "Summarization failed"

HIGH_SIMILARITY = 80
MODERATE_SIMILARITY = 50
HIGH_RISK_SOURCE = 80

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class ModelOutputInvalid(ValueError):
    """Raised when the model reply is not JSON of the expected shape."""


class AnalysisFailedError(RuntimeError):
    """Raised when an analysis could not be completed.

    ``str(err)`` is the generic, client-safe message for the operation.
    """


def parse_model_json(text: str, schema: type[ResultT]) -> ResultT:
    """Parse a model reply and validate it against ``schema``.

    A surrounding Markdown code fence is tolerated.

    Raises:
        ModelOutputInvalid: If the text is not a JSON object matching ``schema``.
    """
    candidate = text.strip()
    fenced = _FENCE_RE.match(candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as err:
        raise ModelOutputInvalid(f"Model output is not JSON: {err}") from err
    if not isinstance(payload, dict):
        raise ModelOutputInvalid("Model output is not a JSON object")

    try:
        return schema.model_validate(payload)
    except ValidationError as err:
        raise ModelOutputInvalid(f"Model output does not match {schema.__name__}: {err}") from err


def format_score(value: float) -> str:
    """Render a score the way it is stored in history: 85.0 becomes "85"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def similarity_verdict(score: float) -> str:
    """Map a similarity score to High / Moderate / Low."""
    if score >= HIGH_SIMILARITY:
        return "High"
    if score >= MODERATE_SIMILARITY:
        return "Moderate"
    return "Low"


def web_scan_verdict(result: WebScanResult) -> tuple[str, str]:
    """Return the (score, verdict) pair recorded for a web scan."""
    if not result.sources:
        return "0", "Pass"
    top = result.sources[0].score
    return format_score(top), "High Risk" if top >= HIGH_RISK_SOURCE else "Pass"


def similarity_prompt(reference: DocumentSide, target: DocumentSide) -> str:
    return (
        "You are a forensic document similarity analyzer.\n"
        "Analyze the similarity between the reference and target.\n"
        f'Reference Text: "{reference.prompt_text()}"\n'
        f'Target Text: "{target.prompt_text()}"\n'
        "Return strictly JSON matching this schema:\n"
        '{ "similarity_score": <0-100>, "matched_words": <number>, '
        '"total_words": <number>, "common_phrases": ["phrase1", "phrase2"], '
        '"exact_match_pct": <0-100>, "paraphrase_pct": <0-100>, '
        '"structural_pct": <0-100>, "ref_lang": "en", "tgt_lang": "en" }'
    )


WEB_SCAN_PROMPT = (
    "Analyze this document. Use Google Search to find sources on the web that are "
    "highly similar to this document's content. Order sources from most to least similar.\n"
    'Return strictly JSON: { "sources": [ { "name": "Source URL/Title", "score": <0-100> } ] }'
)

SUMMARY_PROMPT = (
    "Provide a professional summary of the attached document/image.\n"
    'Return strictly JSON: { "overview": "A brief 2-3 sentence overview", '
    '"key_points": ["Point 1", "Point 2"], "conclusion": "A concluding sentence" }'
)


class AnalysisOrchestrator:
    """Runs the three analysis kinds against a model and records them."""

    def __init__(self, model: ModelClient, ledger: HistoryLedger) -> None:
        self.model = model
        self.ledger = ledger

    async def _invoke(
        self,
        units: list[ContentUnit],
        options: GenerationOptions,
        schema: type[ResultT],
        failure_message: str,
    ) -> ResultT:
        try:
            text = await self.model.generate(units, options)
            return parse_model_json(text, schema)
        except Exception as err:
            logger.exception("%s: %s", failure_message, err)
            raise AnalysisFailedError(failure_message) from err

    def _record(
        self,
        identity: AuthenticatedIdentity,
        failure_message: str,
        *,
        kind: AnalysisKind,
        docs: str,
        score: str,
        details: str,
        verdict: str,
    ) -> None:
        try:
            self.ledger.append(
                user_id=identity.id,
                kind=kind,
                docs=docs,
                score=score,
                details=details,
                verdict=verdict,
            )
        except (SQLAlchemyError, UnknownIdentityError) as err:
            logger.exception("Could not record %s for user %s", kind.value, identity.id)
            raise AnalysisFailedError(failure_message) from err

    async def run_similarity(
        self,
        reference: DocumentSide,
        target: DocumentSide,
        identity: AuthenticatedIdentity,
    ) -> SimilarityResult:
        """Compare reference and target material.

        Raises:
            MissingInputError: If either side has neither a file nor text.
            AnalysisFailedError: If the model call or its output failed.
        """
        if not reference.has_content or not target.has_content:
            raise MissingInputError("Reference and target content are required")

        units = normalize([reference, target], similarity_prompt(reference, target))
        result = await self._invoke(
            units, GenerationOptions(json_output=True), SimilarityResult, SIMILARITY_FAILED
        )

        self._record(
            identity,
            SIMILARITY_FAILED,
            kind=AnalysisKind.SIMILARITY_CHECK,
            docs=f"{reference.label} -> {target.label}",
            score=format_score(result.similarity_score),
            details=f"{result.ref_lang} ↔ {result.tgt_lang}",
            verdict=similarity_verdict(result.similarity_score),
        )
        return result

    async def run_web_scan(
        self,
        document: SubmittedFile | None,
        identity: AuthenticatedIdentity,
    ) -> WebScanResult:
        """Search the public web for sources resembling ``document``."""
        units = normalize([DocumentSide("document", file=document)], WEB_SCAN_PROMPT)
        result = await self._invoke(
            units,
            GenerationOptions(json_output=True, web_search=True),
            WebScanResult,
            WEB_SCAN_FAILED,
        )

        score, verdict = web_scan_verdict(result)
        self._record(
            identity,
            WEB_SCAN_FAILED,
            kind=AnalysisKind.WEB_SCAN,
            docs=document.filename if document is not None else "Document",
            score=score,
            details=f"{len(result.sources)} sources found",
            verdict=verdict,
        )
        return result

    async def run_summary(
        self,
        document: SubmittedFile | None,
        identity: AuthenticatedIdentity,
    ) -> SummaryResult:
        """Summarize ``document``."""
        units = normalize([DocumentSide("document", file=document)], SUMMARY_PROMPT)
        result = await self._invoke(
            units, GenerationOptions(json_output=True), SummaryResult, SUMMARY_FAILED
        )

        self._record(
            identity,
            SUMMARY_FAILED,
            kind=AnalysisKind.SUMMARY,
            docs=document.filename if document is not None else "Document",
            score="-",
            details="Summarized",
            verdict="Done",
        )
        return result
