# src/docxcheck/api/endpoints/analysis.py
"""Document analysis endpoints backed by the generative model."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from docxcheck.api.dependencies import CurrentIdentityDep, OrchestratorDep
from docxcheck.schemas.analysis import SimilarityResult, SummaryResult, WebScanResult
from docxcheck.services.analysis import AnalysisFailedError
from docxcheck.services.errors import MissingInputError
from docxcheck.services.normalizer import DEFAULT_MIME_TYPE, DocumentSide, SubmittedFile

router = APIRouter(tags=["analysis"])

OptionalUpload = Annotated[UploadFile | None, File()]


async def _read_upload(upload: UploadFile | None) -> SubmittedFile | None:
    """Return the upload's bytes, or None for an absent or empty file field."""
    if upload is None:
        return None
    data = await upload.read()
    if not upload.filename and not data:
        return None
    return SubmittedFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or DEFAULT_MIME_TYPE,
        data=data,
    )


def _analysis_failed(err: AnalysisFailedError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(err),
    )


@router.post(
    "/analyze",
    summary="Compare a reference and a target document",
    response_model=SimilarityResult,
)
async def analyze_similarity(
    identity: CurrentIdentityDep,
    orchestrator: OrchestratorDep,
    ref_file: Annotated[UploadFile | None, File(alias="refFile")] = None,
    tgt_file: Annotated[UploadFile | None, File(alias="tgtFile")] = None,
    ref_text: Annotated[str | None, Form(alias="refText")] = None,
    tgt_text: Annotated[str | None, Form(alias="tgtText")] = None,
) -> SimilarityResult:
    """Run a forensic similarity check between two documents or texts."""
    reference = DocumentSide("reference", file=await _read_upload(ref_file), text=ref_text)
    target = DocumentSide("target", file=await _read_upload(tgt_file), text=tgt_text)
    try:
        return await orchestrator.run_similarity(reference, target, identity)
    except MissingInputError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except AnalysisFailedError as err:
        raise _analysis_failed(err) from err


@router.post(
    "/webscan",
    summary="Find public web sources similar to a document",
    response_model=WebScanResult,
)
async def web_scan(
    identity: CurrentIdentityDep,
    orchestrator: OrchestratorDep,
    document: OptionalUpload = None,
) -> WebScanResult:
    """Search the web for sources resembling the uploaded document."""
    submitted = await _read_upload(document)
    try:
        return await orchestrator.run_web_scan(submitted, identity)
    except AnalysisFailedError as err:
        raise _analysis_failed(err) from err


@router.post(
    "/summarize",
    summary="Summarize a document",
    response_model=SummaryResult,
)
async def summarize(
    identity: CurrentIdentityDep,
    orchestrator: OrchestratorDep,
    document: OptionalUpload = None,
) -> SummaryResult:
    """Produce an overview, key points and a conclusion for the document."""
    submitted = await _read_upload(document)
    try:
        return await orchestrator.run_summary(submitted, identity)
    except AnalysisFailedError as err:
        raise _analysis_failed(err) from err
