"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .analysis import SimilarityResult, SummaryResult, WebScanResult, WebSource
from .auth import MessageResponse, SendOtpRequest, VerifyOtpRequest, VerifyOtpResponse
from .history import HistoryEntryResponse

__all__ = [
    "SimilarityResult", "SummaryResult", "WebScanResult", "WebSource",
    "MessageResponse", "SendOtpRequest", "VerifyOtpRequest", "VerifyOtpResponse",
    "HistoryEntryResponse",
]
