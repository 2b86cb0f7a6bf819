"""Shared API dependencies for authentication and service construction."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from docxcheck.core.security import AuthenticatedIdentity, InvalidTokenError, decode_access_token
from docxcheck.core.settings import settings
from docxcheck.db.session import get_db
from docxcheck.repositories.credentials import CredentialStore
from docxcheck.repositories.history import HistoryLedger
from docxcheck.services.analysis import AnalysisOrchestrator
from docxcheck.services.model_client import ModelClient
from docxcheck.services.notifier import Notifier
from docxcheck.services.otp import OtpAuthenticator

# Missing credentials are reported by get_current_identity, not by the scheme.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthenticatedIdentity:
    """Verify the bearer token and return the identity it asserts.

    Verification uses only the signing secret; no database lookup happens.

    Raises:
        HTTPException: 401 when no bearer token is sent, 400 when it is
            malformed, forged or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )
    try:
        return decode_access_token(credentials.credentials)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid token.",
        ) from err


def get_model_client(request: Request) -> ModelClient:
    """Return the model client built at startup."""
    return request.app.state.model_client


def get_notifier(request: Request) -> Notifier:
    """Return the notifier built at startup."""
    return request.app.state.notifier


ModelClientDep = Annotated[ModelClient, Depends(get_model_client)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]


def get_otp_authenticator(db: SessionDep, notifier: NotifierDep) -> OtpAuthenticator:
    return OtpAuthenticator(CredentialStore(db), notifier, settings)


def get_history_ledger(db: SessionDep) -> HistoryLedger:
    return HistoryLedger(db)


def get_orchestrator(
    model: ModelClientDep,
    ledger: Annotated[HistoryLedger, Depends(get_history_ledger)],
) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(model, ledger)


# Type aliases for endpoint signatures
CurrentIdentityDep = Annotated[AuthenticatedIdentity, Depends(get_current_identity)]
OtpAuthenticatorDep = Annotated[OtpAuthenticator, Depends(get_otp_authenticator)]
HistoryLedgerDep = Annotated[HistoryLedger, Depends(get_history_ledger)]
OrchestratorDep = Annotated[AnalysisOrchestrator, Depends(get_orchestrator)]
