"""DocxCheck: OTP-authenticated document analysis service."""

__version__ = "1.0.0"
