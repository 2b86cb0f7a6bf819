"""Service layer for OTP authentication and document analysis."""
