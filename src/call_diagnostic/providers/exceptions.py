"""
Custom exceptions for the diagnostic analysis pipeline
"""


class DiagnosticError(Exception):
    """
    Base exception for diagnostic pipeline errors
    """
    def __init__(self, message: str, status_code: int = None, response_data: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class ConfigurationError(DiagnosticError):
    """
    Raised when client credentials or the refresh token are missing
    """
    pass


class TokenRefreshError(DiagnosticError):
    """
    Raised when the provider token endpoint rejects a refresh
    """
    pass


class ProviderAPIError(DiagnosticError):
    """
    Raised when the provider call-log endpoint returns a non-success response
    """
    pass
