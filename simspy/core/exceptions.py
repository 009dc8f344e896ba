"""
Custom exceptions for simspy.

Gateway failures live in ``simspy.core.api.errors``; this module holds the
root of the hierarchy and the client-side errors raised before or after a
request is made.
"""
from typing import Optional


class SimsException(Exception):
    """Base exception for all simspy errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ValidationError(SimsException, ValueError):
    """Raised when a client-side precondition fails before any request is sent."""
    pass


class StaleResponseError(SimsException):
    """
    Raised when a response arrives after the session it was issued under ended.
    
    The response is discarded; no cached state is touched.
    """
    
    def __init__(self, issued_generation: int, current_generation: int) -> None:
        self.issued_generation = issued_generation
        self.current_generation = current_generation
        super().__init__(
            f"Response from session generation {issued_generation} discarded "
            f"(current generation is {current_generation})"
        )
