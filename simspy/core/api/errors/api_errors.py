"""Gateway error taxonomy and known API status codes."""
from typing import Dict, Optional

from ...exceptions import SimsException


class APIStatusCodes:
    """Application-level status codes carried in the response envelope."""
    
    SUCCESS = 0
    
    STATUS_CODES: Dict[int, str] = {
        0: 'Sukses',
        102: 'Parameter tidak sesuai format',
        103: 'Username atau password salah',
        108: 'Token tidak valid atau kadaluwarsa',
    }
    
    @classmethod
    def get_message(cls, code: int) -> str:
        """Gets the default message for a status code."""
        return cls.STATUS_CODES.get(code, f"Unknown status: {code}")


class GatewayError(SimsException):
    """Base class for every failure surfaced by the API gateway."""
    pass


class NetworkError(GatewayError):
    """No usable response: offline, timeout, DNS, or an undecodable body."""
    pass


class UnauthorizedError(GatewayError):
    """
    HTTP 401 from the service.
    
    By the time this is raised the gateway has already ended the session.
    """
    
    def __init__(self, message: str = 'Unauthorized', error_code: Optional[int] = None):
        super().__init__(message, error_code)


class ApplicationError(GatewayError):
    """Decoded envelope with ``status != 0`` (business-rule rejection)."""
    
    def __init__(self, message: Optional[str], status: int, http_status: Optional[int] = None):
        self.status = status
        self.http_status = http_status
        super().__init__(message or APIStatusCodes.get_message(status), status)
