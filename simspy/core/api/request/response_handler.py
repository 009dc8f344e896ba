"""Response handler for API responses."""
import json
from typing import Any, Dict, Optional

from ..errors import ApplicationError, APIStatusCodes, NetworkError


class ResponseHandler:
    """Decodes the ``{status, message, data}`` envelope."""
    
    @staticmethod
    def parse_response(text: str) -> Dict[str, Any]:
        """
        Parses the JSON envelope.
        
        Raises:
            NetworkError: If the body is not a JSON object with a status
        """
        try:
            envelope = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            raise NetworkError("Empty or invalid response")
        
        if not isinstance(envelope, dict) or not isinstance(envelope.get('status'), int):
            raise NetworkError("Response envelope has no status")
        
        return envelope
    
    @staticmethod
    def extract_message(text: str) -> Optional[str]:
        """Best-effort message from a body that may not be an envelope."""
        try:
            envelope = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            return None
        if isinstance(envelope, dict):
            return envelope.get('message')
        return None
    
    @staticmethod
    def process_response(http_status: int, text: str) -> Any:
        """
        Returns the ``data`` payload of a successful envelope.
        
        Success is decided by ``status == 0`` in the body, not by the HTTP
        status code.
        
        Raises:
            ApplicationError: If ``status != 0``
            NetworkError: If the body cannot be decoded
        """
        envelope = ResponseHandler.parse_response(text)
        status = envelope['status']
        
        if status != APIStatusCodes.SUCCESS:
            raise ApplicationError(envelope.get('message'), status, http_status)
        
        return envelope.get('data')
