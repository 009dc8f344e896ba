"""Request builder for API requests."""
import mimetypes
from urllib.parse import urlencode
from typing import Any, Dict, Optional, Tuple

import aiohttp

from ..config import APIConfig


class RequestBuilder:
    """Builds URL, headers and payload for one gateway request."""
    
    def __init__(self, config: APIConfig, token: Optional[str] = None):
        """
        Initializes request builder.
        
        Args:
            config: Client configuration (base URL)
            token: Bearer token to attach, or None for anonymous calls
        """
        self.config = config
        self.token = token
    
    def build_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Builds request URL."""
        url = self.config.url_for(path)
        if params:
            url = f"{url}?{urlencode(params)}"
        return url
    
    def build_headers(self) -> Dict[str, str]:
        """Builds request headers."""
        headers = {}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers
    
    def build_payload(
        self,
        body: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Tuple[str, bytes]]] = None
    ) -> Dict[str, Any]:
        """
        Builds the body kwargs for ``ClientSession.request``.
        
        Args:
            body: JSON body
            files: Multipart fields as ``{field: (filename, content)}``;
                takes precedence over ``body``
        """
        if files:
            form = aiohttp.FormData()
            for field_name, (filename, content) in files.items():
                content_type = mimetypes.guess_type(filename)[0] or 'application/octet-stream'
                form.add_field(
                    field_name,
                    content,
                    filename=filename,
                    content_type=content_type
                )
            return {'data': form}
        
        if body is not None:
            return {'json': body}
        
        return {}
