"""
Avatar file validation and reading.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import Tuple, Optional, Union, Iterable

import aiofiles

from ..exceptions import ValidationError


class FileValidator:
    """
    Validates files before upload.
    
    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Check size and extension limits
    """
    
    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Tuple of (validated Path, file size in bytes)
            
        Raises:
            FileNotFoundError: If file doesn't exist
            ValidationError: If path is not a regular file
        """
        path = Path(file_path)
        
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        
        if not path.is_file():
            raise ValidationError(f"Path is not a file: {path}")
        
        return path, path.stat().st_size
    
    def validate_size(self, file_size: int, max_size: Optional[int] = None) -> None:
        """
        Validate file size.
        
        Raises:
            ValidationError: If file is empty or exceeds max size
        """
        if file_size == 0:
            raise ValidationError("Cannot upload empty file")
        
        if max_size and file_size > max_size:
            raise ValidationError(
                f"File size {file_size} exceeds maximum {max_size}"
            )
    
    def validate_extension(self, path: Path, allowed: Iterable[str]) -> None:
        """
        Validate the file extension (case-insensitive).
        
        Raises:
            ValidationError: If the extension is not allowed
        """
        allowed = {ext.lower() for ext in allowed}
        if path.suffix.lower() not in allowed:
            raise ValidationError(
                f"Unsupported file type '{path.suffix}', expected one of {sorted(allowed)}"
            )


class AsyncFileReader:
    """Reads whole files without blocking the event loop."""
    
    async def read_file(self, file_path: Path) -> bytes:
        """
        Read entire file.
        
        Raises:
            OSError: If the file cannot be read
        """
        async with aiofiles.open(file_path, 'rb') as f:
            return await f.read()
