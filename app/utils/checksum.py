"""
Checksum utility functions
"""

import hashlib
from typing import Union


def calculate_checksum(content: Union[str, bytes]) -> str:
    """
    Calculate SHA256 checksum of text or raw bytes.

    Args:
        content: Text (hashed as UTF-8) or bytes

    Returns:
        Hexadecimal SHA256 hash
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    if not isinstance(content, (bytes, bytearray)):
        raise ValueError(f"Unsupported content type: {type(content)}")
    return hashlib.sha256(content).hexdigest()


def short_checksum(content: Union[str, bytes], length: int = 12) -> str:
    """Abbreviated checksum used to identify uploads in log lines"""
    return calculate_checksum(content)[:length]
