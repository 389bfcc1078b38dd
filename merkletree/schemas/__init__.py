"""
Schemas - Errors & Encoding
File: __init__.py

Purpose: Export the error taxonomy shared by every module.

Tree export/import lives in merkletree.schemas.encoding and is imported
from there directly, since it depends on the tree module.
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleTreeException,
    EmptyInputException,
    DataNotFoundException,
    InvalidPollardHeightException,
    MalformedProofException,
    UnknownHashTypeException,
    TreeEncodingException,
    ConfigurationException,
)

__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleTreeException",
    "EmptyInputException",
    "DataNotFoundException",
    "InvalidPollardHeightException",
    "MalformedProofException",
    "UnknownHashTypeException",
    "TreeEncodingException",
    "ConfigurationException",
]
