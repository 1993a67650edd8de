"""
Utility functions and helpers.
"""

from .data_utils import (
    safe_string_conversion,
    get_nested
)
from .error_handler import (
    RetryConfig,
    safe_file_operation,
    create_error_context,
    log_error_details
)

__all__ = [
    'safe_string_conversion',
    'get_nested',
    'RetryConfig',
    'safe_file_operation',
    'create_error_context',
    'log_error_details'
]
