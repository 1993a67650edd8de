"""
Custom exception classes for the hierarchy reader.

This module defines the exception classes raised while ingesting a hierarchy
dataset. Only source-opening failures are fatal; per-line parse failures are
classified here but are always caught and counted by the workers.
"""

from typing import Optional, List, Dict, Any


class HierarchyIngestError(Exception):
    """Base exception class for all hierarchy ingestion errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize the base ingestion error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional context information about the error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'context': self.context
        }


class FileAccessError(HierarchyIngestError):
    """Exception raised for file access and I/O errors."""

    def __init__(self, message: str, file_path: str, operation: str,
                 original_error: Optional[Exception] = None):
        """
        Initialize file access error.

        Args:
            message: Human-readable error message
            file_path: Path to the file that caused the error
            operation: Type of operation that failed (open, read, write, etc.)
            original_error: Original exception that caused this error
        """
        context = {
            'file_path': file_path,
            'operation': operation,
            'original_error': str(original_error) if original_error else None,
            'original_error_type': type(original_error).__name__ if original_error else None
        }
        super().__init__(message, error_code='FILE_ACCESS_ERROR', context=context)
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class SourceOpenError(FileAccessError):
    """Raised when the hierarchy source cannot be opened. Always fatal."""

    def __init__(self, message: str, file_path: str,
                 original_error: Optional[Exception] = None):
        super().__init__(message, file_path=file_path, operation='open',
                         original_error=original_error)
        self.error_code = 'SOURCE_OPEN_ERROR'


class SourceConsumedError(HierarchyIngestError):
    """Raised when a reader whose source was already read is asked to read again."""

    def __init__(self, message: str, source_name: Optional[str] = None):
        super().__init__(message, error_code='SOURCE_CONSUMED',
                         context={'source_name': source_name})
        self.source_name = source_name


class EntryParseError(HierarchyIngestError):
    """Base class for recoverable per-line parse failures."""

    category = 'parse'

    def __init__(self, message: str, line: Optional[str] = None,
                 reason: Optional[str] = None):
        """
        Initialize entry parse error.

        Args:
            message: Human-readable error message
            line: The raw line that failed to parse
            reason: Short machine-friendly reason (missing_separator, overflow, ...)
        """
        context = {
            'line': line,
            'reason': reason,
            'category': self.category
        }
        super().__init__(message, error_code='ENTRY_PARSE_ERROR', context=context)
        self.line = line
        self.reason = reason


class BadIdError(EntryParseError):
    """Missing separator or an identifier that is not a signed 64-bit integer."""

    category = 'bad_id'


class BadPayloadError(EntryParseError):
    """Payload that does not decode into a hierarchy record."""

    category = 'bad_payload'


class MergeError(HierarchyIngestError):
    """Exception raised when the partition merge breaks its postconditions."""

    def __init__(self, message: str, expected_count: Optional[int] = None,
                 actual_count: Optional[int] = None, partition_count: Optional[int] = None):
        context = {
            'expected_count': expected_count,
            'actual_count': actual_count,
            'partition_count': partition_count
        }
        super().__init__(message, error_code='MERGE_ERROR', context=context)
        self.expected_count = expected_count
        self.actual_count = actual_count
        self.partition_count = partition_count


class ConfigurationError(HierarchyIngestError):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, config_key: Optional[str] = None,
                 config_value: Any = None, valid_values: Optional[List[Any]] = None):
        """
        Initialize configuration error.

        Args:
            message: Human-readable error message
            config_key: Configuration key that has invalid value
            config_value: Invalid configuration value
            valid_values: List of valid values for the configuration key
        """
        context = {
            'config_key': config_key,
            'config_value': str(config_value) if config_value is not None else None,
            'valid_values': [str(v) for v in valid_values] if valid_values else None
        }
        super().__init__(message, error_code='CONFIGURATION_ERROR', context=context)
        self.config_key = config_key
        self.config_value = config_value
        self.valid_values = valid_values or []


# Utility functions for exception handling

def create_file_error(operation: str, file_path: str, original_error: Exception) -> FileAccessError:
    """
    Create a standardized file access error.

    Args:
        operation: Type of file operation that failed
        file_path: Path to the file
        original_error: Original exception

    Returns:
        FileAccessError instance
    """
    message = f"Failed to {operation} file '{file_path}': {str(original_error)}"

    return FileAccessError(
        message=message,
        file_path=file_path,
        operation=operation,
        original_error=original_error
    )


def get_error_severity(error: Exception) -> str:
    """
    Get the severity level of an error.

    Args:
        error: Exception to evaluate

    Returns:
        Severity level string (low, medium, high, critical)
    """
    if isinstance(error, (ConfigurationError, SourceOpenError)):
        return 'critical'
    elif isinstance(error, (FileAccessError, MergeError)):
        return 'high'
    elif isinstance(error, EntryParseError):
        return 'low'
    else:
        return 'medium'
