#!/usr/bin/env python3
"""
Exception hierarchy for the RNA match pipeline.
All custom exceptions should inherit from RnaMatchError.
"""
from typing import Dict, Any, Optional


class RnaMatchError(Exception):
    """Base exception for all rnamatch errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(RnaMatchError):
    """Error related to configuration issues"""
    pass


class ValidationError(RnaMatchError):
    """Data validation error"""
    pass


class FileOperationError(RnaMatchError):
    """Error during file operations"""
    pass


class DataError(RnaMatchError):
    """Error related to data integrity or format"""
    pass


class AlignmentError(RnaMatchError):
    """Error running the external aligner or building its databases"""
    pass


class PipelineError(RnaMatchError):
    """Error in pipeline processing"""
    pass
