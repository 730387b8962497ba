#!/usr/bin/env python3
"""
Error formatting and CLI exception handling for the RNA match pipeline
"""
import sys
import traceback
import logging
from functools import wraps
from typing import Callable

from rnamatch.exceptions import (
    RnaMatchError, ConfigurationError, AlignmentError, DataError, PipelineError
)

logger = logging.getLogger("rnamatch.errors")


def format_error(error: Exception, verbose: bool = False) -> str:
    """Format an error message for display

    Args:
        error: Exception object
        verbose: Whether to include detailed information

    Returns:
        Formatted error message
    """
    if isinstance(error, ConfigurationError):
        prefix = "Configuration Error"
    elif isinstance(error, AlignmentError):
        prefix = "Alignment Error"
    elif isinstance(error, DataError):
        prefix = "Data Error"
    elif isinstance(error, PipelineError):
        prefix = "Pipeline Error"
    elif isinstance(error, RnaMatchError):
        prefix = "Error"
    elif verbose:
        return f"Unexpected Error ({error.__class__.__name__}): {str(error)}\n{traceback.format_exc()}"
    else:
        return f"Unexpected Error: {str(error)}"

    if verbose and error.details:
        return f"{prefix}: {error.message}\nDetails: {error.details}"
    return f"{prefix}: {error.message}"


def handle_exceptions(func: Callable) -> Callable:
    """Decorator to handle exceptions in CLI commands

    Args:
        func: Function to wrap

    Returns:
        Wrapped function with exception handling
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            print("\nOperation cancelled by user", file=sys.stderr)
            return 130  # Standard exit code for SIGINT
        except RnaMatchError as e:
            logger.error(f"{e.__class__.__name__}: {e.message}")
            if e.details:
                logger.error(f"Details: {e.details}")
            print(format_error(e), file=sys.stderr)
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {str(e)}", exc_info=True)
            print(format_error(e, verbose=False), file=sys.stderr)
            print("See log for details. Run with --verbose for more information.", file=sys.stderr)
            return 2
    return wrapper
