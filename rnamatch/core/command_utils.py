# rnamatch/core/command_utils.py
import shutil
import subprocess
import logging
import time
import random
from typing import List, Optional, Tuple, Union

logger = logging.getLogger("rnamatch.command_utils")


def run_command_with_retry(
    cmd: Union[List[str], str],
    max_retries: int = 0,
    retry_delay: float = 2.0,
    retry_backoff: float = 2.0,
    retry_jitter: float = 0.5,
    timeout: Optional[float] = None,
    check: bool = True,
    **kwargs
) -> subprocess.CompletedProcess:
    """Run an external tool, retrying transient failures

    Args:
        cmd: Command to run (list of strings or string)
        max_retries: Maximum number of retries after the first attempt
        retry_delay: Initial delay between retries in seconds
        retry_backoff: Backoff multiplier for retry delay
        retry_jitter: Random jitter added to retry delay
        timeout: Command timeout in seconds
        check: Whether to check for non-zero return code
        **kwargs: Additional arguments for subprocess.run

    Returns:
        CompletedProcess object

    Raises:
        subprocess.CalledProcessError: If command fails after all retries
        subprocess.TimeoutExpired: If the last attempt timed out
    """
    cmd_str = cmd if isinstance(cmd, str) else ' '.join(cmd)
    retry_count = 0
    current_delay = retry_delay

    while True:
        try:
            logger.debug(f"Attempt {retry_count + 1}/{max_retries + 1}: {cmd_str}")
            return subprocess.run(
                cmd,
                text=True,
                capture_output=True,
                timeout=timeout,
                check=check,
                **kwargs
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            retry_count += 1
            if retry_count > max_retries:
                logger.error(f"Command failed after {max_retries + 1} attempts: {cmd_str}")
                if getattr(e, 'stderr', None):
                    logger.error(f"Stderr: {e.stderr}")
                raise

            actual_delay = current_delay + random.uniform(0, retry_jitter)
            logger.warning(f"Command failed (attempt {retry_count}/{max_retries + 1}), "
                           f"retrying in {actual_delay:.2f}s: {cmd_str}")
            time.sleep(actual_delay)
            current_delay *= retry_backoff


def check_command_availability(command: str) -> bool:
    """Check if a command is available in the system path"""
    return shutil.which(command) is not None


def check_tool_requirements(required_tools: List[str]) -> Tuple[bool, List[str]]:
    """Check if all required tools are available

    Args:
        required_tools: List of required tool commands

    Returns:
        Tuple of (all_available, missing_tools)
    """
    missing_tools = [tool for tool in required_tools if not check_command_availability(tool)]
    return len(missing_tools) == 0, missing_tools
