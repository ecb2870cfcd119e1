# utils.py

import hmac
import hashlib
import subprocess
import logging
from typing import Mapping, Optional

from models.dispatch_result import ExecutionResult

logger = logging.getLogger(__name__)


def verify_signature(secret: str, request_body: bytes, signature: Optional[str]) -> bool:
    if not signature:
        logger.warning("No signature provided.")
        return False

    # Gitea sends the bare hex digest; tolerate a GitHub-style "sha256=" prefix.
    if signature.startswith("sha256="):
        signature = signature[len("sha256="):]

    mac = hmac.new(secret.encode(), msg=request_body, digestmod=hashlib.sha256)
    is_valid = hmac.compare_digest(mac.hexdigest().encode(), signature.strip().lower().encode())
    if is_valid:
        logger.debug("Webhook signature verified successfully.")
    else:
        logger.warning("Webhook signature verification failed.")
    return is_valid


def run_command(command: str, env: Mapping[str, str], timeout: Optional[float] = None) -> ExecutionResult:
    """
    Run `command` directly (no shell, no arguments) and capture stdout and stderr combined.

    Failures never raise: a spawn error, non-zero exit or timeout is reported in `ExecutionResult.error`.
    """
    logger.debug(f"Executing command: {command}")
    try:
        result = subprocess.run(
            [command],
            env=dict(env),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        output = e.output or b""
        logger.error(f"Command timed out after {timeout}s: {command}\nOutput: {output.decode(errors='replace')}")
        return ExecutionResult(command=command, output=output, error=f"command {command} timed out after {timeout}s")
    except (OSError, ValueError) as e:
        # ValueError: arguments or environment the OS cannot take (NUL bytes, lone surrogates).
        logger.error(f"Command could not be started: {command}: {e}")
        return ExecutionResult(command=command, error=f"command {command} could not be started: {e}")

    if result.returncode != 0:
        logger.error(
            f"Command failed: {command} (exit status {result.returncode})\n"
            f"Output: {result.stdout.decode(errors='replace')}"
        )
        return ExecutionResult(
            command=command,
            output=result.stdout,
            error=f"command {command} exited with status {result.returncode}",
        )

    logger.info(f"Executed: {command}")
    logger.info(f"Output: {result.stdout.decode(errors='replace')}")
    return ExecutionResult(command=command, output=result.stdout)
