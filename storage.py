# storage.py -- Access log file persistence for the Access Log Viewer.
# Implements DESIGN.md Component 3.7: JSON serialization of the access logs
# of all secrets, written atomically through a temp file.

import json
import os
import tempfile
from pathlib import Path

from access_log import AccessLog, AccessLogError


def log_file_exists(log_file: str) -> bool:
    """Return True if the access log file exists on disk."""
    return Path(log_file).exists()


def load_access_logs(log_file: str) -> dict[str, AccessLog]:
    """Read log_file and return the access log of every secret in it.

    The file holds {"secrets": {description: {"access_log": [entry, ...]}}}
    with entries oldest first.

    Args:
        log_file: Path to the access log file.

    Returns:
        Mapping of secret description to its AccessLog.

    Raises:
        FileNotFoundError: If log_file does not exist.
        AccessLogError: If the file cannot be read, is not valid JSON or has
            the wrong shape.
    """
    try:
        with open(log_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as e:
        raise AccessLogError(f"Access log file {log_file} is not valid JSON: {e}")
    except (UnicodeDecodeError, OSError) as e:
        raise AccessLogError(f"Access log file {log_file} cannot be read: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("secrets", {}), dict):
        raise AccessLogError(f"Access log file {log_file} has no 'secrets' object")

    logs = {}
    for description, secret in data.get("secrets", {}).items():
        if not isinstance(secret, dict):
            raise AccessLogError(f"Secret '{description}' must be an object")
        logs[description] = AccessLog.from_list(secret.get("access_log", []))
    return logs


def save_access_logs(logs: dict[str, AccessLog], log_file: str) -> None:
    """Serialize logs to JSON and write them to log_file.

    Writes to a temp file first, then renames for atomicity.

    Args:
        logs: Mapping of secret description to its AccessLog.
        log_file: Path to write the access log file.
    """
    data = {
        "secrets": {
            description: {"access_log": log.to_list()}
            for description, log in logs.items()
        }
    }

    dir_name = os.path.dirname(os.path.abspath(log_file))
    fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, log_file)
    except Exception:
        # Clean up temp file on failure
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
