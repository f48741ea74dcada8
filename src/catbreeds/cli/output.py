"""JSON envelope output for CLI commands.

Every command prints exactly one JSON document to stdout:

    {"success": true, "data": {...}, "error": null}
    {"success": false, "data": {"error_code": "...", ...}, "error": "..."}

Logs go to stderr so stdout stays machine-readable.
"""

import json
import sys
from typing import Any, Mapping, NoReturn, Optional

import click


def _emit(payload: Mapping[str, Any]) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False))


def emit_success(data: Mapping[str, Any]) -> None:
    """Print a success envelope."""
    _emit({"success": True, "data": dict(data), "error": None})


def emit_error(
    message: str,
    *,
    code: str,
    error_type: str,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    """Print an error envelope and exit with status 1."""
    data: dict[str, Any] = {"error_code": code, "error_type": error_type}
    if remediation:
        data["remediation"] = remediation
    if details:
        data["details"] = dict(details)
    _emit({"success": False, "data": data, "error": message})
    sys.exit(1)
