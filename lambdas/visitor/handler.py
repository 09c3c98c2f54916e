"""
Lambda: OPTIONS | GET | POST /visitor
Registers a visitor from the front-end sign-in form.

OPTIONS acknowledges CORS preflight, GET is a liveness check and POST
validates the submission and inserts one row into `visitors`.
"""

import base64
import binascii
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from datetime import datetime, timezone

from pydantic import ValidationError
from common.config import load_config
from common.db import execute_write
from common.logger import log_info, log_error, Timer
from common.validators import VisitorSubmission, VisitorRecord, resolve_timestamp
from common.responses import success, error, empty

CONFIG = load_config()

INSERT_VISITOR_SQL = """
    INSERT INTO visitors (firstname, surname, company, email, timestamp)
    VALUES (%s, %s, %s, %s, %s)
"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _http_method(event) -> str:
    method = event.get("httpMethod")
    if not method:
        # HTTP API (payload v2) events
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (method or "").upper()


def _read_body(event):
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        return base64.b64decode(body, validate=True)
    return body


def _save_visitor(record: VisitorRecord) -> int:
    """Insert one visitor row. Database failures are logged and reported as 0 rows."""
    with Timer() as t:
        try:
            rows = execute_write(
                CONFIG.connection_string,
                INSERT_VISITOR_SQL,
                (
                    record.first_name,
                    record.last_name,
                    record.company,
                    record.email,
                    record.timestamp,
                ),
            )
        except Exception as e:
            log_error("visitor_registration_failed", error_code="DB_ERROR", exc=e)
            return 0

    log_info("visitor_saved", rows_affected=rows, execution_time_ms=t.duration_ms)
    return rows


def process_registration(raw_body):
    try:
        submission = VisitorSubmission.model_validate_json(raw_body or "")
    except ValidationError:
        log_error("visitor_registration_failed", error_code="INVALID_JSON")
        return error("Invalid JSON data")

    missing = submission.missing_fields()
    if missing:
        log_error("visitor_registration_failed", error_code="MISSING_FIELDS", fields=missing)
        return error("All fields are required")

    try:
        timestamp = resolve_timestamp(submission.timestamp, now=_utcnow)
    except ValueError:
        log_error("visitor_registration_failed", error_code="INVALID_TIMESTAMP")
        return error("Invalid timestamp")

    record = VisitorRecord.from_submission(submission, timestamp)

    rows = _save_visitor(record)
    if rows != 1:
        log_error(
            "visitor_registration_failed",
            error_code="ROW_COUNT_MISMATCH",
            rows_affected=rows,
        )
        return empty(500)

    log_info("visitor_registered", company=record.company)

    # The echoed timestamp is the response time, not the stored value.
    return success(
        {
            "success": True,
            "message": "Visitor registered successfully",
            "visitor": {
                "firstname": record.first_name,
                "surname": record.last_name,
                "company": record.company,
                "email": record.email,
                "timestamp": _utcnow(),
            },
        }
    )


def handler(event, context):
    method = _http_method(event)
    log_info("visitor_request_received", method=method)

    if method == "OPTIONS":
        log_info("visitor_preflight")
        return empty(200)

    if method == "GET":
        log_info("visitor_health_check")
        return success(
            {
                "message": "Visitor Registration API is running!",
                "status": "Use POST to register a visitor",
                "timestamp": _utcnow(),
            }
        )

    if method == "POST":
        try:
            try:
                raw_body = _read_body(event)
            except binascii.Error:
                log_error("visitor_registration_failed", error_code="INVALID_BODY_ENCODING")
                return error("Invalid JSON data")
            return process_registration(raw_body)
        except Exception as e:
            log_error("visitor_registration_failed", error_code="UNEXPECTED_ERROR", exc=e)
            return empty(500)

    log_info("visitor_method_not_supported", method=method)
    return error("Method not supported")
