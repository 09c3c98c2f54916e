"""Tests for the shared response, logging and database helpers."""

import json
import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from common import db, responses
from common.logger import Timer, log_error, log_info


class TestResponses:
    def test_success_serializes_datetimes(self):
        response = responses.success({"at": datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)})

        assert response["statusCode"] == 200
        assert response["headers"]["Content-Type"] == "application/json"
        assert json.loads(response["body"]) == {"at": "2026-01-02T03:04:05+00:00"}

    def test_error_body(self):
        response = responses.error("Invalid JSON data")

        assert response["statusCode"] == 400
        assert json.loads(response["body"]) == {"error": "Invalid JSON data"}

    def test_empty_has_cors_and_no_body(self):
        response = responses.empty(500)

        assert response["statusCode"] == 500
        assert response["body"] == ""
        assert response["headers"] == responses.CORS_HEADERS

    def test_headers_are_not_shared(self):
        first = responses.empty()
        first["headers"]["X-Extra"] = "1"

        assert "X-Extra" not in responses.empty()["headers"]
        assert "X-Extra" not in responses.CORS_HEADERS


class TestLogger:
    def test_log_info_emits_json(self, caplog):
        with caplog.at_level(logging.INFO, logger="visitors"):
            log_info("visitor_saved", rows_affected=1)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry == {"level": "INFO", "event": "visitor_saved", "rows_affected": 1}

    def test_log_error_includes_traceback(self, caplog):
        try:
            raise RuntimeError("db down")
        except RuntimeError as e:
            with caplog.at_level(logging.ERROR, logger="visitors"):
                log_error("visitor_registration_failed", error_code="DB_ERROR", exc=e)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["error_code"] == "DB_ERROR"
        assert entry["exception"] == "RuntimeError: db down"
        assert "Traceback" in entry["traceback"]

    def test_timer_measures_duration(self):
        with Timer() as t:
            pass

        assert t.duration_ms >= 0


class TestExecuteWrite:
    def test_returns_rowcount_and_closes(self):
        conn = MagicMock()
        cursor = conn.cursor.return_value.__enter__.return_value
        cursor.rowcount = 1

        with patch("common.db.psycopg2.connect", return_value=conn) as connect:
            rows = db.execute_write("dbname=visitors", "INSERT INTO visitors VALUES (%s)", ("Ada",))

        assert rows == 1
        connect.assert_called_once_with("dbname=visitors")
        cursor.execute.assert_called_once_with("INSERT INTO visitors VALUES (%s)", ("Ada",))
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_error_rolls_back_closes_and_raises(self):
        conn = MagicMock()
        conn.cursor.return_value.__enter__.return_value.execute.side_effect = ValueError("bad")

        with patch("common.db.psycopg2.connect", return_value=conn):
            with pytest.raises(ValueError):
                db.execute_write("dbname=visitors", "INSERT INTO visitors VALUES (%s)", ("Ada",))

        conn.rollback.assert_called_once()
        conn.close.assert_called_once()

    def test_connect_failure_propagates(self):
        with patch("common.db.psycopg2.connect", side_effect=OSError("refused")):
            with pytest.raises(OSError):
                db.execute_write("dbname=visitors", "SELECT 1")
