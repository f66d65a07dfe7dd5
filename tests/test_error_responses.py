"""
Tests for the standard error envelope.

Run with: python -m pytest tests/test_error_responses.py -v
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.error_responses import ErrorCode, ErrorDetail, make_error, make_errors


class TestMakeError:

    def test_single_error(self):
        result = make_error(
            code=ErrorCode.INVALID_DURATION_CLASS,
            message="Unknown duration class: 'daily'",
            field="duration",
            request_id="abc",
        )

        assert result["status"] == "error"
        assert result["error"] == "Unknown duration class: 'daily'"
        assert result["errors"] == [{
            "code": "INVALID_DURATION_CLASS",
            "message": "Unknown duration class: 'daily'",
            "field": "duration",
        }]
        assert result["request_id"] == "abc"
        assert "timestamp" in result

    def test_optional_fields_omitted(self):
        result = make_error(ErrorCode.NOT_FOUND, "missing", include_timestamp=False)

        assert "timestamp" not in result
        assert "request_id" not in result
        assert "field" not in result["errors"][0]


class TestMakeErrors:

    def test_first_message_is_legacy_error(self):
        result = make_errors([
            {"code": ErrorCode.INVALID_DURATION_CLASS, "message": "bad duration", "field": "duration"},
            {"code": ErrorCode.INVALID_DATE, "message": "bad instant", "field": "at"},
        ])

        assert result["error"] == "bad duration"
        assert [e["field"] for e in result["errors"]] == ["duration", "at"]

    def test_empty(self):
        result = make_errors([], include_timestamp=False)
        assert result == {"status": "error"}

    def test_detail_to_dict(self):
        assert ErrorDetail("X", "y").to_dict() == {"code": "X", "message": "y"}
