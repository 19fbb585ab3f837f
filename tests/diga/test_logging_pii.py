"""Tests for PII redaction and the structured log lines of the writer."""

import json
import logging
from io import StringIO

import pytest

from diga.codevalidation import build_code_validation_xml
from diga.core.logging import JSONFormatter, init_logging, set_request_id, set_trace_id
from diga.samples import build_sample_code_information
from diga.xrechnung import build_invoice_xml


def _record(msg, **extra):
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoggerPII:
    """PII of the billing contact must not reach the log sink."""

    @pytest.fixture
    def formatter(self):
        return JSONFormatter()

    def test_email_redaction(self, formatter):
        log_data = json.loads(formatter.format(_record("Contact: billing@sample-therapeutics.example")))

        assert "billing@sample-therapeutics.example" not in log_data["msg"]
        assert "b******@sample-therapeutics.example" in log_data["msg"]

    def test_phone_redaction(self, formatter):
        log_data = json.loads(formatter.format(_record("Phone: +49 30 1234567")))

        assert "+49 30 1234567" not in log_data["msg"]
        assert "+4************" in log_data["msg"]

    def test_iban_redaction(self, formatter):
        log_data = json.loads(formatter.format(_record("Payout to DE89370400440532013000")))

        assert "DE89370400440532013000" not in log_data["msg"]
        assert "DE********************" in log_data["msg"]

    def test_extra_fields_are_redacted(self, formatter):
        record = _record(
            "Invoice document created",
            contact_email="erika.mustermann@example.com",
            contact_phone="030 1234567",
        )

        log_data = json.loads(formatter.format(record))

        assert log_data["contact_email"] == "e***************@example.com"
        assert "1234567" not in log_data["contact_phone"]
        assert log_data["contact_phone"].startswith("03")

    def test_ik_numbers_and_codes_preserved(self, formatter):
        msg = "Request from IK123456789 to 109911114 for code 77AAAAAAAAAAAGIS, VAT DE123456789"

        log_data = json.loads(formatter.format(_record(msg)))

        assert log_data["msg"] == msg

    def test_mandatory_fields(self, formatter):
        set_trace_id("trace-1")
        set_request_id("req-1")
        try:
            log_data = json.loads(formatter.format(_record("hello", size_bytes=42)))
        finally:
            set_trace_id(None)
            set_request_id(None)

        assert log_data["trace_id"] == "trace-1"
        assert log_data["request_id"] == "req-1"
        assert log_data["level"] == "info"
        assert log_data["logger"] == "test"
        assert log_data["ts_utc"].endswith("Z")
        assert log_data["size_bytes"] == 42

    def test_unknown_trace_id(self, formatter):
        log_data = json.loads(formatter.format(_record("hello")))

        assert log_data["trace_id"] == "unknown"
        assert "request_id" not in log_data


@pytest.fixture
def log_stream():
    root = logging.getLogger()
    level = root.level
    stream = StringIO()
    init_logging(stream)
    handler = root.handlers[-1]
    yield stream
    root.removeHandler(handler)
    root.setLevel(level)


def _lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_code_validation_is_logged(log_stream, diga_information, serializer):
    build_code_validation_xml(diga_information, build_sample_code_information(), serializer=serializer)

    entries = [entry for entry in _lines(log_stream) if entry["msg"] == "Code validation request created"]
    assert len(entries) == 1
    assert entries[0]["process_identifier"] == "TDFC0"
    assert entries[0]["receiver_ik"] == "109911114"
    assert entries[0]["size_bytes"] > 0


def test_invoice_log_does_not_leak_contact_data(log_stream, diga_information, invoice, billing_information, serializer):
    build_invoice_xml(diga_information, invoice, billing_information, serializer=serializer)

    output = log_stream.getvalue()
    assert "billing@sample-therapeutics.example" not in output
    assert "+49 30 1234567" not in output
    entries = [entry for entry in _lines(log_stream) if entry["msg"] == "Invoice document created"]
    assert entries[0]["invoice_id"] == "DIGA-2021-00001"
    assert entries[0]["category_code"] == "S"
    assert entries[0]["grand_total"] == "59.38"
