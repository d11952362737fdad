"""Tests for catcher matching."""

import tempfile
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from integration_auditor.catchers import DEFAULT_CATCHERS, build_catcher
from integration_auditor.matcher import MatchRecord, match_file, match_files

SOAP_SERVICE = """global class OrderService {
    webservice static String createOrder(String payload) {
        return 'ok';
    }
    WebService Static Integer countOrders() {
        return 0;
    }
}
"""

HTTP_CALLOUT = """public class ErpClient {
    public void send() {
        HttpRequest req = new HttpRequest();
        req.setEndpoint('callout:Erp/orders');
        req.setBody('<soapenv:Body><erp:CreateOrder>');
    }
    public void ping() {
        HttpRequest req = new HttpRequest();
        req.setEndpoint(
            'callout:Erp/ping'
        );
    }
}
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestMatchFile:
    """Test matching one file against the registry."""

    def test_two_occurrences_make_one_record(self):
        """Test that two 'webservice static' occurrences give one record with count 2."""
        records = match_file(DEFAULT_CATCHERS, "OrderService.cls", SOAP_SERVICE)

        assert len(records) == 1
        record = records[0]
        assert record.category == "INBOUND"
        assert record.sub_category == "SOAP"
        assert record.file_name == "OrderService.cls"
        assert record.match_count == 2
        assert record.detail_captures == (
            ("webServiceName", ("String createOrder(String payload) ", "Integer countOrders() ")),
        )

    def test_no_match_no_record(self):
        """Test that a file without call sites yields nothing."""
        assert match_file(DEFAULT_CATCHERS, "Util.cls", "public class Util {}") == []

    def test_details_scan_whole_file(self):
        """Test that every endpoint in the file is captured, in text order."""
        records = match_file(DEFAULT_CATCHERS, "ErpClient.cls", HTTP_CALLOUT)

        assert len(records) == 1
        record = records[0]
        assert record.match_count == 2
        captures = dict(record.detail_captures)
        assert captures["endPoint"] == (
            "'callout:Erp/orders')",
            "\n            'callout:Erp/ping'\n        )",
        )
        assert captures["action"] == ("CreateOrder",)

    def test_empty_detail_kept_in_declaration_order(self):
        """Test that an extractor with no capture still appears, in order."""
        text = "HttpRequest r = new HttpRequest();"
        record = match_file(DEFAULT_CATCHERS, "A.cls", text)[0]

        assert record.detail_captures == (("endPoint", ()), ("action", ()))

    def test_one_record_per_catcher(self):
        """Test a file matching several catchers."""
        text = SOAP_SERVICE + "\n@RestResource(urlMapping='/orders/*')\n" + HTTP_CALLOUT
        records = match_file(DEFAULT_CATCHERS, "Mixed.cls", text)

        assert [(r.sub_category, r.match_count) for r in records] == [
            ("SOAP", 2),
            ("REST", 1),
            ("HTTP", 2),
        ]
        assert dict(records[1].detail_captures)["restResource"] == ("urlMapping='/orders/*'",)

    def test_unmatched_optional_group_skipped(self):
        """Test that matches where the value group did not participate are dropped."""
        catcher = build_catcher("OUTBOUND", "X", r"foo", [("suffix", r"foo(?P<value>bar)?")])
        record = match_file([catcher], "A.cls", "foo foobar")[0]

        assert record.match_count == 2
        assert record.detail_captures == (("suffix", ("bar",)),)

    def test_deterministic_output(self):
        """Test that repeated runs give identical records."""
        first = match_file(DEFAULT_CATCHERS, "ErpClient.cls", HTTP_CALLOUT)
        second = match_file(DEFAULT_CATCHERS, "ErpClient.cls", HTTP_CALLOUT)
        assert first == second


class TestMatchFiles:
    """Test matching over a set of files."""

    def _project(self, root: Path) -> list[str]:
        (root / "OrderService.cls").write_text(SOAP_SERVICE)
        (root / "ErpClient.cls").write_text(HTTP_CALLOUT)
        (root / "ErpClientTest.cls").write_text("@isTest\nprivate class T { HttpRequest r = new HttpRequest(); }")
        (root / "Generated.cls").write_text("hidden\nwebservice static void x() {}")
        return ["ErpClient.cls", "ErpClientTest.cls", "Generated.cls", "OrderService.cls"]

    def test_sequential_and_parallel_agree(self, temp_dir):
        """Test that the worker count does not change the records."""
        files = self._project(temp_dir)

        sequential = match_files(DEFAULT_CATCHERS, temp_dir, files, max_workers=1)
        parallel = match_files(DEFAULT_CATCHERS, temp_dir, files, max_workers=4)

        assert sequential.records == parallel.records
        assert [r.file_name for r in parallel.records] == ["ErpClient.cls", "OrderService.cls"]
        assert not parallel.cancelled

    def test_excluded_files_contribute_nothing(self, temp_dir):
        """Test that hidden and test files are filtered before matching."""
        files = self._project(temp_dir)
        outcome = match_files(DEFAULT_CATCHERS, temp_dir, files)

        names = {r.file_name for r in outcome.records}
        assert "ErpClientTest.cls" not in names
        assert "Generated.cls" not in names

    def test_unreadable_file_is_skipped(self, temp_dir):
        """Test that a bad file is reported and the scan continues."""
        files = self._project(temp_dir)
        (temp_dir / "Broken.cls").write_bytes(b"\xff\xfe webservice static")
        files = ["Broken.cls", *files, "Missing.cls"]

        outcome = match_files(DEFAULT_CATCHERS, temp_dir, files, max_workers=2)

        assert [s.file_name for s in outcome.skipped] == ["Broken.cls", "Missing.cls"]
        assert len(outcome.records) == 2

    def test_cancel_before_start(self, temp_dir):
        """Test that a set cancel event abandons every file."""
        files = self._project(temp_dir)
        cancel = threading.Event()
        cancel.set()

        outcome = match_files(DEFAULT_CATCHERS, temp_dir, files, max_workers=2, cancel_event=cancel)

        assert outcome.records == []
        assert outcome.cancelled

    def test_cancel_between_files(self, temp_dir):
        """Test that cancelling mid-scan keeps the records already produced."""
        cancel = threading.Event()
        record = MatchRecord("INBOUND", "SOAP", "First.cls", 1, ())

        def scan_then_cancel(*args, **kwargs):
            cancel.set()
            return [record]

        with patch("integration_auditor.matcher._scan_one", side_effect=scan_then_cancel) as mock_scan:
            outcome = match_files(
                DEFAULT_CATCHERS,
                temp_dir,
                ["First.cls", "Second.cls", "Third.cls"],
                max_workers=1,
                cancel_event=cancel,
            )

        assert mock_scan.call_count == 1
        assert outcome.records == [record]
        assert outcome.cancelled
