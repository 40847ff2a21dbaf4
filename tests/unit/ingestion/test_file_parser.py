"""Tests for the import document parsers."""

from __future__ import annotations

import io
import json

import pytest
from openpyxl import Workbook

from funcaudit.core.exceptions import ParseError
from funcaudit.core.ids import SequentialIdGenerator
from funcaudit.ingestion.file_parser import (
    load_catalog_document,
    load_query_document,
    parse_html_table,
    parse_json_records,
    parse_tabular_records,
)
from funcaudit.ingestion.normalizer import FunctionNormalizer


def _xlsx(rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


CATALOG_ROWS = [
    ["App名称", "功能点", "路径", "落地页", "实例query"],
    ["抖音", "扫一扫", "首页-扫一扫", "snssdk1128://qrcode", "打开抖音扫一扫,抖音怎么扫码"],
    ["微信", "朋友圈", "发现-朋友圈", "weixin://dl/moments", "看看朋友圈"],
    ["支付宝", "收钱码", "", "", ""],
]


class TestJson:
    def test_array_of_objects(self):
        assert parse_json_records('[{"appName": "A"}, {"appName": "B"}]') == [{"appName": "A"}, {"appName": "B"}]

    def test_invalid_syntax_raises(self):
        with pytest.raises(ParseError) as exc_info:
            parse_json_records('[{"appName": ', source="funcs.json")
        assert exc_info.value.source == "funcs.json"
        assert "funcs.json" in str(exc_info.value)

    def test_non_array_raises(self):
        with pytest.raises(ParseError):
            parse_json_records('{"appName": "A"}')


class TestTabular:
    def test_xlsx_rows_keyed_by_header(self):
        records = parse_tabular_records(_xlsx(CATALOG_ROWS), "xlsx")
        assert len(records) == len(CATALOG_ROWS) - 1
        assert records[0]["App名称"] == "抖音"
        assert records[1]["功能点"] == "朋友圈"

    def test_csv_rows_keyed_by_header(self):
        data = "App,Function Name\nA,f1\nB,f2\n".encode("utf-8-sig")
        records = parse_tabular_records(data, "csv")
        assert records == [{"App": "A", "Function Name": "f1"}, {"App": "B", "Function Name": "f2"}]

    def test_fully_empty_rows_skipped(self):
        records = parse_tabular_records(b"App\nA\n,\nB\n", "csv")
        assert [r["App"] for r in records] == ["A", "B"]

    def test_header_only_yields_nothing(self):
        assert parse_tabular_records(_xlsx([["App"]]), "xlsx") == []

    def test_corrupt_workbook_raises(self):
        with pytest.raises(ParseError):
            parse_tabular_records(b"not a zip archive", "xlsx", source="broken.xlsx")

    def test_normalized_length_is_rows_minus_header(self):
        records = parse_tabular_records(_xlsx(CATALOG_ROWS), "xlsx")
        entries = FunctionNormalizer(SequentialIdGenerator()).normalize(records)
        assert len(entries) == len(CATALOG_ROWS) - 1
        assert [e.app_name for e in entries] == ["抖音", "微信", "支付宝"]
        assert entries[0].example_queries == ["打开抖音扫一扫", "抖音怎么扫码"]
        assert entries[2].example_queries == []


class TestHtml:
    def test_first_table_used(self):
        html = """
        <html><body>
          <table>
            <tr><th>App名称</th><th>功能点</th></tr>
            <tr><td> 抖音 </td><td>扫一扫</td></tr>
            <tr><td>微信</td><td>朋友圈</td></tr>
          </table>
          <table><tr><th>other</th></tr><tr><td>ignored</td></tr></table>
        </body></html>
        """
        assert parse_html_table(html) == [
            {"App名称": "抖音", "功能点": "扫一扫"},
            {"App名称": "微信", "功能点": "朋友圈"},
        ]

    def test_no_table_yields_empty(self):
        assert parse_html_table("<html><body><p>nothing here</p></body></html>") == []

    def test_header_only_table_yields_empty(self):
        assert parse_html_table("<table><tr><th>App</th></tr></table>") == []

    def test_short_rows_leave_fields_absent(self):
        records = parse_html_table("<table><tr><td>App</td><td>Path</td></tr><tr><td>A</td></tr></table>")
        assert records == [{"App": "A"}]

    def test_inline_markup_keeps_word_spacing(self):
        html = (
            "<table><tr><th>App <b>Name</b></th><th>Function Name</th></tr>"
            "<tr><td>Douyin</td><td>Scan <a href='#'>QR code</a></td></tr></table>"
        )
        records = parse_html_table(html)
        assert records == [{"App Name": "Douyin", "Function Name": "Scan QR code"}]
        entry = FunctionNormalizer(SequentialIdGenerator()).normalize(records)[0]
        assert entry.app_name == "Douyin"
        assert entry.function_name == "Scan QR code"


class TestLoadCatalogDocument:
    def test_dispatches_on_extension(self):
        data = json.dumps([{"appName": "A"}]).encode()
        assert load_catalog_document(data, "funcs.JSON") == [{"appName": "A"}]

    def test_html_without_table_is_not_an_error(self):
        assert load_catalog_document(b"<p>hi</p>", "page.html") == []

    def test_unsupported_extension_raises(self):
        with pytest.raises(ParseError):
            load_catalog_document(b"", "legacy.xls")

    def test_undecodable_text_raises(self):
        with pytest.raises(ParseError):
            load_catalog_document(b"\xff\xfe\xfa", "funcs.json")


class TestLoadQueryDocument:
    def test_text_lines(self):
        assert load_query_document("a\n\n b \n".encode(), "q.txt") == ["a", "b"]

    def test_text_lines_match_free_text_splitting(self):
        text = "打开抖音扫一扫\r\n\n  我的收款码  \n"
        assert load_query_document(text.encode(), "q.txt") == FunctionNormalizer.normalize_free_text(text)

    def test_json_strings_and_query_objects(self):
        data = json.dumps(["a", {"query": "b"}, {"other": 1}, "", 5]).encode()
        assert load_query_document(data, "q.json") == ["a", "b"]

    def test_xlsx_first_column_after_header(self):
        data = _xlsx([["Query", "note"], ["打开抖音扫一扫", "x"], [None, "y"], ["我的收款码"]])
        assert load_query_document(data, "q.xlsx") == ["打开抖音扫一扫", "我的收款码"]

    def test_csv_first_column(self):
        assert load_query_document(b"query\none\ntwo\n", "q.csv") == ["one", "two"]

    def test_invalid_json_raises(self):
        with pytest.raises(ParseError):
            load_query_document(b"[oops", "q.json")

    def test_unsupported_extension_raises(self):
        with pytest.raises(ParseError):
            load_query_document(b"", "q.pdf")
