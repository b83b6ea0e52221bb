"""Tests for the formatters package."""

import json

import pytest

from layerlint.conformance.models import ConformanceReport, Violation
from layerlint.formatters import (
    GithubFormatter,
    JsonFormatter,
    QuietFormatter,
    TextFormatter,
    get_formatter,
)
from layerlint.models import Severity, ViolationKind


def _dependency():
    return Violation(
        kind=ViolationKind.ILLEGAL_DEPENDENCY,
        severity=Severity.ERROR,
        path="lib/features/user/use_cases/get_user_use_case.dart",
        line_start=4,
        line_end=4,
        message="GetUserUseCase (USE_CASE, user) depends on UserDataSource (DATA_SOURCE, user): "
        "USE_CASE may not depend on DATA_SOURCE",
        feature="user",
        units=(
            "lib/features/user/use_cases/get_user_use_case.dart::GetUserUseCase",
            "lib/features/user/data_sources/user_data_source.dart::UserDataSource",
        ),
        scope="cross-layer",
    )


def _size():
    return Violation(
        kind=ViolationKind.FILE_SIZE,
        severity=Severity.WARNING,
        path="lib/features/user/views/big_view.dart",
        line_start=1,
        line_end=512,
        message="512 lines (limit 400); split it into big_view_components.dart",
        feature="user",
    )


def _parse_error():
    return Violation(
        kind=ViolationKind.PARSE_ERROR,
        severity=Severity.ERROR,
        path="lib/features/user/views/broken_view.dart",
        line_start=9,
        line_end=9,
        message="unclosed '{'",
        feature="user",
    )


def _report(*violations):
    return ConformanceReport(
        violations=tuple(violations), files_indexed=12, unit_count=20, edge_count=9
    )


class TestGetFormatter:
    @pytest.mark.parametrize(
        "name,cls",
        [
            ("text", TextFormatter),
            ("json", JsonFormatter),
            ("github", GithubFormatter),
            ("quiet", QuietFormatter),
        ],
    )
    def test_known(self, name, cls):
        assert isinstance(get_formatter(name), cls)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestJsonFormatter:
    def test_structure(self):
        data = json.loads(JsonFormatter().format(_report(_dependency(), _size(), _parse_error())))
        assert data["summary"] == {
            "files_indexed": 12,
            "units": 20,
            "edges": 9,
            "violations": 2,
            "files_skipped": 1,
            "errors": 2,
            "warnings": 1,
        }
        first = data["violations"][0]
        assert first["kind"] == "IllegalDependency"
        assert first["severity"] == "error"
        assert first["scope"] == "cross-layer"
        assert first["units"][1].endswith("::UserDataSource")
        assert data["skipped_files"] == [
            {
                "path": "lib/features/user/views/broken_view.dart",
                "kind": "ParseError",
                "severity": "error",
                "line": 9,
                "reason": "unclosed '{'",
            }
        ]

    def test_empty_report(self):
        data = json.loads(JsonFormatter().format(_report()))
        assert data["violations"] == []
        assert data["summary"]["violations"] == 0

    def test_stable_bytes(self):
        report = _report(_dependency(), _size())
        assert JsonFormatter().format(report) == JsonFormatter().format(report)


class TestGithubFormatter:
    def test_annotations(self):
        lines = GithubFormatter().format(_report(_dependency(), _size())).splitlines()
        assert lines[0].startswith(
            "::error file=lib/features/user/use_cases/get_user_use_case.dart,"
            "line=4,endLine=4,title=IllegalDependency::"
        )
        assert lines[1].startswith("::warning ")
        assert "endLine=512" in lines[1]

    def test_escaping(self):
        violation = Violation(
            kind=ViolationKind.IO_ERROR,
            severity=Severity.ERROR,
            path="lib/features/a,b/views/x.dart",
            line_start=1,
            line_end=1,
            message="100% broken\nsecond line",
        )
        (line,) = GithubFormatter().format(_report(violation)).splitlines()
        assert "file=lib/features/a%2Cb/views/x.dart" in line
        assert line.endswith("::100%25 broken%0Asecond line")


class TestQuietFormatter:
    def test_one_line_per_violation(self):
        output = QuietFormatter().format(_report(_dependency(), _parse_error()))
        assert output.splitlines() == [
            "lib/features/user/use_cases/get_user_use_case.dart:4 IllegalDependency",
            "lib/features/user/views/broken_view.dart:9 ParseError",
        ]

    def test_clean_report_is_silent(self, capsys):
        QuietFormatter().render(_report())
        assert capsys.readouterr().out == ""


class TestTextFormatter:
    def test_table_and_summary(self):
        output = TextFormatter().format(_report(_dependency(), _size(), _parse_error()))
        assert "IllegalDependency" in output
        assert "lib/features/user/use_cases/get_user_use_case.dart:4" in output
        assert "2 violation(s) found" in output
        assert "1 file(s) skipped due to errors" in output
        assert "2 error(s), 1 warning(s) across 12 files, 20 units, 9 dependencies" in output

    def test_clean(self):
        output = TextFormatter().format(_report())
        assert "No violations found" in output
        assert "skipped" not in output

    def test_brackets_are_printed_verbatim(self):
        violation = Violation(
            kind=ViolationKind.NAMING,
            severity=Severity.ERROR,
            path="lib/features/a/screens/home.dart",
            line_start=1,
            line_end=1,
            message="Home is in a UI_SCREEN folder (screens) and must have "
            "pattern '[A-Z][a-zA-Z0-9]*Screen'",
        )
        output = TextFormatter().format(_report(violation))
        assert "[A-Z][a-zA-Z0-9]*Screen" in output
        assert "lib/features/a/screens/home.dart:1" in output
