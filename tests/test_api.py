"""Tests for the public Python API."""

import pytest

import layerlint
from layerlint.exceptions import InvalidPathError, PolicyError
from layerlint.models import ViolationKind


class TestCheck:
    def test_reports_violations(self, project):
        root = project(
            {
                "shop/cubits/cart_cubit.dart": "class CartCubit { CartRepository repo; }",
                "shop/repositories/cart_repository.dart": "class CartRepository {}",
            }
        )
        report = layerlint.check(root, workers=1)
        (violation,) = report.violations
        assert violation.kind is ViolationKind.ILLEGAL_DEPENDENCY
        assert report.failed()

    def test_project_policy_is_picked_up(self, project):
        root = project(
            {"shop/cubits/cart_cubit.dart": "class CartCubit {\n}\n"},
            extra={"layerlint.policy.toml": "threshold = 1\n"},
        )
        report = layerlint.check(str(root))
        assert [v.kind for v in report.violations] == [ViolationKind.FILE_SIZE]
        assert report.unit_count == 1

    def test_policy_errors_propagate(self, project, tmp_path):
        root = project({})
        bad = tmp_path / "bad.toml"
        bad.write_text("threshold = -1\n")
        with pytest.raises(PolicyError):
            layerlint.check(root, policy_file=bad)

    def test_root_must_be_a_directory(self, tmp_path):
        with pytest.raises(InvalidPathError):
            layerlint.check(tmp_path / "missing")
