"""Tests for SyntaxExtractor."""

import time

import pytest

from layerlint.config import AnalysisConfig
from layerlint.exceptions import ParsingError
from layerlint.policy import default_policy
from layerlint.scanning.dart import DartParser
from layerlint.scanning.index import SourceIndexer
from layerlint.scanning.syntax import UnitKind
from layerlint.scanning.syntax_extractor import SyntaxExtractor


def _extract(root, workers=1):
    policy = default_policy()
    settings = AnalysisConfig(workers=workers)
    index = SourceIndexer(root, policy, settings).build()
    return SyntaxExtractor(policy, settings).extract_all(index)


def _units(results):
    return {u.name: u for r in results for u in r.units}


class TestNamingVerdict:
    """naming_ok reflects the folder-declared layer's naming rule."""

    def test_compliant_and_non_compliant_classes(self, project):
        root = project(
            {
                "auth/screens/login_screen.dart": """
                    class LoginScreen {}
                    class Login {}
                """,
            }
        )
        units = _units(_extract(root))
        assert units["LoginScreen"].naming_ok
        assert not units["Login"].naming_ok
        assert units["Login"].layer == "UI_SCREEN"
        assert units["Login"].feature == "auth"

    def test_private_and_non_class_units_are_exempt(self, project):
        root = project(
            {
                "auth/screens/login_screen.dart": """
                    class _LoginForm {}
                    enum Mode { a, b }
                    mixin Helpers {}
                    void showLogin() {}
                """,
            }
        )
        units = _units(_extract(root))
        assert all(u.naming_ok for u in units.values())
        assert units["showLogin"].kind is UnitKind.FUNCTION

    def test_unclassified_files_are_exempt(self, project):
        root = project({"auth/helpers/format.dart": "class Formatter {}"})
        (unit,) = _units(_extract(root)).values()
        assert unit.naming_ok

    def test_qualified_name(self, project):
        root = project({"auth/cubits/login_cubit.dart": "class LoginCubit {}"})
        (unit,) = _units(_extract(root)).values()
        assert unit.qualified_name == "lib/features/auth/cubits/login_cubit.dart::LoginCubit"


class TestFailureIsolation:
    """A broken file yields an error and no units; the rest still extracts."""

    def test_parse_error_is_isolated(self, project):
        root = project(
            {
                "auth/views/broken_view.dart": "class BrokenView {\n",
                "auth/views/home_view.dart": "class HomeView {}",
            }
        )
        results = _extract(root)
        assert [r.path.rsplit("/", 1)[1] for r in results] == ["broken_view.dart", "home_view.dart"]

        broken, home = results
        assert not broken.ok
        assert isinstance(broken.error, ParsingError)
        assert broken.units == ()
        assert home.ok
        assert [u.name for u in home.units] == ["HomeView"]


class TestParallelExtraction:
    def test_parallel_matches_sequential(self, project):
        files = {f"f{i}/dtos/item{i}_dto.dart": f"class Item{i}DTO {{ Other{i} o; }}" for i in range(25)}
        root = project(files)
        sequential = _extract(root, workers=1)
        parallel = _extract(root, workers=4)
        assert parallel == sequential
        assert len(parallel) == 25


class _InterruptingParser:
    """Raises KeyboardInterrupt for one file; the rest parse slowly."""

    def __init__(self, interrupt_on):
        self.interrupt_on = interrupt_on
        self.calls = 0
        self._inner = DartParser()

    def parse(self, text, path):
        self.calls += 1
        if path.endswith(self.interrupt_on):
            raise KeyboardInterrupt
        time.sleep(0.01)
        return self._inner.parse(text, path)


class TestInterruption:
    """An interrupt cancels queued work and surfaces no partial results."""

    def _setup(self, project, workers):
        files = {f"f{i:02d}/dtos/item{i}_dto.dart": f"class Item{i}DTO {{}}" for i in range(30)}
        root = project(files)
        policy = default_policy()
        settings = AnalysisConfig(workers=workers)
        index = SourceIndexer(root, policy, settings).build()
        extractor = SyntaxExtractor(policy, settings)
        parser = _InterruptingParser("/item0_dto.dart")
        extractor._parser = parser
        return extractor, parser, index

    def test_parallel_interrupt_cancels_pending_files(self, project):
        extractor, parser, index = self._setup(project, workers=2)
        with pytest.raises(KeyboardInterrupt):
            extractor.extract_all(index)
        assert parser.calls < len(index.files)
        assert extractor.parsed_count == 0
        assert extractor.failed_count == 0

    def test_sequential_interrupt_propagates(self, project):
        extractor, parser, index = self._setup(project, workers=1)
        with pytest.raises(KeyboardInterrupt):
            extractor.extract_all(index)
        assert parser.calls == 1
