"""Shared pytest fixtures for glspgen tests."""

from pathlib import Path

import pytest

from glspgen.core.cache import NullCache, ResultCache
from glspgen.core.config import CacheSettings
from glspgen.core.engine import DocumentBuilder
from glspgen.core.parser import GrammarParser


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def grammars_dir(fixtures_dir: Path) -> Path:
    """Return path to grammar fixtures directory."""
    return fixtures_dir / "grammars"


@pytest.fixture
def statemachine_path(grammars_dir: Path) -> Path:
    return grammars_dir / "statemachine.langium"


@pytest.fixture
def domainmodel_path(grammars_dir: Path) -> Path:
    return grammars_dir / "domainmodel.langium"


@pytest.fixture(scope="session")
def builder() -> DocumentBuilder:
    """Document builder sharing the module-level Lark parser."""
    return DocumentBuilder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def result_cache(clock: FakeClock) -> ResultCache:
    return ResultCache(CacheSettings(model_ttl=60.0, document_ttl=30.0, max_entries=10), clock)


@pytest.fixture
def parser(result_cache: ResultCache, builder: DocumentBuilder) -> GrammarParser:
    """Parser with its own cache, isolated from the module-level default."""
    return GrammarParser(cache=result_cache, builder=builder)


@pytest.fixture
def uncached_parser(builder: DocumentBuilder) -> GrammarParser:
    return GrammarParser(cache=NullCache(), builder=builder)
