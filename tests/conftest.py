"""Shared fixtures for the vecsplice test suite."""
import pytest

from vecsplice import EngineConfig, SpliceEngine


@pytest.fixture(scope="session")
def engine():
    """One JIT engine for the whole session; compiling the module is the slow part."""
    return SpliceEngine(EngineConfig(opt="none"))


@pytest.fixture
def vec_factory(engine):
    from vecsplice import RawVec

    def make(kind, items=(), capacity=0):
        return RawVec(kind, items, capacity=capacity, engine=engine)

    return make
