"""Pytest configuration for the tscodedom test suite."""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for tscodedom imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tscodedom.backend.typescript import TsEmitter  # noqa: E402
from tscodedom.typemap import TypeMapper  # noqa: E402


@pytest.fixture
def mapper() -> TypeMapper:
    return TypeMapper()


@pytest.fixture
def emitter(mapper: TypeMapper) -> TsEmitter:
    return TsEmitter(mapper)


@pytest.fixture
def strict_emitter(mapper: TypeMapper) -> TsEmitter:
    return TsEmitter(mapper, strict=True)
