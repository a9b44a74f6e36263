"""Shared pytest fixtures for the BARS lighting test suite."""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


# ---------------------------------------------------------------------------
# Sample document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def native_xml(data_dir: Path) -> str:
    """Native fixture document: a stopbar, a lead-on, a taxiway and one unknown object."""
    return (data_dir / "native_fixtures.xml").read_text(encoding="utf-8")


@pytest.fixture()
def support_xml(data_dir: Path) -> str:
    """Support document: two valid rectangles, one zero-width, one missing heading."""
    return (data_dir / "support_rectangles.xml").read_text(encoding="utf-8")


@pytest.fixture()
def polygon_xml(data_dir: Path) -> str:
    """FSData document: two fixture polygons, one remove area, two broken polygons."""
    return (data_dir / "polygons.xml").read_text(encoding="utf-8")


@pytest.fixture()
def remove_only_xml(data_dir: Path) -> str:
    """FSData document holding a single 4-vertex remove polygon."""
    return (data_dir / "remove_only.xml").read_text(encoding="utf-8")


@pytest.fixture()
def legacy_target_xml(data_dir: Path) -> str:
    """Newly generated <Bars> document with generic stopbar names."""
    return (data_dir / "legacy_target.xml").read_text(encoding="utf-8")


@pytest.fixture()
def legacy_reference_xml(data_dir: Path) -> str:
    """Previously approved <Bars> document for the same airport."""
    return (data_dir / "legacy_reference.xml").read_text(encoding="utf-8")


@pytest.fixture()
def malformed_xml(data_dir: Path) -> str:
    """Truncated document that is not well-formed XML."""
    return (data_dir / "malformed.xml").read_text(encoding="utf-8")
