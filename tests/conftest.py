import os
from pathlib import Path

import pytest

# Test directory -> marker applied to every test collected beneath it
DIRECTORY_MARKERS = {
    "domain": "domain",
    "application": "application",
    "bdd": "application",
    "integration": "integration",
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="PROTEAN_ENV overlay of cafe/domain.toml to test against",
    )


def pytest_sessionstart(session):
    # Must be set before cafe.domain is imported
    os.environ["PROTEAN_ENV"] = session.config.option.env


def _markers_for(path: Path) -> list[str]:
    parts = path.parts
    if "tests" in parts:
        parts = parts[parts.index("tests") + 1 :]
    names = []
    for part in parts:
        marker = DIRECTORY_MARKERS.get(part)
        if marker and marker not in names:
            names.append(marker)
    return names


def pytest_collection_modifyitems(config, items):
    """Mark cafe tests by layer; API tests count as slow unless marked fast."""
    for item in items:
        names = _markers_for(Path(str(item.fspath)).parent)
        for name in names:
            item.add_marker(getattr(pytest.mark, name))

        if "integration" in names and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)
