import sys
from pathlib import Path

import pytest
from loguru import logger

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from confstore.store import Configuration


@pytest.fixture(scope="session")
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture()
def store() -> Configuration:
    return Configuration()


@pytest.fixture()
def populated_store() -> Configuration:
    conf = Configuration()
    conf.set_value("a", 1)
    conf.set_value("b", "x")
    return conf


@pytest.fixture()
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "config.json"


@pytest.fixture(autouse=True)
def _reset_logger():
    # CLI tests add sinks bound to CliRunner streams that are closed afterwards
    yield
    logger.remove()
