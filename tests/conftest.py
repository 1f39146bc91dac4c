"""Configuração do pytest para o motor de inbox WUZAPI."""

import sys
from pathlib import Path

import pytest

# src/ no PYTHONPATH para imports absolutos (api, app, config, utils)
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(scope="session", autouse=True)
def json_logging() -> None:
    """Logging JSON em DEBUG durante toda a suíte."""
    from app.bootstrap import initialize_test_app

    initialize_test_app()
