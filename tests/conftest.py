from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from odbcbridge.utils.logging import correlation_id_var

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture(autouse=True)
def _reset_correlation_id() -> Iterator[None]:
    token = correlation_id_var.set(None)
    yield
    correlation_id_var.reset(token)
