from collections.abc import Iterator

import pytest

from hookengine.lifecycle import clear_hook_engine


@pytest.fixture(autouse=True)
def _isolated_global_engine() -> Iterator[None]:
    clear_hook_engine()
    yield
    clear_hook_engine()
