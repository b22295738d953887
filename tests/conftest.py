from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import Iterator, List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from liquid_console import Shell


@pytest.fixture
def shell() -> Iterator[Shell]:
    """A fresh shell with the math/logic commands installed."""
    sh = Shell(math=True)
    yield sh
    sh.dispose()


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Refuse to run when two parametrized cases collapse to the same node id."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    repeated = sorted(nodeid for nodeid, n in counts.items() if n > 1)

    if repeated:
        listing = "\n".join(f"  {nodeid} (x{counts[nodeid]})" for nodeid in repeated)
        raise pytest.UsageError(f"duplicate test ids:\n{listing}")
