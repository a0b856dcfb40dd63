import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _is_integration_test(request: pytest.FixtureRequest) -> bool:
    return "tests/integration/" in str(request.node.fspath).replace("\\", "/")


@pytest.fixture(autouse=True)
def isolated_engine_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("MADRA_"):
            monkeypatch.delenv(name, raising=False)
    # bootstrap calls load_dotenv(); keep a developer's .env out of the tests.
    monkeypatch.setattr("madra.bootstrap.load_dotenv", lambda *_args, **_kwargs: False)


@pytest.fixture(autouse=True)
def integration_fixed_seed(
    request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch, isolated_engine_env: None
) -> None:
    if not _is_integration_test(request):
        return

    monkeypatch.setenv("MADRA_DICE_SEED", "13")
