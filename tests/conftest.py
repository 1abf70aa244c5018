import random
import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

GUNTHER = b"hello my name is gunther welcome to the valley!"


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def no_progress(monkeypatch, m):
    """Suppress progress rendering in main module during tests."""
    calls = []

    def _stub(line: str):
        calls.append(line)

    monkeypatch.setattr(m, "_print_progress", _stub)
    return calls


@pytest.fixture()
def progress_recorder():
    """Provide a reusable progress callback and its call log."""
    calls = []

    def cb(done, total):
        calls.append((done, total))

    return cb, calls


@pytest.fixture()
def sample_file(tmp_path: Path):
    """Write a small text file with a skewed byte distribution."""
    path = tmp_path / "sample.txt"
    path.write_bytes(GUNTHER * 20 + b"\n")
    return path


def random_inputs(count: int, max_len: int = 300, seed: int = 1234):
    """Return ``count`` reproducible random byte strings.

    Lengths vary from 1 to ``max_len``; alphabets vary from a single byte
    value to the full 0-255 range so that skewed and flat distributions
    are both covered.
    """
    rng = random.Random(seed)
    inputs = []
    for _ in range(count):
        alphabet = rng.sample(range(256), rng.randint(1, 256))
        length = rng.randint(1, max_len)
        inputs.append(bytes(rng.choice(alphabet) for _ in range(length)))
    return inputs


@pytest.fixture()
def random_samples():
    """Reproducible random inputs without importing conftest in tests."""
    return random_inputs(40)
