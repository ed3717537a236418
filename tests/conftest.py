"""Pytest configuration for ffmpeg-tools tests.

Puts the project root on sys.path so ``ffmpeg_tools`` is importable
without installing the package, and provides a configuration whose
working directory lives under the test's temporary directory.
"""

import os
import sys

import pytest

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from ffmpeg_tools.core.config import RunnerConfig, set_config  # noqa: E402


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def config(upload_dir):
    """Config with a temporary upload directory and a short timeout."""
    return RunnerConfig(upload_dir=str(upload_dir), timeout=30.0, capture_stop_grace=2.0)


@pytest.fixture(autouse=True)
def reset_global_config():
    yield
    set_config(None)
