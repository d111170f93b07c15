"""
Unit Tests for the Package Version
"""

from pathlib import Path

import feedback_helper


def test_version_when_source_checkout_then_matches_pyproject():
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    declared = next(
        line.split("=")[1].strip().strip('"')
        for line in pyproject.read_text().splitlines()
        if line.strip().startswith("version")
    )

    assert feedback_helper.__version__ == declared == "1.0.0"
