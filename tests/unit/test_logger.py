"""Unit tests for loguru session setup and context log prefixes."""

import sys

import pytest
from loguru import logger

from humanerror.contexts.analysis.logger import setup_analysis_logger
from humanerror.contexts.matching.logger import log_classifier_failure, log_resolution


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.mark.unit
def test_setup_writes_provenance_header(tmp_path):
    """Test that session setup creates the log file with a provenance header."""
    log_file = setup_analysis_logger(log_dir=tmp_path, catalog_path="roles.yaml")

    logger.remove()

    assert log_file == tmp_path / "analysis.log"
    content = log_file.read_text(encoding="utf-8")
    assert "Working directory:" in content
    assert "Catalog: roles.yaml" in content


@pytest.mark.unit
def test_context_prefix_and_levels(tmp_path):
    """Test that matching helpers log with the [match] prefix at the right level."""
    log_file = setup_analysis_logger(log_dir=tmp_path)

    log_resolution("regional manager", "Branch Manager", "alias", True)
    log_classifier_failure("code monkey", TimeoutError("slow"))
    logger.remove()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert any(
        "INFO" in line and '[match] "regional manager" -> Branch Manager via alias (safe)' in line
        for line in lines
    )
    assert any("WARNING" in line and "[match] Classifier failed" in line for line in lines)
