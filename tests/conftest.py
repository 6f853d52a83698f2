"""Shared pytest setup."""

import pytest

from fairrotation.utils.logging_utils import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _logging():
    configure_logging()
