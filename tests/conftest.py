"""Shared pytest fixtures for dtlayout tests."""

from unittest.mock import patch

import pytest

from fakes import FakeDocument, chosen_document


@pytest.fixture
def use_document():
    """
    Make the CLI load a given in-memory document instead of parsing a DTS.

    Yields:
        Function taking a HardwareDocument; every later load_document()
        call in the commands returns it
    """
    with patch('dtlayout.commands.common.load_document') as mock_load:
        def _use(document):
            mock_load.return_value = document
            return mock_load
        yield _use


@pytest.fixture
def hinted_document():
    """Document with metal,ram/metal,rom hints and no ITIM"""
    return chosen_document()


@pytest.fixture
def unknown_document():
    """Document that no strategy recognizes"""
    return FakeDocument(root_compatible=['acme,mystery-soc'])
