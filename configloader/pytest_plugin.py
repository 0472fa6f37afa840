# configloader/pytest_plugin.py
"""
pytest plugin exposing a ``mock_loader`` fixture.

Registered through the ``pytest11`` entry point, so installing configloader
is enough to use it:

    def test_service(mock_loader):
        loader = mock_loader({"Field1": "value1"})
        loader.override("Nested.Field3", False)
        service = Service(loader)
"""

import pytest

from .loader import MockLoader


@pytest.fixture
def mock_loader():
    """Factory building ``MockLoader`` instances; keyword arguments go to the constructor."""
    def factory(mock_data=None, **kwargs) -> MockLoader:
        return MockLoader(mock_data, **kwargs)
    return factory
