"""
Pytest markers and configuration for the clinic booking tests.

These configurations ensure consistent test categorization and discovery
across the test suite.
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as API endpoint test")
    config.addinivalue_line("markers", "controllers: mark test as controller-related")
    config.addinivalue_line("markers", "database: mark test as database-related")
    config.addinivalue_line("markers", "services: mark test as service layer test")
    config.addinivalue_line("markers", "repositories: mark test as repository test")
    config.addinivalue_line("markers", "appointment: mark test as appointment-related")
    config.addinivalue_line("markers", "availability: mark test as slot/availability test")
    config.addinivalue_line("markers", "schedule: mark test as schedule admin test")
    config.addinivalue_line("markers", "concurrency: mark test as double-booking test")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        if "integration" in path:
            item.add_marker(pytest.mark.integration)
        if "controller" in path or "api" in item.name:
            item.add_marker(pytest.mark.controllers)
