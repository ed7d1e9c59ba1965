"""Shared tab snapshots and a fixed clock for export tests."""

import datetime as dt

import pytest

UTC = dt.timezone.utc


@pytest.fixture
def sample_tabs():
    return [
        {
            "id": 10,
            "title": "Example <Tab>",
            "url": "https://example.com/path?query=1",
            "favIconUrl": "https://example.com/favicon.ico",
            "active": True,
            "highlighted": True,
            "pinned": False,
            "audible": False,
            "muted": False,
            "discarded": False,
            "incognito": False,
            "lastAccessed": 1704110400000,  # 2024-01-01T12:00:00Z
            "windowId": 99,
        },
        {
            "id": 11,
            "title": "Docs",
            "url": "https://docs.example.com/",
            "favIconUrl": "",
            "active": False,
            "highlighted": True,
            "pinned": False,
            "audible": False,
            "muted": False,
            "discarded": False,
            "incognito": False,
            "lastAccessed": 1704065400000,  # 2023-12-31T23:30:00Z
            "windowId": 99,
        },
    ]


@pytest.fixture
def sample_window():
    return {"id": 99, "title": "Workspace · Project", "incognito": False, "focused": True}


@pytest.fixture
def fixed_now():
    return dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
