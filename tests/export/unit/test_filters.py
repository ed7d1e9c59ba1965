from tabsidian.export.filters import (
    is_restricted_url,
    sanitize_restricted_urls,
    select_tabs,
    should_process_tab,
)


def test_sanitize_restricted_urls_drops_blank_entries():
    assert sanitize_restricted_urls(["example.com", "", "   ", None, "docs"]) == ["example.com", "docs"]
    assert sanitize_restricted_urls(None) == []


def test_should_process_tab_skips_pinned_tabs():
    assert should_process_tab({"url": "https://example.com", "pinned": True}) is False


def test_should_process_tab_only_selected():
    tab = {"url": "https://example.com", "highlighted": False}
    assert should_process_tab(tab, [], process_only_selected=True) is False
    assert should_process_tab(dict(tab, highlighted=True), [], process_only_selected=True) is True


def test_should_process_tab_respects_restricted_list():
    tab = {"url": "https://mail.google.com/inbox"}
    assert should_process_tab(tab, ["mail.google.com"]) is False
    assert should_process_tab(tab, []) is True


def test_internal_urls_are_always_restricted():
    for url in ("chrome://settings", "about:blank", "edge://flags", "moz-extension://abc/page.html"):
        assert is_restricted_url(url) is True
    assert is_restricted_url("https://example.com") is False
    assert is_restricted_url("") is False
    assert is_restricted_url(None) is False


def test_should_process_tab_rejects_non_mappings():
    assert should_process_tab("https://example.com") is False


def test_select_tabs_keeps_all_when_single_highlight():
    tabs = [
        {"id": 1, "url": "https://a.com", "highlighted": True},
        {"id": 2, "url": "https://b.com"},
        {"id": 3, "url": "https://c.com", "pinned": True},
        {"id": 4, "url": "chrome://newtab"},
    ]
    assert [t["id"] for t in select_tabs(tabs)] == [1, 2]


def test_select_tabs_keeps_only_selection_when_multiple_highlighted():
    tabs = [
        {"id": 1, "url": "https://a.com", "highlighted": True},
        {"id": 2, "url": "https://b.com"},
        {"id": 3, "url": "https://c.com", "highlighted": True},
    ]
    assert [t["id"] for t in select_tabs(tabs, ["c.com"])] == [1]
    assert select_tabs([]) == []
