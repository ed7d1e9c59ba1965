import copy
import datetime as dt

from tabsidian.export.config import FrontmatterSettings
from tabsidian.export.context import build_template_context

UTC = dt.timezone.utc


def _build(tabs, **options):
    options.setdefault("tz", UTC)
    return build_template_context(tabs, options)


def test_context_exposes_tab_fields(sample_tabs, sample_window, fixed_now):
    built = _build(sample_tabs, window=sample_window, now=fixed_now)
    context = built["context"]

    assert len(context["tabs"]) == 2
    first = context["tabs"][0]
    assert first["title"] == "Example <Tab>"
    assert first["hostname"] == "example.com"
    assert first["origin"] == "https://example.com"
    assert first["protocol"] == "https:"
    assert first["pathname"] == "/path"
    assert first["search"] == "?query=1"
    assert first["hash"] == ""
    assert first["favicon"] == "https://example.com/favicon.ico"
    assert first["active"] is True
    assert first["pinned"] is False
    assert first["id"] == 10
    assert first["index"] == 0
    assert first["position"] == 1
    assert first["windowId"] == 99
    assert first["window"]["title"] == "Workspace · Project"
    assert first["timestamps"]["lastAccessed"] == "2024-01-01T12:00:00.000Z"
    assert first["timestamps"]["lastAccessedRelative"] == "15 hours ago"
    assert context["tabs"][1]["timestamps"]["lastAccessedRelative"] == "1 day ago"
    assert context["tabs"][1]["position"] == 2


def test_context_export_and_timestamp(sample_tabs, sample_window, fixed_now):
    built = _build(sample_tabs, window=sample_window, now=fixed_now)
    context = built["context"]
    assert context["export"]["tabCount"] == 2
    assert context["export"]["iso"] == "2024-01-02T03:04:05.000Z"
    assert context["export"]["localDate"] == "2024-01-02"
    assert built["timestamp"]["formattedTimestamp"] == "2024-01-02T03-04-05"
    assert context["window"]["title"] == "Workspace · Project"
    assert context["frontmatter"].startswith("---\n")
    assert "tab_count: 2\n" in context["frontmatter"]


def test_context_partitions_tabs_into_groups(fixed_now):
    tabs = [
        {"id": 1, "url": "https://a.com", "groupId": 3},
        {"id": 2, "url": "https://b.com", "groupId": -1},
        {"id": 3, "url": "https://c.com", "groupId": 3},
        {"id": 4, "url": "https://d.com", "groupId": 5},
        {"id": 5, "url": "https://e.com"},
    ]
    groups = {3: {"id": 3, "title": "Research", "color": "blue", "collapsed": True, "windowId": 1}}
    context = _build(tabs, groups=groups, now=fixed_now)["context"]

    assert [g["id"] for g in context["groups"]] == [3, 5]
    research, unknown = context["groups"]
    assert research["title"] == "Research"
    assert research["tabCount"] == 2
    assert [t["id"] for t in research["tabs"]] == [1, 3]
    assert unknown["title"] == "" and unknown["color"] == "" and unknown["collapsed"] is False
    assert [t["id"] for t in context["ungroupedTabs"]] == [2, 5]

    grouped_ids = [t["id"] for g in context["groups"] for t in g["tabs"]]
    ungrouped_ids = [t["id"] for t in context["ungroupedTabs"]]
    assert sorted(grouped_ids + ungrouped_ids) == [1, 2, 3, 4, 5]

    assert context["tabs"][0]["group"] == {"id": 3, "title": "Research", "color": "blue", "collapsed": True}
    assert context["tabs"][1]["group"] is None
    assert context["tabs"][1]["groupId"] is None


def test_context_does_not_mutate_inputs(sample_tabs, sample_window, fixed_now):
    tabs_before = copy.deepcopy(sample_tabs)
    window_before = copy.deepcopy(sample_window)
    _build(sample_tabs, window=sample_window, now=fixed_now)
    assert sample_tabs == tabs_before
    assert sample_window == window_before


def test_context_tolerates_malformed_tabs(fixed_now):
    tabs = [{"url": "::::", "title": None, "lastAccessed": "yesterday", "id": "x"}, "oops"]
    context = _build(tabs, now=fixed_now)["context"]
    assert len(context["tabs"]) == 2
    broken = context["tabs"][0]
    assert broken["hostname"] == ""
    assert broken["title"] == ""
    assert broken["id"] is None
    assert broken["timestamps"] == {"lastAccessed": None, "lastAccessedRelative": ""}
    assert context["tabs"][1]["url"] == ""


def test_context_window_defaults(fixed_now):
    context = _build([{"url": "https://a.com", "incognito": True}], now=fixed_now)["context"]
    assert context["window"]["title"] == ""
    assert context["window"]["incognito"] is True
    assert "window_incognito: true\n" in context["frontmatter"]


def test_context_frontmatter_can_be_disabled(fixed_now):
    cfg = {"frontmatterEnabledFields": {key: False for key in FrontmatterSettings().enabled}}
    context = _build([{"url": "https://a.com"}], now=fixed_now, cfg=cfg)["context"]
    assert context["frontmatter"] == ""


def test_context_empty_tabs(fixed_now):
    context = _build([], now=fixed_now)["context"]
    assert context["tabs"] == []
    assert context["groups"] == []
    assert context["export"]["tabCount"] == 0
