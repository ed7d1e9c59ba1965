import dataclasses

import pytest

from tabsidian.export.config import (
    DEFAULT_CFG,
    DEFAULT_FRONTMATTER_FIELD_NAMES,
    DEFAULT_FRONTMATTER_TAGS_TEMPLATE,
    DEFAULT_FRONTMATTER_TITLE_TEMPLATE,
    FrontmatterSettings,
    frontmatter_settings_from_cfg,
    merge_cfg,
    resolve_enabled_fields,
    resolve_field_names,
)


def test_merge_cfg_precedence():
    merged = merge_cfg({"obsidianVault": "Stored", "markdownFormat": "a"}, {"markdownFormat": "b"})
    assert merged["obsidianVault"] == "Stored"
    assert merged["markdownFormat"] == "b"
    assert merged["restrictedUrls"] == DEFAULT_CFG["restrictedUrls"]


def test_merge_cfg_returns_new_dict():
    merged = merge_cfg(None, None)
    merged["obsidianVault"] = "changed"
    assert DEFAULT_CFG["obsidianVault"] == ""


def test_resolve_field_names_falls_back_for_invalid_names():
    names = resolve_field_names({"title": "note title", "date": " created ", "tags": "", "time": 5})
    assert names["title"] == "title"
    assert names["date"] == "created"
    assert names["tags"] == "tags"
    assert names["time"] == "time_created"
    assert set(names) == set(DEFAULT_FRONTMATTER_FIELD_NAMES)


def test_resolve_field_names_keeps_duplicates():
    names = resolve_field_names({"date": "when", "time": "when"})
    assert names["date"] == names["time"] == "when"


def test_resolve_enabled_fields_accepts_only_booleans():
    enabled = resolve_enabled_fields({"tags": False, "date": "no", "time": 0})
    assert enabled["tags"] is False
    assert enabled["date"] is True
    assert enabled["time"] is True
    assert resolve_enabled_fields(None)["title"] is True


def test_frontmatter_settings_from_cfg_templates():
    settings = frontmatter_settings_from_cfg(
        {"frontmatterTitleTemplate": "   ", "frontmatterTagsTemplate": "", "frontmatterCollectionsTemplate": None}
    )
    assert settings.title_template == DEFAULT_FRONTMATTER_TITLE_TEMPLATE
    assert settings.tags_template == ""
    assert settings.collections_template == ""

    defaults = frontmatter_settings_from_cfg(None)
    assert defaults.tags_template == DEFAULT_FRONTMATTER_TAGS_TEMPLATE


def test_frontmatter_settings_are_immutable():
    settings = frontmatter_settings_from_cfg({"frontmatterFieldNames": {"title": "name"}})
    assert settings.field_name("title") == "name"
    with pytest.raises(TypeError):
        settings.field_names["title"] = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.title_template = "x"


def test_default_settings_use_default_names():
    settings = FrontmatterSettings()
    assert settings.field_name("tabCount") == "tab_count"
    assert settings.is_enabled("collections") is True
