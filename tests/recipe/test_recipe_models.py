"""Tests for recipe models."""

import pytest
from pydantic import ValidationError

from canvasflow.recipe.models import ConnectionEntry, GenerationEntry, MediaEntry, Recipe


class TestMediaShorthand:
    def test_name_to_path_mapping(self):
        recipe = Recipe.model_validate({"media": {"sunrise": "frames/sunrise.png"}})

        assert recipe.media[0].name == "sunrise"
        assert recipe.media[0].path == "frames/sunrise.png"

    def test_url_shorthand(self):
        recipe = Recipe.model_validate({"media": {"sunrise": "https://a/sunrise.png"}})

        assert recipe.media[0].url == "https://a/sunrise.png"
        assert recipe.media[0].path is None

    def test_list_of_paths(self):
        recipe = Recipe.model_validate({"media": ["frames/sunrise.png", "clip.mp4"]})

        assert [(m.name, m.path) for m in recipe.media] == [
            ("sunrise", "frames/sunrise.png"),
            ("clip", "clip.mp4"),
        ]

    def test_full_entry(self):
        recipe = Recipe.model_validate(
            {"media": {"clip": {"url": "https://a/clip.mp4", "kind": "video", "duration": 8}}}
        )

        entry = recipe.media[0]
        assert entry.url == "https://a/clip.mp4"
        assert entry.duration == 8.0

    def test_needs_exactly_one_source(self):
        with pytest.raises(ValidationError, match="exactly one of 'path' or 'url'"):
            MediaEntry(name="x", path="a.png", url="https://a/a.png")
        with pytest.raises(ValidationError):
            MediaEntry(name="x")


class TestGenerationEntry:
    def test_numeric_duration(self):
        entry = GenerationEntry(kind="extend", duration=10)
        assert entry.duration == "10"

    def test_overrides_skip_unset(self):
        entry = GenerationEntry(kind="edit", prompt="rain", keep_audio=False)

        assert entry.overrides() == {"prompt": "rain", "keep_audio": False}

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            GenerationEntry(kind="section")


class TestConnections:
    def test_arrow_shorthand(self):
        recipe = Recipe.model_validate(
            {"media": {"a": "a.png"}, "nodes": {"b": {"kind": "generate"}}, "connections": ["a -> b"]}
        )

        assert recipe.connections == [ConnectionEntry(source="a", target="b")]

    def test_from_to_mapping(self):
        recipe = Recipe.model_validate(
            {
                "media": {"a": "a.png"},
                "nodes": {"b": {"kind": "generate"}},
                "connections": [{"from": "a", "to": "b"}],
            }
        )

        assert recipe.connections[0].source == "a"
        assert recipe.connections[0].target == "b"


class TestNames:
    def test_duplicate_names(self):
        with pytest.raises(ValidationError, match="Duplicate name 'a'"):
            Recipe.model_validate({"media": {"a": "a.png"}, "nodes": {"a": {"kind": "generate"}}})

    def test_section_color_checked(self):
        with pytest.raises(ValidationError):
            Recipe.model_validate({"sections": [{"label": "Intro", "color": "red"}]})

    def test_get_node(self):
        recipe = Recipe.model_validate({"nodes": {"b": {"kind": "edit"}}})

        assert recipe.get_node("b").kind == "edit"
        assert recipe.get_node("missing") is None
