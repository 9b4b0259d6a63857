"""Tests for archive path construction."""

from __future__ import annotations

import itertools

import pytest

from emojitar.models.config import ArchiveLayout
from emojitar.models.emoji import EmojiRef
from emojitar.paths import (
    cdn_filename,
    directory_paths,
    emoji_file_path,
    format_directory,
    sanitize_path,
)


class TestSanitizePath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("emojis/images/a-1.png", "emojis/images/a-1.png"),
            ("/emojis//images/", "emojis/images"),
            ("./emojis/../x", "emojis/x"),
            ("..", ""),
            ("a b/c?d", "a b/c?d"),
        ],
    )
    def test_sanitize(self, path, expected):
        assert sanitize_path(path) == expected


class TestEmojiPaths:
    def test_static_path(self):
        ref = EmojiRef(id="111", name="foo")
        assert emoji_file_path(ref) == "emojis/images/foo-111.png"
        assert cdn_filename(ref) == "111.png"

    def test_animated_path(self):
        ref = EmojiRef(id="222", name="bar", animated=True)
        assert emoji_file_path(ref) == "emojis/animated/bar-222.gif"
        assert cdn_filename(ref) == "222.gif"

    def test_custom_layout(self):
        layout = ArchiveLayout(root_dir="out", images_dir="png", animated_dir="gif")
        ref = EmojiRef(id="1", name="x", animated=True)

        assert emoji_file_path(ref, layout) == "out/gif/x-1.gif"

    def test_name_with_traversal_is_sanitized(self):
        ref = EmojiRef(id="1", name="../../etc")

        assert emoji_file_path(ref) == "emojis/images/etc-1.png"

    def test_format_directory(self):
        assert format_directory("emojis/images") == "emojis/images/"


class TestDirectoryPaths:
    def test_single_file(self):
        assert directory_paths(["emojis/images/foo-1.png"]) == ["emojis", "emojis/images"]

    def test_first_introduction_order(self):
        paths = [
            "emojis/images/foo-111.png",
            "emojis/animated/bar-222.gif",
            "emojis/images/baz-333.png",
        ]

        assert directory_paths(paths) == ["emojis", "emojis/images", "emojis/animated"]

    def test_empty(self):
        assert directory_paths([]) == []

    def test_top_level_file_has_no_directories(self):
        assert directory_paths(["file.png"]) == []

    def test_each_directory_once_for_any_permutation(self):
        paths = [
            "emojis/images/a-1.png",
            "emojis/animated/b-2.gif",
            "emojis/images/c-3.png",
        ]
        expected = {"emojis", "emojis/images", "emojis/animated"}

        for perm in itertools.permutations(paths):
            dirs = directory_paths(perm)
            assert len(dirs) == len(expected)
            assert set(dirs) == expected
