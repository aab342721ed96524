"""Tests for prompter.completion -- file-path completion."""

from __future__ import annotations

import os

import pytest

from prompter.completion import (
    common_prefix,
    completion_hint,
    expand_home_dir,
    make_file_completions,
)


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "alpha.txt").write_text("a")
    (tmp_path / "alpine.py").write_text("b")
    (tmp_path / "README").write_text("c")
    (tmp_path / ".secret").write_text("d")
    beta = tmp_path / "beta"
    beta.mkdir()
    (beta / "one.txt").write_text("e")
    (beta / "two.md").write_text("f")
    (beta / ".hidden").write_text("g")
    return tmp_path


class TestMakeFileCompletions:
    def test_empty_input_lists_visible_entries(self, tree) -> None:
        assert make_file_completions("", cwd=str(tree)) == [
            "README",
            "alpha.txt",
            "alpine.py",
            "beta/",
        ]

    def test_prefix_of_siblings(self, tree) -> None:
        assert make_file_completions("al", cwd=str(tree)) == ["pha.txt", "pine.py"]

    def test_extension_filter_keeps_dotless_names(self, tree) -> None:
        assert make_file_completions("", ext=".txt", cwd=str(tree)) == [
            "README",
            "alpha.txt",
            "beta/",
        ]
        assert make_file_completions("al", ext=".txt", cwd=str(tree)) == ["pha.txt"]

    def test_directory_without_trailing_slash(self, tree) -> None:
        assert make_file_completions("beta", cwd=str(tree)) == [
            "/one.txt",
            "/two.md",
            "/",
        ]

    def test_directory_with_trailing_slash(self, tree) -> None:
        assert make_file_completions("beta/", cwd=str(tree)) == ["one.txt", "two.md"]

    def test_inside_directory(self, tree) -> None:
        assert make_file_completions("beta/o", cwd=str(tree)) == ["ne.txt"]

    def test_absolute_path(self, tree) -> None:
        assert make_file_completions(str(tree / "alp"), cwd="/") == ["ha.txt", "ine.py"]

    def test_home_is_expanded(self, tree, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tree))
        assert make_file_completions("~/al") == ["pha.txt", "pine.py"]

    def test_home_with_trailing_slash_lists_its_children(self, tree, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tree))
        assert make_file_completions("~/") == [
            "README",
            "alpha.txt",
            "alpine.py",
            "beta/",
        ]

    def test_missing_parent(self, tree) -> None:
        assert make_file_completions("missing/x", cwd=str(tree)) == []

    def test_no_match(self, tree) -> None:
        assert make_file_completions("zzz", cwd=str(tree)) == []

    def test_filesystem_errors_give_nothing(self, tree, monkeypatch) -> None:
        def refuse(path):
            raise PermissionError(path)

        monkeypatch.setattr(os, "scandir", refuse)
        assert make_file_completions("", cwd=str(tree)) == []
        assert make_file_completions("al", cwd=str(tree)) == []


class TestHelpers:
    def test_common_prefix(self) -> None:
        assert common_prefix(["pha.txt", "pine.py"]) == "p"
        assert common_prefix(["abc"]) == "abc"
        assert common_prefix([]) == ""

    def test_expand_home_dir(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_home_dir("~") == str(tmp_path)
        assert expand_home_dir("~/") == str(tmp_path) + "/"
        assert expand_home_dir("~/notes") == os.path.join(str(tmp_path), "notes")
        assert expand_home_dir("a/~") == "a/~"

    @pytest.mark.parametrize(
        ("text", "suffix", "hint"),
        [
            ("al", "pha.txt", "alpha.txt"),
            ("", "beta/", "beta/"),
            ("beta", "/one.txt", "/one.txt"),
            ("beta/", "one.txt", "one.txt"),
            ("src/ma", "in.py", "main.py"),
        ],
    )
    def test_completion_hint(self, text: str, suffix: str, hint: str) -> None:
        assert completion_hint(text, suffix) == hint
