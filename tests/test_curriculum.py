"""Tests for curriculum matching."""

import json
from pathlib import Path

from planwise.curriculum import MAX_EXCERPT_CHARS, find_relevant, load_curriculum


class TestLoadCurriculum:
    def test_loads_entries(self, curriculum_file: Path) -> None:
        entries = load_curriculum(curriculum_file)

        assert [e["title"] for e in entries] == ["Colors", "Counting", "Turn taking"]

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_curriculum(tmp_path / "missing.json") == []

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_curriculum(path) == []

    def test_not_a_list(self, tmp_path: Path) -> None:
        path = tmp_path / "obj.json"
        path.write_text(json.dumps({"title": "x"}), encoding="utf-8")

        assert load_curriculum(path) == []


class TestFindRelevant:
    def test_case_insensitive_match(self, curriculum_file: Path) -> None:
        match = find_relevant(load_curriculum(curriculum_file), "BLUE")

        assert match.used
        assert match.excerpt == "Title: Colors\nMatch red and blue cards."

    def test_matches_title(self, curriculum_file: Path) -> None:
        match = find_relevant(load_curriculum(curriculum_file), "counting")

        assert [e["title"] for e in match.entries] == ["Counting"]

    def test_top_three_joined(self) -> None:
        curriculum = [{"title": f"T{i}", "content": "shared"} for i in range(5)]

        match = find_relevant(curriculum, "shared")

        assert len(match.entries) == 3
        assert match.excerpt.count("\n\n---\n\n") == 2

    def test_excerpt_capped(self) -> None:
        curriculum = [{"title": "long", "content": "a" * 5000}]

        assert len(find_relevant(curriculum, "long").excerpt) == MAX_EXCERPT_CHARS

    def test_no_match_or_query(self, curriculum_file: Path) -> None:
        curriculum = load_curriculum(curriculum_file)

        assert not find_relevant(curriculum, "zebra").used
        assert not find_relevant(curriculum, None).used
        assert not find_relevant(curriculum, "  ").used
