"""Tests for the headless snapshot CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from relnet.contracts import EntityCategory
from scripts.render_snapshot import build_snapshot, load_entities, main


@pytest.fixture()
def entity_file(tmp_path: Path) -> Path:
    payload = [
        {"id": "a", "first_name": "Ann", "last_name": "Lee", "employer_id": "acme", "category": "Bankers", "affinity_score": 85},
        {"id": "b", "first_name": "Bob", "last_name": "Ray", "employer_id": "acme", "category": "Lawyers", "affinity_score": 78},
        {"id": "c", "first_name": "Cy", "last_name": "Oh", "transaction_ids": ["d1"], "category": "Board", "affinity_score": 30},
    ]
    path = tmp_path / "entities.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_build_snapshot_is_reproducible_with_seed(entity_file: Path) -> None:
    entities = load_entities(entity_file)

    first = build_snapshot(entities, ticks=20, width=800, height=500, seed=3)
    second = build_snapshot(entities, ticks=20, width=800, height=500, seed=3)

    assert first == second
    assert first["ticks"] == 20
    assert first["link_counts"]["same-employer"] == 1
    assert first["commands"][0]["op"] == "clear"


def test_category_option_filters_drawn_nodes(entity_file: Path) -> None:
    entities = load_entities(entity_file)

    snapshot = build_snapshot(entities, ticks=1, width=800, height=500, seed=1, category=EntityCategory.BOARD)

    texts = [command["text"] for command in snapshot["commands"] if command["op"] == "text"]
    assert texts == ["CO"]
    assert len(snapshot["nodes"]) == 3


def test_main_writes_output_file(entity_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "snapshot.json"

    exit_code = main([str(entity_file), "--ticks", "5", "--seed", "2", "--output", str(output)])

    assert exit_code == 0
    written = json.loads(output.read_text(encoding="utf-8"))
    assert [node["id"] for node in written["nodes"]] == ["a", "b", "c"]


def test_main_reports_invalid_input(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert main([str(broken)]) == 1


def test_main_rejects_duplicate_ids(tmp_path: Path) -> None:
    duplicate = tmp_path / "dupes.json"
    duplicate.write_text(
        json.dumps([{"id": "x", "affinity_score": 10}, {"id": "x", "affinity_score": 20}]),
        encoding="utf-8",
    )

    assert main([str(duplicate), "--ticks", "1"]) == 1
