"""Run the relationship network headlessly and dump a rendered snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from relnet.config import AppConfig, load_config
from relnet.contracts import Entity, EntityCategory
from relnet.graph import link_counts
from relnet.render import render_frame
from relnet.simulation import SimulationState, tick
from relnet.viewport import InteractionState, ViewportState

LOGGER = logging.getLogger(__name__)

_ENTITY_LIST = TypeAdapter(List[Entity])


def load_entities(path: Path) -> List[Entity]:
    """Read and validate a JSON array of entity objects."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Entity file {path} is not valid JSON") from exc
    try:
        return _ENTITY_LIST.validate_python(payload)
    except ValidationError as exc:
        raise ValueError(f"Entity file {path} failed validation: {exc}") from exc


def build_snapshot(
    entities: Sequence[Entity],
    *,
    ticks: int,
    width: float,
    height: float,
    seed: Optional[int] = None,
    category: Optional[EntityCategory] = None,
    config: Optional[AppConfig] = None,
) -> Dict[str, Any]:
    """Simulate ``ticks`` steps and return nodes, links, counts and draw commands."""

    resolved_config = config or load_config()
    state = SimulationState.create(entities, width, height, resolved_config, random.Random(seed))
    for _ in range(ticks):
        state = tick(state, config=resolved_config)
    commands = render_frame(
        state.nodes,
        state.links,
        ViewportState(),
        InteractionState(category_filter=category),
        width,
        height,
        resolved_config,
    )
    return {
        "ticks": state.tick_count,
        "nodes": [
            {"id": node.id, "x": node.x, "y": node.y, "radius": node.radius, "category": node.entity.category.value}
            for node in state.nodes
        ],
        "links": [
            {"source": link.source, "target": link.target, "strength": link.strength, "kind": link.kind.value}
            for link in state.links
        ],
        "link_counts": link_counts(state.links),
        "commands": [command.to_dict() for command in commands],
    }


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("entities", type=Path, help="Path to a JSON array of entities")
    parser.add_argument("--ticks", type=int, default=300, help="Number of simulation steps to run")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the initial layout jitter")
    parser.add_argument("--width", type=float, default=None, help="Surface width (defaults to config)")
    parser.add_argument("--height", type=float, default=None, help="Surface height (defaults to config)")
    parser.add_argument(
        "--category",
        choices=[category.value for category in EntityCategory],
        default=None,
        help="Only draw nodes of this category",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s: %(message)s",
    )
    if args.ticks < 0:
        LOGGER.error("--ticks must not be negative")
        return 2
    config = load_config()
    try:
        entities = load_entities(args.entities)
        snapshot = build_snapshot(
            entities,
            ticks=args.ticks,
            width=args.width or config.layout.canvas_width,
            height=args.height or config.layout.canvas_height,
            seed=args.seed,
            category=EntityCategory(args.category) if args.category else None,
            config=config,
        )
    except (OSError, ValueError) as exc:
        LOGGER.error("Unable to build snapshot: %s", exc)
        return 1
    rendered = json.dumps(snapshot, indent=2)
    if args.output is not None:
        args.output.write_text(rendered, encoding="utf-8")
        LOGGER.info("Wrote snapshot with %d nodes to %s", len(snapshot["nodes"]), args.output)
    else:
        sys.stdout.write(rendered + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
