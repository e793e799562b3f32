"""
Runtime configuration.

Values come from environment variables so the same settings drive the web
service, the CLI and container deployments:

    GENEALOGY_GRAPH_SNAPSHOT  JSON or GEDCOM snapshot file
    GRAMPS_WEB_URL            Gramps Web base URL (takes precedence)
    GRAMPS_WEB_USER / GRAMPS_WEB_PASS
    GRAPH_MAX_NODES           Node budget per request
    GRAPH_TIMEOUT_SECONDS     Deadline per request
    GRAPH_PATH_STRATEGY       "single" or "bidirectional"
    LOG_LEVEL                 Logging level name
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from genealogy_graph.graph.limits import TraversalBudget
from genealogy_graph.graph.paths import PathStrategy
from genealogy_graph.store import EntityStore, GrampsWebConfig, GrampsWebStore, InMemoryStore

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class GraphConfig:
    """Configuration for the relationship-graph service."""

    # Data source
    snapshot_path: str | None = None
    gramps_web_url: str | None = None
    gramps_web_user: str | None = None
    gramps_web_password: str | None = None

    # Traversal limits
    max_nodes: int | None = 100_000
    timeout_seconds: float | None = 10.0

    # Chart depths
    fan_chart_generations: int = 5
    tree_chart_generations: int = 3
    descendant_generations: int = 5
    max_generations_limit: int = 12  # Upper bound for ?generations=

    path_strategy: PathStrategy = PathStrategy.SINGLE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> GraphConfig:
        """Create config from environment variables."""
        max_nodes = os.getenv("GRAPH_MAX_NODES")
        timeout = os.getenv("GRAPH_TIMEOUT_SECONDS")
        return cls(
            snapshot_path=os.getenv("GENEALOGY_GRAPH_SNAPSHOT"),
            gramps_web_url=os.getenv("GRAMPS_WEB_URL"),
            gramps_web_user=os.getenv("GRAMPS_WEB_USER"),
            gramps_web_password=os.getenv("GRAMPS_WEB_PASS"),
            max_nodes=int(max_nodes) if max_nodes else cls.max_nodes,
            timeout_seconds=float(timeout) if timeout else cls.timeout_seconds,
            path_strategy=PathStrategy(os.getenv("GRAPH_PATH_STRATEGY", "single").lower()),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def new_budget(self) -> TraversalBudget:
        """A fresh traversal budget for one request."""
        return TraversalBudget(max_nodes=self.max_nodes, timeout=self.timeout_seconds)


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def create_store(config: GraphConfig) -> EntityStore:
    """
    Pick the entity store for a configuration.

    Gramps Web when a URL is set, else the snapshot file, else an empty
    in-memory store. Gramps Web stores must still be connected.
    """
    if config.gramps_web_url:
        return GrampsWebStore(GrampsWebConfig(
            base_url=config.gramps_web_url,
            username=config.gramps_web_user,
            password=config.gramps_web_password,
        ))
    if config.snapshot_path:
        return InMemoryStore.from_file(config.snapshot_path)
    return InMemoryStore()
