"""
Analyzer configuration for kpreflight.

This module defines the AnalyzerSettings dataclass that captures the
configurable parameters of rule evaluation: where the collected payloads
live in the snapshot, how results are titled, and how many rules run at once.

Settings can be built directly or from the environment (optionally seeded
from a .env file):

    KPREFLIGHT_NODES_KEY          collected key of the node inventory
    KPREFLIGHT_DEPLOYMENTS_DIR    collected directory of per-namespace deployments
    KPREFLIGHT_DEFAULT_TITLE      title used when a rule has no checkName
    KPREFLIGHT_MAX_WORKERS        worker threads for run_analyzers
    KPREFLIGHT_LOG_LEVEL          level for the kpreflight logger
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from kpreflight.constants import (
    DEFAULT_NODE_RESOURCES_TITLE,
    DEPLOYMENTS_DIR,
    NODE_RESOURCES_ICON_KEY,
    NODE_RESOURCES_ICON_URI,
    NODES_KEY,
)

ENV_PREFIX = "KPREFLIGHT_"


@dataclass
class AnalyzerSettings:
    """
    Configuration for node-resources evaluation.

    Attributes:
        nodes_key: Collected key of the node inventory.
        deployments_dir: Collected directory holding <namespace>.json lists.
        default_title: Result title when a rule has no check name.
        icon_key: Icon key stamped on every result.
        icon_uri: Icon URI stamped on every result.
        max_workers: Worker threads used by run_analyzers; 1 runs inline.
        log_level: Level name applied by configure_logging().
    """

    nodes_key: str = NODES_KEY
    deployments_dir: str = DEPLOYMENTS_DIR
    default_title: str = DEFAULT_NODE_RESOURCES_TITLE
    icon_key: str = NODE_RESOURCES_ICON_KEY
    icon_uri: str = NODE_RESOURCES_ICON_URI
    max_workers: int = 1
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if not _is_level_name(self.log_level):
            raise ValueError(f"log_level must be a logging level name, got {self.log_level!r}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "AnalyzerSettings":
        """
        Build settings from KPREFLIGHT_* environment variables.

        Args:
            env_file: Optional .env file loaded first. Variables already set
                in the environment win over the file.

        Returns:
            AnalyzerSettings with unset variables left at their defaults.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)

        defaults = cls()

        workers_text = os.getenv(f"{ENV_PREFIX}MAX_WORKERS", str(defaults.max_workers))
        try:
            max_workers = int(workers_text)
        except ValueError as e:
            raise ValueError(f"{ENV_PREFIX}MAX_WORKERS must be an integer, got {workers_text!r}") from e
        if max_workers < 1:
            raise ValueError(f"{ENV_PREFIX}MAX_WORKERS must be >= 1, got {max_workers}")

        log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level)
        if not _is_level_name(log_level):
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be a logging level name, got {log_level!r}")

        return cls(
            nodes_key=os.getenv(f"{ENV_PREFIX}NODES_KEY", defaults.nodes_key),
            deployments_dir=os.getenv(f"{ENV_PREFIX}DEPLOYMENTS_DIR", defaults.deployments_dir),
            default_title=os.getenv(f"{ENV_PREFIX}DEFAULT_TITLE", defaults.default_title),
            max_workers=max_workers,
            log_level=log_level,
        )


def _is_level_name(name: str) -> bool:
    # getLevelName maps a registered name to its int level
    return isinstance(logging.getLevelName(name.upper()), int)


def configure_logging(settings: AnalyzerSettings) -> logging.Logger:
    """Apply the configured level to the package logger and return it."""
    logger = logging.getLogger("kpreflight")
    logger.setLevel(settings.log_level)
    return logger
