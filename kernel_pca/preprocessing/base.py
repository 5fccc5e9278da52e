"""Template for reduction runs that turn an input file into a run directory.

A run owns ``<output_root>/<run_id>/``. :meth:`Preprocessor.execute` creates
that directory, records the configuration, seeds the global generators,
then calls the ``load_inputs -> process -> save`` hooks of the subclass and
finishes with ``run_metadata.json`` listing the artifacts written.
"""

from __future__ import annotations

import json
import logging
import random
import shutil
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from ..utils.logging.logging_manager import LoggingManager, get_logger

CONFIG_FILENAME = "config.json"
METADATA_FILENAME = "run_metadata.json"


def to_jsonable(value: Any) -> Any:
    """Convert paths, numpy values and nested containers for ``json.dump``."""

    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_jsonable(val) for key, val in value.items()}
    return value


def write_json(path: Path, payload: Dict[str, Any]) -> Path:
    with path.open("w", encoding="utf-8") as fp:
        json.dump(to_jsonable(payload), fp, indent=2, sort_keys=True)
    return path


@dataclass
class PreprocessorConfig:
    """Settings every run needs regardless of what it computes."""

    output_root: Path = Path("artifacts")
    run_id: Optional[str] = None
    seed: int = 7
    overwrite: bool = False
    log_level: int = logging.INFO

    def to_serialisable_dict(self) -> Dict[str, Any]:
        return to_jsonable(asdict(self))


@dataclass
class PreprocessorResult:
    run_id: str
    run_dir: Path
    artifacts: Dict[str, Path]
    metadata: Dict[str, Any] = field(default_factory=dict)


class Preprocessor(ABC):
    """Run skeleton; subclasses supply the three hooks."""

    #: Prefix of generated run identifiers.
    run_prefix = "run"

    def __init__(
        self, config: PreprocessorConfig, *, logger: Optional[LoggingManager] = None
    ) -> None:
        self.config = config
        self.run_id = config.run_id or self._generate_run_id()
        self.run_dir = Path(config.output_root) / self.run_id
        self.logger = logger or self._create_logger()

    def execute(self) -> PreprocessorResult:
        self.logger.info("Starting run %s", self.run_id)
        started = time.perf_counter()
        self._prepare_run_directory()
        self._initialise_seeds()
        result = self.save(self.process(self.load_inputs()))
        result.metadata.setdefault("elapsed_seconds", round(time.perf_counter() - started, 3))
        self._persist_run_metadata(result)
        self.logger.info("Completed run %s", self.run_id)
        return result

    @abstractmethod
    def load_inputs(self) -> Any:
        """Read whatever the run consumes."""

    @abstractmethod
    def process(self, inputs: Any) -> Any:
        """Compute the run's outputs in memory."""

    @abstractmethod
    def save(self, processed: Any) -> PreprocessorResult:
        """Write the outputs into :attr:`run_dir`."""

    def _initialise_seeds(self) -> None:
        random.seed(self.config.seed)
        np.random.seed(self.config.seed)

    def _prepare_run_directory(self) -> None:
        if self.run_dir.exists():
            if not self.config.overwrite:
                raise FileExistsError(
                    f"Output directory {self.run_dir} already exists. Set overwrite=True to replace it."
                )
            self.logger.warning("Replacing existing run directory %s", self.run_dir)
            shutil.rmtree(self.run_dir)
        self.run_dir.mkdir(parents=True)
        payload = self.config.to_serialisable_dict()
        payload["run_id"] = self.run_id
        write_json(self.run_dir / CONFIG_FILENAME, payload)

    def _persist_run_metadata(self, result: PreprocessorResult) -> None:
        write_json(
            self.run_dir / METADATA_FILENAME,
            {
                "run_id": result.run_id,
                "artifacts": result.artifacts,
                "metadata": result.metadata,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    def _create_logger(self) -> LoggingManager:
        manager = get_logger(f"preprocessor.{self.__class__.__name__}")
        manager.set_level(self.config.log_level)
        return manager

    def _generate_run_id(self) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        return f"{self.run_prefix}_{timestamp}"


__all__ = [
    "CONFIG_FILENAME",
    "METADATA_FILENAME",
    "Preprocessor",
    "PreprocessorConfig",
    "PreprocessorResult",
    "to_jsonable",
    "write_json",
]
