"""Core data models shared by the workflow builder, client and CLI."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

SEED_LIMIT = 2**32
SUCCESS_STATES = frozenset({"success"})
FAILURE_STATES = frozenset({"error", "failed"})

WorkflowGraph = Dict[str, Dict[str, Any]]


def random_seed() -> int:
    """Return a random unsigned 32-bit seed."""
    return random.randrange(SEED_LIMIT)


@dataclass(slots=True, frozen=True)
class GenerationOptions:
    """User parameters for a single generation run."""

    prompt: str
    seed: int = field(default_factory=random_seed)
    frame_count: int = 121
    fps: int = 24
    output_path: str = "output.mp4"

    @property
    def duration_sec(self) -> float:
        return self.frame_count / self.fps


@dataclass(slots=True, frozen=True)
class JobStatus:
    """Snapshot of a remote job's state as reported by the status endpoint."""

    status: str
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status in SUCCESS_STATES

    @property
    def failed(self) -> bool:
        return self.status in FAILURE_STATES

    @property
    def is_terminal(self) -> bool:
        return self.succeeded or self.failed


@dataclass(slots=True, frozen=True)
class ResultRecord:
    """Machine-readable summary emitted after a successful run."""

    prompt_id: str
    filename: str
    output: str
    bytes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt_id": self.prompt_id,
            "filename": self.filename,
            "output": self.output,
            "bytes": self.bytes,
        }
