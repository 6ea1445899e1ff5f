"""Queue job handling for the batch pipeline.

Jobs arrive from an external queue as ``{"id", "name", "data"}`` payloads.
Only ``generate`` jobs are understood; their ``data.keywordId`` is passed to
:meth:`ContentPipeline.generate_contents`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .runner import ContentPipeline, PipelineResult

logger = logging.getLogger(__name__)

QUEUE_NAME = "batch"
JOB_NAME = "generate"


@dataclass(frozen=True)
class BatchJob:
    """A job taken off the batch queue."""

    id: str
    name: str
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: str | dict[str, Any]) -> "BatchJob":
        """Build a job from a JSON string or decoded mapping.

        Raises:
            ValueError: If the payload is not a JSON object with a job name.
        """
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid job payload: {exc}") from exc
        if not isinstance(payload, dict) or not payload.get("name"):
            raise ValueError("Job payload must be an object with a 'name'")
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise ValueError("Job 'data' must be an object")
        return cls(id=str(payload.get("id", "")), name=payload["name"], data=data)

    @property
    def keyword_id(self) -> int:
        try:
            return int(self.data["keywordId"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Job {self.id} has no valid keywordId") from exc


def process_job(job: BatchJob, pipeline: ContentPipeline) -> PipelineResult | None:
    """Run one queue job.

    Returns:
        The pipeline result for ``generate`` jobs, None for unknown job names.

    Raises:
        BatchError: Whatever the pipeline raised, after logging it.
    """
    if job.name != JOB_NAME:
        logger.warning("Ignoring job %s with unknown name %r", job.id, job.name)
        return None

    keyword_id = job.keyword_id
    try:
        result = pipeline.generate_contents(keyword_id)
    except Exception:
        logger.exception("Job %s (%s) failed for keywordId: %d", job.id, job.name, keyword_id)
        raise

    logger.info("Job %s (%s) completed successfully for keywordId: %d", job.id, job.name, keyword_id)
    return result
