"""Tests for queue job handling."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from keyword_batch.errors import KeywordNotFoundError
from keyword_batch.pipeline.jobs import JOB_NAME, QUEUE_NAME, BatchJob, process_job


class TestBatchJob:
    """Tests for BatchJob parsing."""

    def test_constants(self):
        """The worker listens on the batch queue for generate jobs."""
        assert QUEUE_NAME == "batch"
        assert JOB_NAME == "generate"

    def test_from_json_string(self):
        """A JSON payload is decoded into a job."""
        job = BatchJob.from_payload(json.dumps({"id": 1, "name": "generate", "data": {"keywordId": 42}}))

        assert job.id == "1"
        assert job.name == "generate"
        assert job.keyword_id == 42

    def test_keyword_id_accepts_numeric_string(self):
        """keywordId may arrive as a string."""
        job = BatchJob.from_payload({"id": "x", "name": "generate", "data": {"keywordId": "7"}})
        assert job.keyword_id == 7

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2]",
            json.dumps({"id": "1"}),
            json.dumps({"id": "1", "name": "generate", "data": [1]}),
        ],
    )
    def test_invalid_payloads(self, payload):
        """Malformed payloads raise ValueError."""
        with pytest.raises(ValueError):
            BatchJob.from_payload(payload)

    def test_missing_keyword_id(self):
        """A generate job without keywordId is rejected when read."""
        job = BatchJob.from_payload({"id": "1", "name": "generate", "data": {}})
        with pytest.raises(ValueError, match="keywordId"):
            job.keyword_id


class TestProcessJob:
    """Tests for process_job."""

    def test_runs_generate_job(self):
        """Generate jobs call the pipeline with the keyword id."""
        pipeline = MagicMock()
        job = BatchJob(id="1", name="generate", data={"keywordId": 42})

        result = process_job(job, pipeline)

        pipeline.generate_contents.assert_called_once_with(42)
        assert result is pipeline.generate_contents.return_value

    def test_ignores_unknown_jobs(self):
        """Jobs with other names are skipped."""
        pipeline = MagicMock()
        job = BatchJob(id="2", name="cleanup", data={})

        assert process_job(job, pipeline) is None
        pipeline.generate_contents.assert_not_called()

    def test_failures_propagate(self):
        """Pipeline errors are logged and re-raised to the queue."""
        pipeline = MagicMock()
        pipeline.generate_contents.side_effect = KeywordNotFoundError(42)
        job = BatchJob(id="3", name="generate", data={"keywordId": 42})

        with pytest.raises(KeywordNotFoundError):
            process_job(job, pipeline)
