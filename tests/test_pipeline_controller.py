"""
Tests for the pipeline HTTP controller.
"""

import json
from datetime import datetime

import pytest
from unittest.mock import AsyncMock, MagicMock

from controllers.pipeline import Pipeline
from models.job import PipelineResult, RunStatus, VideoReference


def _controller(service=None):
    return Pipeline(service or MagicMock())


def _body(response):
    return json.loads(response.content.body)


class TestPipelineController:
    @pytest.mark.asyncio
    async def test_health(self):
        response = await _controller().health_check()
        assert response.status == 200
        assert _body(response) == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_run_returns_id_immediately(self):
        service = MagicMock()
        service.start_run = AsyncMock(return_value="run-1")

        response = await _controller(service).start_run()

        assert response.status == 202
        assert _body(response) == {"run_id": "run-1", "status": "waiting"}
        service.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_status_done(self):
        result = PipelineResult(
            video=VideoReference(video_id="abc", title="Sunday Service"),
            audio_url="https://cdn.example/a.mp3",
            transcript="Grace and peace",
        )
        service = MagicMock()
        service.get_run.return_value = RunStatus(
            status="done",
            run_start_time=datetime(2026, 10, 19, 9, 0),
            run_end_time=datetime(2026, 10, 19, 9, 20),
            result=result,
        )

        response = await _controller(service).get_status("run-1")

        assert response.status == 200
        body = _body(response)
        assert body["status"] == "done"
        assert body["result"]["transcript"] == "Grace and peace"
        assert body["result"]["video_url"] == "https://www.youtube.com/watch?v=abc"
        service.get_run.assert_called_once_with("run-1")

    @pytest.mark.asyncio
    async def test_status_timed_out(self):
        service = MagicMock()
        service.get_run.return_value = RunStatus(
            status="error",
            run_start_time=datetime(2026, 10, 19, 9, 0),
            error="job t-1 still pending after 5 poll(s) and 150.0s",
            stage="transcription",
            timed_out=True,
        )

        body = _body(await _controller(service).get_status("run-1"))

        assert body["status"] == "error"
        assert body["stage"] == "transcription"
        assert body["timed_out"] is True
        assert body["result"] is None

    @pytest.mark.asyncio
    async def test_status_unknown_run(self):
        service = MagicMock()
        service.get_run.return_value = None

        response = await _controller(service).get_status("missing")

        assert response.status == 404
