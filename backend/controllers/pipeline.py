import logging

from blacksheep import json, Response
from blacksheep.server.controllers import APIController, get, post

from services.pipeline_service import PipelineService

logger = logging.getLogger("pipeline_controller")


class Pipeline(APIController):
    def __init__(self, pipeline_service: PipelineService):
        self.pipeline_service = pipeline_service

    @get("/health")
    async def health_check(self) -> Response:
        return json({"status": "ok"})

    @post("/run")
    async def start_run(self) -> Response:
        # A run can poll remote jobs for an hour; callers poll /status instead of waiting
        run_id = await self.pipeline_service.start_run()
        logger.info(f"POST /api/pipeline/run -> {run_id}")
        return json({"run_id": run_id, "status": "waiting"}, status=202)

    @get("/status/{run_id}")
    async def get_status(self, run_id: str) -> Response:
        run = self.pipeline_service.get_run(run_id)
        if run is None:
            logger.warning(f"Run {run_id} not found")
            return json({"error": "Run not found"}, status=404)

        logger.debug(f"Run {run_id} status={run.status}")
        return json(run.to_dict())
