from utils.env import Settings
from utils.logging_config import setup_logging

settings = Settings()
setup_logging(settings.LOG_LEVEL)

from blacksheep import Application
from rodi import Container

from controllers.pipeline import Pipeline  # noqa: F401  registers the controller routes
from services.pipeline_service import PipelineService

services = Container()
services.add_instance(settings)
services.add_singleton(PipelineService)

app = Application(services=services)

app.use_cors(
    allow_methods="*",
    allow_origins="*",
    allow_headers="*",
)
