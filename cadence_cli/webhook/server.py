import logging
from typing import Optional

import uvicorn

from cadence_cli.config import WebhookConfig
from cadence_cli.errors import WebhookError
from cadence_cli.webhook.handlers import create_app
from cadence_cli.webhook.queue import JobProcessor, JobQueue

logger = logging.getLogger(__name__)


class WebhookServer:
    """Owns the job queue and the HTTP listener; explicit start/stop, no singleton."""

    def __init__(self, config: Optional[WebhookConfig], processor: JobProcessor):
        self.config = config or WebhookConfig()
        self.queue = JobQueue(self.config.max_workers, processor)
        self.app = create_app(self.queue, secret=self.config.secret)
        self._server: Optional[uvicorn.Server] = None

    @property
    def address(self) -> str:
        return f"{self.config.host}:{self.config.port}"

    def start(self):
        """Start the workers, then serve until stop() is called. Blocks."""
        try:
            self.queue.start()
        except WebhookError as exc:
            raise WebhookError(f"failed to start job queue: {exc}") from exc

        self._server = uvicorn.Server(
            uvicorn.Config(
                self.app,
                host=self.config.host,
                port=self.config.port,
                timeout_keep_alive=self.config.read_timeout,
                log_level="info",
            )
        )
        logger.info("Starting webhook server on %s", self.address)
        try:
            self._server.run()
        except (OSError, SystemExit) as exc:
            # uvicorn exits the process on bind failure
            raise WebhookError(f"failed to listen on {self.address}: {exc}") from exc
        finally:
            if self.queue.running:
                self.queue.stop()

    def stop(self):
        try:
            self.queue.stop()
        except WebhookError as exc:
            raise WebhookError(f"failed to stop job queue: {exc}") from exc
        if self._server is not None:
            self._server.should_exit = True
