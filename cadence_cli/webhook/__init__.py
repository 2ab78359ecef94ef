from cadence_cli.webhook.handlers import PushProcessor, create_app, verify_signature
from cadence_cli.webhook.queue import Job, JobQueue
from cadence_cli.webhook.server import WebhookServer

__all__ = ["Job", "JobQueue", "PushProcessor", "WebhookServer", "create_app", "verify_signature"]
