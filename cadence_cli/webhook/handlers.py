"""FastAPI routes for GitHub push webhooks."""

import hashlib
import hmac
import logging
from typing import List, Optional, Sequence

import git
from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cadence_cli import __version__
from cadence_cli.detectors.scoring import DetectionEngine
from cadence_cli.errors import WebhookError
from cadence_cli.git_client import build_pair, get_repo
from cadence_cli.models import RepositoryStats
from cadence_cli.webhook.queue import JobQueue

logger = logging.getLogger(__name__)


def verify_signature(secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Check GitHub's ``X-Hub-Signature-256`` header (``sha256=<hexdigest>``)."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature[len("sha256="):])


class PushProcessor:
    """Evaluates the commits of a push payload against a local clone."""

    def __init__(self, repo_path: str, engine: DetectionEngine, exclude_files: Sequence[str] = ()):
        self.repo_path = repo_path
        self.engine = engine
        self.exclude_files = list(exclude_files)

    def __call__(self, payload: dict) -> List[dict]:
        repo = get_repo(self.repo_path)
        results = []
        stats = RepositoryStats()
        for entry in payload.get("commits") or []:
            sha = entry.get("id", "")
            try:
                commit = repo.commit(sha)
            except (ValueError, git.exc.BadName, git.exc.BadObject, git.exc.GitCommandError):
                logger.warning("Commit %s not found in %s", sha[:7], self.repo_path)
                results.append({"commit": sha, "error": "commit not found in local repository"})
                continue
            pair = build_pair(commit, self.exclude_files)
            if pair is None:
                results.append({"commit": sha, "error": "root commit has no previous commit"})
                continue
            verdict = self.engine.evaluate(pair, stats)
            stats = stats.updated(pair)
            results.append({"commit": sha, "author": pair.current.author, **verdict.to_dict()})
        return results


def create_app(job_queue: JobQueue, secret: str = "") -> FastAPI:
    app = FastAPI(title="Cadence Webhook Server", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )
    app.state.queue = job_queue

    @app.get("/health")
    def health():
        return {"status": "ok", "queue_running": job_queue.running}

    @app.post("/webhook")
    async def receive(
        request: Request,
        x_github_event: str = Header(default=""),
        x_hub_signature_256: Optional[str] = Header(default=None),
    ):
        body = await request.body()
        if secret and not verify_signature(secret, body, x_hub_signature_256):
            raise HTTPException(status_code=401, detail="invalid signature")

        if x_github_event == "ping":
            return {"message": "pong"}
        if x_github_event != "push":
            return {"message": f"ignored event '{x_github_event}'"}

        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid JSON payload")

        try:
            job_id = job_queue.submit(payload)
        except WebhookError as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        return JSONResponse(status_code=202, content={"job_id": job_id, "status": "queued"})

    @app.get("/jobs/{job_id}")
    def job_status(job_id: str):
        job = job_queue.get(job_id)
        if job is None:
            raise HTTPException(status_code=404, detail="job not found")
        return job.to_dict()

    return app
