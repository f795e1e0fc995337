"""ComfyUI Cloud client: submit a workflow, wait for it, fetch the video."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

import requests

from ..config import DEFAULT_BASE_URL
from ..errors import (
    DownloadFailed,
    JobFailed,
    JobTimeout,
    NoOutputFound,
    RemoteError,
    RemoteRejection,
    TransportError,
)
from ..types import JobStatus, WorkflowGraph
from ..utils.files import atomic_write

logger = logging.getLogger(__name__)

# Output lists checked per node, in order, when looking for the artifact.
ARTIFACT_KEYS = ("images", "videos", "gifs")


class ComfyClient:
    """Thin wrapper around the ComfyUI Cloud job API.

    Every request carries the ``X-API-Key`` header. Failures are never retried:
    a non-success response raises with its status and body, and transport
    errors surface as :class:`~comfygen.errors.TransportError`.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 60.0,
        poll_interval: float = 5.0,
        max_wait: float = 600.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._max_wait = max_wait
        self._session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock

    def __enter__(self) -> "ComfyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def submit_workflow(self, workflow: WorkflowGraph) -> str:
        """Queue ``workflow`` and return the job's ``prompt_id``."""
        payload = {
            "prompt": workflow,
            "extra_data": {"api_key_comfy_org": self._api_key},
        }
        response = self._request("POST", "/api/prompt", json=payload)
        if not response.ok:
            raise RemoteRejection(
                "Workflow submission rejected",
                status_code=response.status_code,
                reason=response.reason,
                body=response.text,
            )
        data = self._json(response, "/api/prompt")
        node_errors = data.get("node_errors")
        if node_errors:
            raise RemoteRejection(
                f"Node errors: {json.dumps(node_errors, ensure_ascii=False)}",
                node_errors=node_errors,
            )
        prompt_id = data.get("prompt_id")
        if not prompt_id:
            raise RemoteRejection(f"Submission response missing prompt_id: {response.text}")
        return str(prompt_id)

    def get_status(self, prompt_id: str) -> JobStatus:
        """Fetch the current status of a job once."""
        path = f"/api/job/{prompt_id}/status"
        data = self._json(self._checked("GET", path), path)
        return JobStatus(
            status=str(data.get("status") or "unknown").lower(),
            error_message=data.get("error_message") or None,
        )

    def wait_for_completion(
        self,
        prompt_id: str,
        poll_interval: Optional[float] = None,
        max_wait: Optional[float] = None,
    ) -> JobStatus:
        """Poll until the job succeeds, fails, or the wait budget runs out."""
        interval = self._poll_interval if poll_interval is None else poll_interval
        budget = self._max_wait if max_wait is None else max_wait
        started = self._clock()
        while self._clock() - started < budget:
            status = self.get_status(prompt_id)
            logger.info("[%s] %.0fs", status.status, self._clock() - started)
            if status.succeeded:
                return status
            if status.failed:
                raise JobFailed(status.status, status.error_message)
            self._sleep(interval)
        raise JobTimeout(f"Timed out waiting for job {prompt_id} after {budget:.0f}s")

    def resolve_output_filename(self, prompt_id: str) -> str:
        """Return the first artifact filename recorded in the job history."""
        path = f"/api/history_v2/{prompt_id}"
        data = self._json(self._checked("GET", path), path)
        job = data.get(prompt_id)
        if not isinstance(job, Mapping):
            raise NoOutputFound(f"No history entry for job {prompt_id}")
        for filename in _iter_filenames(job.get("outputs")):
            return filename
        raise NoOutputFound(f"No output file found for job {prompt_id}")

    def download_artifact(self, filename: str, output_path: str | Path) -> int:
        """Fetch ``filename`` from the output store into ``output_path``."""
        response = self._request(
            "GET",
            "/api/view",
            params={"filename": filename, "type": "output"},
            allow_redirects=True,
        )
        if not response.ok:
            raise DownloadFailed(
                "Download failed",
                status_code=response.status_code,
                reason=response.reason,
                body=response.text,
            )
        content = response.content
        atomic_write(output_path, content)
        return len(content)

    def _checked(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        response = self._request(method, path, **kwargs)
        if not response.ok:
            raise RemoteError(
                f"{method} {path} failed",
                status_code=response.status_code,
                reason=response.reason,
                body=response.text,
            )
        return response

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self._base_url}{path}"
        headers = {"X-API-Key": self._api_key}
        if "json" in kwargs:
            headers["Content-Type"] = "application/json"
        logger.debug("%s %s", method, url)
        try:
            return self._session.request(
                method, url, headers=headers, timeout=self._timeout, **kwargs
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _json(response: requests.Response, path: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteError(f"Invalid JSON from {path}: {response.text}") from exc
        if not isinstance(data, dict):
            raise RemoteError(f"Unexpected response from {path}: {response.text}")
        return data


def _iter_filenames(outputs: Any) -> Iterator[str]:
    if not isinstance(outputs, Mapping):
        return
    for node_id in sorted(outputs):
        node_output = outputs[node_id]
        if not isinstance(node_output, Mapping):
            continue
        for key in ARTIFACT_KEYS:
            for item in node_output.get(key) or []:
                if isinstance(item, Mapping) and item.get("filename"):
                    yield str(item["filename"])
