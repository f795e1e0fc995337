"""Exception types raised while generating a video."""

from __future__ import annotations

from typing import Optional


class ComfyGenError(RuntimeError):
    """Base class for every failure that aborts a run."""


class MissingCredential(ComfyGenError):
    """The API key environment variable is unset or blank."""


class MissingPrompt(ComfyGenError):
    """No prompt text was supplied on the command line."""


class TransportError(ComfyGenError):
    """The request never produced an HTTP response (DNS, TLS, timeout...)."""


class RemoteError(ComfyGenError):
    """The service answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        reason: str = "",
        body: str = "",
    ) -> None:
        if status_code is not None:
            message = f"{message}: {status_code} {reason}".rstrip()
            if body:
                message = f"{message}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class RemoteRejection(RemoteError):
    """The job submission was refused, either by HTTP status or node validation."""

    def __init__(self, message: str, *, node_errors: Optional[dict] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.node_errors = node_errors or {}


class DownloadFailed(RemoteError):
    """The artifact could not be fetched from the view endpoint."""


class JobTimeout(ComfyGenError, TimeoutError):
    """The job did not reach a terminal status within the wait budget."""


class JobFailed(ComfyGenError):
    """The service reported the job as errored or failed."""

    def __init__(self, status: str, error_message: Optional[str] = None) -> None:
        super().__init__(f"Job {status}: {error_message or 'unknown'}")
        self.status = status
        self.error_message = error_message


class NoOutputFound(ComfyGenError):
    """The job history does not expose any output filename."""


__all__ = [
    "ComfyGenError",
    "DownloadFailed",
    "JobFailed",
    "JobTimeout",
    "MissingCredential",
    "MissingPrompt",
    "NoOutputFound",
    "RemoteError",
    "RemoteRejection",
    "TransportError",
]
