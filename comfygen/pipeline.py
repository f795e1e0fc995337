"""Pipeline orchestration: build, submit, wait, download."""

from __future__ import annotations

import logging

from .config import ClientConfig
from .errors import MissingCredential
from .services.comfy import ComfyClient
from .types import GenerationOptions, ResultRecord
from .utils.files import human_size
from .workflow import build_workflow

logger = logging.getLogger(__name__)


class VideoGenerator:
    """High-level facade exposing the end-to-end generation flow."""

    def __init__(self, config: ClientConfig | None = None, client: ComfyClient | None = None) -> None:
        self.config = config or ClientConfig.from_env()
        if client is None:
            if not self.config.api_key:
                raise MissingCredential("API key is not configured")
            client = ComfyClient(
                self.config.api_key,
                self.config.base_url,
                timeout=self.config.request_timeout,
                poll_interval=self.config.poll_interval,
                max_wait=self.config.max_wait,
            )
        self.client = client

    def run(self, options: GenerationOptions) -> ResultRecord:
        """Execute the pipeline and return the result summary."""
        workflow = build_workflow(
            options.prompt,
            seed=options.seed,
            frame_count=options.frame_count,
            fps=options.fps,
        )
        with self.client as client:
            prompt_id = client.submit_workflow(workflow)
            logger.info("Job submitted: %s", prompt_id)

            client.wait_for_completion(prompt_id)

            filename = client.resolve_output_filename(prompt_id)
            logger.info("Downloading: %s", filename)
            size = client.download_artifact(filename, options.output_path)
        logger.info("Saved %s to %s", human_size(size), options.output_path)

        return ResultRecord(
            prompt_id=prompt_id,
            filename=filename,
            output=options.output_path,
            bytes=size,
        )
