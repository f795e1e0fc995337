"""comfygen package.

Submits the LTX-2 text-to-video workflow to ComfyUI Cloud, waits for the
job and downloads the rendered video.
"""

from .pipeline import VideoGenerator  # noqa: F401
from .workflow import build_workflow  # noqa: F401

__all__ = ["VideoGenerator", "build_workflow"]
