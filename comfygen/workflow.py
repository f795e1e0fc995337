"""LTX-2 text-to-video workflow template for ComfyUI.

The graph runs a base-resolution pass, then upsamples the latent by 2x and
refines it with a second, distilled sampling pass before decoding video and
audio. Node ids, kinds and wiring never change; ``build_workflow`` only fills
the ``Param`` slots of the template.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, NamedTuple, Tuple

from .types import WorkflowGraph

CHECKPOINT = "ltx-2-19b-dev-fp4.safetensors"
NEGATIVE_PROMPT = (
    "blurry, low quality, still frame, frames, watermark, overlay, titles, "
    "has blurbox, has subtitles"
)


class Edge(NamedTuple):
    """Reference to output ``slot`` of node ``node_id``."""

    node_id: str
    slot: int


@dataclass(frozen=True)
class Param:
    """Substitution point filled in per invocation."""

    name: str


@dataclass(frozen=True)
class NodeSpec:
    kind: str
    inputs: Mapping[str, Any]


def _node(kind: str, **inputs: Any) -> NodeSpec:
    return NodeSpec(kind=kind, inputs=MappingProxyType(inputs))


TEMPLATE: Mapping[str, NodeSpec] = MappingProxyType(
    {
        "75": _node(
            "SaveVideo",
            filename_prefix="video/LTX-2",
            format="mp4",
            codec="auto",
            video=Edge("92:97", 0),
        ),
        "92:9": _node(
            "LTXVScheduler",
            steps=20,
            max_shift=2.05,
            base_shift=0.95,
            stretch=True,
            terminal=0.1,
            latent=Edge("92:56", 0),
        ),
        "92:60": _node(
            "LTXAVTextEncoderLoader",
            text_encoder="gemma_3_12B_it_fp4_mixed.safetensors",
            ckpt_name=CHECKPOINT,
            device="default",
        ),
        "92:73": _node("ManualSigmas", sigmas="0.909375, 0.725, 0.421875, 0.0"),
        "92:76": _node(
            "LatentUpscaleModelLoader",
            model_name="ltx-2-spatial-upscaler-x2-1.0.safetensors",
        ),
        "92:81": _node(
            "LTXVCropGuides",
            positive=Edge("92:22", 0),
            negative=Edge("92:22", 1),
            latent=Edge("92:80", 0),
        ),
        "92:82": _node(
            "CFGGuider",
            cfg=1,
            model=Edge("92:68", 0),
            positive=Edge("92:81", 0),
            negative=Edge("92:81", 1),
        ),
        "92:90": _node(
            "ImageScaleBy",
            upscale_method="lanczos",
            scale_by=0.5,
            image=Edge("92:89", 0),
        ),
        "92:91": _node("GetImageSize", image=Edge("92:90", 0)),
        "92:51": _node(
            "LTXVEmptyLatentAudio",
            frames_number=Edge("92:62", 0),
            frame_rate=Edge("92:99", 0),
            batch_size=1,
            audio_vae=Edge("92:48", 0),
        ),
        "92:22": _node(
            "LTXVConditioning",
            frame_rate=Edge("92:102", 0),
            positive=Edge("92:3", 0),
            negative=Edge("92:4", 0),
        ),
        "92:43": _node(
            "EmptyLTXVLatentVideo",
            width=Edge("92:91", 0),
            height=Edge("92:91", 1),
            length=Edge("92:62", 0),
            batch_size=1,
        ),
        "92:56": _node(
            "LTXVConcatAVLatent",
            video_latent=Edge("92:43", 0),
            audio_latent=Edge("92:51", 0),
        ),
        "92:4": _node("CLIPTextEncode", text=NEGATIVE_PROMPT, clip=Edge("92:60", 0)),
        "92:89": _node("EmptyImage", width=512, height=512, batch_size=1, color=0),
        "92:62": _node("PrimitiveInt", value=Param("frame_count")),
        "92:41": _node(
            "SamplerCustomAdvanced",
            noise=Edge("92:11", 0),
            guider=Edge("92:47", 0),
            sampler=Edge("92:8", 0),
            sigmas=Edge("92:9", 0),
            latent_image=Edge("92:56", 0),
        ),
        "92:67": _node("RandomNoise", noise_seed=Param("refine_seed")),
        "92:11": _node("RandomNoise", noise_seed=Param("seed")),
        "92:80": _node("LTXVSeparateAVLatent", av_latent=Edge("92:41", 0)),
        "92:83": _node(
            "LTXVConcatAVLatent",
            video_latent=Edge("92:84", 0),
            audio_latent=Edge("92:80", 1),
        ),
        "92:84": _node(
            "LTXVLatentUpsampler",
            samples=Edge("92:81", 2),
            upscale_model=Edge("92:76", 0),
            vae=Edge("92:1", 2),
        ),
        "92:70": _node(
            "SamplerCustomAdvanced",
            noise=Edge("92:67", 0),
            guider=Edge("92:82", 0),
            sampler=Edge("92:66", 0),
            sigmas=Edge("92:73", 0),
            latent_image=Edge("92:83", 0),
        ),
        "92:3": _node("CLIPTextEncode", text=Param("prompt"), clip=Edge("92:60", 0)),
        "92:97": _node(
            "CreateVideo",
            fps=Edge("92:102", 0),
            images=Edge("92:98", 0),
            audio=Edge("92:96", 0),
        ),
        "92:48": _node("LTXVAudioVAELoader", ckpt_name=CHECKPOINT),
        "92:94": _node("LTXVSeparateAVLatent", av_latent=Edge("92:70", 1)),
        "92:98": _node(
            "VAEDecodeTiled",
            tile_size=512,
            overlap=64,
            temporal_size=4096,
            temporal_overlap=8,
            samples=Edge("92:94", 0),
            vae=Edge("92:1", 2),
        ),
        "92:96": _node(
            "LTXVAudioVAEDecode",
            samples=Edge("92:94", 1),
            audio_vae=Edge("92:48", 0),
        ),
        "92:47": _node(
            "CFGGuider",
            cfg=4,
            model=Edge("92:1", 0),
            positive=Edge("92:22", 0),
            negative=Edge("92:22", 1),
        ),
        "92:102": _node("PrimitiveFloat", value=Param("fps_float")),
        "92:99": _node("PrimitiveInt", value=Param("fps")),
        "92:68": _node(
            "LoraLoaderModelOnly",
            lora_name="ltx-2-19b-distilled-lora-384.safetensors",
            strength_model=1,
            model=Edge("92:1", 0),
        ),
        "92:8": _node("KSamplerSelect", sampler_name="euler_ancestral"),
        "92:66": _node("KSamplerSelect", sampler_name="euler_ancestral"),
        "92:1": _node("CheckpointLoaderSimple", ckpt_name=CHECKPOINT),
    }
)


def build_workflow(
    prompt: str,
    *,
    seed: int,
    frame_count: int = 121,
    fps: int = 24,
) -> WorkflowGraph:
    """Render the template into the JSON-ready graph ComfyUI expects.

    ``seed`` drives the base pass; the refine pass uses ``seed + 1`` so the
    two noise sources stay decorrelated. ``fps`` is written both as an int
    (audio latent length) and as a float (conditioning and video muxing).
    """
    values = {
        "prompt": prompt,
        "seed": seed,
        "refine_seed": seed + 1,
        "frame_count": frame_count,
        "fps": fps,
        "fps_float": float(fps),
    }
    graph: WorkflowGraph = {}
    for node_id, spec in TEMPLATE.items():
        graph[node_id] = {
            "inputs": {name: _render(value, values) for name, value in spec.inputs.items()},
            "class_type": spec.kind,
        }
    return graph


def _render(value: Any, values: Dict[str, Any]) -> Any:
    if isinstance(value, Edge):
        return [value.node_id, value.slot]
    if isinstance(value, Param):
        return values[value.name]
    return value


def iter_edges(template: Mapping[str, NodeSpec] = TEMPLATE) -> Iterator[Tuple[str, str, Edge]]:
    """Introspection helper: yield ``(node_id, input_name, edge)`` for every wired input."""
    for node_id, spec in template.items():
        for name, value in spec.inputs.items():
            if isinstance(value, Edge):
                yield node_id, name, value


def parameters(template: Mapping[str, NodeSpec] = TEMPLATE) -> Dict[str, Tuple[str, str]]:
    """Introspection helper: map each substitution name to the ``(node_id, input_name)`` it fills."""
    return {
        value.name: (node_id, name)
        for node_id, spec in template.items()
        for name, value in spec.inputs.items()
        if isinstance(value, Param)
    }


__all__ = ["Edge", "NodeSpec", "Param", "TEMPLATE", "build_workflow", "iter_edges", "parameters"]
