"""Tests for the LTX-2 workflow template."""

from __future__ import annotations

import json
import unittest

from comfygen.workflow import TEMPLATE, Edge, build_workflow, iter_edges, parameters


def _leaves(graph: dict) -> dict:
    """Flatten a graph into ``{(node_id, input_name): value}``."""
    return {
        (node_id, name): value
        for node_id, node in graph.items()
        for name, value in node["inputs"].items()
    }


def _wired_from(graph: dict, node_id: str) -> set[tuple[str, str]]:
    return {
        (target, name)
        for target, node in graph.items()
        for name, value in node["inputs"].items()
        if value == [node_id, 0]
    }


class WorkflowTemplateTest(unittest.TestCase):
    """Shape of the graph does not depend on the inputs."""

    def test_shape_is_fixed(self) -> None:
        first = build_workflow("a cat", seed=42, frame_count=121, fps=24)
        second = build_workflow("a dog on a skateboard", seed=7, frame_count=241, fps=30)

        self.assertEqual(set(first), set(TEMPLATE))
        self.assertEqual(set(first), set(second))
        for node_id in first:
            self.assertEqual(first[node_id]["class_type"], second[node_id]["class_type"])
            self.assertEqual(set(first[node_id]["inputs"]), set(second[node_id]["inputs"]))

    def test_only_substitution_points_differ(self) -> None:
        first = _leaves(build_workflow("a cat", seed=42, frame_count=121, fps=24))
        second = _leaves(build_workflow("a dog", seed=7, frame_count=241, fps=30))

        changed = {key for key in first if first[key] != second[key]}
        self.assertEqual(
            changed,
            {
                ("92:3", "text"),
                ("92:11", "noise_seed"),
                ("92:67", "noise_seed"),
                ("92:62", "value"),
                ("92:99", "value"),
                ("92:102", "value"),
            },
        )
        self.assertEqual(set(parameters().values()), changed)

    def test_every_edge_resolves(self) -> None:
        edges = list(iter_edges())
        self.assertTrue(edges)
        for node_id, name, edge in edges:
            self.assertIsInstance(edge, Edge)
            self.assertIn(edge.node_id, TEMPLATE, f"{node_id}.{name} points at a missing node")
            self.assertGreaterEqual(edge.slot, 0)

    def test_edges_render_as_pairs(self) -> None:
        graph = build_workflow("a cat", seed=1)
        self.assertEqual(graph["75"]["inputs"]["video"], ["92:97", 0])
        self.assertEqual(graph["92:84"]["inputs"]["vae"], ["92:1", 2])

    def test_deterministic_with_fixed_seed(self) -> None:
        first = build_workflow("a cat", seed=42, frame_count=121, fps=24)
        second = build_workflow("a cat", seed=42, frame_count=121, fps=24)
        self.assertEqual(json.dumps(first), json.dumps(second))

    def test_template_is_not_mutated(self) -> None:
        graph = build_workflow("a cat", seed=42)
        graph["92:3"]["inputs"]["text"] = "tampered"
        graph["75"]["inputs"]["video"][0] = "nowhere"

        fresh = build_workflow("a cat", seed=42)
        self.assertEqual(fresh["92:3"]["inputs"]["text"], "a cat")
        self.assertEqual(fresh["75"]["inputs"]["video"], ["92:97", 0])

    def test_empty_prompt_is_accepted(self) -> None:
        graph = build_workflow("", seed=0)
        self.assertEqual(graph["92:3"]["inputs"]["text"], "")
        self.assertEqual(graph["92:67"]["inputs"]["noise_seed"], 1)


class WorkflowScenarioTest(unittest.TestCase):
    """The documented "a cat" example."""

    def setUp(self) -> None:
        self.graph = build_workflow("a cat", seed=42, frame_count=121, fps=24)

    def test_prompt_and_seeds(self) -> None:
        self.assertEqual(self.graph["92:3"]["class_type"], "CLIPTextEncode")
        self.assertEqual(self.graph["92:3"]["inputs"]["text"], "a cat")
        self.assertEqual(self.graph["92:11"]["inputs"]["noise_seed"], 42)
        self.assertEqual(self.graph["92:67"]["inputs"]["noise_seed"], 43)

    def test_frame_count_feeds_video_and_audio_latents(self) -> None:
        self.assertEqual(self.graph["92:62"]["inputs"]["value"], 121)
        self.assertEqual(
            _wired_from(self.graph, "92:62"),
            {("92:51", "frames_number"), ("92:43", "length")},
        )

    def test_fps_written_as_int_and_float(self) -> None:
        int_value = self.graph["92:99"]["inputs"]["value"]
        float_value = self.graph["92:102"]["inputs"]["value"]
        self.assertEqual(int_value, 24)
        self.assertIsInstance(int_value, int)
        self.assertEqual(float_value, 24.0)
        self.assertIsInstance(float_value, float)
        self.assertEqual(self.graph["92:102"]["class_type"], "PrimitiveFloat")
        self.assertEqual(self.graph["92:99"]["class_type"], "PrimitiveInt")

    def test_negative_prompt_untouched(self) -> None:
        self.assertIn("watermark", self.graph["92:4"]["inputs"]["text"])


if __name__ == "__main__":
    unittest.main()
