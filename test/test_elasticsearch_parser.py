"""Tests for projecting Elasticsearch hits into public results."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PackageSearch.core.errors import UpstreamUnavailable
from PackageSearch.sources.elasticsearch.parser import ProjectedResults, parse_hits, parse_total, project


def _hit(name: str, score: float, **extra) -> dict:
    hit = {
        "_score": score,
        "_source": {
            "package": {"name": name, "version": "1.0.0"},
            "score": {"final": 0.5, "detail": {"quality": 0.6, "popularity": 0.4, "maintenance": 0.5}},
        },
    }
    hit.update(extra)
    return hit


class TestProject(unittest.TestCase):
    def test_preserves_ranking_order(self) -> None:
        results = project([_hit("b", 9.0), _hit("a", 12.0), _hit("c", 1.0)])
        self.assertEqual([result.name for result in results], ["b", "a", "c"])

    def test_maps_fields(self) -> None:
        hit = _hit(
            "cross-spawn",
            100000.5,
            highlight={"package.name": ["<em>cross-spawn</em>", "other"]},
        )
        hit["_source"]["flags"] = {"deprecated": "Use something else"}

        result = project([hit])[0]

        self.assertEqual(result.package["name"], "cross-spawn")
        self.assertEqual(result.search_score, 100000.5)
        self.assertEqual(result.highlight, "<em>cross-spawn</em>")
        self.assertEqual(dict(result.flags), {"deprecated": "Use something else"})
        self.assertEqual(
            result.to_dict(),
            {
                "package": {"name": "cross-spawn", "version": "1.0.0"},
                "score": {"final": 0.5, "detail": {"quality": 0.6, "popularity": 0.4, "maintenance": 0.5}},
                "searchScore": 100000.5,
                "flags": {"deprecated": "Use something else"},
                "highlight": "<em>cross-spawn</em>",
            },
        )

    def test_missing_fields_are_tolerated(self) -> None:
        result = project([{"_score": None}])[0]

        self.assertEqual(result.name, "")
        self.assertEqual(result.search_score, 0.0)
        self.assertIsNone(result.highlight)
        self.assertNotIn("flags", result.to_dict())

    def test_results_are_restartable(self) -> None:
        results = project([_hit("a", 2.0), _hit("b", 1.0)])

        self.assertEqual(list(results), list(results))
        self.assertEqual(len(results), 2)

    def test_slice_stays_lazy(self) -> None:
        results = project([_hit("a", 3.0), _hit("b", 2.0), _hit("c", 1.0)])
        tail = results[1:]

        self.assertIsInstance(tail, ProjectedResults)
        self.assertEqual([result.name for result in tail], ["b", "c"])


class TestParseResponse(unittest.TestCase):
    def test_total_forms(self) -> None:
        self.assertEqual(parse_total({"hits": {"total": 7, "hits": []}}), 7)
        self.assertEqual(parse_total({"hits": {"total": {"value": 42, "relation": "eq"}, "hits": []}}), 42)

    def test_malformed_payloads(self) -> None:
        for payload in ({}, {"hits": []}, {"hits": {"total": "7"}}, {"hits": {"total": True}}):
            with self.subTest(payload=payload):
                with self.assertRaises(UpstreamUnavailable):
                    parse_total(payload)
        with self.assertRaises(UpstreamUnavailable):
            parse_hits({"hits": {"hits": "nope"}})

    def test_hits_skip_non_objects(self) -> None:
        self.assertEqual(parse_hits({"hits": {"hits": [_hit("a", 1.0), "junk"]}}), [_hit("a", 1.0)])


if __name__ == "__main__":
    unittest.main()
