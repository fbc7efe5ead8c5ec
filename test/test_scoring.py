"""Tests for scoring expressions and text-match clauses."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PackageSearch.core.query import NormalizedWeights
from PackageSearch.query.params import parse_query
from PackageSearch.query.scoring import (
    EXACT_MATCH_CONSTANT,
    ExactMatchOverride,
    QualitySignals,
    WeightedPower,
    build_match_clauses,
    build_scoring,
)
from PackageSearch.query.weights import normalize

_WEIGHTS = NormalizedWeights(quality=0.25, popularity=0.5, maintenance=0.25)


class TestWeightedPower(unittest.TestCase):
    def test_blend_and_evaluate(self) -> None:
        power = WeightedPower(weights=_WEIGHTS, effect=2.0)
        signals = QualitySignals(quality=0.8, popularity=0.4, maintenance=1.0)

        self.assertAlmostEqual(power.blend(signals), 0.2 + 0.2 + 0.25)
        self.assertAlmostEqual(power.evaluate(signals, relevance=10.0), 10.0 * 0.65**2)

    def test_zero_effect_ignores_quality(self) -> None:
        power = WeightedPower(weights=_WEIGHTS, effect=0.0)
        for signals in (QualitySignals(0.0, 0.0, 0.0), QualitySignals(0.3, 0.9, 0.1), QualitySignals(1.0, 1.0, 1.0)):
            with self.subTest(signals=signals):
                self.assertEqual(power.power(signals), 1.0)
                self.assertEqual(power.evaluate(signals, relevance=7.5), 7.5)

    def test_higher_effect_separates_quality_more(self) -> None:
        good = QualitySignals(0.9, 0.9, 0.9)
        poor = QualitySignals(0.3, 0.3, 0.3)
        mild = WeightedPower(weights=_WEIGHTS, effect=1.0)
        strong = WeightedPower(weights=_WEIGHTS, effect=15.3)

        self.assertGreater(
            strong.evaluate(good, 1.0) / strong.evaluate(poor, 1.0),
            mild.evaluate(good, 1.0) / mild.evaluate(poor, 1.0),
        )


class TestExactMatchOverride(unittest.TestCase):
    def test_exact_name_beats_any_organic_score(self) -> None:
        expression = ExactMatchOverride(
            text="cross-spawn",
            constant=EXACT_MATCH_CONSTANT,
            fallback=WeightedPower(weights=_WEIGHTS, effect=15.3),
        )
        weak = QualitySignals(0.01, 0.01, 0.01)
        strong = QualitySignals(1.0, 1.0, 1.0)

        exact = expression.evaluate(weak, relevance=0.1, raw_name="cross-spawn")
        organic = expression.evaluate(strong, relevance=500.0, raw_name="cross-spawn-async")

        self.assertAlmostEqual(exact, EXACT_MATCH_CONSTANT + 0.01)
        self.assertGreater(exact, organic)
        self.assertIs(expression.weights, _WEIGHTS)

    def test_exact_text_is_trimmed_and_lowered(self) -> None:
        params = parse_query("  Cross-Spawn  ")
        expression = build_scoring(params, normalize(params.weights))

        self.assertIsInstance(expression, ExactMatchOverride)
        self.assertTrue(expression.matches("cross-spawn"))
        self.assertFalse(expression.matches("cross-spawn2"))


class TestBuildScoring(unittest.TestCase):
    def test_boost_exact_disabled(self) -> None:
        params = parse_query("react boost-exact:false score-effect:3")
        expression = build_scoring(params, _WEIGHTS)

        self.assertEqual(expression, WeightedPower(weights=_WEIGHTS, effect=3.0))

    def test_no_text_means_no_exact_match(self) -> None:
        self.assertIsInstance(build_scoring(parse_query("author:foo"), _WEIGHTS), WeightedPower)

    def test_custom_exact_constant(self) -> None:
        expression = build_scoring(parse_query("react"), _WEIGHTS, exact_constant=42.0)
        self.assertEqual(expression.constant, 42.0)


class TestBuildMatchClauses(unittest.TestCase):
    def test_no_text_no_clauses(self) -> None:
        self.assertEqual(build_match_clauses(None), ())
        self.assertEqual(build_match_clauses(""), ())

    def test_three_clauses_in_order(self) -> None:
        clauses = build_match_clauses("cross spawn")

        self.assertEqual([clause.match_type for clause in clauses], ["phrase", "cross_fields", "cross_fields"])
        self.assertEqual([clause.boost for clause in clauses], [3.0, 3.0, 1.0])
        self.assertEqual(clauses[0].slop, 3)
        self.assertIsNone(clauses[1].slop)
        self.assertEqual(
            dict(clauses[0].fields),
            {
                "package.name.identifier_edge_ngram": 4.0,
                "package.description.identifier_edge_ngram": 1.0,
                "package.keywords.identifier_edge_ngram": 2.0,
            },
        )
        self.assertTrue(all(clause.query == "cross spawn" for clause in clauses))

    def test_custom_boosts(self) -> None:
        clauses = build_match_clauses("x", boosts={"package.name": 10.0})
        self.assertEqual(dict(clauses[1].fields), {"package.name.identifier_english_docs": 10.0})


if __name__ == "__main__":
    unittest.main()
