"""Tests for qualifier validation and defaults."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PackageSearch.core.errors import InvalidParameter
from PackageSearch.query.params import SearchDefaults, parse_query, validate_suggestion
from PackageSearch.query.weights import DEFAULT_WEIGHTS


class TestParseQueryDefaults(unittest.TestCase):
    def test_defaults_when_only_text(self) -> None:
        params = parse_query("  React  ")

        self.assertEqual(params.text, "react")
        self.assertIsNone(params.author)
        self.assertIsNone(params.maintainer)
        self.assertIsNone(params.scope)
        self.assertFalse(params.keywords)
        self.assertFalse(params.flags)
        self.assertTrue(params.boost_exact)
        self.assertEqual(params.score_effect, 15.3)
        self.assertEqual(params.weights, DEFAULT_WEIGHTS)
        self.assertEqual(params.from_, 0)
        self.assertEqual(params.size, 25)

    def test_mixed_query(self) -> None:
        params = parse_query("react keywords:gulpplugin,-legacy author:sindresorhus")

        self.assertEqual(params.text, "react")
        self.assertEqual(params.keywords.include, frozenset({"gulpplugin"}))
        self.assertEqual(params.keywords.exclude, frozenset({"legacy"}))
        self.assertEqual(params.author, "sindresorhus")

    def test_sets_are_deduplicated(self) -> None:
        params = parse_query("keywords:a,A,a not:insecure,insecure")

        self.assertEqual(params.keywords.include, frozenset({"a"}))
        self.assertEqual(params.flags.not_, frozenset({"insecure"}))

    def test_qualifiers_only_has_no_text(self) -> None:
        self.assertIsNone(parse_query("author:foo").text)

    def test_custom_defaults(self) -> None:
        params = parse_query("react", defaults=SearchDefaults(size=10, score_effect=2.0, boost_exact=False))

        self.assertEqual(params.size, 10)
        self.assertEqual(params.score_effect, 2.0)
        self.assertFalse(params.boost_exact)

    def test_text_length_limit(self) -> None:
        self.assertEqual(len(parse_query("a" * 250).text), 250)
        with self.assertRaises(InvalidParameter):
            parse_query("a" * 251)


class TestIdentityQualifiers(unittest.TestCase):
    def test_author_and_maintainer_are_lowered(self) -> None:
        params = parse_query("author:SindreSorhus maintainer:Foo")

        self.assertEqual(params.author, "sindresorhus")
        self.assertEqual(params.maintainer, "foo")

    def test_single_value_only(self) -> None:
        with self.assertRaises(InvalidParameter) as ctx:
            parse_query("author:a,b")
        self.assertEqual(ctx.exception.param, "author")

    def test_negation_not_supported(self) -> None:
        with self.assertRaises(InvalidParameter):
            parse_query("maintainer:-foo")

    def test_scope_strips_at_sign(self) -> None:
        self.assertEqual(parse_query("scope:@Babel").scope, "babel")
        with self.assertRaises(InvalidParameter):
            parse_query("scope:@")


class TestKeywords(unittest.TestCase):
    def test_include_require_exclude(self) -> None:
        keywords = parse_query("keywords:Gulp,a+b,-legacy").keywords

        self.assertEqual(keywords.include, frozenset({"gulp"}))
        self.assertEqual(keywords.require, frozenset({"a", "b"}))
        self.assertEqual(keywords.exclude, frozenset({"legacy"}))

    def test_collision_is_rejected(self) -> None:
        with self.assertRaises(InvalidParameter):
            parse_query("keywords:a,-a")

    def test_plus_inside_keyword_needs_quotes(self) -> None:
        with self.assertRaises(InvalidParameter) as ctx:
            parse_query("compiler keywords:c++")
        self.assertEqual(ctx.exception.param, "keywords")
        self.assertEqual(parse_query('compiler keywords:"C++"').keywords.include, frozenset({"c++"}))

    def test_value_count_limit(self) -> None:
        ten = ",".join(f"k{i}" for i in range(10))
        self.assertEqual(len(parse_query(f"keywords:{ten}").keywords.include), 10)
        with self.assertRaises(InvalidParameter):
            parse_query(f"keywords:{ten},k10")

    def test_value_length_limit(self) -> None:
        parse_query("keywords:" + "k" * 50)
        with self.assertRaises(InvalidParameter):
            parse_query("keywords:" + "k" * 51)


class TestFlags(unittest.TestCase):
    def test_is_flags(self) -> None:
        flags = parse_query("is:deprecated,insecure").flags

        self.assertEqual(flags.is_, frozenset({"deprecated", "insecure"}))
        self.assertEqual(flags.not_, frozenset())

    def test_not_flags(self) -> None:
        flags = parse_query("cross spawn not:deprecated,insecure").flags

        self.assertEqual(flags.is_, frozenset())
        self.assertEqual(flags.not_, frozenset({"deprecated", "insecure"}))

    def test_negated_flag_moves_to_opposite_set(self) -> None:
        flags = parse_query("is:-deprecated not:-unstable").flags

        self.assertEqual(flags.is_, frozenset({"unstable"}))
        self.assertEqual(flags.not_, frozenset({"deprecated"}))

    def test_unknown_flag(self) -> None:
        with self.assertRaises(InvalidParameter) as ctx:
            parse_query("is:abandoned")
        self.assertEqual(ctx.exception.param, "is")

    def test_same_flag_required_and_excluded(self) -> None:
        with self.assertRaises(InvalidParameter):
            parse_query("is:deprecated not:deprecated")


class TestScoringQualifiers(unittest.TestCase):
    def test_boost_exact(self) -> None:
        self.assertFalse(parse_query("react boost-exact:false").boost_exact)
        self.assertTrue(parse_query("react boost-exact:TRUE").boost_exact)
        with self.assertRaises(InvalidParameter):
            parse_query("react boost-exact:yes")

    def test_score_effect_bounds(self) -> None:
        self.assertEqual(parse_query("score-effect:0").score_effect, 0.0)
        self.assertEqual(parse_query("score-effect:25").score_effect, 25.0)
        for raw in ("score-effect:25.1", "score-effect:-1", "score-effect:abc", "score-effect:nan", "score-effect:inf"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidParameter):
                    parse_query(raw)

    def test_weight_bounds(self) -> None:
        params = parse_query("quality-weight:100 popularity-weight:0 maintenance-weight:1.5")

        self.assertEqual(params.weights.quality, 100.0)
        self.assertEqual(params.weights.popularity, 0.0)
        self.assertEqual(params.weights.maintenance, 1.5)
        with self.assertRaises(InvalidParameter):
            parse_query("quality-weight:101")

    def test_exponent_notation_weight(self) -> None:
        params = parse_query("x quality-weight:1e+1 popularity-weight:2E-1")

        self.assertEqual(params.weights.quality, 10.0)
        self.assertEqual(params.weights.popularity, 0.2)


class TestPagination(unittest.TestCase):
    def test_from_bounds(self) -> None:
        self.assertEqual(parse_query("react", from_=5000).from_, 5000)
        with self.assertRaises(InvalidParameter) as ctx:
            parse_query("react", from_=5001)
        self.assertEqual(ctx.exception.param, "from")
        with self.assertRaises(InvalidParameter):
            parse_query("react", from_=-1)

    def test_size_bounds(self) -> None:
        self.assertEqual(parse_query("react", size=250).size, 250)
        self.assertEqual(parse_query("react", size=1).size, 1)
        for size in (0, 251):
            with self.subTest(size=size):
                with self.assertRaises(InvalidParameter):
                    parse_query("react", size=size)

    def test_integer_coercion(self) -> None:
        self.assertEqual(parse_query("react", from_="10", size=" 5 ").size, 5)
        self.assertEqual(parse_query("react", size=2.0).size, 2)
        self.assertEqual(parse_query("react", size="").size, 25)
        for size in (True, 2.5, "ten", [1]):
            with self.subTest(size=size):
                with self.assertRaises(InvalidParameter):
                    parse_query("react", size=size)


class TestValidateSuggestion(unittest.TestCase):
    def test_normalizes_term_and_defaults_size(self) -> None:
        self.assertEqual(validate_suggestion("  React "), ("react", 25))

    def test_size_bounds(self) -> None:
        self.assertEqual(validate_suggestion("re", size=100), ("re", 100))
        with self.assertRaises(InvalidParameter):
            validate_suggestion("re", size=101)

    def test_term_is_required(self) -> None:
        for term in ("", "   ", None, "a" * 256):
            with self.subTest(term=term):
                with self.assertRaises(InvalidParameter):
                    validate_suggestion(term)


if __name__ == "__main__":
    unittest.main()
