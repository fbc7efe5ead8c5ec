"""Tests for query string tokenization."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PackageSearch.core.errors import InvalidParameter
from PackageSearch.core.query import QualifierValue
from PackageSearch.query.tokenizer import UNKNOWN_REJECT, discard_qualifiers, tokenize


class TestTokenize(unittest.TestCase):
    def test_splits_text_and_qualifiers(self) -> None:
        tokenized = tokenize("react keywords:gulpplugin,-legacy author:sindresorhus")

        self.assertEqual(tokenized.text, "react")
        self.assertEqual(set(tokenized.qualifiers), {"keywords", "author"})
        self.assertEqual(
            tuple(tokenized.qualifiers["keywords"].values),
            (QualifierValue("gulpplugin"), QualifierValue("legacy", negated=True)),
        )
        self.assertEqual(tokenized.qualifiers["author"].values[0].value, "sindresorhus")

    def test_collapses_whitespace_in_free_text(self) -> None:
        self.assertEqual(tokenize("  cross \t  spawn  ").text, "cross spawn")

    def test_empty_query(self) -> None:
        tokenized = tokenize("")
        self.assertEqual(tokenized.text, "")
        self.assertEqual(dict(tokenized.qualifiers), {})

    def test_quoted_runs_stay_together(self) -> None:
        tokenized = tokenize('"cross spawn" author:"john doe"')

        self.assertEqual(tokenized.text, "cross spawn")
        self.assertEqual(tokenized.qualifiers["author"].values[0].value, "john doe")

    def test_keys_are_case_folded_but_values_are_not(self) -> None:
        tokenized = tokenize("Author:SindreSorhus")

        self.assertIn("author", tokenized.qualifiers)
        self.assertEqual(tokenized.qualifiers["author"].values[0].value, "SindreSorhus")

    def test_plus_joins_required_values(self) -> None:
        values = tokenize("keywords:a+b,c").qualifiers["keywords"].values

        self.assertEqual(
            tuple(values),
            (
                QualifierValue("a", required=True),
                QualifierValue("b", required=True),
                QualifierValue("c"),
            ),
        )

    def test_empty_member_of_plus_group_is_rejected(self) -> None:
        for raw in ("compiler keywords:c++", "keywords:+a", "keywords:a+,b", "keywords:a+-"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidParameter) as ctx:
                    tokenize(raw)
                self.assertEqual(ctx.exception.param, "keywords")

    def test_quoted_value_keeps_plus(self) -> None:
        values = tokenize('keywords:"c++",-"a+b"').qualifiers["keywords"].values

        self.assertEqual(tuple(values), (QualifierValue("c++"), QualifierValue("a+b", negated=True)))

    def test_numeric_and_boolean_keys_do_not_split_on_plus(self) -> None:
        tokenized = tokenize("x quality-weight:1e+1 score-effect:+2")

        self.assertEqual(tuple(tokenized.qualifiers["quality-weight"].values), (QualifierValue("1e+1"),))
        self.assertEqual(tuple(tokenized.qualifiers["score-effect"].values), (QualifierValue("+2"),))

    def test_repeated_keys_merge_in_order(self) -> None:
        values = tokenize("keywords:a foo keywords:b").qualifiers["keywords"].values

        self.assertEqual([value.value for value in values], ["a", "b"])

    def test_recognized_key_without_value_is_rejected(self) -> None:
        for raw in ("author:", "keywords:,", "is:-"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidParameter):
                    tokenize(raw)

    def test_unknown_qualifier_folds_into_text(self) -> None:
        tokenized = tokenize("cross spawn exclude:deprecated")

        self.assertEqual(tokenized.text, "cross spawn exclude:deprecated")
        self.assertEqual(dict(tokenized.qualifiers), {})

    def test_unknown_qualifier_rejected_under_reject_policy(self) -> None:
        with self.assertRaises(InvalidParameter) as ctx:
            tokenize("cross spawn exclude:deprecated", unknown=UNKNOWN_REJECT)
        self.assertEqual(ctx.exception.param, "exclude")
        self.assertEqual(ctx.exception.code, "INVALID_PARAMETER")
        self.assertEqual(ctx.exception.status, 400)

    def test_unsupported_policy(self) -> None:
        with self.assertRaises(ValueError):
            tokenize("react", unknown="ignore")


class TestDiscardQualifiers(unittest.TestCase):
    def test_keeps_only_free_text(self) -> None:
        self.assertEqual(
            discard_qualifiers("cross author:foo spawn is:deprecated bar:baz"),
            "cross spawn bar:baz",
        )

    def test_matches_tokenizer_text(self) -> None:
        raw = 'react  "hot loader" keywords:a+b not:insecure'
        self.assertEqual(discard_qualifiers(raw), tokenize(raw).text)

    def test_malformed_qualifiers_are_dropped_silently(self) -> None:
        self.assertEqual(discard_qualifiers("react author:"), "react")


if __name__ == "__main__":
    unittest.main()
