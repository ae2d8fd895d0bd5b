import unittest

from citelink.analysis.parse.labels import (
    has_other_initials,
    initials_match,
    parse_author_labels,
    preprocess_labels,
    split_citation_label,
)


class TestParseAuthorLabels(unittest.TestCase):
    def test_et_al_with_parenthesized_year(self) -> None:
        parsed = parse_author_labels(preprocess_labels(["Guo et al. (2015)", "Guo", "2015"]))
        self.assertEqual(parsed.authors, ("guo",))
        self.assertEqual(parsed.year, "2015")
        self.assertTrue(parsed.is_et_al)
        self.assertFalse(parsed.has_year_suffix)

    def test_two_authors_are_split(self) -> None:
        parsed = parse_author_labels(["Braaten and Kusunoki 2005", "Braaten", "Kusunoki", "2005"])
        self.assertEqual(parsed.authors, ("braaten", "kusunoki"))
        self.assertEqual(parsed.year, "2005")
        self.assertFalse(parsed.is_et_al)

    def test_compound_surname_is_kept_whole(self) -> None:
        parsed = parse_author_labels(["Hiller Blin et al. 2016", "Hiller Blin", "2016"])
        self.assertEqual(parsed.authors, ("hiller blin",))
        self.assertTrue(parsed.is_et_al)

    def test_initials_are_recorded_per_author(self) -> None:
        parsed = parse_author_labels(["Li et al. 2013", "Li", "M.-T. Li", "2013"])
        self.assertEqual(parsed.authors, ("li",))
        self.assertEqual(parsed.author_initials, {"li": "M.-T."})

    def test_year_suffix(self) -> None:
        parsed = parse_author_labels(["Cho et al. 2011b", "Cho", "2011b"])
        self.assertEqual(parsed.year, "2011b")
        self.assertEqual(parsed.year_base, "2011")
        self.assertTrue(parsed.has_year_suffix)

    def test_comma_separated_authors(self) -> None:
        parsed = parse_author_labels(["Sjostrand, Mrenna, Skands"])
        self.assertEqual(parsed.authors, ("sjostrand", "mrenna", "skands"))
        self.assertIsNone(parsed.year)

    def test_accented_surname(self) -> None:
        parsed = parse_author_labels(["Meißner 2014"])
        self.assertEqual(parsed.authors, ("meißner",))

    def test_nothing_recognized(self) -> None:
        parsed = parse_author_labels(["", "[12]", "p. 4"])
        self.assertTrue(parsed.is_empty)


class TestSplitCitationLabel(unittest.TestCase):
    def test_parenthesized_et_al(self) -> None:
        self.assertEqual(split_citation_label("(Guo et al., 2015)"), ["Guo et al. 2015", "Guo", "2015"])

    def test_narrative_two_authors(self) -> None:
        self.assertEqual(
            split_citation_label("Weinstein and Isgur (1982)"),
            ["Weinstein and Isgur 1982", "Weinstein", "Isgur", "1982", "Weinstein, Isgur"],
        )

    def test_three_authors_become_et_al(self) -> None:
        labels = split_citation_label("Cho, Song, and Lee (2015)")
        self.assertEqual(labels[0], "Cho et al. 2015")
        self.assertIn("Cho, Song, Lee", labels)

    def test_initials_are_kept(self) -> None:
        labels = split_citation_label("M.-T. Li et al., 2013")
        self.assertEqual(labels, ["Li et al. 2013", "Li", "M.-T. Li", "2013"])

    def test_first_of_group(self) -> None:
        self.assertEqual(split_citation_label("(Cho et al., 2011a; Cho, 2015)"), ["Cho et al. 2011a", "Cho", "2011a"])

    def test_empty(self) -> None:
        self.assertEqual(split_citation_label(""), [])
        self.assertEqual(split_citation_label(None), [])

    def test_round_trip_through_parser(self) -> None:
        parsed = parse_author_labels(split_citation_label("(Braaten & Kusunoki, 2005)"))
        self.assertEqual(parsed.authors, ("braaten", "kusunoki"))
        self.assertEqual(parsed.year, "2005")


class TestInitialsComparator(unittest.TestCase):
    def test_initials_before_surname(self) -> None:
        self.assertTrue(initials_match("M.-T. Li, G. Wang", "li", "M.-T."))
        self.assertTrue(initials_match("M.-T.Li and others", "li", "M.-T."))

    def test_surname_before_initials(self) -> None:
        self.assertTrue(initials_match("Li, M.-T.; Wang, G.", "li", "M.-T."))

    def test_different_initials_do_not_match(self) -> None:
        self.assertFalse(initials_match("G. Li, M. Wang", "li", "M.-T."))

    def test_other_initials_detected(self) -> None:
        self.assertTrue(has_other_initials("G. Li, M. Wang", "li"))
        self.assertTrue(has_other_initials("Li, G.; Wang, M.", "li"))

    def test_surname_without_initials(self) -> None:
        self.assertFalse(has_other_initials("Gang Li and Ming Wang", "li"))
        self.assertFalse(has_other_initials(None, "li"))


if __name__ == "__main__":
    unittest.main()
