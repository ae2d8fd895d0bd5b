import unittest

from citelink.analysis.match import (
    AuthorYearIndex,
    CanonicalEntry,
    ParsedReferenceRecord,
    PublicationInfo,
    match_author_year,
    match_citation,
    resolve_citations,
)


def _entry(index: int, authors: list[str], year: str, journal=None, volume=None, page=None, **kw) -> CanonicalEntry:
    pub = None
    if journal or volume or page:
        pub = PublicationInfo(journal_title=journal, journal_volume=volume, page_start=page)
    return CanonicalEntry(index=index, id=f"e{index}", authors=tuple(authors), year=year, publication_info=pub, **kw)


class TestIndexedMatch(unittest.TestCase):
    def setUp(self) -> None:
        self.entries = [
            _entry(0, ["Guo"], "2011", "PLB", "700", "9"),
            _entry(1, ["Guo"], "2011", "PLB", "701", "22"),
        ]

    def test_single_record_resolves_exactly(self) -> None:
        record = ParsedReferenceRecord(journal_abbrev="PLB", volume="701", page_start="22")
        index = AuthorYearIndex(by_key={"guo 2011": [record]}, total_references=1, confidence="high")

        results = match_author_year(["Guo (2011)"], self.entries, author_year_index=index)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].entry_index, 1)
        self.assertEqual(results[0].confidence, "high")
        self.assertEqual(results[0].method, "exact")
        self.assertFalse(results[0].is_ambiguous)

    def test_tied_records_are_reported_as_ambiguous(self) -> None:
        records = [
            ParsedReferenceRecord(journal_abbrev="PLB", volume="700", page_start="9"),
            ParsedReferenceRecord(journal_abbrev="PLB", volume="701", page_start="22"),
        ]
        index = AuthorYearIndex(by_key={"guo 2011": records}, total_references=2)

        (result,) = match_author_year(["Guo 2011", "Guo", "2011"], self.entries, author_year_index=index)

        self.assertTrue(result.is_ambiguous)
        self.assertEqual(result.confidence, "medium")
        self.assertEqual(result.entry_index, 0)
        self.assertEqual([c.entry_index for c in result.ambiguous_candidates], [0, 1])
        self.assertEqual(result.ambiguous_candidates[0].display_text, "PLB 700, 9 (1 author)")
        self.assertEqual(result.ambiguous_candidates[1].volume, "701")

    def test_printed_initials_break_the_tie(self) -> None:
        entries = [
            _entry(0, ["Li", "Wang"], "2013", "PRD", "88", "1", author_text="G. Li, Q. Wang"),
            _entry(1, ["Li", "Zhao"], "2013", "PLB", "720", "5", author_text="M.-T. Li, Z. Zhao"),
        ]
        records = [
            ParsedReferenceRecord(journal_abbrev="PRD", volume="88", page_start="1"),
            ParsedReferenceRecord(journal_abbrev="PLB", volume="720", page_start="5"),
        ]
        index = AuthorYearIndex(by_key={"li 2013": records}, total_references=2)

        (result,) = match_author_year(["Li et al. 2013", "Li", "M.-T. Li", "2013"], entries, author_year_index=index)

        self.assertEqual(result.entry_index, 1)
        self.assertFalse(result.is_ambiguous)
        self.assertEqual(result.method, "exact")

    def test_suffixed_year_retries_base_key(self) -> None:
        entries = [
            _entry(0, ["Cho", "Song", "Lee"], "2011", "PRL", "106", "212001"),
            _entry(1, ["Cho", "Song", "Lee"], "2011", "PRC", "84", "064910"),
        ]
        record = ParsedReferenceRecord(journal_abbrev="PRC", volume="84", page_start="064910")
        index = AuthorYearIndex(by_key={"cho 2011": [record]}, total_references=1)

        (result,) = match_author_year(["Cho et al. 2011b", "Cho", "2011b"], entries, author_year_index=index)

        self.assertEqual(result.entry_index, 1)
        self.assertEqual(result.method, "exact")

    def test_index_record_steers_fuzzy_fallback(self) -> None:
        entries = [
            _entry(0, ["Cho", "Song", "Lee"], "2011", "PRL", "106"),
            _entry(1, ["Cho", "Song", "Lee"], "2011", "PRC", "84"),
        ]
        # No page on the entries, so the record cannot resolve precisely.
        record = ParsedReferenceRecord(volume="84", page_start="064910")
        index = AuthorYearIndex(by_key={"cho 2011b": [record]}, total_references=1)

        results = match_author_year(["Cho et al. 2011b", "Cho", "2011b"], entries, author_year_index=index)

        self.assertEqual([r.entry_index for r in results], [1])
        self.assertEqual(results[0].method, "fuzzy")
        self.assertEqual(results[0].confidence, "high")


class TestFuzzyOnlyMatch(unittest.TestCase):
    def test_empty_labels(self) -> None:
        entries = [_entry(0, ["Guo"], "2011")]
        self.assertEqual(match_author_year([], entries), [])
        self.assertEqual(match_author_year(["", "[3]"], entries), [])

    def test_results_are_capped_and_ordered(self) -> None:
        entries = [_entry(i, ["Cho", "Song", "Lee"], "2011") for i in range(4)]
        results = match_author_year(["Cho et al. 2011", "Cho", "2011"], entries)

        self.assertEqual([r.entry_index for r in results], [0, 1, 2])
        self.assertTrue(all(r.method == "fuzzy" for r in results))
        self.assertEqual(results[0].label, "cho 2011")

    def test_only_close_scores_are_kept(self) -> None:
        entries = [
            _entry(0, ["Cho", "Song", "Lee"], "2011"),
            _entry(1, ["Cho", "Song"], "2011"),
            _entry(2, ["Cho", "Song", "Lee"], "2011"),
        ]
        results = match_author_year(["Cho et al. 2011", "Cho", "2011"], entries)
        self.assertEqual([r.entry_index for r in results], [0, 2])

    def test_year_matched_entries_win_over_neighbours(self) -> None:
        entries = [_entry(0, ["Cho", "Song", "Lee"], "2012"), _entry(1, ["Cho", "Song"], "2011")]
        results = match_author_year(["Cho et al. 2011", "Cho", "2011"], entries)
        self.assertEqual([r.entry_index for r in results], [1])

    def test_suffixed_year_without_hint_gives_one_result(self) -> None:
        entries = [_entry(i, ["Cho", "Song", "Lee"], "2011") for i in range(3)]
        results = match_author_year(["Cho et al. 2011a", "Cho", "2011a"], entries)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].entry_index, 0)
        self.assertEqual(results[0].label, "cho 2011a")

    def test_repeated_calls_agree(self) -> None:
        entries = [_entry(i, ["Guo", "Hanhart"], "2015") for i in range(3)]
        labels = ["Guo and Hanhart 2015", "Guo", "Hanhart", "2015"]
        self.assertEqual(match_author_year(labels, entries), match_author_year(labels, entries))

    def test_generator_labels(self) -> None:
        entries = [_entry(0, ["Guo"], "2011")]
        results = match_author_year((label for label in ["Guo 2011", "Guo", "2011"]), entries)
        self.assertEqual([r.entry_index for r in results], [0])


class TestCitationEntryPoint(unittest.TestCase):
    def setUp(self) -> None:
        self.entries = [
            _entry(0, ["Guo"], "2011", "PLB", "700", "9"),
            _entry(1, ["Guo"], "2011", "PLB", "701", "22"),
        ]

    def test_match_citation_splits_raw_text(self) -> None:
        record = ParsedReferenceRecord(journal_abbrev="PLB", volume="701", page_start="22")
        index = AuthorYearIndex(by_key={"guo 2011": [record]}, total_references=1)

        (result,) = match_citation("(Guo et al., 2011)", self.entries, author_year_index=index)

        self.assertEqual(result.entry_index, 1)
        self.assertEqual(result.method, "exact")

    def test_resolve_citations_mixes_raw_and_split_labels(self) -> None:
        out = resolve_citations(
            {
                "c1": "(Guo, 2011)",
                "c2": ["Nobody 1900"],
                "c3": ["Guo 2011", "Guo", "2011"],
            },
            self.entries,
        )

        self.assertEqual(set(out), {"c1", "c2", "c3"})
        self.assertEqual([r.entry_index for r in out["c1"]], [0, 1])
        self.assertEqual(out["c2"], [])
        self.assertEqual(out["c1"], out["c3"])


if __name__ == "__main__":
    unittest.main()
