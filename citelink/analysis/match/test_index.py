import unittest

from citelink.analysis.match.index import author_year_key_variants, build_author_year_index
from citelink.analysis.match.types import ParsedReferenceRecord


def _record(author: str | None, year: str | None, **kw) -> ParsedReferenceRecord:
    return ParsedReferenceRecord(first_author_last_name=author, year=year, **kw)


class TestAuthorYearIndex(unittest.TestCase):
    def test_records_share_a_key_in_order(self) -> None:
        a = _record("Guo", "2014", journal_abbrev="Commun. Theor. Phys.", volume="61")
        b = _record("Guo", "2014", journal_abbrev="Eur. Phys. J. C", volume="74")
        index = build_author_year_index([a, b])

        self.assertEqual(index.get("guo 2014"), [a, b])
        self.assertEqual(len(index), 1)
        self.assertEqual(index.total_references, 2)

    def test_records_without_identifiers_are_skipped(self) -> None:
        bare = _record("Smith", "2010")
        with_doi = _record("Jones", "2010", doi="10.1/x")
        no_year = _record("Brown", None, journal_abbrev="PRL")
        index = build_author_year_index([bare, with_doi, no_year])

        self.assertEqual(index.get("smith 2010"), [])
        self.assertEqual(index.get("jones 2010"), [with_doi])
        self.assertEqual(len(index), 1)
        self.assertEqual(index.total_references, 3)

    def test_diacritic_free_alias(self) -> None:
        rec = _record("Lü", "2016", journal_abbrev="PRD")
        index = build_author_year_index([rec])
        self.assertEqual(index.get("lü 2016"), [rec])
        self.assertEqual(index.get("lu 2016"), [rec])

    def test_suffix_is_part_of_key(self) -> None:
        a = _record("Cho", "2011a", journal_abbrev="PRL", volume="106")
        b = _record("Cho", "2011b", journal_abbrev="PRC", volume="84")
        index = build_author_year_index([a, b])
        self.assertEqual(index.get("cho 2011a"), [a])
        self.assertEqual(index.get("cho 2011b"), [b])
        self.assertEqual(index.get("cho 2011"), [])

    def test_confidence_tracks_journal_share(self) -> None:
        with_journal = [_record(f"A{i}", "2000", journal_abbrev="PRD") for i in range(8)]
        doi_only = [_record(f"B{i}", "2000", doi=f"10.1/{i}") for i in range(2)]
        self.assertEqual(build_author_year_index(with_journal + doi_only).confidence, "high")

        half = [_record(f"C{i}", "2000", doi=f"10.2/{i}") for i in range(8)]
        self.assertEqual(build_author_year_index(with_journal + half).confidence, "medium")
        self.assertEqual(build_author_year_index(doi_only).confidence, "low")

    def test_returned_lists_are_copies(self) -> None:
        rec = _record("Guo", "2011", journal_abbrev="PLB")
        index = build_author_year_index([rec])
        index.get("guo 2011").clear()
        self.assertEqual(index.get("guo 2011"), [rec])


class TestKeyVariant(unittest.TestCase):
    def test_eszett_and_diacritics(self) -> None:
        self.assertEqual(
            author_year_key_variants("meißner", "2014"),
            ["meißner 2014", "meissner 2014"],
        )
        self.assertEqual(author_year_key_variants("lü", "2016"), ["lü 2016", "lu 2016"])

    def test_compound_surname_adds_first_word(self) -> None:
        self.assertEqual(
            author_year_key_variants("hiller blin", "2016"),
            ["hiller blin 2016", "hiller 2016"],
        )


if __name__ == "__main__":
    unittest.main()
