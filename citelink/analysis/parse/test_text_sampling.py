import unittest

from citelink.analysis.parse.text_sampling import build_text_candidates, parse_with_progressive_sampling


def _pages(count: int) -> str:
    return "\f".join(f"page {i}" for i in range(count))


class TestTextSampleBuilder(unittest.TestCase):
    def test_page_windows_grow_and_end_with_full_text(self) -> None:
        text = _pages(40)
        candidates = build_text_candidates(text, page_steps=[8, 16, 32, 64])

        self.assertEqual([c.kind for c in candidates], ["tailPages", "tailPages", "tailPages", "full"])
        self.assertEqual([c.value for c in candidates[:3]], [8, 16, 32])
        self.assertEqual(candidates[0].text.split("\f"), [f"page {i}" for i in range(32, 40)])
        self.assertEqual(candidates[-1].start_index, 0)
        self.assertEqual(candidates[-1].text, text)

    def test_start_offsets_are_unique_and_increasingly_early(self) -> None:
        candidates = build_text_candidates(_pages(10), page_steps=[2, 2, 4, 8, 16])
        starts = [c.start_index for c in candidates]
        self.assertEqual(len(starts), len(set(starts)))
        self.assertEqual(starts, sorted(starts, reverse=True))
        self.assertEqual(starts[-1], 0)

    def test_last_natural_candidate_is_retagged_full(self) -> None:
        candidates = build_text_candidates(_pages(4), page_steps=[2, 8])
        self.assertEqual([c.kind for c in candidates], ["tailPages", "full"])
        self.assertEqual(candidates[-1].value, len(_pages(4)))

    def test_char_windows_without_page_breaks(self) -> None:
        text = "x" * 1000
        candidates = build_text_candidates(text, char_steps=[100, 400, 5000], max_tail_chars=3000)

        self.assertEqual([c.kind for c in candidates], ["tailChars", "tailChars", "full"])
        self.assertEqual(candidates[0].start_index, 900)
        self.assertEqual(candidates[1].start_index, 600)
        self.assertEqual(candidates[-1].start_index, 0)

    def test_max_tail_chars_caps_steps(self) -> None:
        text = "y" * 1000
        candidates = build_text_candidates(text, char_steps=[100, 400, 800], max_tail_chars=200)
        self.assertEqual([c.start_index for c in candidates], [900, 800, 0])
        self.assertEqual(candidates[-1].kind, "full")

    def test_empty_and_none_text(self) -> None:
        for text in ("", None):
            candidates = build_text_candidates(text)
            self.assertEqual(len(candidates), 1)
            self.assertEqual(candidates[0].kind, "full")
            self.assertEqual(candidates[0].start_index, 0)
            self.assertEqual(candidates[0].text, "")

    def test_empty_steps_fall_back_to_defaults(self) -> None:
        candidates = build_text_candidates(_pages(200), page_steps=[])
        self.assertEqual([c.value for c in candidates[:6]], [8, 16, 32, 64, 96, 120])
        self.assertEqual(candidates[-1].kind, "full")


class TestProgressiveSampling(unittest.TestCase):
    def test_stops_at_first_sufficient_window(self) -> None:
        text = _pages(100)
        seen: list[int] = []

        def parse(window: str) -> list[str]:
            pages = window.split("\f")
            seen.append(len(pages))
            return pages

        candidate, result = parse_with_progressive_sampling(text, parse, min_results=20, page_steps=[8, 16, 32])
        self.assertEqual(seen, [8, 16, 32])
        self.assertEqual(candidate.value, 32)
        self.assertEqual(len(result), 32)

    def test_returns_full_attempt_when_never_sufficient(self) -> None:
        candidate, result = parse_with_progressive_sampling(
            _pages(10), lambda window: [], min_results=1, page_steps=[2, 4]
        )
        self.assertEqual(candidate.kind, "full")
        self.assertEqual(list(result), [])

    def test_each_window_is_parsed_once(self) -> None:
        seen: list[str] = []

        def parse(window: str) -> list[str]:
            seen.append(window)
            return [window] if window.startswith("page 0") else []

        text = _pages(10)
        candidate, result = parse_with_progressive_sampling(text, parse, min_results=1, page_steps=[2, 4])
        self.assertEqual(len(seen), 3)
        self.assertEqual(candidate.kind, "full")
        self.assertEqual(list(result), [text])

    def test_parser_errors_propagate(self) -> None:
        def parse(window: str) -> list[str]:
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            parse_with_progressive_sampling("abc", parse, min_results=1)


if __name__ == "__main__":
    unittest.main()
