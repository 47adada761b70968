from pathlib import Path
import sys
import unittest

SERVER_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(SERVER_DIR))

from ansi_parser import get_segments, get_sgr_segments, parse_lines, to_run
from ansi_style import ClassNameStyle, ClassStyle
from graphic_rendition import ColorName, Name, SgrEffect


class GetSegmentsTests(unittest.TestCase):
    def test_bold_then_reset(self):
        self.assertEqual(
            get_segments("a\x1b[1mb\x1b[0mc"),
            [
                (ClassStyle(), "a"),
                (ClassStyle(style="font-weight:bold;"), "b"),
                (ClassStyle(), "c"),
            ],
        )

    def test_plain_text_is_one_unstyled_segment(self):
        self.assertEqual(get_segments("no escapes"), [(ClassStyle(), "no escapes")])

    def test_empty_input(self):
        self.assertEqual(get_segments(""), [])

    def test_segments_are_not_coalesced(self):
        parsed = get_segments("a\x1b[1mb\x1b[1mc")
        self.assertEqual([text for _, text in parsed], ["a", "b", "c"])
        self.assertEqual(parsed[1][0], parsed[2][0])

    def test_state_accumulates(self):
        parsed = get_segments("\x1b[1m\x1b[31mx")
        self.assertEqual(parsed, [(ClassStyle(style="font-weight:bold;color:#800000;"), "x")])

    def test_malformed_sequence_is_dropped(self):
        self.assertEqual(
            get_segments("a\x1b[9999999999999mb"),
            [(ClassStyle(), "a"), (ClassStyle(), "b")],
        )

    def test_non_sgr_sequence_is_dropped(self):
        self.assertEqual(get_segments("\x1b[2Jhi"), [(ClassStyle(), "hi")])

    def test_class_builder(self):
        parsed = get_segments("\x1b[1;32mok", builder=ClassNameStyle)
        self.assertEqual(parsed, [(ClassStyle(class_name="ansi-bold ansi-fg-green"), "ok")])


class GetSgrSegmentsTests(unittest.TestCase):
    def test_snapshots_are_independent(self):
        parsed = get_sgr_segments("a\x1b[32mb\x1b[1mc")
        self.assertEqual(parsed[0], (SgrEffect(), "a"))
        self.assertEqual(parsed[1], (SgrEffect(fg=Name(ColorName.GREEN)), "b"))
        self.assertEqual(parsed[2], (SgrEffect(bold=True, fg=Name(ColorName.GREEN)), "c"))


class AnsiParserTests(unittest.TestCase):
    def test_basic_color_then_reset(self):
        parsed = parse_lines("\x1b[31mred\x1b[0m plain")
        self.assertEqual(parsed[0][0]["t"], "red")
        self.assertEqual(parsed[0][0]["style"], "color:#800000;")
        self.assertEqual(parsed[0][1]["t"], " plain")
        self.assertNotIn("style", parsed[0][1])

    def test_state_carries_across_lines(self):
        parsed = parse_lines("\x1b[1mone\ntwo\x1b[0m\nthree")
        self.assertEqual(parsed[1], [{"t": "two", "style": "font-weight:bold;"}])
        self.assertEqual(parsed[2], [{"t": "three"}])

    def test_empty_lines_have_no_runs(self):
        self.assertEqual(parse_lines("a\n\nb"), [[{"t": "a"}], [], [{"t": "b"}]])

    def test_newline_ends_unterminated_sequence(self):
        parsed = parse_lines("\x1b[31\nnext")
        self.assertEqual(parsed, [[], [{"t": "next"}]])

    def test_to_run_includes_class(self):
        run = to_run(ClassStyle(class_name="ansi-bold", style="color:#010203;"), "x")
        self.assertEqual(run, {"t": "x", "class": "ansi-bold", "style": "color:#010203;"})


if __name__ == "__main__":
    unittest.main()
