from contextlib import redirect_stderr, redirect_stdout
import io
import json
from pathlib import Path
import sys
import tempfile
import unittest
from unittest.mock import patch

SERVER_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(SERVER_DIR))

import ansi_cli


class ConvertTests(unittest.TestCase):
    def test_flat_runs(self):
        self.assertEqual(
            ansi_cli.convert("\x1b[3mhi"),
            [{"t": "hi", "style": "font-style:italic;"}],
        )

    def test_lines_with_class_builder(self):
        self.assertEqual(
            ansi_cli.convert("\x1b[1ma\nb", builder="class", lines=True),
            [[{"t": "a", "class": "ansi-bold"}], [{"t": "b", "class": "ansi-bold"}]],
        )


class MainTests(unittest.TestCase):
    def run_main(self, argv, stdin=b""):
        out = io.StringIO()
        err = io.StringIO()
        stdin = io.TextIOWrapper(io.BytesIO(stdin), encoding="utf-8")
        with patch("sys.stdin", stdin), redirect_stdout(out), redirect_stderr(err):
            code = ansi_cli.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_reads_stdin(self):
        code, out, _ = self.run_main([], stdin=b"\x1b[32mok")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [{"t": "ok", "style": "color:#008000;"}])

    def test_invalid_utf8_on_stdin_is_replaced(self):
        code, out, _ = self.run_main([], stdin=b"\xff\x1b[1mx")
        self.assertEqual(code, 0)
        self.assertEqual(
            json.loads(out),
            [{"t": "\ufffd"}, {"t": "x", "style": "font-weight:bold;"}],
        )

    def test_reads_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out.txt"
            path.write_text("a\x1b[1mb", encoding="utf-8")
            code, out, _ = self.run_main([str(path), "--lines"])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [[{"t": "a"}, {"t": "b", "style": "font-weight:bold;"}]])

    def test_missing_file(self):
        code, out, err = self.run_main(["/nonexistent/file.txt"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("ansi-segments:", err)

    def test_stylesheet(self):
        code, out, _ = self.run_main(["--stylesheet"])
        self.assertEqual(code, 0)
        self.assertIn(".ansi-underline", out)

    def test_serve_delegates_to_server(self):
        with patch("main.serve") as serve:
            code, _, _ = self.run_main(["--serve", "--port", "9000"])
        self.assertEqual(code, 0)
        serve.assert_called_once()
        self.assertEqual(serve.call_args.kwargs["port"], 9000)


if __name__ == "__main__":
    unittest.main()
