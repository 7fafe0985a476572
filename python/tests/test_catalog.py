import shutil
import tempfile
import unittest
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from StarFinder.catalog import CatalogLoadResult, read_rows, read_stars
from StarFinder.parsing import SkipCause
from StarFinder.stars import Star

from conftest import TYCHO2_ROW, build_line


@pytest.mark.unit
class TestReadStars(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.catalog_path = Path(self.test_dir) / "catalog.dat"

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def write_rows(self, rows, newline="\n"):
        with open(self.catalog_path, "w", encoding="utf-8", newline="") as f:
            f.write(newline.join(rows) + newline)

    def test_read_rows_strips_only_line_terminator(self):
        self.write_rows([" a|b ", "", "c|"])
        self.assertEqual(read_rows(self.catalog_path), [" a|b ", "", "c|"])

    def test_read_rows_crlf(self):
        self.write_rows(["a|b", "c"], newline="\r\n")
        self.assertEqual(read_rows(self.catalog_path), ["a|b", "c"])

    def test_loads_stars_in_file_order(self):
        self.write_rows(
            [
                build_line(ra="1.0", dec="-1.0", bt="5.5", vt="5.0"),
                TYCHO2_ROW,
                build_line(ra="300.0", dec="45.0", vt="3.0"),
            ]
        )
        result = read_stars(self.catalog_path)

        self.assertIsInstance(result, CatalogLoadResult)
        self.assertEqual(result.rows_read, 3)
        self.assertEqual(result.skipped_rows, 0)
        self.assertEqual(result.skipped, [])
        self.assertEqual([s.ra for s in result.stars], [1.0, 2.31754222, 300.0])
        self.assertAlmostEqual(result.stars[0].mag, 4.955)
        self.assertEqual(result.stars[2], Star(300.0, 45.0, 3.0))

    def test_skipped_rows_are_counted_and_capped(self):
        rows = [build_line(bt="6.0")]
        rows += [build_line(ra="bad", bt="6.0") for _ in range(8)]
        rows += [build_line(dec="", vt="6.0") for _ in range(4)]
        rows += [build_line() for _ in range(3)]
        rows += [build_line(vt="4.0")]
        self.write_rows(rows)

        with self.assertLogs("StarFinder.Catalog", level="WARNING") as logs:
            result = read_stars(self.catalog_path, max_reported_skips=10)

        self.assertEqual(len(result.stars), 2)
        self.assertEqual(result.skipped_rows, 15)
        self.assertEqual(len(result.skipped), 10)
        self.assertEqual([s.row for s in result.skipped], list(range(1, 11)))
        self.assertEqual(result.skipped[0].reason.cause, SkipCause.INVALID_RA)
        self.assertEqual(result.skipped[8].reason.cause, SkipCause.INVALID_DEC)

        messages = [record.getMessage() for record in logs.records]
        self.assertEqual(
            sum(m.startswith("Skipping row") for m in messages), 10
        )
        self.assertEqual(
            messages.count("Further skipped rows will not be printed..."), 1
        )
        self.assertIn("Skipped 15 of 17 rows", messages)

    def test_empty_lines_are_skipped(self):
        self.write_rows(["", build_line(bt="2.0"), ""])
        result = read_stars(self.catalog_path)
        self.assertEqual(result.stars, [Star(10.0, 20.0, 2.0)])
        self.assertEqual(result.skipped_rows, 2)
        self.assertEqual(result.skipped[0].reason.message, "Missing field: RA")

    def test_parallel_tokenizing_matches_sequential(self):
        rows = [
            build_line(ra=str(i), dec=str(i % 90), bt=str(i % 12)) for i in range(200)
        ]
        rows[37] = build_line(ra="bad", bt="1.0")
        self.write_rows(rows)
        sequential = read_stars(self.catalog_path, workers=1)

        with patch(
            "StarFinder.parsing.ProcessPoolExecutor", wraps=ProcessPoolExecutor
        ) as pool:
            parallel = read_stars(
                self.catalog_path, workers=2, chunk_size=7, progress=True
            )

        pool.assert_called_once_with(max_workers=2)
        self.assertEqual(parallel.stars, sequential.stars)
        self.assertEqual(len(parallel.stars), 199)
        self.assertEqual(parallel.skipped_rows, 1)
        self.assertEqual(parallel.skipped[0].row, 37)

    def test_small_catalog_tokenizes_inline(self):
        self.write_rows([build_line(bt="1.0") for _ in range(5)])
        with patch("StarFinder.parsing.ProcessPoolExecutor") as pool:
            result = read_stars(self.catalog_path, workers=4, chunk_size=10)
        pool.assert_not_called()
        self.assertEqual(len(result.stars), 5)

    def test_missing_file_is_fatal(self):
        with self.assertRaises(FileNotFoundError):
            read_stars(Path(self.test_dir) / "nope.dat")


if __name__ == "__main__":
    unittest.main()
