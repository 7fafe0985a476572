#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Tycho-2 catalog loader

Reads the whole catalog into memory, tokenizes every line, decodes the
records and keeps the stars.  Rows that don't decode are counted; only
the first few are reported individually.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from tqdm import tqdm

from StarFinder.parsing import (
    TOKENIZE_CHUNK_SIZE,
    SkippedRecord,
    SkipReason,
    decode_star,
    tokenize_rows,
)
from StarFinder.stars import Star
from StarFinder.utils import Timer

logger = logging.getLogger("StarFinder.Catalog")

MAX_REPORTED_SKIPS = 10


@dataclass
class CatalogLoadResult:
    """Stars decoded from a catalog plus the skip bookkeeping"""

    stars: List[Star] = field(default_factory=list)
    rows_read: int = 0
    skipped_rows: int = 0
    # Only the first max_reported_skips diagnostics are kept
    skipped: List[SkippedRecord] = field(default_factory=list)


def read_rows(path: Union[str, Path]) -> List[str]:
    """
    All lines of the catalog, line terminators removed

    Raises OSError (FileNotFoundError, PermissionError...) if the
    file can't be opened.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as catalog_file:
        return [line.rstrip("\n") for line in catalog_file]


def read_stars(
    path: Union[str, Path],
    workers: int = 1,
    max_reported_skips: int = MAX_REPORTED_SKIPS,
    progress: bool = False,
    chunk_size: int = TOKENIZE_CHUNK_SIZE,
) -> CatalogLoadResult:
    """
    Load every decodable star of the catalog at path, in file order

    Args:
        path: Catalog file
        workers: Processes used to tokenize, 1 tokenizes inline
        max_reported_skips: Number of skipped rows logged and kept as
            diagnostics, later skips are only counted
        progress: Show a tqdm progress bar while decoding
        chunk_size: Rows per tokenizer task when workers > 1

    Returns:
        CatalogLoadResult
    """
    result = CatalogLoadResult()

    with Timer("read catalog") as reading:
        rows = read_rows(path)
    result.rows_read = len(rows)
    logger.info("Time taken to read catalog: %.3fs (%d rows)", reading.elapsed, len(rows))

    with Timer("parse catalog") as parsing:
        records = tokenize_rows(rows, workers=workers, chunk_size=chunk_size)
        del rows

        for row, record in enumerate(
            tqdm(records, desc="Decoding stars", leave=False, disable=not progress)
        ):
            outcome = decode_star(record)
            if isinstance(outcome, SkipReason):
                result.skipped_rows += 1
                if result.skipped_rows <= max_reported_skips:
                    skipped = SkippedRecord(row, outcome)
                    result.skipped.append(skipped)
                    logger.warning(str(skipped))
                elif result.skipped_rows == max_reported_skips + 1:
                    logger.warning("Further skipped rows will not be printed...")
                continue

            result.stars.append(outcome)

    logger.info("Time taken to parsing: %.3fs", parsing.elapsed)
    if result.skipped_rows:
        logger.warning(
            "Skipped %d of %d rows", result.skipped_rows, result.rows_read
        )
    logger.info("Loaded %d stars from %s", len(result.stars), path)
    return result
