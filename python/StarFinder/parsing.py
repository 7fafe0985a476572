#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Tokenizing and decoding of pipe-delimited Tycho-2 catalog records

A record is a raw catalog line split on '|'.  Decoding pulls RA, Dec and
the BT/VT magnitudes out of their fixed positions and combines the two
bands into a single visual magnitude.  Records that can't be used are not
errors: decode_star hands back a SkipReason instead of a Star.

Numbers are parsed with parse_float, which needs the whole field to be a
finite number (surrounding blanks are fine, "12.3abc" is not).
"""

import logging
import math
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from StarFinder.stars import Star

logger = logging.getLogger("StarFinder.Parsing")

FIELD_DELIMITER = "|"

BT_FIELD = 17
VT_FIELD = 19
RA_FIELD = 24
DEC_FIELD = 25

# Johnson V from Tycho BT/VT
VT_BT_COEFFICIENT = 0.090

# Rows per task handed to the tokenizer pool
TOKENIZE_CHUNK_SIZE = 50_000


class SkipCause(Enum):
    INVALID_RA = "missing/invalid RA"
    INVALID_DEC = "missing/invalid Dec"
    MISSING_MAGNITUDE = "missing magnitude"


@dataclass(frozen=True)
class SkipReason:
    """Why a record did not produce a star"""

    cause: SkipCause
    message: str

    def __str__(self):
        return self.message


@dataclass(frozen=True)
class SkippedRecord:
    row: int
    reason: SkipReason

    def __str__(self):
        return f"Skipping row {self.row} due to error: {self.reason}"


DecodeOutcome = Union[Star, SkipReason]


def split_record(line: str) -> List[str]:
    """Split a raw line on '|', keeping empty fields and whitespace as-is"""
    return line.split(FIELD_DELIMITER)


def _split_chunk(rows: Sequence[str]) -> List[List[str]]:
    return [split_record(row) for row in rows]


def tokenize_rows(
    rows: Sequence[str], workers: int = 1, chunk_size: int = TOKENIZE_CHUNK_SIZE
) -> List[List[str]]:
    """
    Tokenize every row, records[i] always belongs to rows[i]

    With more than one worker the rows are split into contiguous chunks and
    tokenized in a process pool.  Each finished chunk is written back into
    its slot of the pre-sized result list, so the order in which chunks
    complete doesn't matter.
    """
    if workers <= 1 or len(rows) <= chunk_size:
        return _split_chunk(rows)

    records: List[List[str]] = [[] for _ in range(len(rows))]
    with ProcessPoolExecutor(max_workers=workers) as executor:
        future_to_start = {
            executor.submit(_split_chunk, rows[start : start + chunk_size]): start
            for start in range(0, len(rows), chunk_size)
        }
        for future in as_completed(future_to_start):
            start = future_to_start[future]
            chunk = future.result()
            records[start : start + len(chunk)] = chunk

    return records


def parse_float(text: str) -> float:
    """
    Parse a catalog field as a finite float

    Raises ValueError for blank, partially numeric or non-finite fields.
    """
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"non-finite value: {text!r}")
    return value


def parse_field(
    record: Sequence[str], index: int, field_name: str
) -> Tuple[Optional[float], Optional[str]]:
    """
    Parse the numeric field at index

    Returns:
        (value, None) on success, (None, error message) otherwise
    """
    if index >= len(record):
        return None, f"Missing field: {field_name}"

    text = record[index]
    try:
        return parse_float(text), None
    except ValueError:
        return None, f"Failed to parse {field_name} ({text!r})"


def parse_magnitude(record: Sequence[str]) -> Union[float, SkipReason]:
    """
    Visual magnitude from the BT and VT bands

    Both bands: V = VT - 0.090 * (BT - VT).  With only one band present
    that band is used as is.
    """
    bt_mag, bt_error = parse_field(record, BT_FIELD, "BT magnitude")
    vt_mag, vt_error = parse_field(record, VT_FIELD, "VT magnitude")

    if bt_mag is not None and vt_mag is not None:
        return vt_mag - VT_BT_COEFFICIENT * (bt_mag - vt_mag)
    if bt_mag is not None:
        return bt_mag
    if vt_mag is not None:
        return vt_mag

    return SkipReason(
        SkipCause.MISSING_MAGNITUDE,
        f"Missing magnitude. {bt_error}. {vt_error}",
    )


def decode_star(record: Sequence[str]) -> DecodeOutcome:
    """Turn a tokenized record into a Star, or the reason it was skipped"""
    ra, ra_error = parse_field(record, RA_FIELD, "RA")
    if ra is None:
        return SkipReason(SkipCause.INVALID_RA, str(ra_error))

    dec, dec_error = parse_field(record, DEC_FIELD, "Dec")
    if dec is None:
        return SkipReason(SkipCause.INVALID_DEC, str(dec_error))

    mag = parse_magnitude(record)
    if isinstance(mag, SkipReason):
        return mag

    return Star(ra=ra, dec=dec, mag=mag)
