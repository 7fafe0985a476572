import logging

import pytest

# A genuine catalog.dat row: BT=VT=12.146, RA/Dec in fields 24 and 25
TYCHO2_ROW = (
    "0001 00008 1| |  2.31750494|  2.23184345|  -16.3|   -9.0| 68| 73| 1.7| 1.8"
    "|1958.89|1951.94| 4|1.0|1.0|0.9|1.0|12.146|0.158|12.146|0.223|999| |         "
    "|  2.31754222|  2.23186444|1.67|1.54| 88.0|100.8| |-0.2"
)

TYCHO2_FIELDS = 32


def build_line(ra="10.0", dec="20.0", bt="", vt="", fields=TYCHO2_FIELDS):
    """A pipe delimited row with the given values at their catalog positions"""
    record = [""] * fields
    for index, value in ((17, bt), (19, vt), (24, ra), (25, dec)):
        if index < fields:
            record[index] = value
    return "|".join(record)


@pytest.fixture
def make_line():
    return build_line


@pytest.fixture
def write_catalog(tmp_path):
    """Write rows to a catalog file, returns its path"""

    def _write(rows, name="catalog.dat"):
        path = tmp_path / name
        path.write_text("\n".join(rows) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def restore_logging():
    """Put the root logger back the way it was after the test"""
    rlogger = logging.getLogger()
    level = rlogger.level
    handlers = rlogger.handlers.copy()
    yield rlogger
    for handler in rlogger.handlers.copy():
        if handler not in handlers:
            rlogger.removeHandler(handler)
            handler.close()
    # dictConfig drops the existing root handlers
    for handler in handlers:
        if handler not in rlogger.handlers:
            rlogger.addHandler(handler)
    rlogger.setLevel(level)
