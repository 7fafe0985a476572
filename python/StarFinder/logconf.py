#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Logging setup for the StarFinder tools

Logging is bootstrapped with basicConfig so early messages are not lost,
then an optional JSON5 dictConfig file is applied on top of it.
"""

import logging
import logging.config
from pathlib import Path
from typing import Optional, TextIO, Union

import json5

BASIC_FORMAT = "%(asctime)s %(name)s: %(levelname)s %(message)s"


def read_config(file: TextIO):
    """
    Read logging configuration from the specified file handle and apply it.
    """
    config = json5.load(file)
    logging.config.dictConfig(config)


def setup_logging(
    log_conf: Optional[Union[str, Path]] = None,
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the root logger

    Args:
        log_conf: JSON5 logging.config dictionary to apply, FileNotFoundError
            if it doesn't exist
        verbose: Set logging to debug mode
        log_file: Also write log records to this file

    Returns:
        The root logger
    """
    logging.basicConfig(format=BASIC_FORMAT)
    rlogger = logging.getLogger()
    rlogger.setLevel(logging.INFO)

    if log_conf is not None:
        log_conf = Path(log_conf)
        if not log_conf.exists():
            raise FileNotFoundError(f"Log configuration file {log_conf} does not exist.")
        with open(log_conf, "r") as f:
            read_config(f)

    logging.getLogger("PIL.PngImagePlugin").setLevel(logging.WARNING)

    if verbose:
        rlogger.setLevel(logging.DEBUG)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(rlogger.level)
        fh.setFormatter(logging.Formatter(BASIC_FORMAT))
        rlogger.addHandler(fh)

    return rlogger
