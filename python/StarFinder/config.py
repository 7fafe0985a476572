#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
This module handles config options for a render

Defaults come from default_config.json next to this module, an optional
user config file is layered on top of them.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from StarFinder import utils
from StarFinder.stars import SkyRegion

logger = logging.getLogger("StarFinder.Config")


class Config:
    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        load all settings from config file
        """
        self.config_file_path = Path(config_file) if config_file else None
        self.load_config()

    def load_config(self):
        """
        Loads all config from disk
        """
        self.default_file_path = utils.default_config_file
        if self.config_file_path is None or not os.path.exists(
            self.config_file_path
        ):
            self._config_dict: dict = {}
        else:
            with open(self.config_file_path, "r") as config_file:
                logger.info("Loading config from %s", self.config_file_path)
                self._config_dict = json.load(config_file)

        # open default default_config
        with open(self.default_file_path, "r") as config_file:
            self._default_config_dict = json.load(config_file)

    def override_option(self, option, value):
        """
        Set option for this process only, the config file is left alone
        """
        self._config_dict[option] = value

    def get_option(self, option, default: Any = None):
        return self._config_dict.get(
            option, self._default_config_dict.get(option, default)
        )

    def region(self) -> SkyRegion:
        """RA/Dec window from the bound options"""
        return SkyRegion(
            min_ra=float(self.get_option("min_ra")),
            max_ra=float(self.get_option("max_ra")),
            min_dec=float(self.get_option("min_dec")),
            max_dec=float(self.get_option("max_dec")),
        )

    def __str__(self):
        return str(self._config_dict)

    def __repr__(self):
        return str(self._config_dict)
