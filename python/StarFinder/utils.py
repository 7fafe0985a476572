import os
import time
import logging
from pathlib import Path


package_dir = Path(__file__).parent
default_config_file = package_dir / "default_config.json"
default_logconf_file = package_dir / "starfinder_logconf.json"


def create_path(apath: Path):
    os.makedirs(apath, exist_ok=True)


class Timer:
    """
    Time multiple code blocks using a context manager.
    Usage:
        with Timer("read catalog"):
            result = read_stars(path)
        with Timer("render") as t:
            raster = render_stars(stars, 800, 600)
        print(t.elapsed)
    """

    def __init__(self, name):
        self.name = name
        self.start_time = None
        self.elapsed = 0.0
        self.logger = logging.getLogger("StarFinder.Timer")

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.debug("%s: %.6f seconds", self.name, self.elapsed)
