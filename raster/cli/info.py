from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..errors import RasterError
from ..services.raster_service import RasterService

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print size and mean gray intensity of grayscale/RGB images."
    )
    parser.add_argument("paths", nargs="+", help="Image files or folders to inspect")
    parser.add_argument("--recursive", action="store_true", help="Descend into sub-folders")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=os.getenv("RASTER_LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    raster_service = RasterService()
    failures = 0
    for path in args.paths:
        if os.path.isdir(path):
            images = raster_service.stream_gallery(path, recursive=args.recursive)
        else:
            try:
                images = [raster_service.load(path)]
            except (RasterError, FileNotFoundError, TimeoutError) as err:
                logger.error(f"{path}: {err}")
                failures += 1
                continue
        for img in images:
            print(f"{img}, mean gray: {raster_service.mean_intensity(img):.3f}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
