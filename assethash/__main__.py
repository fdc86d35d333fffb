"""
Print the asset manifest of a directory, or look up hashed names in it.

Usage:
  ASSETHASH_ASSETS_DIR=static python -m assethash              # manifest JSON
  ASSETHASH_ASSETS_DIR=static python -m assethash /app.css     # /app.css -> /app-<hash>.css
"""

import json
import logging
import sys
from typing import List, Optional

from assethash.config import get_settings
from assethash.hashfs import HashFileSystem
from assethash.log import setup_logging
from assethash.names import AssetNames
from assethash.vfs import DirFileSystem

log = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    setup_logging(settings)

    assets_dir = settings.assets_dir
    if not assets_dir.is_dir():
        log.error("Assets directory %s does not exist", assets_dir)
        return 1

    fs = HashFileSystem(DirFileSystem(assets_dir))
    try:
        if not args:
            names = json.loads(fs.manifest())
            print(json.dumps(names, indent=2, sort_keys=True))
            return 0
        lookup = AssetNames(fs)
        for name in args:
            print(f"{name} -> {lookup.lookup(name)}")
    except OSError as e:
        log.error("Could not hash %s: %s", assets_dir, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
