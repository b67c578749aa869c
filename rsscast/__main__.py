"""Allow running the catalog CLI with `python -m rsscast`."""

import sys

from rsscast.catalog.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
