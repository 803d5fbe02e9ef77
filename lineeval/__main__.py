"""Allow ``python -m lineeval``."""

import sys

from lineeval.cli import main

sys.exit(main())
