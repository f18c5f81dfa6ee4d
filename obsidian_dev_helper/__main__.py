"""Allow ``python -m obsidian_dev_helper``."""

import sys

from obsidian_dev_helper.cli import main

sys.exit(main())
