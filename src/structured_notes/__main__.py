"""Allow ``python -m structured_notes``."""

import sys

from structured_notes.cli import main

sys.exit(main())
