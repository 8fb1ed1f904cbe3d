"""Entry point for ``python -m proofing``."""

import sys

from .report import main

sys.exit(main())
