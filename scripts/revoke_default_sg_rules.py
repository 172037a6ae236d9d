#!/usr/bin/env python3
"""
Run ad hoc from a checkout: revoke all rules of the default security groups.

Same as the sg-revoker console script; see sg_revoker/cli.py for flags.
Dry run unless --execute is passed.
"""

import sys
from pathlib import Path

# Allow running from project root: python scripts/revoke_default_sg_rules.py
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sg_revoker.cli import main


if __name__ == "__main__":
    sys.exit(main())
