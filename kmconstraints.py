#!/usr/bin/env python3
"""km-constraints CLI entry point.

Usage:
    python3 kmconstraints.py check 99999999 --type MAX --max 3600
    python3 kmconstraints.py hint --type RANGE --min 5 --max 10
    python3 kmconstraints.py validate values.json --policy wso2_is_token_expiry
    python3 kmconstraints.py policies
    python3 kmconstraints.py web
"""

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that rules/engines/cli imports work.
_PROJECT_ROOT = Path(__file__).resolve().parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from cli.main import main

if __name__ == "__main__":
    main()
