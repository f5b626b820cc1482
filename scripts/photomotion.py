#!/usr/bin/env python3
"""
photomotion - run the CLI from a source checkout.

Usage:
    python scripts/photomotion.py plan photos/*.jpg --aspect 16:9
    python scripts/photomotion.py curve SLOW_PUSH_IN --frames 120
"""
from __future__ import annotations

import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from photomotion.cli import main

if __name__ == "__main__":
    sys.exit(main())
