#!/usr/bin/env python3
"""Lance le balayage en durée (1 à 200 s) sans installer le paquet."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from linksweep.scenarios.runtime_sweep import main

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
