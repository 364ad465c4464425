"""
Centralized path helpers.
"""
from __future__ import annotations
from pathlib import Path

# This file lives at realmshards/core/paths.py
PACKAGE = Path(__file__).resolve().parents[1]
ROOT = PACKAGE.parent
ASSETS = PACKAGE / "assets"
SPECIES_FILE = ASSETS / "species.json"
