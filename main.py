#!/usr/bin/env python3
"""
Realm Shards - battle engine demo

Thin wrapper around the command-line entry point. The engine itself lives in
the realmshards package:
- data: species/move catalog, growth curves, items
- progression: creatures, trainers, the shared skill tree
- battle: damage, status effects, the turn resolution engine
- ui: rich rendering of a running battle

To run: python main.py --seed 7
"""

from realmshards.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
