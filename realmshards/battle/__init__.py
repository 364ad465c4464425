"""
Battle system package.
Modules:
- effects.py (stat stages, status conditions, structured move effects)
- type_chart.py (18-type matchup table)
- combatant.py (shared capability of trainers and creatures)
- mechanics.py (damage, capture and flee rolls)
- state.py (battle phases, actions, bounded log)
- engine.py (turn resolution state machine)
- session.py (top-level game controller)
"""
