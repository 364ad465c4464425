from realmshards.battle.type_chart import TYPES, effectiveness, is_known_type, matchup
from realmshards.core.types import format_types, normalize_stat_key, type_abbreviation, type_markup


def test_type_abbreviations_primary():
    assert type_abbreviation('fire') == 'FIR'
    assert type_abbreviation('ground') == 'GRN'
    assert type_abbreviation('cosmic') == 'COS'


def test_format_types_dual():
    out = format_types(('fire', 'flying'))
    assert out == '[bold #EE8130]FIR[/]/[bold #A98FF3]FLY[/]'
    assert type_markup('cosmic', 'X') == 'X'


def test_single_type_matchups():
    assert matchup('fire', 'grass') == 2.0
    assert matchup('grass', 'fire') == 0.5
    assert matchup('normal', 'ghost') == 0.0
    assert matchup('normal', 'normal') == 1.0


def test_dual_type_effectiveness_multiplies():
    assert effectiveness('water', ['fire', 'rock']) == 4.0
    assert effectiveness('grass', ['fire', 'flying']) == 0.25
    assert effectiveness('electric', ['water', 'ground']) == 0.0
    assert effectiveness('fire', ['water', 'grass']) == 1.0


def test_unknown_types_are_neutral():
    assert effectiveness('cosmic', ['fire']) == 1.0
    assert effectiveness('fire', ['cosmic']) == 1.0
    assert effectiveness('typeless', ['ghost']) == 1.0
    assert not is_known_type('cosmic')


def test_chart_covers_eighteen_types():
    assert len(TYPES) == 18
    assert all(is_known_type(t) for t in TYPES)


def test_stat_key_aliases():
    assert normalize_stat_key('spAtk') == 'sp_atk'
    assert normalize_stat_key('spDef') == 'sp_def'
    assert normalize_stat_key('Speed') == 'speed'
