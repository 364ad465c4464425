from realmshards.data.effect_parser import parse_effect_description


def _only(effects):
    assert len(effects) == 1
    return effects[0]


def test_lowers_target_stat():
    e = _only(parse_effect_description("Lowers the target's Attack by one stage."))
    assert (e.type, e.stat, e.stages, e.target, e.chance) == ('stat-change', 'atk', -1, 'opponent', 100)


def test_raises_user_stat_by_two():
    e = _only(parse_effect_description("Raises the user's Attack by two stages.", None, 'user'))
    assert (e.stat, e.stages, e.target) == ('atk', 2, 'self')


def test_sharply_and_multiple_stats():
    e = _only(parse_effect_description("Sharply raises the user's Speed."))
    assert (e.stat, e.stages) == ('speed', 2)
    effects = parse_effect_description("Raises the user's Attack and Defense by one stage.")
    assert [(x.stat, x.stages) for x in effects] == [('atk', 1), ('def', 1)]


def test_secondary_chance_uses_effect_chance():
    e = _only(parse_effect_description("Has a $effect_chance% chance to burn the target.", 10))
    assert (e.type, e.status, e.chance) == ('status', 'burn', 10)
    e = _only(parse_effect_description("Has a $effect_chance% chance to lower the target's Speed by one stage.", 10))
    assert (e.stat, e.stages, e.chance) == ('speed', -1, 10)


def test_literal_chance_wins():
    e = _only(parse_effect_description("Has a 30% chance to paralyze the target."))
    assert (e.status, e.chance) == ('paralysis', 30)


def test_status_inflictions():
    assert _only(parse_effect_description("Poisons the target.")).status == 'poison'
    assert _only(parse_effect_description("Badly poisons the target, inflicting more damage every turn.")).status == 'badly_poisoned'
    assert _only(parse_effect_description("Puts the target to sleep.")).status == 'sleep'
    assert _only(parse_effect_description("Confuses the target.")).status == 'confusion'
    e = _only(parse_effect_description("Has a $effect_chance% chance to make the target flinch.", 30))
    assert (e.status, e.chance) == ('flinch', 30)


def test_heal_drain_recoil():
    heal = _only(parse_effect_description("Heals the user by half its max HP."))
    assert (heal.type, heal.heal_percent, heal.target) == ('heal', 50, 'self')
    assert _only(parse_effect_description("Restores 25% of the user's max HP.")).heal_percent == 25
    drain = _only(parse_effect_description("Drains half the damage inflicted to heal the user."))
    assert (drain.type, drain.drain_percent) == ('drain', 50)
    recoil = _only(parse_effect_description("User receives 1/3 the damage inflicted in recoil."))
    assert (recoil.type, recoil.recoil_percent) == ('recoil', 33)
    recoil = _only(parse_effect_description("User receives 1/4 the damage it inflicts in recoil."))
    assert recoil.recoil_percent == 25


def test_unrecognised_text_yields_nothing():
    assert parse_effect_description(None) == []
    assert parse_effect_description("") == []
    assert parse_effect_description("Inflicts regular damage with no additional effect.") == []
    assert parse_effect_description("Has an increased chance for a critical hit.") == []
