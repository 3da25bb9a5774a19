from __future__ import annotations

import itertools

from clubsite_backend.core.ranking import TeamTally, calculate_points, rank_standings


def _tally(team_id, wins=0, draws=0, losses=0, gf=0, ga=0, name=None):
    return TeamTally(
        team_id=team_id,
        team_name=name or team_id,
        wins=wins,
        draws=draws,
        losses=losses,
        goals_for=gf,
        goals_against=ga,
    )


def test_empty_input_gives_empty_table():
    assert rank_standings([]) == []


def test_points_and_derived_columns():
    (line,) = rank_standings([_tally("A", wins=2, draws=1, losses=3, gf=7, ga=9)])
    assert line.points == calculate_points(2, 1) == 7
    assert line.played == 6
    assert line.goal_difference == -2
    assert line.rank == 1


def test_tie_break_chain_points_then_goal_difference_then_goals_for_then_name():
    tallies = [
        _tally("low", wins=0, draws=1, gf=0, ga=0),
        _tally("gd-better", wins=1, gf=3, ga=1),
        _tally("gd-worse", wins=1, gf=5, ga=4),
        _tally("gf-better", wins=1, gf=4, ga=2),
        _tally("Beta", wins=1, gf=2, ga=0),
        _tally("Alpha", wins=1, gf=2, ga=0),
        _tally("top", wins=2),
    ]
    ranked = rank_standings(tallies)
    assert [r.team_id for r in ranked] == [
        "top",        # 6 pts
        "gf-better",  # 3 pts, GD +2, GF 4
        "gd-better",  # 3 pts, GD +2, GF 3
        "Alpha",      # 3 pts, GD +2, GF 2, name
        "Beta",
        "gd-worse",   # 3 pts, GD +1
        "low",        # 1 pt
    ]
    assert [r.rank for r in ranked] == list(range(1, 8))


def test_identical_records_get_distinct_ranks_by_name():
    ranked = rank_standings([_tally("x2", name="Zebra FC"), _tally("x1", name="Apple FC")])
    assert [(r.team_name, r.rank) for r in ranked] == [("Apple FC", 1), ("Zebra FC", 2)]


def test_ranking_is_independent_of_input_order():
    tallies = [
        _tally("A", wins=1, gf=2, ga=1),
        _tally("B", draws=1, losses=1, gf=1, ga=2),
        _tally("C", draws=1),
        _tally("D", draws=1),
    ]
    expected = [(r.team_id, r.rank) for r in rank_standings(tallies)]
    for permutation in itertools.permutations(tallies):
        assert [(r.team_id, r.rank) for r in rank_standings(permutation)] == expected


def test_ranked_table_respects_total_order():
    tallies = [
        _tally(f"T{i}", wins=i % 3, draws=i % 2, losses=i % 4, gf=i % 5, ga=(i * 7) % 4)
        for i in range(12)
    ]
    ranked = rank_standings(tallies)
    for a, b in zip(ranked, ranked[1:]):
        assert a.rank < b.rank
        assert (
            a.points > b.points
            or (a.points == b.points and a.goal_difference > b.goal_difference)
            or (a.points == b.points and a.goal_difference == b.goal_difference and a.goals_for > b.goals_for)
            or (
                a.points == b.points
                and a.goal_difference == b.goal_difference
                and a.goals_for == b.goals_for
                and a.team_name <= b.team_name
            )
        )


def test_input_tallies_are_not_modified():
    tally = _tally("A", wins=1, gf=1)
    rank_standings([tally])
    assert tally == _tally("A", wins=1, gf=1)


def test_fullwidth_and_halfwidth_names_collate_together():
    ranked = rank_standings([_tally("b", name="ＦＣ　Ｂ"), _tally("a", name="FC A")])
    assert [r.team_id for r in ranked] == ["a", "b"]
