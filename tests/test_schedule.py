"""
Tests for full schedule generation: completeness, capacity, partition,
determinism and configuration errors.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roomrounds.errors import InvalidConfiguration, SchedulingDeadlock
from roomrounds.models import Room, Round
from roomrounds.schedule import generate_schedule
from roomrounds.tiebreak import TieBreak


def assert_valid_schedule(schedule, max_teams_per_match=None):
    """Check the invariants every generated schedule must hold."""
    teams = set(schedule.teams)
    for round_ in schedule.rounds:
        placed = round_.teams_placed()
        # Partition: every team exactly once, in a match or on a bye
        assert len(placed) == len(set(placed)), f"Round {round_.number} places a team twice"
        assert set(placed).isdisjoint(round_.byes)
        assert set(placed) | set(round_.byes) == teams
        assert len(placed) + len(round_.byes) == len(teams)

        rooms_used = [match.room.name for match in round_.matches]
        assert len(rooms_used) == len(set(rooms_used)), "A room is used twice in one round"
        for match in round_.matches:
            assert 2 <= len(match.teams) <= match.room.capacity
            if max_teams_per_match:
                assert len(match.teams) <= max_teams_per_match

    meetings = schedule.pair_meetings()
    assert all(count == schedule.matches_per_team for count in meetings.values()), meetings


class TestScenarios:
    """Small schedules with a known shape."""

    def test_four_teams_two_rooms(self, four_teams, two_pair_rooms):
        """Three rounds, both rooms busy every round, nobody sits out."""
        schedule = generate_schedule(four_teams, two_pair_rooms, 1)

        assert len(schedule) == 3
        for round_ in schedule.rounds:
            assert [len(match.teams) for match in round_.matches] == [2, 2]
            assert round_.byes == []
        assert_valid_schedule(schedule)

    def test_three_teams_one_room(self, three_teams):
        """Three rounds, one bye per round, each pair once."""
        schedule = generate_schedule(three_teams, [Room("R1", 2)], 1)

        assert len(schedule) == 3
        assert all(len(round_.byes) == 1 for round_ in schedule.rounds)
        assert schedule.bye_counts() == {"A": 1, "B": 1, "C": 1}
        assert_valid_schedule(schedule)

    def test_three_teams_one_round_in_big_room(self, three_teams):
        schedule = generate_schedule(three_teams, [Room("Hall", 3)], 1)
        assert len(schedule) == 1
        assert schedule.rounds[0].matches[0].teams == ["A", "B", "C"]

    def test_round_output_shape(self, three_teams):
        schedule = generate_schedule(three_teams, [Room("R1", 2), Room("R2", 2)], 1)
        first = schedule.as_dicts()[0]
        assert list(first) == ["R1", "R2", "Bye"]
        assert first["R1"] == ["A", "B"]
        assert first["R2"] == []
        assert first["Bye"] == ["C"]

    def test_rooms_as_plain_names(self):
        schedule = generate_schedule(["A", "B"], ["Room 1"], 1)
        assert len(schedule) == 1
        assert schedule.rooms == [Room("Room 1", 2)]

    def test_rooms_as_dicts(self, four_teams):
        schedule = generate_schedule(four_teams, [{'name': 'Hall', 'capacity': 4}], 2)
        assert len(schedule) == 2
        assert_valid_schedule(schedule)


class TestProperties:
    """Invariants across a range of team counts, rooms and multiplicities."""

    @pytest.mark.parametrize("team_count,capacities,matches_per_team,seed", [
        (2, [2], 1, None),
        (5, [2, 2], 1, None),
        (6, [3, 3], 2, 1),
        (7, [2, 3], 1, 2),
        (8, [4, 2, 2], 3, 3),
        (9, [3, 3, 3], 1, "nine"),
        (10, [5, 2], 2, 4),
        (12, [2, 2, 2, 2, 2, 2], 1, 5),
    ])
    def test_schedule_invariants(self, team_count, capacities, matches_per_team, seed):
        teams = [f"Team {i:02d}" for i in range(1, team_count + 1)]
        rooms = [Room(f"Room {i}", capacity) for i, capacity in enumerate(capacities, start=1)]
        schedule = generate_schedule(teams, rooms, matches_per_team, tie_break=seed)

        assert_valid_schedule(schedule)
        pair_count = team_count * (team_count - 1) // 2
        assert len(schedule) <= pair_count * matches_per_team

    def test_pair_rooms_give_equal_play_counts(self, league_teams):
        """With head-to-head rooms every team plays each opponent m times and nothing more."""
        schedule = generate_schedule(league_teams, [Room("R1"), Room("R2"), Room("R3")], 2, tie_break=8)
        assert set(schedule.play_counts().values()) == {2 * (len(league_teams) - 1)}

    def test_per_match_cap(self, league_teams, mixed_rooms):
        schedule = generate_schedule(league_teams, mixed_rooms, 1, max_teams_per_match=2)
        assert_valid_schedule(schedule, max_teams_per_match=2)

    def test_inputs_not_mutated(self, four_teams, two_pair_rooms):
        teams = list(four_teams)
        rooms = list(two_pair_rooms)
        generate_schedule(teams, rooms, 1, tie_break=3)
        assert teams == four_teams
        assert rooms == two_pair_rooms


class TestDeterminism:
    """Tests for reproducible output."""

    def test_same_seed_same_schedule(self, league_teams, mixed_rooms):
        first = generate_schedule(league_teams, mixed_rooms, 2, tie_break=99)
        second = generate_schedule(league_teams, mixed_rooms, 2, tie_break=99)
        assert first.as_dicts() == second.as_dicts()

    def test_tie_break_instance(self, league_teams, mixed_rooms):
        first = generate_schedule(league_teams, mixed_rooms, 1, tie_break=TieBreak(7))
        second = generate_schedule(league_teams, mixed_rooms, 1, tie_break=7)
        assert first.as_dicts() == second.as_dicts()

    def test_no_seed_is_fixed_order(self, league_teams, mixed_rooms):
        first = generate_schedule(league_teams, mixed_rooms, 1)
        second = generate_schedule(league_teams, mixed_rooms, 1)
        assert first.as_dicts() == second.as_dicts()
        assert first.rounds[0].as_dict(first.rooms)["Hall"] == ["Team 1", "Team 2", "Team 3"]


class TestConfigurationErrors:
    """Invalid input is rejected before any scheduling work."""

    @pytest.mark.parametrize("teams,rooms,matches_per_team", [
        (["A"], [Room("R1")], 1),
        ([], [Room("R1")], 1),
        (["A", "B", "A"], [Room("R1")], 1),
        (["A", " "], [Room("R1")], 1),
        (["A", "B"], [], 1),
        (["A", "B"], [Room("R1"), Room("R1", 3)], 1),
        (["A", "B"], [Room("R1", 1)], 1),
        (["A", "B"], [Room("R1", 0)], 1),
        (["A", "B"], [Room("R1")], 0),
        (["A", "B"], [Room("R1")], -2),
        (["A", "B"], [Room("R1")], 1.5),
        (["A", "B"], [Room("Bye")], 1),
        (["A", "B"], [Room("R1"), Room(" bye ", 3)], 1),
    ])
    def test_invalid_configuration(self, teams, rooms, matches_per_team):
        with pytest.raises(InvalidConfiguration):
            generate_schedule(teams, rooms, matches_per_team)

    def test_invalid_per_match_cap(self, four_teams, two_pair_rooms):
        with pytest.raises(InvalidConfiguration):
            generate_schedule(four_teams, two_pair_rooms, 1, max_teams_per_match=1)

    def test_is_value_error(self):
        """Callers catching ValueError still see configuration problems."""
        with pytest.raises(ValueError):
            generate_schedule(["A"], [Room("R1")], 1)


class TestDeadlock:
    """The generator fails fast when rounds stop making progress."""

    def test_stalled_rounds_raise(self, monkeypatch, four_teams, two_pair_rooms):
        import roomrounds.schedule as schedule_module

        calls = []

        def empty_round(number, teams, *args, **kwargs):
            calls.append(number)
            return Round(number, [], list(teams))

        monkeypatch.setattr(schedule_module, 'build_round', empty_round)
        with pytest.raises(SchedulingDeadlock):
            generate_schedule(four_teams, two_pair_rooms, 1)
        assert calls == [1, 2]
