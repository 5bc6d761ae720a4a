"""
Flask web application for Room Rounds.

JSON API around the round-robin scheduler and the bracket planner. The last
generated schedule is kept in the data directory so it can be fetched again
or exported as CSV.
"""
import os
import yaml
from filelock import FileLock
from flask import Flask, request, jsonify, Response

from roomrounds.bracket import bracket_summary, plan_bracket
from roomrounds.config import SCHEDULE_FILENAME, SETTINGS_FILENAME, get_data_dir, load_settings
from roomrounds.errors import InvalidConfiguration, SchedulingError
from roomrounds.export import rows_to_csv, schedule_rows
from roomrounds.models import BracketRound, BracketSlot, Match, Room, Round, Schedule
from roomrounds.schedule import generate_schedule

app = Flask(__name__)

DATA_DIR = get_data_dir()


def _file_path(filename: str) -> str:
    return os.path.join(app.config.get('DATA_DIR', DATA_DIR), filename)


def _data_lock() -> FileLock:
    data_dir = app.config.get('DATA_DIR', DATA_DIR)
    os.makedirs(data_dir, exist_ok=True)
    return FileLock(os.path.join(data_dir, '.lock'), timeout=10)


def _optional_int(data: dict, key: str):
    value = data.get(key)
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{key} must be an integer, got {value!r}")


def schedule_to_data(schedule: Schedule, seed=None, bracket_rounds=None) -> dict:
    """Plain-data form of a schedule, as stored in schedule.yaml and returned by the API."""
    return {
        'teams': list(schedule.teams),
        'rooms': [room.as_dict() for room in schedule.rooms],
        'matches_per_team': schedule.matches_per_team,
        'seed': seed,
        'rounds': schedule.as_dicts(),
        'bracket': [r.as_dict() for r in bracket_rounds] if bracket_rounds else [],
    }


def schedule_from_data(data: dict):
    """Rebuild a Schedule (and bracket plan) from schedule_to_data() output."""
    rooms = [Room.from_value(room) for room in data.get('rooms', [])]
    rooms_by_name = {room.name: room for room in rooms}
    rounds = []
    for number, cells in enumerate(data.get('rounds', []), start=1):
        matches = [
            Match(rooms_by_name[name], teams)
            for name, teams in cells.items()
            if name in rooms_by_name and teams
        ]
        rounds.append(Round(number, matches, cells.get('Bye', [])))
    schedule = Schedule(data.get('teams', []), rooms, data.get('matches_per_team', 1), rounds)

    bracket_rounds = []
    for entry in data.get('bracket', []):
        slots = [
            BracketSlot(rooms_by_name.get(slot['room']) or Room(slot['room']),
                        slot['teams_expected'], slot.get('side'))
            for slot in entry.get('rooms', [])
        ]
        bracket_rounds.append(BracketRound(entry['number'], slots, entry.get('label', ''), entry.get('state')))
    return schedule, bracket_rounds


def load_saved_schedule():
    """Load the last generated schedule from YAML file."""
    path = _file_path(SCHEDULE_FILENAME)
    if not os.path.exists(path):
        return None
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return data if data else None


def save_schedule(data: dict):
    """Save the generated schedule to YAML file."""
    with _data_lock():
        with open(_file_path(SCHEDULE_FILENAME), 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


@app.errorhandler(InvalidConfiguration)
def handle_invalid_configuration(e):
    return jsonify({'success': False, 'error': str(e)}), 400


@app.errorhandler(SchedulingError)
def handle_scheduling_error(e):
    app.logger.error(f'Scheduling failed: {e}')
    return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/schedule', methods=['POST'])
def api_generate_schedule():
    """Generate a schedule from posted teams, rooms and settings, and save it."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Expected a JSON object'}), 400

    settings = load_settings(_file_path(SETTINGS_FILENAME))
    matches_per_team = _optional_int(data, 'matches_per_team')
    if matches_per_team is None:
        matches_per_team = settings['matches_per_team']
    max_teams_per_match = _optional_int(data, 'max_teams_per_match')
    if max_teams_per_match is None:
        max_teams_per_match = settings['max_teams_per_match']
    seed = data.get('seed', settings['seed'])
    mode = data.get('elimination_mode') or settings['elimination_mode']

    teams = data.get('teams') or []
    rooms = data.get('rooms') or []
    schedule = generate_schedule(teams, rooms, matches_per_team, tie_break=seed,
                                 max_teams_per_match=max_teams_per_match)
    bracket_rounds = plan_bracket(len(schedule.teams), schedule.rooms, mode) if mode else []

    result = schedule_to_data(schedule, seed, bracket_rounds)
    save_schedule(result)
    app.logger.info(f'Generated {len(schedule)} rounds for {len(schedule.teams)} teams')

    return jsonify({'success': True, **result, 'stats': schedule.stats()})


@app.route('/api/schedule', methods=['GET'])
def api_get_schedule():
    """Return the last generated schedule."""
    data = load_saved_schedule()
    if not data:
        return jsonify({'success': False, 'error': 'No schedule found'}), 404
    return jsonify({'success': True, **data})


@app.route('/api/bracket', methods=['POST'])
def api_plan_bracket():
    """Plan elimination bracket rounds for a team count and set of rooms."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Expected a JSON object'}), 400

    team_count = _optional_int(data, 'team_count')
    if team_count is None:
        return jsonify({'success': False, 'error': 'team_count is required'}), 400
    mode = data.get('mode')
    if not mode:
        return jsonify({'success': False, 'error': 'mode is required'}), 400

    rounds = plan_bracket(team_count, data.get('rooms') or [], mode)
    return jsonify({
        'success': True,
        'rounds': [r.as_dict() for r in rounds],
        'summary': bracket_summary(rounds),
    })


@app.route('/api/export/schedule-csv')
def api_export_schedule_csv():
    """Export the saved schedule as a downloadable CSV file."""
    data = load_saved_schedule()
    if not data:
        return jsonify({'success': False, 'error': 'No schedule found'}), 404

    settings = load_settings(_file_path(SETTINGS_FILENAME))
    schedule, bracket_rounds = schedule_from_data(data)
    rows = schedule_rows(
        schedule, bracket_rounds,
        start_time=settings['start_time'],
        round_minutes=settings['round_minutes'],
        event_name=settings['event_name'],
        event_date=str(settings['event_date'] or '')
    )

    return Response(
        rows_to_csv(rows),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=schedule.csv'},
    )


if __name__ == '__main__':
    app.run(debug=True)
