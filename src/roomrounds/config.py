"""
Loading and saving of the tournament input files.

A data directory holds:
- teams.yaml: a list of team names (or groups of names, flattened in order)
- rooms.csv: room_name,capacity
- settings.yaml: scheduling and event settings, merged over the defaults
"""
import csv
import logging
import os
from datetime import datetime
from typing import Dict, List

import yaml

from .errors import InvalidConfiguration
from .models import Room

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR_ENV = 'ROOMROUNDS_DATA_DIR'

TEAMS_FILENAME = 'teams.yaml'
ROOMS_FILENAME = 'rooms.csv'
SETTINGS_FILENAME = 'settings.yaml'
SCHEDULE_FILENAME = 'schedule.yaml'


def get_data_dir() -> str:
    return os.environ.get(DATA_DIR_ENV, os.path.join(BASE_DIR, 'data'))


def get_default_settings() -> Dict:
    """Return default settings."""
    return {
        'matches_per_team': 1,
        'max_teams_per_match': None,
        'seed': None,
        'elimination_mode': None,
        'event_name': 'Quiz Tournament',
        'event_date': '',
        'start_time': '09:00',
        'round_minutes': 30,
    }


def load_teams(file_path: str) -> List[str]:
    """Load team names from YAML file."""
    if not os.path.exists(file_path):
        return []
    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return []
    if isinstance(data, dict):
        # Grouped format: group name -> list of teams
        teams = []
        for group_teams in data.values():
            teams.extend(group_teams or [])
        data = teams
    return [str(team).strip() for team in data]


def save_teams(file_path: str, teams: List[str]):
    """Save team names to YAML file."""
    with open(file_path, 'w', encoding='utf-8') as f:
        yaml.dump(list(teams), f, default_flow_style=False)


def load_rooms(file_path: str) -> List[Room]:
    """Load rooms from CSV file; a missing capacity means 2."""
    rooms = []
    if not os.path.exists(file_path):
        return rooms
    with open(file_path, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            capacity = (row.get('capacity') or '').strip() or 2
            rooms.append(Room.from_value({'name': row['room_name'].strip(), 'capacity': capacity}))
    return rooms


def save_rooms(file_path: str, rooms: List[Room]):
    """Save rooms to CSV file."""
    with open(file_path, 'w', encoding='utf-8', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=['room_name', 'capacity'])
        writer.writeheader()
        for room in rooms:
            writer.writerow({'room_name': room.name, 'capacity': room.capacity})


def load_settings(file_path: str) -> Dict:
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    if not os.path.exists(file_path):
        return defaults
    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return defaults
    unknown = sorted(set(data) - set(defaults))
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", file_path, ", ".join(unknown))
    settings = {**defaults, **{key: value for key, value in data.items() if key in defaults}}
    settings['start_time'] = normalize_time(settings['start_time'])
    return settings


def normalize_time(value) -> str:
    """
    Return a start time as an HH:MM string.

    YAML 1.1 reads an unquoted 10:30 as the sexagesimal integer 630, which is
    turned back into minutes past midnight.
    """
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Invalid start_time {value!r}; expected HH:MM")
    if isinstance(value, int):
        if not 0 <= value < 24 * 60:
            raise InvalidConfiguration(f"Invalid start_time {value!r}; expected HH:MM")
        return f"{value // 60:02d}:{value % 60:02d}"
    try:
        parsed = datetime.strptime(str(value).strip(), '%H:%M')
    except ValueError:
        raise InvalidConfiguration(f"Invalid start_time {value!r}; expected HH:MM")
    return parsed.strftime('%H:%M')


def save_settings(file_path: str, settings: Dict):
    """Save settings to YAML file."""
    with open(file_path, 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)
