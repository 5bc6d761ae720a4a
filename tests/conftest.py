"""
Shared pytest fixtures for room round scheduling tests.
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roomrounds.models import Room


@pytest.fixture
def client(tmp_path):
    """Create a test client writing into a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    app.config['DATA_DIR'] = str(tmp_path)
    with app.test_client() as client:
        yield client
    app.config.pop('DATA_DIR', None)


@pytest.fixture
def four_teams():
    return ["A", "B", "C", "D"]


@pytest.fixture
def three_teams():
    return ["A", "B", "C"]


@pytest.fixture
def two_pair_rooms():
    """Two rooms that each hold one head-to-head match."""
    return [Room("R1", 2), Room("R2", 2)]


@pytest.fixture
def mixed_rooms():
    """Rooms of different sizes, listed smallest first."""
    return [Room("Small", 2), Room("Hall", 3), Room("Annex", 3)]


@pytest.fixture
def league_teams():
    return [f"Team {i}" for i in range(1, 10)]


@pytest.fixture
def data_dir(tmp_path):
    """Data directory with teams, rooms and settings files."""
    (tmp_path / "teams.yaml").write_text("- Lions\n- Tigers\n- Bears\n- Wolves\n")
    (tmp_path / "rooms.csv").write_text("room_name,capacity\nRoom 1,2\nRoom 2,2\n")
    (tmp_path / "settings.yaml").write_text(
        "matches_per_team: 1\nseed: 42\nevent_name: Spring Quiz\nstart_time: '10:00'\nround_minutes: 20\n"
    )
    return tmp_path
