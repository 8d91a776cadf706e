"""Tests for the validators module."""

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from team_divider.validators import (
    InsufficientPlayers,
    InvalidTeamCount,
    TooManySeeds,
    UnknownSeed,
    ValidationError,
    parse_names,
    read_names_file,
    validate_inputs,
    validate_team_count,
)


class TestParseNames:
    """Test cases for turning raw text into names."""

    def test_trims_and_drops_blank_lines(self):
        """Test that whitespace is trimmed and blank lines are ignored."""
        assert parse_names("  An \n\nBinh\n   \nCuong\n") == ['An', 'Binh', 'Cuong']

    def test_duplicates_keep_first_position(self):
        """Test that repeated names appear once, where first seen."""
        assert parse_names("An\nBinh\nAn\n An\nCuong\nBinh") == ['An', 'Binh', 'Cuong']

    def test_empty_text(self):
        assert parse_names("") == []
        assert parse_names(None) == []

    def test_windows_line_endings(self):
        assert parse_names("An\r\nBinh\r\n") == ['An', 'Binh']


class TestValidateTeamCount:
    """Test cases for team count validation."""

    @pytest.mark.parametrize("count", [0, -1, -10])
    def test_non_positive(self, count):
        with pytest.raises(InvalidTeamCount):
            validate_team_count(count)

    @pytest.mark.parametrize("count", [2.5, "3", None, True])
    def test_not_an_integer(self, count):
        with pytest.raises(InvalidTeamCount):
            validate_team_count(count)

    def test_positive(self):
        validate_team_count(1)  # Should not raise
        validate_team_count(12)


class TestValidateInputs:
    """Test cases for the ordered input checks."""

    def test_valid_inputs_are_parsed(self):
        participants, seeds = validate_inputs("An\nBinh\nCuong\nDung", "An", 2)
        assert participants == ['An', 'Binh', 'Cuong', 'Dung']
        assert seeds == ['An']

    def test_invalid_team_count_wins_over_everything(self):
        """Test that a bad team count is reported even if other checks fail too."""
        with pytest.raises(InvalidTeamCount):
            validate_inputs("", "Nobody", 0)

    def test_insufficient_players(self):
        with pytest.raises(InsufficientPlayers, match="Not enough players"):
            validate_inputs("An\nBinh\nCuong", "", 5)

    def test_duplicates_do_not_count_twice(self):
        """Test that repeated names are not counted as extra players."""
        with pytest.raises(InsufficientPlayers):
            validate_inputs("An\nAn\nBinh", "", 3)

    def test_too_many_seeds(self):
        with pytest.raises(TooManySeeds):
            validate_inputs("An\nBinh\nCuong\nDung", "An\nBinh\nCuong", 2)

    def test_too_many_seeds_checked_before_unknown_seeds(self):
        with pytest.raises(TooManySeeds):
            validate_inputs("An\nBinh\nCuong", "X\nY\nZ", 2)

    def test_insufficient_players_checked_before_seeds(self):
        with pytest.raises(InsufficientPlayers):
            validate_inputs("An", "An\nBinh\nCuong", 2)

    def test_unknown_seed_names_offender(self):
        with pytest.raises(UnknownSeed, match='"Zed"') as excinfo:
            validate_inputs("An\nBinh\nCuong\nDung", "An\nZed", 2)
        assert excinfo.value.seeds == ['Zed']

    def test_unknown_seed_lists_every_offender(self):
        with pytest.raises(UnknownSeed) as excinfo:
            validate_inputs("An\nBinh\nCuong", "Xuan\nAn\nYen", 3)
        assert excinfo.value.seeds == ['Xuan', 'Yen']

    def test_seed_names_are_trimmed(self):
        _, seeds = validate_inputs("An\nBinh", "  An  ", 2)
        assert seeds == ['An']

    def test_seed_match_is_exact(self):
        """Test that seeds must match the player name exactly, case included."""
        with pytest.raises(UnknownSeed):
            validate_inputs("An\nBinh", "an", 2)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            validate_inputs("An", "", 2)
        assert issubclass(UnknownSeed, ValidationError)


class TestReadNamesFile:
    """Test cases for loading name lists from disk."""

    def test_text_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False, encoding='utf-8') as f:
            f.write("An\nBình\nCường\n")
            path = Path(f.name)

        try:
            assert parse_names(read_names_file(path)) == ['An', 'Bình', 'Cường']
        finally:
            path.unlink()

    def test_csv_name_column(self):
        df = pd.DataFrame({'club': ['A', 'B'], 'name': ['An', 'Binh']})

        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False) as f:
            df.to_csv(f.name, index=False)
            path = Path(f.name)

        try:
            assert parse_names(read_names_file(path)) == ['An', 'Binh']
        finally:
            path.unlink()

    def test_csv_first_column(self):
        df = pd.DataFrame({'player': ['Cuong', 'Dung', None], 'club': ['A', 'B', 'C']})

        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False) as f:
            df.to_csv(f.name, index=False)
            path = Path(f.name)

        try:
            assert parse_names(read_names_file(path)) == ['Cuong', 'Dung']
        finally:
            path.unlink()

    def test_empty_csv(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False) as f:
            f.write("")
            path = Path(f.name)

        try:
            with pytest.raises(ValueError, match="empty"):
                read_names_file(path)
        finally:
            path.unlink()

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            read_names_file(Path('/nonexistent/players.txt'))
