# tests/test_sequence_service.py
"""Unit tests for registry ID generation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from app.exceptions import StoreUnavailable
from app.models.registry_sequence import RegistrySequence
from app.services.sequence_service import (
    REGISTRY_SEQUENCE,
    format_registry_id,
    highest_registry_number,
    next_registry_id,
    parse_registry_number,
)


class TestFormatting:
    def test_zero_padded_to_five_digits(self):
        assert format_registry_id(1) == "REG00001"
        assert format_registry_id(420) == "REG00420"

    def test_wider_numbers_are_not_truncated(self):
        assert format_registry_id(123456) == "REG123456"

    def test_parse_suffix(self):
        assert parse_registry_number("REG00042") == 42
        assert parse_registry_number("REG100000") == 100000

    def test_parse_rejects_other_tokens(self):
        assert parse_registry_number("PUB00001") is None
        assert parse_registry_number("REG-12") is None
        assert parse_registry_number("") is None
        assert parse_registry_number(None) is None


class TestHighestNumber:
    def test_empty_registry(self, db_session):
        assert highest_registry_number(db_session) == 0

    def test_numeric_not_lexicographic(self, db_session, add_entry):
        add_entry("REG00099")
        add_entry("REG00100")
        add_entry("REG00007")
        assert highest_registry_number(db_session) == 100


class TestNextRegistryId:
    def test_first_id(self, db_session):
        assert next_registry_id(db_session) == "REG00001"
        db_session.commit()
        assert next_registry_id(db_session) == "REG00002"

    def test_counter_seeded_from_existing_entries(self, db_session, add_entry):
        add_entry("REG00041")
        assert next_registry_id(db_session) == "REG00042"

    def test_rolled_back_id_is_handed_out_again(self, db_session):
        assert next_registry_id(db_session) == "REG00001"
        db_session.commit()
        assert next_registry_id(db_session) == "REG00002"
        db_session.rollback()
        assert next_registry_id(db_session) == "REG00002"

    def test_counter_row_advances(self, db_session):
        next_registry_id(db_session)
        next_registry_id(db_session)
        db_session.commit()
        counter = db_session.get(RegistrySequence, REGISTRY_SEQUENCE)
        assert counter.last_value == 2

    def test_reseed_lifts_counter_past_stored_rows(self, db_session, add_entry):
        assert next_registry_id(db_session) == "REG00001"
        db_session.commit()
        add_entry("REG00007")
        assert next_registry_id(db_session, reseed=True) == "REG00008"

    def test_reseed_never_lowers_counter(self, db_session, add_entry):
        add_entry("REG00003")
        for _ in range(3):
            next_registry_id(db_session)
        db_session.commit()
        assert next_registry_id(db_session, reseed=True) == "REG00007"

    def test_store_unavailable(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        with pytest.raises(StoreUnavailable):
            next_registry_id(db)
