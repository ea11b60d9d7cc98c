# tests/test_registry_query_service.py
"""Unit tests for registry listing and filtering."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date, datetime, time, timedelta
from app.exceptions import NotFound, ValidationError
from app.services.registry_query_service import escape_like, get_registry_entry, list_registry_entries

TODAY = date.today()
YESTERDAY = TODAY - timedelta(days=1)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def registry(directory, add_entry):
    add_entry("REG00001", visitor_name="Nimal Perera", visitor_nic="851234567V",
              public_user_id=1, visitor_type="existing", division_id=1, entry_time=at(TODAY, 9))
    add_entry("REG00002", visitor_name="Kamala Fernando", visitor_nic="887654321V",
              department_id=2, division_id=2, entry_time=at(TODAY, 10))
    add_entry("REG00003", visitor_name="Sunil Silva", visitor_nic="900000001V",
              entry_time=at(TODAY, 11), status="checked_out")
    add_entry("REG00004", visitor_name="Ruwan PERERA", visitor_nic="770000002V",
              entry_time=at(YESTERDAY, 15))
    return directory


def registry_ids(rows):
    return [r["registry_id"] for r in rows]


class TestListRegistryEntries:
    def test_defaults_to_todays_active_entries_newest_first(self, registry):
        assert registry_ids(list_registry_entries(registry)) == ["REG00002", "REG00001"]

    def test_date_filter(self, registry):
        assert registry_ids(list_registry_entries(registry, entry_date=YESTERDAY)) == ["REG00004"]

    def test_department_filter(self, registry):
        rows = list_registry_entries(registry, department_id=2)
        assert registry_ids(rows) == ["REG00002"]
        assert all(r["department_id"] == 2 for r in rows)

    def test_search_is_case_insensitive_on_name(self, registry):
        assert registry_ids(list_registry_entries(registry, search="perera")) == ["REG00001"]
        assert registry_ids(list_registry_entries(registry, entry_date=YESTERDAY, search="Perera")) == ["REG00004"]

    def test_search_matches_nic_and_registry_id(self, registry):
        assert registry_ids(list_registry_entries(registry, search="887654")) == ["REG00002"]
        assert registry_ids(list_registry_entries(registry, search="reg00001")) == ["REG00001"]

    def test_blank_search_is_ignored(self, registry):
        assert len(list_registry_entries(registry, search="  ")) == 2

    def test_search_percent_is_literal(self, registry):
        assert list_registry_entries(registry, search="%") == []

    def test_search_underscore_is_literal(self, registry, add_entry):
        add_entry("REG00005", visitor_name="Sunil Silva_Jr", entry_time=at(TODAY, 12))
        assert registry_ids(list_registry_entries(registry, search="a_")) == ["REG00005"]

    def test_escape_like(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
        assert escape_like("Perera") == "Perera"

    def test_status_filter(self, registry):
        assert registry_ids(list_registry_entries(registry, status="checked_out")) == ["REG00003"]

    def test_unknown_status_rejected(self, registry):
        with pytest.raises(ValidationError):
            list_registry_entries(registry, status="archived")

    def test_display_names_joined(self, registry):
        rows = {r["registry_id"]: r for r in list_registry_entries(registry)}
        linked = rows["REG00001"]
        assert linked["department_name"] == "Registrar of Births"
        assert linked["division_name"] == "Birth Certificates"
        assert linked["public_user_name"] == "Nimal Perera"
        assert linked["public_id"] == "PUB00001"
        assert rows["REG00002"]["public_user_name"] is None
        assert rows["REG00002"]["department_name"] == "Land Registry"

    def test_pagination(self, registry):
        assert registry_ids(list_registry_entries(registry, limit=1)) == ["REG00002"]
        assert registry_ids(list_registry_entries(registry, limit=1, offset=1)) == ["REG00001"]

    def test_empty_day(self, registry):
        assert list_registry_entries(registry, entry_date=TODAY + timedelta(days=1)) == []


class TestGetRegistryEntry:
    def test_any_status(self, registry):
        assert get_registry_entry(registry, 3)["status"] == "checked_out"

    def test_not_found(self, registry):
        with pytest.raises(NotFound):
            get_registry_entry(registry, 99)
