"""
Tests for MTG Appointment Models and Store

Tests:
- Appointment creation and validation
- Immutable time, one-way acknowledgment
- JSON persistence (absent, corrupt, round-trip, atomic save)
- remove_where partitioning
"""

import json
import logging
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from mtg.memory import (
    AppointmentRecord,
    AppointmentStore,
    JsonFilePersistence,
    PersistenceError,
    ValidationError,
    create_appointment,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


NOW = datetime(2024, 1, 10, 10, 0, 0)


def make_store(tmpdir: str) -> AppointmentStore:
    return AppointmentStore(JsonFilePersistence(Path(tmpdir) / "mtgrc.json"))


def test_appointment_models():
    """Test appointment data model"""
    print("\n" + "="*70)
    print("TEST 1: Appointment Models")
    print("="*70)

    print("\n[1.1] Testing creation...")
    record = create_appointment("  standup at 10:05  ", NOW + timedelta(minutes=5))
    assert record.text == "  standup at 10:05  "
    assert record.when == datetime(2024, 1, 10, 10, 5)
    assert record.acknowledged is False
    print("✓ Appointment created unacknowledged")

    print("\n[1.2] Testing validation...")
    for bad in ["", "   ", "\t\n"]:
        with pytest.raises(ValidationError):
            create_appointment(bad, NOW)
    with pytest.raises(ValidationError):
        AppointmentRecord(text="", when=NOW)
    with pytest.raises(TypeError):
        create_appointment("lunch", "2024-01-10T12:00:00")
    print("✓ Empty text and non-datetime rejected")

    print("\n[1.3] Testing immutable time...")
    with pytest.raises(AttributeError):
        record.when = NOW
    assert record.when == datetime(2024, 1, 10, 10, 5)
    print("✓ Time cannot be reassigned")

    print("\n[1.4] Testing one-way acknowledgment...")
    assert record.acknowledge() is True
    assert record.acknowledged is True
    assert record.acknowledge() is False
    assert record.acknowledged is True
    with pytest.raises(AttributeError):
        record.acknowledged = False
    assert record.acknowledged is True
    record.acknowledged = True
    print("✓ Acknowledgment only goes false -> true")

    print("\n✅ Appointment models test PASSED")


def test_serialization():
    """Test dict conversion, including legacy UTC timestamps"""
    record = create_appointment("dentist", datetime(2024, 3, 1, 15, 30, 0, 250000))
    data = record.to_dict()

    assert data == {
        'text': 'dentist',
        'date': '2024-03-01T15:30:00.250000',
        'acked': False,
    }
    assert AppointmentRecord.from_dict(data) == record

    # toISOString() output is UTC with a trailing Z
    legacy = AppointmentRecord.from_dict({'text': 'old', 'date': '2024-03-01T15:30:00.000Z'})
    assert legacy.when.tzinfo is None
    assert legacy.acknowledged is False
    assert legacy.when == datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def test_store_load():
    """Test loading from absent, valid and corrupt files"""
    print("\n" + "="*70)
    print("TEST 2: Store Load")
    print("="*70)

    with tempfile.TemporaryDirectory() as tmpdir:
        store = make_store(tmpdir)
        path = store.persistence.storage_path

        print("\n[2.1] Testing absent file...")
        assert store.load() == []
        assert not path.exists()
        print("✓ Absent file loads as empty store")

        print("\n[2.2] Testing valid file...")
        path.write_text(json.dumps([
            {'text': 'first', 'date': '2024-01-10T09:00:00', 'acked': True},
            {'text': 'second', 'date': '2024-01-10T11:00:00', 'acked': False},
        ]))
        records = store.load()
        assert [r.text for r in records] == ['first', 'second']
        assert [r.acknowledged for r in records] == [True, False]
        assert store.records is records
        print("✓ Records loaded in file order")

        print("\n[2.3] Testing corrupt file...")
        path.write_text("{not json")
        with pytest.raises(PersistenceError):
            store.load()

        path.write_text(json.dumps({'appointments': []}))
        with pytest.raises(PersistenceError):
            store.load()

        path.write_text(json.dumps([{'text': 'no date'}]))
        with pytest.raises(PersistenceError):
            store.load()

        for acked in ["false", "true", 0, 1, None]:
            path.write_text(json.dumps([{'text': 'x', 'date': '2024-01-10T09:00:00', 'acked': acked}]))
            with pytest.raises(PersistenceError):
                store.load()

        path.write_text(json.dumps([{'text': 'bad date', 'date': 'next tuesday'}]))
        with pytest.raises(PersistenceError):
            store.load()
        print("✓ Malformed files raise PersistenceError")

        print("\n[2.4] Testing lenient load policy...")
        store.records = [create_appointment("stale", NOW)]
        assert store.load_or_empty() == []
        assert store.records == []
        assert path.read_text() == json.dumps([{'text': 'bad date', 'date': 'next tuesday'}])
        print("✓ Corrupt file treated as empty and left on disk")

    print("\n✅ Store load test PASSED")


def test_store_round_trip():
    """save() then load() reproduces the same records in the same order"""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = make_store(tmpdir)
        store.append(create_appointment("b", NOW + timedelta(hours=2)))
        store.append(create_appointment("a", NOW + timedelta(hours=1)))
        store.append(create_appointment("c", NOW - timedelta(days=3, microseconds=7)))
        store.records[1].acknowledge()
        store.save()

        reloaded = make_store(tmpdir).load()
        assert reloaded == store.records

        on_disk = json.loads(store.persistence.storage_path.read_text())
        assert [d['text'] for d in on_disk] == ['b', 'a', 'c']
        assert [d['acked'] for d in on_disk] == [False, True, False]


def test_store_init():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = make_store(tmpdir)
        assert store.init() is True
        assert json.loads(store.persistence.storage_path.read_text()) == []

        store.append(create_appointment("keep me", NOW))
        store.save()
        assert store.init() is False
        assert len(json.loads(store.persistence.storage_path.read_text())) == 1


def test_failed_save_keeps_previous_file():
    """A failed write leaves the prior file intact and no temp files behind"""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = make_store(tmpdir)
        store.append(create_appointment("original", NOW))
        store.save()
        before = store.persistence.storage_path.read_text()

        store.append(create_appointment("lost", NOW))
        with patch('mtg.memory.appointment_store.json.dump', side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                store.save()

        assert store.persistence.storage_path.read_text() == before
        assert sorted(p.name for p in Path(tmpdir).iterdir()) == ["mtgrc.json"]


def test_remove_where():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = make_store(tmpdir)
        for i in range(5):
            store.append(create_appointment(f"event {i}", NOW + timedelta(hours=i)))

        survivors, removed = store.remove_where(lambda r: r.when.hour % 2 == 1)

        assert [r.text for r in survivors] == ["event 0", "event 2", "event 4"]
        assert [r.text for r in removed] == ["event 1", "event 3"]
        assert store.records == survivors
