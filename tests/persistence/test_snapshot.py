"""
Unit Tests for Snapshot Files

Tests for writing, loading and backing up assignment snapshots.
"""

import json
from datetime import datetime

import pytest

from feedback_helper.core.errors import IOFailure, LoadFailure
from feedback_helper.core.utils.serialization import encode_snapshot
from feedback_helper.persistence.snapshot import (
    backup_path,
    load_snapshot,
    snapshot_path,
    write_backup,
    write_snapshot,
)


class TestWriteSnapshot:
    """Tests for snapshot_path/write_snapshot."""
    
    def test_snapshot_path_when_title_then_slug_in_directory(self, sample_assignment, assignment_dir):
        assert snapshot_path(sample_assignment) == assignment_dir / "CS2101-P2.fht"
    
    def test_write_when_called_then_file_replaced_without_temp_left(self, sample_assignment, assignment_dir):
        path = snapshot_path(sample_assignment)
        path.write_bytes(b"old")
        
        write_snapshot(encode_snapshot(sample_assignment), path)
        
        assert json.loads(path.read_text(encoding="utf-8"))["title"] == "CS2101-P2"
        assert not list(assignment_dir.glob("*.tmp"))
    
    def test_write_when_directory_is_a_file_then_io_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        
        with pytest.raises(IOFailure):
            write_snapshot(b"{}", blocker / "Lab.fht")


class TestLoadSnapshot:
    """Tests for load_snapshot."""
    
    def test_load_when_written_then_round_trip(self, sample_assignment):
        a = sample_assignment
        a.update_section("Janey", "Report quality", "• Could do with improvement.\n• I like frogs.")
        a.update_grade("112110331", 12.5)
        a.add_custom_phrase("Overall", "Well done.")
        path = write_snapshot(encode_snapshot(a), snapshot_path(a))
        
        loaded = load_snapshot(path)
        
        assert loaded.title == a.title
        assert loaded.headings == a.headings
        assert loaded.style == a.style
        assert loaded.student_ids == a.student_ids
        for student_id in a.student_ids:
            assert loaded.grade(student_id) == a.grade(student_id)
            for heading in a.headings:
                assert loaded.section(student_id, heading) == a.section(student_id, heading)
        assert loaded.custom_phrases_by_heading() == a.custom_phrases_by_heading()
    
    def test_load_when_loaded_then_directory_is_parent(self, sample_assignment, assignment_dir):
        path = write_snapshot(encode_snapshot(sample_assignment), snapshot_path(sample_assignment))
        
        assert load_snapshot(path).directory == assignment_dir.resolve()
    
    def test_load_when_missing_then_load_failure(self, tmp_path):
        with pytest.raises(LoadFailure):
            load_snapshot(tmp_path / "missing.fht")
        assert list(tmp_path.iterdir()) == []

    def test_load_when_parent_missing_then_nothing_created(self, tmp_path):
        with pytest.raises(LoadFailure):
            load_snapshot(tmp_path / "nope" / "deeper" / "x.fht")
        assert not (tmp_path / "nope").exists()

    def test_load_when_path_is_directory_then_load_failure(self, tmp_path):
        with pytest.raises(LoadFailure):
            load_snapshot(tmp_path)
        assert not (tmp_path.parent / f"{tmp_path.name}.lock").exists()
    
    def test_load_when_corrupt_then_load_failure_chained(self, tmp_path):
        path = tmp_path / "bad.fht"
        path.write_text("{not json", encoding="utf-8")
        
        with pytest.raises(LoadFailure) as exc_info:
            load_snapshot(path)
        assert exc_info.value.__cause__ is not None
    
    def test_load_when_bad_student_id_then_load_failure(self, sample_assignment, tmp_path):
        data = json.loads(encode_snapshot(sample_assignment))
        data["documents"][0]["student_id"] = "jane doe"
        path = tmp_path / "bad.fht"
        path.write_text(json.dumps(data), encoding="utf-8")
        
        with pytest.raises(LoadFailure):
            load_snapshot(path)


class TestBackups:
    """Tests for backup_path/write_backup."""
    
    def test_backup_path_when_time_given_then_timestamped_name(self, tmp_path):
        when = datetime(2024, 3, 5, 14, 7, 9)
        
        path = backup_path(tmp_path, "CS2101-P2", when)
        
        assert path == tmp_path / "backups" / "CS2101-P2-backup-2024-03-05T14-07-09.fht"
    
    def test_write_backup_when_called_then_bytes_copied(self, tmp_path):
        path = write_backup(b"snapshot", tmp_path, "Lab")
        
        assert path.parent == tmp_path / "backups"
        assert path.read_bytes() == b"snapshot"
