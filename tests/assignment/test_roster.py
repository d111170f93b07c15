"""
Unit Tests for Student Roster Resolution

Tests for reading student lists and scanning submission directories.
"""

from feedback_helper.assignment.roster import read_student_list, resolve_student_ids, scan_directory
from feedback_helper.core.models import StudentId


def ids(values):
    return [str(v) for v in values]


class TestReadStudentList:
    """Tests for read_student_list."""
    
    def test_read_when_mixed_separators_then_all_students(self, student_list_file):
        assert ids(read_student_list(student_list_file)) == [
            "090003554", "Janey", "250001331", "112110331", "mike_york12",
        ]
    
    def test_read_when_duplicates_then_first_occurrence_kept(self, tmp_path):
        path = tmp_path / "list.txt"
        path.write_text("b a\nb c a", encoding="utf-8")
        
        assert ids(read_student_list(path)) == ["b", "a", "c"]


class TestScanDirectory:
    """Tests for scan_directory."""
    
    def test_scan_when_matriculation_names_then_ids_sorted(self, tmp_path):
        for name in ["250001331.zip", "090003554", "090003554.tar.gz", "notes.txt", "12345678", "1234567890"]:
            (tmp_path / name).touch()
        
        assert ids(scan_directory(tmp_path)) == ["090003554", "250001331"]
    
    def test_scan_when_directory_missing_then_empty(self, tmp_path):
        assert scan_directory(tmp_path / "missing") == []


class TestResolveStudentIds:
    """Tests for resolve_student_ids."""
    
    def test_resolve_when_list_readable_then_list_used(self, student_list_file, tmp_path):
        (tmp_path / "090003554").mkdir()
        
        assert len(resolve_student_ids(student_list_file, tmp_path)) == 5
    
    def test_resolve_when_list_missing_then_directory_scanned(self, tmp_path):
        (tmp_path / "090003554").mkdir()
        
        assert resolve_student_ids(tmp_path / "missing.txt", tmp_path) == [StudentId("090003554")]
    
    def test_resolve_when_list_is_directory_then_directory_scanned(self, tmp_path):
        (tmp_path / "090003554.zip").touch()
        
        assert resolve_student_ids(tmp_path, tmp_path) == [StudentId("090003554")]
    
    def test_resolve_when_nothing_available_then_empty(self, tmp_path):
        assert resolve_student_ids(None, None) == []
        assert resolve_student_ids(None, tmp_path / "missing") == []
