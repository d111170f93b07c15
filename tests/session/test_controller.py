"""
Unit Tests for the Session Controller

Tests for the single-assignment rule, save dispatch and event relaying.
"""

import pytest

from feedback_helper.config.settings import SettingsStore
from feedback_helper.core.errors import AssignmentAlreadyOpen, LoadFailure, NoAssignmentOpen
from feedback_helper.core.models import FeedbackStyle
from feedback_helper.session import Session

HEADINGS = "Code\nReport quality\n\nOverall\n"


@pytest.fixture
def session(listener):
    s = Session(backup_interval=0)
    s.subscribe(listener)
    yield s
    s.close()


@pytest.fixture
def settings(tmp_path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings" / "settings.json")


class TestOpening:
    """Tests for create/load and the one-assignment rule."""
    
    def test_create_when_none_open_then_assignment_saved(self, session, student_list_file, assignment_dir):
        a = session.create_assignment("CS2101-P2", HEADINGS, student_list_file, assignment_dir)
        
        assert session.has_assignment
        assert session.assignment is a
        assert session.wait_for_saves(timeout=10) == 1
        assert (assignment_dir / "CS2101-P2.fht").exists()
    
    def test_create_when_already_open_then_raises_and_keeps_first(self, session, student_list_file, assignment_dir):
        first = session.create_assignment("CS2101-P2", HEADINGS, student_list_file, assignment_dir)
        
        with pytest.raises(AssignmentAlreadyOpen):
            session.create_assignment("Other", "Code", None, assignment_dir)
        
        assert session.assignment is first
    
    def test_load_when_already_open_then_raises(self, session, student_list_file, assignment_dir):
        session.create_assignment("CS2101-P2", HEADINGS, student_list_file, assignment_dir)
        session.wait_for_saves(timeout=10)
        
        with pytest.raises(AssignmentAlreadyOpen):
            session.load_assignment(assignment_dir / "CS2101-P2.fht")
    
    def test_load_when_saved_earlier_then_content_restored(self, student_list_file, assignment_dir):
        with Session(backup_interval=0) as first:
            first.create_assignment("CS2101-P2", HEADINGS, student_list_file, assignment_dir)
            first.update_section("Janey", "Code", "- Tidy.")
            first.update_grade("Janey", 17)
        
        with Session(backup_interval=0) as second:
            loaded = second.load_assignment(assignment_dir / "CS2101-P2.fht")
            
            assert loaded.section("Janey", "Code") == "- Tidy."
            assert loaded.grade("Janey") == 17.0
            assert [p.text for p in loaded.phrases_for_heading("Code")] == ["Tidy."]
    
    def test_load_when_missing_then_load_failure_and_nothing_open(self, session, tmp_path):
        with pytest.raises(LoadFailure):
            session.load_assignment(tmp_path / "missing.fht")
        
        assert not session.has_assignment
    
    def test_load_when_parent_missing_then_nothing_created(self, session, tmp_path):
        with pytest.raises(LoadFailure):
            session.load_assignment(tmp_path / "nope" / "deeper" / "x.fht")
        
        assert not (tmp_path / "nope").exists()
    
    def test_assignment_when_none_open_then_raises(self, session):
        with pytest.raises(NoAssignmentOpen):
            session.assignment
        with pytest.raises(NoAssignmentOpen):
            session.update_grade("Janey", 1)


class TestEditing:
    """Tests for mutations saving in the background."""
    
    @pytest.fixture
    def opened(self, session, student_list_file, assignment_dir, listener):
        session.create_assignment(
            "CS2101-P2", HEADINGS, student_list_file, assignment_dir, style=FeedbackStyle()
        )
        session.wait_for_saves(timeout=10)
        listener.clear()
        return session
    
    def test_update_section_when_called_then_events_relayed_and_saved(self, opened, listener):
        opened.update_section("Janey", "Code", "- Tidy.")
        opened.wait_for_saves(timeout=10)
        
        names = [name for name, _ in listener.events]
        assert names[:2] == ["phrase_added", "save_worker"]
        assert "info" in names
    
    def test_add_student_when_new_then_saved_with_student(self, opened, assignment_dir):
        opened.add_student("late_student")
        opened.wait_for_saves(timeout=10)
        
        assert '"late_student"' in (assignment_dir / "CS2101-P2.fht").read_text(encoding="utf-8")
    
    def test_add_custom_phrase_when_no_op_then_not_saved(self, opened, listener):
        assert not opened.add_custom_phrase("Code", "   ")
        
        assert listener.named("save_worker") == []
    
    def test_custom_phrases_when_edited_then_saved_each_time(self, opened, listener):
        opened.add_custom_phrase("Code", "A")
        opened.add_custom_phrase("Code", "B")
        assert opened.reorder_custom_phrase("Code", "B", -1) == (1, 0)
        assert opened.delete_custom_phrase("Code", "A")
        
        assert opened.wait_for_saves(timeout=10) == 4
        assert opened.assignment.custom_phrases("Code") == ["B"]
    
    def test_rename_heading_when_called_then_headings_event(self, opened, listener):
        opened.rename_heading("Overall", "Summary")
        
        assert listener.named("headings_updated") == [(["Code", "Report quality", "Summary"],)]
    
    def test_update_feedback_when_called_then_all_sections(self, opened):
        opened.update_feedback("Janey", {"Code": "- A", "Overall": "Fine."})
        
        assert opened.assignment.section("Janey", "Overall") == "Fine."
    
    def test_export_grade_distribution_when_called_then_next_to_feedback(self, opened, assignment_dir):
        path = opened.export_grade_distribution()
        
        assert path == assignment_dir / "CS2101-P2-feedback" / "grade-distribution.csv"
        assert path.read_text(encoding="utf-8").startswith("0.0,5\n")
    
    def test_update_grade_when_many_saves_finished_then_pending_list_bounded(self, opened):
        for grade in range(200):
            opened.update_grade("Janey", grade % 21)
        handle = opened.save()
        handle.wait(timeout=10)
        
        opened.update_grade("Janey", 20)
        
        assert len(opened._saves._futures) < 10
        assert opened.wait_for_saves(timeout=10) == 202
    
    def test_unsubscribe_when_removed_then_no_more_events(self, opened, listener):
        opened.unsubscribe(listener)
        
        opened.update_grade("Janey", 3)
        
        assert listener.events == []


class TestSettings:
    """Tests for settings integration."""
    
    def test_create_when_settings_then_last_opened_recorded(self, settings, tmp_path):
        with Session(settings, backup_interval=0) as session:
            session.create_assignment("Lab", "Code", None, tmp_path / "lab")
        
        assert settings.get_last_opened_assignment() == (tmp_path / "lab" / "Lab.fht").resolve()
    
    def test_reopen_when_recorded_then_loaded(self, settings, tmp_path):
        with Session(settings, backup_interval=0) as session:
            session.create_assignment("Lab", "Code", None, tmp_path / "lab")
        
        with Session(SettingsStore(settings.path), backup_interval=0) as session:
            reopened = session.reopen_last_assignment()
            
            assert reopened is not None
            assert reopened.title == "Lab"
    
    def test_reopen_when_file_gone_then_none(self, settings, tmp_path):
        settings.set_last_opened_assignment(tmp_path / "gone.fht")
        
        with Session(settings) as session:
            assert session.reopen_last_assignment() is None
            assert not session.has_assignment
    
    def test_reopen_when_no_settings_then_none(self, session):
        assert session.reopen_last_assignment() is None
    
    def test_create_when_default_style_stored_then_used(self, settings, tmp_path):
        settings.set_default_style(FeedbackStyle("# ", "-", 2, "* "))
        
        with Session(settings, backup_interval=0) as session:
            a = session.create_assignment("Lab", "Code", None, tmp_path / "lab")
        
        assert a.style == FeedbackStyle("# ", "-", 2, "* ")
    
    def test_create_when_backups_enabled_then_first_save_backed_up(self, tmp_path):
        with Session(backup_interval=900) as session:
            session.create_assignment("Lab", "Code", None, tmp_path / "lab")
        
        assert len(list((tmp_path / "lab" / "backups").iterdir())) == 1
