"""
Unit Tests for Application Paths
"""

from pathlib import Path

from feedback_helper.config import paths


class TestAppDataDir:
    """Tests for get_app_data_dir/get_settings_path."""
    
    def test_app_data_dir_when_env_override_then_used(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FEEDBACK_HELPER_HOME", str(tmp_path))
        
        assert paths.get_app_data_dir() == tmp_path
        assert paths.get_settings_path() == tmp_path / "settings.json"
    
    def test_app_data_dir_when_linux_then_local_share(self, monkeypatch):
        monkeypatch.delenv("FEEDBACK_HELPER_HOME", raising=False)
        monkeypatch.setattr(paths.platform, "system", lambda: "Linux")
        
        assert paths.get_app_data_dir() == Path.home() / ".local/share" / "Feedback Helper"
    
    def test_app_data_dir_when_macos_then_application_support(self, monkeypatch):
        monkeypatch.delenv("FEEDBACK_HELPER_HOME", raising=False)
        monkeypatch.setattr(paths.platform, "system", lambda: "Darwin")
        
        assert paths.get_app_data_dir() == Path.home() / "Library/Application Support" / "Feedback Helper"
    
    def test_app_data_dir_when_windows_then_local_app_data(self, monkeypatch, tmp_path):
        monkeypatch.delenv("FEEDBACK_HELPER_HOME", raising=False)
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
        monkeypatch.setattr(paths.platform, "system", lambda: "Windows")
        
        assert paths.get_app_data_dir() == tmp_path / "Feedback Helper"
