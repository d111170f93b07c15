import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import feedback_helper
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from feedback_helper.assignment import AssignmentListener  # noqa: E402
from feedback_helper.core.models import FeedbackStyle  # noqa: E402


TITLE = "CS2101-P2"
HEADINGS_LIST = "Code\nReport quality\n\nOverall\n"
STUDENT_LIST = "090003554,Janey, 250001331, 112110331, \nmike_york12"


class RecordingListener(AssignmentListener):
    """Listener that records every event as (name, args)."""

    def __init__(self):
        self.events = []

    def __getattribute__(self, name):
        if name.startswith("handle_"):
            event = name[len("handle_"):]
            return lambda *args: self.events.append((event, args))
        return super().__getattribute__(name)

    def named(self, event):
        return [args for name, args in self.events if name == event]

    def clear(self):
        self.events.clear()


# Common test fixtures
@pytest.fixture
def assignment_dir(tmp_path: Path) -> Path:
    """Return a not-yet-created assignment directory."""
    return tmp_path / "marking"


@pytest.fixture
def student_list_file(tmp_path: Path) -> Path:
    """Create a student list file with five students."""
    path = tmp_path / "students.txt"
    path.write_text(STUDENT_LIST, encoding="utf-8")
    return path


@pytest.fixture
def bullet_style() -> FeedbackStyle:
    """Bullet style with an "=" underline under each heading."""
    return FeedbackStyle.normalized("", "=", 1, "•")


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def sample_assignment(assignment_dir, student_list_file, bullet_style, listener):
    """The CS2101-P2 assignment with five students, listener subscribed."""
    from feedback_helper.assignment import Assignment, EventBus

    events = EventBus()
    events.subscribe(listener)
    assignment = Assignment.create(
        TITLE, HEADINGS_LIST, student_list_file, assignment_dir, style=bullet_style, events=events
    )
    listener.clear()
    return assignment
