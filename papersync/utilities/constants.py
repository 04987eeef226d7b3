from typing import Final

DAY_NAMES: Final[tuple[str, ...]] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
DAY_OFFSETS: Final[dict[str, int]] = {name: i for i, name in enumerate(DAY_NAMES)}

# Month names for note headings; fixed so output never depends on the process locale
MONTH_NAMES: Final[tuple[str, ...]] = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)

GENERAL_TASKS_SUBJECT: Final[str] = "General Tasks"
ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"
WEEK_ID_PATTERN: Final[str] = r"^\d{4}-W\d{2}$"

# eSCL defaults (US Letter at 300dpi bounds)
DEFAULT_RESOLUTIONS: Final[tuple[int, ...]] = (75, 150, 300, 600)
DEFAULT_COLOR_MODES: Final[tuple[str, ...]] = ("color", "grayscale")
DEFAULT_DOCUMENT_FORMATS: Final[tuple[str, ...]] = ("application/pdf", "image/jpeg")
DEFAULT_MAX_WIDTH: Final[int] = 2550
DEFAULT_MAX_HEIGHT: Final[int] = 3300
DEFAULT_MIN_WIDTH: Final[int] = 16
DEFAULT_MIN_HEIGHT: Final[int] = 16
SCAN_REGION_WIDTH: Final[int] = 2480
SCAN_REGION_HEIGHT: Final[int] = 3507
ESCL_NAMESPACE: Final[str] = "http://schemas.hp.com/imaging/escl/2011/05/03"
PWG_NAMESPACE: Final[str] = "http://www.pwg.org/schemas/2010/12/sm"

DEFAULT_SUBJECTS: Final[list[dict[str, str]]] = [
    {"id": "1", "name": "Chemistry"},
    {"id": "2", "name": "Literature"},
    {"id": "3", "name": "Mathematics"},
    {"id": "4", "name": "Physics"},
]
DEFAULT_APP_CONFIG: Final[dict] = {
    "vaultPath": "",
    "vaultAccessMethod": "local",
    "aiProvider": "google",
    "subjectsPerDay": 4,
}
