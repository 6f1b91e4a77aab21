"""
Domain Models for the Agency Portal

These are pure data models with no Streamlit dependencies.
Persisted rows are pydantic models (one per table); in-memory working state
such as calibration points and tactics board entities are dataclasses.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Dict, Any, Tuple
from pydantic import BaseModel, Field


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states"""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContractStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class SignerParty(str, Enum):
    """Who fills a signature field"""
    OWNER = "owner"
    COUNTERPARTY = "counterparty"


class FieldType(str, Enum):
    TEXT = "text"
    DATE = "date"
    SIGNATURE = "signature"
    INITIALS = "initials"
    CHECKBOX = "checkbox"


class ItemType(str, Enum):
    """Tokens that can be dropped on the tactics board"""
    FOOTBALL = "football"
    X = "x"
    O = "o"


class Tool(str, Enum):
    """Tactics board tools"""
    SELECT = "select"
    DRAW = "draw"
    ERASE = "erase"
    ARROW = "arrow"


# ---------------------------------------------------------------------------
# Persisted rows
# ---------------------------------------------------------------------------

class ClubMarker(BaseModel):
    """A club's plotted position on the stylized scouting map"""
    id: str
    club_name: str
    country: Optional[str] = None
    city: Optional[str] = None
    x_position: Optional[float] = None
    y_position: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_calibration_point: bool = False

    @property
    def has_position(self) -> bool:
        return self.x_position is not None and self.y_position is not None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Player(BaseModel):
    id: str
    name: str
    position: Optional[str] = None
    club: Optional[str] = None
    nationality: Optional[str] = None
    age: Optional[int] = None
    bio: Optional[str] = None
    instagram_handle: Optional[str] = None
    phone: Optional[str] = None
    # Already computed upstream; displayed as-is
    r90_score: Optional[float] = None
    performance_action_score: Optional[float] = None
    is_visible: bool = True


class Invoice(BaseModel):
    id: str
    player_id: str
    invoice_number: str
    invoice_date: date
    due_date: date
    amount: float
    currency: str = "EUR"
    status: InvoiceStatus = InvoiceStatus.PENDING
    description: Optional[str] = None
    pdf_url: Optional[str] = None
    created_at: Optional[datetime] = None


class Job(BaseModel):
    id: str
    title: str
    department: str
    location: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class Partner(BaseModel):
    id: str
    name: str
    category: str
    description: Optional[str] = None
    website_url: Optional[str] = None
    logo_url: Optional[str] = None
    display_order: int = 0
    case_study_title: Optional[str] = None
    case_study_content: Optional[str] = None
    case_study_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Goal(BaseModel):
    """Quarterly staff goal"""
    id: str
    title: str
    target_value: float
    current_value: float = 0.0
    unit: str
    color: str = "primary"
    quarter: str = Field(pattern=r"^Q[1-4]$")
    year: int
    display_order: int = 0

    @property
    def progress_pct(self) -> float:
        if self.target_value <= 0:
            return 0.0
        return max(0.0, min(100.0, round(self.current_value / self.target_value * 100, 1)))


class Task(BaseModel):
    id: str
    title: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    category: Optional[str] = None
    display_order: int = 0


class Translation(BaseModel):
    id: str
    page_name: str
    text_key: str
    english: str
    spanish: Optional[str] = None
    portuguese: Optional[str] = None
    french: Optional[str] = None
    german: Optional[str] = None
    italian: Optional[str] = None
    polish: Optional[str] = None
    czech: Optional[str] = None
    russian: Optional[str] = None
    turkish: Optional[str] = None


LANGUAGES: List[str] = [
    "english", "spanish", "portuguese", "french", "german",
    "italian", "polish", "czech", "russian", "turkish",
]


class SignatureContract(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    file_url: str
    file_name: str
    status: ContractStatus = ContractStatus.DRAFT
    owner_field_values: Optional[Dict[str, str]] = None


class SignatureField(BaseModel):
    id: str
    contract_id: str
    field_type: FieldType
    label: str
    page_number: int = 1
    x_position: float = 0.0
    y_position: float = 0.0
    width: float = 0.0
    height: float = 0.0
    signer_party: SignerParty = SignerParty.COUNTERPARTY
    display_order: int = 0


class SignatureSubmission(BaseModel):
    id: str
    contract_id: str
    signer_name: str
    signer_email: str
    field_values: Dict[str, str] = Field(default_factory=dict)
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None


class EventCategory(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    MEETING = "meeting"
    TRAINING = "training"


class ReportStatus(str, Enum):
    """Review state of a scouting report"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CalendarEvent(BaseModel):
    """Entry on a staff member's schedule.

    Ongoing events repeat: every week on ``day_of_week`` (0 = Sunday) or,
    without a weekday, every day.
    """
    id: str
    staff_id: str
    event_date: date
    title: str
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    event_type: str = "personal"
    category: EventCategory = EventCategory.WORK
    is_ongoing: bool = False
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    created_at: Optional[datetime] = None


class CoachingItem(BaseModel):
    """Row in one of the coaching library tables.

    Kind-specific columns (duration, sets, equipment ...) are all optional
    here; COACHING_KINDS in services.coaching says which ones a kind uses.
    """
    id: str
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    duration: Optional[str] = None
    weeks: Optional[int] = None
    setup: Optional[str] = None
    equipment: Optional[str] = None
    players_required: Optional[int] = None
    sets: Optional[int] = None
    reps: Optional[str] = None
    rest_time: Optional[str] = None
    analysis_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ScoutingReport(BaseModel):
    id: str
    player_name: str
    scouting_date: date
    position: Optional[str] = None
    current_club: Optional[str] = None
    nationality: Optional[str] = None
    overall_rating: Optional[float] = None
    location: Optional[str] = None
    competition: Optional[str] = None
    match_context: Optional[str] = None
    video_url: Optional[str] = None
    full_match_url: Optional[str] = None
    scout_name: Optional[str] = None
    summary: Optional[str] = None
    recommendation: Optional[str] = None
    auto_generated_review: Optional[str] = None
    skill_evaluations: Dict[str, Any] = Field(default_factory=dict)
    status: ReportStatus = ReportStatus.PENDING
    # Represented player the report is attached to, if any
    linked_player_id: Optional[str] = None
    created_at: Optional[datetime] = None


class PerformanceReport(BaseModel):
    """Per-fixture analysis of a represented player (table player_analysis)"""
    id: str
    player_id: str
    fixture_id: str
    analysis_date: Optional[date] = None
    opponent: Optional[str] = None
    result: Optional[str] = None
    minutes_played: int = Field(gt=0)
    r90_score: Optional[float] = None
    striker_stats: Optional[Dict[str, float]] = None
    created_at: Optional[datetime] = None


class PerformanceAction(BaseModel):
    id: str
    analysis_id: str
    action_number: int
    minute: Optional[float] = None
    action_score: Optional[float] = None
    action_type: Optional[str] = None
    action_description: Optional[str] = None
    notes: Optional[str] = None


class Clip(BaseModel):
    name: str
    video_url: Optional[str] = None
    order: int


class Playlist(BaseModel):
    """Ordered clip list a player builds from their highlight clips"""
    id: str
    player_id: str
    name: str
    clips: List[Clip] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class NotificationEvent(BaseModel):
    id: str
    event_type: str
    title: str
    body: str
    event_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Working state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CalibrationPoint:
    """Reference point with both geographic and pixel coordinates"""
    lat: float
    lng: float
    x: float
    y: float


@dataclass(frozen=True)
class AxisFit:
    """1-D least-squares line: output = slope * input + intercept"""
    slope: float
    intercept: float
    r2: float = 1.0

    def predict(self, value: float) -> float:
        return self.slope * value + self.intercept


@dataclass(frozen=True)
class LinearTransform:
    """Longitude -> x and latitude -> y, fitted independently"""
    x_fit: AxisFit
    y_fit: AxisFit

    def transform(self, lat: float, lng: float) -> Tuple[float, float]:
        return self.x_fit.predict(lng), self.y_fit.predict(lat)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        return (
            max(self.min_x, min(self.max_x, x)),
            max(self.min_y, min(self.max_y, y)),
        )

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass
class PlannedPosition:
    marker_id: str
    club_name: str
    x: float
    y: float


@dataclass
class CalibrationPlan:
    """Positions computed by a calibration run; nothing is written yet"""
    transform: LinearTransform
    bounds: Bounds
    reference_count: int
    positions: List[PlannedPosition] = field(default_factory=list)
    country: Optional[str] = None


@dataclass
class Point:
    x: float
    y: float


@dataclass
class DroppedItem:
    id: str
    type: ItemType
    x: float
    y: float


@dataclass
class Arrow:
    id: str
    start_x: float
    start_y: float
    end_x: float
    end_y: float


@dataclass
class DrawPath:
    id: str
    points: List[Point] = field(default_factory=list)


@dataclass
class BoardSnapshot:
    """Full drawing state captured before a mutating action"""
    items: List[DroppedItem]
    arrows: List[Arrow]
    paths: List[DrawPath]
