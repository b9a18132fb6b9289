"""
Reminder schemas - query service responses and the per-reminder context.
"""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _QueryModel(BaseModel):
    """Query service responses use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class GeoLocation(_QueryModel):
    x: float = 0.0
    y: float = 0.0
    coordinates: list[float] = []
    type: str = ""


class VenueDetails(_QueryModel):
    name: str = ""
    address: str = ""
    online_link: str = ""
    location: GeoLocation | None = None

    @property
    def display(self) -> str:
        """Human-readable location: "name, address", or the online link."""
        physical = ", ".join(part for part in (self.name, self.address) if part)
        return physical or self.online_link


class SessionExtendedInfo(_QueryModel):
    """GET /v1/events/sessions/{id}/extended-info"""

    session_id: str
    event_id: str = ""
    event_title: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    sales_start_time: datetime | None = None
    status: str = ""
    session_type: str = ""
    venue_details: VenueDetails | None = None


class OrganizationInfo(_QueryModel):
    id: str = ""
    name: str = ""
    logo_url: str = ""


class CategoryInfo(_QueryModel):
    id: str = ""
    name: str = ""
    parent_name: str = ""


class TierInfo(_QueryModel):
    id: str = ""
    name: str = ""
    price: float = 0.0
    color: str = ""


class EventBasicInfo(_QueryModel):
    """GET /v1/events/{id}/basic-info"""

    id: str
    title: str = ""
    description: str = ""
    overview: str = ""
    cover_photos: list[str] = []
    organization: OrganizationInfo | None = None
    category: CategoryInfo | None = None
    tiers: list[TierInfo] = []


@dataclass
class SessionReminderContext:
    """
    Everything a reminder email needs about one session.

    Built fresh for every reminder and never stored. Event fields stay empty
    when the event lookup fails.
    """

    session_id: str
    event_id: str = ""
    event_title: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    sales_start_time: datetime | None = None
    status: str = ""
    session_type: str = ""
    venue: VenueDetails | None = None
    event_description: str = ""
    event_overview: str = ""
    cover_photos: list[str] = field(default_factory=list)
    organization_name: str = ""
    organization_logo: str = ""
    category_name: str = ""

    @classmethod
    def from_session(cls, session: SessionExtendedInfo) -> "SessionReminderContext":
        return cls(
            session_id=session.session_id,
            event_id=session.event_id,
            event_title=session.event_title,
            start_time=session.start_time,
            end_time=session.end_time,
            sales_start_time=session.sales_start_time,
            status=session.status,
            session_type=session.session_type,
            venue=session.venue_details,
        )

    def enrich(self, event: EventBasicInfo) -> None:
        """Fill event-level fields from the event lookup."""
        if event.title:
            self.event_title = event.title
        self.event_description = event.description
        self.event_overview = event.overview
        self.cover_photos = list(event.cover_photos)
        if event.organization and event.organization.name:
            self.organization_name = event.organization.name
            self.organization_logo = event.organization.logo_url
        if event.category and event.category.name:
            self.category_name = event.category.name

    @property
    def venue_display(self) -> str:
        return self.venue.display if self.venue else ""
