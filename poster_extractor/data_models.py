"""
Data models for competition poster metadata.
"""

import re
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


UNKNOWN = "Tidak Diketahui"


class TeamType(str, Enum):
    """Participation type of a competition."""
    INDIVIDU = "Individu"
    KELOMPOK = "Kelompok"
    INDIVIDU_KELOMPOK = "Individu/Kelompok"
    TIDAK_DIKETAHUI = UNKNOWN


class CompetitionStatus(str, Enum):
    """Whether a competition is held online, offline or both."""
    DARING = "Daring"
    LURING = "Luring"
    HYBRID = "Hybrid"
    TIDAK_DIKETAHUI = UNKNOWN


# Field labels keyed by the camelCase field names used on the wire and in the UI.
LABELS: Dict[str, str] = {
    "competitionName": "Nama Kompetisi",
    "category": "Bidang Lomba",
    "registrationDeadline": "Deadline Pendaftaran",
    "registrationDeadlineIso": "Deadline (ISO)",
    "eventDate": "Tanggal Pelaksanaan",
    "eventDateIso": "Tanggal (ISO)",
    "cost": "Biaya",
    "teamType": "Jenis Lomba",
    "status": "Status Lomba",
    "location": "Lokasi Lomba",
    "broadcastMessage": "Pesan Broadcast",
    "link": "Link Guidebook/Pendaftaran",
}

METADATA_KEYS: List[str] = list(LABELS)

# ISO fields are only used for calendar links and stay hidden in the form.
DISPLAY_KEYS: List[str] = [
    "competitionName",
    "category",
    "registrationDeadline",
    "eventDate",
    "cost",
    "teamType",
    "status",
    "location",
    "link",
    "broadcastMessage",
]

MULTILINE_KEYS = frozenset({"broadcastMessage"})

_DATE_SEPARATORS = re.compile(r"[-/.\s]")
_LEADING_DATE = re.compile(r"\d{8}")


class PosterMetadata(BaseModel):
    """Metadata extracted from one competition poster."""

    model_config = ConfigDict(populate_by_name=True)

    competition_name: str = Field(..., alias="competitionName", description="Competition name")
    category: str = Field(..., alias="category", description="Competition field or category")
    registration_deadline: str = Field("", alias="registrationDeadline",
                                       description="Registration deadline as printed")
    registration_deadline_iso: str = Field("", alias="registrationDeadlineIso",
                                           description="Registration deadline as YYYYMMDD")
    event_date: str = Field("", alias="eventDate", description="Event date as printed")
    event_date_iso: str = Field("", alias="eventDateIso", description="Event date as YYYYMMDD")
    cost: str = Field("", alias="cost", description="Registration fee")
    team_type: str = Field(TeamType.TIDAK_DIKETAHUI.value, alias="teamType",
                           description="Individual or team competition")
    status: str = Field(..., alias="status", description="Online, offline or hybrid")
    location: str = Field("", alias="location", description="City or 'Daring'")
    broadcast_message: str = Field(..., alias="broadcastMessage",
                                   description="Promotional broadcast message")
    link: str = Field("", alias="link", description="Registration or guidebook link")

    @field_validator(
        "competition_name", "category", "registration_deadline", "event_date",
        "cost", "location", "broadcast_message", "link",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("registration_deadline_iso", "event_date_iso", mode="before")
    @classmethod
    def normalize_iso_date(cls, v):
        # Sentinels and unparseable dates become "", ranges keep their start date.
        if v is None:
            return ""
        if not isinstance(v, str):
            v = str(v)
        match = _LEADING_DATE.match(_DATE_SEPARATORS.sub("", v.strip()))
        return match.group(0) if match else ""

    @field_validator("team_type", mode="before")
    @classmethod
    def unknown_team_type(cls, v):
        return UNKNOWN if v is None or v == "" else v

    @field_validator("team_type")
    @classmethod
    def validate_team_type(cls, v):
        return TeamType(v).value

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return CompetitionStatus(v).value

    def get(self, key: str) -> str:
        """Return the value of a field by its camelCase key."""
        return self.to_dict()[key]

    def with_field(self, key: str, value: str) -> "PosterMetadata":
        """Return a copy with one field replaced, without re-validation."""
        name = FIELD_NAMES[key]
        return self.model_copy(update={name: value})

    def to_dict(self) -> Dict[str, str]:
        """Convert to a camelCase dictionary for JSON serialization."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> "PosterMetadata":
        """Create PosterMetadata from a (camelCase) dictionary."""
        return cls.model_validate(data)


FIELD_NAMES: Dict[str, str] = {
    field.alias: name for name, field in PosterMetadata.model_fields.items()
}
