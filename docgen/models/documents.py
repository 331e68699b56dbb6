"""
Document Data Models - Projects, transcripts, generated documents and screens.

These models mirror the records held by the store. They are plain
dataclasses with ``to_record`` / ``from_record`` converters so that any
row or document store can hold them.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Union
from enum import Enum

from ..core.errors import ConfigurationError
from ..utils.id_generator import generate_uuid, utc_now


class DocumentType(Enum):
    """Documentation artifacts generated from meeting transcripts."""
    USER_STORIES = "user_stories"
    USER_FLOWS = "user_flows"
    CAHIER_CHARGES = "cahier_charges"
    SCREENS_PROMPTS = "screens_prompts"
    CHIFFRAGE = "chiffrage"  # Cost estimate, JSON instead of prose

    @classmethod
    def from_string(cls, value: str) -> 'DocumentType':
        """Parse a document type, accepting dashes and mixed case."""
        normalized = value.lower().strip().replace('-', '_')
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown document type: {value}. Available: {[t.value for t in cls]}"
            )

    @classmethod
    def resolve(cls, value: Union['DocumentType', str]) -> 'DocumentType':
        """Accept a member or its name; unknown names raise ConfigurationError."""
        if isinstance(value, cls):
            return value
        try:
            return cls.from_string(value)
        except ValueError as e:
            raise ConfigurationError(str(e))

    @property
    def is_structured(self) -> bool:
        """True when the generated content is JSON rather than markdown."""
        return self is DocumentType.CHIFFRAGE

    @property
    def label(self) -> str:
        return DOCUMENT_TYPE_LABELS[self]


DOCUMENT_TYPE_LABELS: Dict[DocumentType, str] = {
    DocumentType.USER_STORIES: "User Stories",
    DocumentType.USER_FLOWS: "User Flows",
    DocumentType.CAHIER_CHARGES: "Cahier des charges",
    DocumentType.SCREENS_PROMPTS: "Prompts écrans",
    DocumentType.CHIFFRAGE: "Chiffrage",
}


@dataclass
class Profile:
    """Account profile holding the credit balance (-1 = unlimited)."""
    id: str
    email: str = ""
    plan: str = "free"
    credits_remaining: int = 3

    @property
    def is_unlimited(self) -> bool:
        return self.credits_remaining == -1

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "plan": self.plan,
            "credits_remaining": self.credits_remaining,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Profile':
        return cls(
            id=record["id"],
            email=record.get("email", ""),
            plan=record.get("plan", "free"),
            credits_remaining=record.get("credits_remaining", 0),
        )


@dataclass
class Project:
    """A client project owned by one profile."""
    id: str
    user_id: str
    name: str
    description: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Project':
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            name=record["name"],
            description=record.get("description"),
        )


@dataclass
class Transcription:
    """Plain text extracted from one uploaded meeting transcript."""
    project_id: str
    content: str
    filename: str = ""
    id: str = field(default_factory=generate_uuid)
    uploaded_at: str = field(default_factory=utc_now)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "filename": self.filename,
            "content": self.content,
            "uploaded_at": self.uploaded_at,
        }


@dataclass
class GeneratedDocument:
    """
    A generated documentation artifact.

    At most one document exists per (project_id, type); generating again
    supersedes the previous one.
    """
    project_id: str
    type: DocumentType
    content: str
    id: str = field(default_factory=generate_uuid)
    generated_at: str = field(default_factory=utc_now)

    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = DocumentType.from_string(self.type)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "type": self.type.value,
            "content": self.content,
            "generated_at": self.generated_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'GeneratedDocument':
        return cls(
            id=record["id"],
            project_id=record["project_id"],
            type=record["type"],
            content=record["content"],
            generated_at=record.get("generated_at", ""),
        )


@dataclass
class ScreenRecord:
    """
    One screen section of a screens_prompts document.

    ``index`` is the section's position at parse time, not a stable
    identifier; ``content_hash`` fingerprints the section so callers can
    tell when an index now points at different content.
    """
    index: int
    name: str
    content: str
    content_hash: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "hash": self.content_hash,
        }


@dataclass
class ParsedScreen:
    """Screen recovered by the permissive parser."""
    name: str
    description: str = ""
    elements: List[str] = field(default_factory=list)
