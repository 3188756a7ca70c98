"""
jobbot/models/user.py

Purpose: User record model

- Current dialogue state
- Profile answers (first/last name)
- Job preferences and registered channels
- Reserved job list (persisted, never written by the dialogue)
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

from jobbot.flow.states import UserState, parse_state


class UserRecord(BaseModel):
    """
    Persisted onboarding progress for one chat user.
    
    Serialized with the camelCase keys of the user document
    ({"state": "", "firstName": ..., "channels": [], "jobs": []}).
    """
    state: UserState = UserState.NEW
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    preferences: List[str] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)
    jobs: List[Any] = Field(default_factory=list)
    
    @field_validator("state", mode="before")
    @classmethod
    def coerce_state(cls, v):
        return parse_state(v)
    
    @field_validator("channels")
    @classmethod
    def dedupe_channels(cls, v):
        """Channels behave as a set; first occurrence wins, order is kept."""
        return list(dict.fromkeys(v))
    
    @classmethod
    def from_document(cls, document: Optional[Dict[str, Any]]) -> "UserRecord":
        """
        Builds a record from a stored document, filling defaults for
        missing keys. None or an empty document yields a fresh record.
        """
        return cls.model_validate(document or {})
    
    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
    
    def has_channel(self, channel: str) -> bool:
        return channel in self.channels
    
    class Config:
        populate_by_name = True
        extra = "ignore"
