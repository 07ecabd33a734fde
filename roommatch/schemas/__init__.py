from roommatch.schemas.conversation import (
    ConversationCreate,
    ConversationRead,
    ConversationWithParticipant,
    MessageCreate,
    MessageRead,
    ParticipantSummary,
)
from roommatch.schemas.match import CategoryScoreRead, MatchDetails, MatchFilters, MatchResult
from roommatch.schemas.profile import UserProfile, UserProfileUpdate
from roommatch.schemas.property import Property, PropertyCreate, PropertyFilters
from roommatch.schemas.user import Token, TokenData, UserCreate, UserLogin, UserRead, UserUpdate

__all__ = [
    "CategoryScoreRead",
    "ConversationCreate",
    "ConversationRead",
    "ConversationWithParticipant",
    "MatchDetails",
    "MatchFilters",
    "MatchResult",
    "MessageCreate",
    "MessageRead",
    "ParticipantSummary",
    "Property",
    "PropertyCreate",
    "PropertyFilters",
    "Token",
    "TokenData",
    "UserCreate",
    "UserLogin",
    "UserProfile",
    "UserProfileUpdate",
    "UserRead",
    "UserUpdate",
]
