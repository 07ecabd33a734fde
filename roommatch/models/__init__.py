# __init__.py
from roommatch.models.conversation import Conversation
from roommatch.models.message import Message
from roommatch.models.profile import UserProfileModel
from roommatch.models.property import PropertyListing
from roommatch.models.user import User

__all__ = [
	"Conversation",
	"Message",
	"PropertyListing",
	"User",
	"UserProfileModel",
]
