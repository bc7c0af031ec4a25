from campus_connect.models.base import Base
from campus_connect.models.chat_message import ChatMessage
from campus_connect.models.event import Event
from campus_connect.models.photo import Photo
from campus_connect.models.registration import Registration
from campus_connect.models.user import User

__all__ = ["Base", "Event", "Registration", "User", "ChatMessage", "Photo"]
