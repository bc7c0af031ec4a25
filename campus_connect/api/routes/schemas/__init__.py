from campus_connect.api.routes.schemas.chat import ChatMessageCreate, ChatMessageOut, ChatStatusOut
from campus_connect.api.routes.schemas.events import (
    Coordinates,
    CustomField,
    EventCreate,
    EventOut,
    EventUpdate,
)
from campus_connect.api.routes.schemas.photos import PhotoGalleryOut, PhotoOut
from campus_connect.api.routes.schemas.registrations import (
    RegistrationCreate,
    RegistrationOut,
    RegistrationStatusOut,
)
from campus_connect.api.routes.schemas.users import PrincipalOut, UserCreate, UserOut, UserUpdate

__all__ = [
    "Coordinates",
    "CustomField",
    "EventCreate",
    "EventUpdate",
    "EventOut",
    "RegistrationCreate",
    "RegistrationOut",
    "RegistrationStatusOut",
    "PrincipalOut",
    "UserCreate",
    "UserUpdate",
    "UserOut",
    "ChatMessageCreate",
    "ChatMessageOut",
    "ChatStatusOut",
    "PhotoOut",
    "PhotoGalleryOut",
]
