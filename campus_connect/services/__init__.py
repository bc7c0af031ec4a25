from campus_connect.services.chat_service import chat_status, list_messages, send_message
from campus_connect.services.events_service import (
    create_event,
    delete_event,
    get_event,
    list_events,
    list_events_by_creator,
    update_event,
)
from campus_connect.services.photos_service import (
    delete_photo,
    list_photos,
    open_photo,
    upload_photo,
)
from campus_connect.services.registration_service import (
    get_attendees,
    get_registration_status,
    register_for_event,
    unregister_from_event,
)
from campus_connect.services.users_service import (
    create_user,
    get_user,
    get_user_by_email,
    list_user_registrations,
    update_user,
)

__all__ = [
    "create_event",
    "update_event",
    "delete_event",
    "get_event",
    "list_events",
    "list_events_by_creator",
    "register_for_event",
    "unregister_from_event",
    "get_registration_status",
    "get_attendees",
    "create_user",
    "get_user",
    "get_user_by_email",
    "update_user",
    "list_user_registrations",
    "list_messages",
    "send_message",
    "chat_status",
    "list_photos",
    "upload_photo",
    "open_photo",
    "delete_photo",
]
