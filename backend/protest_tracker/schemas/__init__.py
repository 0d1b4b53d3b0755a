from protest_tracker.schemas.organizer import (
    AnalyticsResponse,
    AuthResponse,
    FollowRequest,
    FollowResponse,
    OrganizerCreate,
    OrganizerLogin,
    OrganizerProfile,
    OrganizerPublic,
)
from protest_tracker.schemas.protest import (
    LikeRequest,
    LikeResponse,
    ProtestCreate,
    ProtestDeleteResponse,
    ProtestListItem,
    ProtestListResponse,
    ProtestResponse,
    ProtestUpdate,
)

__all__ = [
    "OrganizerCreate", "OrganizerLogin", "OrganizerPublic", "OrganizerProfile", "AuthResponse",
    "FollowRequest", "FollowResponse", "AnalyticsResponse",
    "ProtestCreate", "ProtestUpdate", "ProtestResponse", "ProtestListItem", "ProtestListResponse",
    "ProtestDeleteResponse", "LikeRequest", "LikeResponse",
]
