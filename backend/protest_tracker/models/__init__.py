from protest_tracker.models.organizer import Organizer
from protest_tracker.models.protest import Protest

__all__ = ["Organizer", "Protest"]
