from models.users import User, AuthProvider
from models.sessions import UserSession
from models.locals import Local, Review
from models.attractions import TouristAttraction

__all__ = ["User", "AuthProvider", "UserSession", "Local", "Review", "TouristAttraction"]
