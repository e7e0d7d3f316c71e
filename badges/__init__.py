from .repository import BadgeRepository
from .service import BadgeService, badge_service
