from lending.models.user import User, Profile, ActivityLog
from lending.models.equipment import Equipment, Accessory
from lending.models.rental import Rental

__all__ = ['User', 'Profile', 'ActivityLog', 'Equipment', 'Accessory', 'Rental']
