"""
Models package

- user.py: registered accounts
- property.py: listings and their amenity/tag rows
- favorite.py: user <-> property favorites
"""

from .user import User
from .property import Property, PropertyAmenity, PropertyTag
from .favorite import Favorite

__all__ = [
    "User",
    "Property",
    "PropertyAmenity",
    "PropertyTag",
    "Favorite",
]
