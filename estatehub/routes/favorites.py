"""
Favorite Routes - all endpoints require authentication
"""

from flask import Blueprint
from flask_login import current_user, login_required

from ..api_responses import success_response
from ..services.favorite_service import FavoriteService

favorites_bp = Blueprint("favorites", __name__, url_prefix="/api/favorites")


@favorites_bp.before_request
@login_required
def require_login():
    """Protect every favorites endpoint"""


@favorites_bp.route("", methods=["GET"])
def list_favorites():
    favorites = FavoriteService.list_favorites(current_user._get_current_object())
    return success_response(favorites, count=len(favorites))


@favorites_bp.route("/<property_id>", methods=["POST"])
def add_favorite(property_id):
    favorite = FavoriteService.add_favorite(current_user._get_current_object(), property_id)
    return success_response(favorite, message="Property added to favorites", status_code=201)


@favorites_bp.route("/<property_id>", methods=["DELETE"])
def remove_favorite(property_id):
    FavoriteService.remove_favorite(current_user._get_current_object(), property_id)
    return success_response(message="Property removed from favorites")


@favorites_bp.route("/check/<property_id>", methods=["GET"])
def check_favorite(property_id):
    is_favorite = FavoriteService.is_favorite(current_user._get_current_object(), property_id)
    return success_response({"isFavorite": is_favorite}, extra={"isFavorite": is_favorite})
