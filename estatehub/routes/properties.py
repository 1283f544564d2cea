"""
Property Routes - listing CRUD and search
"""

from flask import Blueprint, request
from flask_login import current_user, login_required

from ..api_responses import success_response
from ..services.property_service import PropertyService

properties_bp = Blueprint("properties", __name__, url_prefix="/api/properties")


@properties_bp.route("", methods=["GET"])
def list_properties():
    properties, from_cache = PropertyService.list_properties()
    return success_response(properties, count=len(properties), from_cache=from_cache)


@properties_bp.route("/search", methods=["GET"])
def search_properties():
    properties, from_cache = PropertyService.search_properties(request.args)
    return success_response(properties, count=len(properties), from_cache=from_cache)


@properties_bp.route("/<property_id>", methods=["GET"])
def get_property(property_id):
    data, from_cache = PropertyService.get_property(property_id)
    return success_response(data, from_cache=from_cache)


@properties_bp.route("", methods=["POST"])
@login_required
def create_property():
    data = PropertyService.create_property(current_user._get_current_object(), request.get_json(silent=True))
    return success_response(data, status_code=201)


@properties_bp.route("/<property_id>", methods=["PUT"])
@login_required
def update_property(property_id):
    data = PropertyService.update_property(
        current_user._get_current_object(), property_id, request.get_json(silent=True)
    )
    return success_response(data)


@properties_bp.route("/<property_id>", methods=["DELETE"])
@login_required
def delete_property(property_id):
    data = PropertyService.delete_property(current_user._get_current_object(), property_id)
    return success_response(data)
