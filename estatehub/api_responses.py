"""
API Response Utilities - Standardized envelopes for every endpoint
"""

from flask import jsonify
import structlog

logger = structlog.get_logger('api_responses')


# API Error Codes
class ErrorCode:
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"


DEFAULT_MESSAGES = {
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.VALIDATION_ERROR: "Invalid request parameters",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
    ErrorCode.UNAUTHORIZED: "Not authorized to access this route",
    ErrorCode.FORBIDDEN: "Access forbidden",
    ErrorCode.CONFLICT: "Resource conflict",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded",
}


def success_response(data=None, message=None, status_code=200, count=None, from_cache=None, extra=None):
    """
    Standard success response format for API endpoints

    `count` is added for collection payloads and `fromCache` for reads
    served through the cache-aside path. `extra` keys are copied to the
    top level for clients that read them outside the envelope.
    """
    response = {"code": ErrorCode.SUCCESS, "success": True}

    if count is not None:
        response["count"] = count

    if data is not None:
        response["data"] = data

    if from_cache is not None:
        response["fromCache"] = from_cache

    if message:
        response["message"] = message

    if extra:
        response.update(extra)

    return jsonify(response), status_code


def error_response(error_code=ErrorCode.INTERNAL_ERROR, message=None, details=None, status_code=400):
    """
    Standard error response format for API endpoints
    """
    response = {
        "code": error_code,
        "success": False,
        "message": message or DEFAULT_MESSAGES.get(error_code, "Request failed"),
    }

    if details:
        response["details"] = details

    if error_code == ErrorCode.INTERNAL_ERROR:
        logger.error(f"{error_code}: {response['message']} | Details: {details}")

    return jsonify(response), status_code


def unauthorized_response():
    return error_response(ErrorCode.UNAUTHORIZED, status_code=401)
