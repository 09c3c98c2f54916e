import json
from datetime import datetime

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _json_default(obj):
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def success(data, status_code: int = 200):
    """Return an API Gateway response with `data` as the JSON body."""
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(data, default=_json_default),
    }


def error(message: str, status_code: int = 400):
    """Return an API Gateway response with an `{"error": message}` body."""
    return success({"error": message}, status_code=status_code)


def empty(status_code: int = 200):
    """Return a bodiless API Gateway response (preflight acks and server errors)."""
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": "",
    }
