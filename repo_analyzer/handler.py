"""
AWS Lambda entrypoint for the repository analyzer

API Gateway / Function URL events are translated to ASGI by Mangum and
served by the same FastAPI app used locally.
"""

import logging
from typing import Any, Dict, Optional

from mangum import Mangum

from repo_analyzer.main import app

logger = logging.getLogger(__name__)

# Built once per Lambda execution environment; the record cache lives as long as it does
asgi_handler = Mangum(app, lifespan="off")


def lambda_handler(event: Optional[Dict[str, Any]], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda entrypoint.

    Args:
        event: HTTP event from API Gateway (REST or HTTP API) or a Function URL
        context: Lambda context object

    Returns:
        API Gateway-compatible response dictionary
    """
    event = event or {}
    if "requestContext" not in event:
        logger.error("Lambda invoked without an HTTP event")
        return {
            "statusCode": 400,
            "body": '{"message": "Unsupported event"}',
            "headers": {"content-type": "application/json"},
        }

    return asgi_handler(event, context)
