"""
Error envelope for CRM API boundary failures and HTTP errors raised by routes
"""

import uuid
import logging
from typing import Optional, Union
from datetime import datetime
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Upstream statuses that are meaningful to the browser as-is
PASSTHROUGH_STATUSES = (400, 404, 409)

class ErrorContext:
    """Context object for tracking error information across the request lifecycle"""

    def __init__(self, request: Request):
        self.request_id = str(uuid.uuid4())
        self.request = request
        self.endpoint = str(request.url.path)
        self.method = request.method
        self.client_ip = self._get_client_ip()
        self.user_agent = request.headers.get("user-agent")
        self.timestamp = datetime.utcnow()

    def _get_client_ip(self) -> Optional[str]:
        """Extract client IP from request headers"""
        if "x-forwarded-for" in self.request.headers:
            return self.request.headers["x-forwarded-for"].split(",")[0].strip()
        elif "x-real-ip" in self.request.headers:
            return self.request.headers["x-real-ip"]
        elif self.request.client:
            return self.request.client.host
        return None

class BoundaryError(Exception):
    """The CRM API could not be reached, answered non-2xx, or sent malformed JSON"""
    def __init__(self, message: str, status_code: Optional[int] = None, operation: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        self.message = message
        self.status_code = status_code
        self.operation = operation
        self.original_error = original_error
        super().__init__(self.message)

class ErrorHandler:
    """Centralized error handling service"""

    @staticmethod
    def status_for(error: Union[HTTPException, BoundaryError]) -> int:
        """HTTP status to answer the browser with"""
        if isinstance(error, HTTPException):
            return error.status_code
        if error.status_code in PASSTHROUGH_STATUSES:
            return error.status_code
        return 502

    @staticmethod
    def create_error_response(
        error_context: ErrorContext,
        error: Union[HTTPException, BoundaryError],
    ) -> JSONResponse:
        """Create a standardized error response"""
        status_code = ErrorHandler.status_for(error)

        error_data = {
            "error": {
                "code": ErrorHandler._get_error_code(status_code),
                "message": ErrorHandler._get_user_friendly_message(error),
                "request_id": error_context.request_id,
                "timestamp": error_context.timestamp.isoformat(),
                "endpoint": error_context.endpoint,
                "method": error_context.method
            }
        }

        # Log the error with full context
        ErrorHandler._log_error(error_context, error, status_code)

        return JSONResponse(
            status_code=status_code,
            content=error_data,
            headers=getattr(error, "headers", None)
        )

    @staticmethod
    def _get_error_code(status_code: int) -> str:
        """Upstream failures share one code; everything else is named after its status"""
        if status_code == 502:
            return "UPSTREAM_ERROR"
        return f"HTTP_{status_code}"

    @staticmethod
    def _get_user_friendly_message(error: Union[HTTPException, BoundaryError]) -> str:
        if isinstance(error, HTTPException):
            return error.detail
        return error.message

    @staticmethod
    def _log_error(error_context: ErrorContext, error: Exception, status_code: int):
        """Log error with comprehensive context"""
        level = logging.WARNING if status_code < 500 else logging.ERROR
        logger.log(
            level,
            f"Error {error_context.request_id}: {type(error).__name__} in {error_context.method} {error_context.endpoint}",
            extra={
                "request_id": error_context.request_id,
                "endpoint": error_context.endpoint,
                "method": error_context.method,
                "status_code": status_code,
                "client_ip": error_context.client_ip,
                "user_agent": error_context.user_agent,
                "error_type": type(error).__name__,
                "error_message": str(error),
                "operation": getattr(error, "operation", None),
            }
        )

async def boundary_error_handler(request: Request, exc: BoundaryError) -> JSONResponse:
    """Exception handler registered on the app for BoundaryError"""
    return ErrorHandler.create_error_response(ErrorContext(request), exc)

async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Exception handler registered on the app for HTTPException raised by routes and dependencies"""
    return ErrorHandler.create_error_response(ErrorContext(request), exc)
