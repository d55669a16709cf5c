"""
Domain Exceptions for the Navigator service

All business-logic errors derive from NavigatorError.
Capacity exhaustion is deliberately absent: the model client reports it
as a ModelResult status and the orchestrators degrade instead of raising.
"""


class NavigatorError(Exception):
    """Base exception for every navigator business-logic error"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        """Serialize for an API response body"""
        body = {
            "message": self.message,
            "code": self.__class__.__name__,
        }
        if "errors" in self.details:
            body["errors"] = self.details["errors"]
        return body


# =============================================================================
# Caller errors
# =============================================================================

class InvalidInput(NavigatorError):
    """Malformed or out-of-range caller-supplied data"""

    def __init__(self, message: str, errors: list = None):
        details = {"errors": errors} if errors is not None else {}
        super().__init__(message=message, details=details)


class NotFound(NavigatorError):
    """Referenced entity does not exist"""

    entity = "Entity"

    def __init__(self, entity_id):
        super().__init__(
            message=f"{self.entity} not found",
            details={"id": str(entity_id)}
        )


class GoalNotFound(NotFound):
    entity = "Goal"


class ConversationNotFound(NotFound):
    entity = "Conversation"


class DecisionNotFound(NotFound):
    entity = "Decision"


# =============================================================================
# Upstream and storage failures
# =============================================================================

class ChatFailed(NavigatorError):
    """Model invocation for a chat turn failed for a reason other than capacity"""

    def __init__(self, reason: str = None):
        super().__init__(
            message="Failed to process chat message",
            details={"reason": reason} if reason else {}
        )


class DecisionAnalysisFailed(NavigatorError):
    """Structured analysis failed (upstream error or malformed output)"""

    def __init__(self, reason: str = None):
        super().__init__(
            message="Failed to analyze decision",
            details={"reason": reason} if reason else {}
        )


class GatewayFailure(NavigatorError):
    """Persistence layer error"""

    def __init__(self, operation: str):
        super().__init__(
            message="Storage operation failed",
            details={"operation": operation}
        )


# =============================================================================
# HTTP Status Mapping
# =============================================================================

EXCEPTION_TO_STATUS = {
    InvalidInput: 400,
    NotFound: 404,
    GoalNotFound: 404,
    ConversationNotFound: 404,
    DecisionNotFound: 404,
    ChatFailed: 500,
    DecisionAnalysisFailed: 500,
    GatewayFailure: 500,
}
