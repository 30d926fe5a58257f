class OrderLifecycleError(Exception):
    """Base for every rejection the lifecycle core reports to its caller."""


class TransitionRejectedError(OrderLifecycleError):
    """Raised before any change is made; the caller shows it as a validation error."""
    def __init__(self, current_status=None, target_status=None, message: str | None = None):
        self.current_status = getattr(current_status, "value", current_status)
        self.target_status = getattr(target_status, "value", target_status)
        super().__init__(message or f"Cannot move order from {self.current_status} to {self.target_status}")


class InvalidTransitionError(TransitionRejectedError):
    """Target status is not in the legal set for the current status."""


class MissingCancellationReasonError(TransitionRejectedError):
    """Cancellation was requested without a reason."""


class ShortcutNotAllowedError(TransitionRejectedError):
    """Order is already complete, cancelled, returned or refunded."""


class OrderNotFoundError(OrderLifecycleError):
    pass
