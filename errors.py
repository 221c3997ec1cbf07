class ChecklistError(Exception):
    """Base class for errors raised by the checklist engine"""


class UnknownFieldPath(ChecklistError):
    def __init__(self, path: str):
        super().__init__(f"Unknown checklist field: {path}")
        self.path = path


class FieldValueError(ChecklistError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Invalid value for {path}: {detail}")
        self.path = path
        self.detail = detail


class StepOutOfRange(ChecklistError):
    def __init__(self, step: int, total: int, action: str):
        super().__init__(f"Cannot {action} from step {step} of {total}")
        self.step = step
        self.total = total
        self.action = action


class SubmissionInProgress(ChecklistError):
    def __init__(self):
        super().__init__("A submission is already in flight")


class ShapeValidationFailure(ChecklistError):
    """A required identifying field is missing from the assembled payload."""

    def __init__(self, field: str, step: int):
        super().__init__(f"{field} is required")
        self.field = field
        self.step = step


class TransportError(Exception):
    """Raised by a submit collaborator when the request itself fails."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WizardClosed(ChecklistError):
    def __init__(self):
        super().__init__("The inspection session has been submitted or discarded")
