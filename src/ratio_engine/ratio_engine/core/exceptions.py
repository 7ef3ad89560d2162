class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a child, classroom, staff member or assignment does not exist."""

    code = "NOT_FOUND"


class ConflictError(DomainError):
    """Raised when an operation would open a second active record for a subject."""

    code = "CONFLICT"


class AlreadyCheckedInError(ConflictError):
    code = "ALREADY_CHECKED_IN"


class AlreadySignedInError(ConflictError):
    code = "ALREADY_SIGNED_IN"


class StaffAlreadyAssignedError(ConflictError):
    code = "STAFF_ALREADY_ASSIGNED"


class PreconditionFailedError(DomainError):
    """Raised when an operation needs an active record that does not exist."""

    code = "PRECONDITION_FAILED"


class NotAssignedError(PreconditionFailedError):
    code = "NOT_ASSIGNED"


class NotCheckedInError(PreconditionFailedError):
    code = "NOT_CHECKED_IN"


class NotSignedInError(PreconditionFailedError):
    code = "NOT_SIGNED_IN"
