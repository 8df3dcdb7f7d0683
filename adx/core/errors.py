from __future__ import annotations


class AdxError(Exception):
    pass


class InvalidOperationError(AdxError):
    def __init__(self, attribute: str, operation: str):
        self.attribute = attribute
        self.operation = operation
        super().__init__(f"cannot {operation} constructed attribute '{attribute}'")


class ConstraintViolationError(AdxError, ValueError):
    def __init__(self, attribute: str, message: str = "This attribute cannot have multiple values"):
        self.attribute = attribute
        super().__init__(f"{message} ({attribute})")


class SchemaBuildError(AdxError):
    pass


class ReferralLimitExceededError(SchemaBuildError):
    def __init__(self, *, base: str, filter: str, pages_read: int):
        self.base = base
        self.filter = filter
        self.pages_read = pages_read
        super().__init__(
            f"Maximum number of referrals reached (base={base!r} filter={filter!r} pages_read={pages_read})"
        )


class SchemaRecordError(AdxError, ValueError):
    pass


class ConfigurationError(AdxError):
    pass
