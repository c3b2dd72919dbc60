class DomainException(Exception):
    pass


class ValidationError(DomainException):
    pass


class UnavailableError(DomainException):
    pass


class ExecutionError(DomainException):
    pass


class UnknownOperationError(DomainException):
    pass
