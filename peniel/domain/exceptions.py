class DomainException(Exception):
    pass


class ContentNotFoundException(DomainException):
    def __init__(self, kind: str, content_id: str) -> None:
        super().__init__(f"{kind} with ID {content_id} not found")
        self.kind = kind
        self.content_id = content_id


class UnknownContentKeyException(DomainException):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown site content key: {key}")
        self.key = key


class UnauthorizedAccessException(DomainException):
    def __init__(self, resource: str, reason: str | None = None) -> None:
        super().__init__(f"Not authorized to access {resource}: {reason or 'denied'}")
        self.resource = resource
        self.reason = reason


class InvalidCredentialsException(DomainException):
    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class StorageException(DomainException):
    def __init__(self, bucket: str, reason: str) -> None:
        super().__init__(f"Storage error in bucket {bucket}: {reason}")
        self.bucket = bucket
        self.reason = reason


class EmailConfigurationException(DomainException):
    def __init__(self) -> None:
        super().__init__("Missing required environment variables for email sending.")


class EmailDeliveryException(DomainException):
    def __init__(self, message: str) -> None:
        super().__init__(f"Email delivery error: {message}")
