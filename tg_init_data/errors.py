"""Exception hierarchy for init data validation and parsing.

Every error raised by this package derives from InitDataError so callers
can catch the whole family, or a single kind when they need to react to it.
"""


class InitDataError(Exception):
    """Base class for all init data failures."""


class ArgumentInvalidError(InitDataError, ValueError):
    """A required argument was None or blank."""

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f'Argument "{argument}" is null or empty')


class PropertyMissingError(InitDataError):
    """A required property is absent from a payload or an entity."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f'Property "{name}" is missing')


class SignatureMissingError(PropertyMissingError):
    """The hash or signature field needed for verification is absent."""

    @classmethod
    def of_hash(cls) -> "SignatureMissingError":
        return cls("hash")

    @classmethod
    def of_signature(cls) -> "SignatureMissingError":
        return cls("signature")


class AuthDateMissingError(PropertyMissingError):
    def __init__(self):
        super().__init__("auth_date")


class AuthDateInvalidError(InitDataError):
    """auth_date is present but is not a base-10 integer."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"auth_date is invalid: {raw!r}")


class ExpiredError(InitDataError):
    def __init__(self, auth_date: int, expires_at: float, now: float):
        self.auth_date = auth_date
        self.expires_at = expires_at
        self.now = now
        super().__init__(
            f"initData is expired, auth_date {auth_date} expired at "
            f"{expires_at:.0f} but now is {now:.0f}"
        )


class SignatureInvalidError(InitDataError):
    """The computed hash or the Ed25519 verification did not match.

    The message never says where the mismatch is.
    """

    @classmethod
    def of_hash(cls) -> "SignatureInvalidError":
        return cls("The calculated initData hash does not match the provided one")

    @classmethod
    def of_signature(cls) -> "SignatureInvalidError":
        return cls("initData signature not verified")


class NumericFieldInvalidError(InitDataError, ValueError):
    def __init__(self, field: str, raw: str | None):
        self.field = field
        self.raw = raw
        super().__init__(f"Unable to parse {field}: {raw!r}")


class JsonParseError(InitDataError):
    """A nested JSON field could not be decoded into its entity."""

    def __init__(self, entity: type, detail: str = ""):
        self.entity = entity
        message = f"Unable to parse {entity.__name__}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class JsonPropertyMissingError(PropertyMissingError):
    def __init__(self, entity: type, name: str):
        self.entity = entity
        super().__init__(
            name,
            f'Required property "{name}" is not provided or null ({entity.__name__})',
        )


class KeyImportError(InitDataError, ValueError):
    """An embedded Ed25519 public key could not be imported."""
