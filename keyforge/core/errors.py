"""Error taxonomy for key material operations.

Every failure raised by the core is a subclass of KeyforgeError and
carries a message naming the step that failed (for example
"init pkcs8 rsa private key failed"). The originating library exception,
when there is one, is chained with ``raise ... from``.

None of these conditions are transient: retrying with identical input
cannot succeed.
"""


class KeyforgeError(Exception):
    """Base class for key material failures."""
    pass


class InvalidKeyEncoding(KeyforgeError):
    """Key bytes are malformed, not UTF-8 (PEM), or do not match the declared format."""
    pass


class EncodingFailure(KeyforgeError):
    """A key could not be serialized into the requested format."""
    pass


class Unsupported(KeyforgeError):
    """Algorithm or parameter has no meaning in the requested role."""

    def __init__(self, subject: str, reason: str | None = None):
        self.subject = subject
        message = f"unsupported: {subject}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EncryptionFailure(KeyforgeError):
    """The encryption primitive rejected the operation."""
    pass


class DecryptionFailure(KeyforgeError):
    """The decryption primitive rejected the operation."""
    pass


class SerializationFailure(KeyforgeError):
    """JSON / JWK construction failed."""
    pass


class KeySizeInvalid(KeyforgeError):
    """RSA key size missing or outside the supported tiers."""
    pass


class SignatureInvalid(KeyforgeError):
    """A JWS is malformed, uses a disallowed algorithm, or fails verification."""
    pass
