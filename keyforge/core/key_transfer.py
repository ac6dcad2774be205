"""Key Transfer Pipeline.

Re-encodes an existing key pair from one AsymmetricKeyFormat to another
without touching the key material. Private and public sides are
independent: an absent side yields an empty buffer, a requested side that
fails raises.
"""

from typing import NamedTuple

from keyforge.core.key_codec import AsymmetricKeyFormat, KeyFormatCodec, key_codec
from keyforge.core.logging import get_logger, log_operation

logger = get_logger(__name__)


class KeyTuple(NamedTuple):
    """Ordered (private, public) result; b"" marks a side that was not requested."""
    private_key: bytes
    public_key: bytes


@log_operation("transfer key")
def transfer_key(
    private_key: bytes | None,
    public_key: bytes | None,
    from_format: AsymmetricKeyFormat,
    to_format: AsymmetricKeyFormat,
    codec: KeyFormatCodec = key_codec,
) -> KeyTuple:
    """Re-encode a private and/or public key from ``from_format`` to ``to_format``.

    Raises:
        InvalidKeyEncoding: a supplied side does not decode in ``from_format``.
        EncodingFailure: a supplied side cannot be written in ``to_format``.
    """
    from_format = AsymmetricKeyFormat(from_format)
    to_format = AsymmetricKeyFormat(to_format)
    logger.info(
        "transfer key",
        from_format=from_format.value,
        to_format=to_format.value,
        has_private=private_key is not None,
        has_public=public_key is not None,
    )

    private_out = b""
    if private_key is not None:
        current = codec.decode_private_key(private_key, from_format)
        with codec.encode_private_key(current, to_format) as encoded:
            private_out = bytes(encoded)

    public_out = b""
    if public_key is not None:
        current = codec.decode_public_key(public_key, from_format)
        public_out = codec.encode_public_key(current, to_format)

    return KeyTuple(private_out, public_out)
