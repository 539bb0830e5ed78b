"""Fixed key material used to verify init data.

Telegram publishes its Ed25519 keys as 32-byte hex strings in the RFC 8032
wire form: the y coordinate little-endian, with the parity of x stored in
the top bit of the last byte. Importing a key splits that encoding into an
(x parity, big-endian y) point, checks the point lies on the curve and
re-encodes it for PyNaCl.
"""

from dataclasses import dataclass

from nacl.signing import VerifyKey

from .errors import KeyImportError


# HMAC key used to derive the per-bot secret from the bot token
WEB_APP_DATA = b"WebAppData"

PRODUCTION_PUBLIC_KEY_HEX = "e7bf03a2fa4602af4580703d88dda5bb59f32ed8b02a56c187fe7d34caed242d"
TEST_PUBLIC_KEY_HEX = "40055058a4ee38156a06562e52eece92a771bcd8346a8c4615cb7376eddf72ec"

KEY_LENGTH = 32

# Curve25519 field prime and the Edwards curve constant d
_P = 2**255 - 19
_D = -121665 * pow(121666, _P - 2, _P) % _P
_SQRT_M1 = pow(2, (_P - 1) // 4, _P)


@dataclass(frozen=True)
class EdPoint:
    """An Edwards25519 point given by the parity of x and the y coordinate."""
    x_odd: bool
    y: int

    @classmethod
    def from_wire(cls, raw: bytes) -> "EdPoint":
        """Split a 32-byte little-endian encoding into (x parity, y)."""
        if len(raw) != KEY_LENGTH:
            raise KeyImportError(f"Ed25519 public key must be {KEY_LENGTH} bytes, got {len(raw)}")
        x_odd = (raw[-1] >> 7) == 1
        big_endian = bytearray(reversed(raw))
        big_endian[0] &= 0x7F  # parity bit is not part of y
        return cls(x_odd=x_odd, y=int.from_bytes(big_endian, "big"))

    def to_bytes(self) -> bytes:
        encoded = bytearray(self.y.to_bytes(KEY_LENGTH, "little"))
        if self.x_odd:
            encoded[-1] |= 0x80
        return bytes(encoded)

    def recover_x(self) -> int:
        """Recover the x coordinate (RFC 8032, section 5.1.3)."""
        y = self.y
        if y >= _P:
            raise KeyImportError("Ed25519 point y coordinate is out of range")
        x2 = (y * y - 1) * pow(_D * y * y + 1, _P - 2, _P) % _P
        if x2 == 0:
            if self.x_odd:
                raise KeyImportError("Ed25519 point has x = 0 with odd parity")
            return 0
        x = pow(x2, (_P + 3) // 8, _P)
        if (x * x - x2) % _P != 0:
            x = x * _SQRT_M1 % _P
        if (x * x - x2) % _P != 0:
            raise KeyImportError("Ed25519 point is not on the curve")
        if (x & 1) != self.x_odd:
            x = _P - x
        return x


def import_ed25519_public_key(hex_key: str) -> VerifyKey:
    """Import a hex-encoded Ed25519 public key into a PyNaCl VerifyKey."""
    try:
        raw = bytes.fromhex(hex_key)
    except ValueError as exc:
        raise KeyImportError(f"Ed25519 public key is not valid hex: {hex_key!r}") from exc
    point = EdPoint.from_wire(raw)
    point.recover_x()
    return VerifyKey(point.to_bytes())


PRODUCTION_PUBLIC_KEY = import_ed25519_public_key(PRODUCTION_PUBLIC_KEY_HEX)
TEST_PUBLIC_KEY = import_ed25519_public_key(TEST_PUBLIC_KEY_HEX)


def public_key_for(test_environment: bool) -> VerifyKey:
    return TEST_PUBLIC_KEY if test_environment else PRODUCTION_PUBLIC_KEY
