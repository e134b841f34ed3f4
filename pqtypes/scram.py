"""Client side of a SCRAM (RFC 5802) SASL authentication exchange."""

import base64
import binascii
import hashlib
import hmac
import re
import secrets
from typing import Optional, Union

_NONCE_LENGTH = 16
_INTEGER = re.compile(rb"[+-]?[0-9]+")


class ScramError(Exception):
    """Raised when the SCRAM exchange fails."""


def _escape_user(user: str) -> str:
    return user.replace("=", "=3D").replace(",", "=2C")


class ScramClient:
    """A SCRAM-* client; ``hash_name`` is a hashlib name such as "sha256".

    Call ``step`` with each server message (empty for the first call) and
    send back what it returns, until ``done()`` is True.
    """

    def __init__(
        self,
        user: str,
        password: str,
        hash_name: str = "sha256",
        nonce: Union[bytes, str, None] = None,
    ) -> None:
        hashlib.new(hash_name)
        self._hash_name = hash_name
        self._user = user
        self._credential = password.encode("utf-8")
        if isinstance(nonce, str):
            nonce = nonce.encode("ascii")
        self._client_nonce: bytes = nonce or b""
        self._server_nonce = b""
        self._salted_key = bytes()
        self._auth_message = bytearray()
        self._step = 0
        self._error: Optional[ScramError] = None

    @property
    def error(self) -> Optional[ScramError]:
        """The error that ended the exchange, if any."""
        return self._error

    def done(self) -> bool:
        """Return True once the server's signature has been verified."""
        return self._step > 2 and self._error is None

    def step(self, incoming: bytes = b"") -> bytes:
        """Process a server message and return the next message to send."""
        if self._step > 2 or self._error is not None:
            raise ScramError("SCRAM exchange is already finished")
        self._step += 1
        handler = (self._step1, self._step2, self._step3)[self._step - 1]
        try:
            return handler(bytes(incoming))
        except ScramError as exc:
            self._error = exc
            raise

    def _step1(self, incoming: bytes) -> bytes:
        if not self._client_nonce:
            self._client_nonce = base64.b64encode(secrets.token_bytes(_NONCE_LENGTH))
        self._auth_message += b"n=" + _escape_user(self._user).encode("utf-8")
        self._auth_message += b",r=" + self._client_nonce
        return b"n,," + bytes(self._auth_message)

    def _step2(self, incoming: bytes) -> bytes:
        self._auth_message += b"," + incoming
        fields = incoming.split(b",")
        if len(fields) != 3:
            raise ScramError(
                "expected 3 fields in first SCRAM-SHA-256 server message, "
                f"got {len(fields)}: {incoming!r}"
            )
        nonce_field, salt_field, iter_field = fields
        if not nonce_field.startswith(b"r="):
            raise ScramError(f"server sent an invalid SCRAM-SHA-256 nonce: {nonce_field!r}")
        if not salt_field.startswith(b"s=") or len(salt_field) < 6:
            raise ScramError(f"server sent an invalid SCRAM-SHA-256 salt: {salt_field!r}")
        if not iter_field.startswith(b"i=") or len(iter_field) < 6:
            raise ScramError(
                f"server sent an invalid SCRAM-SHA-256 iteration count: {iter_field!r}"
            )

        self._server_nonce = nonce_field[2:]
        if not self._server_nonce.startswith(self._client_nonce):
            raise ScramError(
                "server SCRAM-SHA-256 nonce is not prefixed by client nonce: "
                f"got {self._server_nonce!r}, want {self._client_nonce!r}+\"...\""
            )
        try:
            salt = base64.b64decode(salt_field[2:], validate=True)
        except (binascii.Error, ValueError):
            raise ScramError(
                f"cannot decode SCRAM-SHA-256 salt sent by server: {salt_field!r}"
            ) from None
        if not _INTEGER.fullmatch(iter_field[2:]):
            raise ScramError(
                f"server sent an invalid SCRAM-SHA-256 iteration count: {iter_field!r}"
            )
        iterations = max(int(iter_field[2:]), 1)
        self._salted_key = hashlib.pbkdf2_hmac(
            self._hash_name, self._credential, salt, iterations
        )

        self._auth_message += b",c=biws,r=" + self._server_nonce
        return b"c=biws,r=" + self._server_nonce + b",p=" + self._client_proof()

    def _step3(self, incoming: bytes) -> bytes:
        fields = incoming.split(b",")
        is_verifier = len(fields) == 1 and fields[0].startswith(b"v=")
        is_error = len(fields) == 1 and fields[0].startswith(b"e=")
        if is_error:
            reason = fields[0][2:].decode("utf-8", "replace")
            raise ScramError(f"SCRAM-SHA-256 authentication error: {reason}")
        if not is_verifier:
            raise ScramError(
                f"unsupported SCRAM-SHA-256 final message from server: {incoming!r}"
            )
        signature = fields[0][2:]
        if not hmac.compare_digest(self._server_signature(), signature):
            raise ScramError(
                f"cannot authenticate SCRAM-SHA-256 server signature: {signature!r}"
            )
        return b""

    def _hmac(self, key: bytes, message: bytes) -> bytes:
        return hmac.new(key, message, self._hash_name).digest()

    def _client_proof(self) -> bytes:
        client_key = self._hmac(self._salted_key, b"Client Key")
        stored_key = hashlib.new(self._hash_name, client_key).digest()
        signature = self._hmac(stored_key, bytes(self._auth_message))
        proof = bytes(a ^ b for a, b in zip(client_key, signature))
        return base64.b64encode(proof)

    def _server_signature(self) -> bytes:
        server_key = self._hmac(self._salted_key, b"Server Key")
        return base64.b64encode(self._hmac(server_key, bytes(self._auth_message)))