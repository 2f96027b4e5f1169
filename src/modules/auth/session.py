"""Session cookie carrying the signed token."""

import base64
import binascii
import json

from fastapi import Request, Response

# Cookie configuration
SESSION_COOKIE_NAME = "session"
SESSION_COOKIE_PATH = "/"


class SessionCarrier:
    """Moves a session token in and out of a cookie.

    The cookie value is base64-encoded JSON (``{"jwt": <token>}``). It is
    not encrypted: the token is already signed, and confidentiality comes
    from the transport, so ``secure`` must stay on outside test and
    development.
    """

    def __init__(self, cookie_name: str = SESSION_COOKIE_NAME, *, secure: bool = True) -> None:
        """Initialize the carrier.

        Args:
            cookie_name: Name of the session cookie.
            secure: Whether the cookie is restricted to HTTPS.
        """
        self.cookie_name = cookie_name
        self.secure = secure

    def encode(self, token: str) -> str:
        """Wrap a token into a cookie value."""
        envelope = json.dumps({"jwt": token}, separators=(",", ":"))
        encoded = base64.urlsafe_b64encode(envelope.encode("utf-8")).decode("ascii")
        # Padding is dropped so the value needs no cookie quoting
        return encoded.rstrip("=")

    def decode(self, value: str | None) -> str | None:
        """Unwrap a cookie value into a token.

        Returns:
            The token, or None when the value is absent, empty or malformed.
        """
        if not value:
            return None

        try:
            padded = value + "=" * (-len(value) % 4)
            envelope = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (binascii.Error, UnicodeError, ValueError):
            return None

        if not isinstance(envelope, dict):
            return None

        token = envelope.get("jwt")
        if not isinstance(token, str) or not token:
            return None
        return token

    def clear(self) -> str:
        """Return the empty carrier value."""
        return ""

    def read(self, request: Request) -> str | None:
        """Get the token from a request's session cookie, if any."""
        return self.decode(request.cookies.get(self.cookie_name))

    def attach(self, response: Response, token: str) -> None:
        """Set the session cookie holding ``token`` on a response."""
        response.set_cookie(
            key=self.cookie_name,
            value=self.encode(token),
            path=SESSION_COOKIE_PATH,
            httponly=True,  # Prevent JavaScript access
            samesite="lax",  # CSRF protection
            secure=self.secure,
        )

    def detach(self, response: Response) -> None:
        """Overwrite the session cookie with an empty, expired value."""
        response.set_cookie(
            key=self.cookie_name,
            value=self.clear(),
            max_age=0,
            expires=0,
            path=SESSION_COOKIE_PATH,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
