"""imgix URL signatures.

imgix verifies a signed URL by recomputing an MD5 digest over the secret
token followed by the encoded path and query string of the request::

    s = md5(secret + "/" + encoded_path + "?" + encoded_query).hexdigest()

The ``"?" + encoded_query`` part is omitted when the URL has no parameters.
The digest is 32 lowercase hex characters and is appended as the final
``s`` query parameter.  Changing any of this breaks interoperability with
the rendering API.
"""

from __future__ import annotations

import hashlib

from .parameters import SIGNATURE_KEY

SIGNATURE_LENGTH = 32


def signature_base(secret: str, encoded_path: str, encoded_query: str) -> str:
    """Return the string that is hashed to produce the signature."""
    base = f"{secret}/{encoded_path}"
    if encoded_query:
        base += f"?{encoded_query}"
    return base


def sign(secret: str, encoded_path: str, encoded_query: str) -> str:
    """Compute the hex signature for an encoded path and query.

    Args:
        secret: The source's secure URL token.
        encoded_path: Percent-encoded path without its leading slash.
        encoded_query: Percent-encoded query string without ``?`` (may be
            empty).

    Returns:
        Lowercase hex MD5 digest.
    """
    base = signature_base(secret, encoded_path, encoded_query)
    return hashlib.md5(base.encode("utf-8")).hexdigest()


def append_signature(encoded_query: str, signature: str) -> str:
    """Append the signature after the sorted parameter block."""
    token = f"{SIGNATURE_KEY}={signature}"
    return f"{encoded_query}&{token}" if encoded_query else token
