#!/usr/bin/env python3
"""
Key Rotation Example
====================

Shows how to retire a signing secret without invalidating the tokens that
were already handed out, and how to re-sign them under the new secret.

Usage:
    python key_rotation_demo.py
"""

from datetime import timedelta

from signet import InvalidSignature, MessageVerifier


def main():
    """Demonstrate rotation, purpose binding and expiry."""

    print("=== Key Rotation Demo ===\n")

    # Tokens issued last year with the old secret and digest
    legacy = MessageVerifier("old-secret", digest="SHA1")
    old_token = legacy.generate({"user_id": 42}, purpose="session")
    print(f"🔑 Old token: {old_token}")

    # Today's verifier signs with a new secret but still accepts the old one
    verifier = MessageVerifier("new-secret", digest="SHA256")
    verifier.rotate("old-secret", digest="SHA1")

    def resign():
        print("♻️  Token used a retired secret, issuing a fresh one")

    session = verifier.verify(old_token, purpose="session", on_rotation=resign)
    new_token = verifier.generate(session, purpose="session", expires_in=timedelta(days=7))
    print(f"✅ Session restored for user {session['user_id']}")
    print(f"🔑 New token: {new_token}\n")

    # Purpose binding: a session token is not a password reset token
    print("🔒 PURPOSE BINDING:")
    try:
        verifier.verify(new_token, purpose="password-reset")
    except InvalidSignature:
        print("❌ Rejected token presented for the wrong purpose")

    # Non-raising variant
    print(f"🔎 verified() on junk: {verifier.verified('not-a-token')}")

    print("\n✅ Key rotation demo completed!")


if __name__ == "__main__":
    main()
