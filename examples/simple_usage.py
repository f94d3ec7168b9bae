#!/usr/bin/env python3
"""
Simple example of running a signing request through the callback in-process.
"""
import jwt
from cryptography.hazmat.primitives.asymmetric import rsa

from cosigner_callback import CallbackHandler, KeyMaterial


def main():
    """
    Demonstrate the request/response cycle.

    This example shows how to:
    1. Build key material for both parties
    2. Sign an approval request as the co-signer would
    3. Verify the signed decision returned by the callback
    """
    cosigner_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    callback_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    handler = CallbackHandler(KeyMaterial(
        cosigner_public_key=cosigner_key.public_key(),
        signing_private_key=callback_key,
    ))

    claims = {
        "requestId": "example-request-1",
        "destinations": [{
            "amountNative": 0.01,
            "displayDstAddress": "0x5dC69B1Fbb13Bafd09af88a782F0F285772Ad5f8",
        }],
        "rawTx": [{
            "rawTx": "02ef0104843b9aca008506a0c1987d825208945dc69b1fbb13bafd09af88a782f0f285772ad5f8"
                     "872386f26fc1000080c0",
            "payload": "77b4e74099ce90c08503c0e0bb6e672dbe1c5e3e127ce333bf22eb581cd3f6ce",
        }],
    }
    request = jwt.encode(claims, cosigner_key, algorithm="RS256")

    status, body = handler.handle(request.encode("ascii"))
    print(f"HTTP {status}")
    print(f"Decision: {jwt.decode(body, callback_key.public_key(), algorithms=['RS256'])}")

    # Tamper with the amount: the callback rejects
    claims["destinations"][0]["amountNative"] = 0.02
    status, body = handler.handle(jwt.encode(claims, cosigner_key, algorithm="RS256").encode("ascii"))
    print(f"Tampered decision: {jwt.decode(body, callback_key.public_key(), algorithms=['RS256'])}")


if __name__ == "__main__":
    main()
