"""Authentication-related API endpoints."""

from ksef_client.api.endpoints.common import parse_datetime, parse_status, parsing_response
from ksef_client.api.http_client import AsyncHttpClient
from ksef_client.models.auth import (
    AuthenticationToken,
    AuthSession,
    AuthStatus,
    ChallengeContext,
    ContextIdentifier,
    Credential,
)


async def generate_challenge(http: AsyncHttpClient) -> ChallengeContext:
    """
    Request an authentication challenge.

    Args:
        http: Configured async HTTP client.

    Returns:
        Challenge and its issue timestamp.
    """
    response = await http.request("POST", "/auth/challenge")
    with parsing_response("/auth/challenge"):
        return ChallengeContext(
            challenge=response["challenge"],
            timestamp=parse_datetime(response["timestamp"]),
        )


async def submit_ksef_token(
    http: AsyncHttpClient,
    challenge: str,
    context_identifier: ContextIdentifier,
    encrypted_token: str,
) -> AuthSession:
    """
    Start authentication with an encrypted KSeF token.

    Args:
        http: Configured async HTTP client.
        challenge: Challenge from generate_challenge().
        context_identifier: Identity to authenticate for.
        encrypted_token: Base64 RSA-OAEP ciphertext of ``token|timestampMs``.

    Returns:
        The started authentication operation.
    """
    response = await http.request(
        "POST",
        "/auth/ksef-token",
        json={
            "challenge": challenge,
            "contextIdentifier": context_identifier.to_dict(),
            "encryptedToken": encrypted_token,
        },
    )
    with parsing_response("/auth/ksef-token"):
        auth_token = response["authenticationToken"]
        return AuthSession(
            reference_number=response["referenceNumber"],
            authentication_token=AuthenticationToken(
                token=auth_token["token"],
                valid_until=parse_datetime(auth_token.get("validUntil")),
            ),
        )


async def get_auth_status(
    http: AsyncHttpClient, reference_number: str, authentication_token: str
) -> AuthStatus:
    """Get the status of an authentication operation."""
    response = await http.request(
        "GET",
        f"/auth/{reference_number}",
        token=authentication_token,
    )
    with parsing_response(f"/auth/{reference_number}"):
        code, description, details = parse_status(response)
    return AuthStatus(code=code, description=description, details=details)


async def redeem_token(http: AsyncHttpClient, authentication_token: str) -> Credential:
    """Exchange a successful authentication token for access and refresh tokens."""
    response = await http.request(
        "POST",
        "/auth/token/redeem",
        json={},
        token=authentication_token,
    )
    with parsing_response("/auth/token/redeem"):
        access = response["accessToken"]
        refresh = response["refreshToken"]
        return Credential(
            access_token=access["token"],
            refresh_token=refresh["token"],
            access_valid_until=parse_datetime(access.get("validUntil")),
            refresh_valid_until=parse_datetime(refresh.get("validUntil")),
        )


async def refresh_access_token(http: AsyncHttpClient, credential: Credential) -> Credential:
    """
    Obtain a new access token using the refresh token.

    Returns:
        New credential; the refresh token is kept unless the server rotates it.
    """
    response = await http.request(
        "POST",
        "/auth/token/refresh",
        json={},
        token=credential.refresh_token,
    )
    with parsing_response("/auth/token/refresh"):
        access = response["accessToken"]
        refresh = response.get("refreshToken") or {}
        return Credential(
            access_token=access["token"],
            refresh_token=refresh.get("token", credential.refresh_token),
            access_valid_until=parse_datetime(access.get("validUntil")),
            refresh_valid_until=(
                parse_datetime(refresh.get("validUntil"))
                if refresh
                else credential.refresh_valid_until
            ),
        )
