"""Shared helpers for API tests."""


async def register(client, username: str, password: str = "password_123") -> dict:
    """Register an account and return the {user, token} body.

    Clears the client's cookie jar afterwards so later requests only
    authenticate the way the test says they do.
    """
    r = await client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        },
    )
    assert r.status_code == 201, r.text
    client.cookies.clear()
    return r.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
