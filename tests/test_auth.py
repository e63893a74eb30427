"""Authentication tests"""
from uuid import uuid4
import pytest

from pocket_trader.core.exceptions import AuthenticationException
from pocket_trader.services.auth import AuthService


def test_password_hashing():
    hashed = AuthService.get_password_hash("correct horse")
    
    assert hashed != "correct horse"
    assert AuthService.verify_password("correct horse", hashed)
    assert not AuthService.verify_password("wrong horse", hashed)


@pytest.mark.asyncio
async def test_token_round_trip(mock_settings):
    user_id = uuid4()
    token = AuthService.create_access_token({"sub": str(user_id), "email": "a@example.com"})
    
    token_data = await AuthService.verify_token(token)
    
    assert token_data.user_id == user_id


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(mock_settings):
    token = AuthService.create_refresh_token({"sub": str(uuid4())})
    
    with pytest.raises(AuthenticationException):
        await AuthService.verify_token(token, token_type="access")


@pytest.mark.asyncio
async def test_register_login_and_me(anonymous_client, mock_settings):
    credentials = {"email": "new@example.com", "password": "s3cret-pass"}
    
    registered = await anonymous_client.post("/api/v1/auth/register", json=credentials)
    duplicate = await anonymous_client.post("/api/v1/auth/register", json=credentials)
    login = await anonymous_client.post("/api/v1/auth/login", json=credentials)
    token = login.json()["access_token"]
    me = await anonymous_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    
    assert registered.status_code == 201
    assert duplicate.status_code == 400
    assert login.status_code == 200
    assert me.json()["email"] == "new@example.com"


@pytest.mark.asyncio
async def test_login_with_wrong_password(anonymous_client, mock_settings):
    credentials = {"email": "new@example.com", "password": "s3cret-pass"}
    await anonymous_client.post("/api/v1/auth/register", json=credentials)
    
    response = await anonymous_client.post(
        "/api/v1/auth/login", json={**credentials, "password": "wrong-pass"}
    )
    
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_user_routes_require_token(anonymous_client):
    response = await anonymous_client.get("/api/v1/alerts")
    
    assert response.status_code in (401, 403)
