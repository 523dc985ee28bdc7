"""인증 API 테스트: 회원가입, 로그인, 토큰 갱신, 로그아웃, /me.

Auth API tests: Registration, login, token refresh, logout and /me.
"""

from datetime import timedelta

from httpx import AsyncClient

from staffing.models.token import RefreshToken
from staffing.utils.jwt import _encode, create_refresh_token
from tests.conftest import PASSWORD, auth_header, count_rows, make_token

AUTH = "/api/v1/auth"


async def login(client: AsyncClient, email: str, password: str = PASSWORD):
    return await client.post(f"{AUTH}/login", json={"email": email, "password": password})


class TestRegister:
    """회원가입."""

    async def test_register_chef(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "newcook",
            "email": "newcook@staffing.io",
            "password": "cook1234",
            "role": "Chef",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["role"] == "Chef"
        assert data["is_available"] is True
        assert data["kitchen_id"] is None

        res = await login(client, "newcook@staffing.io", "cook1234")
        assert res.status_code == 200

    async def test_admin_role_rejected(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "sneaky",
            "email": "sneaky@staffing.io",
            "password": "cook1234",
            "role": "Admin",
        })
        assert res.status_code == 403

    async def test_duplicate_username(self, client: AsyncClient, chef):
        res = await client.post(f"{AUTH}/register", json={
            "username": "chef",
            "email": "another@staffing.io",
            "password": "cook1234",
            "role": "Driver",
        })
        assert res.status_code == 409

    async def test_duplicate_email(self, client: AsyncClient, chef):
        res = await client.post(f"{AUTH}/register", json={
            "username": "another",
            "email": "chef@staffing.io",
            "password": "cook1234",
            "role": "Driver",
        })
        assert res.status_code == 409

    async def test_unknown_role(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "someone",
            "email": "someone@staffing.io",
            "password": "cook1234",
            "role": "Manager",
        })
        assert res.status_code == 422

    async def test_short_password(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "username": "someone",
            "email": "someone@staffing.io",
            "password": "123",
            "role": "Chef",
        })
        assert res.status_code == 422


class TestLogin:
    """로그인."""

    async def test_login_success(self, client: AsyncClient, chef):
        res = await login(client, chef.email)
        assert res.status_code == 200
        data = res.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"] and data["refresh_token"]

    async def test_wrong_password(self, client: AsyncClient, chef):
        res = await login(client, chef.email, "wrong-password")
        assert res.status_code == 401

    async def test_unknown_email(self, client: AsyncClient):
        res = await login(client, "nobody@staffing.io")
        assert res.status_code == 401

    async def test_login_replaces_old_refresh_tokens(self, client: AsyncClient, db, chef):
        await login(client, chef.email)
        await login(client, chef.email)
        assert await count_rows(db, RefreshToken, user_id=chef.id) == 1


class TestRefreshAndLogout:
    """토큰 갱신과 로그아웃."""

    async def test_refresh_rotates_token(self, client: AsyncClient, chef):
        tokens = (await login(client, chef.email)).json()
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        new_tokens = res.json()
        assert new_tokens["refresh_token"] != tokens["refresh_token"]

        # 사용된 리프레시 토큰은 재사용 불가
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401

    async def test_unknown_refresh_token(self, client: AsyncClient, chef):
        token, _ = create_refresh_token({"sub": str(chef.id), "role": chef.role})
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": token})
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, db, chef):
        tokens = (await login(client, chef.email)).json()
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204
        assert await count_rows(db, RefreshToken, user_id=chef.id) == 0

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401


class TestCurrentUser:
    """/me 와 토큰 검증."""

    async def test_me(self, client: AsyncClient, chef_token, chef):
        res = await client.get(f"{AUTH}/me", headers=auth_header(chef_token))
        assert res.status_code == 200
        assert res.json()["username"] == "chef"

    async def test_me_without_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code in (401, 403)

    async def test_refresh_token_rejected_as_access(self, client: AsyncClient, chef):
        token, _ = create_refresh_token({"sub": str(chef.id), "role": chef.role})
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401

    async def test_expired_token(self, client: AsyncClient, chef):
        token, _ = _encode({"sub": str(chef.id)}, timedelta(minutes=-1), "access")
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401

    async def test_garbage_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_token_of_deleted_user(self, client: AsyncClient, db, chef):
        token = make_token(chef)
        await db.delete(chef)
        await db.commit()
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401
