# tests/domains/test_usr_n.py

"""
'usr' 도메인 (사용자 프로필) API 엔드포인트에 대한 통합 테스트 모듈입니다.
인증서 서명에 쓰이는 이름/이메일/서명 이미지 URL의 등록과 조회를 검증합니다.
"""

import pytest
from httpx import AsyncClient

from app.domains.usr import models as usr_models

API_PREFIX = "/api/v1/usr"


@pytest.mark.asyncio
async def test_create_user_profile(client: AsyncClient):
    user_data = {
        "uid": "tech-001",
        "name": "Tom Technician",
        "email": "tom@acme.test",
    }
    response = await client.post(f"{API_PREFIX}/users", json=user_data)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["uid"] == "tech-001"
    assert data["role"] == "technician"
    assert data["signature_url"] is None


@pytest.mark.asyncio
async def test_create_user_profile_duplicate_uid(client: AsyncClient, test_engineer: usr_models.User):
    """[실패] 이미 등록된 uid로 생성하면 400을 반환합니다."""
    response = await client.post(f"{API_PREFIX}/users", json={"uid": "eng-001"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_read_user_profiles_by_role(
    client: AsyncClient, test_engineer: usr_models.User, test_manager: usr_models.User
):
    response = await client.get(f"{API_PREFIX}/users", params={"role": "manager"})
    assert response.status_code == 200
    assert [u["uid"] for u in response.json()] == ["mgr-001"]

    response = await client.get(f"{API_PREFIX}/users/eng-001")
    assert response.status_code == 200
    assert response.json()["name"] == "Grace Engineer"


@pytest.mark.asyncio
async def test_update_signature_url(client: AsyncClient, test_manager: usr_models.User):
    """[성공] 서명 이미지 URL을 등록하면 이후 인증서에 사용됩니다."""
    response = await client.patch(
        f"{API_PREFIX}/users/mgr-001", json={"signature_url": "https://cdn.acme.test/sig-mgr.png"}
    )
    assert response.status_code == 200
    assert response.json()["signature_url"] == "https://cdn.acme.test/sig-mgr.png"
    assert response.json()["email"] == "manager@acme.test"


@pytest.mark.asyncio
async def test_user_profile_not_found(client: AsyncClient):
    response = await client.get(f"{API_PREFIX}/users/nobody")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"

    response = await client.patch(f"{API_PREFIX}/users/nobody", json={"name": "X"})
    assert response.status_code == 404
