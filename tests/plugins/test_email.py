# tests/plugins/test_email.py

"""
'email' 플러그인 통합 테스트 모듈입니다.

실제 SMTP 대신 sent_emails 픽스처가 smtp_send 를 가로챕니다.
"""

import smtplib

import pytest
from httpx import AsyncClient

from fba.plugins.email import services as email_services

from tests.conftest import API, body

EMAIL = f"{API}/email"


@pytest.mark.asyncio
async def test_send_records_and_delivers(admin_client: AsyncClient, sent_emails):
    response = await admin_client.post(f"{EMAIL}/send", json={
        "to": "user@example.com", "subject": "안내", "content": "본문",
    })
    assert response.status_code == 200
    payload = body(response)
    assert payload["msg"] == "邮件已加入发送队列"
    assert payload["data"]["status"] == 0

    assert sent_emails == [{"to": "user@example.com", "subject": "안내", "content": "본문", "is_html": False}]

    record = body(await admin_client.get(f"{EMAIL}/records/{payload['data']['id']}"))["data"]
    assert record["status"] == 1
    assert record["send_time"] is not None
    assert record["error_msg"] is None


@pytest.mark.asyncio
async def test_send_failure_is_recorded(admin_client: AsyncClient, monkeypatch):
    def broken_smtp_send(config, to, subject, content, is_html=False):
        raise smtplib.SMTPException("connection refused")

    monkeypatch.setattr(email_services, "smtp_send", broken_smtp_send)
    response = await admin_client.post(f"{EMAIL}/send", json={
        "to": "user@example.com", "subject": "안내", "content": "본문",
    })
    record_id = body(response)["data"]["id"]

    record = body(await admin_client.get(f"{EMAIL}/records/{record_id}"))["data"]
    assert record["status"] == 2
    assert record["error_msg"] == "connection refused"


@pytest.mark.asyncio
async def test_send_validation(admin_client: AsyncClient):
    response = await admin_client.post(f"{EMAIL}/send", json={"to": "not-an-email", "subject": "s", "content": "c"})
    assert response.status_code == 422
    assert body(response)["msg"] == "收件人邮箱格式不正确"


@pytest.mark.asyncio
@pytest.mark.parametrize("to", ["o'brien@example.com", "user@例え.jp"])
async def test_send_accepts_apostrophe_and_idn_recipients(admin_client: AsyncClient, sent_emails, to):
    response = await admin_client.post(f"{EMAIL}/send", json={"to": to, "subject": "안내", "content": "본문"})
    assert response.status_code == 200
    assert sent_emails[0]["to"] == to


@pytest.mark.asyncio
async def test_send_template(admin_client: AsyncClient, sent_emails):
    response = await admin_client.post(f"{EMAIL}/send-template", json={
        "to": "new@example.com", "template": "welcome", "data": {"username": "<b>kim</b>"},
    })
    assert response.status_code == 200
    [sent] = sent_emails
    assert sent["subject"] == "[welcome] 通知"
    assert sent["is_html"] is True
    assert "&lt;b&gt;kim&lt;/b&gt;，欢迎加入！" in sent["content"]


@pytest.mark.asyncio
async def test_send_template_errors(admin_client: AsyncClient, sent_emails):
    response = await admin_client.post(f"{EMAIL}/send-template", json={"to": "a@example.com", "template": "nope"})
    assert response.status_code == 400
    assert body(response)["msg"] == "模板错误: 模板 nope 不存在"

    # 필요한 변수가 빠진 경우
    response = await admin_client.post(f"{EMAIL}/send-template", json={"to": "a@example.com", "template": "welcome"})
    assert response.status_code == 400
    assert body(response)["msg"].startswith("模板错误: ")
    assert sent_emails == []


@pytest.mark.asyncio
async def test_smtp_connection_check(admin_client: AsyncClient, sent_emails, monkeypatch):
    smtp_in = {
        "host": "smtp.example.com", "port": 587, "username": "bot@example.com",
        "password": "pw", "test_to": "ops@example.com",
    }
    response = await admin_client.post(f"{EMAIL}/test-smtp", json=smtp_in)
    assert body(response) == {"code": 200, "msg": "SMTP配置测试成功"}
    assert sent_emails[0]["to"] == "ops@example.com"

    def broken_smtp_send(config, to, subject, content, is_html=False):
        raise OSError("timed out")

    monkeypatch.setattr(email_services, "smtp_send", broken_smtp_send)
    response = await admin_client.post(f"{EMAIL}/test-smtp", json=smtp_in)
    assert response.status_code == 502
    assert body(response) == {"code": 502, "msg": "SMTP错误: timed out"}


@pytest.mark.asyncio
async def test_records_page_filters(admin_client: AsyncClient, sent_emails):
    for to in ("a@example.com", "b@example.com"):
        await admin_client.post(f"{EMAIL}/send", json={"to": to, "subject": "s", "content": "c"})

    data = body(await admin_client.get(f"{EMAIL}/records", params={"to_email": "b@"}))["data"]
    assert data["total"] == 1
    assert data["items"][0]["to_email"] == "b@example.com"

    data = body(await admin_client.get(f"{EMAIL}/records", params={"status": 1}))["data"]
    assert data["total"] == 2
