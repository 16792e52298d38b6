"""
Tests for NotificationChannel delivery semantics
"""

import pytest

from snoo_oauth.oauth import AuthEvent, NotificationChannel


@pytest.mark.asyncio
async def test_listeners_run_in_registration_order():
    channel = NotificationChannel()
    order: list[str] = []

    async def second(payload):
        order.append(f"b:{payload}")

    channel.subscribe(AuthEvent.ACCESS_TOKEN_REFRESHED, lambda p: order.append(f"a:{p}"))
    channel.subscribe(AuthEvent.ACCESS_TOKEN_REFRESHED, second)
    channel.subscribe("access_token_refreshed", lambda p: order.append(f"c:{p}"))

    delivered = await channel.emit(AuthEvent.ACCESS_TOKEN_REFRESHED, "tok")

    assert delivered == 3
    assert order == ["a:tok", "b:tok", "c:tok"]


@pytest.mark.asyncio
async def test_each_listener_called_once_per_emission():
    channel = NotificationChannel()
    calls: list[str] = []
    channel.subscribe(AuthEvent.ACCESS_TOKEN_EXPIRED, calls.append)
    await channel.emit(AuthEvent.ACCESS_TOKEN_EXPIRED, "x")
    await channel.emit(AuthEvent.ACCESS_TOKEN_REFRESHED, "y")
    assert calls == ["x"]


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery():
    channel = NotificationChannel()
    calls: list[str] = []
    unsubscribe = channel.subscribe(AuthEvent.ACCESS_TOKEN_EXPIRED, calls.append)
    assert channel.listener_count(AuthEvent.ACCESS_TOKEN_EXPIRED) == 1
    unsubscribe()
    unsubscribe()  # idempotent
    assert await channel.emit(AuthEvent.ACCESS_TOKEN_EXPIRED, "x") == 0
    assert calls == []


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    channel = NotificationChannel(owner="web-key")
    calls: list[str] = []

    def broken(_payload):
        raise RuntimeError("boom")

    channel.subscribe(AuthEvent.ACCESS_TOKEN_REFRESHED, broken)
    channel.subscribe(AuthEvent.ACCESS_TOKEN_REFRESHED, calls.append)
    delivered = await channel.emit(AuthEvent.ACCESS_TOKEN_REFRESHED, "tok")
    assert delivered == 1
    assert calls == ["tok"]


@pytest.mark.asyncio
async def test_listener_may_unsubscribe_during_delivery():
    channel = NotificationChannel()
    calls: list[str] = []
    holder = {}

    def once(payload):
        calls.append(payload)
        holder["unsub"]()

    holder["unsub"] = channel.subscribe(AuthEvent.ACCESS_TOKEN_REFRESHED, once)
    channel.subscribe(AuthEvent.ACCESS_TOKEN_REFRESHED, calls.append)
    await channel.emit(AuthEvent.ACCESS_TOKEN_REFRESHED, "1")
    await channel.emit(AuthEvent.ACCESS_TOKEN_REFRESHED, "2")
    assert calls == ["1", "1", "2"]


def test_unknown_event_rejected():
    with pytest.raises(ValueError):
        NotificationChannel().subscribe("token_revoked", print)


@pytest.mark.asyncio
async def test_auth_token_expired_is_alias_of_access_token_expired():
    channel = NotificationChannel()
    got = []
    channel.subscribe("auth_token_expired", got.append)
    assert channel.listener_count(AuthEvent.ACCESS_TOKEN_EXPIRED) == 1
    await channel.emit(AuthEvent.ACCESS_TOKEN_EXPIRED, "old")
    assert got == ["old"]
