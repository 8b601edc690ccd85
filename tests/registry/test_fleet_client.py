"""Tests for the fleet scheduler client."""

import httpx
import pytest
import respx
from httpx import Response

from fleetwatch.registry.errors import RegistryError
from fleetwatch.registry.fleet import SOCKET_HOST, FleetClient

FLEET = "http://fleet:49153/fleet/v1"


@pytest.mark.asyncio
@respx.mock
async def test_machines_single_page():
    respx.get(f"{FLEET}/machines").mock(
        return_value=Response(
            200,
            json={"machines": [{"id": "m1", "primaryIP": "10.0.0.1", "metadata": {"role": "web"}}]},
        )
    )

    async with FleetClient("http://fleet:49153") as client:
        machines = await client.machines()

    assert machines == [{"id": "m1", "primaryIP": "10.0.0.1", "metadata": {"role": "web"}}]


@pytest.mark.asyncio
@respx.mock
async def test_follows_page_tokens():
    second = respx.get(f"{FLEET}/units", params={"nextPageToken": "p2"}).mock(
        return_value=Response(200, json={"units": [{"name": "b.service"}]})
    )
    first = respx.get(f"{FLEET}/units").mock(
        return_value=Response(200, json={"units": [{"name": "a.service"}], "nextPageToken": "p2"})
    )

    async with FleetClient("http://fleet:49153/") as client:
        units = await client.units()

    assert [u["name"] for u in units] == ["a.service", "b.service"]
    assert first.call_count == 1
    assert second.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_unit_states_uses_states_key():
    respx.get(f"{FLEET}/state").mock(
        return_value=Response(200, json={"states": [{"name": "a.service", "machineID": "m1"}]})
    )

    async with FleetClient("http://fleet:49153") as client:
        states = await client.unit_states()

    assert states == [{"name": "a.service", "machineID": "m1"}]


@pytest.mark.asyncio
@respx.mock
async def test_empty_collection():
    respx.get(f"{FLEET}/machines").mock(return_value=Response(200, json={}))

    async with FleetClient("http://fleet:49153") as client:
        assert await client.machines() == []


@pytest.mark.asyncio
@respx.mock
async def test_http_error_raises_registry_error():
    respx.get(f"{FLEET}/machines").mock(return_value=Response(500, json={"error": "boom"}))

    async with FleetClient("http://fleet:49153") as client:
        with pytest.raises(RegistryError, match="HTTP 500"):
            await client.machines()


@pytest.mark.asyncio
@respx.mock
async def test_connection_error_raises_registry_error():
    respx.get(f"{FLEET}/machines").mock(side_effect=httpx.ConnectError)

    async with FleetClient("http://fleet:49153") as client:
        with pytest.raises(RegistryError):
            await client.machines()


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_raises_registry_error():
    respx.get(f"{FLEET}/machines").mock(return_value=Response(200, content=b"not json"))

    async with FleetClient("http://fleet:49153") as client:
        with pytest.raises(RegistryError, match="invalid JSON"):
            await client.machines()


@pytest.mark.asyncio
async def test_unix_socket_endpoint():
    client = FleetClient("unix:///var/run/fleet.sock", timeout=2.0)

    assert client.base_url == SOCKET_HOST
    assert client.timeout == 2.0

    await client.close()
