"""Tests for the pass-through static IPAM driver."""

import ipaddress

import pytest

from netplugin.drivers.base import DriverError
from netplugin.drivers.static import GATEWAY_ADDRESS_TYPE, REQUEST_ADDRESS_TYPE, StaticIpamDriver


@pytest.fixture
def driver() -> StaticIpamDriver:
    return StaticIpamDriver("mojaLocal", "mojaGlobal")


@pytest.mark.asyncio
async def test_default_address_spaces(driver):
    assert await driver.get_default_address_spaces() == ("mojaLocal", "mojaGlobal")


@pytest.mark.asyncio
async def test_capabilities_do_not_require_mac(driver):
    caps = await driver.get_capabilities()
    assert caps.requires_mac_address is False


@pytest.mark.asyncio
async def test_request_pool_echoes_subnet(driver):
    pool_id, pool, data = await driver.request_pool("mojaLocal", "10.2.3.0/24", "", {}, False)

    assert pool_id == "mojaLocal/10.2.3.0/24"
    assert pool == ipaddress.ip_network("10.2.3.0/24")
    assert data == {}


@pytest.mark.asyncio
async def test_request_pool_v6(driver):
    pool_id, pool, _ = await driver.request_pool("mojaGlobal", "fd00:1::/64", "", {}, True)

    assert pool_id == "mojaGlobal/fd00:1::/64"
    assert pool.version == 6


@pytest.mark.asyncio
@pytest.mark.parametrize("pool,sub_pool,v6,message", [
    ("", "", False, "explicit subnet"),
    ("10.2.3.5/24", "", False, "invalid pool"),
    ("10.2.3.0/24", "", True, "address family"),
    ("10.2.3.0/24", "10.9.0.0/28", False, "not within pool"),
    ("10.2.3.0/24", "fd00::/64", False, "not within pool"),
])
async def test_request_pool_rejects(driver, pool, sub_pool, v6, message):
    with pytest.raises(DriverError) as exc_info:
        await driver.request_pool("mojaLocal", pool, sub_pool, {}, v6)

    assert message in exc_info.value.message


@pytest.mark.asyncio
async def test_request_pool_with_sub_pool(driver):
    pool_id, _, _ = await driver.request_pool("mojaLocal", "10.2.0.0/16", "10.2.3.0/24", {}, False)

    assert pool_id == "mojaLocal/10.2.0.0/16"


@pytest.mark.asyncio
async def test_request_address_returns_cidr(driver):
    address, data = await driver.request_address(
        "mojaLocal/10.2.3.0/24", ipaddress.ip_address("10.2.3.5"), {}
    )

    assert str(address) == "10.2.3.5/24"
    assert data == {}


@pytest.mark.asyncio
async def test_request_gateway_defaults_to_first_host(driver):
    address, _ = await driver.request_address(
        "mojaLocal/10.2.3.0/24", None, {REQUEST_ADDRESS_TYPE: GATEWAY_ADDRESS_TYPE}
    )

    assert str(address) == "10.2.3.1/24"


@pytest.mark.asyncio
async def test_request_address_requires_address(driver):
    with pytest.raises(DriverError, match="explicit address"):
        await driver.request_address("mojaLocal/10.2.3.0/24", None, {})


@pytest.mark.asyncio
async def test_request_address_outside_pool(driver):
    with pytest.raises(DriverError, match="not in pool"):
        await driver.request_address("mojaLocal/10.2.3.0/24", ipaddress.ip_address("10.9.9.9"), {})


@pytest.mark.asyncio
@pytest.mark.parametrize("pool_id", ["p1", "mojaLocal/garbage/24"])
async def test_unknown_pool_id(driver, pool_id):
    with pytest.raises(DriverError):
        await driver.release_pool(pool_id)


@pytest.mark.asyncio
async def test_release_is_stateless(driver):
    """Test that releases succeed without a prior request."""
    await driver.release_address("mojaLocal/10.2.3.0/24", ipaddress.ip_address("10.2.3.5"))
    await driver.release_pool("mojaLocal/10.2.3.0/24")
