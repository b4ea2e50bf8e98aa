import pytest
from httpx import AsyncClient

from tests.conftest import booking_json, page


@pytest.mark.asyncio
async def test_root_redirects_to_dashboard(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


@pytest.mark.asyncio
async def test_stats_come_from_totals(admin_client: AsyncClient, backend):
    backend.on(
        "GET",
        "/bookings",
        json=page(
            [booking_json(id="b-1", status="pending"), booking_json(id="b-2", status="confirmed"), booking_json(id="b-3")],
            total_pages=9,
            total_data=42,
        ),
    )
    backend.on("GET", "/vehicles", json=page([], total_data=17))
    backend.on("GET", "/services", json=page([], total_data=6))

    response = await admin_client.get("/dashboard")
    assert response.status_code == 200
    assert 'data-stat="total-bookings">42<' in response.text
    assert 'data-stat="pending-bookings">2<' in response.text
    assert 'data-stat="total-vehicles">17<' in response.text
    assert 'data-stat="total-services">6<' in response.text

    assert backend.calls("GET", "/bookings")[0].url.params["limit"] == "5"
    assert backend.calls("GET", "/vehicles")[0].url.params["limit"] == "1"
    assert backend.calls("GET", "/services")[0].url.params["limit"] == "1"


@pytest.mark.asyncio
async def test_failure_leaves_zeroed_stats(admin_client: AsyncClient, backend):
    backend.on("GET", "/bookings", json=page([booking_json()], total_data=3))
    backend.on("GET", "/services", status=500, json={})
    response = await admin_client.get("/dashboard")
    assert response.status_code == 200
    assert 'data-stat="total-bookings">0<' in response.text
    assert "No bookings yet." in response.text


@pytest.mark.asyncio
async def test_greets_the_user(customer_client: AsyncClient):
    response = await customer_client.get("/dashboard")
    assert "Welcome back, Cus Tomer" in response.text
