import pytest
from httpx import AsyncClient

from tests.conftest import USERS, page, vehicle_json

VEHICLE_FORM = {"brand": "Toyota", "model": "Avanza", "year": "2019", "license_plate": "D 4321 AB", "color": "Silver"}


@pytest.mark.asyncio
async def test_list_with_search(customer_client: AsyncClient, backend):
    backend.on("GET", "/vehicles", json=page([vehicle_json()]))
    response = await customer_client.get("/vehicles", params={"search": "civic"})
    assert response.status_code == 200
    assert "B 1234 XYZ" in response.text
    assert backend.calls("GET", "/vehicles")[0].url.params["search"] == "civic"


@pytest.mark.asyncio
async def test_owner_column_for_staff_only(cashier_client: AsyncClient, backend):
    backend.on("GET", "/vehicles", json=page([vehicle_json(User=USERS["customer"])]))
    response = await cashier_client.get("/vehicles")
    assert "Owner" in response.text
    assert USERS["customer"]["name"] in response.text
    assert "Add Vehicle" not in response.text


@pytest.mark.asyncio
async def test_customer_does_not_see_owner_column(customer_client: AsyncClient, backend):
    backend.on("GET", "/vehicles", json=page([vehicle_json(User=USERS["customer"])]))
    response = await customer_client.get("/vehicles")
    assert "<th>Owner</th>" not in response.text
    assert "Add Vehicle" in response.text


@pytest.mark.asyncio
async def test_list_failure_message(customer_client: AsyncClient, backend):
    backend.on("GET", "/vehicles", status=500, json={})
    response = await customer_client.get("/vehicles")
    assert "Failed to fetch vehicles." in response.text


@pytest.mark.asyncio
async def test_create(customer_client: AsyncClient, backend):
    response = await customer_client.post("/vehicles", data=VEHICLE_FORM)
    assert response.status_code == 303
    followed = await customer_client.get(response.headers["location"])
    assert "Vehicle created successfully" in followed.text
    assert backend.last_json("POST", "/vehicle") == VEHICLE_FORM


@pytest.mark.asyncio
async def test_create_with_missing_fields_stays_local(customer_client: AsyncClient, backend):
    response = await customer_client.post("/vehicles", data=dict(VEHICLE_FORM, brand="  "))
    assert "Please check: brand" in response.text
    assert not backend.calls("POST", "/vehicle")


@pytest.mark.asyncio
async def test_create_backend_message(customer_client: AsyncClient, backend):
    backend.on("POST", "/vehicle", status=409, json={"message": "License plate already registered"})
    response = await customer_client.post("/vehicles", data=VEHICLE_FORM)
    assert "License plate already registered" in response.text
    assert 'value="D 4321 AB"' in response.text


@pytest.mark.asyncio
async def test_edit_link_prefills_form(customer_client: AsyncClient, backend):
    backend.on("GET", "/vehicle/v-1", json={"data": vehicle_json()})
    response = await customer_client.get("/vehicles", params={"edit": "v-1"})
    assert "Edit Vehicle" in response.text
    assert 'action="/vehicles/v-1?page=1"' in response.text
    assert 'value="Civic"' in response.text


@pytest.mark.asyncio
async def test_update(customer_client: AsyncClient, backend):
    response = await customer_client.post("/vehicles/v-1", data=VEHICLE_FORM)
    assert response.status_code == 303
    followed = await customer_client.get(response.headers["location"])
    assert "Vehicle updated successfully" in followed.text
    assert backend.last_json("PUT", "/vehicle/v-1")["license_plate"] == "D 4321 AB"


@pytest.mark.asyncio
async def test_delete(customer_client: AsyncClient, backend):
    response = await customer_client.post("/vehicles/v-1/delete")
    assert response.status_code == 303
    followed = await customer_client.get(response.headers["location"])
    assert "Vehicle deleted successfully" in followed.text
    assert backend.calls("DELETE", "/vehicle/v-1")


@pytest.mark.asyncio
async def test_delete_failure(customer_client: AsyncClient, backend):
    backend.on("DELETE", "/vehicle/v-1", status=500, json={})
    response = await customer_client.post("/vehicles/v-1/delete")
    assert "Delete failed." in response.text


@pytest.mark.asyncio
async def test_update_returns_to_the_same_page(customer_client: AsyncClient, backend):
    response = await customer_client.post("/vehicles/v-1", params={"page": 2, "search": "honda"}, data=VEHICLE_FORM)
    assert response.status_code == 303
    assert response.headers["location"] == "/vehicles?page=2&search=honda&flash=vehicle_updated"
