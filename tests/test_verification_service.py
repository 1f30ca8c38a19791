import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from services.verification_service.main import create_verification_app


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest_asyncio.fixture
async def verification_client(uploads_dir):
    app = create_verification_app(uploads_dir=str(uploads_dir))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://verification") as c:
        yield c


class TestVerification:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_verify_with_photo(self, verification_client, uploads_dir):
        resp = await verification_client.post(
            "/verify",
            data={"orderId": "ord-1", "gpsLat": "41.8781", "gpsLong": "-87.6298"},
            files={"photo": ("doorstep.JPG", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        )

        assert resp.status_code == 201
        record = resp.json()["record"]
        assert record["orderId"] == "ord-1"
        assert record["gpsLat"] == pytest.approx(41.8781)
        assert record["photo"].endswith(".jpg")
        assert (uploads_dir / record["photo"]).read_bytes() == b"\xff\xd8\xff fake jpeg"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_verify_without_photo(self, verification_client, uploads_dir):
        resp = await verification_client.post("/verify", data={"orderId": "ord-2", "gpsLat": "0", "gpsLong": "0"})

        assert resp.status_code == 201
        assert resp.json()["record"]["photo"] is None
        assert not uploads_dir.exists()

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("form,field", [
        ({"orderId": "ord-1", "gpsLat": "91", "gpsLong": "0"}, "gpsLat"),
        ({"orderId": "ord-1", "gpsLat": "0", "gpsLong": "-181"}, "gpsLong"),
        ({"gpsLat": "0", "gpsLong": "0"}, "orderId"),
    ])
    async def test_invalid_form_is_400(self, verification_client, form, field):
        resp = await verification_client.post("/verify", data=form)
        assert resp.status_code == 400
        assert [e["field"] for e in resp.json()["errors"]] == [field]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_list_and_filter_by_order(self, verification_client):
        for order_id in ("ord-1", "ord-2", "ord-1"):
            await verification_client.post("/verify", data={"orderId": order_id, "gpsLat": "1", "gpsLong": "2"})

        everything = (await verification_client.get("/verifications")).json()
        assert [r["orderId"] for r in everything] == ["ord-1", "ord-2", "ord-1"]

        resp = await verification_client.get("/verifications/ord-1")
        assert resp.status_code == 200
        assert len(resp.json()) == 2
        assert (await verification_client.get("/verifications/ord-9")).json() == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_health(self, verification_client):
        assert (await verification_client.get("/health")).json() == {"service": "verification", "status": "running"}
