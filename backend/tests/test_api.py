"""
HTTP tests: error mapping, role checks and the booking flow end to end.
"""

from decimal import Decimal
from io import BytesIO

from openpyxl import load_workbook

import utils.receipt_utils as receipt_utils


def create_project(client, **overrides):
    payload = {"name": "Green Meadows", "total_plots": 40, "legal_details": "Freehold"}
    payload.update(overrides)
    response = client.post("/projects/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_booking(client, project_id, **overrides):
    payload = {
        "project_id": project_id,
        "plot_no": "A-12",
        "area": "1200",
        "rate": "3500",
        "discount": "100",
        "plc": "50000",
        "booking_date": "2026-10-17",
        "customer": {"applicant_name": "Ravi Kumar", "mobile_no": "9876543210"},
    }
    payload.update(overrides)
    return client.post("/bookings/", json=payload)


class TestBookingFlow:

    def test_create_booking_with_new_customer_and_payment(self, client):
        project = create_project(client)
        response = create_booking(client, project["id"], booking_amount="500000", payment_mode="Cheque")

        assert response.status_code == 201, response.text
        body = response.json()
        assert body["booking"]["booking_no"] == "DS/26/10-1001"
        assert Decimal(body["booking"]["total_amount"]) == Decimal("4130000")
        assert body["booking"]["legal_details"] == "Freehold"
        assert body["initial_payment"]["receipt_no"] == "DSPAY/IN/1001"
        assert body["initial_payment"]["payment_type"] == "Booking"

        customer = client.get(f"/customers/{body['booking']['customer_id']}").json()
        assert customer["applicant_name"] == "Ravi Kumar"

    def test_booking_detail_includes_balance_and_payments(self, client):
        project = create_project(client)
        booking = create_booking(client, project["id"], booking_amount="500000").json()["booking"]

        detail = client.get(f"/bookings/{booking['id']}").json()

        assert Decimal(detail["balance"]["remaining_amount"]) == Decimal("3630000")
        assert detail["balance"]["payment_status"] == "Partially Paid"
        assert len(detail["payments"]) == 1

    def test_overpayment_returns_max_allowed(self, client):
        project = create_project(client)
        booking = create_booking(client, project["id"], booking_amount="500000").json()["booking"]

        response = client.post(
            "/payments/",
            json={"booking_id": booking["id"], "payment_amount": "3700000", "payment_mode": "Cash"},
        )

        assert response.status_code == 400
        assert Decimal(response.json()["max_allowed"]) == Decimal("3630000")
        balance = client.get(f"/bookings/{booking['id']}/balance").json()
        assert Decimal(balance["total_paid"]) == Decimal("500000")

    def test_edit_payment(self, client):
        project = create_project(client)
        created = create_booking(client, project["id"], booking_amount="500000").json()
        payment_id = created["initial_payment"]["id"]

        ok = client.patch(f"/payments/{payment_id}", json={"payment_amount": "600000"})
        too_much = client.patch(f"/payments/{payment_id}", json={"payment_amount": "4200000"})

        assert ok.status_code == 200
        assert too_much.status_code == 400
        assert Decimal(client.get(f"/payments/{payment_id}").json()["payment_amount"]) == Decimal("600000")

    def test_initial_payment_over_total(self, client):
        project = create_project(client)
        response = create_booking(client, project["id"], booking_amount="5000000")
        assert response.status_code == 400
        assert client.get("/bookings/").json() == []

    def test_delete_booking_cascades(self, client):
        project = create_project(client)
        created = create_booking(client, project["id"], booking_amount="500000").json()
        booking_id = created["booking"]["id"]

        response = client.delete(f"/bookings/{booking_id}")

        assert response.status_code == 200
        assert response.json()["payments_deleted"] == 1
        assert client.get(f"/bookings/{booking_id}").status_code == 404
        assert client.get(f"/payments/{created['initial_payment']['id']}").status_code == 404

    def test_delete_project_cascades(self, client):
        project = create_project(client)
        create_booking(client, project["id"])
        create_booking(client, project["id"], plot_no="A-13")

        response = client.delete(f"/projects/{project['id']}")

        assert response.json()["bookings_deleted"] == 2
        assert client.get("/bookings/").json() == []


class TestErrors:

    def test_missing_booking(self, client):
        response = client.get("/bookings/999/balance")
        assert response.status_code == 404
        assert response.json()["detail"] == "Booking 999 not found"

    def test_missing_project_on_booking(self, client):
        response = create_booking(client, 999)
        assert response.status_code == 404

    def test_booking_needs_a_customer(self, client):
        project = create_project(client)
        response = create_booking(client, project["id"], customer=None)
        assert response.status_code == 422

    def test_duplicate_aadhaar(self, client):
        payload = {"applicant_name": "Ravi Kumar", "aadhaar_no": "123412341234"}
        assert client.post("/customers/", json=payload).status_code == 201
        response = client.post("/customers/", json=payload)
        assert response.status_code == 409

    def test_sub_paisa_payment_is_rejected(self, client):
        project = create_project(client)
        booking = create_booking(client, project["id"]).json()["booking"]

        response = client.post(
            "/payments/",
            json={"booking_id": booking["id"], "payment_amount": "0.004", "payment_mode": "Cash"},
        )

        assert response.status_code == 422
        balance = client.get(f"/bookings/{booking['id']}/balance").json()
        assert Decimal(balance["total_paid"]) == Decimal("0")

    def test_sub_paisa_area_is_rejected(self, client):
        project = create_project(client)
        response = create_booking(client, project["id"], area="1200.004")
        assert response.status_code == 422


class TestRoles:

    def test_associate_is_read_only(self, client, auth_user):
        project = create_project(client)
        auth_user["role"] = "associate"

        assert client.get("/projects/").status_code == 200
        assert create_booking(client, project["id"]).status_code == 403

    def test_only_admin_deletes(self, client, auth_user):
        project = create_project(client)
        booking = create_booking(client, project["id"]).json()["booking"]
        auth_user["role"] = "manager"

        assert client.delete(f"/bookings/{booking['id']}").status_code == 403
        assert client.get(f"/bookings/{booking['id']}").status_code == 200


class TestDocuments:

    def test_receipt_pdf(self, client):
        project = create_project(client)
        created = create_booking(client, project["id"], booking_amount="500000").json()

        response = client.get(f"/payments/{created['initial_payment']['id']}/receipt")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_booking_slip_pdf(self, client):
        project = create_project(client)
        booking = create_booking(client, project["id"]).json()["booking"]

        response = client.get(f"/bookings/{booking['id']}/slip")

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")

    def test_bookings_export(self, client):
        project = create_project(client)
        create_booking(client, project["id"], booking_amount="500000")

        response = client.get("/bookings/export")

        assert response.status_code == 200
        sheet = load_workbook(BytesIO(response.content)).active
        assert sheet["A1"].value == "BOOKING NO"
        assert sheet["A2"].value == "DS/26/10-1001"
        assert sheet["N2"].value == 3630000
        assert sheet["A3"].value == "TOTAL"

    def test_documents_with_devanagari_customer_name(self, client):
        """Customer text outside latin-1 still renders."""
        project = create_project(client)
        created = create_booking(
            client,
            project["id"],
            booking_amount="500000",
            customer={"applicant_name": "राम कुमार", "address": "गांधी नगर, जयपुर"},
        ).json()

        receipt = client.get(f"/payments/{created['initial_payment']['id']}/receipt")
        slip = client.get(f"/bookings/{created['booking']['id']}/slip")

        assert receipt.status_code == 200
        assert receipt.content.startswith(b"%PDF")
        assert slip.status_code == 200
        assert slip.content.startswith(b"%PDF")


class TestPdfFont:

    def test_configured_font_path(self, monkeypatch, tmp_path):
        font = tmp_path / "NotoSansDevanagari-Regular.ttf"
        font.write_bytes(b"")
        monkeypatch.setenv("PDF_FONT_PATH", str(font))
        assert receipt_utils.unicode_font_path() == str(font)

    def test_missing_configured_font_falls_back(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PDF_FONT_PATH", str(tmp_path / "missing.ttf"))
        assert receipt_utils.unicode_font_path() is None

    def test_core_font_replaces_unencodable_text(self, monkeypatch):
        monkeypatch.setattr(receipt_utils, "unicode_font_path", lambda: None)
        pdf = receipt_utils.PDF()
        assert pdf.text_font == "Helvetica"
        assert pdf.printable("राम Kumar") == "??? Kumar"
        assert pdf.printable(None) == "-"
