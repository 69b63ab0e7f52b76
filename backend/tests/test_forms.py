"""
Tests for the dashboard forms and modals.

The REST API is replaced by an httpx.MockTransport, so every test sees the
exact requests a form sends and controls the answer.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import json

import httpx
import pytest

from dashboard.forms import BillboardForm, CategoryForm, ProductForm, StoreSettingsForm
from dashboard.modal import ModalState, StoreModal
from dashboard.notifications import NavigationHistory, NotificationLog

STORE_ID = "store-1"


class FakeApi:
    """Records requests and answers each with a fixed status."""

    def __init__(self, status_code: int = 200, body: dict | None = None):
        self.status_code = status_code
        self.body = body if body is not None else {"success": True, "data": {}}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self), base_url="http://dashboard")


@pytest.fixture
def navigator():
    return NavigationHistory()


@pytest.fixture
def notifier():
    return NotificationLog()


class TestModalState:

    @pytest.mark.unit
    def test_open_close_notifies_on_change(self):
        state = ModalState()
        seen = []
        state.subscribe(seen.append)

        state.open()
        state.open()
        state.close()

        assert seen == [True, False]
        assert state.is_open is False

    @pytest.mark.unit
    def test_unsubscribe(self):
        state = ModalState()
        seen = []
        unsubscribe = state.subscribe(seen.append)
        unsubscribe()

        state.open()
        assert seen == []
        assert state.is_open is True

    @pytest.mark.unit
    def test_unsubscribe_twice_is_harmless(self):
        state = ModalState()
        seen = []
        unsubscribe = state.subscribe(seen.append)
        state.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        state.open()

        assert seen == [True]

    @pytest.mark.unit
    def test_instances_are_independent(self):
        a, b = ModalState(), ModalState()
        a.open()
        assert b.is_open is False


class TestBillboardForm:

    @pytest.mark.unit
    def test_create_mode_labels(self, navigator, notifier):
        form = BillboardForm(FakeApi().client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        assert form.title == "Create billboard"
        assert form.description == "Add a new billboard"
        assert form.toast_message == "Billboard created."
        assert form.action == "Create"
        assert form.values == {"label": "", "imageUrl": ""}

    @pytest.mark.unit
    def test_edit_mode_labels(self, navigator, notifier):
        form = BillboardForm(
            FakeApi().client(), store_id=STORE_ID, navigator=navigator, notifier=notifier,
            entity_id="bb-1", initial_data={"label": "Sale", "imageUrl": "https://img.test/a.png"},
        )

        assert form.title == "Edit billboard"
        assert form.description == "Edit a billboard."
        assert form.toast_message == "Billboard updated."
        assert form.action == "Save changes"
        assert form.values["label"] == "Sale"

    @pytest.mark.unit
    def test_edit_without_id_is_an_error(self, navigator, notifier):
        with pytest.raises(ValueError):
            BillboardForm(
                FakeApi().client(), store_id=STORE_ID, navigator=navigator, notifier=notifier,
                initial_data={"label": "Sale", "imageUrl": "x"},
            )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_values_send_nothing(self, navigator, notifier):
        api = FakeApi()
        form = BillboardForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        ok = await form.submit({"label": "", "imageUrl": "https://img.test/a.png"})

        assert ok is False
        assert "label" in form.errors
        assert api.requests == []
        assert notifier.entries == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_create_posts_then_navigates(self, navigator, notifier):
        api = FakeApi()
        form = BillboardForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        ok = await form.submit({"label": "Sale", "imageUrl": "https://img.test/a.png"})

        assert ok is True
        (request,) = api.requests
        assert request.method == "POST"
        assert request.url.path == f"/api/{STORE_ID}/billboards"
        assert json.loads(request.content) == {"label": "Sale", "imageUrl": "https://img.test/a.png"}
        assert navigator.refreshes == 1
        assert navigator.current == f"/{STORE_ID}/billboards"
        assert notifier.last.level == "success"
        assert notifier.last.message == "Billboard created."
        assert form.loading is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_edit_patches_item(self, navigator, notifier):
        api = FakeApi()
        form = BillboardForm(
            api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier,
            entity_id="bb-1", initial_data={"label": "Sale", "imageUrl": "https://img.test/a.png"},
        )

        ok = await form.submit({"label": "Big Sale", "imageUrl": "https://img.test/a.png"})

        assert ok is True
        (request,) = api.requests
        assert request.method == "PATCH"
        assert request.url.path == f"/api/{STORE_ID}/billboards/bb-1"
        assert notifier.last.message == "Billboard updated."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_server_error_shows_generic_toast(self, navigator, notifier):
        api = FakeApi(status_code=500)
        form = BillboardForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        ok = await form.submit({"label": "Sale", "imageUrl": "https://img.test/a.png"})

        assert ok is False
        assert notifier.last.level == "error"
        assert notifier.last.message == "Something went wrong."
        assert navigator.paths == []
        assert form.loading is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_submit_ignored_while_loading(self, navigator, notifier):
        api = FakeApi()
        form = BillboardForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)
        form.loading = True

        ok = await form.submit({"label": "Sale", "imageUrl": "https://img.test/a.png"})

        assert ok is False
        assert form.controls_disabled is True
        assert api.requests == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_success(self, navigator, notifier):
        api = FakeApi()
        form = BillboardForm(
            api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier,
            entity_id="bb-1", initial_data={"label": "Sale", "imageUrl": "x"},
        )
        form.request_delete()
        assert form.alert.is_open is True

        ok = await form.delete()

        assert ok is True
        (request,) = api.requests
        assert request.method == "DELETE"
        assert request.url.path == f"/api/{STORE_ID}/billboards/bb-1"
        assert navigator.current == f"/{STORE_ID}/billboards"
        assert notifier.last.message == "Billboard deleted."
        assert form.alert.is_open is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_conflict_shows_hint_and_closes_alert(self, navigator, notifier):
        api = FakeApi(status_code=409, body={"success": False, "error": {"code": "conflict", "message": "in use"}})
        form = BillboardForm(
            api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier,
            entity_id="bb-1", initial_data={"label": "Sale", "imageUrl": "x"},
        )
        form.request_delete()

        ok = await form.delete()

        assert ok is False
        assert notifier.last.level == "error"
        assert notifier.last.message == "Make sure you removed all categories using this billboard first."
        assert form.alert.is_open is False
        assert form.loading is False
        assert navigator.paths == []

    @pytest.mark.unit
    def test_request_delete_needs_edit_mode(self, navigator, notifier):
        form = BillboardForm(FakeApi().client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)
        form.request_delete()
        assert form.alert.is_open is False


class TestCategoryAndProductForms:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_category_requires_billboard(self, navigator, notifier):
        api = FakeApi()
        form = CategoryForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        ok = await form.submit({"name": "Hats", "billboardId": ""})

        assert ok is False
        assert "billboardId" in form.errors
        assert api.requests == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_category_delete_conflict_hint(self, navigator, notifier):
        form = CategoryForm(
            FakeApi(status_code=409).client(), store_id=STORE_ID, navigator=navigator, notifier=notifier,
            entity_id="cat-1", initial_data={"name": "Hats", "billboardId": "bb-1"},
        )
        await form.delete()
        assert notifier.last.message == "Make sure you removed all products using this category first."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_product_price_must_be_positive(self, navigator, notifier):
        api = FakeApi()
        form = ProductForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        ok = await form.submit({"name": "Scarf", "price": 0, "categoryId": "cat-1"})

        assert ok is False
        assert "price" in form.errors
        assert api.requests == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_product_create_payload(self, navigator, notifier):
        api = FakeApi()
        form = ProductForm(api.client(), store_id=STORE_ID, navigator=navigator, notifier=notifier)

        ok = await form.submit({"name": "Scarf", "price": "12.50", "categoryId": "cat-1", "isFeatured": True})

        assert ok is True
        assert json.loads(api.requests[0].content) == {
            "name": "Scarf",
            "price": 12.5,
            "categoryId": "cat-1",
            "isFeatured": True,
            "isArchived": False,
        }
        assert navigator.current == f"/{STORE_ID}/products"


class TestStoreSettingsForm:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rename_patches_store_and_refreshes(self, navigator, notifier):
        api = FakeApi()
        form = StoreSettingsForm(api.client(), store_id=STORE_ID, name="Old", navigator=navigator, notifier=notifier)

        ok = await form.submit({"name": "New"})

        assert ok is True
        (request,) = api.requests
        assert request.method == "PATCH"
        assert request.url.path == f"/api/stores/{STORE_ID}"
        assert navigator.refreshes == 1
        assert navigator.paths == []
        assert notifier.last.message == "Store updated."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_goes_home(self, navigator, notifier):
        form = StoreSettingsForm(FakeApi().client(), store_id=STORE_ID, name="Old", navigator=navigator, notifier=notifier)

        ok = await form.delete()

        assert ok is True
        assert navigator.current == "/"
        assert notifier.last.message == "Store deleted."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_failure_hint(self, navigator, notifier):
        form = StoreSettingsForm(FakeApi(status_code=409).client(), store_id=STORE_ID, name="Old", navigator=navigator, notifier=notifier)

        await form.delete()

        assert notifier.last.message == "Make sure you removed all products and categories first."


class TestStoreModal:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_create_store_navigates_and_closes(self, navigator, notifier):
        api = FakeApi(body={"success": True, "data": {"id": "store-9", "name": "Shoes"}})
        state = ModalState(is_open=True)
        modal = StoreModal(api.client(), state=state, navigator=navigator, notifier=notifier)

        path = await modal.create_store("Shoes")

        assert path == "/store-9"
        (request,) = api.requests
        assert request.url.path == "/api/stores"
        assert json.loads(request.content) == {"name": "Shoes"}
        assert state.is_open is False
        assert navigator.current == "/store-9"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_name_sends_nothing(self, navigator, notifier):
        api = FakeApi()
        state = ModalState(is_open=True)
        modal = StoreModal(api.client(), state=state, navigator=navigator, notifier=notifier)

        assert await modal.create_store("") is None
        assert "name" in modal.errors
        assert api.requests == []
        assert state.is_open is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_keeps_modal_open(self, navigator, notifier):
        state = ModalState(is_open=True)
        modal = StoreModal(FakeApi(status_code=500).client(), state=state, navigator=navigator, notifier=notifier)

        assert await modal.create_store("Shoes") is None
        assert notifier.last.message == "Something went wrong."
        assert state.is_open is True
        assert modal.loading is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unexpected_envelope_shows_generic_toast(self, navigator, notifier):
        state = ModalState(is_open=True)
        modal = StoreModal(FakeApi(body={"ok": 1}).client(), state=state, navigator=navigator, notifier=notifier)

        assert await modal.create_store("Shop") is None
        assert notifier.last.level == "error"
        assert notifier.last.message == "Something went wrong."
        assert state.is_open is True
        assert navigator.paths == []
        assert modal.loading is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_reply_shows_generic_toast(self, navigator, notifier):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://dashboard")
        state = ModalState(is_open=True)
        modal = StoreModal(client, state=state, navigator=navigator, notifier=notifier)

        assert await modal.create_store("Shop") is None
        assert notifier.last.message == "Something went wrong."
        assert state.is_open is True
