"""
Dashboard entity forms.

Each form validates its fields locally, then talks to the store-scoped
REST API:

    create  POST   /api/{store_id}/{entity}
    update  PATCH  /api/{store_id}/{entity}/{entity_id}
    delete  DELETE /api/{store_id}/{entity}/{entity_id}

Success refreshes, navigates back to the entity list and shows a toast.
Failure shows a fixed toast: the generic message for create/update, and a
per-form hint about dependent records for delete. The hint is not derived
from the server's answer.

While a request is in flight `loading` is set; the UI disables every
control from it, and submit()/delete() ignore calls made meanwhile.
"""
import logging
from typing import Any, ClassVar, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dashboard.modal import ModalState
from dashboard.notifications import Navigator, Notifier
from domain.constants import GENERIC_ERROR_MESSAGE

logger = logging.getLogger(__name__)


# ── Field schemas ───────────────────────────────────────────────────

class _FormValues(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BillboardFormValues(_FormValues):
    label: str = Field(..., min_length=1)
    image_url: str = Field(..., alias="imageUrl", min_length=1)


class CategoryFormValues(_FormValues):
    name: str = Field(..., min_length=1)
    billboard_id: str = Field(..., alias="billboardId", min_length=1)


class ProductFormValues(_FormValues):
    name: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    category_id: str = Field(..., alias="categoryId", min_length=1)
    is_featured: bool = Field(False, alias="isFeatured")
    is_archived: bool = Field(False, alias="isArchived")


class StoreSettingsValues(_FormValues):
    name: str = Field(..., min_length=1)


# ── Base form ───────────────────────────────────────────────────────

class EntityForm:
    entity: ClassVar[str]   # URL segment, e.g. "billboards"
    noun: ClassVar[str]     # "billboard"
    schema: ClassVar[type[_FormValues]]
    defaults: ClassVar[dict[str, Any]] = {}
    delete_error_message: ClassVar[str] = GENERIC_ERROR_MESSAGE

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        store_id: str,
        navigator: Navigator,
        notifier: Notifier,
        entity_id: Optional[str] = None,
        initial_data: Optional[dict[str, Any]] = None,
    ):
        if initial_data is not None and not entity_id:
            raise ValueError(f"Editing a {self.noun} requires its id")

        self.client = client
        self.store_id = store_id
        self.entity_id = entity_id
        self.initial_data = initial_data
        self.navigator = navigator
        self.notifier = notifier

        self.values: dict[str, Any] = dict(initial_data) if initial_data is not None else dict(self.defaults)
        self.errors: dict[str, str] = {}
        self.loading = False
        self.alert = ModalState()  # delete confirmation

    # Labels ---------------------------------------------------------

    @property
    def is_edit(self) -> bool:
        return self.initial_data is not None

    @property
    def title(self) -> str:
        return f"Edit {self.noun}" if self.is_edit else f"Create {self.noun}"

    @property
    def description(self) -> str:
        return f"Edit a {self.noun}." if self.is_edit else f"Add a new {self.noun}"

    @property
    def toast_message(self) -> str:
        noun = self.noun.capitalize()
        return f"{noun} updated." if self.is_edit else f"{noun} created."

    @property
    def action(self) -> str:
        return "Save changes" if self.is_edit else "Create"

    @property
    def controls_disabled(self) -> bool:
        return self.loading

    # Paths ----------------------------------------------------------

    @property
    def collection_url(self) -> str:
        return f"/api/{self.store_id}/{self.entity}"

    @property
    def item_url(self) -> str:
        return f"{self.collection_url}/{self.entity_id}"

    @property
    def list_path(self) -> str:
        return f"/{self.store_id}/{self.entity}"

    @property
    def after_delete_path(self) -> str:
        return self.list_path

    # Actions --------------------------------------------------------

    def validate(self, values: dict[str, Any]) -> Optional[_FormValues]:
        """Check the fields locally. On failure `errors` maps field → message."""
        try:
            parsed = self.schema.model_validate(values)
        except ValidationError as e:
            self.errors = {str(err["loc"][0]): err["msg"] for err in e.errors()}
            return None
        self.errors = {}
        return parsed

    async def submit(self, values: Optional[dict[str, Any]] = None) -> bool:
        """Create or update. Returns True when the server accepted the change."""
        if self.loading:
            return False
        if values is not None:
            self.values = dict(values)

        parsed = self.validate(self.values)
        if parsed is None:
            return False

        payload = parsed.model_dump(by_alias=True)
        self.loading = True
        try:
            if self.is_edit:
                response = await self.client.patch(self.item_url, json=payload)
            else:
                response = await self.client.post(self.collection_url, json=payload)
            response.raise_for_status()
            self._after_save()
            self.notifier.success(self.toast_message)
            return True
        except httpx.HTTPError as e:
            logger.warning(f"{self.noun} save failed: {e}")
            self.notifier.error(GENERIC_ERROR_MESSAGE)
            return False
        finally:
            self.loading = False

    def request_delete(self) -> None:
        """Open the confirmation dialog (edit mode only)."""
        if self.is_edit and not self.loading:
            self.alert.open()

    async def delete(self) -> bool:
        """Delete the entity; called when the confirmation dialog is accepted."""
        if self.loading or not self.is_edit:
            return False

        self.loading = True
        try:
            response = await self.client.delete(self.item_url)
            response.raise_for_status()
            self.navigator.refresh()
            self.navigator.push(self.after_delete_path)
            self.notifier.success(f"{self.noun.capitalize()} deleted.")
            return True
        except httpx.HTTPError as e:
            logger.warning(f"{self.noun} delete failed: {e}")
            self.notifier.error(self.delete_error_message)
            return False
        finally:
            self.loading = False
            self.alert.close()

    def _after_save(self) -> None:
        self.navigator.refresh()
        self.navigator.push(self.list_path)


# ── Concrete forms ──────────────────────────────────────────────────

class BillboardForm(EntityForm):
    entity = "billboards"
    noun = "billboard"
    schema = BillboardFormValues
    defaults = {"label": "", "imageUrl": ""}
    delete_error_message = "Make sure you removed all categories using this billboard first."


class CategoryForm(EntityForm):
    entity = "categories"
    noun = "category"
    schema = CategoryFormValues
    defaults = {"name": "", "billboardId": ""}
    delete_error_message = "Make sure you removed all products using this category first."


class ProductForm(EntityForm):
    entity = "products"
    noun = "product"
    schema = ProductFormValues
    defaults = {"name": "", "price": 0, "categoryId": "", "isFeatured": False, "isArchived": False}


class StoreSettingsForm(EntityForm):
    """
    Rename / delete the current store. Always in edit mode; the store id is
    both the scope and the entity.
    """
    entity = "stores"
    noun = "store"
    schema = StoreSettingsValues
    delete_error_message = "Make sure you removed all products and categories first."

    def __init__(self, client: httpx.AsyncClient, *, store_id: str, name: str, navigator: Navigator, notifier: Notifier):
        super().__init__(
            client,
            store_id=store_id,
            entity_id=store_id,
            initial_data={"name": name},
            navigator=navigator,
            notifier=notifier,
        )

    @property
    def collection_url(self) -> str:
        return "/api/stores"

    @property
    def toast_message(self) -> str:
        return "Store updated."

    @property
    def after_delete_path(self) -> str:
        return "/"

    def _after_save(self) -> None:
        self.navigator.refresh()
