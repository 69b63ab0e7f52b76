"""
Modal dialogs of the dashboard.

ModalState is a plain open/closed flag owned by whichever component tree
shows the modal and handed by reference to the triggers that open it.
There is no process-wide instance.
"""
import logging
from typing import Callable, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from dashboard.notifications import Navigator, Notifier
from domain.constants import GENERIC_ERROR_MESSAGE

logger = logging.getLogger(__name__)


class ModalState:
    def __init__(self, is_open: bool = False):
        self.is_open = is_open
        self._listeners: List[Callable[[bool], None]] = []

    def open(self) -> None:
        self._set(True)

    def close(self) -> None:
        self._set(False)

    def subscribe(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        """Call `listener(is_open)` on every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, value: bool) -> None:
        if self.is_open == value:
            return
        self.is_open = value
        for listener in list(self._listeners):
            listener(value)


class StoreFormValues(BaseModel):
    name: str = Field(..., min_length=1)


class _CreatedStoreRef(BaseModel):
    id: str = Field(..., min_length=1)


class _CreatedStoreEnvelope(BaseModel):
    """Success envelope of POST /api/stores; only the new id is read."""
    data: _CreatedStoreRef


class StoreModal:
    """
    The "create store" dialog.

    Shown on the setup page until the user owns a store; also opened from
    the store switcher.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        state: ModalState,
        navigator: Navigator,
        notifier: Notifier,
    ):
        self.client = client
        self.state = state
        self.navigator = navigator
        self.notifier = notifier
        self.loading = False
        self.errors: dict[str, str] = {}

    async def create_store(self, name: str) -> Optional[str]:
        """Create the store and navigate to its dashboard. Returns the new path."""
        if self.loading:
            return None
        try:
            values = StoreFormValues(name=name)
        except ValidationError as e:
            self.errors = {str(err["loc"][0]): err["msg"] for err in e.errors()}
            return None
        self.errors = {}

        self.loading = True
        try:
            response = await self.client.post("/api/stores", json=values.model_dump())
            response.raise_for_status()
            store_id = _CreatedStoreEnvelope.model_validate(response.json()).data.id
        except (httpx.HTTPError, ValueError) as e:
            # ValueError: non-JSON body or an envelope without data.id
            logger.warning(f"Store creation failed: {e}")
            self.notifier.error(GENERIC_ERROR_MESSAGE)
            return None
        finally:
            self.loading = False

        path = f"/{store_id}"
        self.state.close()
        self.navigator.push(path)
        return path
