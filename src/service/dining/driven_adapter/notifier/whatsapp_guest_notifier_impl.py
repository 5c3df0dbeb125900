"""
WhatsApp Guest Notifier

Sends templated guest messages through an HTTP messaging gateway. Delivery is
best effort: every failure is logged and reported as False.
"""

import re

import httpx
import orjson

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.dining.app.interface.i_guest_notifier import IGuestNotifier


_NON_DIGITS = re.compile(r'\D')
LOCAL_NUMBER_LENGTH = 10


def normalize_phone(contact: str, *, country_code: str) -> str:
    """
    Digits only, prefixed with the country code when a bare local number is given.

    "+91 98765-43210" -> "919876543210", "09876543210" -> "919876543210"
    """
    digits = _NON_DIGITS.sub('', contact or '')
    if len(digits) == LOCAL_NUMBER_LENGTH + 1 and digits.startswith('0'):
        digits = digits[1:]
    if len(digits) == LOCAL_NUMBER_LENGTH:
        digits = f'{country_code}{digits}'
    return digits


class WhatsAppGuestNotifierImpl(IGuestNotifier):
    def __init__(self, *, settings: Settings) -> None:
        self._url = settings.WHATSAPP_API_URL
        self._api_key = settings.WHATSAPP_API_KEY.get_secret_value()
        self._source = settings.WHATSAPP_SOURCE_NUMBER
        self._country_code = settings.WHATSAPP_COUNTRY_CODE
        self._timeout = settings.WHATSAPP_TIMEOUT_SECONDS

    @property
    def is_enabled(self) -> bool:
        return bool(self._api_key and self._source)

    async def send_guest_confirmation(
        self, *, contact: str, template_id: str, params: list[str]
    ) -> bool:
        if not self.is_enabled:
            Logger.base.debug(f'[WHATSAPP] Gateway not configured, skipping template={template_id}')
            return False

        destination = normalize_phone(contact, country_code=self._country_code)
        if len(destination) <= LOCAL_NUMBER_LENGTH:
            Logger.base.warning(f'⚠️ [WHATSAPP] Unusable contact, skipping template={template_id}')
            return False

        form = {
            'source': self._source,
            'destination': destination,
            'template': orjson.dumps({'id': template_id, 'params': params}).decode(),
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, data=form, headers={'apikey': self._api_key})
                response.raise_for_status()
        except httpx.HTTPError as e:
            Logger.base.warning(
                f'⚠️ [WHATSAPP] template={template_id} failed: {type(e).__name__}: {e}'
            )
            return False

        Logger.base.info(f'📨 [WHATSAPP] Sent template={template_id}')
        return True
