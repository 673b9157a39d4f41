import base64
import binascii
import json
import logging
from datetime import date
from typing import Optional

import aiohttp

from portal.core.errors import BackupError
from portal.schemas.requests import BackupPayload

logger = logging.getLogger(__name__)


def format_backup_date(day: date) -> str:
    return day.strftime("%d-%m-%Y")


def decode_content(content: str) -> str:
    """The Apps Script stores plain text, so the base64 upload is decoded first."""
    try:
        raw = base64.b64decode(content, validate=False)
    except (binascii.Error, ValueError) as e:
        raise BackupError(f"Content is not valid base64: {e}") from e
    return raw.decode("utf-8", errors="replace")


class BackupService:
    """
    Forwards answer keys to the Google Apps Script that archives them in Drive.
    Every failure is logged and swallowed: the GitHub upload has already
    succeeded by the time this runs.
    """

    def __init__(self, endpoint_url: str):
        self.endpoint_url = endpoint_url

    def build_payload(self, content: str, class_name: str, today: Optional[date] = None) -> BackupPayload:
        decoded = decode_content(content)
        logger.debug(f"Backup content decoded, {len(decoded)} chars: {decoded[:100]!r}")
        return BackupPayload(
            class_name=class_name,
            date=format_backup_date(today or date.today()),
            content=decoded,
        )

    async def backup_answer_key(self, content: str, class_name: str) -> Optional[dict]:
        logger.info(f"Google Drive backup start for {class_name}")
        try:
            payload = self.build_payload(content, class_name)
            result = await self._post(payload)
        except Exception as e:
            logger.error(f"✗ Google Drive backup failed for {class_name}: {type(e).__name__}: {e}")
            return None

        logger.info(f"✓ Google Drive backup complete: {result.get('message') or 'Success'}")
        return result

    async def _post(self, payload: BackupPayload) -> dict:
        async with aiohttp.ClientSession() as session:
            async with session.post(self.endpoint_url, json=payload.model_dump(by_alias=True)) as resp:
                text = await resp.text()
                logger.debug(f"Apps Script responded {resp.status}: {text}")

        if resp.status >= 400:
            raise BackupError(f"Apps Script responded {resp.status}: {text[:200]}")

        try:
            result = json.loads(text)
        except ValueError as e:
            raise BackupError(f"Response is not JSON (status {resp.status}): {text[:200]}") from e

        if not isinstance(result, dict) or not result.get("success"):
            error = result.get("error") if isinstance(result, dict) else result
            raise BackupError(f"Apps Script reported failure: {error}")
        return result
