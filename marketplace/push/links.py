"""
Deep links embedded in notification data.

The mobile router parses exactly these shapes:
  <scheme>://job/<job id>
  <scheme>://chat/<room id>
"""
from typing import Optional
from uuid import UUID

from marketplace.core.config import settings


def job_deep_link(job_id: UUID, scheme: Optional[str] = None) -> str:
    return f"{scheme or settings.deep_link_scheme}://job/{job_id}"


def chat_deep_link(room_id: UUID, scheme: Optional[str] = None) -> str:
    return f"{scheme or settings.deep_link_scheme}://chat/{room_id}"
