"""Shared helpers for AgentDAO tool implementations.

Handlers reach the economy through ``_common.get_state()`` so tests can patch a
single lookup point.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from ..core import defaults
from ..core.exceptions import ValidationException
from ..core.models import CAPABILITY_CATEGORIES, Capability
from ..core.query import truncate
from ..core.validation import get_amount, get_dict, get_enum, get_str
from ..storage.state import EconomyState
from ..storage.state import get_state as _get_state
from ..storage.store import generate_id

logger = logging.getLogger(__name__)


def get_state() -> EconomyState:
    return _get_state()


def _hex_of_uuid(length: int) -> str:
    return "0x" + str(uuid.uuid4()).encode().hex()[:length]


def fake_tx_hash() -> str:
    """Placeholder transaction hash. Nothing is sent on-chain."""
    return _hex_of_uuid(64)


def fake_signature() -> str:
    """Placeholder signature. Never verified."""
    return _hex_of_uuid(130)


def fake_ipfs_hash() -> str:
    return "Qm" + uuid.uuid4().hex + uuid.uuid4().hex[:12]


def fake_block_number(now: int) -> int:
    # one block every 12 seconds
    return now // 12000


def iso_timestamp(ms: int) -> str:
    """Render a millisecond timestamp as ISO 8601 UTC."""
    moment = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_capability(raw: Any, name: str = "capability", *, require_details: bool = False) -> Capability:
    """Build a Capability from a tool argument object.

    ``require_details`` makes description and category mandatory, as when a
    capability is added to an existing agent.
    """
    if not isinstance(raw, Mapping):
        raise ValidationException(f"{name} must be an object", field=name)
    category_default = None if require_details else "custom"
    try:
        return Capability(
            id=generate_id(),
            name=get_str(raw, "name", required=True),
            description=get_str(raw, "description", required=require_details, default="", allow_empty=True),
            category=get_enum(raw, "category", CAPABILITY_CATEGORIES, required=require_details, default=category_default),
            price_per_call=get_amount(raw, "price_per_call", default="0"),
            input_schema=get_dict(raw, "input_schema"),
            output_schema=get_dict(raw, "output_schema"),
        )
    except ValidationException as e:
        raise ValidationException(f"{name}: {e.message}", field=name) from e


def summarize(text: str) -> str:
    return truncate(text, defaults.SUMMARY_LENGTH)
