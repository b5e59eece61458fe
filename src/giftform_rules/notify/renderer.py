"""ConfirmationRenderer — Jinja2-based order notification renderer.

Loads templates from the ``template/`` directory and renders a submitted
order (products, free gifts, total) into two HTML bodies: the respondent
confirmation, which mirrors the on-screen success page, and the admin
notification sent to the shop.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Sequence

import jinja2

from giftform_rules.models.order import Product

_CONFIRMATION_TEMPLATE = "order_confirmation.html.jinja2"
_ADMIN_TEMPLATE = "admin_notification.html.jinja2"
_TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M"


def _money(value: int) -> str:
    """Format an integer amount with thousands separators: 12000 -> ``$12,000``."""
    return f"${value:,}"


class ConfirmationRenderer:
    """Jinja2-based renderer for order confirmation messages.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html", "jinja2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["money"] = _money

    def render(
        self,
        *,
        full_name: str,
        products: Sequence[Product],
        gifts: Sequence[Product],
        total: int,
        timestamp: datetime | None = None,
    ) -> str:
        """Render the confirmation HTML for one order.

        Args:
            full_name: respondent name for the greeting (may be empty)
            products: priced items, in selection order
            gifts: free gift items across all gift sections
            total: final order total
            timestamp: submission time shown in the footer (defaults to now)
        """
        template = self._env.get_template(_CONFIRMATION_TEMPLATE)
        return template.render(
            full_name=full_name,
            products=list(products),
            gifts=list(gifts),
            total=total,
            timestamp=(timestamp or datetime.now()).strftime(_TIMESTAMP_FORMAT),
        )

    def render_admin_notification(
        self,
        *,
        full_name: str,
        email: str | None,
        products: Sequence[Product],
        gifts: Sequence[Product],
        total: int,
        timestamp: datetime | None = None,
    ) -> str:
        """Render the shop-side notification for one order.

        Same order content as :meth:`render`, plus the respondent's contact
        details.  Missing name or email show as "未提供".
        """
        template = self._env.get_template(_ADMIN_TEMPLATE)
        return template.render(
            full_name=full_name,
            email=email,
            products=list(products),
            gifts=list(gifts),
            total=total,
            timestamp=(timestamp or datetime.now()).strftime(_TIMESTAMP_FORMAT),
        )
