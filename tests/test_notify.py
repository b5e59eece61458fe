"""ConfirmationRenderer tests."""

from datetime import datetime

import pytest

from giftform_rules.models.order import Product
from giftform_rules.notify import ConfirmationRenderer


@pytest.fixture(scope="module")
def renderer():
    return ConfirmationRenderer()


def test_render_products_gifts_and_total(renderer):
    html = renderer.render(
        full_name="王小明",
        products=[Product(name="$1500 月光石手鍊", price=1500), Product(name="紫水晶", price=380)],
        gifts=[Product(name="粉晶原礦", price=0)],
        total=12000,
        timestamp=datetime(2026, 10, 17, 9, 30),
    )

    assert "感謝您的訂購，王小明！" in html
    assert html.count('class="product"') == 2
    assert html.count('class="gift"') == 1
    assert "$1,500" in html
    assert "免費" in html
    assert "$12,000" in html
    assert "2026/10/17 09:30" in html


def test_render_empty_order(renderer):
    html = renderer.render(full_name="", products=[], gifts=[], total=0)

    assert "您尚未選擇任何商品" in html
    assert "<p style=\"margin: 0;\">無</p>" in html
    assert "感謝您的訂購！" in html


def test_render_escapes_names(renderer):
    html = renderer.render(
        full_name="<b>x</b>",
        products=[Product(name="<script>", price=1)],
        gifts=[],
        total=1,
    )
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;x&lt;/b&gt;" in html


def test_render_admin_notification(renderer):
    html = renderer.render_admin_notification(
        full_name="王小明",
        email="ming@example.com",
        products=[Product(name="$1500 月光石手鍊", price=1500)],
        gifts=[Product(name="粉晶原礦", price=0)],
        total=1500,
        timestamp=datetime(2026, 10, 17, 9, 30),
    )

    assert "新訂單通知" in html
    assert "王小明" in html
    assert "ming@example.com" in html
    assert html.count('class="product"') == 1
    assert html.count('class="gift"') == 1
    assert "$1,500" in html
    assert "2026/10/17 09:30" in html


def test_render_admin_notification_without_contact_or_gifts(renderer):
    html = renderer.render_admin_notification(
        full_name="", email=None, products=[], gifts=[], total=0,
    )

    assert html.count("未提供") == 2
    assert 'class="gift"' not in html
    assert "贈品名稱" not in html
    assert "無" in html
