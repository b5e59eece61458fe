"""giftform_rules — pricing and gift-eligibility SDK for order forms.

Public API:
    extract_price     — first ``$<digits>`` price embedded in a label
    parse_thresholds  — "滿2500*1、5000*2" → ascending Threshold tiers
    calculate_total   — order total over an answer set, gift sections excluded
    max_selections    — gift allowance for a total (step function over tiers)
    enforce           — trim gift selections to the current allowance
    OrderEngine       — reactive answer-set holder that recomputes on mutation
    FormStore         — loads form documents and serves FormIndex lookups
    CheckoutService   — server-side quote + submit through a SubmissionSink

Collaborator interfaces:
    SchemaProvider    — ABC for supplying a loaded form
    SubmissionSink    — ABC for recording a finished order
"""

from giftform_rules.checkout import CheckoutService
from giftform_rules.engine import OrderEngine, evaluate
from giftform_rules.errors import SubmissionError
from giftform_rules.forms import FormIndex, FormStore, extract_form_id
from giftform_rules.gifts import enforce, max_selections, tag_gift_sections
from giftform_rules.interfaces import SchemaProvider, SubmissionSink
from giftform_rules.pricing import PriceIndex, calculate_total, extract_price
from giftform_rules.thresholds import parse_thresholds

__all__ = [
    # Core computations
    "extract_price",
    "parse_thresholds",
    "calculate_total",
    "max_selections",
    "enforce",
    "tag_gift_sections",
    "evaluate",
    "PriceIndex",
    # Engine, store & service
    "OrderEngine",
    "FormIndex",
    "FormStore",
    "extract_form_id",
    "CheckoutService",
    # Interfaces & errors
    "SchemaProvider",
    "SubmissionSink",
    "SubmissionError",
]
