"""Public model re-exports for giftform_rules.

Consumers should import from ``giftform_rules.models`` rather than
reaching into sub-modules directly.
"""

# --- Form schema ---
from giftform_rules.models.form import (
    ChoiceOption,
    ChoiceQuestion,
    FormInfo,
    FormItem,
    FormSchema,
    Grid,
    Image,
    PageBreakItem,
    Question,
    QuestionGroupItem,
    QuestionItem,
    TextQuestion,
)

# --- Orders / gifts ---
from giftform_rules.models.order import (
    AnswerSet,
    AnswerValue,
    GiftSection,
    GiftSectionState,
    GiftStatus,
    OrderState,
    Product,
    SubmissionPayload,
    SubmissionReceipt,
    Threshold,
)

__all__ = [
    # Form schema
    "ChoiceOption",
    "ChoiceQuestion",
    "FormInfo",
    "FormItem",
    "FormSchema",
    "Grid",
    "Image",
    "PageBreakItem",
    "Question",
    "QuestionGroupItem",
    "QuestionItem",
    "TextQuestion",
    # Orders / gifts
    "AnswerSet",
    "AnswerValue",
    "GiftSection",
    "GiftSectionState",
    "GiftStatus",
    "OrderState",
    "Product",
    "SubmissionPayload",
    "SubmissionReceipt",
    "Threshold",
]
