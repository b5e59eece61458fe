"""Order-form constants shared across the SDK.

These values encode the text conventions the form authors follow when
writing item titles: prices are ``$<digits>``, gift sections carry a
literal title prefix, and gift tiers are written as ``滿<amount>*<count>``.

The marker strings can be overridden via environment variables so that a
deployment can follow a different authoring convention without code changes.
"""

import os

# Literal title prefix that tags an item as a gift section.
# Overridable via GIFT_SECTION_MARKER env var.
GIFT_SECTION_MARKER = os.getenv("GIFT_SECTION_MARKER", "~gift_section~")

# "Reached" marker that precedes the first tier of a threshold list.
# Overridable via GIFT_QUALIFIER env var.
GIFT_QUALIFIER = os.getenv("GIFT_QUALIFIER", "滿")

# Separators between tiers: full-width comma, ideographic comma, ASCII comma.
THRESHOLD_SEPARATORS: str = "，、,"

# Every answer field is keyed ``question_<questionId>``, optionally followed
# by a ``_row_<r>_col_<c>`` suffix for matrix cells.
FIELD_PREFIX = "question_"

# Answer values that mean "not selected" even though they are truthy strings
# (unchecked checkboxes serialise as "false").
UNSELECTED_VALUES: set[str] = {"false"}

# Section header titles look like "✦ 水晶區 ✦".
SECTION_HEADER_PATTERN = r"^✦\s*.+?\s*區\s*✦"

# Gift section status messages shown next to the choice list.
RULES_UNAVAILABLE_MESSAGE = "無法解析贈品規則"
BELOW_FIRST_TIER_MESSAGE = "消費滿 ${amount:,} 可選 {gifts} 項"
ACTIVE_TIER_MESSAGE = "目前可選 {max} 項 (已選 {count}/{max})"

# --- Spreadsheet column conventions ---
TIMESTAMP_HEADER = "時間戳記"
EMAIL_ADDRESS_HEADER = "電子郵件地址"
TOTAL_HEADER_KEYWORDS: tuple[str, ...] = ("初步計算金額", "金額")

# Basic respondent fields, matched against item titles and sheet headers by
# keyword or numbered prefix.  Order matters: first match wins.
BASIC_INFO_FIELDS: list[tuple[str, tuple[str, ...], str]] = [
    ("full_name", ("全名",), "1."),
    ("line_name", ("Line",), "2."),
    ("social_account", ("IG", "FB"), "3."),
    ("email", ("Email",), "4."),
]
