"""FormStore and FormIndex — load form documents and precompute lookups.

``FormStore`` loads every form document (``*.yaml``, ``*.yml``, ``*.json``)
under ``forms/`` into typed :class:`FormSchema` models.  It is the
file-backed :class:`SchemaProvider` used by the server.

``FormIndex`` is built once per loaded form and holds everything the engine
reads repeatedly: the price index, the gift-section map, and the item,
image, and text-question lookups.

Usage::

    store = FormStore()             # defaults to forms/ relative to repo root
    store.load()

    form = store.get_form("purensol-spring")
    index = store.get_index("purensol-spring")
    index.gift_sections             # {question_id: GiftSection}
"""

from __future__ import annotations

import json
import logging
import re
from functools import cached_property
from pathlib import Path
from typing import Any, Optional

import yaml

from giftform_rules.constants import SECTION_HEADER_PATTERN
from giftform_rules.gifts import tag_gift_sections
from giftform_rules.interfaces import SchemaProvider
from giftform_rules.models.form import FormItem, FormSchema, Image
from giftform_rules.models.order import GiftSection
from giftform_rules.pricing import PriceIndex

logger = logging.getLogger(__name__)

_FORM_SUFFIXES = (".yaml", ".yml", ".json")
_SECTION_RE = re.compile(SECTION_HEADER_PATTERN)
_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_document(path: Path | str) -> Any:
    """Load a single YAML or JSON form document and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing form document: {path}")
    with path.open("r", encoding="utf-8") as f:
        if path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def extract_form_id(url: str) -> str | None:
    """Extract a form id from a forms URL or return a bare id unchanged.

    Supports ``forms.gle/<id>`` short links, ``.../d/e/<id>/...`` responder
    URLs, and plain ids.  Returns None for anything else.
    """
    if "forms.gle/" in url:
        match = re.search(r"forms\.gle/([a-zA-Z0-9_-]+)", url)
        if match:
            return match.group(1)

    match = re.search(r"/d/e/([a-zA-Z0-9_-]+)", url)
    if match:
        return match.group(1)

    if _ID_RE.match(url):
        return url
    return None


def is_section_title(title: str | None) -> bool:
    """True for section header titles like ``"✦ 水晶區 ✦"``."""
    if not title:
        return False
    return bool(_SECTION_RE.match(title.strip()))


# ---------------------------------------------------------------------------
# FormIndex
# ---------------------------------------------------------------------------

class FormIndex:
    """Read-only lookups derived from one :class:`FormSchema`.

    Attributes:
        form            — the source schema
        gift_sections   — dict[question_id, GiftSection]
        gift_question_ids — every question id inside a gift item
        prices          — PriceIndex (all gift question ids excluded)
        text_question_ids — ids of free-text questions (never products)
    """

    def __init__(self, form: FormSchema) -> None:
        self.form = form
        self.gift_sections: dict[str, GiftSection] = tag_gift_sections(form.items)
        # Every question owned by a gift item, mapped to its section
        self._gift_owners: dict[str, GiftSection] = {
            qid: section
            for section in self.gift_sections.values()
            for qid in section.question_ids
        }
        self.prices = PriceIndex.from_items(form.items, self.gift_question_ids)

        self.text_question_ids: set[str] = set()
        self._items_by_question: dict[str, FormItem] = {}
        self._option_images: dict[str, Image] = {}
        self._item_images: dict[str, Image] = {}

        for item in form.items:
            for question in item.questions:
                self._items_by_question[question.question_id] = item
                if question.kind == "text":
                    self.text_question_ids.add(question.question_id)
                if item.image is not None:
                    self._item_images[question.question_id] = item.image
                for option in question.options:
                    if option.image is not None:
                        self._option_images[option.value] = option.image

        logger.debug(
            "FormIndex built for %s: %d items, %d gift sections, %d priced questions",
            form.form_id, len(form.items), len(self.gift_sections),
            len(self.prices.question_prices),
        )

    @property
    def form_id(self) -> str:
        return self.form.form_id

    @cached_property
    def gift_question_ids(self) -> frozenset[str]:
        """Ids of every question inside a gift section, sub-questions included."""
        return frozenset(self._gift_owners)

    def gift_section_for(self, question_id: str) -> GiftSection | None:
        """The gift section owning *question_id*, or None for non-gift questions."""
        return self._gift_owners.get(question_id)

    def item_for_question(self, question_id: str) -> FormItem | None:
        """Return the item owning *question_id*, or None if unknown."""
        return self._items_by_question.get(question_id)

    def image_for(self, value: str, question_id: str) -> Image | None:
        """Option image if the option has one, else the owning item's image."""
        return self._option_images.get(value) or self._item_images.get(question_id)

    def section_items(self) -> list[FormItem]:
        """Items whose title is a section header (e.g. ``"✦ 水晶區 ✦"``)."""
        return [item for item in self.form.items if is_section_title(item.title)]

    def split_steps(self) -> tuple[list[FormItem], list[FormItem]]:
        """Split items into (products step, gifts step) at the first gift section.

        Without a gift section every item belongs to the first step.
        """
        items = self.form.items
        for pos, item in enumerate(items):
            if item.primary_question_id in self.gift_sections:
                return list(items[:pos]), list(items[pos:])
        return list(items), []


# ---------------------------------------------------------------------------
# FormStore
# ---------------------------------------------------------------------------

class FormStore(SchemaProvider):
    """Loads all form documents from a directory and serves them by id.

    Documents are parsed once in :meth:`load`; the resulting schemas and
    their :class:`FormIndex` are immutable for the store's lifetime.
    """

    def __init__(self, forms_dir: str | Path | None = None) -> None:
        if forms_dir is None:
            forms_dir = find_repo_root() / "forms"
        self._base = Path(forms_dir)

        # Populated by load()
        self.forms: dict[str, FormSchema] = {}
        self._indexes: dict[str, FormIndex] = {}

    def load(self) -> None:
        """Parse every form document under the forms directory.

        Raises ``FileNotFoundError`` if the directory does not exist and
        ``ValueError`` if two documents share a form id.
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Missing forms directory: {self._base}")

        for path in sorted(self._base.iterdir()):
            if path.suffix not in _FORM_SUFFIXES:
                continue
            form = FormSchema.model_validate(load_document(path))
            if form.form_id in self.forms:
                raise ValueError(f"Duplicate form id '{form.form_id}' in {path.name}")
            self.add_form(form)

        logger.info("FormStore loaded: %d forms from %s", len(self.forms), self._base)

    def add_form(self, form: FormSchema) -> FormIndex:
        """Register an already-parsed form and build its index."""
        index = FormIndex(form)
        self.forms[form.form_id] = form
        self._indexes[form.form_id] = index
        return index

    def list_forms(self) -> list[FormSchema]:
        return list(self.forms.values())

    def get_form(self, form_id: str) -> FormSchema:
        """Look up a form by id or forms URL.

        Raises:
            ValueError: if *form_id* is neither an id nor a forms URL.
            KeyError: if no loaded form has that id.
        """
        return self.forms[self._resolve(form_id)]

    def get_index(self, form_id: str) -> FormIndex:
        """Return the precomputed :class:`FormIndex` for a form (same errors as get_form)."""
        return self._indexes[self._resolve(form_id)]

    def _resolve(self, form_id: str) -> str:
        resolved = extract_form_id(form_id)
        if resolved is None:
            raise ValueError(f"Invalid form URL or ID: {form_id!r}")
        if resolved not in self.forms:
            raise KeyError(f"Form not found: {resolved}")
        return resolved
