"""FormStore and FormIndex tests against the bundled forms/ directory.

Checks loading, id/URL resolution, the derived lookups (gift sections,
prices, text questions, images), and the step split.
"""

import json

import pytest

from giftform_rules.engine import evaluate
from giftform_rules.forms import FormIndex, FormStore, extract_form_id, is_section_title
from giftform_rules.models.form import FormSchema
from giftform_rules.pricing import calculate_total


# =====================================================================
# extract_form_id / is_section_title
# =====================================================================

@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://forms.gle/AbC123xyz", "AbC123xyz"),
        ("https://docs.google.com/forms/d/e/1FAIpQL-abc_9/viewform", "1FAIpQL-abc_9"),
        ("purensol-spring", "purensol-spring"),
        ("https://example.com/not a form", None),
        ("", None),
    ],
)
def test_extract_form_id(value, expected):
    assert extract_form_id(value) == expected


@pytest.mark.parametrize(
    "title, expected",
    [("✦ 水晶區 ✦", True), ("✦飾品區✦", True), ("✦第一階段滿額贈✦", False), ("", False), (None, False)],
)
def test_is_section_title(title, expected):
    assert is_section_title(title) is expected


# =====================================================================
# FormStore
# =====================================================================

def test_store_loads_bundled_form(store):
    ids = [form.form_id for form in store.list_forms()]
    assert "purensol-spring" in ids


def test_store_resolves_responder_url(store):
    form = store.get_form("https://docs.google.com/forms/d/e/purensol-spring/viewform")
    assert form.form_id == "purensol-spring"


def test_store_unknown_form(store):
    with pytest.raises(KeyError, match="Form not found"):
        store.get_form("nope")


def test_store_invalid_form_id(store):
    with pytest.raises(ValueError, match="Invalid form URL or ID"):
        store.get_index("not a form id!")


def test_store_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        FormStore(forms_dir=tmp_path / "missing").load()


def test_store_loads_json_and_rejects_duplicates(tmp_path):
    doc = {"formId": "dup", "info": {"title": "t"}, "items": []}
    (tmp_path / "a.json").write_text(json.dumps(doc), encoding="utf-8")

    s = FormStore(forms_dir=tmp_path)
    s.load()
    assert s.get_form("dup").info.title == "t"

    (tmp_path / "b.json").write_text(json.dumps(doc), encoding="utf-8")
    with pytest.raises(ValueError, match="Duplicate form id"):
        FormStore(forms_dir=tmp_path).load()


def test_store_ignores_other_files(tmp_path):
    (tmp_path / "README.md").write_text("# forms", encoding="utf-8")
    s = FormStore(forms_dir=tmp_path)
    s.load()
    assert s.list_forms() == []


# =====================================================================
# FormIndex
# =====================================================================

def test_index_gift_sections(spring_index):
    sections = spring_index.gift_sections
    assert list(sections) == ["gift01", "gift02"]
    assert [(t.amount, t.gifts) for t in sections["gift01"].thresholds] == [
        (2500, 1), (5000, 2), (7000, 3), (8500, 4),
    ]
    assert [(t.amount, t.gifts) for t in sections["gift02"].thresholds] == [
        (12000, 1), (15000, 2),
    ]


def test_index_gift_option_price_not_in_question_prices(spring_index):
    assert "gift02" not in spring_index.prices.question_prices


def test_index_prices(spring_index):
    prices = spring_index.prices
    assert prices.question_prices["amethyst01"] == 380
    assert prices.question_prices["rawclear01"] == 250
    assert prices.question_prices["rawcitrine01"] == 250
    assert prices.option_prices["$1500 月光石手鍊"] == 1500
    assert "bracelet01" not in prices.question_prices


def test_index_text_questions(spring_index):
    assert spring_index.text_question_ids == {"name01", "line01", "social01", "email01", "note01"}


def test_index_images(spring_index):
    assert spring_index.image_for("$1200 粉晶手鍊", "bracelet01").content_uri.endswith("rose-quartz.jpg")
    assert spring_index.image_for("紫水晶金屬纏繞墜", "amethyst01").content_uri.endswith(
        "amethyst-pendant.jpg"
    )
    assert spring_index.image_for("白水晶原礦", "gift01") is None


def test_index_item_lookup(spring_index):
    assert spring_index.item_for_question("rawcitrine01").item_id == "raw-stones"
    assert spring_index.item_for_question("missing") is None


def test_index_section_items(spring_index):
    assert [item.title for item in spring_index.section_items()] == ["✦ 水晶區 ✦"]


def test_index_split_steps(spring_index):
    products, gifts = spring_index.split_steps()
    assert products[-1].item_id == "raw-stones"
    assert [item.item_id for item in gifts] == ["gift-stage-1", "gift-stage-2", "note"]


def test_split_steps_without_gifts(tmp_path):
    doc = {
        "formId": "plain",
        "info": {"title": "t"},
        "items": [{"itemId": "x", "title": "$100 x", "pageBreakItem": {}}],
    }
    (tmp_path / "plain.json").write_text(json.dumps(doc), encoding="utf-8")
    s = FormStore(forms_dir=tmp_path)
    s.load()
    products, gifts = s.get_index("plain").split_steps()
    assert [item.item_id for item in products] == ["x"]
    assert gifts == []


@pytest.fixture
def group_gift_index():
    form = FormSchema.model_validate(
        {
            "formId": "group-gift",
            "info": {"title": "t"},
            "items": [
                {
                    "itemId": "neck",
                    "title": "$1000 necklace",
                    "questionItem": {"question": {"questionId": "neck"}},
                },
                {
                    "itemId": "gifts",
                    "title": "~gift_section~Gifts $999 滿1000*1",
                    "questionGroupItem": {
                        "questions": [{"questionId": "sub1"}, {"questionId": "sub2"}],
                    },
                },
            ],
        }
    )
    return FormIndex(form)


def test_group_gift_sub_questions_are_never_priced(group_gift_index):
    index = group_gift_index
    assert list(index.gift_sections) == ["sub1"]
    assert index.gift_question_ids == {"sub1", "sub2"}
    assert index.gift_section_for("sub2").question_id == "sub1"
    assert index.gift_section_for("neck") is None
    assert "sub2" not in index.prices.question_prices

    answers = {"question_sub2": ["B"]}
    assert calculate_total(answers, index.prices, index.gift_question_ids) == 0

    state, _ = evaluate(index, {"question_neck": True, "question_sub2": ["B"]})
    assert state.total == 1000
    assert state.selected_items_count == 1
