"""Form endpoints — list loaded forms and fetch one with its gift sections.

Read-only; the data comes from the FormStore loaded at startup.
"""

from typing import Any

from fastapi import APIRouter, Depends

from giftform_rules.forms import FormStore

from giftform_server.dependencies import get_store

router = APIRouter(prefix="/forms", tags=["forms"])


@router.get("")
def list_forms(
    store: FormStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """Return a summary of every loaded form."""
    summaries = []
    for form in store.list_forms():
        index = store.get_index(form.form_id)
        summaries.append(
            {
                "form_id": form.form_id,
                "title": form.info.title,
                "description": form.info.description,
                "item_count": len(form.items),
                "gift_section_count": len(index.gift_sections),
            }
        )
    return summaries


@router.get("/{form_id}")
def get_form(
    form_id: str,
    store: FormStore = Depends(get_store),
) -> dict[str, Any]:
    """Return the form schema plus its gift sections and step split.

    Raises 404 for an unknown form id.
    """
    index = store.get_index(form_id)
    product_items, gift_items = index.split_steps()
    return {
        "form": index.form.model_dump(by_alias=True, exclude_none=True),
        "gift_sections": [
            {
                "question_id": section.question_id,
                "item_id": section.item_id,
                "title": section.display_title,
                "thresholds": [t.model_dump() for t in section.thresholds],
                "options": section.options,
            }
            for section in index.gift_sections.values()
        ],
        "sections": [item.title for item in index.section_items()],
        "steps": {
            "products": [item.item_id for item in product_items],
            "gifts": [item.item_id for item in gift_items],
        },
    }
