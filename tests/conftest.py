import pytest

from giftform_rules.forms import FormIndex, FormStore
from giftform_rules.models.form import FormSchema

# One priced single-choice question plus one gift section with two tiers.
NECKLACE_FORM = {
    "formId": "necklace-form",
    "info": {"title": "Necklace"},
    "items": [
        {
            "itemId": "i1",
            "title": "$1000 necklace",
            "questionItem": {
                "question": {
                    "questionId": "neck",
                    "choiceQuestion": {
                        "type": "RADIO",
                        "options": [{"value": "$1000 necklace"}],
                    },
                }
            },
        },
        {
            "itemId": "i2",
            "title": "~gift_section~Free gifts 滿1000*1、2000*2 $999",
            "questionItem": {
                "question": {
                    "questionId": "gift",
                    "choiceQuestion": {
                        "type": "CHECKBOX",
                        "options": [{"value": "A"}, {"value": "B"}, {"value": "C"}],
                    },
                }
            },
        },
    ],
}


@pytest.fixture
def necklace_form():
    return FormSchema.model_validate(NECKLACE_FORM)


@pytest.fixture
def necklace_index(necklace_form):
    return FormIndex(necklace_form)


@pytest.fixture(scope="session")
def store():
    """Load the bundled forms/ directory once for the entire test session."""
    s = FormStore()
    s.load()
    return s


@pytest.fixture(scope="session")
def spring_index(store):
    return store.get_index("purensol-spring")
