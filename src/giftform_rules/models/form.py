"""Form schema models — a typed view of a forms-service form document.

The forms service describes a form as an ordered list of items.  Each item
carries exactly one payload:

  - questionItem: a single question (choice, text, scale, date, time,
    file upload), optionally with an image
  - questionGroupItem: a set of related sub-questions (e.g. the rows of a
    choice grid), each with its own question id
  - pageBreakItem: a layout marker with no answer data

Documents use camelCase keys (``questionId``, ``choiceQuestion`` ...); the
models accept both camelCase and snake_case so YAML fixtures can use either.
The schema is immutable once loaded: nothing in the SDK mutates it.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FormModel(BaseModel):
    """Base for all schema models: camelCase aliases, frozen instances."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- Images ---

class ImageProperties(FormModel):
    alignment: Optional[Literal["LEFT", "CENTER", "RIGHT"]] = None
    width: Optional[int] = None
    height: Optional[int] = None


class Image(FormModel):
    """An image attached to an item or to a choice option."""

    content_uri: str
    properties: Optional[ImageProperties] = None


# --- Question kinds ---

class ChoiceOption(FormModel):
    """A selectable option.  ``value`` is both the label and the answer value."""

    value: str
    image: Optional[Image] = None


class ChoiceQuestion(FormModel):
    type: Literal["RADIO", "CHECKBOX", "DROP_DOWN"]
    options: list[ChoiceOption] = Field(default_factory=list)


class TextQuestion(FormModel):
    # True for paragraph, False for short answer
    paragraph: bool = False


class ScaleQuestion(FormModel):
    low: int
    high: int
    low_label: Optional[str] = None
    high_label: Optional[str] = None


class DateQuestion(FormModel):
    include_year: Optional[bool] = None
    include_time: Optional[bool] = None


class TimeQuestion(FormModel):
    duration: Optional[bool] = None


class FileUploadQuestion(FormModel):
    max_files: Optional[int] = None
    max_file_size: Optional[str] = None
    types: Optional[list[str]] = None


QuestionKind = Literal["choice", "text", "scale", "date", "time", "file_upload", "unknown"]


class Question(FormModel):
    """A single answerable question.

    Exactly one of the ``*_question`` payloads is expected to be set; the
    ``kind`` property reports which one.
    """

    question_id: str
    required: bool = False
    choice_question: Optional[ChoiceQuestion] = None
    text_question: Optional[TextQuestion] = None
    scale_question: Optional[ScaleQuestion] = None
    date_question: Optional[DateQuestion] = None
    time_question: Optional[TimeQuestion] = None
    file_upload_question: Optional[FileUploadQuestion] = None

    @property
    def kind(self) -> QuestionKind:
        if self.choice_question is not None:
            return "choice"
        if self.text_question is not None:
            return "text"
        if self.scale_question is not None:
            return "scale"
        if self.date_question is not None:
            return "date"
        if self.time_question is not None:
            return "time"
        if self.file_upload_question is not None:
            return "file_upload"
        return "unknown"

    @property
    def options(self) -> list[ChoiceOption]:
        """Choice options in form order (empty for non-choice questions)."""
        if self.choice_question is None:
            return []
        return list(self.choice_question.options)


# --- Item payloads ---

class QuestionItem(FormModel):
    question: Question
    image: Optional[Image] = None


class GridRow(FormModel):
    value: str


class GridColumns(FormModel):
    type: Literal["RADIO", "CHECKBOX"]
    options: list[ChoiceOption] = Field(default_factory=list)


class Grid(FormModel):
    columns: GridColumns
    rows: list[GridRow] = Field(default_factory=list)


class QuestionGroupItem(FormModel):
    questions: list[Question] = Field(default_factory=list)
    grid: Optional[Grid] = None
    image: Optional[Image] = None


class PageBreakItem(FormModel):
    pass


ItemKind = Literal["question", "question_group", "page_break", "text"]


class FormItem(FormModel):
    """One entry in the form's ordered item list.

    Items without any payload are static text blocks; they carry a title
    but no questions.
    """

    item_id: str
    title: str = ""
    description: Optional[str] = None
    question_item: Optional[QuestionItem] = None
    question_group_item: Optional[QuestionGroupItem] = None
    page_break_item: Optional[PageBreakItem] = None

    @property
    def kind(self) -> ItemKind:
        if self.question_item is not None:
            return "question"
        if self.question_group_item is not None:
            return "question_group"
        if self.page_break_item is not None:
            return "page_break"
        return "text"

    @property
    def questions(self) -> list[Question]:
        """All questions owned by this item, in form order."""
        if self.question_item is not None:
            return [self.question_item.question]
        if self.question_group_item is not None:
            return list(self.question_group_item.questions)
        return []

    @property
    def primary_question_id(self) -> str | None:
        """The item's own question id, or the first sub-question's id for groups."""
        questions = self.questions
        return questions[0].question_id if questions else None

    @property
    def image(self) -> Image | None:
        if self.question_item is not None:
            return self.question_item.image
        if self.question_group_item is not None:
            return self.question_group_item.image
        return None

    @property
    def has_question(self) -> bool:
        """True if the item can be rendered as a form step element."""
        return self.kind != "text"


class FormInfo(FormModel):
    title: str
    description: Optional[str] = None
    document_title: Optional[str] = None


class FormSchema(FormModel):
    """A complete form: metadata plus the ordered item list."""

    form_id: str
    info: FormInfo
    items: list[FormItem] = Field(default_factory=list)
    responder_uri: Optional[str] = None
    revision_id: Optional[str] = None
