"""Abstract interfaces for the collaborators the order engine calls into.

The SDK computes totals and gift allowances; it neither fetches forms nor
stores orders itself.  These ABCs define the contract for the two external
collaborators:

  - SchemaProvider: supplies a loaded form once, before any computation
  - SubmissionSink: persists a finished order (answers + final total)

Typical integration flow::

    provider: SchemaProvider = FormStore(...)
    form = provider.get_form(form_id)
    # ... respondent fills the form through OrderEngine ...

    sink: SubmissionSink = DatabaseSink(...)
    receipt = await sink.submit(payload)
"""

from abc import ABC, abstractmethod

from giftform_rules.models.form import FormSchema
from giftform_rules.models.order import SubmissionPayload, SubmissionReceipt


class SchemaProvider(ABC):
    """Interface for anything that can hand out a loaded form schema."""

    @abstractmethod
    def get_form(self, form_id: str) -> FormSchema:
        """Return the form with the given id.

        Raises
        ------
        KeyError
            If the provider has no form with that id.
        """
        ...


class SubmissionSink(ABC):
    """Interface for recording a finished order.

    The sink owns column mapping, persistence, and any notification side
    effects.  Calls are fire-once: the SDK never retries, so a sink that
    wants retries must implement them itself.
    """

    @abstractmethod
    async def submit(self, payload: SubmissionPayload) -> SubmissionReceipt:
        """Persist a finished order.

        Parameters
        ----------
        payload:
            Trimmed answers, final total, and derived review data.  Field
            order inside ``payload.answers`` is unspecified.

        Returns
        -------
        SubmissionReceipt
            Identifier and timestamp of the stored submission.

        Raises
        ------
        SubmissionError
            If the order could not be stored.  The message is surfaced to
            the caller as-is.
        """
        ...
