"""Order confirmation rendering.

Provides ``ConfirmationRenderer``, a Jinja2-based template renderer that
turns a submitted order into the HTML body of a confirmation message.
Delivering the message is left to the submission sink.
"""

from giftform_rules.notify.renderer import ConfirmationRenderer

__all__ = ["ConfirmationRenderer"]
