"""Required-empty message — renders the single whole-collection failure message."""

from typing import Optional, Protocol, runtime_checkable

from mixed_collection.config import get_settings

IS_EMPTY = "isEmpty"

DEFAULT_TEMPLATES = {
    IS_EMPTY: "Value is required and can't be empty",
}


@runtime_checkable
class Translator(Protocol):
    """Anything that can translate a message template within a text domain."""

    def translate(self, message: str, text_domain: str = "default") -> str:
        ...


class RequiredMessage:
    """Produces the message used when a required collection is empty.

    Without a translator the untranslated template is returned.
    """

    def __init__(
        self,
        templates: Optional[dict[str, str]] = None,
        translator: Optional[Translator] = None,
        text_domain: Optional[str] = None,
    ):
        self.templates = {**DEFAULT_TEMPLATES, **(templates or {})}
        self.translator = translator
        self.text_domain = text_domain or get_settings().TRANSLATOR_TEXT_DOMAIN

    def set_template(self, template: str, key: str = IS_EMPTY) -> "RequiredMessage":
        self.templates[key] = template
        return self

    def render(self) -> dict[str, str]:
        """Render the required-empty failure as {template_key: message}."""
        message = self.templates[IS_EMPTY]
        if self.translator is not None:
            message = self.translator.translate(message, self.text_domain)
        return {IS_EMPTY: message}
