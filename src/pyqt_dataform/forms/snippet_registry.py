"""
Embedded snippet registry with metaclass auto-registration.

Snippets are composite widget kinds that a field can be rendered with
instead of its plain renderer. Snippet classes auto-register when they are
defined, so applications can add their own by subclassing
``DataFieldSnippet`` with a ``_snippet_id``.

Design:
- SnippetMeta metaclass handles auto-registration
- EMBED_SNIPPETS: Global registry of snippet name -> snippet class
- Fail-loud (SnippetNotDefinedError) on unknown names
"""

from abc import ABCMeta, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TYPE_CHECKING
import logging

from pyqt_dataform.exceptions import SnippetNotDefinedError
from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.forms.field_descriptor import FieldDescriptor

if TYPE_CHECKING:
    from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)

# Global registry of embedded snippets
# Maps snippet name -> snippet class
EMBED_SNIPPETS: Dict[str, Type["DataFieldSnippet"]] = {}


class SnippetMeta(ABCMeta):
    """
    Metaclass for automatic snippet registration.

    1. Only registers concrete implementations (no abstract methods)
    2. Requires a _snippet_id attribute
    3. Auto-populates EMBED_SNIPPETS

    Example:
        class RatingSnippet(DataFieldSnippet):
            _snippet_id = "rating"

            def descriptors(self):
                return [self.builder.get_data_field(self.field)]
    """

    def __new__(mcs, name, bases, attrs):
        new_class = super().__new__(mcs, name, bases, attrs)

        if getattr(new_class, '__abstractmethods__', None):
            logger.debug(f"Skipping registration for {name} - abstract methods remaining")
            return new_class

        snippet_id = attrs.get('_snippet_id')
        if snippet_id is None:
            logger.debug(f"Skipping registration for {name} - no _snippet_id attribute")
            return new_class

        if snippet_id in EMBED_SNIPPETS:
            logger.warning(
                f"Snippet '{snippet_id}' already registered to {EMBED_SNIPPETS[snippet_id].__name__}. "
                f"Overwriting with {name}."
            )
        EMBED_SNIPPETS[snippet_id] = new_class
        logger.debug(f"Auto-registered snippet {name} as '{snippet_id}'")
        return new_class


def get_snippet_class(snippet_id: str) -> Type["DataFieldSnippet"]:
    """
    Get snippet class by name.

    Raises:
        SnippetNotDefinedError: If the name is not registered
    """
    if snippet_id not in EMBED_SNIPPETS:
        raise SnippetNotDefinedError(snippet_id, list(EMBED_SNIPPETS.keys()))
    return EMBED_SNIPPETS[snippet_id]


class DataFieldSnippet(metaclass=SnippetMeta):
    """
    Base class for embedded snippets.

    A renderer instantiates the snippet with the props produced by
    ``SnippetService.make()`` and paints the descriptors it exposes.
    """

    required_props: Tuple[str, ...] = ("builder", "field")

    def __init__(self, **props: Any):
        missing = [name for name in self.required_props if name not in props]
        if missing:
            raise TypeError(f"{type(self).__name__} missing props: {missing}")
        self.props = props
        self.builder: "DataFormBuilder" = props["builder"]
        self.field: str = props["field"]

    @abstractmethod
    def descriptors(self) -> List[FieldDescriptor]:
        """Compiled descriptors this snippet renders, in order."""
        pass


class PasswordSnippet(DataFieldSnippet):
    """Masked input with a reveal toggle."""

    _snippet_id = CONSTANTS.SNIPPET_PASSWORD
    input_sub_type = "password"

    def descriptors(self) -> List[FieldDescriptor]:
        return [self.builder.get_data_field(self.field)]


class FieldSetSnippet(DataFieldSnippet):
    """Several physical fields rendered as one visual control."""

    _snippet_id = CONSTANTS.SNIPPET_FIELDSET
    required_props = ("builder", "field", "fields")

    def descriptors(self) -> List[FieldDescriptor]:
        builds = self.builder.get_form_build()
        out = []
        for name in self.props["fields"]:
            if name not in self.builder.fields:
                continue
            out.append(builds.get(name) or self.builder.compile(name))
        return out


class SwitcherSnippet(DataFieldSnippet):
    """
    Toggle between the dictionary-bound select and free-text entry.

    Switching on compiles the transient descriptor returned by ``on_switch``
    in place of the field's build; switching off recompiles the field from
    its declared descriptor. The transient descriptor never gets a build of
    its own.
    """

    _snippet_id = CONSTANTS.SNIPPET_SWITCHER
    required_props = ("builder", "field", "on_switch")

    def __init__(self, **props: Any):
        super().__init__(**props)
        self.switched = False

    @property
    def on_switch(self) -> Callable[["DataFormBuilder"], FieldDescriptor]:
        return self.props["on_switch"]

    @property
    def text(self) -> Optional[str]:
        """Caption of the toggle for the current state."""
        key = "text_switcher_on" if self.switched else "text_switcher_off"
        return self.props.get(key)

    def switch(self) -> FieldDescriptor:
        """Flip the mode and return the descriptor now in effect."""
        self.switched = not self.switched
        if self.switched:
            build = self.builder.compile(self.field, self.on_switch(self.builder))
        else:
            build = self.builder.compile(self.field)
        logger.debug(f"Switcher {self.field}: manual={self.switched}")
        return build

    def descriptors(self) -> List[FieldDescriptor]:
        return [self.builder.get_data_field(self.field)]
