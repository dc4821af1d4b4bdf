"""
Widget kind resolution for composite fields.

Decides, per compiled build, whether the field is painted by its plain
renderer or by an embedded snippet (password, fieldset, switcher) or an
application supplied component.
"""

import inspect
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from pyqt_dataform.exceptions import SnippetNotDefinedError
from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.forms.field_descriptor import FieldDescriptor
from pyqt_dataform.forms.renderer_registry import DataFieldRenderer
from pyqt_dataform.forms.snippet_registry import get_snippet_class

if TYPE_CHECKING:
    from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)


class SnippetService:
    """Resolved snippet assignment per field of one builder."""

    def __init__(self, builder: "DataFormBuilder"):
        self.builder = builder
        self._snippets: Dict[str, DataFieldRenderer] = {}

    async def load(self) -> None:
        """
        Compose fieldsets and switchers for every compiled build, then resolve
        each build's ``snippet`` (a name, a component, or a factory).

        Raises:
            SnippetNotDefinedError: If a build names an unknown snippet
        """
        for field, data in self.builder.get_form_build().items():
            self.intersect_fieldset(data)
            self.intersect_switcher(data)

            snippet = data.snippet
            if not snippet:
                continue

            if callable(snippet) and not inspect.isclass(snippet):
                renderer = snippet(self.make, data)
                if inspect.isawaitable(renderer):
                    renderer = await renderer
                self._snippets[field] = renderer
                continue

            self.set(field, snippet)

    def make(self, snippet: Any, props: Optional[Dict[str, Any]] = None) -> DataFieldRenderer:
        """
        Resolve a snippet name or accept a concrete component.

        Raises:
            SnippetNotDefinedError: If ``snippet`` is empty or an unknown name
        """
        if not snippet:
            raise SnippetNotDefinedError(snippet)
        component = get_snippet_class(snippet) if isinstance(snippet, str) else snippet
        return DataFieldRenderer(component=component, props=props)

    def get(self, field: str) -> Optional[DataFieldRenderer]:
        snippet = self._snippets.get(field)
        if snippet is None:
            return None
        props = dict(snippet.props) if snippet.props is not None else None
        return DataFieldRenderer(component=snippet.component, props=props)

    def set(self, field: str, snippet: Any, props: Optional[Dict[str, Any]] = None) -> None:
        self._snippets[field] = self.make(snippet, props)

    def intersect_fieldset(self, data: FieldDescriptor) -> None:
        """Unset the companion fields and default the snippet to a fieldset."""
        if not data.fieldset or not data.field:
            return

        companions = [
            name for name in data.fieldset
            if name in self.builder.fields and name != data.field
        ]
        self.builder.unset_fields(companions)

        if data.snippet is None:
            data.snippet = lambda make, descriptor: make(CONSTANTS.SNIPPET_FIELDSET, {
                "builder": self.builder,
                "field": data.field,
                "fields": list(data.fieldset),
            })
        logger.debug(f"Fieldset '{data.field}' subsumes {companions}")

    def intersect_switcher(self, data: FieldDescriptor) -> None:
        """Default the snippet to a switcher between free text and the select."""
        if not callable(data.switcher):
            return

        def on_switch(builder: "DataFormBuilder") -> FieldDescriptor:
            transient = FieldDescriptor.from_mapping(data.switcher(builder))
            transient.readonly = data.readonly
            return transient

        if data.snippet is None:
            data.snippet = lambda make, descriptor: make(CONSTANTS.SNIPPET_SWITCHER, {
                "builder": self.builder,
                "field": data.field,
                "on_switch": on_switch,
                **(data.switcher_texts or {}),
            })
