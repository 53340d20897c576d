"""
Forms bind flat request values to nested data.

Example::

    @dataclass
    class Person:
        Name: str = ""
        Tags: List[str] = field(default_factory=list)

    person = Person()
    form = Form(person, action="/person")
    form.add_widget(TextWidget(min_length=1), "Name", "Name", "Your name")
    form.add_widget(ListWidget(TextWidget), "Tags", "Tags")
    if form.fill(request.form):
        save(person)
    return render_template("person.html", form=form.render_data())
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

from markupsafe import Markup
from werkzeug.datastructures import MultiDict

from .config import FormConfig
from .const import (
    LOGMSG_DEB_FORM_FILL,
    LOGMSG_ERR_FORM_DUPLICATE_ID,
    LOGMSG_ERR_FORM_FIELD_ADDRESS,
    TEMPLATE_LIST,
)
from .exceptions import AddressError, ConfigurationError
from .fieldwidgets import plain_data, RenderNode, Widget
from .paths import is_scalar, PathResolver

log = logging.getLogger(__name__)


class Binder(PathResolver):
    """Path resolver over the form data, plus the form configuration."""

    def __init__(self, root, config: Optional[FormConfig] = None):
        super(Binder, self).__init__(root)
        self.config = config or FormConfig()


@dataclass
class RenderData:
    """
    Data needed to render a form.

    ``enctype_attr`` is ``enctype="multipart/form-data"`` if the form
    contains a FileWidget, use it as optional attribute of the form element.
    """

    widgets: List[RenderNode] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    action: str = ""
    multipart: bool = False
    enctype_attr: Markup = field(default_factory=Markup)

    def to_dict(self) -> Dict[str, Any]:
        return plain_data(self)


def to_multidict(values) -> MultiDict:
    """
    Normalize submitted values.

    Accepts None, a werkzeug MultiDict or any mapping of keys to a string
    or a list of strings.
    """
    if values is None:
        return MultiDict()
    if isinstance(values, MultiDict):
        return values
    if isinstance(values, Mapping):
        return MultiDict(values)
    raise TypeError(
        "Expected a mapping of submitted values, got %s" % type(values).__name__
    )


class Form(object):
    """
    An html form bound to a data object.

    The data is referenced, not copied: ``fill`` changes it in place.
    A form instance must not be shared between threads.
    """

    def __init__(self, data, action: str = "", config: Optional[FormConfig] = None):
        """
        Args:
            data: Object graph to bind to, a record or a mapping
            action: Action of the html form, passed to the render data
            config: Optional FormConfig, defaults apply if missing
        """
        if is_scalar(data):
            raise TypeError(
                "Form expects data to be a record or a mapping, got %s"
                % type(data).__name__
            )
        self.data = data
        self.action = action
        self.config = config or FormConfig()
        self.binder = Binder(data, self.config)
        self.widgets = []
        self._widget_map = {}
        self._errors = {}

    def add_widget(
        self, widget: Widget, id: str, label="", description="", classes=None
    ) -> Widget:
        """
        Add a widget bound to the field ``id``.

        Args:
            widget: Widget instance
            id: Dotted path of the field in the form data
            label: Display label
            description: Help text
            classes: Optional HTML classes

        Returns:
            The added widget
        """
        if id in self._widget_map:
            log.error(LOGMSG_ERR_FORM_DUPLICATE_ID, id)
            raise ConfigurationError(
                LOGMSG_ERR_FORM_DUPLICATE_ID % id, widget_id=id
            )
        widget.bind(id, label, description, classes)
        self.widgets.append(widget)
        self._widget_map[id] = widget
        return widget

    def widget_by_id(self, id: str) -> Optional[Widget]:
        return self._widget_map.get(id)

    @property
    def errors(self) -> Dict[str, List[str]]:
        return {id: list(errors) for id, errors in self._errors.items()}

    def add_error(self, widget_id: str, error: str):
        """
        Add an error to a widget's error list.

        Use an empty string as widget id for global form errors. Errors are
        shown by ``render_data``, they don't change a ``fill`` result.
        """
        self._errors.setdefault(widget_id, []).append(error)

    def _address_error(self, widget, error):
        log.error(LOGMSG_ERR_FORM_FIELD_ADDRESS, widget.id, error)
        return ConfigurationError(
            LOGMSG_ERR_FORM_FIELD_ADDRESS % (widget.id, error), widget_id=widget.id
        )

    def fill(self, values) -> bool:
        """
        Fill the form data with the given values and validate them.

        Values that don't match a widget are ignored.

        Returns:
            True iff every widget validates and no list was changed
            by an add or remove request

        Raises:
            ConfigurationError: If a widget doesn't match the data
        """
        values = to_multidict(values)
        valid = True
        for widget in self.widgets:
            try:
                if not widget.fill(values, self.binder):
                    valid = False
            except AddressError as e:
                raise self._address_error(widget, e) from e
        log.debug(LOGMSG_DEB_FORM_FILL, len(self.widgets), valid)
        return valid

    def _merge_errors(self, node):
        node.errors.extend(self._errors.get(node.id, []))
        if node.template == TEMPLATE_LIST:
            for child in node.data["Fields"]:
                self._merge_errors(child)

    def render_data(self) -> RenderData:
        """
        Returns the render data of the form.

        Raises:
            ConfigurationError: If a widget doesn't match the data
        """
        render_data = RenderData(action=self.action)
        for widget in self.widgets:
            if widget.requires_multipart:
                render_data.multipart = True
            try:
                node = widget.render_data(self.binder)
            except AddressError as e:
                raise self._address_error(widget, e) from e
            self._merge_errors(node)
            render_data.widgets.append(node)
        render_data.errors = list(self._errors.get("", []))
        if render_data.multipart:
            render_data.enctype_attr = (
                Markup('enctype="%s"') % self.config.multipart_enctype
            )
        return render_data
