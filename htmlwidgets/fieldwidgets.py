import logging
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
import re
from typing import Any, List, Optional

from dateutil import tz
from flask_babel import lazy_gettext as _
from flask_babel.speaklater import LazyString

from .const import (
    INT_MAX,
    INT_MIN,
    LOGMSG_DEB_FORM_INVALID_INTEGER,
    TEMPLATE_CHECKBOX,
    TEMPLATE_FILE,
    TEMPLATE_HIDDEN,
    TEMPLATE_PASSWORD,
    TEMPLATE_SELECT,
    TEMPLATE_TEXT,
    TEMPLATE_TEXTAREA,
    TEMPLATE_TIME,
    TIME_FORMAT_FULL,
    TIME_FORMAT_NANO,
    TIME_FORMAT_SHORT,
)
from .exceptions import ConfigurationError
from .paths import ZERO_TIME

log = logging.getLogger(__name__)


def plain_data(value):
    """Convert render data to builtin types, lazy translations become str."""
    if isinstance(value, LazyString):
        return str(value)
    if isinstance(value, list):
        return [plain_data(item) for item in value]
    if isinstance(value, dict):
        return {key: plain_data(item) for key, item in value.items()}
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: plain_data(getattr(value, f.name)) for f in fields(value)}
    return value


@dataclass
class RenderNode:
    """
    Everything a template needs to render one widget.

    ``template`` names the intended presentation, ``data`` is widget
    dependent: the bound value, a list of SelectOption or, for lists,
    a dict with the child nodes.
    """

    id: str
    label: str = ""
    description: str = ""
    errors: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    template: str = TEMPLATE_TEXT
    data: Any = None

    def to_dict(self):
        return plain_data(self)


@dataclass
class SelectOption:
    """An option to choose from in a SelectWidget"""

    value: str
    description: str = ""
    selected: bool = False


class Widget(object):
    """
    Base for all widgets.

    A widget binds the submitted value of its id to the data and
    describes how to render the bound value. The binder is passed to
    ``fill`` and ``render_data``, widgets hold no reference to their form.
    """

    template = TEMPLATE_TEXT
    requires_multipart = False

    def __init__(self, classes=None):
        self.id = ""
        self.label = ""
        self.description = ""
        self.errors = []
        self.classes = list(classes or [])

    def __repr__(self):
        return "<%s id=%r>" % (self.__class__.__name__, self.id)

    def bind(self, id, label="", description="", classes=None):
        """
        Set the identity of the widget.

        Args:
            id: Dotted path of the bound field
            label: Display label
            description: Help text
            classes: Optional HTML classes, replaces the current ones

        Returns:
            The widget itself
        """
        self.id = id
        self.label = label
        self.description = description
        if classes is not None:
            self.classes = list(classes)
        return self

    def fill(self, values, binder) -> bool:
        """
        Read the submitted value(s) for this widget into the data.

        Args:
            values: werkzeug MultiDict with the submitted values
            binder: Binder of the form data

        Returns:
            True if the submitted value is valid
        """
        raise NotImplementedError()

    def render_data(self, binder) -> RenderNode:
        """Describe the widget with the currently bound value."""
        return self.render_node(binder.get(self.id))

    def render_node(self, data) -> RenderNode:
        return RenderNode(
            id=self.id,
            label=self.label,
            description=self.description,
            errors=list(self.errors),
            classes=list(self.classes),
            template=self.template,
            data=data,
        )


class TextConstraint(object):
    """Length and pattern rules shared by the text like widgets"""

    def __init__(self, min_length=0, regexp=None, validation_error=None):
        self.min_length = min_length
        self.regexp = re.compile(regexp) if regexp else None
        self.validation_error = validation_error or _("Invalid value")

    def validate(self, value):
        if len(value) < self.min_length:
            return False
        if self.regexp is not None and not self.regexp.fullmatch(value):
            return False
        return True


def fill_text(widget, constraint, values, binder):
    """
    Bind the first submitted value of a widget as text and validate it.

    The value is bound even if it doesn't validate.
    """
    widget.errors = []
    value = values.get(widget.id, "")
    binder.set(widget.id, value)
    if not constraint.validate(value):
        widget.errors.append(constraint.validation_error)
        return False
    return True


class TextWidget(Widget):
    template = TEMPLATE_TEXT

    def __init__(self, min_length=0, regexp=None, validation_error=None, classes=None):
        super(TextWidget, self).__init__(classes=classes)
        self.constraint = TextConstraint(min_length, regexp, validation_error)

    def fill(self, values, binder):
        return fill_text(self, self.constraint, values, binder)


class TextAreaWidget(Widget):
    template = TEMPLATE_TEXTAREA

    def __init__(self, min_length=0, validation_error=None, classes=None):
        super(TextAreaWidget, self).__init__(classes=classes)
        self.constraint = TextConstraint(
            min_length, validation_error=validation_error or _("Text is too short")
        )

    def fill(self, values, binder):
        return fill_text(self, self.constraint, values, binder)


class PasswordWidget(Widget):
    """
    Password input, validated like a TextWidget.

    If the user has to repeat the password, set at least the verify label
    and error. They are passed to the template only, the repeated value
    is not compared here. The stored password is never rendered back:
    unlike the other single value widgets, the node data is a dict with
    the keys ``VerifyLabel``, ``VerifyDescription`` and ``VerifyError``.
    """

    template = TEMPLATE_PASSWORD

    def __init__(
        self,
        min_length=0,
        regexp=None,
        validation_error=None,
        verify_label="",
        verify_description="",
        verify_error="",
        classes=None,
    ):
        super(PasswordWidget, self).__init__(classes=classes)
        self.constraint = TextConstraint(min_length, regexp, validation_error)
        self.verify_label = verify_label
        self.verify_description = verify_description
        self.verify_error = verify_error

    def fill(self, values, binder):
        return fill_text(self, self.constraint, values, binder)

    def render_data(self, binder):
        binder.get(self.id)
        return self.render_node(
            {
                "VerifyLabel": self.verify_label,
                "VerifyDescription": self.verify_description,
                "VerifyError": self.verify_error,
            }
        )


# Tokens read as True, "on" is what browsers send for a checked box
TRUE_VALUES = ("1", "t", "T", "true", "TRUE", "True", "on")


class BoolWidget(Widget):
    template = TEMPLATE_CHECKBOX

    def fill(self, values, binder):
        self.errors = []
        binder.set(self.id, values.get(self.id) in TRUE_VALUES)
        return True


# Optional sign, then a 0x, 0o or 0b prefixed literal or plain decimal digits
INTEGER_RE = re.compile(r"([+-]?)(0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|[0-9]+)")


class IntegerWidget(Widget):
    """
    Integer input, accepts decimal, 0x, 0o and 0b literals.

    Leading zeros are decimal, "010" is ten. Whitespace and digit
    separators are rejected. An invalid value leaves the bound value
    untouched.
    """

    template = TEMPLATE_TEXT

    def __init__(self, validation_error=None, classes=None):
        super(IntegerWidget, self).__init__(classes=classes)
        self.validation_error = validation_error or _("Not a valid integer")

    @staticmethod
    def parse(value) -> Optional[int]:
        if value is None:
            return None
        match = INTEGER_RE.fullmatch(value)
        if not match:
            return None
        sign, digits = match.groups()
        if digits[:2].lower() in ("0x", "0o", "0b"):
            number = int(digits, 0)
        else:
            number = int(digits, 10)
        if sign == "-":
            number = -number
        if not INT_MIN <= number <= INT_MAX:
            return None
        return number

    def fill(self, values, binder):
        self.errors = []
        value = values.get(self.id)
        number = self.parse(value)
        if number is None:
            log.debug(LOGMSG_DEB_FORM_INVALID_INTEGER, value, self.id)
            self.errors.append(self.validation_error)
            return False
        binder.set(self.id, number)
        return True


class SelectWidget(Widget):
    """
    Choose one value out of a fixed list of options.

    Unknown or missing values select the first option.
    """

    template = TEMPLATE_SELECT

    def __init__(self, options, classes=None):
        super(SelectWidget, self).__init__(classes=classes)
        if not options:
            raise ConfigurationError("SelectWidget needs at least one option")
        self.options = [
            option if isinstance(option, SelectOption) else SelectOption(*option)
            for option in options
        ]

    def select(self, value):
        """
        Mark the option matching ``value`` as the only selected one.

        Returns:
            The selected option, the first one if nothing matches
        """
        selected = self.options[0]
        for option in self.options:
            if value is not None and option.value == value:
                selected = option
                break
        for option in self.options:
            option.selected = option is selected
        return selected

    def fill(self, values, binder):
        self.errors = []
        option = self.select(values.get(self.id))
        binder.set(self.id, option.value)
        return True

    def render_data(self, binder):
        value = binder.get(self.id)
        if any(option.value == value for option in self.options):
            self.select(value)
        return self.render_node(list(self.options))


class HiddenWidget(Widget):
    template = TEMPLATE_HIDDEN

    def fill(self, values, binder):
        self.errors = []
        binder.set(self.id, values.get(self.id, ""))
        return True


class FileWidget(Widget):
    """
    File upload input.

    The uploaded file is ignored here, process it yourself. A form
    containing this widget is rendered with a multipart enctype.
    """

    template = TEMPLATE_FILE
    requires_multipart = True

    def fill(self, values, binder):
        self.errors = []
        return True


_FRACTION_RE = re.compile(r"(.*\.)([0-9]{1,9})")


def parse_time(value, zone):
    """
    Parse a timestamp in the full, nanosecond or short layout.

    Fractions beyond microseconds are truncated.

    Args:
        value: Submitted timestamp, e.g. ``1985-04-10T08:10``
        zone: tzinfo the timestamp is given in

    Returns:
        An aware datetime, or None if no layout matches
    """
    if not value:
        return None
    for time_format in (TIME_FORMAT_FULL, TIME_FORMAT_NANO, TIME_FORMAT_SHORT):
        candidate = value
        if time_format == TIME_FORMAT_NANO:
            match = _FRACTION_RE.fullmatch(value)
            if not match:
                continue
            candidate = match.group(1) + match.group(2)[:6]
        try:
            parsed = datetime.strptime(candidate, time_format)
        except ValueError:
            continue
        return parsed.replace(tzinfo=zone)
    return None


class TimeWidget(Widget):
    """
    Date and time input in a given time zone.

    Without a location, the time zone of the form configuration is used.
    Unparsable input binds the zero time. The zero time and None render
    as an empty string, not as ``0001-01-01T00:00``, so the input shows
    up empty instead of with a placeholder date.
    """

    template = TEMPLATE_TIME

    def __init__(self, location=None, render_format=TIME_FORMAT_SHORT, classes=None):
        super(TimeWidget, self).__init__(classes=classes)
        self.location = location
        self.render_format = render_format

    def zone(self, binder):
        location = self.location or binder.config.time_zone
        if isinstance(location, str):
            zone = tz.gettz(location)
            if zone is None:
                raise ConfigurationError(
                    "Unknown time zone %r" % location, widget_id=self.id
                )
            return zone
        return location

    def fill(self, values, binder):
        self.errors = []
        value = parse_time(values.get(self.id), self.zone(binder))
        binder.set(self.id, value if value is not None else ZERO_TIME)
        return True

    def render_data(self, binder):
        value = binder.get(self.id)
        if value is None or value == ZERO_TIME:
            return self.render_node("")
        zone = self.zone(binder)
        if value.tzinfo is None:
            value = value.replace(tzinfo=zone)
        return self.render_node(value.astimezone(zone).strftime(self.render_format))
