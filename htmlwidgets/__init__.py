__author__ = "Christian Neumann"
__version__ = "1.0.0"

from .config import FormConfig  # noqa: F401
from .exceptions import AddressError, ConfigurationError, HTMLWidgetsError  # noqa: F401
from .fieldwidgets import (  # noqa: F401
    BoolWidget,
    FileWidget,
    HiddenWidget,
    IntegerWidget,
    PasswordWidget,
    RenderNode,
    SelectOption,
    SelectWidget,
    TextAreaWidget,
    TextWidget,
    TimeWidget,
    Widget,
)
from .forms import Binder, Form, RenderData  # noqa: F401
from .paths import PathResolver  # noqa: F401
from .widgets import ListWidget  # noqa: F401
