import logging
import re

from flask_babel import lazy_gettext as _

from .const import (
    LOGMSG_DEB_LIST_ADD,
    LOGMSG_DEB_LIST_CROP,
    LOGMSG_DEB_LIST_REMOVE,
    TEMPLATE_LIST,
)
from .exceptions import ConfigurationError
from .fieldwidgets import Widget

log = logging.getLogger(__name__)


class ListWidget(Widget):
    """
    Repeating group of widgets bound to the elements of a sequence.

    Every element ``<id>.<index>`` gets its own widget built by ``inner``,
    a widget class or any callable returning a new widget. Rows are added
    and removed with the add-to-list and remove-from-list request
    parameters of the form configuration::

        form.add_widget(ListWidget(TextWidget), "Tags", "Tags")

    Submitting ``htmlwidgets-action--add-to-list=Tags`` appends an empty
    row, ``htmlwidgets-action--remove-from-list=Tags.1`` removes the
    second one. Both make the fill invalid so the form is shown again.
    """

    template = TEMPLATE_LIST

    def __init__(self, inner, add_label=None, remove_label=None, classes=None):
        super(ListWidget, self).__init__(classes=classes)
        if not callable(inner):
            raise ConfigurationError("ListWidget expects a widget factory")
        self.inner = inner
        self.add_label = add_label or _("Add")
        self.remove_label = remove_label or _("Remove")
        # Child widgets in the order of the bound sequence
        self.children = []

    @property
    def requires_multipart(self):
        return self.inner().requires_multipart

    def child_id(self, index):
        return "%s.%d" % (self.id, index)

    def new_child(self, index):
        child = self.inner()
        if not isinstance(child, Widget):
            raise ConfigurationError(
                "ListWidget factory returned %r" % (child,), widget_id=self.id
            )
        return child.bind(self.child_id(index))

    def submitted_indices(self, values):
        """
        Indices of the rows present in the submitted values.

        A row counts as submitted if a key equals its id or, for rows of
        nested widgets, starts with its id followed by a dot.
        """
        pattern = re.compile(r"%s\.([0-9]+)(?:\..*)?" % re.escape(self.id))
        indices = set()
        for key in values.keys():
            match = pattern.fullmatch(key)
            if match:
                indices.add(int(match.group(1)))
        return indices

    def fill(self, values, binder):
        config = binder.config
        self.errors = []
        valid = True
        # Nested lists may start at a row that doesn't exist yet
        binder.ensure(self.id)
        remove_id = values.get(config.remove_from_list_param)
        new_slot = None
        submitted = self.submitted_indices(values)
        max_index = max(submitted, default=-1)
        if values.get(config.add_to_list_param) == self.id:
            new_slot = binder.length(self.id)
            max_index = max(max_index, new_slot)
            valid = False
            log.debug(LOGMSG_DEB_LIST_ADD, new_slot, self.id)

        removed = []
        filled = {}
        for index in range(max_index + 1):
            child_id = self.child_id(index)
            if child_id == remove_id:
                removed.append(index)
                valid = False
            else:
                if index not in submitted:
                    if index == new_slot:
                        new_slot = None
                    else:
                        removed.append(index)
                child = self.new_child(index)
                if not child.fill(values, binder):
                    valid = False
                filled[index] = child
            # Rows that were skipped or left unbound still need a slot so
            # the following rows don't leave a gap
            binder.ensure(child_id)

        length = binder.length(self.id)
        if length > max_index + 1:
            log.debug(LOGMSG_DEB_LIST_CROP, self.id, max_index + 1)
            for index in reversed(range(max_index + 1, length)):
                binder.remove(self.child_id(index))
        # Highest index first, each removal shifts the rows behind it
        for index in sorted(removed, reverse=True):
            log.debug(LOGMSG_DEB_LIST_REMOVE, self.child_id(index), self.id)
            binder.remove(self.child_id(index))

        self.children = [
            filled[index] for index in sorted(filled) if index not in removed
        ]
        return valid

    def render_data(self, binder):
        length = binder.length(self.id)
        children = []
        for index in range(length):
            if index < len(self.children):
                child = self.children[index]
                child.id = self.child_id(index)
            else:
                child = self.new_child(index)
            children.append(child)
        self.children = children
        return self.render_node(
            {
                "Fields": [child.render_data(binder) for child in children],
                "AddLabel": self.add_label,
                "RemoveLabel": self.remove_label,
            }
        )
