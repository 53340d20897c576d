# Reserved request parameters carrying list mutation intent
ADD_TO_LIST_PARAM = "htmlwidgets-action--add-to-list"
REMOVE_FROM_LIST_PARAM = "htmlwidgets-action--remove-from-list"

MULTIPART_ENCTYPE = "multipart/form-data"
DEFAULT_TIME_ZONE = "UTC"

# Timestamp layouts accepted by the TimeWidget, tried in this order
TIME_FORMAT_FULL = "%Y-%m-%dT%H:%M:%S"
TIME_FORMAT_NANO = "%Y-%m-%dT%H:%M:%S.%f"
TIME_FORMAT_SHORT = "%Y-%m-%dT%H:%M"

# Template selector tokens
TEMPLATE_TEXT = "text"
TEMPLATE_TEXTAREA = "textarea"
TEMPLATE_PASSWORD = "password"
TEMPLATE_CHECKBOX = "checkbox"
TEMPLATE_SELECT = "select"
TEMPLATE_HIDDEN = "hidden"
TEMPLATE_FILE = "file"
TEMPLATE_TIME = "time"
TEMPLATE_LIST = "list"

# Signed machine integer bounds for the IntegerWidget
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

LOGMSG_ERR_FORM_FIELD_ADDRESS = "Registered widget %s does not match the data: %s"
LOGMSG_ERR_FORM_DUPLICATE_ID = "Widget id %s is already registered"
LOGMSG_DEB_FORM_INVALID_INTEGER = "Could not parse integer %r for field %s"
LOGMSG_DEB_FORM_FILL = "Filled form with %s widgets, valid: %s"
LOGMSG_DEB_LIST_ADD = "Adding row %s to list %s"
LOGMSG_DEB_LIST_REMOVE = "Removing %s from list %s"
LOGMSG_DEB_LIST_CROP = "Cropping list %s to %s rows"
LOGMSG_DEB_PATH_GROW = "Growing sequence at %s to %s elements"
