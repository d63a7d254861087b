class ReceiptServiceError(Exception):
    """ Base class for errors that end a request with a plain-text response """
    status_code = 500
    message = "Internal server error"


class MalformedRequestBody(ReceiptServiceError, ValueError):
    status_code = 400
    message = "The receipt is invalid"


class InvalidReceipt(ReceiptServiceError, ValueError):
    status_code = 400
    message = "The receipt is invalid"


class ReceiptNotFound(ReceiptServiceError, LookupError):
    status_code = 404
    message = "No receipt found for that id"


class RouteNotRecognized(ReceiptServiceError):
    status_code = 400
    message = "Bad request"


class InternalIOError(ReceiptServiceError):
    status_code = 500
    message = "Unable to read request body"
