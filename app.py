import logging
from typing import Optional

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, ClientDisconnected

from errors import InternalIOError, MalformedRequestBody, ReceiptServiceError, RouteNotRecognized
from models import Receipt
from scoring import format_points, score
from store import ReceiptStore

logger = logging.getLogger(__name__)

STORE_EXTENSION = "receipt_store"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HOST = "0.0.0.0"
PORT = 8080


def get_store() -> ReceiptStore:
    return current_app.extensions[STORE_EXTENSION]


def read_receipt() -> Receipt:
    """ Reads the request body and decodes it into a Receipt, whatever the content type """
    try:
        request.get_data(cache=True)
    except (ClientDisconnected, OSError) as e:
        raise InternalIOError(str(e)) from e
    try:
        document = request.get_json(force=True)
    except BadRequest as e:
        raise MalformedRequestBody("request body is not valid JSON") from e
    return Receipt.from_json(document)


def process_receipt():
    """
    Router for receipt processing requests. The body is decoded and scored,
    and the points are kept in the application's store under a newly
    generated id, which is returned to the user.

    Returns:
        400 Error if the body is not a valid receipt
        500 Error if the body could not be read
        200 OK and generated receipt id if the receipt was scored
    """
    points = score(read_receipt())
    receipt_id = get_store().put(points)
    logger.info("Processed receipt %s (%s points)", receipt_id, format_points(points))
    return jsonify({"id": receipt_id})


def get_points(receipt_id: str):
    """
    Router for points lookups. The receipt id is used to look up the points
    previously computed for it.

    Returns:
        404 Error if the receipt id is not found
        200 OK and the points for the receipt, as a decimal string
    """
    points = get_store().get(receipt_id)
    return jsonify({"points": format_points(points)})


def handle_service_error(error: ReceiptServiceError):
    if error.status_code >= 500:
        logger.error("Request %s %s failed: %s", request.method, request.path, error, exc_info=error)
    elif isinstance(error, RouteNotRecognized):
        logger.warning("Unrecognized route %s %s", request.method, request.path)
    else:
        logger.warning("Rejected %s %s: %s", request.method, request.path, error)
    return Response(error.message, status=error.status_code, mimetype="text/plain")


def handle_unknown_route(error):
    return handle_service_error(RouteNotRecognized(str(error)))


def reject_head_requests():
    """ Werkzeug answers HEAD on every GET rule; only GET and POST are served here """
    if request.method == 'HEAD':
        raise RouteNotRecognized(f"method not allowed ({request.method})")


def create_app(store: Optional[ReceiptStore] = None) -> Flask:
    """ Builds the Flask app around the given store, or a fresh empty one """
    app = Flask(__name__)
    app.extensions[STORE_EXTENSION] = store if store is not None else ReceiptStore()
    # trailing slashes are accepted, OPTIONS is not
    app.add_url_rule('/receipts/process', view_func=process_receipt, methods=['POST'],
                     strict_slashes=False, provide_automatic_options=False)
    app.add_url_rule('/receipts/<receipt_id>/points', view_func=get_points, methods=['GET'],
                     strict_slashes=False, provide_automatic_options=False)
    app.before_request(reject_head_requests)
    app.register_error_handler(ReceiptServiceError, handle_service_error)
    # any other path or method is a bad request, not a 404 or 405
    app.register_error_handler(404, handle_unknown_route)
    app.register_error_handler(405, handle_unknown_route)
    return app


def main():
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    flask_app = create_app()
    logger.info("Serving receipt points on %s:%s", HOST, PORT)
    # threaded=True lets Flask handle requests concurrently; the store is locked
    flask_app.run(host=HOST, port=PORT, threaded=True)


if __name__ == '__main__':
    main()
