import importlib

from mangum import Mangum


def test_lambda_handler_wraps_app():
    module = importlib.import_module("submissions_api.lambda_handler")

    assert isinstance(module.handler, Mangum)
    assert module.lambda_handler is module.handler
    assert module.app.state.store.is_configured is False
