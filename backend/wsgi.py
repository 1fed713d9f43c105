try:
    from backend.oneclue.server import configure_logging, create_app
except ImportError:  # pragma: no cover
    from oneclue.server import configure_logging, create_app

app, socketio = create_app()
configure_logging(app.config["LOG_LEVEL"])
