# messenger/wsgi.py
# entrada do gunicorn (worker eventlet): gunicorn -k eventlet -w 1 messenger.wsgi:app
import eventlet

# PRECISA ser o primeiro comando do arquivo
eventlet.monkey_patch()

from messenger.main import create_app  # noqa: E402
from messenger.infrastructure.realtime.socketio_server import socketio  # noqa: E402

app = create_app()

if __name__ == "__main__":
    # execução direta (dev)
    socketio.run(app, host="0.0.0.0", port=5000, debug=True)
