"""
main.py — launcher: quiz server (uvicorn) plus the Streamlit topic browser

    python main.py                 both, browser opens on the topic list
    python main.py --quiz-only     quiz server only, browser opens on its index
    python main.py --no-browser
"""

import argparse
import logging
import os
import socket
import subprocess
import sys
import threading
import time
import webbrowser

_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT, LOG_FILE

logger = logging.getLogger(__name__)

STREAMLIT_PORT = 8501


class DummyStream:
    """Stand-in for stdout/stderr in windowed builds where they are None."""
    def write(self, data): pass
    def flush(self): pass
    def isatty(self): return False
    def close(self): pass


def setup_logging() -> None:
    if sys.stdout is None: sys.stdout = DummyStream()
    if sys.stderr is None: sys.stderr = DummyStream()

    fmt = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    try:
        logging.basicConfig(
            level=logging.INFO,
            format=fmt,
            handlers=[
                logging.FileHandler(LOG_FILE, encoding='utf-8'),
                logging.StreamHandler(sys.stdout),
            ],
        )
    except PermissionError:
        # log file held by another process
        logging.basicConfig(level=logging.INFO, format=fmt)


def _port_is_free(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((DEFAULT_HOST, port))
        except OSError:
            return False
        return True


def _pick_port(preferred: int) -> int:
    if _port_is_free(preferred):
        return preferred
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        port = s.getsockname()[1]
    logger.warning(f"port {preferred} is busy, using {port}")
    return port


def _wait_for_port(port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False


def _run_quiz_server(port: int) -> None:
    import uvicorn
    from api.app import create_app

    try:
        uvicorn.run(create_app(), host=DEFAULT_HOST, port=port, log_level="warning")
    except Exception:
        logger.exception("quiz server stopped with an error")


def _spawn_browser_app(quiz_url: str) -> subprocess.Popen:
    """`streamlit run streamlit_app.py` with the quiz server address in its environment."""
    env = dict(os.environ, QUIZ_BASE_URL=quiz_url)
    cmd = [
        sys.executable, "-m", "streamlit", "run", os.path.join(BASE_DIR, "streamlit_app.py"),
        "--server.address", DEFAULT_HOST,
        "--server.port", str(STREAMLIT_PORT),
        "--server.headless", "true",
    ]
    logger.info(f"starting topic browser: {' '.join(cmd)}")
    return subprocess.Popen(cmd, env=env, cwd=BASE_DIR)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Interview Prep launcher")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="quiz server port")
    parser.add_argument("--quiz-only", action="store_true", help="do not start the Streamlit browser")
    parser.add_argument("--no-browser", action="store_true", help="do not open a browser window")
    args = parser.parse_args(argv)

    setup_logging()
    logger.info("=== Interview Prep started ===")
    os.chdir(BASE_DIR)

    port = _pick_port(args.port)
    quiz_url = f"http://{DEFAULT_HOST}:{port}"
    threading.Thread(target=_run_quiz_server, args=(port,), name="quiz-server", daemon=True).start()

    if not _wait_for_port(port):
        logger.error(f"quiz server did not come up on port {port} within {DEFAULT_TIMEOUT:.0f}s")
        return 1
    logger.info(f"quiz server ready at {quiz_url}")

    browser_app = None
    open_url = quiz_url
    if not args.quiz_only:
        browser_app = _spawn_browser_app(quiz_url)
        open_url = f"http://{DEFAULT_HOST}:{STREAMLIT_PORT}"
        if not _wait_for_port(STREAMLIT_PORT):
            logger.warning("topic browser is slow to start; opening it anyway")

    if not args.no_browser:
        webbrowser.open(open_url)

    try:
        while browser_app is None or browser_app.poll() is None:
            time.sleep(1)
        logger.info("topic browser exited")
    except KeyboardInterrupt:
        logger.info("stopped by user")
    finally:
        if browser_app is not None and browser_app.poll() is None:
            browser_app.terminate()
    return 0


if __name__ == "__main__":
    sys.exit(main())
