"""
HackSwipe - Web API

A small Flask JSON API over one SwipeSession. The browser front end
renders the current card and sends swipes, key presses and auth events
here; every mutation goes through the session controller.

Run with: python -m web.app
"""

import atexit
import logging
import threading
from typing import Optional

from flask import Flask, current_app, jsonify, request

from hackswipe.config import (
    DEBUG,
    LOG_FORMAT,
    LOG_LEVEL,
    PROJECTS_PATH,
    SHUFFLE_SEED,
)
from hackswipe.corpus import load_corpus
from hackswipe.models import ProjectRecord
from hackswipe.observability import setup_logging
from hackswipe.session import SwipeDirection, SwipeSession
from hackswipe.storage import get_session_store

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Arrow keys the card view listens to
KEY_DIRECTIONS = {
    "ArrowRight": SwipeDirection.LIKE,
    "ArrowUp": SwipeDirection.LIKE,
    "ArrowLeft": SwipeDirection.PASS,
    "ArrowDown": SwipeDirection.PASS,
}

_session: Optional[SwipeSession] = None
_session_lock = threading.Lock()


def get_session() -> SwipeSession:
    """Get the app's swipe session, creating it from the corpus on first use."""
    global _session
    
    configured = current_app.config.get("SWIPE_SESSION")
    if configured is not None:
        return configured
    
    with _session_lock:
        if _session is None:
            corpus = load_corpus(PROJECTS_PATH)
            _session = SwipeSession(corpus, store=get_session_store(), seed=SHUFFLE_SEED)
            atexit.register(_session.flush)
        return _session


def direction_for_key(key: str) -> Optional[SwipeDirection]:
    """Map a keyboard key name to a swipe direction (None if unbound)."""
    return KEY_DIRECTIONS.get(key)


def project_to_json(project: Optional[ProjectRecord]) -> Optional[dict]:
    """Corpus fields plus the values the card view needs."""
    if project is None:
        return None
    data = project.to_dict()
    data["techTags"] = project.tech_tags
    data["videoId"] = project.video_id
    data["embedUrl"] = project.embed_url
    return data


def session_to_json(session: SwipeSession) -> dict:
    return {
        "status": session.status.value,
        "current_index": session.current_index,
        "project": project_to_json(session.current_project),
        "stats": session.stats(),
        "signed_in": session.identity is not None,
        "saving": session.is_saving,
    }


@app.route("/api/session")
def api_session():
    """Current card, counters and sign-in state."""
    return jsonify(session_to_json(get_session()))


@app.route("/api/swipe", methods=["POST"])
def api_swipe():
    """Like or pass the current project."""
    data = request.get_json(silent=True) or {}
    
    if "key" in data:
        direction = direction_for_key(data["key"])
        if direction is None:
            return jsonify({"error": f"Unbound key: {data['key']}"}), 400
    else:
        try:
            direction = SwipeDirection.parse(data.get("direction"))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
    
    session = get_session()
    accepted = session.swipe(direction)
    
    response = session_to_json(session)
    response["accepted"] = accepted
    response["direction"] = direction.value
    return jsonify(response)


@app.route("/api/reset", methods=["POST"])
def api_reset():
    """Clear progress and start over."""
    session = get_session()
    result = session.reset()
    
    response = session_to_json(session)
    response["saved"] = result.success if result is not None else None
    return jsonify(response)


@app.route("/api/login", methods=["POST"])
def api_login():
    """Attach an identity resolved by the auth provider and restore its progress."""
    data = request.get_json(silent=True) or {}
    user_id = str(data.get("user_id") or "").strip()
    
    if not user_id:
        return jsonify({"error": "user_id is required"}), 400
    
    session = get_session()
    restored = session.login(user_id)
    
    response = session_to_json(session)
    response["restored"] = restored
    return jsonify(response)


@app.route("/api/logout", methods=["POST"])
def api_logout():
    """Drop the identity and return to an empty local session."""
    session = get_session()
    session.logout()
    return jsonify(session_to_json(session))


@app.route("/api/liked")
def api_liked():
    """Projects swiped right, in order."""
    liked = get_session().liked
    return jsonify({
        "count": len(liked),
        "projects": [project_to_json(p) for p in liked],
    })


@app.route("/api/history")
def api_history():
    """Every decision, in order."""
    history = get_session().history
    return jsonify({
        "count": len(history),
        "entries": [
            {"index": i, "liked": entry.liked, "project": project_to_json(entry.project)}
            for i, entry in enumerate(history)
        ],
    })


@app.route("/api/history/<int:index>")
def api_history_entry(index: int):
    """One past decision, for viewing the project again."""
    entry = get_session().history_entry(index)
    if entry is None:
        return jsonify({"error": f"No history entry {index}"}), 404
    return jsonify({
        "index": index,
        "liked": entry.liked,
        "project": project_to_json(entry.project),
    })


if __name__ == "__main__":
    setup_logging(LOG_LEVEL, LOG_FORMAT)
    print("=" * 50)
    print("HackSwipe API")
    print("=" * 50)
    print("Listening on http://localhost:5001")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=DEBUG, port=5001)
