from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/health')
def health():
    return jsonify({'status': 'ok'})


@main.route('/api/status')
def status():
    """Live room, queue and connection counts."""
    return jsonify(current_app.extensions['pong'].stats())
