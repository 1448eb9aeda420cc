"""
Health check.
"""
from flask import Blueprint, jsonify

bp = Blueprint('health', __name__)


@bp.route('/health')
def health_check():
    """Health check endpoint for the load balancer."""
    return jsonify({"status": "healthy"}), 200
