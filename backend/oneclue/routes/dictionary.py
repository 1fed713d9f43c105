from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("dictionary", __name__)


@bp.get("/dictionary")
def get_dictionary():
    service = current_app.extensions["oneclue"]
    return jsonify(service.dictionary)
