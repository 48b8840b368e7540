from flask import Blueprint, jsonify

from ..auth import require_admin
from ..extensions import db
from ..models import Settings
from ..schemas import SettingsOut, SettingsUpdate, changes, dump, load

settings_bp = Blueprint('settings', __name__)
settings_bp.before_request(require_admin)


@settings_bp.get('')
def get_settings():
    s = Settings.current()
    db.session.commit()
    return jsonify(dump(SettingsOut, s))


@settings_bp.post('')
def update_settings():
    values = changes(load(SettingsUpdate))
    s = Settings.current()
    for attr, value in values.items():
        setattr(s, attr, value)
    db.session.commit()
    return jsonify(dump(SettingsOut, s))
