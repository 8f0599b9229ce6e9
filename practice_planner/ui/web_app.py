"""
Web application module for the Practice Planner.

This module contains the Flask web server that provides the JSON API
endpoints for scheduling practices, editing their activities and
following a practice live.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request
from loguru import logger

from ..models import Activity, PeriodTemplate, PracticeInstance, ScheduleSpec
from ..services import (
    EditScope, PracticeChanges, PracticeNotFoundError, ScopeDecision,
    SeriesOperationError, ServiceFactory
)
from ..services import activity_editor
from ..utils import DEFAULT_HOST, DEFAULT_PORT, fmt_duration, fmt_time_range, parse_datetime

PROPAGATE_SCOPE = "propagate"


class WebAppState:
    """
    State holder for the web application.

    Builds every service through the service factory so that the API
    handlers share one store, expander, timeline builder and validator.
    """

    def __init__(self, data_file: Optional[str] = None):
        self.service_factory = ServiceFactory(data_file=data_file)

        services = self.service_factory.create_complete_service_suite()
        self.store = services['store']
        self.expander = services['expander']
        self.timeline = services['timeline']
        self.validator = services['validator']
        self.coordinator = services['coordinator']


def _practice_payload(practice: PracticeInstance) -> Dict[str, Any]:
    data = practice.to_dict()
    data["display"] = fmt_time_range(practice.start_time, practice.end_time, practice.duration)
    data["duration_display"] = fmt_duration(practice.duration)
    return data


def _parse_activities(raw: Optional[List[Dict[str, Any]]]) -> Optional[List[Activity]]:
    if raw is None:
        return None
    return [Activity.from_dict(item) for item in raw]


def _parse_tags(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise ValueError("tags must be a list of strings")
    return value


def _parse_scope(value: Optional[str]) -> Optional[EditScope]:
    if not value:
        return None
    return EditScope(value)


def _parse_date_arg(name: str) -> Optional[date]:
    value = request.args.get(name)
    return date.fromisoformat(value) if value else None


def create_app(data_file: Optional[str] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        data_file: JSON file backing the practice store (in memory if None)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = WebAppState(data_file=data_file)
    app.config["APP_STATE"] = app_state

    # ==================== Helpers ==================== #

    def _load_practice(practice_id: str) -> PracticeInstance:
        return app_state.store.get_instance(practice_id)

    def _not_found(error: PracticeNotFoundError):
        return jsonify({"success": False, "error": str(error)}), 404

    def _series_failure(error: SeriesOperationError):
        return jsonify({
            "success": False,
            "error": str(error),
            "completed_ids": error.completed_ids,
            "failed_id": error.failed_id,
        }), 500

    def _scope_info(practice: PracticeInstance) -> Tuple[int, ScopeDecision]:
        count = app_state.coordinator.sibling_count(practice)
        return count, app_state.coordinator.resolve_scope(practice, count)

    def _save_activities(practice: PracticeInstance, activities: List[Activity]) -> PracticeInstance:
        return app_state.coordinator.edit_scope(
            practice, EditScope.THIS_ONLY, PracticeChanges(activities=activities)
        )

    # ==================== Scheduling ==================== #

    @app.route("/api/schedule/preview", methods=["POST"])
    def preview_schedule():
        """Validate a schedule and report how many practices it would create."""
        try:
            spec = ScheduleSpec.from_dict(request.get_json() or {})
            errors = app_state.validator.validate(spec)
            preview = app_state.expander.preview(spec)
            return jsonify({
                "success": not errors,
                "errors": errors,
                "count": preview["count"],
                "dates": preview["dates"],
            })
        except (KeyError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid schedule: {e}"}), 400
        except Exception as e:
            logger.exception("Schedule preview failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices", methods=["POST"])
    def create_practices():
        """Create one practice or a recurring series from a schedule."""
        try:
            data = request.get_json() or {}
            spec = ScheduleSpec.from_dict(data.get("schedule") or {})
            periods = [PeriodTemplate.from_dict(p) for p in data.get("activities", [])]
            activities = [p.instantiate() for p in periods]

            errors = app_state.validator.validate(spec)
            errors.update(app_state.validator.validate_activities(activities))
            if errors:
                return jsonify({"success": False, "errors": errors}), 400

            kwargs = {"color": data["color"]} if data.get("color") else {}
            practices = app_state.coordinator.schedule(spec, activities, **kwargs)
            count = len(practices)
            return jsonify({
                "success": True,
                "message": f"{count} practice{'s' if count != 1 else ''} created",
                "count": count,
                "series_id": practices[0].series_id if practices else None,
                "practices": [_practice_payload(p) for p in practices],
            }), 201
        except (KeyError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid request: {e}"}), 400
        except SeriesOperationError as e:
            return _series_failure(e)
        except Exception as e:
            logger.exception("Practice creation failed")
            return jsonify({"success": False, "error": str(e)}), 500

    # ==================== Practices ==================== #

    @app.route("/api/practices", methods=["GET"])
    def list_practices():
        """List practices, optionally within a start/end date window."""
        try:
            practices = app_state.store.list_instances(
                start=_parse_date_arg("start"), end=_parse_date_arg("end")
            )
            return jsonify({
                "success": True,
                "practices": [_practice_payload(p) for p in practices],
            })
        except ValueError as e:
            return jsonify({"success": False, "error": f"Invalid date: {e}"}), 400
        except Exception as e:
            logger.exception("Listing practices failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>", methods=["GET"])
    def get_practice(practice_id: str):
        """Get one practice with its timed activities."""
        try:
            return jsonify({"success": True, "practice": _practice_payload(_load_practice(practice_id))})
        except PracticeNotFoundError as e:
            return _not_found(e)
        except Exception as e:
            logger.exception("Loading practice failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>/scope", methods=["GET"])
    def get_practice_scope(practice_id: str):
        """Tell the client whether an edit/delete needs a this-only/all choice."""
        try:
            practice = _load_practice(practice_id)
            count, decision = _scope_info(practice)
            return jsonify({
                "success": True,
                "series_id": practice.series_id,
                "sibling_count": count,
                "decision": decision.value,
            })
        except PracticeNotFoundError as e:
            return _not_found(e)
        except Exception as e:
            logger.exception("Scope lookup failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>", methods=["PUT"])
    def update_practice(practice_id: str):
        """Edit a practice's start time, activities, tags or colour."""
        try:
            practice = _load_practice(practice_id)
            data = request.get_json() or {}

            activities = _parse_activities(data.get("activities"))
            if activities is not None:
                errors = app_state.validator.validate_activities(activities)
                if errors:
                    return jsonify({"success": False, "errors": errors}), 400

            changes = PracticeChanges(
                start_time=parse_datetime(data["start_time"]) if data.get("start_time") else None,
                activities=activities,
                tags=_parse_tags(data.get("tags")),
                color=data.get("color"),
            )

            raw_scope = data.get("scope")
            if raw_scope == PROPAGATE_SCOPE:
                updated = app_state.coordinator.propagate_to_series(practice, changes)
                return jsonify({
                    "success": True,
                    "practices": [_practice_payload(p) for p in updated],
                })

            count, decision = _scope_info(practice)
            scope = _parse_scope(raw_scope)
            if scope is None:
                if decision is ScopeDecision.REQUIRES_CHOICE:
                    return jsonify({
                        "success": False,
                        "error": "This practice is part of a series; choose a scope",
                        "requires_choice": True,
                        "sibling_count": count,
                    }), 409
                scope = EditScope.THIS_ONLY

            updated = app_state.coordinator.edit_scope(practice, scope, changes)
            return jsonify({"success": True, "practice": _practice_payload(updated)})
        except PracticeNotFoundError as e:
            return _not_found(e)
        except SeriesOperationError as e:
            return _series_failure(e)
        except (KeyError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid request: {e}"}), 400
        except Exception as e:
            logger.exception("Practice update failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>", methods=["DELETE"])
    def delete_practice(practice_id: str):
        """Delete a practice, or its whole series with ``?scope=all_in_series``."""
        try:
            practice = _load_practice(practice_id)
            count, decision = _scope_info(practice)
            scope = _parse_scope(request.args.get("scope"))
            if scope is None:
                if decision is ScopeDecision.REQUIRES_CHOICE:
                    return jsonify({
                        "success": False,
                        "error": "This practice is part of a series; choose a scope",
                        "requires_choice": True,
                        "sibling_count": count,
                    }), 409
                scope = EditScope.THIS_ONLY

            deleted = app_state.coordinator.delete_scope(practice, scope)
            return jsonify({
                "success": True,
                "message": f"Deleted {len(deleted)} practice{'s' if len(deleted) != 1 else ''}",
                "deleted_ids": deleted,
            })
        except PracticeNotFoundError as e:
            return _not_found(e)
        except SeriesOperationError as e:
            return _series_failure(e)
        except ValueError as e:
            return jsonify({"success": False, "error": f"Invalid scope: {e}"}), 400
        except Exception as e:
            logger.exception("Practice delete failed")
            return jsonify({"success": False, "error": str(e)}), 500

    # ==================== Activities ==================== #

    @app.route("/api/practices/<practice_id>/activities", methods=["POST"])
    def add_activities(practice_id: str):
        """Append periods from the library to a practice."""
        try:
            practice = _load_practice(practice_id)
            data = request.get_json() or {}
            periods = [PeriodTemplate.from_dict(p) for p in data.get("periods", [])]
            for period in periods:
                period.duration = activity_editor.clamp_duration(period.duration)

            new_activities = [p.instantiate() for p in periods]
            errors = app_state.validator.validate_activities(new_activities)
            if errors:
                return jsonify({"success": False, "errors": errors}), 400

            activities = activity_editor.add_activities(practice.activities, new_activities)
            updated = _save_activities(practice, activities)
            return jsonify({"success": True, "practice": _practice_payload(updated)})
        except PracticeNotFoundError as e:
            return _not_found(e)
        except (KeyError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid period: {e}"}), 400
        except Exception as e:
            logger.exception("Adding activities failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>/activities/move", methods=["POST"])
    def move_activity(practice_id: str):
        """Reorder one activity after a drag and drop."""
        try:
            practice = _load_practice(practice_id)
            data = request.get_json() or {}
            from_index = int(data["from_index"])
            to_index = int(data["to_index"])
            if not (0 <= from_index < len(practice.activities) and 0 <= to_index < len(practice.activities)):
                return jsonify({"success": False, "error": "Activity index out of range"}), 400

            activities = activity_editor.move_activity(practice.activities, from_index, to_index)
            updated = _save_activities(practice, activities)
            return jsonify({"success": True, "practice": _practice_payload(updated)})
        except PracticeNotFoundError as e:
            return _not_found(e)
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid move: {e}"}), 400
        except Exception as e:
            logger.exception("Moving activity failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>/activities/<activity_id>", methods=["PATCH"])
    def edit_activity(practice_id: str, activity_id: str):
        """Save the activity edit form (name, duration, notes)."""
        try:
            practice = _load_practice(practice_id)
            if activity_editor.find_activity(practice.activities, activity_id) is None:
                return jsonify({"success": False, "error": "Activity not found"}), 404

            data = request.get_json() or {}
            activities = activity_editor.update_activity(
                practice.activities,
                activity_id,
                name=data.get("name"),
                duration=data.get("duration"),
                notes=data.get("notes"),
            )
            updated = _save_activities(practice, activities)
            return jsonify({"success": True, "practice": _practice_payload(updated)})
        except PracticeNotFoundError as e:
            return _not_found(e)
        except Exception as e:
            logger.exception("Editing activity failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/practices/<practice_id>/activities/<activity_id>", methods=["DELETE"])
    def delete_activity(practice_id: str, activity_id: str):
        """Remove one activity from a practice."""
        try:
            practice = _load_practice(practice_id)
            index = activity_editor.find_activity(practice.activities, activity_id)
            if index is None:
                return jsonify({"success": False, "error": "Activity not found"}), 404

            activities = activity_editor.remove_activity(practice.activities, index)
            updated = _save_activities(practice, activities)
            return jsonify({"success": True, "practice": _practice_payload(updated)})
        except PracticeNotFoundError as e:
            return _not_found(e)
        except Exception as e:
            logger.exception("Removing activity failed")
            return jsonify({"success": False, "error": str(e)}), 500

    # ==================== Live session ==================== #

    @app.route("/api/practices/<practice_id>/session", methods=["GET"])
    def get_session(practice_id: str):
        """Report the running activity and countdown for a practice."""
        try:
            practice = _load_practice(practice_id)
            at = request.args.get("at")
            moment = parse_datetime(at) if at else None

            session = app_state.service_factory.create_session_service(practice)
            state = session.get_session_state(moment)
            current = session.get_current_activity(moment)
            upcoming = session.get_next_activity(moment)
            return jsonify({
                "success": True,
                "session": state.to_dict(),
                "current_activity": current.to_dict() if current else None,
                "next_activity": upcoming.to_dict() if upcoming else None,
                "remaining_seconds": session.get_remaining_seconds(moment),
            })
        except PracticeNotFoundError as e:
            return _not_found(e)
        except ValueError as e:
            return jsonify({"success": False, "error": f"Invalid time: {e}"}), 400
        except Exception as e:
            logger.exception("Session lookup failed")
            return jsonify({"success": False, "error": str(e)}), 500

    return app


def run_web_app(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    data_file: Optional[str] = None,
) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        data_file: JSON file the practices are stored in
    """
    app = create_app(data_file=data_file)
    logger.info("Starting web server", host=host, port=port, data_file=data_file)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    run_web_app()
